from .converter import convert
from .errors import ExtractionToolError, MalformedExtractionOutput
from .model import ConversionResult

__all__ = ["convert", "ConversionResult", "ExtractionToolError", "MalformedExtractionOutput"]
