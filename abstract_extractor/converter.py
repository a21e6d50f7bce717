from __future__ import annotations

import logging
from typing import Optional

from .adapters.base import BaseAdapter
from .adapters.regex_adapter import RegexDartAdapter
from .config import DEFAULT_IMPLEMENTATION_SUFFIX, DEFAULT_INTERFACE_PREFIX
from .generator import generate
from .model import ConversionResult

logger = logging.getLogger(__name__)


def convert(
    source_text: str,
    interface_prefix: str = DEFAULT_INTERFACE_PREFIX,
    implementation_suffix: str = DEFAULT_IMPLEMENTATION_SUFFIX,
    adapter: Optional[BaseAdapter] = None,
) -> Optional[ConversionResult]:
    """
    Convert the first class in `source_text` into an interface plus an
    implementation class.

    Returns None when no class can be found. Only the external-tool
    adapter can raise (ExtractionToolError).
    """
    adapter = adapter or RegexDartAdapter()
    parsed = adapter.extract(source_text or "")
    if parsed is None:
        logger.debug("No class found (%s adapter)", adapter.name)
        return None

    logger.debug(
        "Converting class %s: %d field(s), %d method(s) via %s adapter",
        parsed.name, len(parsed.fields), len(parsed.methods), adapter.name,
    )
    return generate(
        parsed.name,
        interface_prefix,
        implementation_suffix,
        parsed.fields,
        parsed.methods,
        header=parsed.header,
    )
