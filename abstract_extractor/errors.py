from typing import Optional


class ExtractionToolError(RuntimeError):
    """The external AST extractor could not be run or exited non-zero."""

    def __init__(self, message: str, stderr: Optional[str] = None) -> None:
        self.stderr = (stderr or "").strip()
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class MalformedExtractionOutput(ExtractionToolError):
    """The external AST extractor printed something that is not the expected JSON."""
