class OcrError(Exception):
    """Raised when text recognition fails."""


class OcrNetworkError(OcrError):
    """Raised when the OCR service call fails due to network/infrastructure issues."""
