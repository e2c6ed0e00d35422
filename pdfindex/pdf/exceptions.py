class PdfExtractionError(Exception):
    """Raised when a PDF cannot be opened or its tags cannot be read."""
