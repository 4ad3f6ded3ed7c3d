class PdfExtractionError(Exception):
    """Raised when text or images cannot be read from a PDF."""
