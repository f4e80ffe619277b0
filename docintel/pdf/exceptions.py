class PdfExtractionError(Exception):
    """Raised when the local engine cannot read a PDF's text layer."""
