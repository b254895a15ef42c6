class PdfReadError(Exception):
    """Raised when a PDF cannot be opened or a page cannot be read."""
