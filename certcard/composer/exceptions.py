class CompositionError(Exception):
    """Raised when the output card cannot be composed."""
