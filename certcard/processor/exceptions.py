class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class FileReadError(ProcessorError):
    """Raised when an input file cannot be read from disk."""


class OutputWriteError(ProcessorError):
    """Raised when the composed card cannot be written to the output directory."""
