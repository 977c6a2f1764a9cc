"""
Exceptions raised by preset reading and writing.
"""


class PresetError(Exception):
    """Base exception for preset operations."""
    pass


class PresetParseError(PresetError):
    """Raised when a document cannot be read as a preset."""
    kind = "ParseError"


class InvalidFormatError(PresetParseError):
    """Raised when a document lacks the structural markers of a Camera Raw preset."""
    kind = "InvalidFormat"


class PresetFileError(PresetError):
    """Raised when a preset file cannot be read or written."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")
