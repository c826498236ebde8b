"""Custom exceptions for EWP CLI."""


class EwpError(Exception):
    """Base exception for project file errors."""
    pass


class DecodeError(EwpError):
    """Exception raised when a project document cannot be decoded."""
    pass


class EncodeError(EwpError):
    """Exception raised when a project model cannot be encoded."""
    pass
