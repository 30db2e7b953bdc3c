from typing import Optional


class HamlError(ValueError):
    """Base class for all hamlhtml errors."""


class HamlStructuralError(HamlError):
    """
    Raised when the tag stack is driven into an impossible state.
    Aborts the whole compile; no partial output is returned.
    """

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        self.reason = message
        if line_number is not None:
            message = f"HAML Compile Error (Line {line_number}): {message}"
        else:
            message = f"HAML Compile Error: {message}"
        super().__init__(message)


class HamlConfigError(HamlError):
    """Raised for invalid options or configuration files."""
