"""Exception types raised by PrettyGraphs."""


class PrettyGraphsError(Exception):
    """Base class for all PrettyGraphs errors."""


class ConfigurationError(PrettyGraphsError, ValueError):
    """Raised when annealing or energy parameters are invalid."""


class GraphFormatError(PrettyGraphsError, ValueError):
    """Raised when graph input is malformed or topologically inconsistent."""

    def __init__(self, message: str, line_number: int = 0):
        self.line_number = line_number
        if line_number:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class SessionStateError(PrettyGraphsError, RuntimeError):
    """Raised when a session is stepped after it has finished."""
