"""
Standard exit codes for flakenotes commands.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .grammar import ParseError

# Standard POSIX exit codes
GENERAL_ERROR = 1        # General errors

# Application-specific exit codes (64-113 are typically available)
CONFIG_ERROR = 66        # Configuration file error
DATA_ERROR = 70          # Input could not be parsed or rendered
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'UnicodeDecodeError': DATA_ERROR,
    'ValueError': DATA_ERROR,
    'ShortCommitError': DATA_ERROR,
    'ConfigError': CONFIG_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: Exception) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ParseFailedError(CommandError):
    """Raised at the command boundary when the notification cannot be parsed."""
    def __init__(self, message: str, error: Optional['ParseError'] = None):
        super().__init__(message, DATA_ERROR)
        self.error = error


class RenderError(CommandError):
    """Raised when an entry cannot be rendered under the active policy."""
    def __init__(self, message: str):
        super().__init__(message, DATA_ERROR)


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)
