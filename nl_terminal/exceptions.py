"""Custom exceptions for the natural-language terminal."""


class TerminalError(Exception):
    """Base exception class for the natural-language terminal."""
    pass


class APIError(TerminalError):
    """Raised when the Gemini API call fails."""
    pass


class RateLimitError(APIError):
    """Raised when API rate limit is exceeded."""
    pass


class KeychainError(TerminalError):
    """Raised when Keychain access fails."""
    pass


class ConfigError(TerminalError):
    """Raised when configuration file is invalid or cannot be written."""
    pass


class ValidationError(TerminalError):
    """Raised when an input or settings value is invalid."""
    pass


class SessionBusyError(TerminalError):
    """Raised when a command is submitted while another one is still running."""
    pass
