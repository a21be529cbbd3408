"""
Exception classes for the sample tournament system.

Centralized location for all custom exceptions to avoid circular imports.
"""


class TournamentError(Exception):
    """Base exception for all sample tournament errors."""
    pass


class ValidationError(TournamentError):
    """Raised when a sample or tournament state breaks its invariants."""
    pass


class InvalidWinnerError(ValidationError, ValueError):
    """Raised when a winner is recorded that is not part of the current pairing."""
    pass


class ConfigurationError(TournamentError):
    """Base exception for configuration-related errors."""
    pass


class StorageError(TournamentError):
    """Raised when a session file cannot be read or written."""
    pass


class JudgeError(TournamentError):
    """Base exception for all judge-related errors."""
    pass
