"""
errors.py: Exceptions raised by the game core.
"""


class FlappyError(Exception):
    """Base class for every error the core raises on purpose."""


class InvalidName(FlappyError, ValueError):
    """A leaderboard submission was made with an empty name."""

    def __init__(self, message: str = "Please enter your name to submit your score"):
        super().__init__(message)


class InvalidTransition(FlappyError):
    """An operation was requested in a phase that does not accept it."""

    def __init__(self, operation: str, phase):
        self.operation = operation
        self.phase = phase
        super().__init__(f"'{operation}' is not allowed while {phase.value}")


class PersistenceError(FlappyError):
    """Saving the leaderboard to storage failed."""


class ConfigError(FlappyError, ValueError):
    """A configuration value is missing, unknown or out of range."""
