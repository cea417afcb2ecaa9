"""
Exceptions raised by the quiz core

Only LoadError and AnswerNotFoundError are meant to stop a session.
Everything else is recovered locally by the caller.
"""

from typing import Optional


class QuizError(Exception):
    """Base exception for quiz errors."""
    pass


class LoadError(QuizError):
    """Question bank could not be fetched or parsed."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class AnswerNotFoundError(QuizError):
    """A question's answer matches none of its alternatives."""

    def __init__(self, question: str, answer: str):
        super().__init__(
            f'Could not find matching alternative for answer: "{answer}"'
        )
        self.question = question
        self.answer = answer


class ValidationError(QuizError):
    """User input rejected before it reaches the session state."""
    pass


class StorageError(QuizError):
    """Checkpoint storage backend failed."""
    pass


# Name used for persistence failures at the checkpoint boundary
PersistenceError = StorageError


class SessionError(QuizError):
    """Transition requested on a session that has no questions."""
    pass


class ConfigError(QuizError):
    """A configuration value is not one the quiz understands."""
    pass
