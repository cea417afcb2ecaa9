"""
trivia-quiz: multiple-choice and free-text trivia with saved progress.

Loads a static question bank, shuffles it, tracks running accuracy and
checkpoints progress so a quiz can be resumed later.
"""

__version__ = "0.1.0"

from .errors import (
    QuizError,
    LoadError,
    AnswerNotFoundError,
    ValidationError,
    StorageError,
    PersistenceError,
    SessionError,
    ConfigError,
)
from .config import config
from .loader import QuestionStore
from .checkpoint import Checkpoint, CheckpointStore
from .session import (
    QuizSession,
    SessionStatus,
    Submitted,
    FreeTextSubmitted,
    SelfAssessed,
    Advanced,
    ModeToggled,
    Restarted,
)

__all__ = [
    # Errors
    "QuizError",
    "LoadError",
    "AnswerNotFoundError",
    "ValidationError",
    "StorageError",
    "PersistenceError",
    "SessionError",
    "ConfigError",
    # Config
    "config",
    # Loading and persistence
    "QuestionStore",
    "Checkpoint",
    "CheckpointStore",
    # Session
    "QuizSession",
    "SessionStatus",
    "Submitted",
    "FreeTextSubmitted",
    "SelfAssessed",
    "Advanced",
    "ModeToggled",
    "Restarted",
]
