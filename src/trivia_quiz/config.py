"""
trivia-quiz configuration

Question source, checkpoint location and grading behavior live here.
Environment variables override defaults for deployment flexibility.
"""

import os
from dataclasses import dataclass, field
from typing import Literal


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


@dataclass
class SourceConfig:
    """Where the question bank comes from"""
    questions_source: str = os.getenv("QUIZ_QUESTIONS_SOURCE", "quiz_questions.json")
    fetch_timeout_seconds: float = float(os.getenv("QUIZ_FETCH_TIMEOUT", "10.0"))


@dataclass
class CheckpointConfig:
    """Progress persistence"""
    storage_key: str = os.getenv("QUIZ_STORAGE_KEY", "quizCheckpoint")
    directory: str = os.getenv(
        "QUIZ_CHECKPOINT_DIR", os.path.join(os.path.expanduser("~"), ".trivia_quiz")
    )
    backend: Literal["file", "memory"] = os.getenv("QUIZ_STORAGE_BACKEND", "file")
    enabled: bool = _env_flag("QUIZ_SAVE_PROGRESS", "true")


@dataclass
class GradingConfig:
    """Answer grading"""
    # Self-assessment is the default for free text; fuzzy matching is opt-in
    fuzzy_free_text: bool = _env_flag("QUIZ_FUZZY_GRADING", "false")
    default_mode: Literal["multiple_choice", "free_text"] = os.getenv(
        "QUIZ_DEFAULT_MODE", "multiple_choice"
    )


@dataclass
class Config:
    """Master config — import this"""
    source: SourceConfig = field(default_factory=SourceConfig)
    checkpoint: CheckpointConfig = field(default_factory=CheckpointConfig)
    grading: GradingConfig = field(default_factory=GradingConfig)

    # Quick presets
    @classmethod
    def ephemeral(cls) -> "Config":
        """Keep progress in memory only, nothing written to disk"""
        cfg = cls()
        cfg.checkpoint.backend = "memory"
        return cfg

    @classmethod
    def fuzzy(cls) -> "Config":
        """Grade free-text answers automatically instead of asking the user"""
        cfg = cls()
        cfg.grading.fuzzy_free_text = True
        return cfg


# Singleton
config = Config()
