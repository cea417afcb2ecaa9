"""
Checkpoint persistence

Saves quiz progress so a session can resume after a restart. Every
operation is best-effort: failures are logged and the quiz carries on
as if persistence were disabled.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from .errors import StorageError
from .quiz.schema import Question, QuizMode
from .storage.base import StorageBackend
from .config import config


logger = logging.getLogger(__name__)

CHECKPOINT_VERSION = 1


@dataclass
class Checkpoint:
    """Persisted subset of a quiz session."""
    ordered_questions: list[Question]
    position: int = 0
    attempted: int = 0
    correct: int = 0
    mode: QuizMode = QuizMode.MULTIPLE_CHOICE
    saved_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict:
        return {
            "version": CHECKPOINT_VERSION,
            "ordered_questions": [q.to_dict() for q in self.ordered_questions],
            "position": self.position,
            "attempted": self.attempted,
            "correct": self.correct,
            "mode": self.mode.value,
            "saved_at": self.saved_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Checkpoint":
        """
        Rebuild a checkpoint, checking counters are consistent.

        Raises:
            KeyError, TypeError, ValueError: If the data is ill-shaped
        """
        if data.get("version") != CHECKPOINT_VERSION:
            raise ValueError(f"Unsupported checkpoint version: {data.get('version')!r}")

        questions = data["ordered_questions"]
        if not isinstance(questions, list):
            raise TypeError("ordered_questions must be a list")

        counters = {}
        for name in ("position", "attempted", "correct"):
            value = data[name]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer")
            counters[name] = value

        if counters["correct"] > counters["attempted"]:
            raise ValueError("correct cannot exceed attempted")

        return cls(
            ordered_questions=[Question.from_dict(q) for q in questions],
            position=counters["position"],
            attempted=counters["attempted"],
            correct=counters["correct"],
            mode=QuizMode(data["mode"]),
            saved_at=data.get("saved_at", ""),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> "Checkpoint":
        data = json.loads(text)
        if not isinstance(data, dict):
            raise TypeError("Checkpoint must be a JSON object")
        return cls.from_dict(data)


class CheckpointStore:
    """
    Reads and writes the session checkpoint under a fixed key.

    Never raises: save() and clear() report success as a bool, load()
    treats unreadable or corrupt data the same as no checkpoint.
    """

    def __init__(self, storage: StorageBackend, key: Optional[str] = None):
        """
        Initialize checkpoint store.

        Args:
            storage: Backend holding the serialized checkpoint
            key: Storage key (defaults to config)
        """
        self.storage = storage
        self.key = key or config.checkpoint.storage_key

    def save(self, checkpoint: Checkpoint) -> bool:
        """Persist a checkpoint. Returns False if it could not be saved."""
        try:
            payload = checkpoint.to_json()
            self.storage.set(self.key, payload)
        except (StorageError, TypeError, ValueError) as e:
            logger.warning(f"Failed to save quiz state: {e}")
            return False

        logger.debug(
            f"Saved checkpoint at question {checkpoint.position + 1}"
            f"/{len(checkpoint.ordered_questions)}"
        )
        return True

    def load(self) -> Optional[Checkpoint]:
        """Return the saved checkpoint, or None if absent or unusable."""
        try:
            payload = self.storage.get(self.key)
        except StorageError as e:
            logger.warning(f"Failed to load quiz state: {e}")
            return None

        if payload is None:
            return None

        try:
            return Checkpoint.from_json(payload)
        except (KeyError, TypeError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"Ignoring unreadable checkpoint: {e}")
            return None

    def clear(self) -> bool:
        """Remove the checkpoint. Returns False if removal failed."""
        try:
            self.storage.remove(self.key)
        except StorageError as e:
            logger.warning(f"Failed to clear quiz state: {e}")
            return False

        logger.debug("Cleared checkpoint")
        return True
