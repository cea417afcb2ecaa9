"""
Quiz schema and data structures

Defines questions, answer letters, input modes and answer feedback.
"""

from dataclasses import dataclass
from typing import Optional
from enum import Enum
import json


class Letter(str, Enum):
    """Positional label for an alternative (A = index 0)."""
    A = "A"
    B = "B"
    C = "C"
    D = "D"

    @property
    def index(self) -> int:
        return "ABCD".index(self.value)

    @classmethod
    def from_index(cls, index: int) -> "Letter":
        if not 0 <= index < len(LETTERS):
            raise ValueError(f"No letter for alternative index {index}")
        return LETTERS[index]


LETTERS = [Letter.A, Letter.B, Letter.C, Letter.D]


class QuizMode(str, Enum):
    """How the user answers the current question."""
    MULTIPLE_CHOICE = "multiple_choice"
    FREE_TEXT = "free_text"

    def toggled(self) -> "QuizMode":
        if self is QuizMode.MULTIPLE_CHOICE:
            return QuizMode.FREE_TEXT
        return QuizMode.MULTIPLE_CHOICE


@dataclass(frozen=True)
class Question:
    """A single trivia question from the question bank."""
    category: str
    difficulty: str
    question: str
    alternatives: tuple[str, ...]
    answer: str
    context: Optional[str] = None

    def to_dict(self) -> dict:
        result = {
            "category": self.category,
            "difficulty": self.difficulty,
            "question": self.question,
            "alternatives": list(self.alternatives),
            "answer": self.answer,
        }
        if self.context is not None:
            result["context"] = self.context
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "Question":
        """
        Build a question from its JSON object form.

        Raises:
            KeyError: If a required field is missing
            TypeError: If a field has the wrong type
        """
        if not isinstance(data, dict):
            raise TypeError(f"Question must be an object, got {type(data).__name__}")

        for name in ("category", "difficulty", "question", "answer"):
            if not isinstance(data[name], str):
                raise TypeError(f"Question field '{name}' must be a string")

        alternatives = data["alternatives"]
        if not isinstance(alternatives, list) or not all(
            isinstance(a, str) for a in alternatives
        ):
            raise TypeError("Question field 'alternatives' must be a list of strings")
        if not 1 <= len(alternatives) <= len(LETTERS):
            raise TypeError(
                f"Question must have between 1 and {len(LETTERS)} alternatives, "
                f"got {len(alternatives)}"
            )

        context = data.get("context")
        if context is not None and not isinstance(context, str):
            raise TypeError("Question field 'context' must be a string")

        return cls(
            category=data["category"],
            difficulty=data["difficulty"],
            question=data["question"],
            alternatives=tuple(alternatives),
            answer=data["answer"],
            context=context,
        )


@dataclass
class Feedback:
    """
    Result of answering the current question.

    Ephemeral: shown until the next advance, never persisted.
    """
    is_correct: bool
    correct_letter: Letter
    correct_text: str
    selected_letter: Optional[Letter] = None
    user_answer: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "is_correct": self.is_correct,
            "correct_letter": self.correct_letter.value,
            "correct_text": self.correct_text,
            "selected_letter": self.selected_letter.value if self.selected_letter else None,
            "user_answer": self.user_answer,
        }


@dataclass
class SessionStats:
    """Running accuracy for a quiz session."""
    attempted: int = 0
    correct: int = 0

    @property
    def accuracy(self) -> int:
        """Percent correct, rounded half-up; 0 before any attempt."""
        if self.attempted <= 0:
            return 0
        # Integer arithmetic so 0.5 always rounds up
        return (200 * self.correct + self.attempted) // (2 * self.attempted)

    def record(self, is_correct: bool):
        """Add one attempt."""
        self.attempted += 1
        if is_correct:
            self.correct += 1

    def to_dict(self) -> dict:
        return {
            "attempted": self.attempted,
            "correct": self.correct,
            "accuracy": self.accuracy,
        }


def questions_from_json(text: str) -> list[Question]:
    """Parse a JSON array of question objects."""
    data = json.loads(text)
    if not isinstance(data, list):
        raise TypeError(f"Question bank must be a JSON array, got {type(data).__name__}")
    return [Question.from_dict(item) for item in data]
