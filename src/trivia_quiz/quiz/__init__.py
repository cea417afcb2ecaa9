"""
Quiz building blocks for trivia-quiz

Question schema, answer evaluation and question ordering.
"""

from .schema import (
    Question,
    Letter,
    LETTERS,
    QuizMode,
    Feedback,
    SessionStats,
    questions_from_json,
)
from .evaluator import (
    correct_letter,
    option_text,
    parse_letter,
    is_multiple_choice_correct,
    validate_question,
    normalize_answer_text,
    fuzzy_match,
)
from .shuffle import shuffle

__all__ = [
    # Schema
    "Question",
    "Letter",
    "LETTERS",
    "QuizMode",
    "Feedback",
    "SessionStats",
    "questions_from_json",
    # Evaluation
    "correct_letter",
    "option_text",
    "parse_letter",
    "is_multiple_choice_correct",
    "validate_question",
    "normalize_answer_text",
    "fuzzy_match",
    # Ordering
    "shuffle",
]
