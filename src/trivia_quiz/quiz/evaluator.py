"""
Answer evaluation

Resolves which letter is correct for a question and grades answers.
Free-text answers are self-assessed by default; fuzzy_match is the
alternate automatic grader enabled through config.grading.fuzzy_free_text.
"""

import re
from typing import Union

from ..errors import AnswerNotFoundError, ValidationError
from .schema import Question, Letter, LETTERS


_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def _fold(text: str) -> str:
    return text.strip().casefold()


def correct_letter(question: Question) -> Letter:
    """
    Find the letter of the alternative matching the question's answer.

    Comparison ignores case and surrounding whitespace. The first
    matching alternative wins.

    Raises:
        AnswerNotFoundError: If no alternative matches the answer
    """
    target = _fold(question.answer)
    for index, alternative in enumerate(question.alternatives):
        if _fold(alternative) == target:
            return LETTERS[index]
    raise AnswerNotFoundError(question.question, question.answer)


def option_text(question: Question, letter: Letter) -> str:
    """Text of the alternative at a letter, or "" if there is none."""
    index = letter.index
    if index < len(question.alternatives):
        return question.alternatives[index]
    return ""


def parse_letter(value: Union[str, Letter]) -> Letter:
    """Accept a Letter or a case-insensitive letter string."""
    if isinstance(value, Letter):
        return value
    try:
        return Letter(str(value).strip().upper())
    except ValueError:
        raise ValidationError(f"Unknown answer letter: {value!r}")


def is_multiple_choice_correct(question: Question, selected: Union[str, Letter]) -> bool:
    """Whether the selected letter is the correct one."""
    return parse_letter(selected) == correct_letter(question)


def validate_question(question: Question) -> None:
    """Raise AnswerNotFoundError if the question's answer is unusable."""
    correct_letter(question)


def normalize_answer_text(text: str) -> str:
    """Lowercase, trim, drop punctuation and collapse whitespace."""
    text = _PUNCTUATION.sub("", text.lower().strip())
    return _WHITESPACE.sub(" ", text).strip()


def _loosely_equal(a: str, b: str) -> bool:
    return a == b or a in b or b in a


def fuzzy_match(question: Question, user_answer: str) -> bool:
    """
    Automatically grade a free-text answer.

    Accepts an exact or substring match (either direction) against the
    correct alternative. Otherwise the first alternative that loosely
    matches decides: the answer is correct only if that alternative is
    the correct one.

    Raises:
        AnswerNotFoundError: If the question has no matching alternative
    """
    user = normalize_answer_text(user_answer)
    if not user:
        return False

    correct = normalize_answer_text(option_text(question, correct_letter(question)))
    if correct and _loosely_equal(user, correct):
        return True

    for alternative in question.alternatives:
        normalized = normalize_answer_text(alternative)
        if normalized and _loosely_equal(user, normalized):
            return normalized == correct

    return False
