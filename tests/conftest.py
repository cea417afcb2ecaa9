"""
Shared fixtures for trivia-quiz tests.
"""

import pytest

from trivia_quiz.quiz.schema import Question


def make_question(
    question: str = "What is the capital of France?",
    alternatives=("Paris", "Lyon", "Nice", "Lille"),
    answer: str = "Paris",
    category: str = "Geography",
    difficulty: str = "easy",
    context=None,
) -> Question:
    """Build a question with sensible defaults."""
    return Question(
        category=category,
        difficulty=difficulty,
        question=question,
        alternatives=tuple(alternatives),
        answer=answer,
        context=context,
    )


@pytest.fixture
def paris_question():
    """Question whose correct answer is A."""
    return make_question()


@pytest.fixture
def four_questions():
    """Four well-formed questions with answers at A, B, C and D."""
    return [
        make_question("Q1?", ("Paris", "Lyon", "Nice", "Lille"), "Paris"),
        make_question("Q2?", ("Red", "Blue", "Green", "Black"), "blue"),
        make_question("Q3?", ("1", "2", "3", "4"), " 3 "),
        make_question("Q4?", ("Mercury", "Venus", "Earth", "Mars"), "MARS"),
    ]


@pytest.fixture
def question_dicts(four_questions):
    """JSON-ready form of four_questions."""
    return [q.to_dict() for q in four_questions]
