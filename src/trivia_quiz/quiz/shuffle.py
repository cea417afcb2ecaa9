"""
Question ordering

Fisher-Yates shuffle over a copy of the question list.
"""

import random
from typing import Optional, Sequence

from .schema import Question


def shuffle(
    questions: Sequence[Question],
    rng: Optional[random.Random] = None,
) -> list[Question]:
    """
    Return a uniformly random permutation of the questions.

    The input is left untouched. Pass a seeded random.Random for a
    reproducible order.
    """
    rng = rng or random
    shuffled = list(questions)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
