"""
Quiz session state machine

Owns the shuffled question order, the current position, running stats
and the answer mode. All transitions are synchronous; the only async
step is loading the question bank in start().

Lifecycle:
    LOADING -> IN_QUESTION -> (AWAITING_SELF_ASSESSMENT ->) ANSWERED
            -> IN_QUESTION (next question) ... -> COMPLETE
A failed load ends in FAILED.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union

from .checkpoint import Checkpoint, CheckpointStore
from .errors import ConfigError, LoadError, SessionError, ValidationError
from .loader import QuestionStore
from .quiz.schema import Question, Letter, QuizMode, Feedback, SessionStats
from .quiz.evaluator import correct_letter, option_text, parse_letter, fuzzy_match
from .quiz.shuffle import shuffle
from .config import Config, config


logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    """Where the session is in its lifecycle."""
    LOADING = "loading"
    IN_QUESTION = "in_question"
    AWAITING_SELF_ASSESSMENT = "awaiting_self_assessment"
    ANSWERED = "answered"
    COMPLETE = "complete"
    FAILED = "failed"


# =============================================================================
# INTENTS
# =============================================================================

@dataclass(frozen=True)
class Submitted:
    """User picked a multiple-choice letter."""
    letter: Union[str, Letter]


@dataclass(frozen=True)
class FreeTextSubmitted:
    """User typed a free-text answer."""
    text: str


@dataclass(frozen=True)
class SelfAssessed:
    """User judged their own free-text answer."""
    is_correct: bool


@dataclass(frozen=True)
class Advanced:
    """User moved on to the next question."""
    pass


@dataclass(frozen=True)
class ModeToggled:
    """User switched between multiple choice and free text."""
    pass


@dataclass(frozen=True)
class Restarted:
    """User asked for a fresh shuffle."""
    pass


Intent = Union[Submitted, FreeTextSubmitted, SelfAssessed, Advanced, ModeToggled, Restarted]


def _configured_mode(settings: Config) -> QuizMode:
    value = settings.grading.default_mode
    try:
        return QuizMode(value)
    except ValueError:
        choices = ", ".join(m.value for m in QuizMode)
        raise ConfigError(
            f"Unknown QUIZ_DEFAULT_MODE {value!r} (expected one of: {choices})"
        ) from None


class QuizSession:
    """
    A single user's pass through the question bank.

    The presentation layer reads current_question, feedback and stats,
    and calls the transition methods (or dispatch() with an intent).
    Calls that don't apply to the current status are ignored.
    """

    def __init__(
        self,
        checkpoints: Optional[CheckpointStore] = None,
        rng: Optional[random.Random] = None,
        fuzzy_grading: Optional[bool] = None,
        mode: Optional[QuizMode] = None,
        settings: Optional[Config] = None,
    ):
        """
        Initialize session.

        Args:
            checkpoints: Where progress is saved (None disables saving)
            rng: Random source for shuffling (seed it for a fixed order)
            fuzzy_grading: Grade free text automatically (defaults to config)
            mode: Starting answer mode (defaults to config)
            settings: Config to read defaults from (defaults to the global config)

        Raises:
            ConfigError: If the configured default mode is unknown
        """
        settings = settings or config
        self.checkpoints = checkpoints
        self.rng = rng
        if fuzzy_grading is None:
            fuzzy_grading = settings.grading.fuzzy_free_text
        self.fuzzy_grading = fuzzy_grading

        self.status = SessionStatus.LOADING
        self.ordered_questions: list[Question] = []
        self.position = 0
        self.stats = SessionStats()
        self.mode = mode or _configured_mode(settings)
        self.answered_current = False
        self.feedback: Optional[Feedback] = None
        self.pending_answer: Optional[str] = None
        self.pending_letter: Optional[Letter] = None
        self.restored_from_checkpoint = False
        self.error: Optional[str] = None

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def total(self) -> int:
        return len(self.ordered_questions)

    @property
    def is_complete(self) -> bool:
        return self.status == SessionStatus.COMPLETE

    @property
    def current_question(self) -> Optional[Question]:
        """Question being shown, or None before load and after the end."""
        if 0 <= self.position < self.total:
            return self.ordered_questions[self.position]
        return None

    @property
    def progress(self) -> tuple[int, int]:
        """(1-based question number, total questions)."""
        return (min(self.position + 1, self.total), self.total)

    @property
    def accuracy(self) -> int:
        return self.stats.accuracy

    # -------------------------------------------------------------------------
    # Startup
    # -------------------------------------------------------------------------

    async def start(self, store: QuestionStore) -> "QuizSession":
        """
        Resume from a checkpoint, or load and shuffle the question bank.

        Raises:
            LoadError: If there is no checkpoint and loading fails
        """
        checkpoint = self.checkpoints.load() if self.checkpoints else None
        if checkpoint and checkpoint.ordered_questions:
            self.restore(checkpoint)
            return self

        try:
            questions = await store.load()
        except LoadError as e:
            self.status = SessionStatus.FAILED
            self.error = str(e)
            logger.error(f"Error loading questions: {e}")
            raise

        self.begin(questions)
        return self

    def begin(self, questions: Sequence[Question]):
        """Start a fresh pass over already-loaded questions."""
        if not questions:
            raise SessionError("Cannot start a quiz with no questions")

        self.ordered_questions = shuffle(questions, self.rng)
        self.position = 0
        self.stats = SessionStats()
        self.restored_from_checkpoint = False
        self.error = None
        self._reset_question()
        self._save()

    def restore(self, checkpoint: Checkpoint):
        """Adopt the position, stats and order saved in a checkpoint."""
        if not checkpoint.ordered_questions:
            raise SessionError("Cannot restore a checkpoint with no questions")

        self.ordered_questions = list(checkpoint.ordered_questions)
        self.position = checkpoint.position
        self.stats = SessionStats(attempted=checkpoint.attempted, correct=checkpoint.correct)
        self.mode = checkpoint.mode
        self.restored_from_checkpoint = True
        self.error = None
        logger.info(
            f"Restoring from checkpoint at question {self.position + 1} of {self.total}"
        )

        if self.position >= self.total:
            self.position = self.total
            self._complete()
        else:
            self._reset_question()

    def snapshot(self) -> Checkpoint:
        """Persisted fields of the session."""
        return Checkpoint(
            ordered_questions=list(self.ordered_questions),
            position=self.position,
            attempted=self.stats.attempted,
            correct=self.stats.correct,
            mode=self.mode,
        )

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def submit_multiple_choice(self, letter: Union[str, Letter]) -> Optional[Feedback]:
        """
        Answer the current question with a letter.

        Submitting again before advance() changes nothing and returns the
        existing feedback.

        Raises:
            ValidationError: If the letter names no alternative of this question
            AnswerNotFoundError: If the question data is malformed
        """
        self._require_questions()
        if self.status != SessionStatus.IN_QUESTION:
            return self.feedback

        selected = parse_letter(letter)
        question = self.current_question
        if selected.index >= len(question.alternatives):
            last = Letter.from_index(len(question.alternatives) - 1)
            raise ValidationError(f"Please choose A-{last.value}")
        correct = correct_letter(question)
        is_correct = selected == correct

        self.stats.record(is_correct)
        self.answered_current = True
        self.status = SessionStatus.ANSWERED
        self.feedback = Feedback(
            is_correct=is_correct,
            correct_letter=correct,
            correct_text=option_text(question, correct),
            selected_letter=selected,
        )
        self._save()
        return self.feedback

    def submit_free_text(self, text: str) -> Optional[Feedback]:
        """
        Answer the current question in free text.

        With self-assessment (the default) this only reveals the correct
        answer and waits for confirm_self_assessment(); stats are untouched
        and None is returned. With fuzzy grading the answer is scored at
        once and the feedback returned.

        Raises:
            ValidationError: If the answer is empty
            AnswerNotFoundError: If the question data is malformed
        """
        self._require_questions()
        if self.status != SessionStatus.IN_QUESTION:
            return self.feedback

        answer = (text or "").strip()
        if not answer:
            raise ValidationError("Please enter an answer")

        question = self.current_question
        correct = correct_letter(question)

        if self.fuzzy_grading:
            is_correct = fuzzy_match(question, answer)
            self.pending_answer = answer
            self.pending_letter = correct
            return self._record_free_text(is_correct)

        self.pending_answer = answer
        self.pending_letter = correct
        self.status = SessionStatus.AWAITING_SELF_ASSESSMENT
        return None

    def confirm_self_assessment(self, is_correct: bool) -> Optional[Feedback]:
        """Record the user's own verdict on their free-text answer."""
        self._require_questions()
        if self.status != SessionStatus.AWAITING_SELF_ASSESSMENT:
            return None
        return self._record_free_text(bool(is_correct))

    def advance(self) -> bool:
        """
        Move to the next question. Only allowed once the current one is answered.

        Returns:
            True if the session moved on
        """
        self._require_questions()
        if not self.answered_current:
            return False

        self.position += 1
        if self.position >= self.total:
            self._complete()
            return True

        self._reset_question()
        self._save()
        return True

    def skip_current(self) -> bool:
        """
        Move past the current question without scoring it.

        Used when a question's data can't be graded. Answered questions
        go through advance() instead.

        Returns:
            True if the session moved on
        """
        self._require_questions()
        if self.status not in (SessionStatus.IN_QUESTION, SessionStatus.AWAITING_SELF_ASSESSMENT):
            return False

        logger.warning(f"Skipping question {self.position + 1} of {self.total}")
        self.answered_current = True
        return self.advance()

    def toggle_mode(self) -> bool:
        """
        Switch answer mode and re-present the current question.

        Any answer in progress is discarded; stats and position stay put.
        """
        if self.status in (SessionStatus.LOADING, SessionStatus.FAILED, SessionStatus.COMPLETE):
            return False

        self.mode = self.mode.toggled()
        self._reset_question()
        self._save()
        return True

    def restart(self, questions: Optional[Sequence[Question]] = None):
        """
        Throw away progress and start over with a fresh shuffle.

        Args:
            questions: New question bank (None reuses the current one)
        """
        pool = list(questions) if questions is not None else list(self.ordered_questions)
        if not pool:
            raise SessionError("Cannot restart a quiz with no questions")

        if self.checkpoints:
            self.checkpoints.clear()
        logger.info("Restarting quiz")
        self.begin(pool)

    def dispatch(self, intent: Intent):
        """
        Apply a user intent.

        Returns whatever the matching transition returns.

        Raises:
            TypeError: If the intent type is unknown
        """
        if isinstance(intent, Submitted):
            return self.submit_multiple_choice(intent.letter)
        if isinstance(intent, FreeTextSubmitted):
            return self.submit_free_text(intent.text)
        if isinstance(intent, SelfAssessed):
            return self.confirm_self_assessment(intent.is_correct)
        if isinstance(intent, Advanced):
            return self.advance()
        if isinstance(intent, ModeToggled):
            return self.toggle_mode()
        if isinstance(intent, Restarted):
            return self.restart()
        raise TypeError(f"Unknown intent: {intent!r}")

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require_questions(self):
        if not self.ordered_questions:
            raise SessionError("No questions loaded")

    def _reset_question(self):
        """Clear per-question state and show the current question."""
        self.answered_current = False
        self.feedback = None
        self.pending_answer = None
        self.pending_letter = None
        self.status = SessionStatus.IN_QUESTION

    def _record_free_text(self, is_correct: bool) -> Feedback:
        question = self.current_question
        letter = self.pending_letter or correct_letter(question)

        self.stats.record(is_correct)
        self.answered_current = True
        self.status = SessionStatus.ANSWERED
        self.feedback = Feedback(
            is_correct=is_correct,
            correct_letter=letter,
            correct_text=option_text(question, letter),
            user_answer=self.pending_answer,
        )
        self._save()
        return self.feedback

    def _complete(self):
        self.answered_current = False
        self.feedback = None
        self.pending_answer = None
        self.pending_letter = None
        self.status = SessionStatus.COMPLETE
        logger.info(
            f"Quiz complete: {self.stats.correct}/{self.stats.attempted} correct "
            f"({self.stats.accuracy}%)"
        )
        if self.checkpoints:
            self.checkpoints.clear()

    def _save(self):
        if self.checkpoints and self.status != SessionStatus.COMPLETE:
            self.checkpoints.save(self.snapshot())
