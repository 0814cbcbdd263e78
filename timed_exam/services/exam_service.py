"""
services/exam_service.py

Exam session state machine and scoring.

    loading ──> error                       (terminal, back to catalog only)
       └──────> answering <──> showing_feedback
                    │               │
                    └──> complete <─┘       (restart -> answering)

No UI code. Randomness, navigation and time are injected so the whole
lifecycle can be driven deterministically.
"""

import logging
import math
from typing import Callable, List, Optional

from config import EXAM_DURATION_SECONDS, FEEDBACK_DURATION_SECONDS
from timed_exam.models.question_model import Question
from timed_exam.models.session_state import AnswerRecord, ExamState, SessionPhase
from timed_exam.services.catalog import CATALOG_ROUTE
from timed_exam.services.clock import CooperativeScheduler, Countdown
from timed_exam.services.question_loader import (
    GENERIC_LOAD_ERROR,
    QuestionLoadFailure,
    QuestionSource,
    fisher_yates_shuffle,
    load_questions,
)

logger = logging.getLogger(__name__)

_ACTIVE_PHASES = (SessionPhase.ANSWERING, SessionPhase.SHOWING_FEEDBACK)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_percentage(score: int, answered: int) -> int:
    """
    Accuracy among the questions actually attempted.

    Unanswered questions are not counted, so this is score / answered and
    not score / total.

    Returns:
        0 ~ 100, rounded half up. 0 when nothing has been answered.
    """
    if answered <= 0:
        return 0
    return round_half_up(score / answered * 100)


def format_time(seconds: int) -> str:
    """Seconds as MM:SS."""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


class ExamSession:
    """
    One attempt at one exam.

    Args:
        exam_id:           Exam identifier, handed to the question source.
        source:            Where the question resource comes from.
        shuffle:           Permutation applied on load and on restart.
        navigate:          Called with a route name by back_to_catalog().
        scheduler:         Timeline the two countdowns tick on.
        exam_duration:     Exam clock length in seconds.
        feedback_duration: Feedback clock length in seconds.
    """

    def __init__(
        self,
        exam_id: str,
        source: QuestionSource,
        shuffle: Callable[[List[Question]], List[Question]] = fisher_yates_shuffle,
        navigate: Optional[Callable[[str], None]] = None,
        scheduler: Optional[CooperativeScheduler] = None,
        exam_duration: int = EXAM_DURATION_SECONDS,
        feedback_duration: int = FEEDBACK_DURATION_SECONDS,
    ):
        self.state = ExamState(exam_id=exam_id, title=f"Exam: {exam_id}")
        self.scheduler = scheduler or CooperativeScheduler()
        self._source = source
        self._shuffle = shuffle
        self._navigate = navigate
        self._disposed = False
        self.load_failure: Optional[QuestionLoadFailure] = None

        self.exam_clock = Countdown(
            exam_duration, self._on_exam_clock_expired, self.scheduler,
            on_tick=self._sync_exam_clock,
        )
        self.feedback_clock = Countdown(
            feedback_duration, self._on_feedback_clock_expired, self.scheduler,
            on_tick=self._sync_feedback_clock,
        )

    # ── derived values ──────────────────────────────────────────────────────

    @property
    def phase(self) -> SessionPhase:
        return self.state.phase

    @property
    def is_active(self) -> bool:
        return self.state.phase in _ACTIVE_PHASES and not self._disposed

    @property
    def percentage(self) -> int:
        return calculate_percentage(self.state.score, len(self.state.answers))

    @property
    def progress(self) -> int:
        total = len(self.state.questions)
        if not total:
            return 0
        return round_half_up((self.state.current_index + 1) / total * 100)

    # ── transitions ─────────────────────────────────────────────────────────

    def load(self) -> ExamState:
        """loading -> answering, or loading -> error on QuestionLoadFailure."""
        self.state.phase = SessionPhase.LOADING
        try:
            questions = load_questions(self.state.exam_id, self._source, self._shuffle)
        except QuestionLoadFailure as e:
            self.load_failure = e
            self.state.phase = SessionPhase.ERROR
            self.state.error_message = e.message or GENERIC_LOAD_ERROR
            logger.warning(f"Exam {self.state.exam_id} failed to load: {self.state.error_message}")
            return self.state

        self._activate(questions)
        return self.state

    def select_option(self, option: str) -> bool:
        """
        answering -> showing_feedback.

        Ignored (returns False) while feedback is already showing, once the
        session is complete, or before it is active.

        Raises:
            ValueError: ``option`` is not one of the current question's options.
        """
        if self._disposed or self.state.phase != SessionPhase.ANSWERING:
            return False
        question = self.state.current_question
        if question is None:
            return False
        if option not in question.options:
            raise ValueError(f"'{option}' is not an option of question {question.id}")

        is_correct = question.is_correct(option)
        self.state.answers.append(AnswerRecord(
            question_id=question.id,
            selected=option,
            correct=question.correct_answer,
            is_correct=is_correct,
        ))
        if is_correct:
            self.state.score += 1
        self.state.selected_option = option
        self.state.feedback_active = True
        self.state.phase = SessionPhase.SHOWING_FEEDBACK
        self.feedback_clock.start()
        self.state.feedback_clock_remaining = self.feedback_clock.remaining
        return True

    def advance(self) -> bool:
        """
        showing_feedback -> answering (next question) or -> complete after the
        last one. Both the "next question" action and feedback clock expiry
        land here.
        """
        if self._disposed or self.state.phase != SessionPhase.SHOWING_FEEDBACK:
            return False
        self.feedback_clock.stop()

        if self.state.is_last_question:
            self._complete("all questions answered")
            return True

        self.state.current_index += 1
        self.state.selected_option = None
        self.state.feedback_active = False
        self.state.feedback_clock_remaining = self.feedback_clock.duration
        self.state.phase = SessionPhase.ANSWERING
        return True

    def end_test(self) -> bool:
        """Any active phase -> complete. No-op once complete."""
        if not self.is_active:
            return False
        self._complete("ended by user")
        return True

    def restart(self) -> ExamState:
        """complete -> answering with the same questions in a fresh order."""
        if self._disposed or self.state.phase != SessionPhase.COMPLETE:
            raise ValueError("Only a completed exam can be restarted.")
        logger.info(f"Restarting exam {self.state.exam_id}")
        self._activate(self._shuffle(list(self.state.questions)))
        return self.state

    def pump(self) -> int:
        """Let the clocks catch up with wall-clock time."""
        if self._disposed:
            return 0
        return self.scheduler.pump()

    def dispose(self) -> None:
        self.exam_clock.stop()
        self.feedback_clock.stop()
        self._disposed = True

    def back_to_catalog(self) -> None:
        self.dispose()
        if self._navigate is not None:
            self._navigate(CATALOG_ROUTE)

    # ── internals ───────────────────────────────────────────────────────────

    def _activate(self, questions: List[Question]) -> None:
        self.exam_clock.stop()
        self.feedback_clock.stop()

        state = self.state
        state.questions = questions
        state.current_index = 0
        state.selected_option = None
        state.feedback_active = False
        state.score = 0
        state.answers = []
        state.session_complete = False
        state.error_message = None
        state.feedback_clock_remaining = self.feedback_clock.duration
        state.exam_clock_remaining = self.exam_clock.duration
        state.phase = SessionPhase.ANSWERING

        # time spent before (re)activation does not count against the new attempt
        self.scheduler.resync()
        self.exam_clock.start()

    def _complete(self, reason: str) -> None:
        self.exam_clock.stop()
        self.feedback_clock.stop()
        self.state.feedback_active = False
        self.state.session_complete = True
        self.state.phase = SessionPhase.COMPLETE
        logger.info(
            f"Exam {self.state.exam_id} complete ({reason}): "
            f"{self.state.score}/{len(self.state.answers)} correct, {self.percentage}%"
        )

    def _sync_exam_clock(self, remaining: int) -> None:
        self.state.exam_clock_remaining = remaining

    def _sync_feedback_clock(self, remaining: int) -> None:
        self.state.feedback_clock_remaining = remaining

    def _on_exam_clock_expired(self) -> None:
        if self.state.phase in _ACTIVE_PHASES:
            self._complete("time expired")

    def _on_feedback_clock_expired(self) -> None:
        self.advance()
