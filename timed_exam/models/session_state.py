"""
models/session_state.py

Runtime state of one attempt at one exam.
Pydantic BaseModel based so the API can serialize snapshots directly.
No UI code and no transition logic; ``services/exam_service.py`` owns the
state machine that mutates it.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from timed_exam.models.question_model import Question


class SessionPhase(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    ANSWERING = "answering"
    SHOWING_FEEDBACK = "showing_feedback"
    COMPLETE = "complete"


class AnswerRecord(BaseModel):
    """One answered question. Never mutated after it is appended."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    selected: str
    correct: str
    is_correct: bool


class ExamState(BaseModel):
    """
    Full state of an exam session.

    Attributes:
        exam_id:                  Identifier the questions were loaded for.
        title:                    Display title ("Exam: <id>").
        phase:                    Current state machine phase.
        error_message:            Load failure message, only set in the error phase.
        questions:                Questions in presentation order (shuffled).
        current_index:            Pointer into ``questions`` (0-based).
        exam_clock_remaining:     Seconds left on the overall exam clock.
        selected_option:          Option picked for the current question, if any.
        feedback_active:          True while the result of the last answer is shown.
        feedback_clock_remaining: Seconds left before auto-advancing past feedback.
        score:                    Number of correct answers so far.
        answers:                  Append-only answer log.
        session_complete:         Terminal flag; no more answers once set.
    """

    exam_id: str = ""
    title: str = ""
    phase: SessionPhase = SessionPhase.LOADING
    error_message: Optional[str] = None

    questions: List[Question] = Field(default_factory=list)
    current_index: int = Field(default=0, ge=0)
    exam_clock_remaining: int = Field(default=0, ge=0)
    selected_option: Optional[str] = None
    feedback_active: bool = False
    feedback_clock_remaining: int = Field(default=0, ge=0)
    score: int = Field(default=0, ge=0)
    answers: List[AnswerRecord] = Field(default_factory=list)
    session_complete: bool = False

    model_config = {"validate_assignment": True}

    @property
    def current_question(self) -> Optional[Question]:
        if 0 <= self.current_index < len(self.questions):
            return self.questions[self.current_index]
        return None

    @property
    def is_last_question(self) -> bool:
        return self.current_index >= len(self.questions) - 1
