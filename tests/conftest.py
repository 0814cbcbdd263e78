import pytest

from timed_exam.services.clock import CooperativeScheduler
from timed_exam.services.exam_service import ExamSession
from timed_exam.services.question_loader import QuestionLoadFailure

SCENARIO_QUESTIONS = [
    {"id": "q1", "question": "First?", "description": "About Q1",
     "options": ["A", "B", "C"], "correctAnswer": "B"},
    {"id": "q2", "question": "Second?", "description": "About Q2",
     "options": ["X", "Y"], "correctAnswer": "X"},
    {"id": "q3", "question": "Third?", "description": "About Q3",
     "options": ["1", "2"], "correctAnswer": "2"},
]


class ListSource:
    """Question source returning a fixed payload and counting fetches."""

    def __init__(self, payload):
        self.payload = payload
        self.fetches = 0

    def fetch(self, exam_id):
        self.fetches += 1
        return self.payload


class FailingSource:
    def __init__(self, failure):
        self.failure = failure

    def fetch(self, exam_id):
        raise self.failure


def identity(questions):
    return list(questions)


@pytest.fixture
def scheduler():
    return CooperativeScheduler(clock=lambda: 0.0)


@pytest.fixture
def source():
    return ListSource(SCENARIO_QUESTIONS)


@pytest.fixture
def make_session(scheduler, source):
    def _make(**kwargs):
        kwargs.setdefault("source", source)
        kwargs.setdefault("shuffle", identity)
        kwargs.setdefault("scheduler", scheduler)
        kwargs.setdefault("exam_duration", 1800)
        kwargs.setdefault("feedback_duration", 30)
        exam_id = kwargs.pop("exam_id", "SCENARIO")
        return ExamSession(exam_id, **kwargs)
    return _make


@pytest.fixture
def loaded_session(make_session):
    exam_session = make_session()
    exam_session.load()
    return exam_session


@pytest.fixture
def not_found():
    return FailingSource(QuestionLoadFailure("Failed to load exam: 404", status_code=404))
