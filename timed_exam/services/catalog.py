"""
services/catalog.py

Static list of available exams. Reference data only; the exam session never
reads it, it only needs the exam id.
"""

from typing import List, Optional

from timed_exam.models.exam_model import Difficulty, ExamDescriptor

CATALOG_ROUTE = "catalog"

_AWARENESS = (
    "Test your awareness of recent national and international events, government "
    "schemes, awards, sports, and economic developments."
)
_CHALLENGE = "Challenge your knowledge with complex questions on current affairs and global issues."

EXAM_LIST: List[ExamDescriptor] = [
    ExamDescriptor(
        id="CA012025", title="January 2025", subject="Current Affairs",
        duration="60 minutes", questions=300, difficulty=Difficulty.EASY,
        description=_AWARENESS,
    ),
    ExamDescriptor(
        id="CA022025", title="February 2025", subject="Current Affairs",
        duration="60 minutes", questions=300, difficulty=Difficulty.HARD,
        description=_CHALLENGE,
    ),
    ExamDescriptor(
        id="CA032025", title="March 2025", subject="Current Affairs",
        duration="60 minutes", questions=300, difficulty=Difficulty.MEDIUM,
        description="Dive deeper into the latest happenings in politics, environment, and social issues.",
    ),
    ExamDescriptor(
        id="CA042025", title="April 2025", subject="Current Affairs",
        duration="60 minutes", questions=300, difficulty=Difficulty.EASY,
        description=_AWARENESS,
    ),
    ExamDescriptor(
        id="CA122024", title="December 2024", subject="Current Affairs",
        duration="60 minutes", questions=300, difficulty=Difficulty.MEDIUM,
        description="Stay updated with the latest news and events shaping our world.",
    ),
    ExamDescriptor(
        id="CA112024", title="November 2024", subject="Current Affairs",
        duration="60 minutes", questions=300, difficulty=Difficulty.HARD,
        description=_CHALLENGE,
    ),
]


def list_exams() -> List[ExamDescriptor]:
    return list(EXAM_LIST)


def get_exam(exam_id: str) -> Optional[ExamDescriptor]:
    """Descriptor for ``exam_id``, or None when the catalog has no such exam."""
    for exam in EXAM_LIST:
        if exam.id == exam_id:
            return exam
    return None
