"""
services/question_loader.py

Fetches an exam's question set and puts it in random presentation order.

A question resource is a JSON array of
``{id, question, description, options, correctAnswer}`` objects, addressed
by exam id. Two sources exist: HTTP (what the UI uses against the API
server) and the local exams directory (what the API server itself uses).
"""

import json
import logging
import os
import random
import re
from typing import Any, Callable, List, Optional, Protocol, Sequence, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from config import EXAMS_DIR, QUESTION_SOURCE_URL, REQUEST_TIMEOUT
from timed_exam.models.question_model import Question

logger = logging.getLogger(__name__)

T = TypeVar("T")

GENERIC_LOAD_ERROR = "Exam not found or no questions available"

_EXAM_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_QUESTION_LIST = TypeAdapter(List[Question])


class QuestionLoadFailure(Exception):
    """Question retrieval failed or produced no usable questions."""

    def __init__(self, message: str = GENERIC_LOAD_ERROR, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class QuestionSource(Protocol):
    def fetch(self, exam_id: str) -> Any:
        """Return the decoded JSON payload for ``exam_id`` or raise QuestionLoadFailure."""


def _check_exam_id(exam_id: str) -> None:
    # ids end up in URLs and file names
    if not exam_id or not _EXAM_ID_RE.match(exam_id):
        raise QuestionLoadFailure("Failed to load exam: 404", status_code=404)


class HttpQuestionSource:
    """GET ``{base_url}/exams/{exam_id}.json``, one short-lived client per fetch."""

    def __init__(
        self,
        base_url: str = QUESTION_SOURCE_URL,
        timeout: float = REQUEST_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    def fetch(self, exam_id: str) -> Any:
        _check_exam_id(exam_id)
        try:
            with httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self._transport) as client:
                response = client.get(f"/exams/{exam_id}.json")
        except httpx.HTTPError as e:
            raise QuestionLoadFailure(f"Failed to load exam: {e}") from e

        if not response.is_success:
            raise QuestionLoadFailure(
                f"Failed to load exam: {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise QuestionLoadFailure("Failed to load exam: response is not valid JSON") from e


class FileQuestionSource:
    """Read ``{exams_dir}/{exam_id}.json``; a missing file behaves like a 404."""

    def __init__(self, exams_dir: str = EXAMS_DIR):
        self.exams_dir = exams_dir

    def fetch(self, exam_id: str) -> Any:
        _check_exam_id(exam_id)
        path = os.path.join(self.exams_dir, f"{exam_id}.json")
        if not os.path.isfile(path):
            raise QuestionLoadFailure("Failed to load exam: 404", status_code=404)
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise QuestionLoadFailure(f"Failed to load exam: {e}") from e


def fisher_yates_shuffle(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """
    Return a uniformly random permutation of ``items`` (input untouched).

    For i from the last index down to 1, swap position i with a uniformly
    chosen position in [0, i].
    """
    rng = rng or random
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def parse_questions(payload: Any) -> List[Question]:
    """
    Validate a decoded question resource.

    Raises:
        QuestionLoadFailure: payload is not a non-empty array of valid,
            uniquely identified questions.
    """
    if not isinstance(payload, list) or not payload:
        raise QuestionLoadFailure(GENERIC_LOAD_ERROR)
    try:
        questions = _QUESTION_LIST.validate_python(payload)
    except ValidationError as e:
        raise QuestionLoadFailure(f"Invalid question data ({e.error_count()} error(s))") from e

    seen = set()
    for q in questions:
        if q.id in seen:
            raise QuestionLoadFailure(f"Invalid question data (duplicate id '{q.id}')")
        seen.add(q.id)
    return questions


def load_questions(
    exam_id: str,
    source: QuestionSource,
    shuffle: Callable[[List[Question]], List[Question]] = fisher_yates_shuffle,
) -> List[Question]:
    """
    Fetch, validate and shuffle the question set for ``exam_id``.

    A single request is issued; there is no retry.

    Raises:
        QuestionLoadFailure
    """
    questions = parse_questions(source.fetch(exam_id))
    logger.info(f"Loaded {len(questions)} questions for exam {exam_id}")
    return shuffle(questions)
