"""
api/routes.py — FastAPI endpoints
"""

import asyncio

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

import api.session as session
from timed_exam.models.question_model import Question
from timed_exam.models.session_state import SessionPhase
from timed_exam.services.catalog import get_exam, list_exams
from timed_exam.services.exam_service import ExamSession, format_time

router = APIRouter()

# ── Pydantic request bodies ──────────────────────────────────────────────────

class StartExamBody(BaseModel):
    exam_id: str

class SelectOptionBody(BaseModel):
    option: str


# ── Helpers ──────────────────────────────────────────────────────────────────

def _question_to_dict(q: Question, reveal: bool) -> dict:
    d = {
        "id": q.id,
        "question": q.question,
        "options": q.options,
    }
    # description and answer stay hidden until the question has been answered
    if reveal:
        d["description"] = q.description
        d["correctAnswer"] = q.correct_answer
    return d


def _session_to_dict(exam_session: ExamSession) -> dict:
    state = exam_session.state
    question = state.current_question if exam_session.is_active else None
    return {
        "exam_id": state.exam_id,
        "title": state.title,
        "phase": state.phase.value,
        "error_message": state.error_message,
        "total": len(state.questions),
        "current_index": state.current_index,
        "question": _question_to_dict(question, state.feedback_active) if question else None,
        "is_last_question": state.is_last_question,
        "selected_option": state.selected_option,
        "feedback_active": state.feedback_active,
        "exam_clock_remaining": state.exam_clock_remaining,
        "exam_clock": format_time(state.exam_clock_remaining),
        "feedback_clock_remaining": state.feedback_clock_remaining,
        "feedback_clock": format_time(state.feedback_clock_remaining),
        "score": state.score,
        "answered": len(state.answers),
        "percentage": exam_session.percentage,
        "progress": exam_session.progress,
        "session_complete": state.session_complete,
        "answers": [a.model_dump() for a in state.answers],
    }


def _current(request: Request) -> ExamSession:
    """Exam session of this browser, clocks caught up to now. Call with session.locked() held."""
    exam_session: ExamSession | None = session.get(request.state.session_id, "exam_session")
    if exam_session is None:
        raise HTTPException(status_code=404, detail="No exam session.")
    exam_session.pump()
    return exam_session


# ── Catalog ──────────────────────────────────────────────────────────────────

@router.get("/api/exams")
async def api_list_exams():
    return [exam.model_dump(mode="json") for exam in list_exams()]


@router.get("/api/exams/{exam_id}")
async def api_get_exam(exam_id: str):
    exam = get_exam(exam_id)
    if exam is None:
        raise HTTPException(status_code=404, detail="Exam not found.")
    return exam.model_dump(mode="json")


# ── Exam session ─────────────────────────────────────────────────────────────

@router.post("/api/session/start")
async def start_session(body: StartExamBody, request: Request):
    exam_session = ExamSession(
        body.exam_id,
        request.app.state.question_source,
        scheduler=request.app.state.scheduler_factory(),
        exam_duration=request.app.state.exam_duration,
        feedback_duration=request.app.state.feedback_duration,
    )
    # blocking fetch; the session is published only once it has loaded
    await asyncio.to_thread(exam_session.load)
    session.put(request.state.session_id, "exam_session", exam_session)

    if exam_session.phase is SessionPhase.ERROR:
        failure = exam_session.load_failure
        status = 404 if failure is not None and failure.status_code == 404 else 422
        raise HTTPException(status_code=status, detail=exam_session.state.error_message)
    with session.locked():
        return _session_to_dict(exam_session)


@router.get("/api/session")
async def get_session_state(request: Request):
    with session.locked():
        return _session_to_dict(_current(request))


@router.post("/api/session/select")
async def select_option(body: SelectOptionBody, request: Request):
    with session.locked():
        exam_session = _current(request)
        try:
            accepted = exam_session.select_option(body.option)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {"accepted": accepted, **_session_to_dict(exam_session)}


@router.post("/api/session/next")
async def next_question(request: Request):
    with session.locked():
        exam_session = _current(request)
        accepted = exam_session.advance()
        return {"accepted": accepted, **_session_to_dict(exam_session)}


@router.post("/api/session/end")
async def end_test(request: Request):
    with session.locked():
        exam_session = _current(request)
        accepted = exam_session.end_test()
        return {"accepted": accepted, **_session_to_dict(exam_session)}


@router.post("/api/session/restart")
async def restart_exam(request: Request):
    with session.locked():
        exam_session = _current(request)
        try:
            exam_session.restart()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _session_to_dict(exam_session)


@router.post("/api/reset")
async def reset_session(request: Request):
    session.reset(request.state.session_id)
    return {"ok": True}
