"""
api/app.py — FastAPI app instance + session middleware + question resources
"""

import logging
import os
import threading
import time
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from config import (
    EXAM_DURATION_SECONDS,
    EXAMS_DIR,
    FEEDBACK_DURATION_SECONDS,
    SESSION_SWEEP_INTERVAL,
    SESSION_TTL,
)
from api.routes import router
import api.session as session
from timed_exam.services.clock import CooperativeScheduler
from timed_exam.services.question_loader import FileQuestionSource, QuestionSource

SESSION_COOKIE = "exam_session"

logger = logging.getLogger(__name__)


def create_app(
    question_source: Optional[QuestionSource] = None,
    exams_dir: str = EXAMS_DIR,
    scheduler_factory: Callable[[], CooperativeScheduler] = CooperativeScheduler,
    exam_duration: int = EXAM_DURATION_SECONDS,
    feedback_duration: int = FEEDBACK_DURATION_SECONDS,
    sweep_sessions: bool = True,
) -> FastAPI:
    app = FastAPI(title="Timed Exam", docs_url=None, redoc_url=None)
    app.state.question_source = question_source or FileQuestionSource(exams_dir)
    app.state.scheduler_factory = scheduler_factory
    app.state.exam_duration = exam_duration
    app.state.feedback_duration = feedback_duration

    # CORS (the Streamlit UI runs on a different port)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Session middleware: read the session id from the cookie, issue one if missing
    @app.middleware("http")
    async def session_middleware(request: Request, call_next):
        sid = request.cookies.get(SESSION_COOKIE)
        if not sid or session.get_session(sid) is None:
            sid = session.create_session()

        request.state.session_id = sid
        response: Response = await call_next(request)
        response.set_cookie(
            key=SESSION_COOKIE,
            value=sid,
            httponly=True,
            samesite="lax",
            max_age=SESSION_TTL,
        )
        return response

    app.include_router(router)

    # Question resources: /exams/<exam_id>.json
    if os.path.isdir(exams_dir):
        app.mount("/exams", StaticFiles(directory=exams_dir), name="exams")

    @app.get("/")
    async def index():
        return {"message": "Timed Exam API running"}

    # Sweep expired sessions periodically
    if sweep_sessions:
        def _cleanup_loop():
            while True:
                time.sleep(SESSION_SWEEP_INTERVAL)
                removed = session.cleanup_expired()
                if removed:
                    logger.info(f"Removed {removed} expired session(s)")

        t = threading.Thread(target=_cleanup_loop, daemon=True)
        t.start()

    return app
