"""
api/session.py — in-memory per-user sessions (cookie based)

Each browser gets a UUID session id and its own independent exam session.
Entries expire after SESSION_TTL seconds without access; expired exam
sessions are disposed so their clocks stop.
"""

import threading
import time
import uuid
from typing import Any

from config import SESSION_TTL
from timed_exam.services.exam_service import ExamSession

_lock = threading.RLock()
_sessions: dict[str, dict[str, Any]] = {}
_timestamps: dict[str, float] = {}


def _new_state() -> dict[str, Any]:
    return {
        "exam_session": None,
    }


def _dispose(state: dict[str, Any]) -> None:
    exam_session: ExamSession | None = state.get("exam_session")
    if exam_session is not None:
        exam_session.dispose()


def create_session() -> str:
    """Create a new session and return its id."""
    sid = uuid.uuid4().hex
    with _lock:
        _sessions[sid] = _new_state()
        _timestamps[sid] = time.time()
    return sid


def get_session(sid: str) -> dict[str, Any] | None:
    """Session data for ``sid``; None if unknown or expired."""
    with _lock:
        if sid not in _sessions:
            return None
        if time.time() - _timestamps[sid] > SESSION_TTL:
            _dispose(_sessions.pop(sid))
            del _timestamps[sid]
            return None
        _timestamps[sid] = time.time()  # refresh on access
        return _sessions[sid]


def get(sid: str, key: str, default=None):
    """Read a value from the session."""
    session = get_session(sid)
    if session is None:
        return default
    return session.get(key, default)


def put(sid: str, key: str, value) -> None:
    """Write a value into the session, disposing the exam session it replaces."""
    with _lock:
        if sid in _sessions:
            previous = _sessions[sid].get(key)
            if isinstance(previous, ExamSession) and previous is not value:
                previous.dispose()
            _sessions[sid][key] = value
            _timestamps[sid] = time.time()


def reset(sid: str) -> None:
    """Drop the exam session and start over."""
    with _lock:
        if sid in _sessions:
            _dispose(_sessions[sid])
            _sessions[sid] = _new_state()
            _timestamps[sid] = time.time()


def cleanup_expired() -> int:
    """Remove expired sessions. Returns how many were removed."""
    now = time.time()
    removed = 0
    with _lock:
        expired = [sid for sid, ts in _timestamps.items() if now - ts > SESSION_TTL]
        for sid in expired:
            _dispose(_sessions.pop(sid))
            del _timestamps[sid]
            removed += 1
    return removed


def locked():
    """
    The store lock, for use as ``with session.locked():``.

    Route handlers hold it while they drive an exam session so the expiry
    sweeper never disposes a session in the middle of a transition.
    """
    return _lock
