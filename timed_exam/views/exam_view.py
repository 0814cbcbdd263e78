"""
views/exam_view.py — exam page

Layout:
  - header: title, question counter, clocks, score, "End Test"
  - progress bar
  - question card (answering) or feedback card (showing feedback)

State:
  - st.session_state.exam_id       (str, set by the catalog)
  - st.session_state.exam_session  (ExamSession, created here on first render)

The clocks are pumped on every rerun and by a fragment that refreshes once
per second; when a tick changes the phase or question the whole page
reruns.
"""

from __future__ import annotations

import html

import streamlit as st

from config import QUESTION_SOURCE_URL
from timed_exam.models.session_state import SessionPhase
from timed_exam.services.catalog import CATALOG_ROUTE
from timed_exam.services.exam_service import ExamSession
from timed_exam.services.question_loader import HttpQuestionSource
from timed_exam.views.components import feedback_card
from timed_exam.views.components import question_card as qcard
from timed_exam.views.components import timer as tmr


def _navigate(route: str) -> None:
    """Navigation callback handed to the exam session."""
    if route == CATALOG_ROUTE:
        st.session_state.exam_session = None
        st.session_state.exam_id = None
    st.session_state.page = route


def _get_or_create_session(exam_id: str) -> ExamSession:
    exam_session: ExamSession | None = st.session_state.get("exam_session")
    if exam_session is None or exam_session.state.exam_id != exam_id:
        exam_session = ExamSession(
            exam_id,
            HttpQuestionSource(QUESTION_SOURCE_URL),
            navigate=_navigate,
        )
        st.session_state.exam_session = exam_session
    return exam_session


def _snapshot(exam_session: ExamSession) -> tuple:
    return exam_session.phase, exam_session.state.current_index


@st.fragment(run_every=1)
def _clock_panel() -> None:
    exam_session: ExamSession | None = st.session_state.get("exam_session")
    if exam_session is None:
        return
    before = _snapshot(exam_session)
    exam_session.pump()
    if _snapshot(exam_session) != before:
        st.rerun()
    tmr.render(exam_session)


def error_html(message: str | None) -> str:
    return f"""
        <div class="exam-card" style="text-align:center;">
            <div style="font-size:2.4rem;">❌</div>
            <p class="exam-title">Error Loading Exam</p>
            <p class="exam-subtitle">{html.escape(message or "")}</p>
        </div>
        """


def _render_error(exam_session: ExamSession) -> None:
    st.markdown(error_html(exam_session.state.error_message), unsafe_allow_html=True)
    st.button(
        "Back to Exam List",
        key="error_back",
        type="primary",
        use_container_width=True,
        on_click=exam_session.back_to_catalog,
    )


def render() -> None:
    """Exam page."""

    # ── session guard ──────────────────────────────────────────────────────
    exam_id = st.session_state.get("exam_id")
    if not exam_id:
        st.warning("No exam selected.")
        st.button("Back to Exam List", type="primary", on_click=_navigate, args=(CATALOG_ROUTE,))
        return

    exam_session = _get_or_create_session(exam_id)

    if exam_session.phase is SessionPhase.LOADING:
        with st.spinner("Loading Exam... Please wait while we prepare your exam"):
            exam_session.load()

    if exam_session.phase is SessionPhase.ERROR:
        _render_error(exam_session)
        return

    exam_session.pump()
    if exam_session.phase is SessionPhase.COMPLETE:
        st.session_state.page = "result"
        st.rerun()

    state = exam_session.state
    question = state.current_question
    total = len(state.questions)

    # ── header ─────────────────────────────────────────────────────────────
    title_col, clock_col, score_col = st.columns([3, 2, 1])
    with title_col:
        st.markdown(f'<p class="exam-title">{html.escape(state.title)}</p>', unsafe_allow_html=True)
        st.markdown(
            f'<p class="exam-subtitle">Question {state.current_index + 1} of {total}</p>',
            unsafe_allow_html=True,
        )
    with clock_col:
        _clock_panel()
    with score_col:
        st.metric("Score", f"{state.score}/{len(state.answers)}")

    # ── progress ───────────────────────────────────────────────────────────
    st.markdown(
        f"<div style='display:flex; justify-content:space-between; font-size:0.85rem; "
        f"color:#6b7280;'><span>Progress</span><span>{exam_session.progress}%</span></div>",
        unsafe_allow_html=True,
    )
    st.progress(exam_session.progress / 100)

    # ── question / feedback ────────────────────────────────────────────────
    if not state.feedback_active:
        qcard.render(exam_session, question)
        st.button("⏹ End Test", key="end_answering", on_click=exam_session.end_test)
        return

    feedback_card.render(question, state.selected_option)

    end_col, next_col = st.columns(2)
    with end_col:
        st.button("⏹ End Test", key="end_feedback", on_click=exam_session.end_test)
    with next_col:
        label = "Finish Exam →" if state.is_last_question else "Next Question →"
        st.button(
            label,
            key="next_question",
            type="primary",
            use_container_width=True,
            on_click=exam_session.advance,
        )
