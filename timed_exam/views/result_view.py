"""
views/result_view.py — exam results

Shows:
  - correct answers, answered questions and accuracy (%)
  - "Take Exam Again" (same questions, new order) / "Back to Exam List"

Accuracy is score / answered, so ending early does not count the
unanswered questions against the user.
"""

from __future__ import annotations

import streamlit as st

from timed_exam.models.session_state import SessionPhase
from timed_exam.services.exam_service import ExamSession


def _restart_exam() -> None:
    """Same question set, reshuffled, clocks and score reset."""
    exam_session: ExamSession = st.session_state.exam_session
    exam_session.restart()
    st.session_state.page = "exam"


def _stat_card(col, label: str, value: str, color: str) -> None:
    """Render one statistic as a small card."""
    with col:
        st.markdown(
            f"""
            <div style="text-align:center; background:#f7fafd; border-radius:12px;
                        padding:16px 8px; border-top:3px solid {color};">
                <p style="font-size:1.8rem; font-weight:800; color:{color};
                           margin:0 0 4px 0;">{value}</p>
                <p style="font-size:0.78rem; color:#9ca3af; margin:0;">{label}</p>
            </div>
            """,
            unsafe_allow_html=True,
        )


def render() -> None:
    """Result page."""

    # ── session guard ──────────────────────────────────────────────────────
    exam_session: ExamSession | None = st.session_state.get("exam_session")
    if exam_session is None or exam_session.phase is not SessionPhase.COMPLETE:
        st.warning("No results available.")
        if st.button("Back to Exam List", type="primary"):
            st.session_state.page = "catalog"
            st.rerun()
        return

    state = exam_session.state

    st.markdown(
        """
        <div class="exam-card" style="text-align:center;">
            <div style="font-size:2.4rem;">✅</div>
            <p class="exam-title">Exam Complete!</p>
            <p class="exam-subtitle">Congratulations on finishing the exam</p>
        </div>
        """,
        unsafe_allow_html=True,
    )

    # ── statistics ─────────────────────────────────────────────────────────
    s1, s2, s3 = st.columns(3)
    _stat_card(s1, "Correct", str(state.score), "#2563eb")
    _stat_card(s2, "Answered", str(len(state.answers)), "#4b5563")
    _stat_card(s3, "Score", f"{exam_session.percentage}%", "#10b981")

    st.markdown("<br>", unsafe_allow_html=True)

    # ── buttons ────────────────────────────────────────────────────────────
    btn_left, btn_right = st.columns(2)
    with btn_left:
        st.button(
            "Take Exam Again",
            key="retry_btn",
            type="primary",
            use_container_width=True,
            on_click=_restart_exam,
        )
    with btn_right:
        st.button(
            "Back to Exam List",
            key="home_btn",
            use_container_width=True,
            on_click=exam_session.back_to_catalog,
        )
