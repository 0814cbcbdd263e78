"""
views/home_view.py — exam catalog

Features:
  - grid of available exams (3 columns)
  - details card for the selected exam with a "Start Exam" action
"""

from __future__ import annotations

import logging

import streamlit as st

from timed_exam.models.exam_model import Difficulty, ExamDescriptor
from timed_exam.services.catalog import get_exam, list_exams

logger = logging.getLogger(__name__)

_DIFFICULTY_COLORS = {
    Difficulty.EASY: ("#d1fae5", "#065f46"),
    Difficulty.MEDIUM: ("#fef3c7", "#92400e"),
    Difficulty.HARD: ("#fee2e2", "#991b1b"),
}


def _difficulty_badge(difficulty: Difficulty) -> str:
    bg, fg = _DIFFICULTY_COLORS.get(difficulty, ("#f3f4f6", "#1f2937"))
    return (
        f"<span class='difficulty-badge' style='background:{bg}; color:{fg};'>"
        f"{difficulty.value}</span>"
    )


def _select_exam(exam_id: str | None) -> None:
    st.session_state.selected_exam_id = exam_id


def _start_exam(exam: ExamDescriptor) -> None:
    """Navigate to the exam page; the session is created there."""
    logger.info(f"Navigating to exam: {exam.title} (ID: {exam.id})")
    previous = st.session_state.get("exam_session")
    if previous is not None:
        previous.dispose()
    st.session_state.exam_session = None
    st.session_state.exam_id = exam.id
    st.session_state.selected_exam_id = None
    st.session_state.page = "exam"


def _render_details(exam: ExamDescriptor) -> None:
    st.button("← Back to Exam List", key="details_back", on_click=_select_exam, args=(None,))

    st.markdown(
        f"""
        <div class="exam-card" style="text-align:center;">
            <p class="exam-title">{exam.title}</p>
            <p class="exam-subtitle">{exam.description}</p>
        </div>
        """,
        unsafe_allow_html=True,
    )

    left, right = st.columns(2)
    with left:
        st.markdown(f"**Subject:** {exam.subject}")
        st.markdown(f"**Duration:** {exam.duration}")
    with right:
        st.markdown(f"**Questions:** {exam.questions}")
        st.markdown(f"**Difficulty:** {_difficulty_badge(exam.difficulty)}", unsafe_allow_html=True)

    st.markdown("<br>", unsafe_allow_html=True)
    st.button(
        "Start Exam",
        key="start_exam",
        type="primary",
        use_container_width=True,
        on_click=_start_exam,
        args=(exam,),
    )


def render() -> None:
    """Catalog page."""

    selected = st.session_state.get("selected_exam_id")
    exam = get_exam(selected) if selected else None
    if exam is not None:
        _render_details(exam)
        return

    st.markdown('<p class="exam-title">Available Exams</p>', unsafe_allow_html=True)
    st.markdown(
        '<p class="exam-subtitle">Pick an exam to see its details</p>',
        unsafe_allow_html=True,
    )

    exams = list_exams()
    cols_per_row = 3

    for row_start in range(0, len(exams), cols_per_row):
        row = exams[row_start : row_start + cols_per_row]
        cols = st.columns(cols_per_row)
        for col, item in zip(cols, row):
            with col:
                st.markdown(
                    f"""
                    <div class="exam-card">
                        <div style="display:flex; justify-content:space-between; align-items:center;">
                            <b>{item.title}</b>{_difficulty_badge(item.difficulty)}
                        </div>
                        <p style="font-size:0.85rem; color:#6b7280; margin:8px 0 0 0;">
                            {item.subject} · {item.duration} · {item.questions} questions
                        </p>
                    </div>
                    """,
                    unsafe_allow_html=True,
                )
                st.button(
                    "View details",
                    key=f"exam_{item.id}",
                    use_container_width=True,
                    on_click=_select_exam,
                    args=(item.id,),
                )
