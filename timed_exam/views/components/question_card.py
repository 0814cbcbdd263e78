"""
views/components/question_card.py

Renders the current question and its options as buttons. Clicking an
option records the answer through the session.
"""

from __future__ import annotations

import html

import streamlit as st

from timed_exam.models.question_model import Question
from timed_exam.services.exam_service import ExamSession


def option_label(index: int) -> str:
    """A, B, C, ..."""
    return chr(65 + index)


def question_html(question: Question) -> str:
    return f"""
        <div class="exam-card">
            <p style="font-size:1.15rem; font-weight:600; color:#1f2937;
                      line-height:1.6; margin:0;">
                {html.escape(question.question)}
            </p>
        </div>
        """


def render(exam_session: ExamSession, question: Question) -> None:
    """
    Question card for the answering phase.

    Args:
        exam_session: session that receives the selection
        question:     question to show
    """
    st.markdown(question_html(question), unsafe_allow_html=True)

    # button labels are plain text, no escaping needed
    for i, option in enumerate(question.options):
        st.button(
            f"{option_label(i)}.  {option}",
            key=f"option_{question.id}_{i}",
            use_container_width=True,
            on_click=exam_session.select_option,
            args=(option,),
        )
