"""
views/components/feedback_card.py

Shows the result of the question just answered: correct/incorrect
banner, the explanation, and every option marked as the correct answer or
the user's wrong pick.
"""

from __future__ import annotations

import html

import streamlit as st

from timed_exam.models.question_model import Question
from timed_exam.views.components.question_card import option_label


def explanation_html(question: Question) -> str:
    return f"""
        <div class="exam-card">
            <p style="font-weight:700; color:#1f2937; margin-bottom:8px;">{html.escape(question.question)}</p>
            <p style="color:#374151; margin:0;">{html.escape(question.description)}</p>
        </div>
        """


def option_html(question: Question, index: int, selected: str | None) -> str:
    option = question.options[index]
    if question.is_correct(option):
        style = "border:2px solid #10b981; background:#d1fae5;"
        tag = "Correct Answer"
    elif option == selected:
        style = "border:2px solid #ef4444; background:#fee2e2;"
        tag = "Your Answer"
    else:
        style = "border:2px solid #d1d5db; background:#f9fafb;"
        tag = ""
    return (
        f"<div style='{style} border-radius:8px; padding:10px 14px; margin:6px 0; "
        f"display:flex; justify-content:space-between;'>"
        f"<span><b>{option_label(index)}.</b> {html.escape(option)}</span>"
        f"<span style='font-size:0.75rem; font-weight:600;'>{tag}</span></div>"
    )


def render(question: Question, selected: str | None) -> None:
    is_correct = selected is not None and question.is_correct(selected)

    if is_correct:
        st.success("✅ Correct!")
    else:
        st.error("❌ Incorrect")

    st.markdown(explanation_html(question), unsafe_allow_html=True)

    for i in range(len(question.options)):
        st.markdown(option_html(question, i, selected), unsafe_allow_html=True)
