"""
views/components/timer.py

Renders the exam clock and, while an answer is being reviewed, the
feedback clock. The values come from the session's countdowns; this
component only formats them.
"""

import streamlit as st

from timed_exam.services.exam_service import ExamSession, format_time

_WARNING_SECONDS = 300  # last 5 minutes in red


def render(exam_session: ExamSession) -> None:
    """
    Clock display for the exam page header.

    Args:
        exam_session: session whose clocks are shown
    """
    state = exam_session.state
    remaining = state.exam_clock_remaining
    is_warning = remaining < _WARNING_SECONDS

    css_class = "timer-display timer-warning" if is_warning else "timer-display"
    icon = "⚠️ " if is_warning else "⏱ "

    st.markdown(
        f'<div class="{css_class}">{icon}{format_time(remaining)}</div>',
        unsafe_allow_html=True,
    )

    if state.feedback_active:
        st.markdown(
            f"<p style='color:#2563eb; font-family:monospace; font-weight:600; margin-top:8px;'>"
            f"Next question in {format_time(state.feedback_clock_remaining)}</p>",
            unsafe_allow_html=True,
        )
