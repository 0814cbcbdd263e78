"""
app.py — Streamlit entry point

Pages (st.session_state.page):
  catalog -> exam -> result   (restart: result -> exam, back: any -> catalog)

Run:
  streamlit run timed_exam/app.py
"""

import os
import sys

# ── package path (must come first) ───────────────────────────────────────────
_BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BASE_DIR not in sys.path:
    sys.path.insert(0, _BASE_DIR)

import streamlit as st

from timed_exam.views import exam_view, home_view, result_view

_PAGES = {
    "catalog": home_view.render,
    "exam": exam_view.render,
    "result": result_view.render,
}

_CSS = """
<style>
.exam-card { background:#ffffff; border-radius:16px; padding:28px;
             box-shadow:0 6px 24px rgba(30,41,90,0.08); margin-bottom:16px; }
.exam-title { font-size:1.6rem; font-weight:800; color:#1f2937; margin-bottom:4px; }
.exam-subtitle { color:#6b7280; margin-bottom:12px; }
.timer-display { font-family:monospace; font-size:1.15rem; font-weight:700;
                 color:#2563eb; background:#dbeafe; border-radius:8px;
                 padding:6px 14px; display:inline-block; }
.timer-warning { color:#b91c1c; background:#fee2e2; }
.difficulty-badge { padding:2px 10px; border-radius:12px; font-size:0.8rem; font-weight:600; }
.score-big { font-size:2.4rem; font-weight:800; text-align:center; margin:0; }
</style>
"""


def _init_state() -> None:
    defaults = {
        "page": "catalog",
        "selected_exam_id": None,
        "exam_id": None,
        "exam_session": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def main() -> None:
    st.set_page_config(page_title="Online Exam", page_icon="📝", layout="centered")
    st.markdown(_CSS, unsafe_allow_html=True)
    _init_state()
    _PAGES.get(st.session_state.page, home_view.render)()


main()
