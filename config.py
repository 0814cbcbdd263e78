import os

# Base directory
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Paths
STATIC_DIR = os.path.join(BASE_DIR, "static")
EXAMS_DIR = os.getenv("EXAMS_DIR", os.path.join(STATIC_DIR, "exams"))
LOG_FILE = os.path.join(BASE_DIR, "launch.log")

# Server
DEFAULT_HOST = os.getenv("HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "8000"))
UI_PORT = int(os.getenv("UI_PORT", "8501"))

# Question resources (Streamlit UI fetches over HTTP from the API server)
QUESTION_SOURCE_URL = os.getenv("QUESTION_SOURCE_URL", f"http://{DEFAULT_HOST}:{DEFAULT_PORT}")
REQUEST_TIMEOUT = 10.0

# Exam timing (seconds)
EXAM_DURATION_SECONDS = int(os.getenv("EXAM_DURATION_SECONDS", "1800"))       # 30 minutes
FEEDBACK_DURATION_SECONDS = int(os.getenv("FEEDBACK_DURATION_SECONDS", "30"))  # answer review

# Sessions
SESSION_TTL = 3600          # 1 hour
SESSION_SWEEP_INTERVAL = 300
