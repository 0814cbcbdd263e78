"""
main.py — launcher: API server + Streamlit UI
"""

import os
import socket
import subprocess
import sys
import time
import threading
import logging
import traceback

# ── package path (must come first) ───────────────────────────────────────────
_BASE_DIR = os.path.dirname(os.path.abspath(__file__))
if _BASE_DIR not in sys.path:
    sys.path.insert(0, _BASE_DIR)

from config import BASE_DIR, LOG_FILE, DEFAULT_HOST, UI_PORT

# ── logging ─────────────────────────────────────────────────────────────────
try:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s',
        handlers=[
            logging.FileHandler(LOG_FILE, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )
except PermissionError:
    # log file locked: console only
    logging.basicConfig(level=logging.INFO)

logger = logging.getLogger(__name__)

# ── server helpers ──────────────────────────────────────────────────────────

def _find_free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind((DEFAULT_HOST, 0))
        return s.getsockname()[1]

def _wait_for_server(port: int, timeout: float = 15.0) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            with socket.create_connection((DEFAULT_HOST, port), timeout=0.5):
                return True
        except OSError:
            time.sleep(0.1)
    return False

def _start_server(port: int) -> None:
    try:
        import uvicorn
        from api.app import create_app
        logger.info(f"Starting uvicorn - Port: {port}")
        app = create_app()
        uvicorn.run(app, host=DEFAULT_HOST, port=port, log_level="error")
    except Exception:
        logger.error(f"Server error:\n{traceback.format_exc()}")

def _start_ui(api_port: int) -> subprocess.Popen:
    env = dict(os.environ, QUESTION_SOURCE_URL=f"http://{DEFAULT_HOST}:{api_port}")
    ui_path = os.path.join(BASE_DIR, "timed_exam", "app.py")
    logger.info(f"Starting Streamlit UI - Port: {UI_PORT}")
    return subprocess.Popen(
        [sys.executable, "-m", "streamlit", "run", ui_path, "--server.port", str(UI_PORT)],
        env=env,
    )

# ── main ────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    logger.info("=== Timed Exam Application Started ===")
    os.chdir(BASE_DIR)

    port = _find_free_port()
    server_thread = threading.Thread(target=_start_server, args=(port,), daemon=True)
    server_thread.start()

    if _wait_for_server(port):
        logger.info("API server ready. Starting the UI.")
        ui = _start_ui(port)
        try:
            ui.wait()
        except KeyboardInterrupt:
            logger.info("Stopped by user.")
            ui.terminate()
    else:
        logger.error("API server did not start in time.")
        sys.exit(1)
