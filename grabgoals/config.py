import os
from dotenv import load_dotenv

load_dotenv()

# --- Backend API ---
API_BASE_URL = os.getenv("GRABGOALS_API_URL", "http://localhost:5000/api").rstrip("/")
REQUEST_TIMEOUT = float(os.getenv("GRABGOALS_REQUEST_TIMEOUT", "10"))

# --- Device storage ---
# Token and current user are kept in a local SQLite file unless overridden
DATABASE_URL = os.getenv("GRABGOALS_DATABASE_URL", "sqlite:///./data/grabgoals.db")

# Fix for common SQLAlchemy issues with postgres:// vs postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# --- Goal timer ---
TICK_SECONDS = float(os.getenv("GRABGOALS_TICK_SECONDS", "1"))

# --- Logging ---
LOG_LEVEL = os.getenv("GRABGOALS_LOG_LEVEL", "INFO").upper()

# --- Goal statuses (as stored by the backend) ---
STATUS_IN_PROGRESS = "in_progress"
STATUS_NAILED_IT = "nailed it"
STATUS_FAILED_OUT = "failed out"
TERMINAL_STATUSES = (STATUS_NAILED_IT, STATUS_FAILED_OUT)
