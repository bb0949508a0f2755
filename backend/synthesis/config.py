"""Runtime configuration.

Values come from the process environment. A local .env file is loaded
first for development, without overriding variables that are already set.
"""

import os
from pathlib import Path

from dotenv import load_dotenv


def _load_local_env():
    # backend/.env first, then project root .env
    pkg_dir = Path(__file__).resolve().parent
    candidates = [
        pkg_dir.parent / ".env",
        pkg_dir.parent.parent / ".env",
    ]
    for p in candidates:
        if p.exists():
            load_dotenv(dotenv_path=p, override=False)


_load_local_env()

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./synthesis.db")
SQL_DEBUG = os.getenv("SQL_DEBUG", "false").lower() == "true"

# HTTP
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Sessions
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
REFRESH_TOKEN_EXPIRE_DAYS = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "synthesis_session")

# Generative text API (OpenAI-compatible chat completions)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/")
OPENAI_CHAT_MODEL = os.getenv("OPENAI_CHAT_MODEL", "gpt-4o-mini")
AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "60"))

# Grading
GRADING_STALE_SECONDS = int(os.getenv("GRADING_STALE_SECONDS", "300"))
