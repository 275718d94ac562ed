"""Configuration for the pool league API."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Database
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{Path(__file__).parent / 'poolleague.db'}",
)
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# Google OAuth
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID", "")
GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET", "")

# Server / client URLs. The OAuth callback is {SERVER_BASE_URL}/auth/google/callback
SERVER_BASE_URL = os.getenv("SERVER_BASE_URL", "")
CLIENT_BASE_URL = os.getenv("CLIENT_BASE_URL", "")
PORT = os.getenv("PORT", "")
ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()]

# Sessions
SESSION_SECRET = os.getenv("SESSION_SECRET", "")
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "poolleague_session")
SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"
SESSION_EXPIRE_DAYS = int(os.getenv("SESSION_EXPIRE_DAYS", "7"))
OAUTH_STATE_ALGORITHM = "HS256"
OAUTH_STATE_EXPIRE_MINUTES = 10

# Roles
ADMIN_ROLE_NAME = "admin"
PLAYER_ROLE_NAME = "player"
INITIAL_ADMIN_GOOGLE_ID = os.getenv("INITIAL_ADMIN_GOOGLE_ID", "")  # Google subject that becomes admin on first login
INITIAL_ADMIN_EMAIL = os.getenv("INITIAL_ADMIN_EMAIL", "")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# The server refuses to start without these.
REQUIRED_SETTINGS = (
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "SESSION_SECRET",
    "SERVER_BASE_URL",
    "CLIENT_BASE_URL",
    "PORT",
)


def missing_settings() -> list[str]:
    """Return names of required settings that are unset or empty."""
    return [name for name in REQUIRED_SETTINGS if not globals().get(name)]
