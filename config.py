"""
config.py
---------
Loads settings from the environment (and a local .env file)
and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── Database ──────────────────────────────────────────────
DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./expenses.db")

# ── Sessions ──────────────────────────────────────────────
SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
SESSION_EXPIRE_MINUTES: int = int(os.getenv("SESSION_EXPIRE_MINUTES", "1440"))
SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "session")

# ── Expenses ──────────────────────────────────────────────
DEFAULT_CATEGORY: str = os.getenv("DEFAULT_CATEGORY", "other")
DATE_DISPLAY_FORMAT: str = os.getenv("DATE_DISPLAY_FORMAT", "%d/%m/%Y")
MAX_AMOUNT: float = float(os.getenv("MAX_AMOUNT", "1000000000000"))

# ── Server ────────────────────────────────────────────────
HOST: str = os.getenv("HOST", "127.0.0.1")
PORT: int = int(os.getenv("PORT", "8000"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
