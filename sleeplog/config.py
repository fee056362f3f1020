"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# ── SQLite store ──────────────────────────────────────────
DB_PATH: str = os.getenv("SLEEP_DB_PATH", "sleep.db")
DB_MAX_CONNECTIONS: int = int(os.getenv("SLEEP_DB_MAX_CONNECTIONS", "4"))
DB_TIMEOUT: float = float(os.getenv("SLEEP_DB_TIMEOUT", "5.0"))
DB_FOREIGN_KEYS: bool = _env_bool("SLEEP_DB_FOREIGN_KEYS", "true")

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
