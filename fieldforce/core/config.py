"""
Centralised application settings loaded from environment / .env file.

Uses pydantic-settings so every value can be overridden via env vars
or the .env file at the project root.
"""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings

_DEFAULT_SECRET = "CHANGE-ME-TO-A-RANDOM-64-CHAR-HEX-STRING-IN-PRODUCTION"


class Settings(BaseSettings):
    # ── Project ──────────────────────────────────────────────────────
    PROJECT_NAME: str = "Field Force Tracker"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # ── Database (aiosqlite by default, asyncpg for PostgreSQL) ─────
    DATABASE_URL: str = "sqlite+aiosqlite:///./fieldforce.db"

    # ── JWT ──────────────────────────────────────────────────────────
    SECRET_KEY: str = _DEFAULT_SECRET
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    COOKIE_SECURE: bool = False  # Set True in HTTPS production

    # ── Rate limiting ────────────────────────────────────────────────
    LOGIN_RATE_LIMIT: str = "5/minute"
    RATE_LIMIT_ENABLED: bool = True

    # ── CORS ─────────────────────────────────────────────────────────
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors(cls, v: object) -> list[str]:
        if isinstance(v, str) and not v.lstrip().startswith("["):
            return [o.strip() for o in v.split(",") if o.strip()]
        return v  # type: ignore[return-value]

    # ── Check-in rules ───────────────────────────────────────────────
    DISTANCE_WARNING_KM: float = 0.5
    NOTES_MAX_LENGTH: int = 500

    # ── Logging ──────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    # ── Demo data (seeded on first startup into an empty database) ──
    SEED_DEMO_DATA: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }


settings = Settings()

if settings.SECRET_KEY == _DEFAULT_SECRET:
    import logging

    logging.getLogger("fieldforce.core.config").warning(
        "You are running with the default INSECURE secret key! "
        "Set SECRET_KEY in your .env file."
    )
