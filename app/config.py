# app/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./campus_gate.db"

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_IP: str = "0.0.0.0"
    BACKEND_PORT: int = 8080

    # ── Security ──────────────────────────────────────────────────────────
    API_KEY: Optional[str] = None   # Set in .env to enable auth on API endpoints

    # ── Gates ─────────────────────────────────────────────────────────────
    GATE_AUTO_CLOSE_SECONDS: float = 3.0    # Gate closes on its own after a granted scan

    # ── Access logs ───────────────────────────────────────────────────────
    RECENT_LOGS_LIMIT: int = 10

    # ── Demo data ─────────────────────────────────────────────────────────
    SEED_DEMO_DATA: bool = True             # Seed users + gates into an empty database

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None           # Defaults to <repo>/logs
    LOG_FILE: str = "gate_access.log"       # Empty string logs to console only
    LOG_FILE_MAX_MB: int = 5
    LOG_FILE_BACKUPS: int = 10

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
