# intake/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./intake.db"

    # ── Entity store ──────────────────────────────────────────────────────
    STORE_BACKEND: str = "database"          # database | memory
    SEED_SAMPLE_DATA: bool = False           # Seed the sample fleet into an empty DB on startup

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_IP: str = "127.0.0.1"
    BACKEND_PORT: int = 8080

    # ── Security ──────────────────────────────────────────────────────────
    API_KEY: Optional[str] = None   # Set in .env to enable auth on API endpoints

    # ── Search behaviour ──────────────────────────────────────────────────
    DEDUPLICATE_OWNER_VEHICLES: bool = False     # Collapse vehicles shared by several matched owners
    REGULAR_CUSTOMER_REFERRAL: str = "regular_customer"

    # ── Intake sessions ───────────────────────────────────────────────────
    INTAKE_SESSION_IDLE_MINUTES: int = 120     # Untouched forms are dropped after this
    MAX_INTAKE_SESSIONS: int = 500             # Oldest idle form is evicted beyond this

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = True
    LOG_DIR: str = "logs"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
