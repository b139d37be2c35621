"""
Easy Scheduler — Centralized configuration.

Loads all settings from .env and validates them.
This module is the foundation for every other module in the project.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

# Load .env from project root (one level up from easy_scheduler/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)

_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # SQLite: events and pending notification requests share one file
    DATABASE_PATH: str = "data/events.db"

    # Answer given by the local notification sink when permission is requested
    NOTIFICATIONS_ENABLED: bool = True

    # Reminder offsets (minutes before start) pre-selected for new events
    DEFAULT_REMINDER_INTERVALS: list[int] = []

    LOG_LEVEL: str = "INFO"

    @field_validator("NOTIFICATIONS_ENABLED", mode="before")
    @classmethod
    def parse_enabled(cls, v: str | bool) -> bool:
        if isinstance(v, bool):
            return v
        return str(v).strip().lower() in _TRUTHY

    @field_validator("DEFAULT_REMINDER_INTERVALS", mode="before")
    @classmethod
    def parse_intervals(cls, v: str | list[int]) -> list[int]:
        if isinstance(v, str):
            v = [int(m.strip()) for m in v.split(",") if m.strip()]
        if any(m < 0 for m in v):
            raise ValueError("reminder intervals must be non-negative")
        return sorted(set(v))

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def parse_log_level(cls, v: str) -> str:
        return str(v).strip().upper() or "INFO"


def _load_settings() -> Settings:
    """Load settings from environment, exiting on invalid values."""
    try:
        return Settings(
            DATABASE_PATH=os.getenv("DATABASE_PATH", "data/events.db"),
            NOTIFICATIONS_ENABLED=os.getenv("NOTIFICATIONS_ENABLED", "true"),
            DEFAULT_REMINDER_INTERVALS=os.getenv("DEFAULT_REMINDER_INTERVALS", ""),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        )
    except ValidationError as exc:
        print(f"ERROR: invalid configuration in .env: {exc}", file=sys.stderr)
        sys.exit(1)


# Singleton — imported by all other modules as:
#   from easy_scheduler.config import settings
settings = _load_settings()
