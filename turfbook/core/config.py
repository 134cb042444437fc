"""Configuration settings for the reservation engine."""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Turfbook Reservation Service")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./turfbook.db")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "changeme")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    NOTIFICATION_SERVICE_URL: str = os.getenv("NOTIFICATION_SERVICE_URL", "")
    NOTIFICATION_SERVICE_TIMEOUT: float = float(
        os.getenv("NOTIFICATION_SERVICE_TIMEOUT", "10")
    )

    # "database" persists reminder jobs, "in_process" uses timers that are
    # lost on restart, "disabled" drops reminders.
    REMINDER_BACKEND: str = os.getenv("REMINDER_BACKEND", "database")
    REMINDER_LEAD_HOURS: int = int(os.getenv("REMINDER_LEAD_HOURS", "24"))
    REMINDER_POLL_INTERVAL: float = float(os.getenv("REMINDER_POLL_INTERVAL", "30"))
    REMINDER_BATCH_SIZE: int = int(os.getenv("REMINDER_BATCH_SIZE", "50"))

    SLOT_MINUTES: int = int(os.getenv("SLOT_MINUTES", "60"))


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

__all__ = ["settings", "get_settings", "Settings"]
