"""Entry point for the Turfbook reservation FastAPI application."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

import turfbook.models  # noqa: F401  registers every table on Base.metadata
from turfbook.api.v1 import router as api_router
from turfbook.core.config import settings
from turfbook.core.database import Base, SessionLocal, engine, verify_database_connection
from turfbook.core.error_handlers import register_exception_handlers
from turfbook.services.notification_client import NotificationClient
from turfbook.services.reminder_scheduler import reminder_loop

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/turfbook/v1/reservation"


@asynccontextmanager
async def lifespan(app: FastAPI):
    verify_database_connection()
    # Ensure database tables exist when the application starts (for development purposes).
    Base.metadata.create_all(bind=engine)

    stop_event = asyncio.Event()
    worker = None
    if settings.REMINDER_BACKEND.strip().lower() == "database":
        worker = asyncio.create_task(
            reminder_loop(
                stop_event,
                session_factory=SessionLocal,
                notifier=NotificationClient(),
            )
        )
        logger.info("Reminder worker started")

    try:
        yield
    finally:
        stop_event.set()
        if worker is not None:
            await worker


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

register_exception_handlers(app)

app.include_router(api_router, prefix=API_PREFIX)
