"""Database configuration for the reservation engine."""

import logging

from sqlalchemy import BigInteger, Integer, create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from turfbook.core.config import settings

logger = logging.getLogger(__name__)

DATABASE_SCHEMAS = ("auth", "booking", "reservation")

# SQLite only autoincrements INTEGER primary keys.
IdentifierType = BigInteger().with_variant(Integer(), "sqlite")


def create_db_engine(database_url: str) -> Engine:
    """Build the engine for ``database_url``.

    SQLite has no schemas, so every schema used by the models is translated
    onto the main database. Anything else gets the pooled PostgreSQL setup.
    """

    if database_url.startswith("sqlite"):
        sqlite_engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        return sqlite_engine.execution_options(
            schema_translate_map={schema: None for schema in DATABASE_SCHEMAS}
        )

    return create_engine(
        database_url,
        pool_size=10,
        max_overflow=20,
        pool_timeout=30,
        pool_recycle=1800,
        pool_pre_ping=True,
    )


engine = create_db_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def verify_database_connection() -> None:
    """Ensure the service can connect to the configured database."""

    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.exception("Database connection validation failed")
        raise RuntimeError("Failed to connect to the reservation database") from exc


__all__ = [
    "Base",
    "DATABASE_SCHEMAS",
    "IdentifierType",
    "SessionLocal",
    "create_db_engine",
    "engine",
    "verify_database_connection",
]
