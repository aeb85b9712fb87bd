from datetime import datetime, timezone
from typing import Generator, Optional
import logging

from fastapi import Request
from sqlalchemy import create_engine, event, Text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.types import TypeDecorator

logger = logging.getLogger(__name__)

Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render a datetime the way the stored rows carry it: 2024-05-01T10:00:00.000Z"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime:
    """
    Parse a stored timestamp.

    Accepts the ISO form written by this service and by the legacy frontend
    (trailing ``Z``) as well as the ``YYYY-MM-DD HH:MM:SS`` form produced by
    SQLite's ``CURRENT_TIMESTAMP``. Naive values are taken as UTC.
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class IsoTimestamp(TypeDecorator):
    """Aware datetime persisted as ISO-8601 UTC text."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, str):
            value = parse_timestamp(value)
        return format_timestamp(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        try:
            return parse_timestamp(value)
        except ValueError:
            logger.error(f"Unparseable timestamp in database: {value!r}")
            return None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ships with FK enforcement off; cascades depend on it
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(database_url: str, **kwargs) -> Engine:
    """Create an engine; SQLite connections get foreign key enforcement."""
    if database_url.startswith("sqlite"):
        # check_same_thread is needed for SQLite under FastAPI's threadpool
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    engine = create_engine(database_url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a session from the factory the application opened at startup."""
    session_factory: Optional[sessionmaker] = getattr(
        request.app.state, "SessionLocal", None
    )
    if session_factory is None:
        raise RuntimeError("Database is not initialised; application lifespan not run")
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
