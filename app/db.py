import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from app.config import (
    DATABASE_URL,
    DB_MAX_OVERFLOW,
    DB_POOL_SIZE,
    DB_RETRY_ATTEMPTS,
    DB_RETRY_MAX_WAIT,
    DB_RETRY_MIN_WAIT,
    DB_TIMEOUT_SECONDS,
)
from app.models import Base

log = logging.getLogger(__name__)


def make_engine(url: str = DATABASE_URL, **engine_kwargs) -> Engine:
    """Build an engine; SQLite gets a busy timeout and enforced foreign keys."""
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": DB_TIMEOUT_SECONDS},
            pool_pre_ping=True,
            **engine_kwargs,
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=DB_POOL_SIZE,
        max_overflow=DB_MAX_OVERFLOW,
        pool_timeout=DB_TIMEOUT_SECONDS,
        **engine_kwargs,
    )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # ON DELETE CASCADE is a no-op in SQLite unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


engine = make_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


@contextmanager
def get_session() -> Iterator[Session]:
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Iterator[Session]:
    """FastAPI dependency: one unit of work per request."""
    with get_session() as session:
        yield session


@retry(
    stop=stop_after_attempt(DB_RETRY_ATTEMPTS),
    wait=wait_exponential(multiplier=1, min=DB_RETRY_MIN_WAIT, max=DB_RETRY_MAX_WAIT),
    retry=retry_if_exception_type(OperationalError),
    reraise=True,
)
def init_db(bind: Engine = None) -> None:
    """Create all tables if missing. Retries while the database is unreachable."""
    bind = bind or engine
    with bind.connect() as connection:
        connection.execute(text("SELECT 1"))
    Base.metadata.create_all(bind=bind)
    log.info("Database initialized at %s", bind.url.render_as_string(hide_password=True))
