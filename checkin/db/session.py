from __future__ import annotations

import logging
import time
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool

from checkin.core.settings import settings

logger = logging.getLogger(__name__)

_is_sqlite = settings.is_sqlite

engine_kwargs = {
    "pool_pre_ping": True,
    "future": True,
}

if _is_sqlite:
    engine_kwargs["connect_args"] = {"check_same_thread": False}
else:
    engine_kwargs.update(
        {
            "pool_size": settings.db_pool_size,
            "max_overflow": settings.db_max_overflow,
            "pool_timeout": settings.db_pool_timeout,
            "pool_recycle": settings.db_pool_recycle,
        }
    )

engine = create_engine(settings.database_url, **engine_kwargs)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
    class_=Session,
    future=True,
)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create any missing tables; safe to run on every boot."""
    from checkin.models import Base

    Base.metadata.create_all(bind=engine)
    logger.info("tables_ready", extra={"event": "tables_ready"})


def wait_for_database(url: str, *, timeout: float = 30, interval: float = 2) -> int:
    """Poll *url* with ``SELECT 1`` until it answers. Returns the attempt count.

    Raises ``OperationalError`` from the last attempt once *timeout* seconds pass.
    """
    probe = create_engine(url, poolclass=NullPool, future=True)
    deadline = time.monotonic() + timeout
    attempt = 0
    try:
        while True:
            attempt += 1
            try:
                with probe.connect() as connection:
                    connection.execute(text("SELECT 1"))
                logger.info("database_ready", extra={"event": "database_ready"})
                return attempt
            except OperationalError:
                if time.monotonic() >= deadline:
                    raise
                logger.info("database_waiting", extra={"event": "database_waiting"})
                time.sleep(interval)
    finally:
        probe.dispose()
