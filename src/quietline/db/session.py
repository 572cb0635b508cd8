"""Engine and session factory for the Quietline store.

One engine is built per process from ``settings.effective_database_url``.
Request handlers get a short-lived session through :func:`get_db`; every
service operation commits or rolls back on that session itself.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from quietline.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base for accounts, relationship edges and pending messages."""


# Model modules register their tables on Base.metadata when imported.
import quietline.models  # noqa: E402,F401

SQLITE_BUSY_TIMEOUT_SECONDS = 30


def engine_options(url: str, *, echo: bool = False) -> dict[str, Any]:
    """Return ``create_engine`` keyword arguments suited to ``url``.

    SQLite connections are shared with FastAPI's worker threads, and writers
    wait for the database lock instead of failing immediately.
    """
    options: dict[str, Any] = {"echo": echo}
    if url.startswith("sqlite"):
        options["connect_args"] = {
            "check_same_thread": False,
            "timeout": SQLITE_BUSY_TIMEOUT_SECONDS,
        }
    else:
        options["pool_pre_ping"] = True
    return options


def build_engine(url: str | None = None) -> Engine:
    """Create an engine for ``url``, defaulting to the configured database."""
    target = url or settings.effective_database_url
    return create_engine(target, **engine_options(target, echo=settings.sql_debug))


engine = build_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a session for one request and close it afterwards."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def create_tables(bind: Engine | None = None) -> None:
    """Create every Quietline table that does not exist yet."""
    Base.metadata.create_all(bind=bind or engine)


def drop_tables(bind: Engine | None = None) -> None:
    """Drop every Quietline table."""
    Base.metadata.drop_all(bind=bind or engine)
