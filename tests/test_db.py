# tests/test_db.py
"""Tests for engine configuration and timestamp helpers."""

from datetime import UTC, datetime, timedelta, timezone

from quietline.db.session import engine_options
from quietline.db.time import ensure_utc


def test_sqlite_engine_options_allow_worker_threads() -> None:
    options = engine_options("sqlite:///./quietline.db")

    assert options["connect_args"]["check_same_thread"] is False
    assert options["connect_args"]["timeout"] > 0
    assert "pool_pre_ping" not in options


def test_server_engine_options_ping_pool() -> None:
    options = engine_options("postgresql+psycopg://quietline@db/quietline", echo=True)

    assert options == {"echo": True, "pool_pre_ping": True}


def test_ensure_utc_normalizes_timestamps() -> None:
    naive = datetime(2026, 1, 2, 3, 4, 5)
    shifted = datetime(2026, 1, 2, 5, 4, 5, tzinfo=timezone(timedelta(hours=2)))

    assert ensure_utc(naive) == datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)
    assert ensure_utc(shifted).utcoffset() == timedelta(0)
    assert ensure_utc(shifted) == naive.replace(tzinfo=UTC)
