"""UTC timestamps for stored rows.

Rows are stamped with aware UTC datetimes. SQLite hands them back without
tzinfo, so values read from storage go through :func:`ensure_utc` before
they leave the API.
"""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Current time as an aware UTC datetime; used as the column default."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to a naive timestamp, or convert an aware one to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
