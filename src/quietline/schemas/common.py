"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Generic, TypeVar

from pydantic import AfterValidator, BaseModel, Field

from quietline.db.time import ensure_utc

T = TypeVar("T")

# Timestamps are always serialized with an explicit UTC offset.
UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]


class ServiceResponse(BaseModel, Generic[T]):
    """Envelope returned by every service operation.

    ``data`` is set on success; ``error`` carries a caller-safe message on
    failure. ``status_code`` follows HTTP conventions so the API layer can
    pass it through unchanged.
    """

    status_code: int = Field(..., description="HTTP-style status code")
    data: T | None = Field(None, description="Operation result on success")
    error: str | None = Field(None, description="Failure reason, if any")

    @property
    def ok(self) -> bool:
        """Return True if the operation succeeded."""
        return self.error is None and self.status_code < 400
