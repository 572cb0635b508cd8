# src/quietline/models/account.py
"""SQLAlchemy model for registered accounts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from quietline.db.session import Base
from quietline.db.time import utcnow


class Account(Base):
    """Registered account.

    Accounts are never hard-deleted. Deleting one scrubs its identifying
    fields in place so relationship and message rows keep a valid target.
    """

    __tablename__ = "account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    handle: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    password_hash: Mapped[str | None] = mapped_column(Text, nullable=True)
    public_key: Mapped[str | None] = mapped_column(Text, nullable=True)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Visibility flags consulted by search.
    shadowed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    exact_handle_match_only: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)

    def scrub(self, placeholder_handle: str) -> None:
        """Replace personal data with a placeholder and mark the row deleted."""
        self.handle = placeholder_handle
        self.password_hash = None
        self.public_key = None
        self.display_name = None
        self.shadowed = True
        self.exact_handle_match_only = True
        self.deleted = True

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, handle={self.handle!r}, deleted={self.deleted})>"
