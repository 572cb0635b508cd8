"""Data access helpers for working with accounts."""
from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from quietline.models.account import Account

__all__ = ["AccountRepository"]


class AccountRepository:
    """Thin wrapper around database access for account entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, account_id: int) -> Account | None:
        """Return an account by identifier, including scrubbed ones."""
        return self.session.get(Account, account_id)

    def get_active(self, account_id: int) -> Account | None:
        """Return an account unless it does not exist or was deleted."""
        account = self.get_by_id(account_id)
        if account is None or account.deleted:
            return None
        return account

    def get_by_handle(self, handle: str) -> Account | None:
        """Return the live account registered under ``handle``."""
        result = self.session.execute(
            select(Account).where(Account.handle == handle, Account.deleted.is_(False))
        )
        return result.scalars().first()

    def handle_taken(self, handle: str, exclude_id: int | None = None) -> bool:
        """Return True if another account already uses ``handle``."""
        stmt = select(Account.id).where(Account.handle == handle)
        if exclude_id is not None:
            stmt = stmt.where(Account.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    def add(self, account: Account) -> Account:
        """Stage a new account and flush so it receives an id."""
        self.session.add(account)
        self.session.flush()
        return account

    def search(self, query: str, exclude_id: int, limit: int) -> list[Account]:
        """Return live, visible accounts matching ``query``.

        Accounts that opted into exact matching are only returned when the
        query equals their handle (case-insensitively).
        """
        needle = query.lower()
        handle_lower = func.lower(Account.handle)
        stmt = (
            select(Account)
            .where(
                Account.deleted.is_(False),
                Account.shadowed.is_(False),
                Account.id != exclude_id,
                or_(
                    handle_lower == needle,
                    (Account.exact_handle_match_only.is_(False))
                    & handle_lower.contains(needle, autoescape=True),
                ),
            )
            .order_by(Account.handle.asc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())
