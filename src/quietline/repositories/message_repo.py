"""Data access helpers for pending messages."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.orm import Session

from quietline.models.pending_message import PendingMessage

__all__ = ["MessageRepository"]


class MessageRepository:
    """Thin wrapper around database access for pending messages."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def add(self, *, sender_id: int, receiver_id: int, ciphertext: str, nonce: str | None) -> PendingMessage:
        """Insert a pending message and return the persisted ORM instance."""
        message = PendingMessage(
            sender_id=sender_id,
            receiver_id=receiver_id,
            ciphertext=ciphertext,
            nonce=nonce,
        )
        self.session.add(message)
        self.session.flush()
        return message

    def list_for_receiver(self, receiver_id: int, sender_id: int | None = None) -> list[PendingMessage]:
        """Return messages waiting for ``receiver_id``, oldest first."""
        stmt = select(PendingMessage).where(PendingMessage.receiver_id == receiver_id)
        if sender_id is not None:
            stmt = stmt.where(PendingMessage.sender_id == sender_id)
        stmt = stmt.order_by(PendingMessage.created_at.asc(), PendingMessage.id.asc())
        return list(self.session.execute(stmt).scalars())

    def delete_for_receiver(self, receiver_id: int, message_ids: Iterable[int]) -> list[int]:
        """Delete the named messages owned by ``receiver_id`` and return their ids.

        Ids that belong to another receiver, or no longer exist, are skipped.
        """
        ids = sorted(set(message_ids))
        if not ids:
            return []
        owned = list(
            self.session.execute(
                select(PendingMessage.id).where(
                    PendingMessage.receiver_id == receiver_id,
                    PendingMessage.id.in_(ids),
                )
            ).scalars()
        )
        if owned:
            self.session.execute(
                delete(PendingMessage)
                .where(
                    PendingMessage.receiver_id == receiver_id,
                    PendingMessage.id.in_(owned),
                )
            )
        return owned

    def delete_from_sender(self, sender_id: int, receiver_id: int) -> int:
        """Delete undelivered messages sent from ``sender_id`` to ``receiver_id``."""
        result = self.session.execute(
            delete(PendingMessage)
            .where(
                PendingMessage.sender_id == sender_id,
                PendingMessage.receiver_id == receiver_id,
            )
        )
        return result.rowcount or 0

    def delete_between(self, first_id: int, second_id: int) -> int:
        """Delete undelivered messages in both directions between two accounts."""
        result = self.session.execute(
            delete(PendingMessage)
            .where(
                or_(
                    and_(PendingMessage.sender_id == first_id, PendingMessage.receiver_id == second_id),
                    and_(PendingMessage.sender_id == second_id, PendingMessage.receiver_id == first_id),
                )
            )
        )
        return result.rowcount or 0

    def delete_involving(self, account_id: int) -> int:
        """Delete every undelivered message sent to or from ``account_id``."""
        result = self.session.execute(
            delete(PendingMessage)
            .where(
                or_(
                    PendingMessage.sender_id == account_id,
                    PendingMessage.receiver_id == account_id,
                )
            )
        )
        return result.rowcount or 0
