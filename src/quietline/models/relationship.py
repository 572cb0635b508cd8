# src/quietline/models/relationship.py
"""Relationship edges between two accounts.

A relationship is stored as a single row per unordered pair of accounts.
Each account's perspective on it (the state shown in that user's contact
list) is derived from the row by :meth:`RelationshipEdge.state_for`, so
the two perspectives can never drift apart.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from quietline.db.session import Base
from quietline.db.time import utcnow


class EdgeStatus(str, Enum):
    """Stored status of the shared edge row."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    ENDED = "ended"


class RelationshipState(str, Enum):
    """One account's view of its relationship with another."""

    INCOMING_REQUEST = "incoming_request"
    OUTGOING_REQUEST = "outgoing_request"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    BLOCKED = "blocked"
    DELETED = "deleted"


# Edge statuses that block a fresh request.
ACTIVE_STATUSES = frozenset({EdgeStatus.PENDING, EdgeStatus.ACCEPTED})


def canonical_pair(first_id: int, second_id: int) -> tuple[int, int]:
    """Return the ids ordered as (low, high), the key the edge is stored under."""
    return (first_id, second_id) if first_id < second_id else (second_id, first_id)


class RelationshipEdge(Base):
    """Relationship between two accounts, keyed by the ordered id pair."""

    __tablename__ = "relationship_edge"
    __table_args__ = (
        UniqueConstraint("user_low_id", "user_high_id", name="uq_relationship_edge_pair"),
        CheckConstraint("user_low_id < user_high_id", name="ck_relationship_edge_low_lt_high"),
        Index("ix_relationship_edge_user_low_id", "user_low_id"),
        Index("ix_relationship_edge_user_high_id", "user_high_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_low_id: Mapped[int] = mapped_column(Integer, ForeignKey("account.id"), nullable=False)
    user_high_id: Mapped[int] = mapped_column(Integer, ForeignKey("account.id"), nullable=False)

    status: Mapped[EdgeStatus] = mapped_column(
        SAEnum(
            EdgeStatus,
            native_enum=False,
            length=16,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
    )

    # Account that sent the current (or most recent) request.
    initiator_id: Mapped[int] = mapped_column(Integer, ForeignKey("account.id"), nullable=False)

    # Per-side block flags; only meaningful while the edge is accepted.
    blocked_by_low: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    blocked_by_high: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Account that keeps a DELETED view after the other side removed the edge.
    tombstone_holder_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("account.id"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    def involves(self, account_id: int) -> bool:
        """Return True if ``account_id`` is one of the two endpoints."""
        return account_id in (self.user_low_id, self.user_high_id)

    def counterpart_of(self, account_id: int) -> int:
        """Return the id on the other end of the edge from ``account_id``."""
        if account_id == self.user_low_id:
            return self.user_high_id
        if account_id == self.user_high_id:
            return self.user_low_id
        raise ValueError(f"account {account_id} is not part of edge {self.id}")

    def is_blocked_by(self, account_id: int) -> bool:
        """Return True if ``account_id`` has blocked the other endpoint."""
        if account_id == self.user_low_id:
            return self.blocked_by_low
        if account_id == self.user_high_id:
            return self.blocked_by_high
        return False

    def set_blocked_by(self, account_id: int, blocked: bool) -> None:
        """Set the block flag owned by ``account_id``."""
        if account_id == self.user_low_id:
            self.blocked_by_low = blocked
        elif account_id == self.user_high_id:
            self.blocked_by_high = blocked
        else:
            raise ValueError(f"account {account_id} is not part of edge {self.id}")

    def state_for(self, account_id: int) -> RelationshipState | None:
        """Return the relationship state as seen by ``account_id``.

        None means the account has no record of the relationship.
        """
        return view_state(self, account_id)

    def __repr__(self) -> str:
        return (
            f"<RelationshipEdge(low={self.user_low_id}, high={self.user_high_id}, "
            f"status={self.status.value}, initiator={self.initiator_id})>"
        )


def view_state(edge: RelationshipEdge | None, account_id: int) -> RelationshipState | None:
    """Derive one account's view of an edge."""
    if edge is None or not edge.involves(account_id):
        return None
    if edge.status == EdgeStatus.PENDING:
        if edge.initiator_id == account_id:
            return RelationshipState.OUTGOING_REQUEST
        return RelationshipState.INCOMING_REQUEST
    if edge.status == EdgeStatus.ACCEPTED:
        if edge.is_blocked_by(account_id):
            return RelationshipState.BLOCKED
        return RelationshipState.ACCEPTED
    if edge.status == EdgeStatus.REJECTED:
        return RelationshipState.REJECTED
    if edge.status == EdgeStatus.ENDED and edge.tombstone_holder_id == account_id:
        return RelationshipState.DELETED
    return None
