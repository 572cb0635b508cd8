"""Data access helpers for relationship edges."""
from __future__ import annotations

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session

from quietline.db.time import utcnow
from quietline.models.account import Account
from quietline.models.relationship import EdgeStatus, RelationshipEdge, canonical_pair

__all__ = ["RelationshipRepository"]


class RelationshipRepository:
    """Thin wrapper around database access for relationship edges."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_edge(self, first_id: int, second_id: int, *, for_update: bool = False) -> RelationshipEdge | None:
        """Return the edge between two accounts, if any.

        Args:
            first_id: One endpoint, in either order.
            second_id: The other endpoint.
            for_update: Lock the row for the rest of the transaction where
                the backend supports ``SELECT ... FOR UPDATE``.
        """
        low, high = canonical_pair(first_id, second_id)
        stmt = select(RelationshipEdge).where(
            RelationshipEdge.user_low_id == low,
            RelationshipEdge.user_high_id == high,
        )
        if for_update:
            stmt = stmt.with_for_update()
        # Always reload so a concurrent commit is not masked by the identity map.
        stmt = stmt.execution_options(populate_existing=True)
        return self.session.execute(stmt).scalars().first()

    def create_request(self, initiator_id: int, target_id: int) -> RelationshipEdge:
        """Insert a new pending edge initiated by ``initiator_id``."""
        low, high = canonical_pair(initiator_id, target_id)
        edge = RelationshipEdge(
            user_low_id=low,
            user_high_id=high,
            status=EdgeStatus.PENDING,
            initiator_id=initiator_id,
            blocked_by_low=False,
            blocked_by_high=False,
            tombstone_holder_id=None,
        )
        self.session.add(edge)
        self.session.flush()
        return edge

    def restart_request(self, edge: RelationshipEdge, initiator_id: int) -> RelationshipEdge:
        """Reset a terminal edge into a fresh pending request."""
        edge.status = EdgeStatus.PENDING
        edge.initiator_id = initiator_id
        edge.blocked_by_low = False
        edge.blocked_by_high = False
        edge.tombstone_holder_id = None
        edge.created_at = utcnow()
        self.session.flush()
        return edge

    def resolve_request(self, edge_id: int, initiator_id: int, new_status: EdgeStatus) -> bool:
        """Move a pending edge to ``new_status`` if it is still pending.

        The update only matches while the edge is pending and was initiated
        by ``initiator_id``, so of two racing callers exactly one sees a
        matched row. Returns True if this call performed the transition.
        """
        result = self.session.execute(
            update(RelationshipEdge)
            .where(
                RelationshipEdge.id == edge_id,
                RelationshipEdge.status == EdgeStatus.PENDING,
                RelationshipEdge.initiator_id == initiator_id,
            )
            .values(status=new_status, updated_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        return (result.rowcount or 0) == 1

    def end(self, edge: RelationshipEdge, tombstone_holder_id: int) -> RelationshipEdge:
        """Mark an edge ended, leaving a tombstone for ``tombstone_holder_id``."""
        edge.status = EdgeStatus.ENDED
        edge.tombstone_holder_id = tombstone_holder_id
        edge.blocked_by_low = False
        edge.blocked_by_high = False
        self.session.flush()
        return edge

    def delete(self, edge: RelationshipEdge) -> None:
        """Remove an edge entirely, returning both accounts to strangers."""
        self.session.delete(edge)
        self.session.flush()

    def list_for_account(
        self,
        account_id: int,
        *,
        status: EdgeStatus | None = None,
        initiated_by_account: bool | None = None,
    ) -> list[tuple[RelationshipEdge, Account]]:
        """Return edges touching ``account_id`` together with the counterpart account.

        Args:
            account_id: The account whose relationships are listed.
            status: Restrict to edges in this stored status.
            initiated_by_account: When set, keep only edges whose initiator
                is (True) or is not (False) ``account_id``.
        """
        stmt = select(RelationshipEdge, Account).join(
            Account,
            or_(
                (RelationshipEdge.user_low_id == account_id)
                & (Account.id == RelationshipEdge.user_high_id),
                (RelationshipEdge.user_high_id == account_id)
                & (Account.id == RelationshipEdge.user_low_id),
            ),
        )
        if status is not None:
            stmt = stmt.where(RelationshipEdge.status == status)
        if initiated_by_account is True:
            stmt = stmt.where(RelationshipEdge.initiator_id == account_id)
        elif initiated_by_account is False:
            stmt = stmt.where(RelationshipEdge.initiator_id != account_id)
        stmt = stmt.order_by(Account.handle.asc())
        return [(edge, account) for edge, account in self.session.execute(stmt).all()]

    def list_involving(self, account_id: int) -> list[RelationshipEdge]:
        """Return every edge touching ``account_id``."""
        stmt = select(RelationshipEdge).where(
            or_(
                RelationshipEdge.user_low_id == account_id,
                RelationshipEdge.user_high_id == account_id,
            )
        )
        return list(self.session.execute(stmt).scalars())
