"""Contact relationship state machine.

Each pair of accounts shares at most one :class:`RelationshipEdge` row. The
operations below validate a transition against the acting account's view of
that row, apply it, and purge any pending messages the new state makes
undeliverable, all inside one transaction.
"""

from __future__ import annotations

import logging
from enum import Enum

from fastapi import status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from quietline.core.errors import ConflictError, InvalidInputError, NotFoundError
from quietline.core.settings import Settings
from quietline.models.account import Account
from quietline.models.relationship import (
    ACTIVE_STATUSES,
    EdgeStatus,
    RelationshipEdge,
    RelationshipState,
    view_state,
)
from quietline.repositories import MessageRepository, RelationshipRepository
from quietline.schemas.relationship import ContactRead

from .base import BaseService, service_operation

logger = logging.getLogger(__name__)


class RequestDirection(str, Enum):
    """Which side of a pending request to list."""

    INCOMING = "incoming"
    OUTGOING = "outgoing"


class SendDenial(str, Enum):
    """Why a sender may not post to a receiver."""

    NO_RELATIONSHIP = "no_relationship"
    YOU_BLOCKED = "you_blocked"
    BLOCKED_BY_RECEIVER = "blocked_by_receiver"
    NOT_ACCEPTED = "not_accepted"


def send_denial(edge: RelationshipEdge | None, sender_id: int, receiver_id: int) -> SendDenial | None:
    """Return why ``sender_id`` may not message ``receiver_id``, or None if it may.

    The sender's own view must be accepted, and the receiver must not have
    blocked the sender. The receiver's block is invisible in the sender's
    view, so it is checked against the shared row.
    """
    sender_view = view_state(edge, sender_id)
    if sender_view is None:
        return SendDenial.NO_RELATIONSHIP
    if sender_view == RelationshipState.BLOCKED:
        return SendDenial.YOU_BLOCKED
    if sender_view != RelationshipState.ACCEPTED:
        return SendDenial.NOT_ACCEPTED
    if edge is not None and edge.is_blocked_by(receiver_id):
        return SendDenial.BLOCKED_BY_RECEIVER
    return None


def _contact_view(edge: RelationshipEdge, owner_id: int, counterpart: Account) -> ContactRead | None:
    state = view_state(edge, owner_id)
    if state is None:
        return None
    return ContactRead(
        owner_id=owner_id,
        counterpart_id=counterpart.id,
        handle=counterpart.handle,
        display_name=counterpart.display_name,
        state=state,
        created_at=edge.created_at,
    )


class RelationshipService(BaseService):
    """State machine engine for contact relationships."""

    def __init__(self, session: Session, config: Settings | None = None) -> None:
        super().__init__(session, config)
        self.edges = RelationshipRepository(self.session)
        self.messages = MessageRepository(self.session)

    # ------------------------------------------------------------------
    # Predicates and reads
    # ------------------------------------------------------------------

    def can_send_message(self, sender_id: int, receiver_id: int) -> bool:
        """Return True only if ``sender_id`` may post a message to ``receiver_id``.

        Invalid ids and storage errors answer False rather than raising.
        """
        if not (self.is_valid_id(sender_id) and self.is_valid_id(receiver_id)):
            return False
        if sender_id == receiver_id:
            return False
        try:
            edge = self.edges.get_edge(sender_id, receiver_id)
        except SQLAlchemyError:
            logger.exception("Could not load relationship %s -> %s", sender_id, receiver_id)
            return False
        return send_denial(edge, sender_id, receiver_id) is None

    @service_operation()
    def get_state(self, owner_id: int, target_id: int) -> RelationshipState | None:
        """Return the owner's view of the relationship, or None for strangers."""
        self.require_pair(owner_id, target_id, "Cannot look up a relationship with yourself")
        return view_state(self.edges.get_edge(owner_id, target_id), owner_id)

    @service_operation()
    def list_contacts(self, owner_id: int) -> list[ContactRead]:
        """Return every relationship the owner can see, ordered by handle."""
        self.require_valid_ids(owner_id)
        self.require_account(owner_id)
        contacts: list[ContactRead] = []
        for edge, counterpart in self.edges.list_for_account(owner_id):
            contact = _contact_view(edge, owner_id, counterpart)
            if contact is not None:
                contacts.append(contact)
        return contacts

    @service_operation()
    def list_requests(self, owner_id: int, direction: RequestDirection) -> list[ContactRead]:
        """Return pending requests the owner received or sent."""
        self.require_valid_ids(owner_id)
        self.require_account(owner_id)
        rows = self.edges.list_for_account(
            owner_id,
            status=EdgeStatus.PENDING,
            initiated_by_account=direction == RequestDirection.OUTGOING,
        )
        return [
            contact
            for edge, counterpart in rows
            if (contact := _contact_view(edge, owner_id, counterpart)) is not None
        ]

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    @service_operation(success_status=status.HTTP_201_CREATED)
    def request(self, owner_id: int, target_id: int) -> RelationshipState:
        """Send a contact request from ``owner_id`` to ``target_id``.

        Rejected or ended relationships may be requested again; any pending
        or accepted relationship is a conflict.
        """
        self.require_pair(owner_id, target_id, "Cannot add yourself as a contact")
        edge = self.edges.get_edge(owner_id, target_id, for_update=True)
        if edge is not None and edge.status in ACTIVE_STATUSES:
            raise ConflictError("Contact already exists")

        if edge is None:
            try:
                self.edges.create_request(owner_id, target_id)
            except IntegrityError as err:
                # A concurrent request for the same pair won the insert.
                raise ConflictError("Contact already exists") from err
        else:
            self.edges.restart_request(edge, owner_id)

        logger.info("Contact request %s -> %s", owner_id, target_id)
        return RelationshipState.OUTGOING_REQUEST

    @service_operation()
    def accept(self, owner_id: int, target_id: int) -> RelationshipState:
        """Accept the pending request ``target_id`` sent to ``owner_id``."""
        self._resolve_request(owner_id, target_id, EdgeStatus.ACCEPTED)
        logger.info("Contact request %s -> %s accepted", target_id, owner_id)
        return RelationshipState.ACCEPTED

    @service_operation()
    def reject(self, owner_id: int, target_id: int) -> RelationshipState:
        """Reject the pending request ``target_id`` sent to ``owner_id``."""
        self._resolve_request(owner_id, target_id, EdgeStatus.REJECTED)
        logger.info("Contact request %s -> %s rejected", target_id, owner_id)
        return RelationshipState.REJECTED

    @service_operation()
    def set_blocked(self, owner_id: int, target_id: int, blocked: bool) -> RelationshipState:
        """Block or unblock ``target_id`` on behalf of ``owner_id``.

        Only the owner's side changes; the target keeps seeing an accepted
        relationship. Repeating the current setting is a successful no-op.
        """
        if not isinstance(blocked, bool):
            raise InvalidInputError("Blocked status must be a boolean")
        self.require_pair(owner_id, target_id, "Cannot block yourself")
        edge = self.edges.get_edge(owner_id, target_id, for_update=True)
        current = view_state(edge, owner_id)

        wanted = RelationshipState.BLOCKED if blocked else RelationshipState.ACCEPTED
        if current == wanted:
            return current
        if edge is None or current not in (RelationshipState.ACCEPTED, RelationshipState.BLOCKED):
            raise NotFoundError("Contact not found")

        edge.set_blocked_by(owner_id, blocked)
        self.session.flush()
        if blocked:
            purged = self.messages.delete_from_sender(target_id, owner_id)
            logger.info("%s blocked %s; purged %d pending messages", owner_id, target_id, purged)
        else:
            logger.info("%s unblocked %s", owner_id, target_id)
        return wanted

    @service_operation()
    def remove(self, owner_id: int, target_id: int) -> RelationshipState | None:
        """Remove ``target_id`` from the owner's contacts.

        Returns the target's resulting view: None after a full retraction,
        ``DELETED`` when the target keeps a tombstone.
        """
        self.require_valid_ids(owner_id, target_id)
        if owner_id == target_id:
            raise InvalidInputError("Cannot remove yourself as a contact")
        self.require_account(owner_id)
        # A deleted counterpart still counts, so its tombstone can be cleared.
        if self.accounts.get_by_id(target_id) is None:
            raise NotFoundError("User not found")
        return self._remove_edge(owner_id, target_id)

    # ------------------------------------------------------------------
    # Internals shared with account deletion
    # ------------------------------------------------------------------

    def _resolve_request(self, owner_id: int, target_id: int, new_status: EdgeStatus) -> None:
        self.require_pair(owner_id, target_id, "Cannot respond to a request from yourself")
        edge = self.edges.get_edge(owner_id, target_id)
        if view_state(edge, owner_id) != RelationshipState.INCOMING_REQUEST:
            raise NotFoundError("Contact request not found")
        # Re-checked by the conditional update in case another call won the race.
        if not self.edges.resolve_request(edge.id, target_id, new_status):
            raise NotFoundError("Contact request not found")

    def _remove_edge(self, owner_id: int, target_id: int) -> RelationshipState | None:
        edge = self.edges.get_edge(owner_id, target_id, for_update=True)
        owner_view = view_state(edge, owner_id)
        if edge is None or owner_view is None:
            raise NotFoundError("Contact not found")

        purged = self.messages.delete_between(owner_id, target_id)
        if owner_view in (
            RelationshipState.OUTGOING_REQUEST,
            RelationshipState.INCOMING_REQUEST,
            RelationshipState.DELETED,
        ):
            self.edges.delete(edge)
            logger.info(
                "Relationship %s <-> %s retracted by %s; purged %d pending messages",
                owner_id, target_id, owner_id, purged,
            )
            return None

        self.edges.end(edge, tombstone_holder_id=target_id)
        logger.info(
            "Relationship %s <-> %s ended by %s; purged %d pending messages",
            owner_id, target_id, owner_id, purged,
        )
        return RelationshipState.DELETED

    def detach_account(self, account_id: int) -> int:
        """End every relationship of an account that is being deleted.

        Runs inside the caller's transaction. Returns the number of edges
        that were retracted or ended.
        """
        handled = 0
        for edge in self.edges.list_involving(account_id):
            counterpart_id = edge.counterpart_of(account_id)
            if view_state(edge, account_id) is None:
                # The counterpart keeps its tombstone.
                continue
            self._remove_edge(account_id, counterpart_id)
            handled += 1
        return handled
