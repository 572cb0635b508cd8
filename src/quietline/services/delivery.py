"""Read and acknowledge path for receivers draining their pending messages.

Fetching never deletes: a client may fetch the same messages any number of
times. Acknowledging is the only way content leaves the relay, and clients
must do it only after the messages are stored on the device.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from quietline.core.errors import InvalidInputError
from quietline.core.settings import Settings
from quietline.repositories import MessageRepository
from quietline.schemas.message import AcknowledgeResult, PendingMessageRead

from .base import BaseService, service_operation

logger = logging.getLogger(__name__)


class DeliveryService(BaseService):
    """Delivery access layer over the pending-message store."""

    def __init__(self, session: Session, config: Settings | None = None) -> None:
        super().__init__(session, config)
        self.messages = MessageRepository(self.session)

    @service_operation()
    def fetch_pending(self, for_user: int, from_counterpart: int | None = None) -> list[PendingMessageRead]:
        """Return messages waiting for ``for_user``, oldest first.

        Args:
            for_user: The receiving account.
            from_counterpart: Restrict to messages from this sender.
        """
        self.require_valid_ids(for_user)
        if from_counterpart is not None:
            self.require_valid_ids(from_counterpart)
        self.require_account(for_user)
        messages = self.messages.list_for_receiver(for_user, from_counterpart)
        return [PendingMessageRead.model_validate(message) for message in messages]

    @service_operation()
    def acknowledge(self, for_user: int, message_ids: list[int]) -> AcknowledgeResult:
        """Purge delivered messages addressed to ``for_user``.

        Ids that are unknown or addressed to someone else are ignored.
        """
        self.require_valid_ids(for_user)
        if not message_ids:
            raise InvalidInputError("No message ids given")
        if not all(self.is_valid_id(message_id) for message_id in message_ids):
            raise InvalidInputError("Invalid message ID")
        self.require_account(for_user)

        purged = self.messages.delete_for_receiver(for_user, message_ids)
        skipped = len(set(message_ids)) - len(purged)
        if skipped:
            logger.debug("Acknowledge by %s skipped %d unmatched ids", for_user, skipped)
        logger.debug("Purged %d delivered messages for %s", len(purged), for_user)
        return AcknowledgeResult(purged_ids=purged)
