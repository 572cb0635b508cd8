"""Admission of new ciphertext messages into the relay.

The relay holds a message only until its receiver acknowledges it. A
message is admitted only while the relationship allows the sender to
write to the receiver; the check and the insert share a transaction so a
block or removal cannot slip in between them.
"""

from __future__ import annotations

import logging

from fastapi import status
from sqlalchemy.orm import Session

from quietline.core.errors import ForbiddenError, InvalidInputError
from quietline.core.settings import Settings
from quietline.repositories import MessageRepository, RelationshipRepository
from quietline.schemas.message import PendingMessageRead

from .base import BaseService, service_operation
from .relationship_service import SendDenial, send_denial

logger = logging.getLogger(__name__)

_DENIAL_MESSAGES = {
    SendDenial.YOU_BLOCKED: "Cannot message, you have blocked this user",
}
# Every other denial, including being blocked, reads the same to the sender.
_GENERIC_DENIAL = "Cannot send message to this user"


class MessageRelay(BaseService):
    """Accepts opaque ciphertext for later collection by the receiver."""

    def __init__(self, session: Session, config: Settings | None = None) -> None:
        super().__init__(session, config)
        self.edges = RelationshipRepository(self.session)
        self.messages = MessageRepository(self.session)

    def _check_payload(self, ciphertext: object, nonce: object) -> None:
        if not isinstance(ciphertext, str) or not ciphertext:
            raise InvalidInputError("Message content must be a non-empty string")
        if len(ciphertext.encode("utf-8")) > self.config.max_ciphertext_bytes:
            raise InvalidInputError(
                f"Message exceeds the maximum size of {self.config.max_ciphertext_bytes} bytes"
            )
        if nonce is not None and not isinstance(nonce, str):
            raise InvalidInputError("Nonce must be a string")

    @service_operation(success_status=status.HTTP_201_CREATED)
    def send(
        self,
        sender_id: int,
        receiver_id: int,
        ciphertext: str,
        nonce: str | None = None,
    ) -> PendingMessageRead:
        """Queue ``ciphertext`` from ``sender_id`` for ``receiver_id``.

        The payload is stored as received and never inspected beyond its
        size.
        """
        self.require_pair(sender_id, receiver_id, "Cannot send message to self")
        self._check_payload(ciphertext, nonce)

        edge = self.edges.get_edge(sender_id, receiver_id, for_update=True)
        denial = send_denial(edge, sender_id, receiver_id)
        if denial is not None:
            logger.debug("Send %s -> %s denied: %s", sender_id, receiver_id, denial.value)
            raise ForbiddenError(_DENIAL_MESSAGES.get(denial, _GENERIC_DENIAL))

        message = self.messages.add(
            sender_id=sender_id,
            receiver_id=receiver_id,
            ciphertext=ciphertext,
            nonce=nonce,
        )
        logger.debug("Queued message %s from %s to %s", message.id, sender_id, receiver_id)
        return PendingMessageRead.model_validate(message)
