# src/quietline/api/v1/endpoints/messages.py
"""Ciphertext relay endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from quietline.api.v1.dependencies import CurrentAccountDep, SessionDep, unwrap
from quietline.schemas.message import (
    AcknowledgeResult,
    MessageAcknowledge,
    MessageSend,
    PendingMessageRead,
)
from quietline.services import DeliveryService, MessageRelay

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post("/", response_model=PendingMessageRead, status_code=status.HTTP_201_CREATED)
def send_message(
    payload: MessageSend,
    current_account: CurrentAccountDep,
    db: SessionDep,
) -> PendingMessageRead | None:
    """Queue an end-to-end encrypted message for an accepted contact."""
    result = MessageRelay(db).send(
        current_account.id,
        payload.receiver_id,
        payload.ciphertext,
        nonce=payload.nonce,
    )
    return unwrap(result)


@router.get("/pending", response_model=list[PendingMessageRead])
def fetch_pending(
    current_account: CurrentAccountDep,
    db: SessionDep,
    sender_id: Annotated[int | None, Query(ge=1)] = None,
) -> list[PendingMessageRead] | None:
    """Return messages waiting for the caller, oldest first.

    Fetching does not remove anything; acknowledge once stored on-device.
    """
    return unwrap(DeliveryService(db).fetch_pending(current_account.id, sender_id))


@router.post("/ack", response_model=AcknowledgeResult)
def acknowledge(
    payload: MessageAcknowledge,
    current_account: CurrentAccountDep,
    db: SessionDep,
) -> AcknowledgeResult | None:
    """Purge messages the caller has stored on-device."""
    return unwrap(DeliveryService(db).acknowledge(current_account.id, payload.message_ids))
