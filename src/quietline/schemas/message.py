"""Pending message Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field

from quietline.schemas.common import UtcDatetime


class MessageSend(BaseModel):
    """Schema for posting a new ciphertext message."""

    receiver_id: int = Field(..., description="Account id of the receiver")
    ciphertext: str = Field(..., description="Encrypted payload, opaque to the server")
    nonce: str | None = Field(None, description="Optional nonce or header for the client cipher")


class MessageAcknowledge(BaseModel):
    """Message ids the receiver has stored on-device."""

    message_ids: list[int] = Field(..., description="Ids of messages to purge")


class PendingMessageRead(BaseModel):
    """Pending message returned to its receiver."""

    id: int
    sender_id: int
    receiver_id: int
    ciphertext: str
    nonce: str | None
    created_at: UtcDatetime

    model_config = ConfigDict(from_attributes=True)


class AcknowledgeResult(BaseModel):
    """Ids actually purged by an acknowledge call."""

    purged_ids: list[int]
