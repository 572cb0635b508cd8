"""Relationship-related Pydantic schemas."""

from pydantic import BaseModel, Field

from quietline.models.relationship import RelationshipState
from quietline.schemas.common import UtcDatetime


class ContactRequestCreate(BaseModel):
    """Schema for sending a contact request."""

    target_id: int = Field(..., description="Account id of the requested contact")


class BlockUpdate(BaseModel):
    """Schema for toggling the block on a contact."""

    blocked: bool


class ContactRead(BaseModel):
    """A relationship as seen by one of its two accounts."""

    owner_id: int
    counterpart_id: int
    handle: str
    display_name: str | None = None
    state: RelationshipState
    created_at: UtcDatetime
