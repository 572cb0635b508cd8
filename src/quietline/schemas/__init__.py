# src/quietline/schemas/__init__.py
"""
Pydantic schemas for service envelopes and API request/response models.
"""

from .account import (
    AccountCreate,
    AccountPrivate,
    AccountRead,
    AccountUpdate,
    LoginRequest,
    LoginResponse,
)
from .common import ServiceResponse
from .message import AcknowledgeResult, MessageAcknowledge, MessageSend, PendingMessageRead
from .relationship import BlockUpdate, ContactRead, ContactRequestCreate

__all__ = [
    "AccountCreate", "AccountPrivate", "AccountRead", "AccountUpdate",
    "LoginRequest", "LoginResponse",
    "ServiceResponse",
    "AcknowledgeResult", "MessageAcknowledge", "MessageSend", "PendingMessageRead",
    "BlockUpdate", "ContactRead", "ContactRequestCreate",
]
