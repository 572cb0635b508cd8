# src/quietline/models/__init__.py
"""SQLAlchemy models for the Quietline application."""

from .account import Account
from .pending_message import PendingMessage
from .relationship import EdgeStatus, RelationshipEdge, RelationshipState

__all__ = [
    "Account",
    "PendingMessage",
    "EdgeStatus", "RelationshipEdge", "RelationshipState",
]
