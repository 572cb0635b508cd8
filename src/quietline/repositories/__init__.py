"""Data access helpers for accounts, relationship edges and pending messages."""

from .account_repo import AccountRepository
from .message_repo import MessageRepository
from .relationship_repo import RelationshipRepository

__all__ = ["AccountRepository", "MessageRepository", "RelationshipRepository"]
