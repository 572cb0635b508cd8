# src/quietline/services/__init__.py
"""Business logic services for the Quietline application."""

from .account_service import AccountService
from .base import BaseService, service_operation
from .delivery import DeliveryService
from .message_relay import MessageRelay
from .relationship_service import RelationshipService, RequestDirection

__all__ = [
    "AccountService",
    "BaseService",
    "DeliveryService",
    "MessageRelay",
    "RelationshipService",
    "RequestDirection",
    "service_operation",
]
