# src/quietline/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .accounts import router as accounts_router
from .auth import router as auth_router
from .contacts import router as contacts_router
from .messages import router as messages_router

__all__ = [
    "accounts_router",
    "auth_router",
    "contacts_router",
    "messages_router",
]
