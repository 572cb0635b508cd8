# src/quietline/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    accounts_router,
    auth_router,
    contacts_router,
    messages_router,
)

__all__ = [
    "accounts_router",
    "auth_router",
    "contacts_router",
    "messages_router",
]
