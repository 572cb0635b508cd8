"""Shared plumbing for service classes: validation and the operation boundary."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any

from fastapi import status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quietline.core.errors import InvalidInputError, NotFoundError, ServiceError, TransientStorageError
from quietline.core.settings import Settings, settings as default_settings
from quietline.models.account import Account
from quietline.repositories import AccountRepository
from quietline.schemas.common import ServiceResponse

logger = logging.getLogger(__name__)

TRANSIENT_FAILURE_MESSAGE = "Storage temporarily unavailable, please retry"


def service_operation(
    success_status: int = status.HTTP_200_OK,
) -> Callable[[Callable[..., Any]], Callable[..., ServiceResponse[Any]]]:
    """Run a service method as one transaction and wrap its outcome.

    The wrapped method returns its payload or raises a ``ServiceError``.
    On success the session is committed and the payload is returned in a
    ``ServiceResponse`` with ``success_status``. Any failure rolls the whole
    transaction back, so partial writes are never visible. Storage errors
    are logged and reported with a generic message only.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., ServiceResponse[Any]]:
        @functools.wraps(func)
        def wrapper(self: BaseService, *args: Any, **kwargs: Any) -> ServiceResponse[Any]:
            try:
                data = func(self, *args, **kwargs)
                self.session.commit()
            except ServiceError as err:
                self.session.rollback()
                logger.info("%s rejected (%d): %s", func.__qualname__, err.status_code, err.message)
                return ServiceResponse(status_code=err.status_code, error=err.message)
            except SQLAlchemyError:
                self.session.rollback()
                logger.exception("Storage failure during %s", func.__qualname__)
                failure = TransientStorageError(TRANSIENT_FAILURE_MESSAGE)
                return ServiceResponse(status_code=failure.status_code, error=failure.message)
            return ServiceResponse(status_code=success_status, data=data)

        return wrapper

    return decorator


class BaseService:
    """Common state and validation helpers for the service layer.

    Services are built per request around a session; the configuration is
    fixed for the lifetime of the process.
    """

    def __init__(self, session: Session, config: Settings | None = None) -> None:
        self.session = session
        self.config = config if config is not None else default_settings
        self.accounts = AccountRepository(session)

    @staticmethod
    def is_valid_id(value: object) -> bool:
        """Return True for positive integers (booleans excluded)."""
        return isinstance(value, int) and not isinstance(value, bool) and value > 0

    def require_valid_ids(self, *ids: object) -> None:
        """Raise ``InvalidInputError`` unless every id is well formed."""
        if not all(self.is_valid_id(value) for value in ids):
            raise InvalidInputError("Invalid user ID")

    def require_account(self, account_id: int) -> Account:
        """Return the live account or raise ``NotFoundError``."""
        account = self.accounts.get_active(account_id)
        if account is None:
            raise NotFoundError("User not found")
        return account

    def require_pair(self, owner_id: int, target_id: int, self_message: str) -> tuple[Account, Account]:
        """Validate an acting account and its target before any state is touched."""
        self.require_valid_ids(owner_id, target_id)
        if owner_id == target_id:
            raise InvalidInputError(self_message)
        owner = self.require_account(owner_id)
        target = self.require_account(target_id)
        return owner, target
