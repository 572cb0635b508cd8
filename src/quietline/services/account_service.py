"""Account registration, lookup, search and soft deletion."""
from __future__ import annotations

import logging
import re
import secrets

from fastapi import status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from quietline.core import security
from quietline.core.errors import ConflictError, InvalidInputError, NotFoundError, UnauthorizedError
from quietline.models.account import Account
from quietline.repositories import MessageRepository
from quietline.schemas.account import AccountPrivate, AccountRead, AccountUpdate, LoginResponse

from .base import BaseService, service_operation
from .relationship_service import RelationshipService

logger = logging.getLogger(__name__)

HANDLE_PATTERN = re.compile(r"^[A-Za-z0-9_]{3,20}$")
HANDLE_RULES = (
    "Username must be valid string between 3 and 20 characters and can only "
    "contain letters, numbers, and underscores"
)
DELETED_HANDLE_PREFIX = "deleted_"


def is_valid_handle(handle: object) -> bool:
    """Return True if ``handle`` satisfies the handle rules."""
    return isinstance(handle, str) and HANDLE_PATTERN.fullmatch(handle) is not None


class AccountService(BaseService):
    """Identity store operations."""

    def _require_handle_available(self, handle: str, exclude_id: int | None = None) -> None:
        if not is_valid_handle(handle):
            raise InvalidInputError(HANDLE_RULES)
        if self.accounts.handle_taken(handle, exclude_id=exclude_id):
            raise ConflictError("Username already exists")

    @staticmethod
    def _require_password(password: object) -> str:
        if not isinstance(password, str) or not password:
            raise InvalidInputError("Password must be valid string")
        return password

    def exists(self, account_id: int) -> bool:
        """Return True if a live account with ``account_id`` exists."""
        if not self.is_valid_id(account_id):
            return False
        try:
            return self.accounts.get_active(account_id) is not None
        except SQLAlchemyError:
            logger.exception("Could not check existence of account %s", account_id)
            return False

    @service_operation(success_status=status.HTTP_201_CREATED)
    def create_account(
        self,
        handle: str,
        password: str,
        public_key: str | None = None,
        display_name: str | None = None,
    ) -> AccountPrivate:
        """Register a new account."""
        self._require_handle_available(handle)
        self._require_password(password)
        account = Account(
            handle=handle,
            password_hash=security.hash_password(password),
            public_key=public_key,
            display_name=display_name,
            shadowed=False,
            exact_handle_match_only=False,
            deleted=False,
        )
        try:
            self.accounts.add(account)
        except IntegrityError as err:
            raise ConflictError("Username already exists") from err
        logger.info("Registered account %s (%s)", account.id, account.handle)
        return AccountPrivate.model_validate(account)

    @service_operation()
    def get_account(self, account_id: int) -> AccountRead:
        """Return public data for a live account."""
        self.require_valid_ids(account_id)
        return AccountRead.model_validate(self.require_account(account_id))

    @service_operation()
    def get_own_account(self, account_id: int) -> AccountPrivate:
        """Return the account including its visibility settings."""
        self.require_valid_ids(account_id)
        return AccountPrivate.model_validate(self.require_account(account_id))

    @service_operation()
    def authenticate(self, handle: str, password: str) -> LoginResponse:
        """Verify credentials and issue an access token."""
        if not isinstance(handle, str) or not handle or not isinstance(password, str) or not password:
            raise InvalidInputError("Username and password are required")
        account = self.accounts.get_by_handle(handle)
        if account is None or not security.verify_password(account.password_hash, password):
            raise UnauthorizedError("Invalid username or password")
        token = security.create_access_token(account.id, account.handle, self.config)
        return LoginResponse(
            account=AccountPrivate.model_validate(account),
            access_token=token,
            token_type="bearer",
        )

    @service_operation()
    def update_account(self, account_id: int, update: AccountUpdate) -> AccountPrivate:
        """Apply a partial update to an account."""
        self.require_valid_ids(account_id)
        account = self.require_account(account_id)
        changes = update.model_dump(exclude_unset=True)

        if "handle" in changes:
            handle = changes.pop("handle")
            if handle != account.handle:
                self._require_handle_available(handle, exclude_id=account_id)
                account.handle = handle
        if "password" in changes:
            password = self._require_password(changes.pop("password"))
            account.password_hash = security.hash_password(password)
        for key in ("shadowed", "exact_handle_match_only"):
            if key in changes and changes[key] is None:
                raise InvalidInputError(f"{key} must be a boolean")
        for key, value in changes.items():
            setattr(account, key, value)

        try:
            self.session.flush()
        except IntegrityError as err:
            raise ConflictError("Username already exists") from err
        return AccountPrivate.model_validate(account)

    @service_operation()
    def search_accounts(self, viewer_id: int, query: str, limit: int | None = None) -> list[AccountRead]:
        """Find accounts by handle, honouring each account's visibility flags."""
        self.require_valid_ids(viewer_id)
        if not isinstance(query, str) or not query.strip():
            raise InvalidInputError("Search query must not be empty")
        max_results = self.config.search_result_limit
        if limit is not None:
            if not self.is_valid_id(limit):
                raise InvalidInputError("Limit must be a positive integer")
            max_results = min(limit, max_results)
        matches = self.accounts.search(query.strip(), exclude_id=viewer_id, limit=max_results)
        return [AccountRead.model_validate(account) for account in matches]

    @service_operation()
    def delete_account(self, account_id: int) -> None:
        """Soft-delete an account by scrubbing it in place.

        Relationships are removed as if the account had removed each contact,
        and every pending message to or from it is purged.
        """
        self.require_valid_ids(account_id)
        account = self.accounts.get_by_id(account_id)
        if account is None or account.deleted:
            raise NotFoundError("User not found")

        relationships = RelationshipService(self.session, self.config)
        ended = relationships.detach_account(account_id)
        purged = MessageRepository(self.session).delete_involving(account_id)

        account.scrub(f"{DELETED_HANDLE_PREFIX}{secrets.token_hex(8)}")
        self.session.flush()
        logger.info(
            "Deleted account %s; ended %d relationships, purged %d pending messages",
            account_id, ended, purged,
        )
        return None
