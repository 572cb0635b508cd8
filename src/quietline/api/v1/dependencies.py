"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated, TypeVar

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from quietline.core.security import decode_access_token
from quietline.core.settings import settings
from quietline.db.session import get_db
from quietline.models import Account
from quietline.repositories import AccountRepository
from quietline.schemas.common import ServiceResponse

T = TypeVar("T")

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_account(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> Account:
    """Get the current authenticated account from the JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        Account row for the authenticated caller

    Raises:
        HTTPException: If the token is invalid or the account no longer exists
    """
    account_id = decode_access_token(credentials.credentials, settings)
    if account_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    account = AccountRepository(db).get_active(account_id)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    return account


# Type alias for current account dependency
CurrentAccountDep = Annotated[Account, Depends(get_current_account)]


def unwrap(result: ServiceResponse[T]) -> T | None:
    """Return the payload of a service result or raise it as an HTTP error."""
    if not result.ok:
        raise HTTPException(status_code=result.status_code, detail=result.error)
    return result.data
