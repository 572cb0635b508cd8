# src/quietline/api/v1/endpoints/accounts.py
"""Account profile and search endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from quietline.api.v1.dependencies import CurrentAccountDep, SessionDep, unwrap
from quietline.schemas.account import AccountPrivate, AccountRead, AccountUpdate
from quietline.services import AccountService

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get("/me", response_model=AccountPrivate)
def read_me(current_account: CurrentAccountDep, db: SessionDep) -> AccountPrivate | None:
    """Return the caller's own account."""
    return unwrap(AccountService(db).get_own_account(current_account.id))


@router.patch("/me", response_model=AccountPrivate)
def update_me(
    payload: AccountUpdate,
    current_account: CurrentAccountDep,
    db: SessionDep,
) -> AccountPrivate | None:
    """Update handle, password, profile fields or search visibility."""
    return unwrap(AccountService(db).update_account(current_account.id, payload))


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def delete_me(current_account: CurrentAccountDep, db: SessionDep) -> Response:
    """Delete the caller's account and everything queued for or by it."""
    unwrap(AccountService(db).delete_account(current_account.id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/search", response_model=list[AccountRead])
def search_accounts(
    current_account: CurrentAccountDep,
    db: SessionDep,
    q: Annotated[str, Query(min_length=1, max_length=64)],
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> list[AccountRead] | None:
    """Find other accounts by handle."""
    return unwrap(AccountService(db).search_accounts(current_account.id, q, limit=limit))


@router.get("/{account_id}", response_model=AccountRead)
def read_account(
    account_id: int,
    current_account: CurrentAccountDep,
    db: SessionDep,
) -> AccountRead | None:
    """Return public data for an account, including its public key."""
    return unwrap(AccountService(db).get_account(account_id))
