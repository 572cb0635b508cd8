# src/quietline/api/v1/endpoints/auth.py
"""Registration and login endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from quietline.api.v1.dependencies import SessionDep, unwrap
from quietline.schemas.account import AccountCreate, AccountPrivate, LoginRequest, LoginResponse
from quietline.services import AccountService

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=AccountPrivate, status_code=status.HTTP_201_CREATED)
def register(payload: AccountCreate, db: SessionDep) -> AccountPrivate | None:
    """Create a new account."""
    result = AccountService(db).create_account(
        payload.handle,
        payload.password,
        public_key=payload.public_key,
        display_name=payload.display_name,
    )
    return unwrap(result)


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: SessionDep) -> LoginResponse | None:
    """Exchange a handle and password for an access token."""
    return unwrap(AccountService(db).authenticate(payload.handle, payload.password))
