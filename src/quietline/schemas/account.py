"""Account-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field

from quietline.schemas.common import UtcDatetime


class AccountCreate(BaseModel):
    """Schema for registering a new account."""

    handle: str = Field(..., description="Unique handle, 3-20 characters of [A-Za-z0-9_]")
    password: str = Field(..., description="Plain-text password, hashed server-side")
    public_key: str | None = Field(None, description="Client public key, opaque to the server")
    display_name: str | None = Field(None, max_length=100, description="Optional display name")


class AccountUpdate(BaseModel):
    """Partial update of the caller's own account."""

    handle: str | None = None
    password: str | None = None
    public_key: str | None = None
    display_name: str | None = Field(None, max_length=100)
    shadowed: bool | None = None
    exact_handle_match_only: bool | None = None


class LoginRequest(BaseModel):
    """Schema for login submissions."""

    handle: str
    password: str


class AccountRead(BaseModel):
    """Public account information."""

    id: int
    handle: str
    display_name: str | None
    public_key: str | None
    created_at: UtcDatetime

    model_config = ConfigDict(from_attributes=True)


class AccountPrivate(AccountRead):
    """Account information visible to its owner."""

    shadowed: bool
    exact_handle_match_only: bool


class LoginResponse(BaseModel):
    """Response returned after successful login."""

    account: AccountPrivate
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type")
