"""Password hashing and JWT helpers."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError
from jose import JWTError, jwt

from quietline.core.settings import Settings

# Argon2id with 64 MiB memory and 4 passes.
_password_hasher = PasswordHasher(
    time_cost=4,
    memory_cost=2**16,
    parallelism=2,
    hash_len=32,
)


def hash_password(password: str) -> str:
    """Return an Argon2id hash of ``password``."""
    return _password_hasher.hash(password)


def verify_password(password_hash: str | None, password: str) -> bool:
    """Check ``password`` against a stored hash.

    Scrubbed accounts carry no hash and never verify.
    """
    if not password_hash:
        return False
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerificationError, InvalidHash):
        return False


def create_access_token(
    account_id: int,
    handle: str,
    config: Settings,
    expires_minutes: int | None = None,
) -> str:
    """Create a signed JWT access token for an account."""
    minutes = expires_minutes if expires_minutes is not None else config.access_token_expire_minutes
    to_encode: dict[str, object] = {
        "sub": str(account_id),
        "handle": handle,
        "exp": datetime.now(UTC) + timedelta(minutes=minutes),
    }
    encoded_jwt: str = jwt.encode(
        to_encode,
        config.secret_key,
        algorithm=config.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str, config: Settings) -> int | None:
    """Return the account id carried by ``token``, or None if it is invalid."""
    try:
        payload = jwt.decode(token, config.secret_key, algorithms=[config.jwt_algorithm])
    except JWTError:
        return None
    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        return int(subject)
    except (TypeError, ValueError):
        return None
