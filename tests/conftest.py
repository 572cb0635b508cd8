# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "quietline-test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from quietline.core.security import create_access_token
from quietline.core.settings import Settings
from quietline.db.session import Base, create_tables, engine_options
from quietline.db.session import get_db as app_get_session
from quietline.main import app as fastapi_app
from quietline.models import Account
from quietline.services import AccountService, DeliveryService, MessageRelay, RelationshipService

TEST_DB_URL = "sqlite://"

_HANDLE_COUNTER = count(1)
_TEST_SETTINGS_INSTANCE = Settings()


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(TEST_DB_URL, poolclass=StaticPool, **engine_options(TEST_DB_URL))
    create_tables(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    # Services commit their own transactions, so isolation comes from wiping
    # every table after the test rather than from an outer rollback.
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide a Settings instance aligned with runtime configuration."""
    return _TEST_SETTINGS_INSTANCE


@pytest.fixture()
def make_account(db_session: Session) -> Callable[..., Account]:
    """Return a factory that persists accounts without hashing a password."""

    def _make(handle: str | None = None, **fields: Any) -> Account:
        account = Account(
            handle=handle or f"user_{next(_HANDLE_COUNTER)}",
            password_hash=fields.pop("password_hash", None),
            public_key=fields.pop("public_key", "pk-test"),
            display_name=fields.pop("display_name", None),
            shadowed=fields.pop("shadowed", False),
            exact_handle_match_only=fields.pop("exact_handle_match_only", False),
            deleted=fields.pop("deleted", False),
        )
        db_session.add(account)
        db_session.commit()
        db_session.refresh(account)
        return account

    return _make


@pytest.fixture()
def alice(make_account: Callable[..., Account]) -> Account:
    return make_account("alice", display_name="Alice")


@pytest.fixture()
def bob(make_account: Callable[..., Account]) -> Account:
    return make_account("bob", display_name="Bob")


@pytest.fixture()
def carol(make_account: Callable[..., Account]) -> Account:
    return make_account("carol", display_name="Carol")


@pytest.fixture()
def relationships(db_session: Session, test_settings: Settings) -> RelationshipService:
    return RelationshipService(db_session, test_settings)


@pytest.fixture()
def relay(db_session: Session, test_settings: Settings) -> MessageRelay:
    return MessageRelay(db_session, test_settings)


@pytest.fixture()
def delivery(db_session: Session, test_settings: Settings) -> DeliveryService:
    return DeliveryService(db_session, test_settings)


@pytest.fixture()
def account_service(db_session: Session, test_settings: Settings) -> AccountService:
    return AccountService(db_session, test_settings)


@pytest.fixture()
def befriend(relationships: RelationshipService) -> Callable[[Account, Account], None]:
    """Return a helper that makes two accounts accepted contacts."""

    def _befriend(requester: Account, responder: Account) -> None:
        assert relationships.request(requester.id, responder.id).ok
        assert relationships.accept(responder.id, requester.id).ok

    return _befriend


@pytest.fixture()
def headers_for(test_settings: Settings) -> Callable[[Account], dict[str, str]]:
    """Return a helper building authorization headers for an account."""

    def _headers(account: Account) -> dict[str, str]:
        token = create_access_token(account.id, account.handle, test_settings)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def alice_headers(alice: Account, headers_for: Callable[[Account], dict[str, str]]) -> dict[str, str]:
    return headers_for(alice)


@pytest.fixture()
def bob_headers(bob: Account, headers_for: Callable[[Account], dict[str, str]]) -> dict[str, str]:
    return headers_for(bob)
