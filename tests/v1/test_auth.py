# tests/v1/test_auth.py
"""Tests for registration, login and bearer authentication."""

from fastapi import status


def test_register_and_login(client) -> None:
    response = client.post(
        "/api/v1/auth/register",
        json={"handle": "gina", "password": "pw-gina", "public_key": "pk-gina"},
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["handle"] == "gina"
    assert "password_hash" not in response.json()

    response = client.post("/api/v1/auth/login", json={"handle": "gina", "password": "pw-gina"})
    assert response.status_code == status.HTTP_200_OK
    token = response.json()["access_token"]

    me = client.get("/api/v1/accounts/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["public_key"] == "pk-gina"


def test_register_duplicate_handle(client, alice) -> None:
    response = client.post("/api/v1/auth/register", json={"handle": "alice", "password": "x"})

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["detail"] == "Username already exists"


def test_register_invalid_handle(client) -> None:
    response = client.post("/api/v1/auth/register", json={"handle": "a!", "password": "x"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_login_with_wrong_password(client) -> None:
    client.post("/api/v1/auth/register", json={"handle": "hank", "password": "right"})

    response = client.post("/api/v1/auth/login", json={"handle": "hank", "password": "wrong"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Invalid username or password"


def test_missing_token_is_rejected(client) -> None:
    response = client.get("/api/v1/contacts/")

    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}


def test_garbage_token_is_rejected(client) -> None:
    response = client.get("/api/v1/contacts/", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Could not validate credentials"


def test_token_for_deleted_account_is_rejected(client, alice, alice_headers) -> None:
    assert client.delete("/api/v1/accounts/me", headers=alice_headers).status_code == status.HTTP_204_NO_CONTENT

    response = client.get("/api/v1/accounts/me", headers=alice_headers)

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
