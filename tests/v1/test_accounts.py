# tests/v1/test_accounts.py
"""Tests for account profile and search endpoints."""

from fastapi import status


def test_update_own_account(client, alice_headers) -> None:
    response = client.patch(
        "/api/v1/accounts/me",
        json={"display_name": "Alice Liddell", "shadowed": True},
        headers=alice_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["display_name"] == "Alice Liddell"
    assert response.json()["shadowed"] is True


def test_search_accounts(client, alice_headers, make_account) -> None:
    make_account("bobby")
    make_account("bobcat", exact_handle_match_only=True)
    make_account("bobo", shadowed=True)

    response = client.get("/api/v1/accounts/search", params={"q": "bob"}, headers=alice_headers)

    assert response.status_code == status.HTTP_200_OK
    assert [a["handle"] for a in response.json()] == ["bobby"]


def test_read_account_by_id(client, alice_headers, bob) -> None:
    response = client.get(f"/api/v1/accounts/{bob.id}", headers=alice_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["handle"] == "bob"
    assert "shadowed" not in response.json()


def test_read_unknown_account(client, alice_headers) -> None:
    response = client.get("/api/v1/accounts/99999", headers=alice_headers)

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "User not found"
