# src/quietline/api/v1/endpoints/contacts.py
"""Contact relationship endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Response, status

from quietline.api.v1.dependencies import CurrentAccountDep, SessionDep, unwrap
from quietline.models.relationship import RelationshipState
from quietline.schemas.relationship import BlockUpdate, ContactRead, ContactRequestCreate
from quietline.services import RelationshipService, RequestDirection

router = APIRouter(prefix="/contacts", tags=["contacts"])


def _state_payload(target_id: int, state: RelationshipState | None) -> dict[str, Any]:
    return {"target_id": target_id, "state": state.value if state is not None else None}


@router.get("/", response_model=list[ContactRead])
def list_contacts(current_account: CurrentAccountDep, db: SessionDep) -> list[ContactRead] | None:
    """Return every relationship visible to the caller."""
    return unwrap(RelationshipService(db).list_contacts(current_account.id))


@router.post("/", status_code=status.HTTP_201_CREATED)
def request_contact(
    payload: ContactRequestCreate,
    current_account: CurrentAccountDep,
    db: SessionDep,
) -> dict[str, Any]:
    """Send a contact request."""
    state = unwrap(RelationshipService(db).request(current_account.id, payload.target_id))
    return _state_payload(payload.target_id, state)


@router.get("/requests/{direction}", response_model=list[ContactRead])
def list_requests(
    direction: RequestDirection,
    current_account: CurrentAccountDep,
    db: SessionDep,
) -> list[ContactRead] | None:
    """Return pending requests received (incoming) or sent (outgoing)."""
    return unwrap(RelationshipService(db).list_requests(current_account.id, direction))


@router.post("/{target_id}/accept")
def accept_request(target_id: int, current_account: CurrentAccountDep, db: SessionDep) -> dict[str, Any]:
    """Accept a pending request from ``target_id``."""
    state = unwrap(RelationshipService(db).accept(current_account.id, target_id))
    return _state_payload(target_id, state)


@router.post("/{target_id}/reject")
def reject_request(target_id: int, current_account: CurrentAccountDep, db: SessionDep) -> dict[str, Any]:
    """Reject a pending request from ``target_id``."""
    state = unwrap(RelationshipService(db).reject(current_account.id, target_id))
    return _state_payload(target_id, state)


@router.put("/{target_id}/block")
def set_blocked(
    target_id: int,
    payload: BlockUpdate,
    current_account: CurrentAccountDep,
    db: SessionDep,
) -> dict[str, Any]:
    """Block or unblock an accepted contact."""
    state = unwrap(RelationshipService(db).set_blocked(current_account.id, target_id, payload.blocked))
    return _state_payload(target_id, state)


@router.get("/{target_id}")
def read_contact(target_id: int, current_account: CurrentAccountDep, db: SessionDep) -> dict[str, Any]:
    """Return the caller's view of the relationship with ``target_id``."""
    state = unwrap(RelationshipService(db).get_state(current_account.id, target_id))
    if state is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found")
    return _state_payload(target_id, state)


@router.delete("/{target_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_contact(target_id: int, current_account: CurrentAccountDep, db: SessionDep) -> Response:
    """Remove a contact, or withdraw or dismiss a pending request."""
    unwrap(RelationshipService(db).remove(current_account.id, target_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
