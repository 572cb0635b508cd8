# tests/test_models.py
"""Tests for the relationship edge model and its derived views."""

from __future__ import annotations

import pytest

from quietline.models.relationship import (
    EdgeStatus,
    RelationshipEdge,
    RelationshipState,
    canonical_pair,
    view_state,
)

LOW, HIGH, OTHER = 3, 8, 11


def make_edge(status: EdgeStatus, initiator: int = LOW, **fields) -> RelationshipEdge:
    return RelationshipEdge(
        user_low_id=LOW,
        user_high_id=HIGH,
        status=status,
        initiator_id=initiator,
        blocked_by_low=fields.get("blocked_by_low", False),
        blocked_by_high=fields.get("blocked_by_high", False),
        tombstone_holder_id=fields.get("tombstone_holder_id"),
    )


def test_canonical_pair_orders_ids() -> None:
    assert canonical_pair(9, 2) == (2, 9)
    assert canonical_pair(2, 9) == (2, 9)


@pytest.mark.parametrize(
    "edge, expected_low, expected_high",
    [
        (
            make_edge(EdgeStatus.PENDING, initiator=LOW),
            RelationshipState.OUTGOING_REQUEST,
            RelationshipState.INCOMING_REQUEST,
        ),
        (
            make_edge(EdgeStatus.PENDING, initiator=HIGH),
            RelationshipState.INCOMING_REQUEST,
            RelationshipState.OUTGOING_REQUEST,
        ),
        (make_edge(EdgeStatus.ACCEPTED), RelationshipState.ACCEPTED, RelationshipState.ACCEPTED),
        (
            make_edge(EdgeStatus.ACCEPTED, blocked_by_high=True),
            RelationshipState.ACCEPTED,
            RelationshipState.BLOCKED,
        ),
        (
            make_edge(EdgeStatus.ACCEPTED, blocked_by_low=True, blocked_by_high=True),
            RelationshipState.BLOCKED,
            RelationshipState.BLOCKED,
        ),
        (make_edge(EdgeStatus.REJECTED), RelationshipState.REJECTED, RelationshipState.REJECTED),
        (make_edge(EdgeStatus.ENDED, tombstone_holder_id=LOW), RelationshipState.DELETED, None),
        (make_edge(EdgeStatus.ENDED, tombstone_holder_id=HIGH), None, RelationshipState.DELETED),
    ],
)
def test_view_state_pairs(edge, expected_low, expected_high) -> None:
    assert view_state(edge, LOW) == expected_low
    assert view_state(edge, HIGH) == expected_high
    assert edge.state_for(LOW) == expected_low


def test_view_state_for_outsider_or_missing_edge() -> None:
    edge = make_edge(EdgeStatus.ACCEPTED)

    assert view_state(edge, OTHER) is None
    assert view_state(None, LOW) is None


def test_counterpart_and_block_flags() -> None:
    edge = make_edge(EdgeStatus.ACCEPTED)

    edge.set_blocked_by(HIGH, True)

    assert edge.counterpart_of(LOW) == HIGH
    assert edge.counterpart_of(HIGH) == LOW
    assert edge.is_blocked_by(HIGH) is True
    assert edge.is_blocked_by(LOW) is False
    with pytest.raises(ValueError):
        edge.counterpart_of(OTHER)
    with pytest.raises(ValueError):
        edge.set_blocked_by(OTHER, True)
