"""initial schema: accounts, relationship edges, pending messages

Revision ID: 3f1c9a2d7b10
Revises:
Create Date: 2026-10-19 09:12:44.518302

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f1c9a2d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the account, relationship_edge and pending_message tables."""
    op.create_table(
        "account",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("handle", sa.String(length=64), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=True),
        sa.Column("public_key", sa.Text(), nullable=True),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.Column("shadowed", sa.Boolean(), nullable=False),
        sa.Column("exact_handle_match_only", sa.Boolean(), nullable=False),
        sa.Column("deleted", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_account_handle"), "account", ["handle"], unique=True)

    op.create_table(
        "relationship_edge",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_low_id", sa.Integer(), nullable=False),
        sa.Column("user_high_id", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(
                "pending", "accepted", "rejected", "ended",
                name="edgestatus",
                native_enum=False,
                length=16,
            ),
            nullable=False,
        ),
        sa.Column("initiator_id", sa.Integer(), nullable=False),
        sa.Column("blocked_by_low", sa.Boolean(), nullable=False),
        sa.Column("blocked_by_high", sa.Boolean(), nullable=False),
        sa.Column("tombstone_holder_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("user_low_id < user_high_id", name="ck_relationship_edge_low_lt_high"),
        sa.ForeignKeyConstraint(["initiator_id"], ["account.id"]),
        sa.ForeignKeyConstraint(["tombstone_holder_id"], ["account.id"]),
        sa.ForeignKeyConstraint(["user_high_id"], ["account.id"]),
        sa.ForeignKeyConstraint(["user_low_id"], ["account.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_low_id", "user_high_id", name="uq_relationship_edge_pair"),
    )
    op.create_index("ix_relationship_edge_user_low_id", "relationship_edge", ["user_low_id"])
    op.create_index("ix_relationship_edge_user_high_id", "relationship_edge", ["user_high_id"])

    op.create_table(
        "pending_message",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("sender_id", sa.Integer(), nullable=False),
        sa.Column("receiver_id", sa.Integer(), nullable=False),
        sa.Column("ciphertext", sa.Text(), nullable=False),
        sa.Column("nonce", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["receiver_id"], ["account.id"]),
        sa.ForeignKeyConstraint(["sender_id"], ["account.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_pending_message_receiver_created", "pending_message", ["receiver_id", "created_at"]
    )
    op.create_index(
        "ix_pending_message_sender_receiver", "pending_message", ["sender_id", "receiver_id"]
    )


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_index("ix_pending_message_sender_receiver", table_name="pending_message")
    op.drop_index("ix_pending_message_receiver_created", table_name="pending_message")
    op.drop_table("pending_message")
    op.drop_index("ix_relationship_edge_user_high_id", table_name="relationship_edge")
    op.drop_index("ix_relationship_edge_user_low_id", table_name="relationship_edge")
    op.drop_table("relationship_edge")
    op.drop_index(op.f("ix_account_handle"), table_name="account")
    op.drop_table("account")
