# src/quietline/models/pending_message.py
"""Models describing messages waiting to be collected by their receiver."""

from datetime import datetime

from sqlalchemy import ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from quietline.db.session import Base
from quietline.db.time import utcnow


class PendingMessage(Base):
    """Encrypted message held until the receiver acknowledges it.

    The server is a relay, not an archive: rows are deleted as soon as the
    receiver confirms it has stored the message on-device.
    """

    __tablename__ = "pending_message"
    __table_args__ = (
        Index("ix_pending_message_receiver_created", "receiver_id", "created_at"),
        Index("ix_pending_message_sender_receiver", "sender_id", "receiver_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    sender_id: Mapped[int] = mapped_column(Integer, ForeignKey("account.id"), nullable=False)
    receiver_id: Mapped[int] = mapped_column(Integer, ForeignKey("account.id"), nullable=False)

    # Opaque payload as submitted by the client; never decoded server-side.
    ciphertext: Mapped[str] = mapped_column(Text, nullable=False)
    # Optional per-message nonce or header for the client's cipher.
    nonce: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=utcnow)
