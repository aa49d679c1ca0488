"""Subscription edges of the social graph (subscriber -> channel)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from channelhub.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User


class Subscription(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    Directed edge: ``subscriber`` follows ``channel``.

    Both ends are accounts. A pair can exist at most once.
    """

    __tablename__ = "subscriptions"

    subscriber_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    channel_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_pair"),
        CheckConstraint("subscriber_id <> channel_id", name="no_self_subscription"),
    )

    subscriber: Mapped[User] = relationship("User", foreign_keys=[subscriber_id])
    channel: Mapped[User] = relationship("User", foreign_keys=[channel_id])
