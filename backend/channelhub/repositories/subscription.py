"""Subscription repository: channel profile aggregation."""

from __future__ import annotations

from typing import Any

from sqlalchemy import exists, false, func, select

from channelhub.models.subscription import Subscription
from channelhub.models.user import User
from channelhub.repositories.base import BaseRepository


class SubscriptionRepository(BaseRepository[Subscription]):
    """Persistence-only repository for :class:`Subscription` edges."""

    model = Subscription

    def channel_profile(self, username: str, *, viewer_id: int | None) -> Any | None:
        """Load a channel with its social-graph counters in one statement.

        The counters are correlated scalar subqueries on ``subscriptions``:

        - ``subscribers_count``: edges whose channel is the account.
        - ``subscribed_to_count``: edges whose subscriber is the account.
        - ``is_subscribed``: whether ``viewer_id`` has an edge to the account
          (always false for anonymous viewers).

        :returns: Row ``(User, subscribers_count, subscribed_to_count,
            is_subscribed)`` or ``None`` when no account has that username.
        """
        subscribers = (
            select(func.count(Subscription.id))
            .where(Subscription.channel_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        subscribed_to = (
            select(func.count(Subscription.id))
            .where(Subscription.subscriber_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        if viewer_id is None:
            is_subscribed = false()
        else:
            is_subscribed = (
                exists()
                .where(
                    Subscription.channel_id == User.id,
                    Subscription.subscriber_id == viewer_id,
                )
                .correlate(User)
            )

        stmt = select(
            User,
            subscribers.label("subscribers_count"),
            subscribed_to.label("subscribed_to_count"),
            is_subscribed.label("is_subscribed"),
        ).where(User.username == username.strip().lower())
        return self.session.execute(stmt).first()
