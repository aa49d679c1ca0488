"""Factory for subscription edges."""

from __future__ import annotations

import factory
from channelhub.models.subscription import Subscription

from tests.factories import BaseFactory
from tests.factories.user import UserFactory


class SubscriptionFactory(BaseFactory):
    class Meta:
        model = Subscription

    id = None
    subscriber = factory.SubFactory(UserFactory)
    channel = factory.SubFactory(UserFactory)
