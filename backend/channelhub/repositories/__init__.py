"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from channelhub.repositories.base import BaseRepository
from channelhub.repositories.subscription import SubscriptionRepository
from channelhub.repositories.user import UserRepository
from channelhub.repositories.video import VideoRepository

__all__ = [
    "BaseRepository",
    "SubscriptionRepository",
    "UserRepository",
    "VideoRepository",
]
