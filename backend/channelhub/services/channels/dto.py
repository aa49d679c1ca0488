# channelhub/services/channels/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class ChannelProfileOut:
    """
    Public channel page of an account.

    :param subscribers_count: Accounts subscribed to this channel.
    :param channels_subscribed_to_count: Channels this account subscribes to.
    :param is_subscribed: Whether the viewing account subscribes to it.
    """

    id: int
    full_name: str
    username: str
    email: str
    avatar: str
    cover_image: str | None
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool


@dataclass(frozen=True, slots=True)
class VideoOwnerOut:
    full_name: str
    username: str
    avatar: str


@dataclass(frozen=True, slots=True)
class WatchedVideoOut:
    id: int
    title: str
    description: str
    video_file: str
    thumbnail: str
    duration: float
    views: int
    is_published: bool
    created_at: datetime | None
    owner: VideoOwnerOut
