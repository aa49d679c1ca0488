# channelhub/services/channels/service.py
from __future__ import annotations

from channelhub.services._shared.base import BaseService
from channelhub.services._shared.errors import InvalidInputError, NotFoundError
from channelhub.services.channels.dto import ChannelProfileOut, VideoOwnerOut, WatchedVideoOut


class ChannelService(BaseService):
    """Read-only social-graph queries: channel pages and watch history."""

    def get_channel_profile(
        self, username: str | None, *, viewer_id: int | None
    ) -> ChannelProfileOut:
        """
        Load a channel page with its subscription counters.

        :param username: Channel handle; matched case-insensitively.
        :param viewer_id: Account viewing the page, used for ``is_subscribed``.
        :raises InvalidInputError: If ``username`` is blank.
        :raises NotFoundError: If no account has that username.
        """
        if not username or not username.strip():
            raise InvalidInputError("username is missing")

        with self.ro_uow() as uow:
            row = uow.subscriptions.channel_profile(username, viewer_id=viewer_id)
            if row is None:
                raise NotFoundError("Channel", username, "Channel does not exist")
            user, subscribers, subscribed_to, is_subscribed = row
            return ChannelProfileOut(
                id=user.id,
                full_name=user.full_name,
                username=user.username,
                email=user.email,
                avatar=user.avatar,
                cover_image=user.cover_image,
                subscribers_count=int(subscribers or 0),
                channels_subscribed_to_count=int(subscribed_to or 0),
                is_subscribed=bool(is_subscribed),
            )

    def get_watch_history(self, account_id: int) -> list[WatchedVideoOut]:
        """Return the account's watched videos in history order, owners inlined."""
        with self.ro_uow() as uow:
            return [
                WatchedVideoOut(
                    id=video.id,
                    title=video.title,
                    description=video.description,
                    video_file=video.video_file,
                    thumbnail=video.thumbnail,
                    duration=video.duration,
                    views=video.views,
                    is_published=video.is_published,
                    created_at=video.created_at,
                    owner=VideoOwnerOut(
                        full_name=video.owner.full_name,
                        username=video.owner.username,
                        avatar=video.owner.avatar,
                    ),
                )
                for video in uow.videos.list_watch_history(account_id)
            ]
