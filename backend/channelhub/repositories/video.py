"""Video repository (read side: watch history)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import joinedload

from channelhub.models.video import Video, WatchHistoryEntry
from channelhub.repositories.base import BaseRepository


class VideoRepository(BaseRepository[Video]):
    """Persistence-only repository for :class:`Video`."""

    model = Video

    def _default_eagerload(self, stmt):
        return stmt.options(joinedload(Video.owner))

    def list_watch_history(self, user_id: int) -> list[Video]:
        """Return the videos in ``user_id``'s history, ordered by position.

        Owners are joined eagerly so serializing them issues no extra query.
        """
        stmt = (
            select(Video)
            .join(WatchHistoryEntry, WatchHistoryEntry.video_id == Video.id)
            .where(WatchHistoryEntry.user_id == user_id)
            .order_by(WatchHistoryEntry.position.asc(), WatchHistoryEntry.id.asc())
        )
        stmt = self._default_eagerload(stmt)
        return list(self.session.execute(stmt).scalars().all())
