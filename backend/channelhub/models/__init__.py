from channelhub.models.subscription import Subscription
from channelhub.models.user import User
from channelhub.models.video import Video, WatchHistoryEntry

__all__ = [
    "Subscription",
    "User",
    "Video",
    "WatchHistoryEntry",
]
