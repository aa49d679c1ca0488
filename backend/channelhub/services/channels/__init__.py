from channelhub.services.channels.dto import ChannelProfileOut, VideoOwnerOut, WatchedVideoOut
from channelhub.services.channels.service import ChannelService

__all__ = ["ChannelProfileOut", "ChannelService", "VideoOwnerOut", "WatchedVideoOut"]
