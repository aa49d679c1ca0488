"""ChannelHub: account, session and channel backend."""

from channelhub.factory import create_app

__all__ = ["create_app"]
