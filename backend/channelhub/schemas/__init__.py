"""Marshmallow schemas for request validation and response serialization."""

from __future__ import annotations

from .account import (
    AccountSchema,
    ChangePasswordSchema,
    RegisterSchema,
    UpdateAccountSchema,
)
from .auth import LoginResponseSchema, LoginSchema, RefreshSchema, TokenPairSchema
from .channel import ChannelProfileSchema, VideoOwnerSchema, WatchedVideoSchema

__all__ = [
    "AccountSchema",
    "ChangePasswordSchema",
    "ChannelProfileSchema",
    "LoginResponseSchema",
    "LoginSchema",
    "RefreshSchema",
    "RegisterSchema",
    "TokenPairSchema",
    "UpdateAccountSchema",
    "VideoOwnerSchema",
    "WatchedVideoSchema",
]
