"""Channel page and watch-history schemas."""

from __future__ import annotations

from marshmallow import Schema, fields


class ChannelProfileSchema(Schema):
    id = fields.Integer(data_key="_id")
    full_name = fields.String(data_key="fullName")
    username = fields.String()
    email = fields.String()
    avatar = fields.String()
    cover_image = fields.String(data_key="coverImage", allow_none=True)
    subscribers_count = fields.Integer(data_key="subscribersCount")
    channels_subscribed_to_count = fields.Integer(data_key="channelsSubscribedToCount")
    is_subscribed = fields.Boolean(data_key="isSubscribed")


class VideoOwnerSchema(Schema):
    full_name = fields.String(data_key="fullName")
    username = fields.String()
    avatar = fields.String()


class WatchedVideoSchema(Schema):
    id = fields.Integer(data_key="_id")
    title = fields.String()
    description = fields.String()
    video_file = fields.String(data_key="videoFile")
    thumbnail = fields.String()
    duration = fields.Float()
    views = fields.Integer()
    is_published = fields.Boolean(data_key="isPublished")
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    owner = fields.Nested(VideoOwnerSchema)
