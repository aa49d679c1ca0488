"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import (
    EXCLUDE,
    Schema,
    ValidationError,
    fields,
    post_load,
    validate,
    validates_schema,
)

from channelhub.schemas.account import AccountSchema
from channelhub.schemas.common import TrimmedString


class LoginSchema(Schema):
    """Input payload for authenticating with a username or an email."""

    class Meta:
        unknown = EXCLUDE

    username = TrimmedString(load_default=None, validate=validate.Length(max=50))
    email = TrimmedString(load_default=None, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))

    @validates_schema
    def _one_identifier(self, data, **kwargs):
        if not data.get("username") and not data.get("email"):
            raise ValidationError("username or email is required", field_name="username")


class RefreshSchema(Schema):
    """Optional body carrying the refresh token when no cookie is sent.

    Any value that is not a string is treated as absent, so a malformed
    body ends in the same 401 as a missing token rather than a 400.
    """

    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.Raw(data_key="refreshToken", load_default=None)

    @post_load
    def _strings_only(self, data, **kwargs):
        if not isinstance(data.get("refresh_token"), str):
            data["refresh_token"] = None
        return data


class LoginResponseSchema(Schema):
    """Login payload: the account plus the access token.

    The refresh token only travels in its HttpOnly cookie.
    """

    user = fields.Nested(AccountSchema, attribute="account")
    access_token = fields.String(data_key="accessToken", attribute="tokens.access_token")


class TokenPairSchema(Schema):
    """Refresh payload; the rotated refresh token is only set as a cookie."""

    access_token = fields.String(data_key="accessToken")
