"""Account resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from channelhub.schemas.common import TrimmedString, required_text


class RegisterSchema(Schema):
    """Form fields of the multipart registration request."""

    class Meta:
        unknown = EXCLUDE

    full_name = required_text(100, data_key="fullName")
    email = TrimmedString(required=True, validate=[validate.Email(), validate.Length(max=254)])
    username = required_text(50)
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class ChangePasswordSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    old_password = fields.String(
        data_key="oldPassword", required=True, validate=validate.Length(min=1)
    )
    new_password = fields.String(
        data_key="newPassword", required=True, validate=validate.Length(min=1, max=128)
    )


class UpdateAccountSchema(Schema):
    """Both fields are mandatory; partial updates are not accepted."""

    class Meta:
        unknown = EXCLUDE

    full_name = required_text(100, data_key="fullName")
    email = TrimmedString(required=True, validate=[validate.Email(), validate.Length(max=254)])


class AccountSchema(Schema):
    """Public representation of an account. Never exposes secrets."""

    id = fields.Integer(data_key="_id")
    username = fields.String()
    email = fields.String()
    full_name = fields.String(data_key="fullName")
    avatar = fields.String()
    cover_image = fields.String(data_key="coverImage", allow_none=True)
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)
