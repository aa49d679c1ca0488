"""Shared marshmallow building blocks."""

from __future__ import annotations

from marshmallow import fields, validate


class TrimmedString(fields.String):
    """String field that strips surrounding whitespace on load."""

    def _deserialize(self, value, attr, data, **kwargs):
        result = super()._deserialize(value, attr, data, **kwargs)
        return result.strip() if isinstance(result, str) else result


def required_text(max_len: int, **kwargs) -> TrimmedString:
    """Required field rejecting values that are blank once trimmed."""
    return TrimmedString(
        required=True,
        validate=validate.Length(min=1, max=max_len, error="Field must not be blank."),
        **kwargs,
    )
