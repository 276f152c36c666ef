"""User directory Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class UserCreateSchema(Schema):
    """Input payload for self-registration."""

    username = fields.String(
        required=True,
        validate=validate.Length(min=3, max=50, error="Username must have between {min} and {max} characters."),
    )
    password = fields.String(
        required=True,
        load_only=True,
        validate=validate.Length(min=8, max=128, error="Password must have between {min} and {max} characters."),
    )


class UserSchema(Schema):
    """Public representation of a user; never includes the password hash."""

    id = fields.Integer(dump_only=True)
    username = fields.String(required=True)
    roles = fields.List(fields.String(), dump_only=True)
    created_at = fields.DateTime(dump_only=True)
