"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class AuthenticationSchema(Schema):
    """Input payload for authenticating a user."""

    username = fields.String(required=True, validate=validate.Length(min=1, max=50))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class TokenSchema(Schema):
    """Input payload carrying a token (introspect, refresh, logout)."""

    token = fields.String(required=True, validate=validate.Length(min=1, max=8192))


class AuthenticationResponseSchema(Schema):
    """Response payload for authenticate/refresh."""

    authenticated = fields.Boolean(required=True)
    token = fields.String(required=True)


class IntrospectResponseSchema(Schema):
    """Response payload for introspection."""

    valid = fields.Boolean(required=True)


class CurrentPrincipalSchema(Schema):
    """Response payload describing the bearer of the current request's token."""

    username = fields.String(required=True, attribute="subject")
    scope = fields.String(required=True)
    issued_at = fields.DateTime(required=True)
    expires_at = fields.DateTime(required=True)


class PrincipalScopeSchema(Schema):
    """Response payload exposing the scope string of a principal."""

    username = fields.String(required=True)
    scope = fields.String(required=True)
