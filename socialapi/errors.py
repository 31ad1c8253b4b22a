"""Error taxonomy shared by repositories, services and the HTTP layer.

Callers branch on the exception class, never on the message text.
"""
from __future__ import annotations


class SocialError(Exception):
    """Base class. Raised directly for opaque persistence failures."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    default_message = "internal error"

    @property
    def message(self) -> str:
        return str(self)


class NotFoundError(SocialError):
    status_code = 404
    code = "not_found"
    default_message = "requested item not found"


class DuplicateEmailError(SocialError):
    status_code = 409
    code = "duplicate_email"
    default_message = "user with this email already exists"


class DuplicateUsernameError(SocialError):
    status_code = 409
    code = "duplicate_username"
    default_message = "user with this username already exists"


class InvalidCredentialsError(SocialError):
    status_code = 401
    code = "invalid_credentials"
    default_message = "invalid credentials"


class UnauthorizedError(SocialError):
    """Requester does not own the resource."""

    status_code = 403
    code = "unauthorized"
    default_message = "unauthorized access"


class ValidationFailedError(SocialError):
    status_code = 400
    code = "validation_failed"
    default_message = "validation failed"


class CannotFollowSelfError(SocialError):
    status_code = 400
    code = "cannot_follow_self"
    default_message = "you cannot follow yourself"
