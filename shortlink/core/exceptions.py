"""
Custom Exceptions

This module defines the exception hierarchy used by the short-link services.

Error classes map onto how the HTTP layer reports them:
- Client faults (InvalidURLError, ShortCodeNotFoundError, LinkNotFoundError)
- Server faults (CollisionExhaustedError, DatabaseError)
- Internal signals that never leave the service layer
  (UniqueConstraintViolation, ClickAccountingError)
"""


class ShortLinkException(Exception):
    """Base exception for the short-link service."""
    pass


class InvalidURLError(ShortLinkException):
    """Raised when URL validation fails."""

    def __init__(self, url: str, reason: str = "Invalid URL format"):
        self.url = url
        self.reason = reason
        super().__init__(f"{reason}: {url}")


class ShortCodeNotFoundError(ShortLinkException):
    """Raised when a short code does not resolve to a live link."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' not found")


class LinkNotFoundError(ShortLinkException):
    """
    Raised when an owner-scoped lookup finds nothing.

    Covers both a missing link and a link owned by someone else, so callers
    cannot test for the existence of other owners' links.
    """

    def __init__(self, link_id: str):
        self.link_id = link_id
        super().__init__(f"Link '{link_id}' not found")


class CollisionExhaustedError(ShortLinkException):
    """Raised when every short code candidate collided with an existing one."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Failed to allocate a unique short code after {attempts} attempts"
        )


class DatabaseError(ShortLinkException):
    """Raised when database operations fail."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")


class UniqueConstraintViolation(DatabaseError):
    """Raised by the record store when an insert hits the short code unique index."""

    def __init__(self, short_code: str, original_error: Exception = None):
        self.short_code = short_code
        super().__init__(
            f"short code '{short_code}' already exists",
            original_error=original_error
        )


class ClickAccountingError(DatabaseError):
    """Raised when a click counter increment fails."""

    def __init__(self, link_id: str, original_error: Exception = None):
        self.link_id = link_id
        super().__init__(
            f"failed to increment click count for link '{link_id}'",
            original_error=original_error
        )


class AuthenticationError(ShortLinkException):
    """Raised when a bearer token cannot be verified."""
    pass
