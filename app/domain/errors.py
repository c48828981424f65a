"""
Base domain errors shared by every bounded context.

Each context defines its concrete errors in its own ``errors`` module
by subclassing one of these categories. The interface layer maps the
categories to HTTP status codes. No framework imports allowed.
"""


class DomainError(Exception):
    """Base error for all domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class NotFoundError(DomainError):
    """A requested record does not exist or is not visible to the caller."""


class PermissionDeniedError(DomainError):
    """The caller is authenticated but not allowed to perform the operation."""


class AuthenticationError(DomainError):
    """The caller could not be authenticated."""


class ConflictError(DomainError):
    """The operation collides with existing state."""


class BusinessRuleError(DomainError):
    """The operation violates a business rule (bad amount, wrong state)."""


class ExternalServiceError(DomainError):
    """A third-party service (exchange, email API) failed."""


class NotificationError(ExternalServiceError):
    """An email or other outbound notification could not be delivered."""

    def __init__(self, channel: str, reason: str) -> None:
        super().__init__(f"Notification via {channel} failed: {reason}")
        self.channel = channel
        self.reason = reason
