"""
Domain-specific errors for the accounts bounded context.

These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

from app.domain.errors import (
    AuthenticationError,
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
)


class UserNotFoundError(NotFoundError):
    """Raised when a user account cannot be found."""

    def __init__(self, user_ref: str) -> None:
        super().__init__(f"User not found: {user_ref}")
        self.user_ref = user_ref


class EmailAlreadyRegisteredError(ConflictError):
    """Raised when registering an email that already has an account."""

    def __init__(self) -> None:
        super().__init__("Email already registered")


class UsernameTakenError(ConflictError):
    """Raised when a username is already used by another account."""

    def __init__(self, username: str) -> None:
        super().__init__(f"Username already taken: {username}")
        self.username = username


class InvalidCredentialsError(AuthenticationError):
    """Raised when an email/password pair does not match."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class InvalidSessionError(AuthenticationError):
    """Raised when a session token is unknown or expired."""

    def __init__(self) -> None:
        super().__init__("Invalid or expired session")


class WeakPasswordError(BusinessRuleError):
    """Raised when a password does not meet the minimum length."""

    def __init__(self, min_length: int) -> None:
        super().__init__(f"Password must have at least {min_length} characters")
        self.min_length = min_length


class InvalidUsernameError(BusinessRuleError):
    """Raised when a username has an invalid format."""

    def __init__(self, username: str) -> None:
        super().__init__(f"Invalid username: {username}")
        self.username = username


class PremiumRequiredError(PermissionDeniedError):
    """Raised when a feature needs premium access (subscription or trial)."""

    def __init__(self, feature: str) -> None:
        super().__init__(f"Premium access required: {feature}")
        self.feature = feature


class SubscriptionStateError(BusinessRuleError):
    """Raised when a subscription transition is not allowed."""

    def __init__(self, status: str, action: str) -> None:
        super().__init__(f"Cannot {action} a subscription with status '{status}'")
        self.status = status
        self.action = action


class InvalidResetTokenError(BusinessRuleError):
    """Raised when a password reset token is unknown, used or expired."""

    def __init__(self) -> None:
        super().__init__("Invalid or expired password reset token")
