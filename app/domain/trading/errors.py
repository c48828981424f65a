"""
Domain-specific errors for the trading bounded context.

All errors raised from the trading domain must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

from datetime import datetime

from app.domain.errors import (
    BusinessRuleError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
)


class TradeNotFoundError(NotFoundError):
    """Raised when a simulator trade cannot be found."""

    def __init__(self, trade_ref: str) -> None:
        super().__init__(f"Trade not found: {trade_ref}")
        self.trade_ref = trade_ref


class TradeOwnershipError(PermissionDeniedError):
    """Raised when a user acts on a trade owned by someone else."""

    def __init__(self, trade_id: str) -> None:
        super().__init__(f"Trade {trade_id} belongs to another user")
        self.trade_id = trade_id


class TradeAlreadyClosedError(BusinessRuleError):
    """Raised when closing a trade that is no longer open."""

    def __init__(self, trade_id: str) -> None:
        super().__init__(f"Trade already closed: {trade_id}")
        self.trade_id = trade_id


class PositionNotFoundError(NotFoundError):
    """Raised when an open futures position is not found for the user."""

    def __init__(self, position_id: str) -> None:
        super().__init__(
            f"Position not found, already closed or owned by another user: {position_id}"
        )
        self.position_id = position_id


class InsufficientBalanceError(BusinessRuleError):
    """Raised when the virtual balance cannot cover a cost or margin."""

    def __init__(self, required: str, available: str) -> None:
        super().__init__(
            f"Insufficient virtual balance: required {required}, available {available}"
        )
        self.required = required
        self.available = available


class InvalidOrderError(BusinessRuleError):
    """Raised when order parameters are out of range."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid order: {reason}")
        self.reason = reason


class BankruptcyCooldownError(PermissionDeniedError):
    """Raised when a bankrupt user tries to trade before the penalty ends."""

    def __init__(self, expires_at: datetime, remaining_days: int) -> None:
        super().__init__(
            f"Bankruptcy penalty active; try again in {remaining_days} days"
        )
        self.expires_at = expires_at
        self.remaining_days = remaining_days


class PriceUnavailableError(ExternalServiceError):
    """Raised when no price source could quote a symbol."""

    def __init__(self, symbol: str, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(f"Price unavailable for {symbol}{detail}")
        self.symbol = symbol
        self.reason = reason
