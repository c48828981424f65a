"""
Domain-specific errors for the alerts bounded context.
"""

from app.domain.errors import BusinessRuleError, NotFoundError


class AlertNotFoundError(NotFoundError):
    """Raised when an alert does not exist or belongs to another user."""

    def __init__(self, alert_id: str) -> None:
        super().__init__(f"Alert not found: {alert_id}")
        self.alert_id = alert_id


class AlertStateError(BusinessRuleError):
    """Raised when an alert cannot move to the requested status."""

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(f"Cannot change alert from {current} to {requested}")
        self.current = current
        self.requested = requested

