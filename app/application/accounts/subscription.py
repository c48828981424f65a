"""
Use cases: Subscription status.

Input: user ID, or a PaymentEventCommand from the payment webhook
Output: SubscriptionInfo
Side effects: Cancelling and payment events update the stored status.
Failure cases: SubscriptionStateError, UserNotFoundError.
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from app.application.accounts.dtos import PaymentEventCommand, SubscriptionInfo
from app.domain.accounts.entities import SubscriptionStatus
from app.domain.accounts.errors import SubscriptionStateError, UserNotFoundError
from app.domain.accounts.ports import UserRepository

logger = logging.getLogger(__name__)


class GetSubscriptionUseCase:
    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def execute(self, user_id: UUID) -> SubscriptionInfo:
        user = self._user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))
        return SubscriptionInfo.from_user(user, datetime.now(timezone.utc))


class CancelSubscriptionUseCase:
    """Cancel a recurring subscription.

    Only ``authorized`` subscriptions can be cancelled; lifetime access
    is permanent.
    """

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def execute(self, user_id: UUID) -> SubscriptionInfo:
        user = self._user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))
        if user.subscription_status is not SubscriptionStatus.AUTHORIZED:
            raise SubscriptionStateError(user.subscription_status.value, "cancel")

        self._user_repo.set_subscription_status(user.id, SubscriptionStatus.CANCELLED)
        user.subscription_status = SubscriptionStatus.CANCELLED
        logger.info("Subscription cancelled for user id=%s", user.id)
        return SubscriptionInfo.from_user(user, datetime.now(timezone.utc))


class ApplyPaymentEventUseCase:
    """Apply a payment-provider status change to the matching account."""

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def execute(self, command: PaymentEventCommand) -> SubscriptionInfo:
        user = self._user_repo.get_by_email(command.email)
        if user is None:
            raise UserNotFoundError(command.email)

        self._user_repo.set_subscription_status(user.id, command.status)
        user.subscription_status = command.status
        logger.info(
            "Subscription of user id=%s set to %s", user.id, command.status.value
        )
        return SubscriptionInfo.from_user(user, datetime.now(timezone.utc))
