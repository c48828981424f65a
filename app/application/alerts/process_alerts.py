"""
Use case: Evaluate active price alerts against live prices.

Input: None (sweeps every active alert)
Output: ProcessAlertsResult
Side effects: Moves alerts to TRIGGERED or ERROR and emails the owner
    of each triggered alert.
Failure cases: None raised. Price failures mark the symbol's alerts as
    ERROR; notifier failures are logged and the trigger is kept.
"""

import logging
from collections import defaultdict
from datetime import datetime, timezone
from decimal import Decimal

from app.application.alerts.dtos import ProcessAlertsResult
from app.domain.accounts.ports import UserRepository
from app.domain.alerts.entities import (
    Alert,
    AlertStatus,
    AlertType,
    PriceAlertMessage,
    PriceOperator,
)
from app.domain.alerts.evaluator import parse_operator, parse_target_price, should_trigger
from app.domain.alerts.ports import AlertNotifier, AlertRepository
from app.domain.errors import NotificationError
from app.domain.trading.errors import PriceUnavailableError
from app.domain.trading.ports import PriceFeed

logger = logging.getLogger(__name__)


class ProcessAlertsUseCase:
    """Batch job run by the scheduler and the cron endpoint.

    Price alerts are grouped by symbol so each symbol is quoted once.
    Budget and bill alerts are counted but not evaluated here.
    """

    def __init__(
        self,
        alert_repo: AlertRepository,
        user_repo: UserRepository,
        price_feed: PriceFeed,
        notifier: AlertNotifier,
    ) -> None:
        self._alert_repo = alert_repo
        self._user_repo = user_repo
        self._price_feed = price_feed
        self._notifier = notifier

    def execute(self) -> ProcessAlertsResult:
        active = self._alert_repo.list_active()
        by_symbol: dict[str, list[Alert]] = defaultdict(list)
        errored_ids = []
        skipped = 0

        for alert in active:
            if alert.type is not AlertType.PRICE:
                skipped += 1
                continue
            if not alert.symbol:
                errored_ids.append(alert.id)
                continue
            by_symbol[alert.symbol.upper()].append(alert)

        triggered: list[tuple[Alert, Decimal, Decimal, PriceOperator]] = []
        for symbol, alerts in by_symbol.items():
            try:
                price = self._price_feed.get_spot_price(symbol)
            except PriceUnavailableError as exc:
                logger.warning("Alert price lookup failed for %s: %s", symbol, exc.message)
                errored_ids.extend(a.id for a in alerts)
                continue

            for alert in alerts:
                target = parse_target_price(alert.config.get("target_price"))
                operator = parse_operator(alert.config.get("operator"))
                if target is None or operator is None:
                    errored_ids.append(alert.id)
                    continue
                if should_trigger(price, target, operator):
                    triggered.append((alert, price, target, operator))

        now = datetime.now(timezone.utc)
        self._alert_repo.set_status(errored_ids, AlertStatus.ERROR, triggered_at=now)
        self._alert_repo.set_status(
            [t[0].id for t in triggered], AlertStatus.TRIGGERED, triggered_at=now
        )

        notified = sum(1 for t in triggered if self._notify(*t))

        logger.info(
            "Alert run: active=%d triggered=%d errored=%d skipped=%d notified=%d",
            len(active),
            len(triggered),
            len(errored_ids),
            skipped,
            notified,
        )
        return ProcessAlertsResult(
            active=len(active),
            triggered=len(triggered),
            errored=len(errored_ids),
            skipped=skipped,
            notified=notified,
        )

    def _notify(
        self, alert: Alert, price: Decimal, target: Decimal, operator: PriceOperator
    ) -> bool:
        user = self._user_repo.get_by_id(alert.user_id)
        if user is None or not user.email:
            return False
        message = PriceAlertMessage(
            to=user.email,
            user_name=user.display_name,
            symbol=alert.symbol.upper(),
            price=price,
            target_price=target,
            operator=operator,
        )
        try:
            self._notifier.send_price_alert(message)
        except NotificationError as exc:
            logger.error("Alert id=%s triggered but not delivered: %s", alert.id, exc.message)
            return False
        return True
