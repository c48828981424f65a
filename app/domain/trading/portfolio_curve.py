"""
Portfolio value curve built from capital movements and realized PnL.

Pure functions. Values are converted to BRL: PnL of pairs not quoted
in BRL is multiplied by the USDT/BRL rate.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Iterable

from app.domain.trading.entities import CapitalMovement, Trade, TradeStatus

START_LABEL = "Início"
PT_BR_MONTHS = (
    "Jan", "Fev", "Mar", "Abr", "Mai", "Jun",
    "Jul", "Ago", "Set", "Out", "Nov", "Dez",
)


class Granularity(Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class PortfolioPoint:
    """One point of the portfolio chart."""

    label: str
    value: Decimal


def _week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def _bucket_key(moment: datetime, granularity: Granularity) -> str:
    day = moment.date()
    if granularity is Granularity.MONTHLY:
        return f"{day.year}-{day.month:02d}"
    return _week_start(day).isoformat()


def _bucket_label(key: str, granularity: Granularity) -> str:
    if granularity is Granularity.MONTHLY:
        month = int(key.split("-")[1])
        return PT_BR_MONTHS[month - 1]
    monday = date.fromisoformat(key)
    return f"{monday.day} {PT_BR_MONTHS[monday.month - 1]}"


def generate_portfolio_data(
    trades: Iterable[Trade],
    movements: Iterable[CapitalMovement],
    granularity: Granularity,
    usdt_to_brl_rate: Decimal,
    initial_balance: Decimal = Decimal("10000"),
) -> list[PortfolioPoint]:
    """Build the cumulative portfolio curve.

    Deposits add, withdrawals subtract, and every closed trade with a PnL
    and an exit date adds its PnL at its exit date. Events are summed per
    month or per ISO week (bucketed on the Monday) and accumulated on top
    of ``initial_balance``.

    Returns:
        The starting point followed by one point per non-empty bucket.
    """
    events: list[tuple[datetime, Decimal]] = [
        (m.date, m.signed_amount) for m in movements
    ]

    for trade in trades:
        if (
            trade.status is not TradeStatus.CLOSED
            or trade.pnl is None
            or trade.exit_date is None
        ):
            continue
        pnl = trade.pnl if "BRL" in trade.symbol else trade.pnl * usdt_to_brl_rate
        events.append((trade.exit_date, pnl))

    buckets: dict[str, Decimal] = defaultdict(Decimal)
    for moment, amount in events:
        buckets[_bucket_key(moment, granularity)] += amount

    value = initial_balance
    points = [PortfolioPoint(label=START_LABEL, value=value)]
    for key in sorted(buckets):
        value += buckets[key]
        points.append(PortfolioPoint(label=_bucket_label(key, granularity), value=value))
    return points
