"""
Trading performance statistics over closed trades.

Pure functions. Inputs are ``ClosedResult`` records so spot trades and
futures positions can be evaluated the same way.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from app.domain.trading.entities import ClosedResult

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class TradingStats:
    """Aggregate performance of a list of closed trades.

    Attributes:
        total_trades: Number of trades considered.
        win_rate: Winning trades as a percentage (0-100).
        profit_factor: Gross profit / gross loss (inf when no losses).
        payoff: Average win / average loss (inf when no losses).
        max_drawdown: Largest peak-to-trough fall of cumulative PnL.
        total_profit: Sum of all PnL.
        best_trade: Largest winning PnL (0 when no wins).
        worst_trade: Largest losing PnL (0 when no losses).
        expectancy: Expected PnL per trade.
    """

    total_trades: int = 0
    win_rate: float = 0.0
    profit_factor: float = 0.0
    payoff: float = 0.0
    max_drawdown: float = 0.0
    total_profit: float = 0.0
    best_trade: float = 0.0
    worst_trade: float = 0.0
    expectancy: float = 0.0


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return math.inf if numerator > 0 else 0.0
    return numerator / denominator


def _sort_key(result: ClosedResult) -> datetime:
    moment = result.exit_date or result.entry_date
    return moment if moment is not None else _EPOCH


def calculate_trading_stats(results: Iterable[ClosedResult]) -> TradingStats:
    """Compute win rate, profit factor, drawdown and expectancy.

    Only results that are closed or carry a PnL are counted. Drawdown is
    measured on cumulative PnL starting from zero, in exit-date order
    (entry date when the exit date is missing).

    Args:
        results: Closed trades or positions.

    Returns:
        TradingStats; all zeros when nothing qualifies.
    """
    closed = [r for r in results if r.closed or r.pnl is not None]
    if not closed:
        return TradingStats()

    gross_profit = 0.0
    gross_loss = 0.0
    winning = 0
    losing = 0
    best = -math.inf
    worst = math.inf
    equity = 0.0
    peak = 0.0
    max_drawdown = 0.0
    total = 0.0

    for result in sorted(closed, key=_sort_key):
        pnl = float(result.pnl or 0)
        total += pnl

        if pnl > 0:
            gross_profit += pnl
            winning += 1
            best = max(best, pnl)
        elif pnl < 0:
            gross_loss += abs(pnl)
            losing += 1
            worst = min(worst, pnl)

        equity += pnl
        peak = max(peak, equity)
        max_drawdown = max(max_drawdown, peak - equity)

    count = len(closed)
    avg_win = gross_profit / winning if winning else 0.0
    avg_loss = gross_loss / losing if losing else 0.0
    expectancy = (winning / count) * avg_win - (losing / count) * avg_loss

    return TradingStats(
        total_trades=count,
        win_rate=winning / count * 100,
        profit_factor=_ratio(gross_profit, gross_loss),
        payoff=_ratio(avg_win, avg_loss),
        max_drawdown=max_drawdown,
        total_profit=total,
        best_trade=0.0 if best == -math.inf else best,
        worst_trade=0.0 if worst == math.inf else worst,
        expectancy=expectancy,
    )
