"""Period-level performance statistics.

Collapses a date-filtered set of derived trades into one
:class:`PeriodMetrics`: totals, win/loss split, profit factor,
expectancy, maximum drawdown and the longest win/loss streaks.

Drawdown and streaks depend on order, so the closed trades are stably
sorted by ``trade_date`` and then folded strictly left to right.  Trades
sharing a date keep the order they were supplied in.

Usage::

    metrics = calculate_period_metrics(derive_all(trades))
    print(metrics.win_rate, metrics.max_drawdown)
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..core.enums import TradeResult, TradeStatus
from ..core.models import PeriodMetrics, TradeWithDerived

logger = logging.getLogger(__name__)


def closed_with_pnl(trades: Iterable[TradeWithDerived]) -> list[TradeWithDerived]:
    """Closed trades whose net P&L could be computed, in input order."""
    return [
        t for t in trades
        if t.status == TradeStatus.CLOSED and t.net_pnl is not None
    ]


def calculate_period_metrics(trades: Iterable[TradeWithDerived]) -> PeriodMetrics:
    """Aggregate statistics for a set of trades.

    Open trades and trades without a net P&L are ignored.  An empty
    selection yields zero counts, ``None`` ratios and zero drawdown.
    """
    closed = closed_with_pnl(trades)
    if not closed:
        return PeriodMetrics()

    ordered = sorted(closed, key=lambda t: t.trade_date)

    total_net_pnl = 0.0
    win_count = loss_count = breakeven_count = 0
    total_wins = 0.0
    total_losses = 0.0  # Sum of negative values

    cumulative = 0.0
    peak = 0.0
    max_drawdown = 0.0

    win_streak = loss_streak = 0
    max_win_streak = max_loss_streak = 0

    for trade in ordered:
        pnl = trade.net_pnl
        total_net_pnl += pnl

        cumulative += pnl
        peak = max(peak, cumulative)
        max_drawdown = max(max_drawdown, peak - cumulative)

        if trade.result == TradeResult.WIN:
            win_count += 1
            total_wins += pnl
            win_streak += 1
            loss_streak = 0
            max_win_streak = max(max_win_streak, win_streak)
        elif trade.result == TradeResult.LOSS:
            loss_count += 1
            total_losses += pnl
            loss_streak += 1
            win_streak = 0
            max_loss_streak = max(max_loss_streak, loss_streak)
        else:
            # Breakeven neither extends nor breaks a streak
            breakeven_count += 1

    decisive = win_count + loss_count
    win_rate = win_count / decisive if decisive > 0 else None
    avg_win = total_wins / win_count if win_count > 0 else None
    avg_loss = total_losses / loss_count if loss_count > 0 else None
    profit_factor = abs(total_wins / total_losses) if total_losses != 0 else None

    expectancy = None
    if win_rate is not None and avg_win is not None and avg_loss is not None:
        expectancy = win_rate * avg_win + (1 - win_rate) * avg_loss

    logger.debug(
        "Period metrics over %d closed trades: net=%.2f max_dd=%.2f",
        len(ordered), total_net_pnl, max_drawdown,
    )

    return PeriodMetrics(
        total_net_pnl=total_net_pnl,
        trade_count=len(ordered),
        win_count=win_count,
        loss_count=loss_count,
        breakeven_count=breakeven_count,
        win_rate=win_rate,
        avg_win=avg_win,
        avg_loss=avg_loss,
        profit_factor=profit_factor,
        expectancy=expectancy,
        max_drawdown=max_drawdown,
        max_win_streak=max_win_streak,
        max_loss_streak=max_loss_streak,
    )
