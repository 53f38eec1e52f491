"""Group import-preview trades by underlying symbol."""

from __future__ import annotations

from typing import Iterable

from ..core.models import AggregatedTrade, TradeGroup


def group_trades_by_underlying(trades: Iterable[AggregatedTrade]) -> list[TradeGroup]:
    """One group per underlying, ordered by underlying symbol.

    Trades keep their relative order inside a group.  A trade without a
    net P&L (still open) contributes nothing to the group total; the total
    is ``None`` only when no trade in the group has a P&L.
    """
    by_underlying: dict[str, list[AggregatedTrade]] = {}
    for trade in trades:
        by_underlying.setdefault(trade.underlying_symbol, []).append(trade)

    groups = []
    for underlying, members in by_underlying.items():
        total: float | None = None
        for trade in members:
            if trade.net_pnl is not None:
                total = (total or 0.0) + trade.net_pnl
        groups.append(TradeGroup(
            underlying=underlying,
            trades=members,
            total_pnl=total,
            trade_count=len(members),
        ))

    return sorted(groups, key=lambda g: g.underlying)
