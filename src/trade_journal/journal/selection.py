"""Account and date-range selection applied before aggregation."""

from __future__ import annotations

from typing import Iterable, TypeVar

from ..core.models import Trade

T = TypeVar("T", bound=Trade)


def filter_trades(
    trades: Iterable[T],
    *,
    account_id: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
) -> list[T]:
    """Trades matching the account and an inclusive ``YYYY-MM-DD`` range.

    ISO date strings order lexically, so the bounds compare as strings.
    Input order is preserved.
    """
    selected = []
    for trade in trades:
        if account_id is not None and trade.account_id != account_id:
            continue
        if start_date is not None and trade.trade_date < start_date:
            continue
        if end_date is not None and trade.trade_date > end_date:
            continue
        selected.append(trade)
    return selected
