"""Calendar views over daily and monthly performance.

Builds the data behind the monthly calendar (a Sunday-first grid of day
cells with per-week summaries) and the year-by-month P&L table.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Iterable, Sequence

from ..core.models import (
    DailyPerformance,
    DayCell,
    MonthlyPerformance,
    MonthStats,
    WeeklySummary,
)


def group_by_year(
    monthly: Iterable[MonthlyPerformance],
) -> dict[int, list[MonthlyPerformance]]:
    """Months keyed by year, in the order they were supplied."""
    by_year: dict[int, list[MonthlyPerformance]] = {}
    for month in monthly:
        by_year.setdefault(month.year, []).append(month)
    return by_year


def calculate_year_total(monthly: Iterable[MonthlyPerformance]) -> float:
    return sum((m.realized_net_pnl for m in monthly), 0.0)


def calculate_month_stats(daily: Iterable[DailyPerformance]) -> MonthStats:
    """Total P&L and number of days that saw at least one trade."""
    trading_days = [d for d in daily if d.trade_count > 0]
    return MonthStats(
        total_pnl=sum((d.realized_net_pnl for d in trading_days), 0.0),
        trading_days=len(trading_days),
    )


def build_month_grid(
    year: int, month: int, daily: Iterable[DailyPerformance]
) -> list[list[DayCell]]:
    """Sunday-first weeks covering ``year``-``month``.

    The first and last rows are padded with days from the neighbouring
    months so every row has seven cells.
    """
    by_date = {d.date: d for d in daily}

    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])

    # date.weekday() is Monday=0; shift to Sunday=0
    lead = (first.weekday() + 1) % 7
    trail = (6 - (last.weekday() + 1) % 7)
    start = first - timedelta(days=lead)
    end = last + timedelta(days=trail)

    cells: list[DayCell] = []
    day = start
    while day <= end:
        key = day.isoformat()
        perf = by_date.get(key)
        win_count = perf.win_count if perf else 0
        loss_count = perf.loss_count if perf else 0
        decisive = win_count + loss_count
        cells.append(DayCell(
            date=key,
            day_number=day.day,
            is_current_month=(day.year == year and day.month == month),
            pnl=perf.realized_net_pnl if perf else 0.0,
            trade_count=perf.trade_count if perf else 0,
            win_count=win_count,
            loss_count=loss_count,
            win_rate=win_count / decisive * 100 if decisive > 0 else None,
        ))
        day += timedelta(days=1)

    return [cells[i:i + 7] for i in range(0, len(cells), 7)]


def calculate_weekly_summaries(grid: Sequence[Sequence[DayCell]]) -> list[WeeklySummary]:
    """Per-row totals over in-month days that had trades."""
    summaries = []
    for index, week in enumerate(grid):
        trading = [c for c in week if c.is_current_month and c.trade_count > 0]
        summaries.append(WeeklySummary(
            week_number=index + 1,
            total_pnl=sum((c.pnl for c in trading), 0.0),
            trading_days=len(trading),
        ))
    return summaries
