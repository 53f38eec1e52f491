"""Time and dimension bucketing for dashboard charts.

Breaks derived trades down by calendar day, month, weekday, entry hour
and ticker, and builds the cumulative equity curve.  Answers questions
like "Which weekday costs me money?" or "Which tickers carry my P&L?"

All dates and times are read as naive strings: the weekday is the
calendar day written in ``trade_date`` and the hour is the leading
``HH`` of ``entry_time``.  No timezone conversion happens anywhere, so a
trade never shifts to a neighbouring day or hour.

Weekday and hourly outputs are dense (always 7 and 24 entries); ticker
output only lists tickers that were traded.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Iterable, Sequence

from ..core.enums import AssetClass, TradeResult, TradeStatus
from ..core.models import (
    DailyPerformance,
    EquityPoint,
    HourlyMetrics,
    MonthlyPerformance,
    TickerMetrics,
    TradeWithDerived,
    WeekdayMetrics,
)
from .metrics import closed_with_pnl

logger = logging.getLogger(__name__)

WEEKDAY_ORDER = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

HOUR_LABELS = [f"{hour:02d}:00" for hour in range(24)]

UNKNOWN_TICKER = "UNKNOWN"


# ---------------------------------------------------------------------------
# Calendar day / month
# ---------------------------------------------------------------------------

def calculate_daily_performance(
    trades: Iterable[TradeWithDerived],
) -> list[DailyPerformance]:
    """Realized P&L and win/loss counts per trade date, oldest first.

    Only closed trades count.  Breakeven trades add to ``trade_count``
    but to neither win nor loss counts.
    """
    by_date: dict[str, DailyPerformance] = {}

    for trade in trades:
        if trade.status != TradeStatus.CLOSED:
            continue
        day = by_date.get(trade.trade_date)
        if day is None:
            day = by_date[trade.trade_date] = DailyPerformance(date=trade.trade_date)

        day.trade_count += 1
        if trade.net_pnl is not None:
            day.realized_net_pnl += trade.net_pnl
        if trade.result == TradeResult.WIN:
            day.win_count += 1
        elif trade.result == TradeResult.LOSS:
            day.loss_count += 1

    return sorted(by_date.values(), key=lambda d: d.date)


def aggregate_daily_to_monthly(
    daily: Iterable[DailyPerformance],
) -> list[MonthlyPerformance]:
    """Roll daily rows up into ``YYYY-MM`` months, oldest first."""
    by_month: dict[str, MonthlyPerformance] = {}

    for day in daily:
        year_month = day.date[:7]
        month = by_month.get(year_month)
        if month is None:
            year_str, month_str = year_month.split("-")
            month = by_month[year_month] = MonthlyPerformance(
                year_month=year_month,
                year=int(year_str),
                month=int(month_str),
            )
        month.realized_net_pnl += day.realized_net_pnl
        month.trade_count += day.trade_count
        month.win_count += day.win_count
        month.loss_count += day.loss_count

    return sorted(by_month.values(), key=lambda m: m.year_month)


# ---------------------------------------------------------------------------
# Weekday / hour / ticker
# ---------------------------------------------------------------------------

def weekday_index(trade_date: str) -> int:
    """Monday-first weekday index (0-6) of a ``YYYY-MM-DD`` date."""
    return date.fromisoformat(trade_date[:10]).weekday()


def parse_hour(entry_time: str | None) -> int | None:
    """Leading hour of an ``HH:MM[:SS]`` string, or None if unusable."""
    if not entry_time:
        return None
    hour_part = entry_time.strip().split(":")[0]
    try:
        hour = int(hour_part)
    except ValueError:
        return None
    if hour < 0 or hour > 23:
        return None
    return hour


def extract_ticker(
    symbol: str, asset_class: AssetClass, *, unknown: str = UNKNOWN_TICKER
) -> str:
    """Canonical ticker: the symbol for stocks, the underlying for options."""
    trimmed = symbol.strip()
    if not trimmed:
        return unknown
    if asset_class == AssetClass.OPTION:
        return trimmed.split()[0]
    return trimmed


def build_weekday_metrics(trades: Iterable[TradeWithDerived]) -> list[WeekdayMetrics]:
    """Trade count and P&L per weekday, Monday through Sunday."""
    buckets = [WeekdayMetrics(day=day) for day in WEEKDAY_ORDER]

    for trade in trades:
        bucket = buckets[weekday_index(trade.trade_date)]
        bucket.trade_count += 1
        if trade.net_pnl is not None:
            bucket.pnl += trade.net_pnl

    return buckets


def build_hourly_metrics(trades: Iterable[TradeWithDerived]) -> list[HourlyMetrics]:
    """Trade count and P&L per entry hour (0-23).

    Trades without a readable ``entry_time`` are left out entirely.
    """
    buckets = [
        HourlyMetrics(hour=hour, hour_label=label)
        for hour, label in enumerate(HOUR_LABELS)
    ]

    skipped = 0
    for trade in trades:
        hour = parse_hour(trade.entry_time)
        if hour is None:
            skipped += 1
            continue
        buckets[hour].trade_count += 1
        if trade.net_pnl is not None:
            buckets[hour].pnl += trade.net_pnl

    if skipped:
        logger.debug("Hourly metrics skipped %d trades without entry time", skipped)
    return buckets


def build_ticker_metrics(
    trades: Iterable[TradeWithDerived], *, unknown: str = UNKNOWN_TICKER
) -> list[TickerMetrics]:
    """Trade count and P&L per ticker, best P&L first, ties by name."""
    by_ticker: dict[str, TickerMetrics] = {}

    for trade in trades:
        ticker = extract_ticker(trade.symbol, trade.asset_class, unknown=unknown)
        bucket = by_ticker.get(ticker)
        if bucket is None:
            bucket = by_ticker[ticker] = TickerMetrics(ticker=ticker)
        bucket.trade_count += 1
        if trade.net_pnl is not None:
            bucket.pnl += trade.net_pnl

    return sorted(by_ticker.values(), key=lambda m: (-m.pnl, m.ticker))


# ---------------------------------------------------------------------------
# Equity curve
# ---------------------------------------------------------------------------

def calculate_equity_curve(trades: Iterable[TradeWithDerived]) -> list[EquityPoint]:
    """Cumulative net P&L and drawdown, one point per trading date.

    Peak and cumulative both start at zero, so a losing first day already
    shows as drawdown.
    """
    daily_pnl: dict[str, float] = defaultdict(float)
    for trade in closed_with_pnl(trades):
        daily_pnl[trade.trade_date] += trade.net_pnl

    curve: list[EquityPoint] = []
    cumulative = 0.0
    peak = 0.0

    for day in sorted(daily_pnl):
        cumulative += daily_pnl[day]
        peak = max(peak, cumulative)
        curve.append(EquityPoint(
            date=day,
            cumulative_pnl=cumulative,
            drawdown=peak - cumulative,
        ))

    return curve


def calculate_max_drawdown(curve: Sequence[EquityPoint]) -> float:
    return max((p.drawdown for p in curve), default=0.0)
