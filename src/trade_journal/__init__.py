"""Trade journal analytics engine.

Derives per-trade P&L, aggregates period statistics, buckets trades for
charts and parses IBKR execution text into trades.
"""

from .core.errors import JournalError, PasteParseError
from .core.models import (
    AggregatedTrade,
    DailyPerformance,
    EquityPoint,
    MonthlyPerformance,
    ParsedIbkrTradeDraft,
    PeriodMetrics,
    Trade,
    TradeWithDerived,
)
from .importing import group_trades_by_underlying, parse_and_aggregate
from .journal import (
    aggregate_daily_to_monthly,
    build_hourly_metrics,
    build_ticker_metrics,
    build_weekday_metrics,
    calculate_daily_performance,
    calculate_derived_fields,
    calculate_equity_curve,
    calculate_period_metrics,
    derive_all,
)
from .parsers import parse_ibkr_paste

__version__ = "0.1.0"

__all__ = [
    "JournalError",
    "PasteParseError",
    "AggregatedTrade",
    "DailyPerformance",
    "EquityPoint",
    "MonthlyPerformance",
    "ParsedIbkrTradeDraft",
    "PeriodMetrics",
    "Trade",
    "TradeWithDerived",
    "group_trades_by_underlying",
    "parse_and_aggregate",
    "aggregate_daily_to_monthly",
    "build_hourly_metrics",
    "build_ticker_metrics",
    "build_weekday_metrics",
    "calculate_daily_performance",
    "calculate_derived_fields",
    "calculate_equity_curve",
    "calculate_period_metrics",
    "derive_all",
    "parse_ibkr_paste",
]
