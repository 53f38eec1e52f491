"""Trade Journal Analytics: per-trade, period and bucketed performance.

Takes stored trades, derives their P&L and risk fields, and rolls them
up into the numbers a trading dashboard shows.  Every function here is
pure: it reads plain records and returns new ones.

Key components
--------------
**Per-trade**

calculate_derived_fields   P&L, R-multiple and win/loss/breakeven for one trade
derive_all                 The same over a list, order preserved

**Period**

calculate_period_metrics   Totals, win rate, profit factor, expectancy,
                           max drawdown and streaks

**Buckets & curves**

calculate_daily_performance / aggregate_daily_to_monthly
build_weekday_metrics / build_hourly_metrics / build_ticker_metrics
calculate_equity_curve     Cumulative P&L with running drawdown

**Calendar & selection**

build_month_grid / calculate_weekly_summaries / calculate_month_stats
group_by_year / calculate_year_total
filter_trades              Account and date-range selection
"""

from .derived import (
    calculate_derived_fields,
    calculate_pnl_per_share,
    calculate_r_multiple,
    calculate_risk_per_share,
    classify_result,
    derive_all,
)
from .metrics import calculate_period_metrics
from .bucketing import (
    HOUR_LABELS,
    WEEKDAY_ORDER,
    aggregate_daily_to_monthly,
    build_hourly_metrics,
    build_ticker_metrics,
    build_weekday_metrics,
    calculate_daily_performance,
    calculate_equity_curve,
    calculate_max_drawdown,
)
from .calendar_view import (
    build_month_grid,
    calculate_month_stats,
    calculate_weekly_summaries,
    calculate_year_total,
    group_by_year,
)
from .selection import filter_trades

__all__ = [
    "calculate_derived_fields",
    "calculate_pnl_per_share",
    "calculate_r_multiple",
    "calculate_risk_per_share",
    "classify_result",
    "derive_all",
    "calculate_period_metrics",
    "HOUR_LABELS",
    "WEEKDAY_ORDER",
    "aggregate_daily_to_monthly",
    "build_hourly_metrics",
    "build_ticker_metrics",
    "build_weekday_metrics",
    "calculate_daily_performance",
    "calculate_equity_curve",
    "calculate_max_drawdown",
    "build_month_grid",
    "calculate_month_stats",
    "calculate_weekly_summaries",
    "calculate_year_total",
    "group_by_year",
    "filter_trades",
]
