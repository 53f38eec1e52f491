"""Core domain models used across the trade journal.

These are the canonical records passed between the parsing, derivation
and aggregation stages.  They are plain values: the analytics code reads
them and builds new ones, it never mutates an input record.

Dates are ``YYYY-MM-DD`` strings and times ``HH:MM[:SS]`` strings, kept
naive (no timezone) exactly as the trader entered them.
"""

from __future__ import annotations

import re
from datetime import date

from pydantic import BaseModel, Field, field_validator

from .enums import (
    AssetClass,
    Direction,
    ExecutionType,
    OptionType,
    TradeResult,
    TradeStatus,
)


_ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def _check_iso_date(value: str) -> str:
    # fromisoformat alone also takes compact and week dates on 3.11+
    if not _ISO_DATE_RE.fullmatch(value):
        raise ValueError(f"expected YYYY-MM-DD, got {value!r}")
    date.fromisoformat(value)  # raises ValueError on bad input
    return value


# ---------------------------------------------------------------------------
# Trades
# ---------------------------------------------------------------------------

class Trade(BaseModel):
    """A persisted journal trade as handed over by the trade store."""

    id: str
    account_id: str
    user_id: str = ""
    instrument_id: str = ""
    symbol: str
    asset_class: AssetClass = AssetClass.STOCK
    trade_number: int | None = None
    trade_date: str  # YYYY-MM-DD
    direction: Direction
    quantity: float | None = None
    entry_price: float
    exit_price: float | None = None
    stop_loss_price: float | None = None
    entry_time: str | None = None  # HH:MM[:SS]
    exit_time: str | None = None
    fees: float = 0.0
    strategy: str | None = None
    notes: str | None = None
    status: TradeStatus = TradeStatus.OPEN

    @field_validator("trade_date")
    @classmethod
    def _validate_trade_date(cls, v: str) -> str:
        return _check_iso_date(v)


class TradeWithDerived(Trade):
    """Trade plus the P&L and risk fields computed from it.

    All six derived fields are ``None`` when the trade is open or lacks an
    exit price or quantity.  ``risk_per_share`` and ``r_multiple`` can also
    be ``None`` on their own when no usable stop-loss is recorded.
    """

    gross_pnl: float | None = None
    net_pnl: float | None = None
    pnl_per_share: float | None = None
    risk_per_share: float | None = None
    r_multiple: float | None = None
    result: TradeResult | None = None


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------

class PeriodMetrics(BaseModel):
    """Aggregate statistics over a set of closed trades."""

    total_net_pnl: float = 0.0
    trade_count: int = 0
    win_count: int = 0
    loss_count: int = 0
    breakeven_count: int = 0
    win_rate: float | None = None
    avg_win: float | None = None
    avg_loss: float | None = None  # <= 0
    profit_factor: float | None = None
    expectancy: float | None = None
    max_drawdown: float = 0.0  # >= 0
    max_win_streak: int = 0
    max_loss_streak: int = 0


class DailyPerformance(BaseModel):
    date: str  # YYYY-MM-DD
    realized_net_pnl: float = 0.0
    trade_count: int = 0
    win_count: int = 0
    loss_count: int = 0


class MonthlyPerformance(BaseModel):
    year_month: str  # YYYY-MM
    year: int
    month: int
    realized_net_pnl: float = 0.0
    trade_count: int = 0
    win_count: int = 0
    loss_count: int = 0


class EquityPoint(BaseModel):
    date: str
    cumulative_pnl: float
    drawdown: float  # peak-to-date minus cumulative, >= 0


class WeekdayMetrics(BaseModel):
    day: str  # "Monday" .. "Sunday"
    trade_count: int = 0
    pnl: float = 0.0


class HourlyMetrics(BaseModel):
    hour: int  # 0-23
    hour_label: str  # "HH:00"
    trade_count: int = 0
    pnl: float = 0.0


class TickerMetrics(BaseModel):
    ticker: str
    trade_count: int = 0
    pnl: float = 0.0


# ---------------------------------------------------------------------------
# Calendar views
# ---------------------------------------------------------------------------

class MonthStats(BaseModel):
    total_pnl: float = 0.0
    trading_days: int = 0


class DayCell(BaseModel):
    """One cell of a Sunday-first month grid."""

    date: str
    day_number: int
    is_current_month: bool
    pnl: float = 0.0
    trade_count: int = 0
    win_count: int = 0
    loss_count: int = 0
    win_rate: float | None = None  # percent of decisive trades


class WeeklySummary(BaseModel):
    week_number: int  # 1-based row in the grid
    total_pnl: float = 0.0
    trading_days: int = 0


# ---------------------------------------------------------------------------
# Broker imports
# ---------------------------------------------------------------------------

class Execution(BaseModel):
    """A single broker fill attached to an imported trade."""

    execution_type: ExecutionType
    execution_date: str
    execution_time: str | None = None
    quantity: float  # Always positive
    price: float
    fees: float  # Always positive
    exchange: str | None = None
    broker_execution_id: str


class AggregatedTrade(BaseModel):
    """A round-trip position built from broker executions for import preview."""

    key: str  # "<symbol>_<trade_date>"
    symbol: str
    underlying_symbol: str
    asset_class: AssetClass
    option_type: OptionType | None = None
    strike_price: float | None = None
    expiration_date: str | None = None
    direction: Direction
    trade_date: str
    entries: list[Execution] = Field(default_factory=list)
    exits: list[Execution] = Field(default_factory=list)
    status: TradeStatus = TradeStatus.OPEN

    # Derived for display
    total_quantity: float = 0.0
    avg_entry_price: float = 0.0
    avg_exit_price: float | None = None
    total_fees: float = 0.0
    net_pnl: float | None = None


class TradeGroup(BaseModel):
    """Imported trades sharing one underlying."""

    underlying: str
    trades: list[AggregatedTrade] = Field(default_factory=list)
    total_pnl: float | None = None
    trade_count: int = 0


class DraftExit(BaseModel):
    exit_time: str  # HH:MM
    quantity: float
    price: float
    fees: float


class ParsedIbkrTradeDraft(BaseModel):
    """Trade-entry form pre-fill produced from a pasted IBKR trade log."""

    symbol: str
    asset_class: AssetClass
    direction: Direction
    quantity: float
    entry_price: float  # Quantity-weighted across entry rows
    entry_fees: float
    exits: list[DraftExit] = Field(default_factory=list)
