"""Property tests: aggregation invariants over random trade sets.

Trades are generated as closed, derived records with P&L in whole cents
and dates within a few months, so daily, monthly and curve views can be
checked against each other.
"""

from datetime import date, timedelta

import pytest
from hypothesis import given, settings, strategies as st

from trade_journal.core.enums import Direction, TradeStatus
from trade_journal.core.models import Trade, TradeWithDerived
from trade_journal.journal.bucketing import (
    aggregate_daily_to_monthly,
    build_hourly_metrics,
    build_weekday_metrics,
    calculate_daily_performance,
    calculate_equity_curve,
    calculate_max_drawdown,
)
from trade_journal.journal.derived import calculate_derived_fields, classify_result
from trade_journal.journal.metrics import calculate_period_metrics

_START = date(2024, 1, 1)


def _trade(cents: int, day_offset: int, hour: int) -> TradeWithDerived:
    pnl = cents / 100
    return TradeWithDerived(
        id=f"t{day_offset}-{cents}",
        account_id="acct_1",
        symbol="AAPL",
        trade_date=(_START + timedelta(days=day_offset)).isoformat(),
        direction=Direction.LONG,
        quantity=1.0,
        entry_price=100.0,
        exit_price=100.0 + pnl,
        entry_time=f"{hour:02d}:30",
        status=TradeStatus.CLOSED,
        gross_pnl=pnl,
        net_pnl=pnl,
        pnl_per_share=pnl,
        result=classify_result(pnl),
    )


trade_strategy = st.builds(
    _trade,
    cents=st.integers(min_value=-100_000, max_value=100_000),
    day_offset=st.integers(min_value=0, max_value=120),
    hour=st.integers(min_value=0, max_value=23),
)
trades_strategy = st.lists(trade_strategy, max_size=40)


@given(trades=trades_strategy)
@settings(max_examples=100)
def test_monthly_rollup_preserves_totals(trades):
    daily = calculate_daily_performance(trades)
    monthly = aggregate_daily_to_monthly(daily)

    assert sum(m.realized_net_pnl for m in monthly) == pytest.approx(
        sum(t.net_pnl for t in trades), abs=1e-6
    )
    assert sum(m.trade_count for m in monthly) == len(trades)
    assert sum(m.win_count for m in monthly) == sum(d.win_count for d in daily)
    assert [m.year_month for m in monthly] == sorted({d.date[:7] for d in daily})


@given(trades=trades_strategy)
@settings(max_examples=100)
def test_period_counts_partition_trades(trades):
    m = calculate_period_metrics(trades)
    assert m.win_count + m.loss_count + m.breakeven_count == m.trade_count == len(trades)
    assert m.max_drawdown >= 0
    if m.avg_loss is not None:
        assert m.avg_loss < 0
    if m.win_rate is not None:
        assert 0.0 <= m.win_rate <= 1.0


@given(trades=trades_strategy, later=st.lists(trade_strategy, max_size=10))
@settings(max_examples=100)
def test_drawdown_never_shrinks_when_later_trades_are_added(trades, later):
    if trades:
        last_day = max(t.trade_date for t in trades)
        # Shift the extra trades strictly after the existing ones
        later = [
            t.model_copy(update={
                "trade_date": (date.fromisoformat(last_day) + timedelta(days=1 + i)).isoformat()
            })
            for i, t in enumerate(later)
        ]
    before = calculate_period_metrics(trades).max_drawdown
    after = calculate_period_metrics(trades + later).max_drawdown
    assert after >= before - 1e-9


@given(trades=trades_strategy)
@settings(max_examples=100)
def test_daily_curve_drawdown_bounded_by_per_trade_drawdown(trades):
    curve = calculate_equity_curve(trades)
    assert all(p.drawdown >= -1e-9 for p in curve)
    assert calculate_max_drawdown(curve) <= calculate_period_metrics(trades).max_drawdown + 1e-6
    if curve:
        assert curve[-1].cumulative_pnl == pytest.approx(
            sum(t.net_pnl for t in trades), abs=1e-6
        )


@given(trades=trades_strategy)
@settings(max_examples=100)
def test_weekday_and_hourly_are_dense_and_complete(trades):
    weekday = build_weekday_metrics(trades)
    hourly = build_hourly_metrics(trades)
    assert len(weekday) == 7
    assert len(hourly) == 24
    assert sum(b.trade_count for b in weekday) == len(trades)
    assert sum(b.trade_count for b in hourly) == len(trades)
    assert [b.hour for b in hourly] == list(range(24))


@given(
    entry=st.floats(min_value=0.01, max_value=10_000),
    exit_=st.floats(min_value=0.01, max_value=10_000),
    quantity=st.integers(min_value=1, max_value=10_000),
    direction=st.sampled_from(list(Direction)),
)
def test_result_sign_matches_direction(entry, exit_, quantity, direction):
    trade = Trade(
        id="p", account_id="a", symbol="X", trade_date="2024-01-01",
        direction=direction, quantity=quantity, entry_price=entry,
        exit_price=exit_, status=TradeStatus.CLOSED,
    )
    d = calculate_derived_fields(trade)
    assert d.net_pnl == d.gross_pnl
    assert d.result == classify_result(d.net_pnl)
    favourable = exit_ > entry if direction == Direction.LONG else exit_ < entry
    if favourable:
        assert d.net_pnl > 0
