"""Tests for daily/monthly/weekday/hourly/ticker buckets and the equity curve."""

import pytest

from trade_journal.core.enums import AssetClass
from trade_journal.core.models import DailyPerformance
from trade_journal.journal.bucketing import (
    HOUR_LABELS,
    WEEKDAY_ORDER,
    aggregate_daily_to_monthly,
    build_hourly_metrics,
    build_ticker_metrics,
    build_weekday_metrics,
    calculate_daily_performance,
    calculate_equity_curve,
    calculate_max_drawdown,
    extract_ticker,
    parse_hour,
    weekday_index,
)

from .conftest import make_closed, make_open


class TestDaily:
    def test_groups_and_sorts(self):
        daily = calculate_daily_performance([
            make_closed(50.0, "2024-01-03"),
            make_closed(100.0, "2024-01-01"),
            make_closed(-30.0, "2024-01-01"),
            make_closed(0.0, "2024-01-01"),
        ])
        assert [d.date for d in daily] == ["2024-01-01", "2024-01-03"]
        first = daily[0]
        assert first.realized_net_pnl == pytest.approx(70.0)
        assert first.trade_count == 3
        assert first.win_count == 1
        assert first.loss_count == 1

    def test_open_trades_excluded(self):
        daily = calculate_daily_performance([make_open("2024-01-01")])
        assert daily == []


class TestMonthly:
    def test_rolls_up_by_year_month(self):
        daily = [
            DailyPerformance(date="2024-02-01", realized_net_pnl=10.0, trade_count=1, win_count=1),
            DailyPerformance(date="2024-01-05", realized_net_pnl=5.0, trade_count=2, loss_count=1),
            DailyPerformance(date="2024-01-20", realized_net_pnl=-2.0, trade_count=1, loss_count=1),
        ]
        monthly = aggregate_daily_to_monthly(daily)
        assert [m.year_month for m in monthly] == ["2024-01", "2024-02"]
        jan = monthly[0]
        assert (jan.year, jan.month) == (2024, 1)
        assert jan.realized_net_pnl == pytest.approx(3.0)
        assert jan.trade_count == 3
        assert jan.loss_count == 2

    def test_empty(self):
        assert aggregate_daily_to_monthly([]) == []


class TestWeekday:
    def test_always_seven_buckets(self):
        buckets = build_weekday_metrics([])
        assert [b.day for b in buckets] == WEEKDAY_ORDER
        assert all(b.trade_count == 0 and b.pnl == 0.0 for b in buckets)

    def test_monday_first_sunday_last(self):
        # 2024-01-01 is a Monday, 2024-01-07 a Sunday
        assert weekday_index("2024-01-01") == 0
        assert weekday_index("2024-01-07") == 6

    def test_counts_all_trades_but_skips_null_pnl(self):
        buckets = build_weekday_metrics([
            make_closed(10.0, "2024-01-01"),
            make_open("2024-01-01"),
            make_closed(-4.0, "2024-01-07"),
        ])
        assert buckets[0].trade_count == 2
        assert buckets[0].pnl == pytest.approx(10.0)
        assert buckets[6].trade_count == 1
        assert buckets[6].pnl == pytest.approx(-4.0)


class TestHourly:
    def test_always_twenty_four_buckets(self):
        buckets = build_hourly_metrics([])
        assert len(buckets) == 24
        assert [b.hour_label for b in buckets] == HOUR_LABELS
        assert buckets[9].hour_label == "09:00"

    def test_buckets_by_leading_hour(self):
        buckets = build_hourly_metrics([
            make_closed(10.0, entry_time="09:31:00"),
            make_closed(5.0, entry_time="9:45"),
            make_closed(-1.0, entry_time="15:59:59"),
        ])
        assert buckets[9].trade_count == 2
        assert buckets[9].pnl == pytest.approx(15.0)
        assert buckets[15].pnl == pytest.approx(-1.0)

    def test_unusable_times_skipped(self):
        buckets = build_hourly_metrics([
            make_closed(10.0, entry_time=None),
            make_closed(10.0, entry_time="xx:00"),
            make_closed(10.0, entry_time="25:00"),
        ])
        assert sum(b.trade_count for b in buckets) == 0

    def test_parse_hour(self):
        assert parse_hour("00:00:00") == 0
        assert parse_hour("23:59") == 23
        assert parse_hour("") is None
        assert parse_hour("-1:00") is None


class TestTicker:
    def test_option_uses_underlying(self):
        assert extract_ticker("NVDA Jan17'25 130 PUT", AssetClass.OPTION) == "NVDA"
        assert extract_ticker(" AAPL ", AssetClass.STOCK) == "AAPL"
        assert extract_ticker("   ", AssetClass.STOCK) == "UNKNOWN"

    def test_sorted_by_pnl_then_name(self):
        metrics = build_ticker_metrics([
            make_closed(10.0, symbol="MSFT"),
            make_closed(50.0, symbol="AAPL"),
            make_closed(10.0, symbol="AMD"),
            make_closed(-5.0, symbol="NVDA 130 PUT", asset_class=AssetClass.OPTION),
            make_closed(20.0, symbol="NVDA", asset_class=AssetClass.STOCK),
        ])
        assert [(m.ticker, m.pnl) for m in metrics] == [
            ("AAPL", 50.0),
            ("NVDA", 15.0),
            ("AMD", 10.0),
            ("MSFT", 10.0),
        ]
        nvda = metrics[1]
        assert nvda.trade_count == 2

    def test_sparse(self):
        assert build_ticker_metrics([]) == []


class TestEquityCurve:
    def test_one_point_per_date(self):
        curve = calculate_equity_curve([
            make_closed(100.0, "2024-01-01"),
            make_closed(-50.0, "2024-01-02"),
            make_closed(-100.0, "2024-01-02"),
            make_closed(80.0, "2024-01-03"),
            make_open("2024-01-04"),
        ])
        assert [p.date for p in curve] == ["2024-01-01", "2024-01-02", "2024-01-03"]
        assert [p.cumulative_pnl for p in curve] == pytest.approx([100.0, -50.0, 30.0])
        assert [p.drawdown for p in curve] == pytest.approx([0.0, 150.0, 70.0])
        assert calculate_max_drawdown(curve) == pytest.approx(150.0)

    def test_empty(self):
        assert calculate_equity_curve([]) == []
        assert calculate_max_drawdown([]) == 0.0
