"""Tests for the monthly calendar grid and year tables."""

import pytest

from trade_journal.core.models import DailyPerformance, MonthlyPerformance
from trade_journal.journal.calendar_view import (
    build_month_grid,
    calculate_month_stats,
    calculate_weekly_summaries,
    calculate_year_total,
    group_by_year,
)


def _month(year_month: str, pnl: float) -> MonthlyPerformance:
    year, month = year_month.split("-")
    return MonthlyPerformance(
        year_month=year_month, year=int(year), month=int(month), realized_net_pnl=pnl,
    )


class TestYearTable:
    def test_group_by_year(self):
        months = [_month("2023-12", 10.0), _month("2024-01", 20.0), _month("2024-02", -5.0)]
        grouped = group_by_year(months)
        assert list(grouped) == [2023, 2024]
        assert [m.year_month for m in grouped[2024]] == ["2024-01", "2024-02"]
        assert calculate_year_total(grouped[2024]) == pytest.approx(15.0)

    def test_empty_year_total(self):
        assert calculate_year_total([]) == 0.0


class TestMonthStats:
    def test_counts_only_days_with_trades(self):
        stats = calculate_month_stats([
            DailyPerformance(date="2024-02-01", realized_net_pnl=30.0, trade_count=2),
            DailyPerformance(date="2024-02-02", realized_net_pnl=0.0, trade_count=0),
            DailyPerformance(date="2024-02-05", realized_net_pnl=-10.0, trade_count=1),
        ])
        assert stats.trading_days == 2
        assert stats.total_pnl == pytest.approx(20.0)


class TestMonthGrid:
    def test_sunday_first_with_padding(self):
        # February 2024 starts on a Thursday and ends on Thursday the 29th
        grid = build_month_grid(2024, 2, [])
        assert len(grid) == 5
        assert all(len(week) == 7 for week in grid)
        assert grid[0][0].date == "2024-01-28"
        assert not grid[0][0].is_current_month
        assert grid[0][4].date == "2024-02-01"
        assert grid[0][4].is_current_month
        assert grid[-1][-1].date == "2024-03-02"

    def test_month_starting_on_sunday_has_no_lead(self):
        grid = build_month_grid(2024, 9, [])
        assert grid[0][0].date == "2024-09-01"
        assert grid[0][0].day_number == 1

    def test_cells_carry_daily_figures(self):
        grid = build_month_grid(2024, 2, [
            DailyPerformance(
                date="2024-02-01", realized_net_pnl=40.0,
                trade_count=4, win_count=3, loss_count=1,
            ),
        ])
        cell = grid[0][4]
        assert cell.pnl == pytest.approx(40.0)
        assert cell.trade_count == 4
        assert cell.win_rate == pytest.approx(75.0)
        assert grid[0][5].win_rate is None

    def test_weekly_summaries_ignore_padding_days(self):
        daily = [
            DailyPerformance(date="2024-01-29", realized_net_pnl=99.0, trade_count=1),
            DailyPerformance(date="2024-02-01", realized_net_pnl=10.0, trade_count=1),
            DailyPerformance(date="2024-02-02", realized_net_pnl=-4.0, trade_count=2),
        ]
        grid = build_month_grid(2024, 2, daily)
        summaries = calculate_weekly_summaries(grid)
        assert [s.week_number for s in summaries] == [1, 2, 3, 4, 5]
        assert summaries[0].total_pnl == pytest.approx(6.0)
        assert summaries[0].trading_days == 2
        assert summaries[1].trading_days == 0
