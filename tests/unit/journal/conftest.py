"""Shared fixtures for journal analytics tests."""

import pytest

from trade_journal.core.enums import (
    AssetClass,
    Direction,
    TradeStatus,
)
from trade_journal.core.models import Trade, TradeWithDerived
from trade_journal.journal.derived import classify_result


def make_trade(
    trade_id: str = "t1",
    symbol: str = "AAPL",
    direction: Direction = Direction.LONG,
    entry_price: float = 150.0,
    exit_price: float | None = 160.0,
    quantity: float | None = 100.0,
    stop_loss_price: float | None = None,
    fees: float = 0.0,
    status: TradeStatus = TradeStatus.CLOSED,
    trade_date: str = "2024-01-01",
    entry_time: str | None = None,
    asset_class: AssetClass = AssetClass.STOCK,
    account_id: str = "acct_1",
) -> Trade:
    """Helper to create a stored Trade."""
    return Trade(
        id=trade_id,
        account_id=account_id,
        symbol=symbol,
        asset_class=asset_class,
        trade_date=trade_date,
        direction=direction,
        quantity=quantity,
        entry_price=entry_price,
        exit_price=exit_price,
        stop_loss_price=stop_loss_price,
        entry_time=entry_time,
        fees=fees,
        status=status,
    )


def make_closed(
    net_pnl: float,
    trade_date: str = "2024-01-01",
    symbol: str = "AAPL",
    entry_time: str | None = None,
    asset_class: AssetClass = AssetClass.STOCK,
    trade_id: str = "t",
) -> TradeWithDerived:
    """A closed derived trade carrying a given net P&L."""
    return TradeWithDerived(
        id=trade_id,
        account_id="acct_1",
        symbol=symbol,
        asset_class=asset_class,
        trade_date=trade_date,
        direction=Direction.LONG,
        quantity=1.0,
        entry_price=100.0,
        exit_price=100.0 + net_pnl,
        entry_time=entry_time,
        status=TradeStatus.CLOSED,
        gross_pnl=net_pnl,
        net_pnl=net_pnl,
        pnl_per_share=net_pnl,
        result=classify_result(net_pnl),
    )


def make_open(
    trade_date: str = "2024-01-01",
    symbol: str = "AAPL",
    entry_time: str | None = None,
) -> TradeWithDerived:
    """An open derived trade: every derived field is None."""
    return TradeWithDerived(
        id="open",
        account_id="acct_1",
        symbol=symbol,
        trade_date=trade_date,
        direction=Direction.LONG,
        quantity=10.0,
        entry_price=100.0,
        entry_time=entry_time,
        status=TradeStatus.OPEN,
    )


@pytest.fixture
def long_winner() -> Trade:
    return make_trade(
        entry_price=150.0, exit_price=160.0, quantity=100.0,
        fees=2.0, stop_loss_price=145.0,
    )


@pytest.fixture
def mixed_trades() -> list[TradeWithDerived]:
    return [
        make_closed(100.0, "2024-01-01", trade_id="a"),
        make_closed(50.0, "2024-01-02", trade_id="b"),
        make_closed(-75.0, "2024-01-03", trade_id="c"),
        make_closed(0.0, "2024-01-04", trade_id="d"),
    ]
