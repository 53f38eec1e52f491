"""Per-trade P&L and risk derivation.

Turns a stored :class:`Trade` into a :class:`TradeWithDerived`.  The
derived fields are never persisted; they are recomputed on every read so
an edited trade can never carry stale numbers.

Sign conventions follow the trade direction:

* long:  ``pnl_per_share = exit - entry``, ``risk_per_share = entry - stop``
* short: ``pnl_per_share = entry - exit``, ``risk_per_share = stop - entry``

A stop on the wrong side of the entry yields a negative risk, which is
passed through rather than rejected.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..core.enums import Direction, TradeResult, TradeStatus
from ..core.models import Trade, TradeWithDerived

logger = logging.getLogger(__name__)


def calculate_pnl_per_share(
    direction: Direction, entry_price: float, exit_price: float
) -> float:
    if direction == Direction.LONG:
        return exit_price - entry_price
    return entry_price - exit_price


def calculate_risk_per_share(
    direction: Direction, entry_price: float, stop_loss_price: float | None
) -> float | None:
    """Distance from entry to stop in the losing direction, or None without a stop."""
    if stop_loss_price is None:
        return None
    if direction == Direction.LONG:
        return entry_price - stop_loss_price
    return stop_loss_price - entry_price


def calculate_r_multiple(
    pnl_per_share: float, risk_per_share: float | None
) -> float | None:
    if risk_per_share is None or risk_per_share == 0:
        return None
    return pnl_per_share / risk_per_share


def classify_result(net_pnl: float) -> TradeResult:
    if net_pnl > 0:
        return TradeResult.WIN
    if net_pnl < 0:
        return TradeResult.LOSS
    return TradeResult.BREAKEVEN


def calculate_derived_fields(trade: Trade) -> TradeWithDerived:
    """Compute the derived fields for one trade.

    Only closed trades with both an exit price and a quantity get numbers;
    anything else comes back with all six derived fields set to ``None``.
    """
    # Stored fields only, so re-deriving a TradeWithDerived starts clean
    base = trade.model_dump(include=set(Trade.model_fields))

    if (
        trade.status != TradeStatus.CLOSED
        or trade.exit_price is None
        or trade.quantity is None
    ):
        return TradeWithDerived(**base)

    pnl_per_share = calculate_pnl_per_share(
        trade.direction, trade.entry_price, trade.exit_price
    )
    gross_pnl = pnl_per_share * trade.quantity
    net_pnl = gross_pnl - trade.fees
    risk_per_share = calculate_risk_per_share(
        trade.direction, trade.entry_price, trade.stop_loss_price
    )

    return TradeWithDerived(
        **base,
        gross_pnl=gross_pnl,
        net_pnl=net_pnl,
        pnl_per_share=pnl_per_share,
        risk_per_share=risk_per_share,
        r_multiple=calculate_r_multiple(pnl_per_share, risk_per_share),
        result=classify_result(net_pnl),
    )


def derive_all(trades: Iterable[Trade]) -> list[TradeWithDerived]:
    """Derive every trade, preserving input order."""
    derived = [calculate_derived_fields(t) for t in trades]
    logger.debug("Derived fields for %d trades", len(derived))
    return derived
