"""Fold TLG executions into round-trip trades for the import preview.

Executions are replayed in (date, time) order and tracked per contract
symbol.  Opening actions become entries and closing actions become exits;
the first opening action fixes the direction.  Once exits cover the
entered quantity the position is closed and its P&L is computed from
volume-weighted entry and exit prices.

Options are priced per share, so their P&L is scaled by the contract
multiplier (100 by default).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from ..core.enums import AssetClass, Direction, ExecutionType, TlgAction, TradeStatus
from ..core.models import AggregatedTrade, Execution
from ..parsers.tlg import OptionDetails, TlgExecution, TlgParseError, parse_tlg_file

logger = logging.getLogger(__name__)

DEFAULT_OPTION_MULTIPLIER = 100.0
DEFAULT_CLOSED_EPSILON = 0.0001

# Used as trade date when a position has only exits
_EPOCH_DATE = "1970-01-01"


def _to_execution(exec_: TlgExecution, execution_type: ExecutionType) -> Execution:
    return Execution(
        execution_type=execution_type,
        execution_date=exec_.execution_date.isoformat(),
        execution_time=exec_.execution_time,
        quantity=exec_.abs_quantity,
        price=exec_.price,
        fees=exec_.abs_fees,
        exchange=exec_.exchange,
        broker_execution_id=exec_.broker_execution_id,
    )


def _weighted_price(executions: list[Execution]) -> float | None:
    qty = sum(e.quantity for e in executions)
    if qty <= 0:
        return None
    return sum(e.quantity * e.price for e in executions) / qty


@dataclass
class PositionTracker:
    """Accumulates the executions of one contract symbol."""

    symbol: str
    underlying_symbol: str
    asset_class: AssetClass
    option_details: OptionDetails | None = None
    direction: Direction | None = None
    entries: list[TlgExecution] = field(default_factory=list)
    exits: list[TlgExecution] = field(default_factory=list)

    def add_execution(self, exec_: TlgExecution) -> None:
        if exec_.action.is_opening:
            if self.direction is None:
                self.direction = (
                    Direction.LONG if exec_.action == TlgAction.BUY_TO_OPEN
                    else Direction.SHORT
                )
            self.entries.append(exec_)
        else:
            self.exits.append(exec_)

    def to_aggregated_trade(
        self,
        *,
        multiplier: float = DEFAULT_OPTION_MULTIPLIER,
        epsilon: float = DEFAULT_CLOSED_EPSILON,
    ) -> AggregatedTrade:
        entries = [_to_execution(e, ExecutionType.ENTRY) for e in self.entries]
        exits = [_to_execution(e, ExecutionType.EXIT) for e in self.exits]
        trade_date = entries[0].execution_date if entries else _EPOCH_DATE

        details = self.option_details
        trade = AggregatedTrade(
            key=f"{self.symbol}_{trade_date}",
            symbol=self.symbol,
            underlying_symbol=self.underlying_symbol,
            asset_class=self.asset_class,
            option_type=details.option_type if details else None,
            strike_price=details.strike_price if details else None,
            expiration_date=details.expiration_date.isoformat() if details else None,
            direction=self.direction or Direction.LONG,
            trade_date=trade_date,
            entries=entries,
            exits=exits,
        )
        return apply_derived_fields(trade, multiplier=multiplier, epsilon=epsilon)


def apply_derived_fields(
    trade: AggregatedTrade,
    *,
    multiplier: float = DEFAULT_OPTION_MULTIPLIER,
    epsilon: float = DEFAULT_CLOSED_EPSILON,
) -> AggregatedTrade:
    """Fill quantity, average prices, fees, status and net P&L from the fills.

    The position counts as closed once exits cover the entered quantity,
    allowing ``epsilon`` of residue from fractional fills.  Returns a new
    record; ``trade`` is left untouched.
    """
    total_quantity = sum(e.quantity for e in trade.entries)
    avg_entry = _weighted_price(trade.entries) or 0.0
    total_fees = sum(e.fees for e in trade.entries) + sum(e.fees for e in trade.exits)
    exit_quantity = sum(e.quantity for e in trade.exits)

    update: dict = {
        "total_quantity": total_quantity,
        "avg_entry_price": avg_entry,
        "total_fees": total_fees,
        "status": TradeStatus.OPEN,
        "avg_exit_price": None,
        "net_pnl": None,
    }

    if trade.exits and exit_quantity >= total_quantity - epsilon:
        avg_exit = _weighted_price(trade.exits)
        if trade.direction == Direction.LONG:
            gross = (avg_exit - avg_entry) * total_quantity
        else:
            gross = (avg_entry - avg_exit) * total_quantity
        if trade.asset_class == AssetClass.OPTION:
            gross *= multiplier
        update.update(
            status=TradeStatus.CLOSED,
            avg_exit_price=avg_exit,
            net_pnl=gross - total_fees,
        )

    return trade.model_copy(update=update)


def aggregate_executions(
    executions: Iterable[TlgExecution],
    *,
    multiplier: float = DEFAULT_OPTION_MULTIPLIER,
    epsilon: float = DEFAULT_CLOSED_EPSILON,
) -> tuple[list[AggregatedTrade], list[AggregatedTrade]]:
    """Build round-trip trades from executions.

    Returns
    -------
    tuple
        ``(closed_trades, open_positions)``, each ordered by trade date.
    """
    ordered = sorted(executions, key=lambda e: (e.execution_date, e.execution_time))

    trackers: dict[str, PositionTracker] = {}
    for exec_ in ordered:
        tracker = trackers.get(exec_.symbol)
        if tracker is None:
            tracker = trackers[exec_.symbol] = PositionTracker(
                symbol=exec_.symbol,
                underlying_symbol=exec_.underlying_symbol,
                asset_class=exec_.asset_class,
                option_details=exec_.option_details,
            )
        tracker.add_execution(exec_)

    closed: list[AggregatedTrade] = []
    open_positions: list[AggregatedTrade] = []
    for tracker in trackers.values():
        trade = tracker.to_aggregated_trade(multiplier=multiplier, epsilon=epsilon)
        if trade.status == TradeStatus.CLOSED:
            closed.append(trade)
        else:
            open_positions.append(trade)

    closed.sort(key=lambda t: t.trade_date)
    open_positions.sort(key=lambda t: t.trade_date)

    logger.debug(
        "Aggregated %d executions into %d closed / %d open trades",
        len(ordered), len(closed), len(open_positions),
    )
    return closed, open_positions


def parse_and_aggregate(
    content: str,
    *,
    multiplier: float = DEFAULT_OPTION_MULTIPLIER,
    epsilon: float = DEFAULT_CLOSED_EPSILON,
) -> tuple[list[AggregatedTrade], list[AggregatedTrade], list[TlgParseError]]:
    """Parse a TLG export and aggregate it: ``(closed, open, parse_errors)``."""
    parsed = parse_tlg_file(content)
    closed, open_positions = aggregate_executions(
        parsed.executions, multiplier=multiplier, epsilon=epsilon
    )
    return closed, open_positions, parsed.errors
