"""Broker import preview: round-trip aggregation and grouping."""

from .aggregator import (
    PositionTracker,
    aggregate_executions,
    apply_derived_fields,
    parse_and_aggregate,
)
from .grouping import group_trades_by_underlying

__all__ = [
    "PositionTracker",
    "aggregate_executions",
    "apply_derived_fields",
    "parse_and_aggregate",
    "group_trades_by_underlying",
]
