"""IBKR trade-log paste parser.

Turns rows copied from the IBKR "Trades" window into a draft for the
trade-entry form.  One paste describes exactly one round-trip trade::

    16:18:51 NVDA Jan17'25 130 PUT BOT 20 2.44 13.97 -48.80
    16:36:13 NVDA Jan17'25 130 PUT SLD 10 2.60 7.02 26.00

Each row carries a time, a symbol, the side (``BOT``/``SLD``), quantity,
price, commission and an optional running total that is not used.

The side of the chronologically first row fixes the direction; entry
and exit rows are then split purely by side, so scale-ins after a
partial exit still land among the entries.  Entries are folded into one
quantity-weighted price; exits stay one per row.

Any malformed row aborts the whole parse with a :class:`PasteParseError`
subclass naming the offending line.  Nothing is silently dropped.

Usage::

    draft = parse_ibkr_paste(clipboard_text)
    form.prefill(draft.model_dump())
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass

from ..core.enums import AssetClass, Direction, PasteAction
from ..core.errors import (
    EmptyPasteError,
    InvalidFieldError,
    MultipleSymbolsError,
    NoEntriesError,
    UnparseableLineError,
)
from ..core.models import DraftExit, ParsedIbkrTradeDraft

logger = logging.getLogger(__name__)

_NUMBER = r"-?[\d,]+(?:\.\d+)?"

LINE_RE = re.compile(
    r"^\s*(?:[+-]\s+)?"                 # optional row marker
    r"(\d{1,2}:\d{2}:\d{2})\s+"         # time
    r"(.+?)\s+"                         # symbol
    r"(BOT|SLD)\s+"                     # side
    rf"({_NUMBER})\s+"                  # quantity
    rf"({_NUMBER})\s+"                  # price
    rf"({_NUMBER})"                     # commission
    rf"(?:\s+({_NUMBER}))?"             # running total, ignored
    r"\s*$",
    re.IGNORECASE,
)

_OPTION_RE = re.compile(r"\b(CALL|PUT)\b", re.IGNORECASE)
_LINE_SPLIT_RE = re.compile(r"\r?\n")


@dataclass
class _PasteRow:
    sort_time: str  # HH:MM:SS, zero-padded
    time: str  # HH:MM
    symbol: str
    action: PasteAction
    quantity: float
    price: float
    fees: float


def _to_number(raw: str) -> float:
    """Parse a number with thousands separators; NaN when nothing is left."""
    try:
        return float(raw.replace(",", ""))
    except ValueError:
        # A bare "," matches the row pattern but holds no digits
        return math.nan


def _parse_row(line: str) -> _PasteRow:
    match = LINE_RE.match(line)
    if match is None:
        logger.debug("Unparseable IBKR row: %r", line)
        raise UnparseableLineError(line)

    time_raw, symbol, action, qty_raw, price_raw, fees_raw = match.groups()[:6]
    quantity = _to_number(qty_raw)
    price = _to_number(price_raw)
    fees = abs(_to_number(fees_raw))

    if not math.isfinite(quantity) or quantity <= 0:
        raise InvalidFieldError("quantity", line)
    if not math.isfinite(price) or price <= 0:
        raise InvalidFieldError("price", line)
    if not math.isfinite(fees) or fees < 0:
        raise InvalidFieldError("fees", line)

    hour, minute, second = time_raw.split(":")
    hour = hour.zfill(2)

    return _PasteRow(
        sort_time=f"{hour}:{minute}:{second}",
        time=f"{hour}:{minute}",
        symbol=symbol.strip(),
        action=PasteAction(action.upper()),
        quantity=quantity,
        price=price,
        fees=fees,
    )


def detect_asset_class(symbol: str) -> AssetClass:
    return AssetClass.OPTION if _OPTION_RE.search(symbol) else AssetClass.STOCK


def parse_ibkr_paste(text: str) -> ParsedIbkrTradeDraft:
    """Parse pasted IBKR execution rows into a single trade draft.

    Raises
    ------
    EmptyPasteError
        The paste holds no non-blank lines.
    UnparseableLineError
        A line does not have the execution-row layout.
    InvalidFieldError
        Quantity or price is not positive, or the fee is not a finite number.
    MultipleSymbolsError
        Rows belong to more than one symbol.
    NoEntriesError
        No rows on the entry side of the inferred direction.
    """
    lines = [line.strip() for line in _LINE_SPLIT_RE.split(text)]
    lines = [line for line in lines if line]
    if not lines:
        raise EmptyPasteError()

    rows = [_parse_row(line) for line in lines]

    symbol = rows[0].symbol
    symbols = list(dict.fromkeys(row.symbol for row in rows))
    if len(symbols) > 1:
        raise MultipleSymbolsError(symbols)

    earliest = min(rows, key=lambda r: r.sort_time)
    if earliest.action == PasteAction.BOT:
        direction = Direction.LONG
        entry_action, exit_action = PasteAction.BOT, PasteAction.SLD
    else:
        direction = Direction.SHORT
        entry_action, exit_action = PasteAction.SLD, PasteAction.BOT

    entries = [r for r in rows if r.action == entry_action]
    exits = [r for r in rows if r.action == exit_action]
    if not entries:
        raise NoEntriesError()

    quantity = sum(r.quantity for r in entries)
    entry_price = sum(r.quantity * r.price for r in entries) / quantity
    entry_fees = sum(r.fees for r in entries)

    logger.debug(
        "Parsed IBKR paste %s: %s, %d entries, %d exits",
        symbol, direction.value, len(entries), len(exits),
    )

    return ParsedIbkrTradeDraft(
        symbol=symbol,
        asset_class=detect_asset_class(symbol),
        direction=direction,
        quantity=quantity,
        entry_price=entry_price,
        entry_fees=entry_fees,
        exits=[
            DraftExit(exit_time=r.time, quantity=r.quantity, price=r.price, fees=r.fees)
            for r in exits
        ],
    )
