"""IBKR TLG (trade log) export parser.

A TLG file mixes account headers with pipe-delimited transaction rows.
Only stock (``STK_TRD``) and option (``OPT_TRD``) rows are read; all
other lines are skipped.  Both share one layout::

    KIND|trade_id|symbol|name|exchange|action|flags|YYYYMMDD|HH:MM:SS|
        currency|quantity|multiplier|price|total|fees|fx_rate

Quantities are signed (negative for sells) and fees are stored negative.
Unlike the paste parser, a bad row does not abort the file: it is
recorded as a :class:`TlgParseError` and the remaining rows still load,
so a preview can show what was skipped.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date

from ..core.enums import AssetClass, OptionType, TlgAction
from ..core.errors import TlgLineError

logger = logging.getLogger(__name__)

STOCK_PREFIX = "STK_TRD|"
OPTION_PREFIX = "OPT_TRD|"
_MIN_FIELDS = 16

# YYMMDD immediately followed by the call/put flag
_OCC_DATE_RE = re.compile(r"\d{6}[CP]")


@dataclass
class OptionDetails:
    """Contract terms decoded from an OCC option symbol."""

    underlying: str
    expiration_date: date
    option_type: OptionType
    strike_price: float


@dataclass
class TlgExecution:
    """One parsed transaction row."""

    broker_execution_id: str
    symbol: str
    name: str
    exchange: str
    action: TlgAction
    execution_date: date
    execution_time: str
    currency: str
    quantity: float  # Positive for buys, negative for sells
    multiplier: float
    price: float
    total: float
    fees: float  # Negative as exported
    fx_rate: float | None
    asset_class: AssetClass
    option_details: OptionDetails | None = None

    @property
    def abs_quantity(self) -> float:
        return abs(self.quantity)

    @property
    def abs_fees(self) -> float:
        return abs(self.fees)

    @property
    def underlying_symbol(self) -> str:
        if self.option_details is not None:
            return self.option_details.underlying
        return self.symbol


@dataclass
class TlgParseError:
    """A transaction row that could not be loaded."""

    line_number: int  # 1-based
    line_content: str
    error: str


@dataclass
class TlgParseResult:
    executions: list[TlgExecution] = field(default_factory=list)
    errors: list[TlgParseError] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _parse_float(raw: str, label: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise TlgLineError(f"Invalid {label}: {raw}") from None


def parse_tlg_date(raw: str) -> date:
    """Parse a ``YYYYMMDD`` date."""
    if len(raw) != 8 or not raw.isdigit():
        raise TlgLineError(f"Invalid date format: {raw}")
    try:
        return date(int(raw[0:4]), int(raw[4:6]), int(raw[6:8]))
    except ValueError:
        raise TlgLineError(f"Invalid date: {raw}") from None


def parse_option_symbol(contract: str) -> OptionDetails:
    """Decode an OCC contract symbol such as ``"AAPL  250905C00240000"``.

    The underlying is padded to six characters, followed by the expiry
    (YYMMDD), ``C``/``P`` and the strike times 1000.
    """
    contract = contract.strip()
    if len(contract) < 15:
        raise TlgLineError(f"Invalid option contract symbol: {contract} (too short)")

    match = _OCC_DATE_RE.search(contract)
    if match is None or match.start() == 0:
        raise TlgLineError(f"Could not find date portion in option symbol: {contract}")

    start = match.start()
    underlying = contract[:start].strip()
    if not underlying:
        raise TlgLineError(f"Empty underlying symbol in option contract: {contract}")

    yymmdd = contract[start:start + 6]
    try:
        # Two-digit years are in the 2000s
        expiration = date(2000 + int(yymmdd[0:2]), int(yymmdd[2:4]), int(yymmdd[4:6]))
    except ValueError:
        raise TlgLineError(f"Invalid expiration date: {yymmdd}") from None

    option_type = OptionType.CALL if contract[start + 6] == "C" else OptionType.PUT
    strike_raw = contract[start + 7:]
    try:
        strike_price = float(strike_raw) / 1000.0
    except ValueError:
        raise TlgLineError(f"Invalid strike price: {strike_raw}") from None

    return OptionDetails(
        underlying=underlying,
        expiration_date=expiration,
        option_type=option_type,
        strike_price=strike_price,
    )


# ---------------------------------------------------------------------------
# Rows
# ---------------------------------------------------------------------------

def parse_transaction(line: str) -> TlgExecution:
    """Parse one ``STK_TRD`` or ``OPT_TRD`` row."""
    fields = line.split("|")
    is_option = fields[0] == OPTION_PREFIX.rstrip("|")
    kind = "option" if is_option else "stock"

    if len(fields) < _MIN_FIELDS:
        raise TlgLineError(
            f"Invalid {kind} transaction: expected {_MIN_FIELDS} fields, got {len(fields)}"
        )

    action = TlgAction.from_token(fields[5])
    if action is None:
        raise TlgLineError(f"Unknown action: {fields[5]}")

    fx_rate = None
    if fields[15]:
        try:
            fx_rate = float(fields[15])
        except ValueError:
            fx_rate = None

    symbol = fields[2]
    return TlgExecution(
        broker_execution_id=fields[1],
        symbol=symbol,
        name=fields[3],
        exchange=fields[4],
        action=action,
        # fields[6] holds open/close flags, unused
        execution_date=parse_tlg_date(fields[7]),
        execution_time=fields[8],
        currency=fields[9],
        quantity=_parse_float(fields[10], "quantity"),
        multiplier=_parse_float(fields[11], "multiplier"),
        price=_parse_float(fields[12], "price"),
        total=_parse_float(fields[13], "total"),
        fees=_parse_float(fields[14], "fees"),
        fx_rate=fx_rate,
        asset_class=AssetClass.OPTION if is_option else AssetClass.STOCK,
        option_details=parse_option_symbol(symbol) if is_option else None,
    )


def parse_tlg_file(content: str) -> TlgParseResult:
    """Parse every transaction row of a TLG export."""
    result = TlgParseResult()

    for line_number, raw in enumerate(content.splitlines(), start=1):
        line = raw.strip()
        if not line.startswith((STOCK_PREFIX, OPTION_PREFIX)):
            continue
        try:
            result.executions.append(parse_transaction(line))
        except TlgLineError as exc:
            result.errors.append(TlgParseError(
                line_number=line_number, line_content=line, error=str(exc),
            ))

    if result.errors:
        logger.warning(
            "TLG parse: %d executions, %d rejected rows",
            len(result.executions), len(result.errors),
        )
    return result
