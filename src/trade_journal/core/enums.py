"""Enumerations used across the trade journal."""

from enum import Enum


class Direction(str, Enum):
    LONG = "long"
    SHORT = "short"


class TradeStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class AssetClass(str, Enum):
    STOCK = "stock"
    OPTION = "option"


class TradeResult(str, Enum):
    """Win / loss / break-even classification."""

    WIN = "win"
    LOSS = "loss"
    BREAKEVEN = "breakeven"


class ExecutionType(str, Enum):
    ENTRY = "entry"
    EXIT = "exit"


class OptionType(str, Enum):
    CALL = "call"
    PUT = "put"


class PasteAction(str, Enum):
    """Side tokens in an IBKR trade-log paste."""

    BOT = "BOT"  # Bought
    SLD = "SLD"  # Sold


class TlgAction(str, Enum):
    """Open/close actions in an IBKR TLG export."""

    BUY_TO_OPEN = "BUYTOOPEN"
    SELL_TO_CLOSE = "SELLTOCLOSE"
    SELL_TO_OPEN = "SELLTOOPEN"
    BUY_TO_CLOSE = "BUYTOCLOSE"

    @classmethod
    def from_token(cls, token: str) -> "TlgAction | None":
        try:
            return cls(token.strip().upper())
        except ValueError:
            return None

    @property
    def is_opening(self) -> bool:
        return self in (TlgAction.BUY_TO_OPEN, TlgAction.SELL_TO_OPEN)

    @property
    def is_closing(self) -> bool:
        return self in (TlgAction.SELL_TO_CLOSE, TlgAction.BUY_TO_CLOSE)

    @property
    def is_buy(self) -> bool:
        return self in (TlgAction.BUY_TO_OPEN, TlgAction.BUY_TO_CLOSE)
