"""Parsers for broker execution text."""

from .ibkr_paste import detect_asset_class, parse_ibkr_paste
from .tlg import (
    OptionDetails,
    TlgExecution,
    TlgParseError,
    TlgParseResult,
    parse_option_symbol,
    parse_tlg_file,
)

__all__ = [
    "detect_asset_class",
    "parse_ibkr_paste",
    "OptionDetails",
    "TlgExecution",
    "TlgParseError",
    "TlgParseResult",
    "parse_option_symbol",
    "parse_tlg_file",
]
