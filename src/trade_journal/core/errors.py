"""Custom exception hierarchy for the trade journal."""


class JournalError(Exception):
    """Base exception for all trade journal errors."""


# --- Configuration ---
class ConfigError(JournalError):
    """Invalid or unreadable configuration."""


# --- Parsing ---
class ParseError(JournalError):
    """Broker input could not be parsed."""


class PasteParseError(ParseError):
    """An IBKR paste was rejected.  Callers re-prompt for a corrected paste."""


class EmptyPasteError(PasteParseError):
    """Nothing to parse."""

    def __init__(self) -> None:
        super().__init__("Nothing to parse: paste IBKR rows to parse.")


class UnparseableLineError(PasteParseError):
    """A line does not match the IBKR execution layout."""

    def __init__(self, line: str):
        self.line = line
        super().__init__(f"Could not parse IBKR line: {line}")


class InvalidFieldError(PasteParseError):
    """A well-shaped line carries an invalid quantity, price or fee."""

    def __init__(self, field: str, line: str):
        self.field = field
        self.line = line
        super().__init__(f"Invalid {field} in IBKR line: {line}")


class MultipleSymbolsError(PasteParseError):
    """The paste mixes executions from more than one symbol."""

    def __init__(self, symbols: list[str]):
        self.symbols = symbols
        super().__init__(
            "IBKR paste contains multiple symbols "
            f"({', '.join(symbols)}). Paste one trade at a time."
        )


class NoEntriesError(PasteParseError):
    """No executions on the entry side of the inferred direction."""

    def __init__(self) -> None:
        super().__init__("No entry rows found in IBKR paste.")


class TlgLineError(ParseError):
    """A single TLG transaction line is malformed."""
