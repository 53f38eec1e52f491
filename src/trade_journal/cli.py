"""CLI entry point for the trade journal analytics engine."""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from typing import Any

import click
from pydantic import TypeAdapter, ValidationError

from .core.config import Settings, load_settings
from .core.errors import ConfigError, PasteParseError
from .core.models import Trade
from .observability.logger import command_context, get_logger, new_run_id, setup_logging

_TRADES = TypeAdapter(list[Trade])

BUCKETS = ("daily", "monthly", "weekday", "hourly", "ticker", "equity")

log = get_logger("trade_journal.cli")


def _dump(payload: Any) -> None:
    """Write a model, list of models or plain dict to stdout as JSON."""
    click.echo(json.dumps(_jsonable(payload), indent=2))


def _jsonable(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if is_dataclass(value):
        return _jsonable(asdict(value))
    return value


def _load_trades(stream) -> list[Trade]:
    try:
        return _TRADES.validate_json(stream.read())
    except ValidationError as exc:
        raise click.ClickException(f"Invalid trades file: {exc}") from exc


@click.group()
@click.option("--config", default=None, help="TOML config file path")
@click.option("--log-level", default=None, help="Override log level")
@click.option("--log-format", type=click.Choice(["json", "console"]), default=None)
@click.pass_context
def main(ctx: click.Context, config: str | None, log_level: str | None, log_format: str | None) -> None:
    """Trade journal analytics."""
    try:
        settings = load_settings(config_path=config)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    setup_logging(
        level=log_level or settings.observability.log_level,
        format=log_format or settings.observability.log_format,
    )
    new_run_id()
    ctx.obj = settings


@main.command()
@click.argument("trades_file", type=click.File("r"))
@click.option("--account", default=None, help="Only trades of this account")
@click.option("--start", default=None, help="Start date (YYYY-MM-DD, inclusive)")
@click.option("--end", default=None, help="End date (YYYY-MM-DD, inclusive)")
def metrics(trades_file, account: str | None, start: str | None, end: str | None) -> None:
    """Print period metrics for a JSON list of trades."""
    from .journal import calculate_period_metrics, derive_all, filter_trades

    with command_context("metrics", account=account):
        trades = filter_trades(
            _load_trades(trades_file), account_id=account, start_date=start, end_date=end,
        )
        log.info("computing period metrics", trades=len(trades), start=start, end=end)
        _dump(calculate_period_metrics(derive_all(trades)))


@main.command()
@click.argument("trades_file", type=click.File("r"))
@click.option("--by", "dimension", type=click.Choice(BUCKETS), required=True)
@click.option("--account", default=None, help="Only trades of this account")
@click.option("--start", default=None, help="Start date (YYYY-MM-DD, inclusive)")
@click.option("--end", default=None, help="End date (YYYY-MM-DD, inclusive)")
@click.pass_obj
def buckets(
    settings: Settings,
    trades_file,
    dimension: str,
    account: str | None,
    start: str | None,
    end: str | None,
) -> None:
    """Print daily/monthly/weekday/hourly/ticker buckets or the equity curve."""
    from .journal import bucketing, derive_all, filter_trades

    with command_context("buckets", by=dimension):
        trades = derive_all(filter_trades(
            _load_trades(trades_file), account_id=account, start_date=start, end_date=end,
        ))
        log.info("bucketing trades", trades=len(trades))

        if dimension == "daily":
            result = bucketing.calculate_daily_performance(trades)
        elif dimension == "monthly":
            result = bucketing.aggregate_daily_to_monthly(
                bucketing.calculate_daily_performance(trades)
            )
        elif dimension == "weekday":
            result = bucketing.build_weekday_metrics(trades)
        elif dimension == "hourly":
            result = bucketing.build_hourly_metrics(trades)
        elif dimension == "ticker":
            result = bucketing.build_ticker_metrics(
                trades, unknown=settings.report.unknown_ticker
            )
        else:
            result = bucketing.calculate_equity_curve(trades)

        _dump(result)


@main.command("parse-paste")
@click.argument("paste_file", type=click.File("r"), default="-")
def parse_paste(paste_file) -> None:
    """Parse pasted IBKR execution rows into a trade draft."""
    from .parsers import parse_ibkr_paste

    try:
        with command_context("parse-paste"):
            draft = parse_ibkr_paste(paste_file.read())
    except PasteParseError as exc:
        raise click.ClickException(str(exc)) from exc
    _dump(draft)


@main.command("import-preview")
@click.argument("tlg_file", type=click.File("r"))
@click.pass_obj
def import_preview(settings: Settings, tlg_file) -> None:
    """Preview the round-trip trades contained in an IBKR TLG export."""
    from .importing import group_trades_by_underlying, parse_and_aggregate

    with command_context("import-preview"):
        closed, open_positions, errors = parse_and_aggregate(
            tlg_file.read(),
            multiplier=settings.importing.option_multiplier,
            epsilon=settings.importing.closed_qty_epsilon,
        )
        log.info(
            "import preview",
            closed=len(closed), open=len(open_positions), errors=len(errors),
        )
        _dump({
            "trades_to_import": closed,
            "open_positions": open_positions,
            "groups": group_trades_by_underlying(closed),
            "parse_errors": errors,
        })


if __name__ == "__main__":
    main()
