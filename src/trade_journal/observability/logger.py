"""Structured logging with run_id support.

The library modules log through plain ``logging.getLogger(__name__)``;
the CLI logs through structlog.  Both end up in one stderr handler whose
:class:`structlog.stdlib.ProcessorFormatter` renders every record as
JSON or console text, stamped with the run_id of the current invocation.
stdout stays reserved for command output.
"""

from __future__ import annotations

import logging
import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator

import structlog

_run_id: ContextVar[str] = ContextVar("run_id", default="")


def get_run_id() -> str:
    """Current run ID, created on first use."""
    rid = _run_id.get()
    if not rid:
        rid = new_run_id()
    return rid


def set_run_id(run_id: str) -> None:
    _run_id.set(run_id)


def new_run_id() -> str:
    """Generate and set a new run ID."""
    rid = uuid.uuid4().hex[:12]
    _run_id.set(rid)
    return rid


def _add_run_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: add run_id to every log entry."""
    event_dict["run_id"] = get_run_id()
    return event_dict


def _shared_processors() -> list[Any]:
    # Applied to structlog events and foreign stdlib records alike
    return [
        structlog.contextvars.merge_contextvars,
        _add_run_id,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def setup_logging(
    level: str = "INFO",
    format: str = "console",
) -> None:
    """Configure structlog and the root stdlib logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format: "json" for machine-readable output, "console" for humans.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    shared = _shared_processors()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    renderer: Any
    if format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for a module."""
    return structlog.get_logger(name)


@contextmanager
def command_context(command: str, **fields: Any) -> Iterator[None]:
    """Bind ``command`` (and extra fields) to every log line inside the block.

    Logs completion with the elapsed time, or the exception type when the
    block raises.  The exception is re-raised unchanged.
    """
    log = get_logger("trade_journal.command")
    tokens = structlog.contextvars.bind_contextvars(command=command, **fields)
    started = time.perf_counter()
    try:
        yield
    except Exception as exc:
        log.info("command failed", error_type=type(exc).__name__)
        raise
    else:
        log.debug("command finished", elapsed_ms=round((time.perf_counter() - started) * 1000, 1))
    finally:
        structlog.contextvars.reset_contextvars(**tokens)
