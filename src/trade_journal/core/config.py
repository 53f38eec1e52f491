"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from .errors import ConfigError


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "console"  # "json" or "console"


class ImportConfig(BaseModel):
    option_multiplier: float = 100.0  # 1 contract = 100 shares
    closed_qty_epsilon: float = 0.0001  # Residual qty treated as flat


class ReportConfig(BaseModel):
    unknown_ticker: str = "UNKNOWN"  # Label for trades with a blank symbol


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level application settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    importing: ImportConfig = Field(default_factory=ImportConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

    model_config = {"env_prefix": "TRADE_JOURNAL_", "env_nested_delimiter": "__"}


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).  A path that does
            not exist is ignored.
        overrides: Dict of overrides to apply on top.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            try:
                with open(path, "rb") as f:
                    data = tomli.load(f)
            except tomli.TOMLDecodeError as exc:
                raise ConfigError(f"Malformed config file {path}: {exc}") from exc

    if overrides:
        data.update(overrides)

    return Settings(**data)
