"""Configuration loading from environment variables."""

from __future__ import annotations

import os
import re

from unitwatch.models.config import (
    DEFAULT_ICON_URL,
    DEFAULT_INTERVAL,
    DEFAULT_STATE_FILE,
    LogConfig,
    SlackConfig,
    UnitWatchConfig,
    WatchConfig,
    WebhookConfig,
)

_DURATION_RE = re.compile(r"^([0-9]+)(ms|s|m|h)$")
_DURATION_SCALE = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"UNITWATCH_{key}", default)


def _env_float(key: str, default: float) -> float:
    return float(_env(key, str(default)))


def parse_duration(value: str) -> float:
    """Convert a duration such as ``500ms`` or ``2s`` to seconds."""
    match = _DURATION_RE.match(value.strip())
    if match is None:
        raise ValueError(f"Invalid duration format: {value}")
    amount, unit = match.groups()
    return int(amount) * _DURATION_SCALE[unit]


def validate_duration(value: str) -> str:
    parse_duration(value)
    return value.strip()


def validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def load_config() -> UnitWatchConfig:
    """Load configuration from UNITWATCH_* environment variables."""
    return UnitWatchConfig(
        watch=WatchConfig(
            state_file=_env("STATE_FILE", DEFAULT_STATE_FILE),
            interval=validate_duration(_env("INTERVAL", DEFAULT_INTERVAL)),
        ),
        slack=SlackConfig(
            webhook_url=_env("SLACK_WEBHOOK_URL", ""),
            channel=_env("SLACK_CHANNEL", "systemd-state"),
            username=_env("SLACK_USERNAME", "systemd"),
            icon_url=_env("SLACK_ICON_URL", DEFAULT_ICON_URL),
            timeout_seconds=_env_float("SLACK_TIMEOUT", 10.0),
        ),
        webhook=WebhookConfig(
            url=_env("WEBHOOK_URL", ""),
            timeout_seconds=_env_float("WEBHOOK_TIMEOUT", 10.0),
        ),
        log=LogConfig(
            level=validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )
