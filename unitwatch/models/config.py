"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_STATE_FILE = "systemd.state"
DEFAULT_INTERVAL = "500ms"
DEFAULT_ICON_URL = "https://emoji.slack-edge.com/T043Q7UHW/garold/269d90c3a5ffe40f.png"


@dataclass
class WatchConfig:
    """Watch loop configuration."""

    state_file: str = DEFAULT_STATE_FILE
    interval: str = DEFAULT_INTERVAL


@dataclass
class SlackConfig:
    """Slack incoming-webhook configuration. Disabled when webhook_url is empty."""

    webhook_url: str = ""
    channel: str = "systemd-state"
    username: str = "systemd"
    icon_url: str = DEFAULT_ICON_URL
    timeout_seconds: float = 10.0


@dataclass
class WebhookConfig:
    """Generic JSON webhook configuration. Disabled when url is empty."""

    url: str = ""
    timeout_seconds: float = 10.0


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class UnitWatchConfig:
    """Top-level unitwatch configuration."""

    watch: WatchConfig = field(default_factory=WatchConfig)
    slack: SlackConfig = field(default_factory=SlackConfig)
    webhook: WebhookConfig = field(default_factory=WebhookConfig)
    log: LogConfig = field(default_factory=LogConfig)
