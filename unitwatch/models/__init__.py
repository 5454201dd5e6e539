"""Core data structures for unitwatch."""

from unitwatch.models.config import (
    LogConfig,
    SlackConfig,
    UnitWatchConfig,
    WatchConfig,
    WebhookConfig,
)
from unitwatch.models.units import Snapshot, Transition, TransitionKind, UnitRecord

__all__ = [
    "LogConfig",
    "SlackConfig",
    "Snapshot",
    "Transition",
    "TransitionKind",
    "UnitRecord",
    "UnitWatchConfig",
    "WatchConfig",
    "WebhookConfig",
]
