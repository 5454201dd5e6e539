"""Notification system for unitwatch.

Delivers unit transitions to one or more channels (Slack, generic webhook).

Exports:
    NotificationChannel        -- Abstract base for all channel implementations.
    NotificationDispatcher     -- Posts each transition to every channel.
    SlackNotificationChannel   -- Slack incoming-webhook channel.
    WebhookNotificationChannel -- Generic JSON POST webhook channel.
    build_notification_dispatcher -- Factory used by the application bootstrap.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from unitwatch.notifications.manager import NotificationChannel, NotificationDispatcher
from unitwatch.notifications.slack import SlackNotificationChannel
from unitwatch.notifications.webhook import WebhookNotificationChannel

if TYPE_CHECKING:
    from unitwatch.models.config import SlackConfig, WebhookConfig

_log = structlog.get_logger(component="notifications")

__all__ = [
    "NotificationChannel",
    "NotificationDispatcher",
    "SlackNotificationChannel",
    "WebhookNotificationChannel",
    "build_notification_dispatcher",
]


def build_notification_dispatcher(
    slack: SlackConfig,
    webhook: WebhookConfig,
) -> NotificationDispatcher:
    """Build a NotificationDispatcher from the configured channels.

    A channel is enabled only when its URL is non-empty. With no channels
    the dispatcher is a no-op and transitions are only logged and echoed.
    """
    channels: list[NotificationChannel] = []

    if slack.webhook_url:
        channels.append(
            SlackNotificationChannel(
                webhook_url=slack.webhook_url,
                channel=slack.channel,
                username=slack.username,
                icon_url=slack.icon_url,
                timeout=slack.timeout_seconds,
            )
        )
        _log.info("slack_channel_enabled", channel=slack.channel)
    else:
        _log.debug("slack_channel_skipped", reason="no webhook url")

    if webhook.url:
        channels.append(WebhookNotificationChannel(url=webhook.url, timeout=webhook.timeout_seconds))
        _log.info("webhook_channel_enabled")
    else:
        _log.debug("webhook_channel_skipped", reason="no webhook url")

    if not channels:
        _log.info("no_notification_channels_configured")

    return NotificationDispatcher(channels=channels)
