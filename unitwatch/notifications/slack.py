"""Slack incoming-webhook notification channel.

Posts one message per transition, overriding the webhook's default
channel, username and avatar.
"""

from __future__ import annotations

import httpx
import structlog

from unitwatch.errors import DeliveryError
from unitwatch.models.units import Transition, TransitionKind
from unitwatch.notifications.manager import NotificationChannel

_log = structlog.get_logger(component="notifications.slack")

_KIND_EMOJI: dict[TransitionKind, str] = {
    TransitionKind.ADDED: ":new:",
    TransitionKind.CHANGED: ":arrows_counterclockwise:",
    TransitionKind.REMOVED: ":wastebasket:",
}


class SlackNotificationChannel(NotificationChannel):
    """Delivers transitions to a Slack incoming webhook.

    Args:
        webhook_url: Slack incoming-webhook URL.
        channel:     Channel to post to, e.g. ``systemd-state``. Empty keeps
                     the webhook's default.
        username:    Display name for the bot.
        icon_url:    Avatar URL for the bot.
        timeout:     HTTP request timeout in seconds. Defaults to 10.
        transport:   httpx transport override, used by tests.
    """

    def __init__(
        self,
        webhook_url: str,
        channel: str = "",
        username: str = "",
        icon_url: str = "",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not webhook_url:
            raise ValueError("Slack webhook_url must not be empty")
        self._url = webhook_url
        self._channel = channel
        self._username = username
        self._icon_url = icon_url
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def channel_name(self) -> str:
        return "slack"

    async def post(self, transition: Transition) -> None:
        payload = self._build_payload(transition)
        try:
            response = await self._client.post(self._url, json=payload)
        except httpx.TimeoutException as exc:
            raise DeliveryError(self.channel_name, "request timed out") from exc
        except httpx.HTTPError as exc:
            raise DeliveryError(self.channel_name, str(exc)) from exc

        if not response.is_success:
            # Slack answers errors with a short plain-text reason
            raise DeliveryError(
                self.channel_name,
                f"HTTP {response.status_code}: {response.text[:200]}",
            )
        _log.debug("slack_message_posted", unit=transition.unit.name)

    async def aclose(self) -> None:
        await self._client.aclose()

    def _build_payload(self, transition: Transition) -> dict[str, str]:
        payload = {"text": f"{_KIND_EMOJI[transition.kind]} {transition.render()}"}
        if self._channel:
            payload["channel"] = self._channel
        if self._username:
            payload["username"] = self._username
        if self._icon_url:
            payload["icon_url"] = self._icon_url
        return payload
