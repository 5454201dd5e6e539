"""Notification channel interface and dispatcher.

NotificationChannel    -- ABC every channel must implement.
NotificationDispatcher -- Posts each transition to every registered channel;
                          failures in one channel never block the others or
                          the watch loop.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Sequence

import structlog

from unitwatch.errors import DeliveryError
from unitwatch.models.units import Transition

_log = structlog.get_logger(component="notifications.manager")


class NotificationChannel(ABC):
    """Abstract base class for all notification channels."""

    @property
    @abstractmethod
    def channel_name(self) -> str:
        """Human-readable channel identifier used in logs."""

    @abstractmethod
    async def post(self, transition: Transition) -> None:
        """Deliver *transition* via this channel.

        Raises:
            DeliveryError: the remote endpoint did not accept the message.
        """

    async def aclose(self) -> None:
        """Release any pooled connections. The default does nothing."""


class NotificationDispatcher:
    """Fan-out dispatcher that posts transitions to every registered channel.

    * Each transition is posted at most once per channel; there is no retry.
    * Transitions are delivered in batch order; channels run concurrently
      for a single transition.
    * Never raises for delivery problems: DeliveryError and unexpected
      channel errors are logged and counted.
    """

    def __init__(self, channels: Sequence[NotificationChannel]) -> None:
        self._channels = list(channels)
        self.delivered = 0
        self.failed = 0

    @property
    def channels(self) -> list[NotificationChannel]:
        return list(self._channels)

    async def deliver(self, transitions: Sequence[Transition]) -> None:
        """Post every transition in *transitions* to every channel."""
        for transition in transitions:
            await asyncio.gather(*(self._post_one(channel, transition) for channel in self._channels))

    async def aclose(self) -> None:
        for channel in self._channels:
            await channel.aclose()

    async def _post_one(self, channel: NotificationChannel, transition: Transition) -> None:
        try:
            await channel.post(transition)
        except DeliveryError as exc:
            self.failed += 1
            _log.warning(
                "notification_failed",
                channel=channel.channel_name,
                unit=transition.unit.name,
                kind=transition.kind.value,
                error=str(exc),
            )
            return
        except Exception as exc:  # noqa: BLE001
            self.failed += 1
            _log.error(
                "notification_channel_unexpected_error",
                channel=channel.channel_name,
                unit=transition.unit.name,
                error=str(exc),
            )
            return

        self.delivered += 1
        _log.debug(
            "notification_sent",
            channel=channel.channel_name,
            unit=transition.unit.name,
            kind=transition.kind.value,
        )
