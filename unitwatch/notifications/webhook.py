"""Generic JSON webhook notification channel.

Posts transition data as a JSON body to any configured HTTP endpoint. The
payload mirrors the Transition and UnitRecord fields so that consumers can
parse it without unitwatch-specific knowledge.
"""

from __future__ import annotations

import dataclasses

import httpx

from unitwatch.errors import DeliveryError
from unitwatch.models.units import Transition
from unitwatch.notifications.manager import NotificationChannel


class WebhookNotificationChannel(NotificationChannel):
    """Delivers transitions by POSTing a JSON payload to a configurable URL.

    Args:
        url:       Full endpoint URL.
        headers:   Optional extra headers (e.g. Authorization).
        timeout:   HTTP request timeout in seconds. Defaults to 10.
        transport: httpx transport override, used by tests.
    """

    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not url:
            raise ValueError("Webhook url must not be empty")
        self._url = url
        self._headers = headers or {}
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def channel_name(self) -> str:
        return "webhook"

    async def post(self, transition: Transition) -> None:
        """POST *transition* as JSON; anything but a 2xx is a DeliveryError."""
        request_headers = {
            "Content-Type": "application/json",
            **self._headers,
        }
        try:
            response = await self._client.post(
                self._url,
                json=self._build_payload(transition),
                headers=request_headers,
            )
        except httpx.TimeoutException as exc:
            raise DeliveryError(self.channel_name, f"request to {self._url} timed out") from exc
        except httpx.HTTPError as exc:
            raise DeliveryError(self.channel_name, str(exc)) from exc

        if not response.is_success:
            raise DeliveryError(
                self.channel_name,
                f"HTTP {response.status_code}: {response.text[:200]}",
            )

    async def aclose(self) -> None:
        await self._client.aclose()

    def _build_payload(self, transition: Transition) -> dict[str, object]:
        """Serialise *transition* to a plain dict for JSON encoding."""
        return {
            "kind": transition.kind.value,
            "message": transition.render(),
            "unit": dataclasses.asdict(transition.unit),
        }
