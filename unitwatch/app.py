"""Application bootstrap for unitwatch.

Wires the components in dependency order and runs the watch stream until
a signal arrives or the stream fails.
Startup order: logging -> systemd connection -> state store + watcher
              -> notifications

Every watch failure is fatal: it is logged and the process exits non-zero.
A fresh process reloads the state file and carries on from there.
"""

from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING

from unitwatch.config import parse_duration
from unitwatch.errors import UnitWatchError
from unitwatch.notifications import build_notification_dispatcher
from unitwatch.observability.logging import get_logger, setup_logging
from unitwatch.state import StateStore
from unitwatch.systemd import SystemdConnection
from unitwatch.watcher import Watcher

if TYPE_CHECKING:
    from unitwatch.models.config import UnitWatchConfig
    from unitwatch.models.units import Transition
    from unitwatch.notifications import NotificationDispatcher
    from unitwatch.systemd import UnitConnection


class UnitWatchApp:
    """Application root. Owns the watcher and the notification dispatcher.

    Args:
        config:     Resolved configuration.
        connection: Service manager connection; defaults to the system D-Bus.
    """

    def __init__(self, config: UnitWatchConfig, connection: UnitConnection | None = None) -> None:
        self.config = config
        self._connection = connection
        self._watcher: Watcher | None = None
        self._dispatcher: NotificationDispatcher | None = None
        self._stop = asyncio.Event()
        self._log = get_logger("app")

    def start(self) -> None:
        """Connect, load state and build the notification channels.

        Raises UnitConnectionError or a StateError when startup is impossible.
        """
        from unitwatch import __version__

        setup_logging(self.config.log.level)
        self._log = get_logger("app")
        self._log.info("unitwatch starting", version=__version__)

        if self._connection is None:
            self._connection = SystemdConnection()
        self._log.debug("systemd connection ready")

        store = StateStore(self.config.watch.state_file)
        self._watcher = Watcher.open(
            self._connection,
            store,
            interval=parse_duration(self.config.watch.interval),
            log=get_logger("watcher"),
        )
        self._dispatcher = build_notification_dispatcher(self.config.slack, self.config.webhook)
        self._log.info(
            "unitwatch started",
            state_file=self.config.watch.state_file,
            interval=self.config.watch.interval,
        )

    async def run(self) -> None:
        """Consume the watch stream until :meth:`request_stop` or a failure."""
        assert self._watcher is not None
        assert self._dispatcher is not None
        stream = self._watcher.stream(self._stop)
        try:
            async for batch in stream:
                _echo(batch)
                await self._dispatcher.deliver(batch)
        finally:
            await stream.aclose()

    def request_stop(self) -> None:
        """Stop after the current cycle; safe to call repeatedly."""
        if not self._stop.is_set():
            self._log.info("unitwatch shutting down")
            self._stop.set()

    async def stop(self) -> None:
        """Close the notification clients and the systemd connection."""
        if self._dispatcher is not None:
            await self._dispatcher.aclose()
            self._dispatcher = None
        if self._watcher is not None:
            self._watcher.close()
            self._watcher = None
        elif self._connection is not None:
            self._connection.close()
        self._connection = None
        self._log.info("unitwatch stopped")


def _echo(batch: list[Transition]) -> None:
    for transition in batch:
        print(f"--> {transition.render()}", flush=True)


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main(config: UnitWatchConfig, connection: UnitConnection | None = None) -> None:
    """Run unitwatch until SIGINT/SIGTERM; exit non-zero on any watch failure."""
    app = UnitWatchApp(config, connection=connection)
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, app.request_stop)

    try:
        app.start()
        await app.run()
    except UnitWatchError as exc:
        get_logger("app").critical("fatal error", error=str(exc), error_type=type(exc).__name__)
        raise SystemExit(1) from exc
    finally:
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.remove_signal_handler(sig)
        await app.stop()
