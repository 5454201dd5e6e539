"""Exception hierarchy for unitwatch.

Every failure in the watch core is fatal to the current watch stream; the
core never retries. DeliveryError belongs to the notification channels and
is never raised by the watcher.
"""

from __future__ import annotations


class UnitWatchError(Exception):
    """Base class for all unitwatch errors."""


class UnitConnectionError(UnitWatchError):
    """The service manager cannot be reached or queried."""


class ListingError(UnitWatchError):
    """Listing units failed during a poll cycle; the stream terminates."""


class StateError(UnitWatchError):
    """Base class for state file failures."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class StateCorruptError(StateError):
    """The state file exists and is non-empty but cannot be decoded."""


class StateUnreadableError(StateError):
    """The state file exists but cannot be read (permissions, device errors)."""


class StateWriteError(StateError):
    """The snapshot could not be written to the state file."""


class WatcherFailedError(UnitWatchError):
    """The watcher hit a fatal error earlier and cannot be resumed."""


class DeliveryError(UnitWatchError):
    """A notification channel rejected or failed to deliver a message."""

    def __init__(self, channel: str, message: str) -> None:
        super().__init__(f"{channel}: {message}")
        self.channel = channel
