"""Connection to the systemd manager.

The watcher only depends on :class:`UnitConnection`; :class:`SystemdConnection`
is the production implementation over the system D-Bus and tests substitute
their own.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from unitwatch.errors import UnitConnectionError
from unitwatch.models.units import UnitRecord

SYSTEMD_DBUS_SERVICE = "org.freedesktop.systemd1"
SYSTEMD_DBUS_PATH = "/org/freedesktop/systemd1"
SYSTEMD_MANAGER_INTERFACE = "org.freedesktop.systemd1.Manager"


class UnitConnection(ABC):
    """The two operations the watcher needs from a service manager."""

    @abstractmethod
    def list_units(self) -> list[UnitRecord]:
        """Return every unit currently known to the service manager.

        Raises:
            UnitConnectionError: the manager could not be queried.
        """

    @abstractmethod
    def close(self) -> None:
        """Release the underlying connection."""


class SystemdConnection(UnitConnection):
    """Lists units through ``org.freedesktop.systemd1.Manager.ListUnits``.

    Args:
        bus: An already-open ``dbus`` bus. Defaults to the system bus.
    """

    def __init__(self, bus: Any | None = None) -> None:
        # dbus-python is a C extension that needs libdbus; import it only when
        # a real connection is requested.
        try:
            import dbus  # type: ignore[import-not-found]
        except ImportError as exc:
            raise UnitConnectionError(f"dbus-python is not available: {exc}") from exc

        self._dbus_exception = dbus.exceptions.DBusException
        try:
            self._bus = bus if bus is not None else dbus.SystemBus()
            manager = self._bus.get_object(SYSTEMD_DBUS_SERVICE, SYSTEMD_DBUS_PATH)
            self._manager = dbus.Interface(manager, SYSTEMD_MANAGER_INTERFACE)
        except self._dbus_exception as exc:
            raise UnitConnectionError(f"cannot connect to systemd: {exc}") from exc

    def list_units(self) -> list[UnitRecord]:
        try:
            rows = self._manager.ListUnits()
        except self._dbus_exception as exc:
            raise UnitConnectionError(f"ListUnits failed: {exc}") from exc
        return [unit_from_row(row) for row in rows]

    def close(self) -> None:
        self._bus.close()


def unit_from_row(row: Sequence[Any]) -> UnitRecord:
    """Convert one ``(ssssssouso)`` ListUnits tuple to a UnitRecord.

    D-Bus values arrive as str/int subclasses; they are normalised to plain
    builtins so records compare and serialise like any other.
    """
    name, description, load_state, active_state, sub_state, followed, path, job_id, job_type, job_path = row
    return UnitRecord(
        name=str(name),
        description=str(description),
        load_state=str(load_state),
        active_state=str(active_state),
        sub_state=str(sub_state),
        followed=str(followed),
        path=str(path),
        job_id=int(job_id),
        job_type=str(job_type),
        job_path=str(job_path),
    )
