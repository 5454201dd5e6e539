"""Service manager access for unitwatch.

Exports:
    UnitConnection     -- Abstract capability the watcher depends on.
    SystemdConnection  -- D-Bus implementation backed by dbus-python.
"""

from unitwatch.systemd.connection import SystemdConnection, UnitConnection, unit_from_row

__all__ = ["SystemdConnection", "UnitConnection", "unit_from_row"]
