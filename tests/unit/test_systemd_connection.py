"""Tests for the D-Bus row conversion and the connection contract."""

from __future__ import annotations

import pytest

from unitwatch.systemd.connection import UnitConnection, unit_from_row


class _DBusString(str):
    """Stands in for dbus.String / dbus.ObjectPath."""


class _DBusUInt32(int):
    """Stands in for dbus.UInt32."""


def _row() -> tuple:
    return (
        _DBusString("sshd.service"),
        _DBusString("OpenSSH server daemon"),
        _DBusString("loaded"),
        _DBusString("active"),
        _DBusString("running"),
        _DBusString(""),
        _DBusString("/org/freedesktop/systemd1/unit/sshd_2eservice"),
        _DBusUInt32(0),
        _DBusString(""),
        _DBusString("/"),
    )


def test_unit_from_row_maps_every_field() -> None:
    unit = unit_from_row(_row())

    assert unit.name == "sshd.service"
    assert unit.description == "OpenSSH server daemon"
    assert unit.load_state == "loaded"
    assert unit.active_state == "active"
    assert unit.sub_state == "running"
    assert unit.followed == ""
    assert unit.path == "/org/freedesktop/systemd1/unit/sshd_2eservice"
    assert unit.job_id == 0
    assert unit.job_type == ""
    assert unit.job_path == "/"


def test_unit_from_row_normalises_dbus_types() -> None:
    unit = unit_from_row(_row())
    assert type(unit.name) is str
    assert type(unit.path) is str
    assert type(unit.job_id) is int


def test_unit_from_row_rejects_short_rows() -> None:
    with pytest.raises(ValueError):
        unit_from_row(_row()[:9])


def test_connection_interface_cannot_be_instantiated() -> None:
    with pytest.raises(TypeError):
        UnitConnection()  # type: ignore[abstract]
