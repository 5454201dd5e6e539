"""Durable snapshot persistence.

The state file is a gzip stream holding a JSON document of the form
``{"units": {path: {field: value, ...}}}``. It is private to unitwatch:
nothing else is expected to read or write it.

File semantics on load:

* absent      -- first ever run; empty snapshot, bootstrap mode on.
* zero length -- explicitly reset; empty snapshot, bootstrap mode off.
* anything else must decode, otherwise the process must stop rather than
  silently forget what it has seen.
"""

from __future__ import annotations

import contextlib
import dataclasses
import gzip
import json
import os
import zlib
from pathlib import Path
from typing import Any, get_type_hints

from unitwatch.errors import StateCorruptError, StateUnreadableError, StateWriteError
from unitwatch.models.units import Snapshot, UnitRecord

# field name -> builtin type (str or int), resolved from the dataclass annotations
_FIELD_TYPES: dict[str, type] = get_type_hints(UnitRecord)

# Everything a truncated or foreign file can raise while being decoded.
# gzip.BadGzipFile is an OSError, so reading and decoding stay separate.
# Deeply nested JSON exhausts the decoder stack with RecursionError.
_DECODE_ERRORS = (OSError, EOFError, zlib.error, ValueError, KeyError, TypeError, RecursionError)


class StateStore:
    """Loads and stores the unit snapshot at a single path."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> tuple[Snapshot, bool]:
        """Read the snapshot from disk.

        Returns:
            ``(snapshot, bootstrap)``; bootstrap is True only when the file
            does not exist.

        Raises:
            StateUnreadableError: the file exists but could not be read.
            StateCorruptError: the file is non-empty and does not decode.
        """
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return {}, True
        except OSError as exc:
            raise StateUnreadableError(str(self._path), str(exc)) from exc

        if not raw:
            return {}, False

        try:
            return decode_snapshot(raw), False
        except _DECODE_ERRORS as exc:
            raise StateCorruptError(str(self._path), f"cannot decode state: {exc}") from exc

    def store(self, snapshot: Snapshot) -> None:
        """Replace the state file with *snapshot*.

        The data is written to a sibling temporary file first and renamed over
        the target, so a crash mid-write leaves the previous state intact.

        Raises:
            StateWriteError: on any I/O failure.
        """
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(encode_snapshot(snapshot))
            os.replace(tmp, self._path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise StateWriteError(str(self._path), str(exc)) from exc


def encode_snapshot(snapshot: Snapshot) -> bytes:
    """Serialise *snapshot* to the compressed on-disk representation."""
    document = {"units": {key: dataclasses.asdict(unit) for key, unit in snapshot.items()}}
    payload = json.dumps(document, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return gzip.compress(payload, mtime=0)


def decode_snapshot(raw: bytes) -> Snapshot:
    """Inverse of :func:`encode_snapshot`.

    Raises one of the decode errors (ValueError, KeyError, TypeError, ...)
    when the content is not a snapshot document.
    """
    document = json.loads(gzip.decompress(raw).decode("utf-8"))
    units = document["units"]
    if not isinstance(units, dict):
        raise TypeError(f"units must be an object, got {type(units).__name__}")

    snapshot: Snapshot = {}
    for key, fields in units.items():
        unit = _record_from_dict(fields)
        if unit.key != key:
            raise ValueError(f"record keyed {key!r} has path {unit.path!r}")
        snapshot[key] = unit
    return snapshot


def _record_from_dict(fields: Any) -> UnitRecord:
    if not isinstance(fields, dict):
        raise TypeError(f"unit record must be an object, got {type(fields).__name__}")
    if set(fields) != set(_FIELD_TYPES):
        raise KeyError(f"unit record fields {sorted(fields)} do not match {sorted(_FIELD_TYPES)}")
    for name, expected in _FIELD_TYPES.items():
        value = fields[name]
        # bool is an int subclass; JSON true/false is never a valid job id
        if not isinstance(value, expected) or isinstance(value, bool):
            raise TypeError(f"field {name!r} must be {expected.__name__}, got {value!r}")
    return UnitRecord(**fields)
