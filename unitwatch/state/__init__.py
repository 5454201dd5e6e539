"""Snapshot persistence for unitwatch.

Submodules:
    store -- gzip+JSON state file with absent / reset / corrupt distinction.
"""

from unitwatch.state.store import StateStore, decode_snapshot, encode_snapshot

__all__ = ["StateStore", "decode_snapshot", "encode_snapshot"]
