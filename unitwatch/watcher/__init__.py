"""Unit watching for unitwatch.

Submodules:
    differ -- pure snapshot/listing comparison.
    loop   -- poll, diff, persist cycle with bootstrap suppression.
"""

from unitwatch.watcher.differ import diff
from unitwatch.watcher.loop import Watcher, WatcherState

__all__ = ["Watcher", "WatcherState", "diff"]
