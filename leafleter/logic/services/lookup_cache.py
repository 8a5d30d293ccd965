"""Per-session memoisation of external lookups.

One instance per lookup kind, created at startup and handed to the service that
owns it. Only successful answers are stored.
"""

from __future__ import annotations

from collections import OrderedDict
from threading import Lock
from typing import Generic, Hashable, Optional, TypeVar

V = TypeVar("V")

_MISSING = object()


class LookupCache(Generic[V]):
    """
    Small key/value cache with optional bounded size.

    Args:
        max_entries: 0 keeps everything for the lifetime of the process;
            otherwise the oldest entry is evicted once the bound is exceeded.
    """

    def __init__(self, max_entries: int = 0) -> None:
        self._max = max(0, int(max_entries))
        self._data: "OrderedDict[Hashable, V]" = OrderedDict()
        # lookups complete on worker threads
        self._lock = Lock()

    def get(self, key: Hashable, default: Optional[V] = None) -> Optional[V]:
        with self._lock:
            value = self._data.get(key, _MISSING)
        return default if value is _MISSING else value  # type: ignore[return-value]

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._data

    def put(self, key: Hashable, value: V) -> None:
        with self._lock:
            self._data[key] = value
            self._data.move_to_end(key)
            if self._max and len(self._data) > self._max:
                self._data.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
