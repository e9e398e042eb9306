"""A thread-safe least-recently-used cache."""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Any, Hashable


class LRUCache:
    """Fixed-capacity mapping that evicts the least recently used entry."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("must provide a positive capacity")
        self._capacity = capacity
        self._items: OrderedDict[Hashable, Any] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def add(self, key: Hashable, value: Any) -> None:
        """Insert or overwrite ``key`` and mark it most recently used."""
        with self._lock:
            self._items[key] = value
            self._items.move_to_end(key, last=False)
            if len(self._items) > self._capacity:
                self._items.popitem(last=True)

    def get(self, key: Hashable) -> Any:
        """Return the value for ``key`` (or None) and mark it most recently used."""
        with self._lock:
            if key not in self._items:
                return None
            self._items.move_to_end(key, last=False)
            return self._items[key]

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)