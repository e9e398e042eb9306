"""Thread-safe in-memory store of connected clusters."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any


@dataclass
class Cluster:
    """A cluster's API client and its connection config."""

    client_set: Any = None
    kube_config: Any = None


class ClustersStore:
    """Mapping of cluster name to Cluster guarded by a lock."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._store: dict[str, Cluster] = {}

    def get(self, cluster_name: str) -> Cluster | None:
        with self._lock:
            return self._store.get(cluster_name)

    def set(self, cluster_name: str, cluster: Cluster) -> None:
        with self._lock:
            self._store[cluster_name] = cluster

    def delete(self, cluster_name: str) -> None:
        with self._lock:
            self._store.pop(cluster_name, None)

    def list(self) -> dict[str, Cluster]:
        """Return a snapshot of all stored clusters."""
        with self._lock:
            return dict(self._store)

    def clear(self) -> None:
        with self._lock:
            self._store = {}