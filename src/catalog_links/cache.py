#!filepath: src/catalog_links/cache.py
from __future__ import annotations

import threading
from typing import Dict, Optional

from catalog_links.models import AncestorChain, CategoryId


class ResolutionCache:
    """Thread safe leaf id to ancestor chain mapping.

    The lock only guards the dict itself. Resolvers never hold it while
    talking to a lookup, so two threads resolving the same leaf may both
    compute it and the last write wins with an identical value.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._chains: Dict[CategoryId, AncestorChain] = {}

    def get(self, leaf_id: CategoryId) -> Optional[AncestorChain]:
        with self._lock:
            return self._chains.get(leaf_id)

    def put(self, leaf_id: CategoryId, chain: AncestorChain) -> None:
        with self._lock:
            self._chains[leaf_id] = tuple(chain)

    def discard(self, leaf_id: CategoryId) -> None:
        """Drop one entry, for callers whose category data changed."""
        with self._lock:
            self._chains.pop(leaf_id, None)

    def clear(self) -> None:
        with self._lock:
            self._chains.clear()

    def __contains__(self, leaf_id: object) -> bool:
        with self._lock:
            return leaf_id in self._chains

    def __len__(self) -> int:
        with self._lock:
            return len(self._chains)
