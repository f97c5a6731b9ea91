#!filepath: src/catalog_links/resolver.py
from __future__ import annotations

from typing import Dict, List, Optional, Set

from catalog_links.cache import ResolutionCache
from catalog_links.errors import CategoryPathError, InvalidInput, LookupFailed, MaxDepthExceeded
from catalog_links.lookup import CategoryLookup
from catalog_links.models import AncestorChain, CategoryId, CategoryNode
from catalog_links.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_DEPTH = 50


class CategoryPathResolver:
    """Resolve the root first ancestor chain of a leaf category.

    Navigation hidden ancestors are climbed past but left out of the chain.
    Successful results are memoized in the cache, failures never are.

    Args:
        lookup: Category lookup collaborator.
        cache: Cache to share between resolvers, a private one by default.
        max_depth: Maximum ancestor steps before MaxDepthExceeded.
    """

    def __init__(
        self,
        lookup: CategoryLookup,
        cache: Optional[ResolutionCache] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        if int(max_depth) < 1:
            raise ValueError("max_depth must be at least 1")
        self._lookup = lookup
        self._cache = cache if cache is not None else ResolutionCache()
        self._max_depth = int(max_depth)

    @property
    def cache(self) -> ResolutionCache:
        return self._cache

    @property
    def max_depth(self) -> int:
        return self._max_depth

    def resolve(self, leaf_id: Optional[CategoryId]) -> AncestorChain:
        """Return the ancestor chain of ``leaf_id``, root first, leaf last.

        Args:
            leaf_id: Leaf category id, zero, negative or None means no category.

        Returns:
            AncestorChain: Chain of ids, empty for no category.

        Raises:
            MaxDepthExceeded: If the walk needs more than max_depth steps.
            LookupFailed: If the lookup collaborator fails.
        """
        if leaf_id is None or int(leaf_id) <= 0:
            return ()
        leaf = int(leaf_id)

        cached = self._cache.get(leaf)
        if cached is not None:
            return cached

        chain = self._walk(leaf)
        self._cache.put(leaf, chain)
        logger.debug(f"Resolved category {leaf} to {list(chain)}")
        return chain

    def resolve_strict(self, leaf_id: Optional[CategoryId]) -> AncestorChain:
        """Like resolve, but reject a missing or non positive leaf id.

        Raises:
            InvalidInput: If ``leaf_id`` is None or not positive.
        """
        if leaf_id is None or int(leaf_id) <= 0:
            raise InvalidInput(f"Category id must be positive, got {leaf_id}", category_id=leaf_id)
        return self.resolve(leaf_id)

    def category_arguments(
        self, leaf_id: Optional[CategoryId], prefix: str = "category_"
    ) -> Dict[str, CategoryId]:
        """Map the chain to positional arguments, ``category_0`` being the root."""
        return {f"{prefix}{i}": cid for i, cid in enumerate(self.resolve(leaf_id))}

    def _fetch(self, category_id: CategoryId) -> Optional[CategoryNode]:
        try:
            return self._lookup.get_node(category_id)
        except CategoryPathError:
            raise
        except Exception as e:
            raise LookupFailed(
                f"Lookup failed for category {category_id}: {e}", category_id=category_id
            ) from e

    def _walk(self, leaf: CategoryId) -> AncestorChain:
        ancestors: List[CategoryId] = []
        visited: Set[CategoryId] = {leaf}

        node = self._fetch(leaf)
        parent_id = int(node.parent_id or 0) if node is not None else 0

        steps = 0
        while parent_id > 0 and parent_id not in visited:
            steps += 1
            if steps > self._max_depth:
                raise MaxDepthExceeded(leaf, self._max_depth)

            parent = self._fetch(parent_id)
            if parent is None:
                break

            visited.add(parent_id)
            if not parent.navigation_hidden:
                ancestors.append(parent_id)
            parent_id = int(parent.parent_id or 0)

        ancestors.reverse()
        ancestors.append(leaf)
        return tuple(ancestors)
