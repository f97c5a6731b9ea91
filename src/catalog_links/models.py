#!filepath: src/catalog_links/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

CategoryId = int
AncestorChain = Tuple[CategoryId, ...]


@dataclass(frozen=True, slots=True)
class CategoryNode:
    """A category row as seen by the resolver.

    Attributes:
        id: Category id.
        parent_id: Parent category id, 0 when the category is a root.
        navigation_hidden: Whether the category is left out of navigation paths.
    """

    id: CategoryId
    parent_id: CategoryId = 0
    navigation_hidden: bool = False


@dataclass(frozen=True, slots=True)
class CategoryRef:
    """Minimal category object accepted wherever a category id is."""

    uid: CategoryId


@dataclass(frozen=True, slots=True)
class ProductRef:
    """Minimal product object carrying its ordered category ids.

    Attributes:
        uid: Product id.
        category_ids: Category ids, the first one is the primary category.
    """

    uid: int
    category_ids: Tuple[CategoryId, ...] = ()

    def first_category(self) -> Optional[CategoryRef]:
        if not self.category_ids:
            return None
        return CategoryRef(uid=int(self.category_ids[0]))


@dataclass(slots=True)
class LinkRequest:
    """Mutable link configuration handed to hooks and then to the renderer.

    Attributes:
        page_uid: Target page id.
        language_uid: Language id for the generated link.
        namespace: Plugin argument namespace.
        arguments: Plugin arguments, including action and controller.
        use_cache_hash: Whether the renderer should append a cache hash.
        absolute: Whether to build an absolute URL.
    """

    page_uid: int
    language_uid: int = 0
    namespace: str = ""
    arguments: Dict[str, Any] = field(default_factory=dict)
    use_cache_hash: bool = True
    absolute: bool = False


def to_uid(value: Any) -> CategoryId:
    """Coerce an object with a uid, or a raw value, to an int id, 0 when absent."""
    if value is None:
        return 0
    uid = getattr(value, "uid", None)
    if uid is not None:
        return int(uid)
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
