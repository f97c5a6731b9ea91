#!filepath: src/catalog_links/lookup.py
from __future__ import annotations

import json
import re
import sqlite3
import threading
from contextlib import closing
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Union

import yaml

from catalog_links.errors import LookupFailed
from catalog_links.models import CategoryId, CategoryNode
from catalog_links.settings import SqliteSettings
from catalog_links.utils.logger import get_logger

logger = get_logger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class CategoryLookup(Protocol):
    """Resolves a single category by id."""

    def get_node(self, category_id: CategoryId) -> Optional[CategoryNode]:
        """Return the category node, or None when it does not exist."""


class ProductCategoryLookup(Protocol):
    """Resolves the ordered categories of a product."""

    def category_ids_for_product(self, product_id: int) -> Sequence[CategoryId]:
        """Return category ids, primary category first."""


class InMemoryCategoryLookup:
    """Category and product relations held in dicts.

    Counts ``get_node`` calls in ``calls``, useful to check cache behaviour.
    """

    def __init__(
        self,
        nodes: Iterable[CategoryNode] = (),
        product_categories: Optional[Mapping[int, Sequence[CategoryId]]] = None,
    ) -> None:
        self._nodes: Dict[CategoryId, CategoryNode] = {int(n.id): n for n in nodes}
        self._products: Dict[int, List[CategoryId]] = {
            int(k): [int(x) for x in v] for k, v in (product_categories or {}).items()
        }
        self._lock = threading.Lock()
        self.calls = 0

    def get_node(self, category_id: CategoryId) -> Optional[CategoryNode]:
        with self._lock:
            self.calls += 1
        return self._nodes.get(int(category_id))

    def category_ids_for_product(self, product_id: int) -> Sequence[CategoryId]:
        return list(self._products.get(int(product_id), []))

    def __len__(self) -> int:
        return len(self._nodes)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> InMemoryCategoryLookup:
        """Build a lookup from a parsed table document.

        ``categories`` is either a list of ``{id, parent, hidden}`` rows or a
        mapping of id to ``{parent, hidden}``. ``products`` maps a product id
        to its ordered category ids.

        Raises:
            ValueError: If the document shape is invalid.
        """
        raw_categories = data.get("categories") or []
        rows: List[Mapping[str, Any]]
        if isinstance(raw_categories, Mapping):
            rows = []
            for key, value in raw_categories.items():
                row = dict(value or {})
                row["id"] = key
                rows.append(row)
        elif isinstance(raw_categories, list):
            if not all(isinstance(r, Mapping) for r in raw_categories):
                raise ValueError("every category row must be a mapping")
            rows = list(raw_categories)
        else:
            raise ValueError("categories must be a list or a mapping")

        nodes = [_node_from_row(r) for r in rows]

        raw_products = data.get("products") or {}
        if not isinstance(raw_products, Mapping):
            raise ValueError("products must be a mapping")

        return cls(nodes=nodes, product_categories=raw_products)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> InMemoryCategoryLookup:
        """Load a category table from a json, yaml, or yml file.

        Raises:
            ValueError: On unsupported format or invalid content.
        """
        p = Path(path).expanduser().resolve()
        text = p.read_text(encoding="utf_8")
        suffix = p.suffix.lower()
        if suffix == ".json":
            data = json.loads(text)
        elif suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(text)
        else:
            raise ValueError(f"Unsupported table format: {p.suffix}")
        if not isinstance(data, dict):
            raise ValueError(f"Top level of {p} must be a mapping")
        lookup = cls.from_mapping(data)
        logger.debug(f"Loaded {len(lookup)} categories from {p}")
        return lookup


def _node_from_row(row: Mapping[str, Any]) -> CategoryNode:
    try:
        cid = int(row["id"])
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid category row: {dict(row)}") from e
    return CategoryNode(
        id=cid,
        parent_id=int(row.get("parent") or row.get("parent_id") or 0),
        navigation_hidden=bool(row.get("hidden") or row.get("navigation_hidden")),
    )


def _identifier(name: str) -> str:
    if not _IDENTIFIER_RE.match(name or ""):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return name


class SqliteCategoryLookup:
    """Category lookup over a SQLite database.

    A fresh connection is opened per query so one instance can serve many
    threads. Every ``sqlite3.Error`` surfaces as ``LookupFailed``.
    """

    def __init__(self, db_path: Union[str, Path], settings: Optional[SqliteSettings] = None) -> None:
        self._path = Path(db_path).expanduser().resolve()
        self._s = settings or SqliteSettings()
        s = self._s
        self._node_sql = (
            f"SELECT {_identifier(s.id_column)}, {_identifier(s.parent_column)}, "
            f"{_identifier(s.hidden_column)} FROM {_identifier(s.category_table)} "
            f"WHERE {_identifier(s.id_column)} = ?"
        )
        self._product_sql = (
            f"SELECT {_identifier(s.relation_category_column)} FROM "
            f"{_identifier(s.relation_table)} WHERE "
            f"{_identifier(s.relation_product_column)} = ? "
            f"ORDER BY {_identifier(s.relation_sorting_column)}"
        )

    @property
    def path(self) -> Path:
        return self._path

    def _connect(self) -> sqlite3.Connection:
        if not self._path.exists():
            raise LookupFailed(f"Category database not found: {self._path}")
        return sqlite3.connect(str(self._path), timeout=float(self._s.timeout_seconds))

    def get_node(self, category_id: CategoryId) -> Optional[CategoryNode]:
        try:
            with closing(self._connect()) as conn:
                row = conn.execute(self._node_sql, (int(category_id),)).fetchone()
        except sqlite3.Error as e:
            raise LookupFailed(
                f"Category query failed for {category_id}: {e}", category_id=category_id
            ) from e
        if row is None:
            return None
        return CategoryNode(
            id=int(row[0]), parent_id=int(row[1] or 0), navigation_hidden=bool(row[2])
        )

    def category_ids_for_product(self, product_id: int) -> Sequence[CategoryId]:
        try:
            with closing(self._connect()) as conn:
                rows = conn.execute(self._product_sql, (int(product_id),)).fetchall()
        except sqlite3.Error as e:
            raise LookupFailed(f"Product category query failed for {product_id}: {e}") from e
        return [int(r[0]) for r in rows]
