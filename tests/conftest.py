#!filepath: tests/conftest.py
from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Dict, Iterable, Tuple

import pytest


def pytest_configure() -> None:
    """Ensure src layout is importable and keep log files out of the tree."""
    root = Path(__file__).resolve().parents[1]
    src = (root / "src").resolve()
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))
    os.environ.setdefault("CATALOG_LINKS_FILE_ENABLED", "false")


def make_nodes(rows: Iterable[Tuple[int, int, bool]]):
    from catalog_links.models import CategoryNode

    return [CategoryNode(id=i, parent_id=p, navigation_hidden=h) for i, p, h in rows]


@pytest.fixture
def example_lookup():
    """1 <- 2 <- 3 (hidden) <- 4, product 10 sits in 4 then 2."""
    from catalog_links.lookup import InMemoryCategoryLookup

    nodes = make_nodes([(1, 0, False), (2, 1, False), (3, 2, True), (4, 3, False)])
    products: Dict[int, list] = {10: [4, 2], 11: []}
    return InMemoryCategoryLookup(nodes, product_categories=products)


def _linear(depth: int, leaf: int = 1000):
    from catalog_links.lookup import InMemoryCategoryLookup

    rows = [(1, 0, False)]
    rows += [(i, i - 1, False) for i in range(2, depth + 1)]
    rows.append((leaf, depth, False))
    return InMemoryCategoryLookup(make_nodes(rows))


@pytest.fixture
def linear_lookup():
    """Factory for a leaf with ``depth`` visible ancestors 1..depth, 1 being the root."""
    return _linear


@pytest.fixture
def table_lookup():
    """Factory building a lookup from ``(id, parent, hidden)`` rows."""
    from catalog_links.lookup import InMemoryCategoryLookup

    def _build(rows: Iterable[Tuple[int, int, bool]]):
        return InMemoryCategoryLookup(make_nodes(rows))

    return _build
