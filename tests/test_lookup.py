#!filepath: tests/test_lookup.py
from __future__ import annotations

import json
import sqlite3
from pathlib import Path

import pytest
import yaml

from catalog_links.errors import LookupFailed
from catalog_links.lookup import InMemoryCategoryLookup, SqliteCategoryLookup
from catalog_links.models import CategoryNode
from catalog_links.resolver import CategoryPathResolver
from catalog_links.settings import SqliteSettings


def _table() -> dict:
    return {
        "categories": [
            {"id": 1, "parent": 0},
            {"id": 2, "parent": 1},
            {"id": 3, "parent": 2, "hidden": True},
            {"id": 4, "parent": 3},
        ],
        "products": {10: [4, 2]},
    }


def test_from_json_file(tmp_path: Path) -> None:
    p = tmp_path / "table.json"
    p.write_text(json.dumps(_table()), encoding="utf-8")
    lookup = InMemoryCategoryLookup.from_file(p)
    assert len(lookup) == 4
    assert lookup.get_node(3) == CategoryNode(id=3, parent_id=2, navigation_hidden=True)
    assert list(lookup.category_ids_for_product(10)) == [4, 2]
    assert CategoryPathResolver(lookup).resolve(4) == (1, 2, 4)


def test_from_yaml_mapping_form(tmp_path: Path) -> None:
    p = tmp_path / "table.yaml"
    payload = {
        "categories": {
            1: {"parent": 0},
            2: {"parent": 1, "hidden": False},
        }
    }
    p.write_text(yaml.safe_dump(payload), encoding="utf-8")
    lookup = InMemoryCategoryLookup.from_file(p)
    assert lookup.get_node(2) == CategoryNode(id=2, parent_id=1)
    assert lookup.get_node(5) is None
    assert list(lookup.category_ids_for_product(10)) == []


def test_unsupported_format_rejected(tmp_path: Path) -> None:
    p = tmp_path / "table.txt"
    p.write_text("1,0", encoding="utf-8")
    with pytest.raises(ValueError):
        InMemoryCategoryLookup.from_file(p)


def test_invalid_row_rejected() -> None:
    with pytest.raises(ValueError):
        InMemoryCategoryLookup.from_mapping({"categories": [{"parent": 1}]})


def _make_db(path: Path) -> None:
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(
            """
            CREATE TABLE sys_category (uid INTEGER PRIMARY KEY, parent INTEGER, pxapm_nav_hide INTEGER);
            CREATE TABLE sys_category_record_mm (
                uid_local INTEGER, uid_foreign INTEGER, sorting_foreign INTEGER
            );
            INSERT INTO sys_category VALUES (1, 0, 0), (2, 1, 0), (3, 2, 1), (4, 3, 0);
            INSERT INTO sys_category_record_mm VALUES (2, 10, 2), (4, 10, 1);
            """
        )
        conn.commit()
    finally:
        conn.close()


def test_sqlite_lookup(tmp_path: Path) -> None:
    db = tmp_path / "catalog.sqlite"
    _make_db(db)
    lookup = SqliteCategoryLookup(db)
    assert lookup.get_node(3) == CategoryNode(id=3, parent_id=2, navigation_hidden=True)
    assert lookup.get_node(99) is None
    assert list(lookup.category_ids_for_product(10)) == [4, 2]
    assert CategoryPathResolver(lookup).resolve(4) == (1, 2, 4)


def test_sqlite_missing_database_is_lookup_failure(tmp_path: Path) -> None:
    lookup = SqliteCategoryLookup(tmp_path / "missing.sqlite")
    with pytest.raises(LookupFailed):
        lookup.get_node(1)


def test_sqlite_query_error_is_lookup_failure(tmp_path: Path) -> None:
    db = tmp_path / "catalog.sqlite"
    _make_db(db)
    lookup = SqliteCategoryLookup(db, settings=SqliteSettings(category_table="no_such_table"))
    with pytest.raises(LookupFailed) as info:
        CategoryPathResolver(lookup).resolve(4)
    assert isinstance(info.value.__cause__, sqlite3.Error)


def test_sqlite_rejects_unsafe_identifiers(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        SqliteCategoryLookup(
            tmp_path / "x.sqlite", settings=SqliteSettings(category_table="x; DROP TABLE y")
        )


def test_non_mapping_row_rejected() -> None:
    with pytest.raises(ValueError):
        InMemoryCategoryLookup.from_mapping({"categories": [{"id": 1, "parent": 0}, 7]})


def test_default_hidden_column_matches_catalog_schema() -> None:
    assert SqliteSettings().hidden_column == "pxapm_nav_hide"
