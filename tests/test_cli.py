#!filepath: tests/test_cli.py
from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from catalog_links.cli import app
from catalog_links.settings import reload_settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("CATALOG_LINKS_CONFIG_DIR", str(tmp_path / "configs"))
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.delenv("CATALOG_LINKS_MAX_DEPTH", raising=False)
    monkeypatch.delenv("CATALOG_LINKS_NAMESPACE", raising=False)
    reload_settings()
    yield
    monkeypatch.undo()
    reload_settings()


@pytest.fixture
def table(tmp_path: Path) -> Path:
    p = tmp_path / "table.json"
    payload = {
        "categories": [
            {"id": 1, "parent": 0},
            {"id": 2, "parent": 1},
            {"id": 3, "parent": 2, "hidden": True},
            {"id": 4, "parent": 3},
        ],
        "products": {"10": [4]},
    }
    p.write_text(json.dumps(payload), encoding="utf-8")
    return p


def test_resolve_prints_chain(table: Path) -> None:
    result = runner.invoke(app, ["resolve", "4", "--table", str(table)])
    assert result.exit_code == 0
    assert result.stdout.strip() == "1 / 2 / 4"


def test_resolve_arguments(table: Path) -> None:
    result = runner.invoke(app, ["resolve", "4", "--table", str(table), "--arguments"])
    assert result.exit_code == 0
    assert result.stdout.split() == ["category_0=1", "category_1=2", "category_2=4"]


def test_resolve_requires_source() -> None:
    result = runner.invoke(app, ["resolve", "4"])
    assert result.exit_code == 2


def test_resolve_too_deep_exits_2(tmp_path: Path) -> None:
    rows = [{"id": 1, "parent": 0}] + [{"id": i, "parent": i - 1} for i in range(2, 53)]
    p = tmp_path / "deep.json"
    p.write_text(json.dumps({"categories": rows}), encoding="utf-8")
    result = runner.invoke(app, ["resolve", "52", "--table", str(p)])
    assert result.exit_code == 2


def test_product_link(table: Path) -> None:
    result = runner.invoke(app, ["product-link", "5", "10", "--table", str(table)])
    assert result.exit_code == 0
    out = result.stdout.strip()
    assert out.startswith("/index.php?id=5")
    assert "category_2%5D=4" in out
    assert "product%5D=10" in out


def test_category_link_absolute(table: Path) -> None:
    result = runner.invoke(
        app,
        ["category-link", "7", "2", "--table", str(table), "--absolute", "--base-url", "https://x.test"],
    )
    assert result.exit_code == 0
    assert result.stdout.strip().startswith("https://x.test/index.php?id=7")


def test_invalid_sqlite_identifier_exits_2(tmp_path: Path) -> None:
    configs = tmp_path / "configs"
    configs.mkdir()
    (configs / "default.yaml").write_text(
        "sqlite:\n  category_table: \"sys_category; DROP TABLE x\"\n", encoding="utf-8"
    )
    reload_settings()
    result = runner.invoke(app, ["resolve", "4", "--db", str(tmp_path / "c.sqlite")])
    assert result.exit_code == 2
    assert not isinstance(result.exception, ValueError)
