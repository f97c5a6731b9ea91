#!src/catalog_links/settings.py
from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from catalog_links.utils.logger import get_logger
from catalog_links.utils.project_paths import ProjectPaths

logger = get_logger(__name__)


class SettingsError(RuntimeError):
    """Failure while loading or validating settings."""


class ResolverSettings(BaseModel):
    """Ancestor walk settings.

    Attributes:
        max_depth: Maximum ancestor steps before the walk is rejected.
    """

    model_config = ConfigDict(extra="forbid")

    max_depth: int = Field(default=50, ge=1)


class LinkSettings(BaseModel):
    """Link argument naming.

    Attributes:
        namespace: Plugin argument namespace.
        controller: Controller name added to every link.
        argument_prefix: Prefix of the positional category arguments.
        language_uid: Default language id.
        use_cache_hash: Whether links ask for a cache hash.
    """

    model_config = ConfigDict(extra="forbid")

    namespace: str = "tx_pxaproductmanager_pi1"
    controller: str = "Product"
    argument_prefix: str = "category_"
    language_uid: int = Field(default=0, ge=0)
    use_cache_hash: bool = True


class SqliteSettings(BaseModel):
    """Table and column names read by the SQLite lookup."""

    model_config = ConfigDict(extra="forbid")

    category_table: str = "sys_category"
    id_column: str = "uid"
    parent_column: str = "parent"
    hidden_column: str = "pxapm_nav_hide"
    relation_table: str = "sys_category_record_mm"
    relation_category_column: str = "uid_local"
    relation_product_column: str = "uid_foreign"
    relation_sorting_column: str = "sorting_foreign"
    timeout_seconds: float = Field(default=5.0, gt=0)


class AppConfig(BaseModel):
    """Main configuration."""

    model_config = ConfigDict(extra="allow")

    resolver: ResolverSettings = Field(default_factory=ResolverSettings)
    links: LinkSettings = Field(default_factory=LinkSettings)
    sqlite: SqliteSettings = Field(default_factory=SqliteSettings)
    app_env: str = "production"


def load_app_config(
    paths: Optional[ProjectPaths] = None, config_dir: Optional[Path] = None
) -> AppConfig:
    """Load, merge and validate the application config.

    Reads ``default.yaml`` and the optional ``config.<APP_ENV>.yaml`` overlay,
    then applies environment overrides.

    Args:
        paths: Resolved project paths.
        config_dir: Explicit config directory, wins over paths.

    Returns:
        AppConfig: Validated config.

    Raises:
        SettingsError: On unreadable or invalid config.
    """
    if config_dir is None:
        env_dir = str(os.getenv("CATALOG_LINKS_CONFIG_DIR", "") or "").strip()
        if env_dir:
            config_dir = Path(env_dir)
        else:
            config_dir = (paths or ProjectPaths.discover()).configs_dir

    env_name = str(os.getenv("APP_ENV", "production") or "production").strip()

    default_path = (config_dir / "default.yaml").resolve()
    profile_path = (config_dir / f"config.{env_name}.yaml").resolve()

    base = _read_yaml_mapping(default_path, required=False)
    overlay = _read_yaml_mapping(profile_path, required=False)

    merged = _deep_merge(base, overlay)
    merged["app_env"] = env_name
    _override_from_env(merged)

    try:
        cfg = AppConfig.model_validate(merged)
    except ValidationError as e:
        raise SettingsError(f"Config validation failed: {e}") from e

    logger.debug(
        f"Loaded app config, env={env_name}, default_exists={default_path.exists()}, profile_exists={profile_path.exists()}"
    )
    return cfg


@lru_cache(maxsize=1)
def get_settings() -> AppConfig:
    """Return cached settings."""
    return load_app_config()


def reload_settings() -> AppConfig:
    get_settings.cache_clear()
    return get_settings()


def _read_yaml_mapping(path: Path, required: bool) -> Dict[str, Any]:
    if not path.exists():
        if required:
            raise SettingsError(f"Missing config file: {path}")
        return {}

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf8"))
    except (OSError, yaml.YAMLError) as e:
        raise SettingsError(f"Invalid YAML at {path}: {e}") from e

    if raw is None:
        return {}

    if not isinstance(raw, dict):
        raise SettingsError(f"Top level YAML must be a mapping at {path}")

    return raw


def _deep_merge(a: Mapping[str, Any], b: Mapping[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {k: v for k, v in a.items()}
    for k, v in b.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _override_from_env(merged: Dict[str, Any]) -> None:
    resolver = merged.get("resolver") if isinstance(merged.get("resolver"), dict) else {}
    links = merged.get("links") if isinstance(merged.get("links"), dict) else {}

    max_depth = str(os.getenv("CATALOG_LINKS_MAX_DEPTH", "") or "").strip()
    namespace = str(os.getenv("CATALOG_LINKS_NAMESPACE", "") or "").strip()

    if max_depth:
        resolver["max_depth"] = max_depth
    if namespace:
        links["namespace"] = namespace

    merged["resolver"] = resolver
    merged["links"] = links
