#!src/catalog_links/utils/logger.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.console import Console
from rich.logging import RichHandler


class LoggingSettings(BaseSettings):
    """Logging configuration, read from .env and the environment.

    Unrelated keys in the environment are ignored.

    Attributes:
        log_dir: Log directory.
        console_level: Console handler level.
        file_level: File handler level.
        file_name: Log file name.
        max_bytes: Size at which the log file rotates.
        backup_count: Rotated files to keep.
        rich_tracebacks: Whether the console renders rich tracebacks.
        file_enabled: Whether to write the rotating log file at all.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        env_prefix="CATALOG_LINKS_",
    )

    log_dir: Path = Field(default=Path("data/logs"))
    console_level: str = Field(default="INFO")
    file_level: str = Field(default="DEBUG")
    file_name: str = Field(default="catalog_links.log")
    max_bytes: int = Field(default=5_000_000)
    backup_count: int = Field(default=5)
    rich_tracebacks: bool = Field(default=True)
    file_enabled: bool = Field(default=True)


@dataclass(slots=True)
class _Runtime:
    configured: bool = False


_runtime: _Runtime = _Runtime()


def configure_logging(*, settings: Optional[LoggingSettings] = None) -> None:
    """Configure global logging once, rich console plus rotating file.

    Args:
        settings: Optional override for tests.
    """
    if _runtime.configured:
        return

    s = settings or LoggingSettings()

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()

    console_level = getattr(logging, s.console_level.upper(), logging.INFO)
    file_level = getattr(logging, s.file_level.upper(), logging.DEBUG)

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=bool(s.rich_tracebacks),
        markup=False,
        show_path=False,
        show_level=True,
        log_time_format="[%X]",
    )
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(console_handler)

    if s.file_enabled:
        s.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(s.log_dir / s.file_name),
            maxBytes=int(s.max_bytes),
            backupCount=int(s.backup_count),
            encoding="utf_8",
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        root.addHandler(file_handler)

    logging.captureWarnings(True)
    _runtime.configured = True


def reset_logging() -> None:
    """Forget the configured state so the next call reconfigures."""
    _runtime.configured = False


def get_logger(name: str = "catalog_links", level: str | None = None) -> logging.Logger:
    """Return a named logger.

    Handlers are left to the host application, only the CLI calls
    configure_logging.

    Args:
        name: Logger name.
        level: Optional level override.

    Returns:
        Logger.
    """
    logger = logging.getLogger(name)
    if level:
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger
