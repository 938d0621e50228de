from __future__ import annotations

import logging
from dataclasses import dataclass, field
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from pathconf.store import ConfigStore
from pathconf.utils import parse_bool, parse_non_negative_int

DEFAULT_LEVEL_NAME = "INFO"
DEFAULT_LOG_PATH = "logs/pathconf.log"
DEFAULT_FORMATS = {
    "detailed": "%(asctime)s %(levelname)s %(name)s: %(message)s",
    "simple": "%(levelname)s %(name)s: %(message)s",
}


@dataclass(frozen=True)
class FileLoggingSettings:
    enabled: bool = False
    path: Path = Path(DEFAULT_LOG_PATH)
    max_bytes: int = 1024 * 1024
    backup_count: int = 3


@dataclass(frozen=True)
class LoggingSettings:
    configured_level: str | None = None
    level_name: str = DEFAULT_LEVEL_NAME
    level: int = logging.INFO
    level_fallback_used: bool = False
    fmt: str = DEFAULT_FORMATS["detailed"]
    file: FileLoggingSettings = field(default_factory=FileLoggingSettings)


def _parse_level(level_value: Any) -> tuple[str, int, bool]:
    if isinstance(level_value, str):
        candidate = level_value.strip().upper()
        if candidate:
            parsed = logging.getLevelName(candidate)
            if isinstance(parsed, int):
                return candidate, parsed, False
            return DEFAULT_LEVEL_NAME, logging.INFO, True
    return DEFAULT_LEVEL_NAME, logging.INFO, False


def _parse_format(format_value: Any) -> str:
    if isinstance(format_value, str):
        key = format_value.strip().lower()
        if key in DEFAULT_FORMATS:
            return DEFAULT_FORMATS[key]
        if format_value.strip():
            return format_value
    return DEFAULT_FORMATS["detailed"]


def build_logging_settings(store: ConfigStore) -> LoggingSettings:
    raw_level = store.get("logging.level")
    configured_level = str(raw_level) if raw_level is not None else None
    level_name, level, level_fallback_used = _parse_level(store.get_string("logging.level"))
    fmt = _parse_format(store.get_string("logging.format"))

    file_settings = FileLoggingSettings(
        enabled=parse_bool(store.get("logging.file.enabled", False), False),
        path=store.handle.resolve_path(store.get_string("logging.file.path"), default=DEFAULT_LOG_PATH),
        max_bytes=parse_non_negative_int(store.get("logging.file.max_bytes"), 1024 * 1024),
        backup_count=parse_non_negative_int(store.get("logging.file.backup_count"), 3),
    )

    return LoggingSettings(
        configured_level=configured_level,
        level_name=level_name,
        level=level,
        level_fallback_used=level_fallback_used,
        fmt=fmt,
        file=file_settings,
    )


def configure_logging(settings: LoggingSettings) -> None:
    formatter = logging.Formatter(settings.fmt)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(settings.level)
    root.handlers.clear()
    root.addHandler(stream_handler)

    if not settings.file.enabled:
        return

    log_path = settings.file.path
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=log_path,
            maxBytes=settings.file.max_bytes,
            backupCount=settings.file.backup_count,
            encoding="utf-8",
        )
    except OSError:
        root.warning(
            "Failed to initialize file logging at path=%s; continuing with stderr only",
            log_path,
        )
        return

    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)


def configure_logging_from_store(store: ConfigStore) -> LoggingSettings:
    settings = build_logging_settings(store)
    configure_logging(settings)
    logger = logging.getLogger(__name__)
    if settings.level_fallback_used:
        logger.warning(
            "Configured logging level '%s' is invalid; using INFO",
            settings.configured_level,
        )
    logger.debug(
        "Logging configured level=%s file_enabled=%s file_path=%s",
        settings.level_name,
        settings.file.enabled,
        settings.file.path,
    )
    return settings
