from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path

from pathconf.config import ConfigHandle
from pathconf.migrations import VERSION_FIELD, MigrationStep, Migrator
from pathconf.store import ConfigStore

logger = logging.getLogger(__name__)

DEFAULT_SHARED_DIR = "shared"
GLOBAL_CONFIG_NAME = "global.yml"
GLOBAL_CONFIG_CONTENT = (
    "# Global configuration shared by every application under this root\n"
    f"{VERSION_FIELD}: 0\n"
    "\n"
    "# Add other default keys here:\n"
    "# example:\n"
    '#   some_setting: "default value"\n'
)


class ConfigRegistry:
    """Named stores sharing one root directory."""

    def __init__(self, root_dir: str | Path, *, logger: logging.Logger | None = None) -> None:
        self.root_dir = Path(root_dir).expanduser().resolve()
        self.logger = logger
        self._stores: dict[str, ConfigStore] = {}

    def register(
        self,
        name: str,
        relative_path: str,
        *,
        default_text: str | None = None,
        defaults: str | ConfigStore | None = None,
    ) -> ConfigStore:
        if not name.strip():
            raise ValueError("Config name is required")
        if name in self._stores:
            raise ValueError(f"Config '{name}' is already registered")
        fallback = self._stores[defaults] if isinstance(defaults, str) else defaults
        store = ConfigStore(
            ConfigHandle(root_dir=self.root_dir, relative_path=relative_path),
            logger=self.logger,
            default_text=default_text,
            defaults=fallback,
        )
        self._stores[name] = store
        logger.debug("Registered config name=%s path=%s", name, store.path)
        return store

    def get(self, name: str) -> ConfigStore | None:
        return self._stores.get(name)

    def __getitem__(self, name: str) -> ConfigStore:
        try:
            return self._stores[name]
        except KeyError:
            raise KeyError(f"Unknown config: {name}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._stores

    def __iter__(self) -> Iterator[str]:
        return iter(self._stores)

    def names(self) -> list[str]:
        return list(self._stores)

    def reload_all(self) -> None:
        for store in self._stores.values():
            store.reload()
        logger.info("Reloaded %d config(s) under %s", len(self._stores), self.root_dir)


def open_global_config(
    root_dir: str | Path,
    *,
    shared_dir: str = DEFAULT_SHARED_DIR,
    file_name: str = GLOBAL_CONFIG_NAME,
    steps: Mapping[int, MigrationStep] | None = None,
    logger: logging.Logger | None = None,
) -> ConfigStore:
    """Open the config file shared by sibling applications of ``root_dir``.

    The file lives at ``<root_dir>/../<shared_dir>/<file_name>``; it is created
    with seed content when missing and migrated before it is returned.
    """
    handle = ConfigHandle(root_dir=Path(root_dir), relative_path=f"../{shared_dir}/{file_name}")
    store = ConfigStore(handle, logger=logger, default_text=GLOBAL_CONFIG_CONTENT)
    Migrator(store, steps).migrate()
    return store
