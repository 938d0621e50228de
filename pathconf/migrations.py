from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from pathconf.store import ConfigStore

logger = logging.getLogger(__name__)

VERSION_FIELD = "config_version"

MigrationStep = Callable[["ConfigStore"], None]


class Migrator:
    """Upgrade a store one schema version at a time.

    ``steps[n]`` turns a version ``n`` document into a version ``n + 1``
    document. Steps must tolerate being re-run on an already migrated
    document, since a crash between the step and the version bump replays it.
    """

    def __init__(
        self,
        store: ConfigStore,
        steps: Mapping[int, MigrationStep] | None = None,
        *,
        field: str = VERSION_FIELD,
    ) -> None:
        self.store = store
        self.steps: dict[int, MigrationStep] = dict(steps or {})
        self.field = field
        for version in self.steps:
            if isinstance(version, bool) or not isinstance(version, int) or version < 0:
                raise ValueError(f"Migration versions must be non-negative integers, got {version!r}")

    @property
    def target_version(self) -> int:
        return max(self.steps) + 1 if self.steps else 0

    def current_version(self) -> int | None:
        """Read the schema version, inserting 0 when the field is absent."""
        if not self.store.contains(self.field):
            if self.store.failed:
                return None
            result = self.store.set(self.field, 0)
            if not result:
                logger.warning("Could not initialize %s in %s: %s", self.field, self.store.path, result.error)
                return None
            logger.info("Initialized %s=0 in %s", self.field, self.store.path)
            return 0
        version = self.store.get_long(self.field)
        if version is None or version < 0:
            logger.error(
                "Invalid %s value %r in %s; skipping migrations",
                self.field,
                self.store.get(self.field),
                self.store.path,
            )
            return None
        return version

    def migrate(self) -> int | None:
        version = self.current_version()
        while version is not None and version in self.steps:
            logger.info(
                "Migrating %s from %s=%d to %d",
                self.store.path,
                self.field,
                version,
                version + 1,
            )
            self.steps[version](self.store)
            result = self.store.set(self.field, version + 1)
            if not result:
                logger.error(
                    "Failed to record %s=%d in %s: %s",
                    self.field,
                    version + 1,
                    self.store.path,
                    result.error,
                )
                return version
            version = self.current_version()
        return version
