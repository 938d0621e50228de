from __future__ import annotations

from pathconf.accessors import ConfigSection
from pathconf.config import ConfigHandle
from pathconf.errors import DocumentParseError, InvalidPathError
from pathconf.migrations import Migrator
from pathconf.nodes import MISSING
from pathconf.registry import ConfigRegistry, open_global_config
from pathconf.store import ConfigStore, SaveResult
from pathconf.watcher import ConfigWatcher

__all__ = [
    "MISSING",
    "ConfigHandle",
    "ConfigRegistry",
    "ConfigSection",
    "ConfigStore",
    "ConfigWatcher",
    "DocumentParseError",
    "InvalidPathError",
    "Migrator",
    "SaveResult",
    "open_global_config",
]
