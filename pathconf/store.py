from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pathconf.accessors import TypedAccessors
from pathconf.codec import DocumentCodec, codec_for_path
from pathconf.config import ConfigHandle
from pathconf.errors import DocumentParseError
from pathconf.nodes import MISSING, normalize
from pathconf.paths import WalkMode, navigate, split_path
from pathconf.utils import atomic_write_text, read_text_if_exists
from pathconf.watcher import ConfigWatcher, ReloadSignal

_FAILED: Any = object()


@dataclass(frozen=True)
class SaveResult:
    ok: bool
    path: Path
    error: str | None = None

    def __bool__(self) -> bool:
        return self.ok


class ConfigStore(TypedAccessors):
    """Write-through, lazily loaded document behind dot-path accessors.

    The store has a single owner. Other threads may only call
    ``request_reload``; the owner applies the pending reload at the start of
    its next operation.
    """

    def __init__(
        self,
        handle: ConfigHandle,
        *,
        codec: DocumentCodec | None = None,
        logger: logging.Logger | None = None,
        default_text: str | None = None,
        defaults: ConfigStore | None = None,
    ) -> None:
        self.handle = handle
        self.codec = codec or codec_for_path(handle.path)
        self.logger = logger or logging.getLogger(__name__)
        self.default_text = default_text
        self.defaults = defaults
        self.last_save: SaveResult | None = None
        self._document: Any = None
        self._reload_signal = ReloadSignal()

    def __repr__(self) -> str:
        return f"ConfigStore(path={self.path}, codec={self.codec.name})"

    @property
    def path(self) -> Path:
        return self.handle.path

    @property
    def loaded(self) -> bool:
        return isinstance(self._document, dict)

    @property
    def failed(self) -> bool:
        return self._document is _FAILED

    @property
    def reload_pending(self) -> bool:
        return self._reload_signal.pending

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load(self) -> dict[str, Any] | None:
        if self._reload_signal.consume():
            self.logger.debug("Applying pending reload for %s", self.path)
            self._document = None
        if self._document is _FAILED:
            return None
        if self._document is None:
            try:
                self._document = self._read_document()
            except (DocumentParseError, OSError, UnicodeDecodeError) as exc:
                self._document = _FAILED
                self.logger.error("Failed to load config %s: %s", self.path, exc)
                return None
        return self._document

    def _read_document(self) -> dict[str, Any]:
        path = self.path
        raw = read_text_if_exists(path)
        if raw is None:
            if self.default_text is not None:
                atomic_write_text(path, self.default_text)
                self.logger.info("Created config %s from default content", path)
                raw = self.default_text
            elif self.codec.create_if_missing:
                self._document = {}
                self._write_through("create missing file")
                return {}
            else:
                raise FileNotFoundError(f"Config file not found: {path}")

        cleaned = self.codec.clean(raw)
        document = self.codec.parse(cleaned, source=str(path))
        if cleaned != raw:
            try:
                atomic_write_text(path, cleaned)
            except OSError as exc:
                self.logger.warning("Failed to rewrite cleaned config %s: %s", path, exc)
            else:
                self.logger.info("Stripped type tags from config %s", path)
        return document

    def reload(self, *, eager: bool = False) -> bool:
        """Discard the cached document; with ``eager`` load it again now."""
        self._reload_signal.consume()
        self._document = None
        self.logger.debug("Dropped cached config %s", self.path)
        if eager:
            return self._load() is not None
        return True

    def request_reload(self) -> None:
        self._reload_signal.post()

    def watch(self, interval: float = 1.0) -> ConfigWatcher:
        return ConfigWatcher(self.path, self.request_reload, interval=interval).start()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _write_through(self, reason: str) -> SaveResult:
        path = self.path
        try:
            text = self.codec.serialize(self._document)
        except (TypeError, ValueError) as exc:
            self.logger.warning("Failed to serialize config %s (%s): %s", path, reason, exc)
            return self._record(SaveResult(ok=False, path=path, error=str(exc)))

        cleaned = self.codec.clean(text)
        try:
            self.codec.parse(cleaned, source=str(path))
            atomic_write_text(path, cleaned)
        except (DocumentParseError, OSError) as exc:
            self.logger.warning("Failed to save config %s (%s): %s", path, reason, exc)
            try:
                self._document = self.codec.parse(text, source=str(path))
            except DocumentParseError:
                self.logger.warning("Keeping unsaved in-memory config for %s", path)
            return self._record(SaveResult(ok=False, path=path, error=str(exc)))

        self._document = None
        self.logger.debug("Saved config %s (%s)", path, reason)
        return self._record(SaveResult(ok=True, path=path))

    def _record(self, result: SaveResult) -> SaveResult:
        self.last_save = result
        return result

    def _not_loaded(self, action: str) -> SaveResult:
        self.logger.warning("Skipping %s on %s: config is not loaded", action, self.path)
        return self._record(SaveResult(ok=False, path=self.path, error="config is not loaded"))

    # ------------------------------------------------------------------
    # Document operations
    # ------------------------------------------------------------------

    def _lookup(self, path: str, *, allow_root: bool = False) -> Any:
        if path or not allow_root:
            split_path(path)
        document = self._load()
        if document is None:
            value = MISSING
        elif not path:
            value = document
        else:
            value = navigate(document, path, WalkMode.READ)
        if value is MISSING and self.defaults is not None:
            return self.defaults._lookup(path, allow_root=allow_root)
        return value

    def set(self, path: str, value: Any) -> SaveResult:
        split_path(path)
        node = normalize(value)
        document = self._load()
        if document is None:
            return self._not_loaded(f"set {path}")
        navigate(document, path, WalkMode.WRITE, node)
        return self._write_through(f"set {path}")

    def remove(self, path: str) -> bool:
        """Delete ``path``; True only when it existed and the file was saved.

        A failed save is reported as False and recorded in ``last_save``.
        """
        split_path(path)
        document = self._load()
        if document is None:
            return False
        if not navigate(document, path, WalkMode.DELETE):
            return False
        return self._write_through(f"remove {path}").ok

    def contains(self, path: str) -> bool:
        split_path(path)
        document = self._load()
        if document is None:
            return False
        return navigate(document, path, WalkMode.READ) is not MISSING

    def contains_case_insensitive(self, path: str) -> bool:
        # Only top-level keys are compared; nested paths never match.
        document = self._load()
        if document is None:
            return False
        needle = path.casefold()
        return any(key.casefold() == needle for key in document)

    def clear(self) -> SaveResult:
        self._reload_signal.consume()
        self._document = {}
        result = self._write_through("clear")
        self.reload()
        return result

    def _section_owner(self) -> ConfigStore:
        return self
