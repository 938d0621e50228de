from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

_DEFAULT_POLL_INTERVAL = 1.0


class ReloadSignal:
    """Single-flag channel from a watcher thread to the store owner."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def post(self) -> None:
        self._event.set()

    def consume(self) -> bool:
        if not self._event.is_set():
            return False
        self._event.clear()
        return True

    @property
    def pending(self) -> bool:
        return self._event.is_set()


def _file_signature(path: Path) -> tuple[int, int] | None:
    try:
        stat = path.stat()
    except FileNotFoundError:
        return None
    return stat.st_mtime_ns, stat.st_size


class ConfigWatcher:
    def __init__(
        self,
        path: str | Path,
        on_change: Callable[[], None],
        interval: float = _DEFAULT_POLL_INTERVAL,
    ) -> None:
        if interval <= 0:
            raise ValueError("Watch interval must be positive")
        self.path = Path(path)
        self.interval = interval
        self._on_change = on_change
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._signature: tuple[int, int] | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> ConfigWatcher:
        if self.running:
            return self
        self._stop.clear()
        self._signature = _file_signature(self.path)
        self._thread = threading.Thread(
            target=self._run,
            name=f"config-watcher:{self.path.name}",
            daemon=True,
        )
        self._thread.start()
        logger.debug("Watching config file path=%s interval=%.2fs", self.path, self.interval)
        return self

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None

    def poll(self) -> bool:
        """Compare the file against the last seen state; notify on change."""
        current = _file_signature(self.path)
        if current == self._signature:
            return False
        self._signature = current
        logger.debug("Config file changed path=%s", self.path)
        try:
            self._on_change()
        except Exception:  # noqa: BLE001
            logger.exception("Config change callback failed for %s", self.path)
        return True

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.poll()

    def __enter__(self) -> ConfigWatcher:
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
