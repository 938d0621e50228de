from __future__ import annotations

from copy import deepcopy
from typing import TYPE_CHECKING, Any, Callable

from pathconf.nodes import MISSING, is_scalar
from pathconf.paths import join_path, split_path

if TYPE_CHECKING:
    from pathconf.store import ConfigStore, SaveResult

INT32_RANGE = (-(2**31), 2**31 - 1)
INT64_RANGE = (-(2**63), 2**63 - 1)


def as_string(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return MISSING


def _as_bounded_int(value: Any, bounds: tuple[int, int]) -> Any:
    if isinstance(value, bool):
        return MISSING
    if isinstance(value, float):
        if not value.is_integer():
            return MISSING
        value = int(value)
    if not isinstance(value, int):
        return MISSING
    low, high = bounds
    return value if low <= value <= high else MISSING


def as_int(value: Any) -> Any:
    return _as_bounded_int(value, INT32_RANGE)


def as_long(value: Any) -> Any:
    return _as_bounded_int(value, INT64_RANGE)


def as_double(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return MISSING
    return float(value)


def as_boolean(value: Any) -> Any:
    return value if isinstance(value, bool) else MISSING


def _convert_list(value: Any, convert: Callable[[Any], Any]) -> Any:
    if not isinstance(value, list):
        return MISSING
    converted = []
    for item in value:
        if not is_scalar(item):
            continue
        result = convert(item)
        if result is not MISSING:
            converted.append(result)
    return converted


class TypedAccessors:
    """Typed reads layered on ``_lookup``.

    Every accessor returns ``default`` when the path is absent, the store
    failed to load, or the node has the wrong kind. Values are deep copies.
    """

    def _lookup(self, path: str, *, allow_root: bool = False) -> Any:
        raise NotImplementedError

    def _typed(self, path: str, convert: Callable[[Any], Any], default: Any) -> Any:
        value = self._lookup(path)
        if value is MISSING:
            return default
        result = convert(value)
        return default if result is MISSING else result

    def get(self, path: str, default: Any = None) -> Any:
        value = self._lookup(path)
        return default if value is MISSING else deepcopy(value)

    def get_string(self, path: str, default: str | None = None) -> str | None:
        return self._typed(path, as_string, default)

    def get_int(self, path: str, default: int | None = None) -> int | None:
        return self._typed(path, as_int, default)

    def get_long(self, path: str, default: int | None = None) -> int | None:
        return self._typed(path, as_long, default)

    def get_double(self, path: str, default: float | None = None) -> float | None:
        return self._typed(path, as_double, default)

    def get_boolean(self, path: str, default: bool | None = None) -> bool | None:
        return self._typed(path, as_boolean, default)

    def get_list(self, path: str, default: list[Any] | None = None) -> list[Any] | None:
        return self._typed(path, lambda value: deepcopy(value) if isinstance(value, list) else MISSING, default)

    def get_string_list(self, path: str, default: list[str] | None = None) -> list[str] | None:
        return self._typed(path, lambda value: _convert_list(value, as_string), default)

    def get_integer_list(self, path: str, default: list[int] | None = None) -> list[int] | None:
        return self._typed(path, lambda value: _convert_list(value, as_int), default)

    def get_double_list(self, path: str, default: list[float] | None = None) -> list[float] | None:
        return self._typed(path, lambda value: _convert_list(value, as_double), default)

    def get_boolean_list(self, path: str, default: list[bool] | None = None) -> list[bool] | None:
        return self._typed(path, lambda value: _convert_list(value, as_boolean), default)

    def get_map(self, path: str, default: dict[str, Any] | None = None) -> dict[str, Any] | None:
        value = self._lookup(path, allow_root=True)
        return deepcopy(value) if isinstance(value, dict) else default

    def get_map_list(
        self, path: str, default: list[dict[str, Any]] | None = None
    ) -> list[dict[str, Any]] | None:
        value = self._lookup(path)
        if not isinstance(value, list):
            return default
        return [deepcopy(item) for item in value if isinstance(item, dict)]

    def get_section(self, path: str, default: ConfigSection | None = None) -> ConfigSection | None:
        value = self._lookup(path, allow_root=True)
        if not isinstance(value, dict):
            return default
        return ConfigSection(self._section_owner(), self._section_path(path))

    def get_keys(self, path: str = "") -> list[str]:
        value = self._lookup(path, allow_root=True)
        return list(value) if isinstance(value, dict) else []

    def get_all(self, path: str = "") -> list[Any]:
        value = self._lookup(path, allow_root=True)
        return [deepcopy(item) for item in value.values()] if isinstance(value, dict) else []

    def _section_owner(self) -> ConfigStore:
        raise NotImplementedError

    def _section_path(self, path: str) -> str:
        return path


class ConfigSection(TypedAccessors):
    """A live, path-prefixed view into a store."""

    def __init__(self, store: ConfigStore, path: str) -> None:
        if path:
            split_path(path)
        self._store = store
        self.path = path

    def __repr__(self) -> str:
        return f"ConfigSection(path={self.path!r}, file={self._store.handle.path})"

    def _full_path(self, path: str) -> str:
        if path:
            split_path(path)
        return join_path(self.path, path)

    def _lookup(self, path: str, *, allow_root: bool = False) -> Any:
        if not path and not allow_root:
            split_path(path)
        return self._store._lookup(self._full_path(path), allow_root=True)

    def _section_owner(self) -> ConfigStore:
        return self._store

    def _section_path(self, path: str) -> str:
        return self._full_path(path)

    def set(self, path: str, value: Any) -> SaveResult:
        split_path(path)
        return self._store.set(self._full_path(path), value)

    def remove(self, path: str) -> bool:
        split_path(path)
        return self._store.remove(self._full_path(path))

    def contains(self, path: str) -> bool:
        return self._lookup(path) is not MISSING
