from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any


class _Missing:
    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Missing:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Missing:
        return self


MISSING: Any = _Missing()

SCALAR_TYPES = (str, int, float, bool)


class NodeKind(str, Enum):
    SCALAR = "scalar"
    LIST = "list"
    MAP = "map"


def node_kind(value: Any) -> NodeKind:
    if isinstance(value, dict):
        return NodeKind.MAP
    if isinstance(value, list):
        return NodeKind.LIST
    if value is None or isinstance(value, SCALAR_TYPES):
        return NodeKind.SCALAR
    raise TypeError(f"Not a config node: {type(value).__name__}")


def is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, SCALAR_TYPES)


def normalize(value: Any) -> Any:
    """Convert a caller-supplied value into a detached Node tree.

    Lists, tuples and mappings are copied recursively; mapping keys must be
    strings. Anything that is not a scalar, sequence or mapping raises
    TypeError.
    """
    if is_scalar(value):
        return value
    if isinstance(value, Mapping):
        normalized: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"Config map keys must be strings, got {type(key).__name__}")
            normalized[key] = normalize(item)
        return normalized
    if isinstance(value, (list, tuple)):
        return [normalize(item) for item in value]
    raise TypeError(f"Unsupported config value type: {type(value).__name__}")


def normalize_parsed(value: Any) -> Any:
    # YAML hands back non-string keys and date objects; flatten them into Nodes.
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if is_scalar(value):
        return value
    if isinstance(value, Mapping):
        return {str(key): normalize_parsed(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [normalize_parsed(item) for item in value]
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)
