from __future__ import annotations

from enum import Enum
from typing import Any

from pathconf.errors import InvalidPathError
from pathconf.nodes import MISSING

PATH_SEPARATOR = "."


class WalkMode(str, Enum):
    READ = "read"
    WRITE = "write"
    DELETE = "delete"


def split_path(path: str) -> tuple[str, ...]:
    """Split a dot path into segments.

    Keys containing a literal dot cannot be addressed; there is no escape
    syntax.
    """
    if not isinstance(path, str):
        raise TypeError(f"Config path must be a string, got {type(path).__name__}")
    if not path:
        raise InvalidPathError(path, "path is empty")
    segments = tuple(path.split(PATH_SEPARATOR))
    if any(not segment for segment in segments):
        raise InvalidPathError(path, "path contains an empty segment")
    return segments


def join_path(*parts: str) -> str:
    return PATH_SEPARATOR.join(part for part in parts if part)


def navigate(document: dict[str, Any], path: str, mode: WalkMode, value: Any = MISSING) -> Any:
    segments = split_path(path)
    if mode is WalkMode.READ:
        return _read(document, segments)
    if mode is WalkMode.WRITE:
        if value is MISSING:
            raise ValueError("A value is required for WalkMode.WRITE")
        return _write(document, segments, value)
    if mode is WalkMode.DELETE:
        return _delete(document, segments)
    raise ValueError(f"Unknown walk mode: {mode!r}")


def _read(document: dict[str, Any], segments: tuple[str, ...]) -> Any:
    current: Any = document
    for segment in segments:
        if not isinstance(current, dict) or segment not in current:
            return MISSING
        current = current[segment]
    return current


def _write(document: dict[str, Any], segments: tuple[str, ...], value: Any) -> Any:
    current = document
    for segment in segments[:-1]:
        child = current.get(segment)
        if not isinstance(child, dict):
            child = {}
            current[segment] = child
        current = child
    current[segments[-1]] = value
    return value


def _delete(document: dict[str, Any], segments: tuple[str, ...]) -> bool:
    parent = _read(document, segments[:-1]) if len(segments) > 1 else document
    if not isinstance(parent, dict) or segments[-1] not in parent:
        return False
    del parent[segments[-1]]
    return True
