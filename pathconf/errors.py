from __future__ import annotations


class InvalidPathError(ValueError):
    """Raised for an empty path or a path containing an empty segment."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Invalid config path {path!r}: {reason}")
        self.path = path
        self.reason = reason


class DocumentParseError(ValueError):
    """Raised when backing text cannot be decoded into a document."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"Failed to parse {source}: {message}")
        self.source = source
