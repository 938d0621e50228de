from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ConfigHandle:
    """Identity of one logical configuration file.

    ``relative_path`` is resolved against ``root_dir`` unless it is absolute,
    so handles such as ``../shared/global.yml`` may point outside the root.
    """

    root_dir: Path
    relative_path: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "root_dir", Path(self.root_dir).expanduser().resolve())
        if not str(self.relative_path).strip():
            raise ValueError("Config file path is required")

    @property
    def path(self) -> Path:
        return self.resolve_path(self.relative_path)

    @property
    def name(self) -> str:
        return self.path.name

    def resolve_path(self, value: str | Path | None, *, default: str | Path | None = None) -> Path:
        candidate = value
        if isinstance(candidate, str) and not candidate.strip():
            candidate = None
        if candidate is None:
            candidate = default
        if candidate is None:
            raise ValueError("Path value is required")

        resolved = Path(str(candidate)).expanduser()
        if not resolved.is_absolute():
            resolved = (self.root_dir / resolved).resolve()
        return resolved

    def sibling(self, relative_path: str) -> ConfigHandle:
        return ConfigHandle(root_dir=self.root_dir, relative_path=relative_path)

    @classmethod
    def from_path(cls, path: str | Path) -> ConfigHandle:
        config_path = Path(path).expanduser().resolve()
        return cls(root_dir=config_path.parent, relative_path=config_path.name)
