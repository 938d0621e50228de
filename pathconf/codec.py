from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from pathconf.errors import DocumentParseError
from pathconf.nodes import normalize_parsed

YAML_SUFFIXES = {".yaml", ".yml"}
JSON_SUFFIXES = {".json"}


class DocumentCodec:
    name = "document"
    create_if_missing = False

    def clean(self, text: str) -> str:
        return text

    def parse(self, text: str, source: str = "<string>") -> dict[str, Any]:
        raise NotImplementedError

    def serialize(self, document: dict[str, Any]) -> str:
        raise NotImplementedError

    def _as_document(self, loaded: Any, source: str) -> dict[str, Any]:
        if loaded is None:
            return {}
        if not isinstance(loaded, dict):
            raise DocumentParseError(source, "top-level value must be a mapping")
        return normalize_parsed(loaded)


class YamlCodec(DocumentCodec):
    name = "yaml"

    def clean(self, text: str) -> str:
        # Cut the "!!" tag tokens reported by the scanner plus one following blank.
        try:
            spans = [
                (token.start_mark.index, token.end_mark.index)
                for token in yaml.scan(text, Loader=yaml.SafeLoader)
                if isinstance(token, yaml.TagToken) and token.value[0] == "!!"
            ]
        except yaml.YAMLError:
            return text
        if not spans:
            return text

        parts: list[str] = []
        position = 0
        for start, end in spans:
            parts.append(text[position:start])
            if text[end:end + 1] in (" ", "\t"):
                end += 1
            position = end
        parts.append(text[position:])
        return "".join(parts)

    def parse(self, text: str, source: str = "<string>") -> dict[str, Any]:
        try:
            loaded = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise DocumentParseError(source, str(exc)) from exc
        return self._as_document(loaded, source)

    def serialize(self, document: dict[str, Any]) -> str:
        try:
            return yaml.safe_dump(
                document,
                sort_keys=False,
                allow_unicode=True,
                default_flow_style=False,
            )
        except yaml.YAMLError as exc:
            raise ValueError(f"Cannot serialize document as YAML: {exc}") from exc


class JsonCodec(DocumentCodec):
    name = "json"
    create_if_missing = True

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def parse(self, text: str, source: str = "<string>") -> dict[str, Any]:
        if not text.strip():
            return {}
        try:
            loaded = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DocumentParseError(source, str(exc)) from exc
        return self._as_document(loaded, source)

    def serialize(self, document: dict[str, Any]) -> str:
        return json.dumps(document, indent=self.indent, ensure_ascii=False) + "\n"


def codec_for_path(path: str | Path) -> DocumentCodec:
    suffix = Path(path).suffix.lower()
    if suffix in YAML_SUFFIXES:
        return YamlCodec()
    if suffix in JSON_SUFFIXES:
        return JsonCodec()
    raise ValueError(f"Unsupported config format: {suffix or '<none>'} ({path})")
