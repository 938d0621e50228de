from __future__ import annotations

from pathlib import Path

import pytest

from pathconf.registry import GLOBAL_CONFIG_CONTENT, ConfigRegistry, open_global_config


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_registry_registers_and_reloads_stores(tmp_path: Path) -> None:
    root = tmp_path / "plugin"
    _write(root / "config.yml", "enabled: true\n")
    _write(root / "messages.yml", "greeting: Hi\n")
    registry = ConfigRegistry(root)

    general = registry.register("general", "config.yml")
    messages = registry.register("messages", "messages.yml")

    assert registry.names() == ["general", "messages"]
    assert "general" in registry
    assert registry["messages"] is messages
    assert registry.get("missing") is None
    assert general.get_boolean("enabled") is True
    assert messages.get_string("greeting") == "Hi"

    _write(root / "messages.yml", "greeting: Hello\n")
    registry.reload_all()
    assert messages.get_string("greeting") == "Hello"


def test_registry_defaults_by_name(tmp_path: Path) -> None:
    root = tmp_path / "plugin"
    _write(root / "#defaults" / "messages.yml", "greeting: Hi\nfarewell: Bye\n")
    _write(root / "messages.yml", "greeting: Yo\n")
    registry = ConfigRegistry(root)

    registry.register("default_messages", "#defaults/messages.yml")
    messages = registry.register("messages", "messages.yml", defaults="default_messages")

    assert messages.get_string("greeting") == "Yo"
    assert messages.get_string("farewell") == "Bye"


def test_registry_rejects_duplicates_and_unknown_names(tmp_path: Path) -> None:
    registry = ConfigRegistry(tmp_path)
    registry.register("general", "config.yml")

    with pytest.raises(ValueError):
        registry.register("general", "other.yml")
    with pytest.raises(KeyError):
        registry["unknown"]


def test_global_config_is_created_next_to_root(tmp_path: Path) -> None:
    plugin_dir = tmp_path / "plugins" / "MyPlugin"
    plugin_dir.mkdir(parents=True)

    store = open_global_config(plugin_dir)

    global_path = tmp_path / "plugins" / "shared" / "global.yml"
    assert store.path == global_path.resolve()
    assert global_path.read_text(encoding="utf-8") == GLOBAL_CONFIG_CONTENT
    assert store.get_int("config_version") == 0


def test_global_config_runs_migrations(tmp_path: Path) -> None:
    plugin_dir = tmp_path / "plugins" / "MyPlugin"
    _write(tmp_path / "plugins" / "shared" / "global.yml", "language: en\n")

    store = open_global_config(plugin_dir, steps={0: lambda s: s.set("locale", s.get_string("language"))})

    assert store.get_int("config_version") == 1
    assert store.get_string("locale") == "en"
