from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from main import DEFAULT_SETTINGS, _parse_value, _render, _resolve_home_dir, main


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root = logging.getLogger()
    previous_handlers = list(root.handlers)
    previous_level = root.level
    try:
        yield
    finally:
        root.handlers.clear()
        for handler in previous_handlers:
            root.addHandler(handler)
        root.setLevel(previous_level)


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    return tmp_path / "home"


def _run(home_dir: Path, *argv: str) -> int:
    return main(["--home-dir", str(home_dir), *argv])


def test_resolve_home_dir_prefers_argument_then_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PATHCONF_HOME", str(tmp_path / "from-env"))

    assert _resolve_home_dir(str(tmp_path / "explicit")) == (tmp_path / "explicit").resolve()
    assert _resolve_home_dir(None) == (tmp_path / "from-env").resolve()


def test_parse_and_render_values() -> None:
    assert _parse_value("5") == 5
    assert _parse_value("[a, b]") == ["a", "b"]
    assert _parse_value("plain text") == "plain text"
    assert _parse_value("key: [") == "key: ["
    assert _render("text") == "text"
    assert _render(True) == "true"
    assert _render(None) == "null"
    assert _render({"a": 1}) == "a: 1"


def test_cli_set_get_keys_remove(tmp_path: Path, home_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = tmp_path / "config.yml"
    config.write_text("{}\n", encoding="utf-8")

    assert _run(home_dir, str(config), "set", "limits.homes", "3") == 0
    assert _run(home_dir, str(config), "set", "limits.name", "main base") == 0
    assert yaml.safe_load(config.read_text(encoding="utf-8")) == {"limits": {"homes": 3, "name": "main base"}}
    capsys.readouterr()

    assert _run(home_dir, str(config), "get", "limits.homes") == 0
    assert capsys.readouterr().out == "3\n"

    assert _run(home_dir, str(config), "keys", "limits") == 0
    assert capsys.readouterr().out == "homes\nname\n"

    assert _run(home_dir, str(config), "remove", "limits.homes") == 0
    assert _run(home_dir, str(config), "get", "limits.homes") == 1
    assert "not set" in capsys.readouterr().err


def test_cli_seeds_settings_file(tmp_path: Path, home_dir: Path) -> None:
    config = tmp_path / "state.json"

    assert _run(home_dir, str(config), "keys") == 0
    assert (home_dir / "settings.yaml").read_text(encoding="utf-8") == DEFAULT_SETTINGS
    assert config.read_text(encoding="utf-8") == "{}\n"


def test_cli_invalid_path_and_format(tmp_path: Path, home_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = tmp_path / "config.yml"
    config.write_text("a: 1\n", encoding="utf-8")

    assert _run(home_dir, str(config), "get", "a..b") == 2
    assert _run(home_dir, str(tmp_path / "config.toml"), "keys") == 2
    err = capsys.readouterr().err
    assert "Invalid config path" in err
    assert "Unsupported config format" in err


def test_cli_clear_requires_confirmation(tmp_path: Path, home_dir: Path) -> None:
    config = tmp_path / "config.yml"
    config.write_text("a: 1\nb: 2\n", encoding="utf-8")

    assert _run(home_dir, str(config), "clear") == 1
    assert yaml.safe_load(config.read_text(encoding="utf-8")) == {"a": 1, "b": 2}

    assert _run(home_dir, str(config), "clear", "--yes") == 0
    assert yaml.safe_load(config.read_text(encoding="utf-8")) == {}


def test_cli_migrate_inserts_version(tmp_path: Path, home_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = tmp_path / "config.yml"
    config.write_text("a: 1\n", encoding="utf-8")

    assert _run(home_dir, str(config), "migrate") == 0
    assert capsys.readouterr().out == "0\n"
    assert yaml.safe_load(config.read_text(encoding="utf-8")) == {"a": 1, "config_version": 0}
