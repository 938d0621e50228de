from __future__ import annotations

from pathlib import Path

import pytest

from pathconf.accessors import ConfigSection
from pathconf.config import ConfigHandle
from pathconf.errors import InvalidPathError
from pathconf.store import ConfigStore

SAMPLE = """
general:
  name: Lobby
  max_players: 20
  big_number: 9000000000
  ratio: 0.75
  whole_ratio: 3.0
  enabled: true
  tags: [pvp, 7, true, {nested: map}, [inner]]
  numbers: [1, 2.0, 2.5, "3", false]
  switches: [true, false, "true"]
  ratios: [1, 2.5, "x"]
  worlds:
    - name: overworld
      seed: 1
    - spawn
    - name: nether
  limits:
    homes: 3
    warps: 5
"""


@pytest.fixture
def store(tmp_path: Path) -> ConfigStore:
    (tmp_path / "config.yml").write_text(SAMPLE, encoding="utf-8")
    return ConfigStore(ConfigHandle(root_dir=tmp_path, relative_path="config.yml"))


def test_string_accessor(store: ConfigStore) -> None:
    assert store.get_string("general.name") == "Lobby"
    assert store.get_string("general.max_players") == "20"
    assert store.get_string("general.enabled") == "true"
    assert store.get_string("missing.key", "fallback") == "fallback"
    assert store.get_string("general.tags", "fallback") == "fallback"
    assert store.get_string("general.limits") is None


def test_integer_accessors(store: ConfigStore) -> None:
    assert store.get_int("general.max_players") == 20
    assert store.get_int("general.whole_ratio") == 3
    assert store.get_int("general.ratio", -1) == -1
    assert store.get_int("general.enabled", -1) == -1
    assert store.get_int("general.name", -1) == -1
    assert store.get_int("general.big_number", -1) == -1
    assert store.get_long("general.big_number") == 9000000000


def test_double_and_boolean_accessors(store: ConfigStore) -> None:
    assert store.get_double("general.ratio") == 0.75
    assert store.get_double("general.max_players") == 20.0
    assert store.get_double("general.enabled", 1.5) == 1.5
    assert store.get_boolean("general.enabled") is True
    assert store.get_boolean("general.max_players", False) is False
    assert store.get_boolean("general.missing") is None


def test_list_accessors_filter_mismatched_elements(store: ConfigStore) -> None:
    assert store.get_list("general.tags") == ["pvp", 7, True, {"nested": "map"}, ["inner"]]
    assert store.get_string_list("general.tags") == ["pvp", "7", "true"]
    assert store.get_integer_list("general.numbers") == [1, 2]
    assert store.get_double_list("general.ratios") == [1.0, 2.5]
    assert store.get_boolean_list("general.switches") == [True, False]
    assert store.get_string_list("general.name", ["default"]) == ["default"]
    assert store.get_integer_list("general.missing") is None


def test_map_accessors(store: ConfigStore) -> None:
    assert store.get_map("general.limits") == {"homes": 3, "warps": 5}
    assert store.get_map("general.name", {}) == {}
    assert store.get_map_list("general.worlds") == [{"name": "overworld", "seed": 1}, {"name": "nether"}]
    assert store.get_map_list("general.limits", []) == []
    assert list(store.get_map("")) == ["general"]


def test_keys_and_values_of_sections(store: ConfigStore) -> None:
    assert store.get_keys("general.limits") == ["homes", "warps"]
    assert store.get_all("general.limits") == [3, 5]
    assert store.get_keys("general.name") == []
    assert store.get_all("general.missing") == []
    assert store.get_keys() == ["general"]


def test_section_view_reads_and_writes_relative_paths(store: ConfigStore) -> None:
    section = store.get_section("general.limits")

    assert isinstance(section, ConfigSection)
    assert section.path == "general.limits"
    assert section.get_int("homes") == 3
    assert section.get_keys() == ["homes", "warps"]
    assert section.contains("warps")

    assert section.set("homes", 4)
    assert store.get_int("general.limits.homes") == 4
    assert section.get_int("homes") == 4

    assert section.remove("warps") is True
    assert store.contains("general.limits.warps") is False


def test_nested_sections_and_missing_sections(store: ConfigStore) -> None:
    general = store.get_section("general")
    limits = general.get_section("limits")

    assert limits.path == "general.limits"
    assert limits.get_int("homes") == 3
    assert store.get_section("general.name") is None
    assert store.get_section("nope", None) is None
    assert store.get_section("").get_keys() == ["general"]


def test_section_rejects_invalid_relative_paths(store: ConfigStore) -> None:
    section = store.get_section("general")
    with pytest.raises(InvalidPathError):
        section.get("")
    with pytest.raises(InvalidPathError):
        section.get_int("a..b")
