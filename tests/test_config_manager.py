import json
from pathlib import Path

import pytest

from throne_ocr.config_manager import DEFAULT_CONFIG_PATH, ConfigManager


def _config(**overrides):
    config = {
        "ocr": {"engine": "tesseract", "language": "eng"},
        "filter_color": "y",
        "class_registry": "class.csv",
        "output_paths": {
            "output": "output.csv",
            "errors": "errors.csv",
            "raw_ocr": "tesseract_output.txt",
            "logs": ".logging",
        },
    }
    config.update(overrides)
    return config


def _write(tmp_path: Path, config) -> str:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config), encoding="utf-8")
    return str(path)


def test_default_config_loads():
    manager = ConfigManager(DEFAULT_CONFIG_PATH)

    assert manager.get_filter_color() == "yellow"
    assert manager.get_enemy_label() == "Enemy"
    assert manager.get_duplicate_policy() == "keep_first"
    assert manager.get_max_workers() == 0
    assert ".png" in manager.get_image_extensions()
    assert manager.get_alias_table().match("gaiaa") == "Gaaiaa"


def test_defaults_for_optional_keys(tmp_path: Path):
    manager = ConfigManager(_write(tmp_path, _config()))

    assert manager.get_filter_color() == "yellow"
    assert manager.get_duplicate_policy() == "keep_first"
    assert manager.get_max_workers() == 0
    assert manager.get_nested(["output_paths", "errors"]) == "errors.csv"
    assert manager.get_nested(["output_paths", "missing"], "x") == "x"


def test_overrides_replace_file_values(tmp_path: Path):
    overrides = {
        "filter_color": "r",
        "enemy_label": "Dremio",
        "max_workers": None,
        "ocr": {"language": "fra"},
        "output_paths": {"output": None},
    }

    manager = ConfigManager(_write(tmp_path, _config(max_workers=2)), overrides=overrides)

    assert manager.get_filter_color() == "red"
    assert manager.get_enemy_label() == "Dremio"
    assert manager.get_max_workers() == 2
    assert manager.get_ocr_config() == {"engine": "tesseract", "language": "fra"}
    assert manager.get_output_paths()["output"] == "output.csv"


def test_unset_overrides_do_not_hide_missing_section(tmp_path: Path):
    config = _config()
    del config["ocr"]

    with pytest.raises(ValueError, match="ocr"):
        ConfigManager(_write(tmp_path, config), overrides={"ocr": {"language": None}})


def test_missing_required_field(tmp_path: Path):
    config = _config()
    del config["class_registry"]

    with pytest.raises(ValueError, match="class_registry"):
        ConfigManager(_write(tmp_path, config))


def test_missing_output_path(tmp_path: Path):
    config = _config()
    del config["output_paths"]["errors"]

    with pytest.raises(ValueError, match="errors"):
        ConfigManager(_write(tmp_path, config))


@pytest.mark.parametrize("overrides", [
    {"filter_color": "green"},
    {"duplicate_policy": "merge"},
    {"max_workers": -1},
    {"max_workers": True},
    {"max_workers": "4"},
    {"name_aliases": ["Gaaiaa"]},
    {"name_aliases": {"Bob": "b0b"}},
    {"name_aliases": {"Bob": ["b0b", 7]}},
])
def test_invalid_values(tmp_path: Path, overrides):
    with pytest.raises(ValueError):
        ConfigManager(_write(tmp_path, _config(**overrides)))


def test_conflicting_aliases(tmp_path: Path):
    manager = ConfigManager(_write(tmp_path, _config(name_aliases={"A": ["x"], "B": ["x"]})))

    with pytest.raises(ValueError):
        manager.get_alias_table()


def test_missing_file(tmp_path: Path):
    with pytest.raises(IOError, match="Failed to load config"):
        ConfigManager(str(tmp_path / "nope.json"))


def test_alias_groups_from_config(tmp_path: Path):
    manager = ConfigManager(_write(tmp_path, _config(name_aliases={"Bob": ["b0b", "8ob"]})))

    table = manager.get_alias_table()

    assert table.match("B0B") == "Bob"
    assert table.match("B") == "B"
