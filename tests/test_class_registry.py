from pathlib import Path

import pytest

from throne_ocr.class_registry import ClassRegistry, load_class_registry


def test_resolve_ignores_case():
    registry = ClassRegistry({"Listrinda": "rogue"})
    assert registry.resolve("listrinda") == "rogue"
    assert registry.resolve("LISTRINDA") == "rogue"


def test_resolve_unknown_name():
    assert ClassRegistry().resolve("Nobody") == "UNKNOWN"


def test_load_class_registry_skips_lines_without_comma(tmp_path: Path):
    path = tmp_path / "class.csv"
    path.write_text("Listrinda,rogue\njust a name\n\nMacell, healer \nOdd,bow,dagger\n", encoding="utf-8")

    registry = load_class_registry(str(path))

    assert len(registry) == 3
    assert registry.resolve("Macell") == "healer"
    assert registry.resolve("odd") == "bow,dagger"


def test_load_class_registry_missing_file(tmp_path: Path):
    with pytest.raises(IOError, match="Failed to load player classes"):
        load_class_registry(str(tmp_path / "missing.csv"))


def test_load_class_registry_wraps_decode_errors(tmp_path: Path):
    path = tmp_path / "class.csv"
    path.write_bytes("Zoé,healer\n".encode("latin-1"))

    with pytest.raises(IOError, match="Failed to load player classes"):
        load_class_registry(str(path))
