import pytest

from throne_ocr.name_resolver import AliasTable, NameResolver


def test_resolve_keeps_clean_name():
    assert NameResolver().resolve("TurboDedek") == "TurboDedek"


def test_resolve_strips_symbols_and_leading_rank():
    assert NameResolver().resolve("12 Roi-Boo®") == "RoiBoo"


def test_resolve_applies_default_aliases_ignoring_case():
    resolver = NameResolver()
    assert resolver.resolve("GAIAA") == "Gaaiaa"
    assert resolver.resolve("requrem") == "Requiem"
    assert resolver.resolve("fxtl") == "FxT1"


def test_resolve_capitalizes_first_character_only():
    assert NameResolver().resolve("listrinda") == "Listrinda"
    assert NameResolver().resolve("mcQueen") == "McQueen"


@pytest.mark.parametrize("cell", ["", "   ", None, "123", "®®"])
def test_resolve_returns_empty_when_nothing_usable(cell):
    assert NameResolver().resolve(cell) == ""


def test_custom_alias_table_replaces_default():
    resolver = NameResolver(AliasTable.from_groups({"Bob": ["b0b"]}))
    assert resolver.resolve("B0B") == "Bob"
    assert resolver.resolve("gaiaa") == "Gaiaa"


def test_alias_table_rejects_conflicting_variants():
    with pytest.raises(ValueError):
        AliasTable.from_groups({"Alice": ["al"], "Alan": ["al"]})


def test_alias_table_match_leaves_unknown_names():
    table = AliasTable.default()
    assert table.match("Nobody") == "Nobody"
    assert len(table) > 0
