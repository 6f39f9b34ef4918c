from __future__ import annotations

import json

import pytest

from cosirob.protocol.catalog import CommandCatalog, parse_catalog
from cosirob.protocol.types import CatalogError, CommandDefinition, CommandNotFound


@pytest.mark.unit
def test_bundled_schema_is_declared_in_order(catalog: CommandCatalog):
    codes = [code for code, _ in catalog.list()]
    assert codes[:4] == ["sp", "ac", "mo", "mv"]
    assert codes[-2:] == ["en", "di"]
    assert len(codes) == len(set(codes)) == 29


@pytest.mark.unit
def test_parameter_names_exclude_channel(catalog: CommandCatalog):
    assert catalog.parameter_names("mv") == ["x", "y", "z", "rx", "ry", "rz"]
    assert catalog.parameter_names("rd") == ["slot"]
    assert catalog.parameter_names("ho") == []


@pytest.mark.unit
def test_lookup_unknown_code_is_user_error(catalog: CommandCatalog):
    with pytest.raises(CommandNotFound) as exc:
        catalog.lookup("zz")
    assert exc.value.code == "zz"
    # Treated as bad input, not a protocol fault
    assert isinstance(exc.value, ValueError)


@pytest.mark.unit
def test_mnemonic_comes_from_syntax(catalog: CommandCatalog):
    assert catalog.mnemonic("mv") == "mv"
    assert catalog.mnemonic("st_query") == "st?"


@pytest.mark.unit
def test_syntax_without_placeholder_is_rejected():
    with pytest.raises(CatalogError):
        CommandCatalog({"xx": CommandDefinition(syntax="xx", description="", example="")})


@pytest.mark.unit
def test_duplicate_codes_are_rejected():
    text = (
        '{"CosirobCommands": {'
        '"ho": {"syntax": "<channel> ho", "description": "a", "example": "00 ho"},'
        '"ho": {"syntax": "<channel> ho", "description": "b", "example": "00 ho"}}}'
    )
    with pytest.raises(CatalogError, match="Duplicate"):
        parse_catalog(text)


@pytest.mark.unit
def test_missing_root_key_is_rejected():
    with pytest.raises(CatalogError):
        parse_catalog(json.dumps({"commands": {}}))
