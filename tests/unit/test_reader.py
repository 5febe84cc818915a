"""Unit tests for registry parsing."""

from pathlib import Path

import pytest

from assetsmith.domain import AssetEntry, Registry
from assetsmith.exceptions import AssetIOError, DuplicateKeyError, MalformedRegistryError
from assetsmith.io.reader import (
    RegistryFormat,
    RegistryParser,
    format_asset_id,
    load_registry,
    parse_declarations,
    parse_declared_key_union,
)

LUAU_REGISTRY = """\
-- This file is automatically @generated by assetsmith.
local assets = {
\tui = {
\t\t["play.png"] = {
\t\t\tid = "rbxassetid://100",
\t\t\twidth = 64,
\t\t\theight = 32,
\t\t\thighlightId = "rbxassetid://101",
\t\t},
\t\t["play-highlight.png"] = "rbxassetid://101",
\t},
\t["logo.png"] = { id = "rbxassetid://7" },
}

return {
\tassets = assets
}
"""

JSON_REGISTRY = """\
{
  "ui": {
    "play.png": {"id": "rbxassetid://100", "width": 64, "height": 32, "highlightId": "rbxassetid://101"},
    "play-highlight.png": "rbxassetid://101"
  },
  "logo.png": {"id": "rbxassetid://7"}
}
"""

EXPECTED = Registry(
    [
        AssetEntry("ui/play.png", "rbxassetid://100", 64, 32, "rbxassetid://101"),
        AssetEntry("ui/play-highlight.png", "rbxassetid://101"),
        AssetEntry("logo.png", "rbxassetid://7"),
    ]
)


def parse_luau(text: str) -> Registry:
    return RegistryParser().parse(text, RegistryFormat.RUNTIME_MODULE)


def parse_json(text: str) -> Registry:
    return RegistryParser().parse(text, RegistryFormat.STRUCTURED_DATA)


class TestRegistryFormat:
    """Tests for format detection."""

    def test_from_path(self) -> None:
        """Test that only .json selects structured data."""
        assert RegistryFormat.from_path(Path("a.json")) is RegistryFormat.STRUCTURED_DATA
        assert RegistryFormat.from_path(Path("a.JSON")) is RegistryFormat.STRUCTURED_DATA
        assert RegistryFormat.from_path(Path("a.luau")) is RegistryFormat.RUNTIME_MODULE
        assert RegistryFormat.from_path(Path("a.lua")) is RegistryFormat.RUNTIME_MODULE


class TestFormatAssetId:
    """Tests for id normalization."""

    def test_values(self) -> None:
        """Test strings, ints, integral floats and rejected values."""
        assert format_asset_id("rbxassetid://1") == "rbxassetid://1"
        assert format_asset_id(123) == "123"
        assert format_asset_id(123.0) == "123"
        assert format_asset_id(True) is None
        assert format_asset_id(None) is None
        assert format_asset_id([1]) is None


class TestParseLuau:
    """Tests for the runtime-module front end."""

    def test_nested_registry(self) -> None:
        """Test keys, fields and first-seen order."""
        assert parse_luau(LUAU_REGISTRY) == EXPECTED

    def test_return_table_directly(self) -> None:
        """Test a module that returns the assets table inline."""
        registry = parse_luau('return { assets = { ["a.png"] = "1" } }')
        assert registry.keys() == ["a.png"]

    def test_return_assets_local(self) -> None:
        """Test ``return assets``."""
        registry = parse_luau('local assets = { ["a.png"] = "1" }\nreturn assets')
        assert registry.keys() == ["a.png"]

    def test_returned_name_resolves_other_local(self) -> None:
        """Test a returned table pointing at a differently named local."""
        registry = parse_luau('local data = { ["a.png"] = "1" }\nreturn { assets = data }')
        assert registry.keys() == ["a.png"]

    def test_numeric_id(self) -> None:
        """Test that numeric ids are normalized to text."""
        registry = parse_luau('local assets = { ["a.png"] = { id = 12345 } }')
        assert registry["a.png"].asset_id == "12345"

    def test_snake_case_highlight_alias(self) -> None:
        """Test the highlight_id spelling."""
        registry = parse_luau('local assets = { ["a.png"] = { id = "1", highlight_id = "2" } }')
        assert registry["a.png"].highlight_id == "2"

    def test_legacy_zero_dimensions(self) -> None:
        """Test that 0x0 is read as unmeasured."""
        registry = parse_luau('local assets = { ["a.png"] = { id = "1", width = 0, height = 0 } }')
        assert not registry["a.png"].has_dimensions

    def test_positional_fields_ignored(self) -> None:
        """Test that array items carry no asset."""
        registry = parse_luau('local assets = { "stray", ["a.png"] = "1" }')
        assert registry.keys() == ["a.png"]

    def test_comments_everywhere(self) -> None:
        """Test comments between fields."""
        text = 'local assets = {\n-- ui\n["a.png"] = --[[ id ]] "1", -- done\n}'
        assert parse_luau(text).keys() == ["a.png"]

    def test_empty_registry(self) -> None:
        """Test an empty table."""
        assert len(parse_luau("local assets = {}\nreturn { assets = assets }")) == 0

    def test_type_annotation(self) -> None:
        """Test a Luau-annotated local."""
        text = 'local assets: { [string]: any } = { ["a.png"] = "1" }\nreturn { assets = assets }'
        assert parse_luau(text).keys() == ["a.png"]

    def test_escaped_key(self) -> None:
        """Test that string escapes are decoded in keys and ids."""
        registry = parse_luau('local assets = { ["say \\"hi\\".png"] = "id\\tone" }')
        assert registry['say "hi".png'].asset_id == "id\tone"

    def test_category_named_id(self) -> None:
        """Test that a folder called ``id`` is a category, not an entry."""
        registry = parse_luau('local assets = { icons = { id = { ["badge.png"] = { id = "1" } } } }')
        assert registry.keys() == ["icons/id/badge.png"]

    def test_file_named_id_beside_others(self) -> None:
        """Test that a table mixing ``id`` with asset names is a category."""
        registry = parse_luau('local assets = { ui = { id = { id = "1" }, ["x.png"] = "2" } }')
        assert registry.keys() == ["ui/id", "ui/x.png"]


class TestParseLuauErrors:
    """Tests for malformed runtime modules."""

    def test_syntax_error(self) -> None:
        """Test that parser errors become MalformedRegistryError."""
        with pytest.raises(MalformedRegistryError) as exc_info:
            parse_luau('local assets = {\n["a.png"] = "1"\n["b.png"] = "2"\n}')
        assert exc_info.value.source == "<string>"

    def test_unsupported_expression(self) -> None:
        """Test that computed values are rejected."""
        with pytest.raises(MalformedRegistryError, match="unsupported expression"):
            parse_luau('local assets = { ["a.png"] = lookup("a") }')

    def test_invalid_string_escape(self) -> None:
        """Test that bad escapes in keys are reported."""
        with pytest.raises(MalformedRegistryError, match="escape"):
            parse_luau('local assets = { ["a\\256.png"] = "1" }')

    def test_missing_assets_table(self) -> None:
        """Test a module without an assets table."""
        with pytest.raises(MalformedRegistryError, match="assets table"):
            parse_luau("local other = {}\nreturn other")

    def test_assets_not_a_table(self) -> None:
        """Test a returned assets field that is not a table."""
        with pytest.raises(MalformedRegistryError, match="not a table"):
            parse_luau('return { assets = "nope" }')

    def test_duplicate_key(self) -> None:
        """Test that a repeated key is rejected."""
        with pytest.raises(DuplicateKeyError) as exc_info:
            parse_luau('local assets = { ui = { ["a.png"] = "1", ["a.png"] = "2" } }')
        assert exc_info.value.key == "ui/a.png"

    def test_key_with_separator(self) -> None:
        """Test that a segment may not contain a slash."""
        with pytest.raises(MalformedRegistryError, match="invalid key"):
            parse_luau('local assets = { ["ui/a.png"] = "1" }')

    def test_single_dimension(self) -> None:
        """Test that width without height is rejected."""
        with pytest.raises(MalformedRegistryError, match="both width and height"):
            parse_luau('local assets = { ["a.png"] = { id = "1", width = 5 } }')

    def test_fractional_dimension(self) -> None:
        """Test that non-integer dimensions are rejected."""
        with pytest.raises(MalformedRegistryError, match="not an integer"):
            parse_luau('local assets = { ["a.png"] = { id = "1", width = 1.5, height = 2 } }')

    def test_negative_dimension(self) -> None:
        """Test that negative dimensions are rejected."""
        with pytest.raises(MalformedRegistryError, match="negative"):
            parse_luau('local assets = { ["a.png"] = { id = "1", width = -1, height = 2 } }')

    def test_invalid_id(self) -> None:
        """Test that a boolean id is rejected."""
        with pytest.raises(MalformedRegistryError, match="invalid id"):
            parse_luau('local assets = { ["a.png"] = { id = true } }')

    def test_duplicate_field(self) -> None:
        """Test that an entry may not repeat a field."""
        with pytest.raises(MalformedRegistryError, match="duplicate field"):
            parse_luau('local assets = { ["a.png"] = { id = "1", id = "2" } }')


class TestParseJson:
    """Tests for the structured-data front end."""

    def test_matches_luau(self) -> None:
        """Test that both encodings of the same registry are equal."""
        assert parse_json(JSON_REGISTRY) == parse_luau(LUAU_REGISTRY)

    def test_duplicate_key(self) -> None:
        """Test that duplicate object keys are not silently merged."""
        with pytest.raises(DuplicateKeyError):
            parse_json('{"a.png": "1", "a.png": "2"}')

    def test_invalid_json(self) -> None:
        """Test that syntax errors carry a line number."""
        with pytest.raises(MalformedRegistryError) as exc_info:
            parse_json('{\n"a.png": }')
        assert exc_info.value.line == 2

    def test_root_must_be_object(self) -> None:
        """Test that an array root is rejected."""
        with pytest.raises(MalformedRegistryError, match="object"):
            parse_json("[]")

    def test_null_value_rejected(self) -> None:
        """Test that null is not an id."""
        with pytest.raises(MalformedRegistryError, match="unsupported value"):
            parse_json('{"a.png": null}')


class TestLoadRegistry:
    """Tests for reading registries from disk."""

    def test_detects_format(self, tmp_path: Path) -> None:
        """Test that the extension picks the parser."""
        luau = tmp_path / "assets.luau"
        luau.write_text(LUAU_REGISTRY, encoding="utf-8")
        data = tmp_path / "assets.json"
        data.write_text(JSON_REGISTRY, encoding="utf-8")

        assert load_registry(luau) == load_registry(data) == EXPECTED

    def test_error_names_file(self, tmp_path: Path) -> None:
        """Test that parse errors name the source file."""
        path = tmp_path / "broken.luau"
        path.write_text("local assets = {", encoding="utf-8")

        with pytest.raises(MalformedRegistryError) as exc_info:
            load_registry(path)
        assert exc_info.value.source == str(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file raises AssetIOError."""
        with pytest.raises(AssetIOError):
            load_registry(tmp_path / "missing.luau")


class TestParseDeclarations:
    """Tests for reading generated declaration modules."""

    DECLARATIONS = """\
export type AssetKey =
\t| "ui/play.png"
\t| "logo.png";

declare const assets: {
    ui: {
        "play.png": SizedAssetMeta & HighlightedAssetMeta;
    };
    "logo.png": AssetMeta;
};

export { assets };
"""

    def test_shape(self) -> None:
        """Test that nested keys are rebuilt with their types."""
        assert parse_declarations(self.DECLARATIONS) == [
            ("ui/play.png", "SizedAssetMeta & HighlightedAssetMeta"),
            ("logo.png", "AssetMeta"),
        ]

    def test_key_union(self) -> None:
        """Test that union members are read in order."""
        assert parse_declared_key_union(self.DECLARATIONS) == ["ui/play.png", "logo.png"]

    def test_missing_shape(self) -> None:
        """Test that text without the shape is rejected."""
        with pytest.raises(MalformedRegistryError):
            parse_declarations("export {};")

    def test_unterminated_shape(self) -> None:
        """Test that an unbalanced shape is rejected."""
        with pytest.raises(MalformedRegistryError, match="unterminated"):
            parse_declarations('declare const assets: {\n    "a.png": AssetMeta;\n')
