"""Registry reader for Luau modules and JSON documents.

This module provides the RegistryParser class, which decodes either
textual form of an asset registry into the same in-memory Registry.
Luau modules are parsed with luaparser and JSON documents with the
standard json module; both are reduced to the same ordered tables.

Both formats nest entries per path segment:

    local assets = {
        ui = {
            ["play.png"] = { id = "rbxassetid://1", width = 64, height = 64 },
        },
    }

    {"ui": {"play.png": {"id": "rbxassetid://1", "width": 64, "height": 64}}}

A bare string or number is an entry holding only an id. A table is an
entry when it has a non-table ``id`` field and no fields other than the
entry fields; any other table is a category.
"""

import json
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from luaparser import ast as lua_ast
from luaparser import astnodes
from luaparser.ast import SyntaxException

from assetsmith.domain import KEY_SEPARATOR, AssetEntry, Registry
from assetsmith.exceptions import AssetIOError, DuplicateKeyError, MalformedRegistryError
from assetsmith.io.luau import strip_type_annotations, unquote_string

ASSETS_NAME = "assets"

ENTRY_FIELDS = frozenset({"id", "width", "height", "highlightId", "highlight_id"})

_SYNTAX_ERROR_LINE = re.compile(r"\((\d+),\s*\d+\)")


class RegistryFormat(str, Enum):
    """Textual encodings of a registry."""

    RUNTIME_MODULE = "luau"
    STRUCTURED_DATA = "json"

    @classmethod
    def from_path(cls, path: Path) -> "RegistryFormat":
        """Pick the format from a file extension (.json, otherwise Luau)."""
        if path.suffix.lower() == ".json":
            return cls.STRUCTURED_DATA
        return cls.RUNTIME_MODULE


@dataclass
class _Table:
    """Ordered ``(key, value, line)`` fields of a table or JSON object.

    Keys are None for fields that carry no asset name (positional Luau
    fields, numeric keys).
    """

    fields: list[tuple[str | None, Any, int | None]] = field(default_factory=list)

    def value_of(self, key: str) -> Any:
        for field_key, value, _ in self.fields:
            if field_key == key:
                return value
        return None

    @property
    def is_entry(self) -> bool:
        """A table is an entry when it only holds entry fields and a scalar id."""
        names = [key for key, _, _ in self.fields if key is not None]
        return (
            "id" in names
            and not isinstance(self.value_of("id"), _Table)
            and all(name in ENTRY_FIELDS for name in names)
        )


def _json_pairs(pairs: list[tuple[str, Any]]) -> _Table:
    return _Table(fields=[(key, value, None) for key, value in pairs])


def _line_of(node: astnodes.Node) -> int | None:
    return getattr(node, "line", None)


def format_asset_id(value: Any) -> str | None:
    """Normalize an id literal to text (``123.0`` -> ``"123"``).

    Returns None for values that cannot be ids.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return None


class RegistryParser:
    """Decodes registry text into a Registry.

    Keys are flattened to ``/``-joined paths in first-seen order. Duplicate
    keys are an error, as are key segments containing ``/``.

    Example:
        parser = RegistryParser()
        registry = parser.parse(text, RegistryFormat.RUNTIME_MODULE)
    """

    def parse(
        self,
        source_text: str,
        fmt: RegistryFormat = RegistryFormat.RUNTIME_MODULE,
        source: str = "<string>",
    ) -> Registry:
        """Parse registry text.

        Args:
            source_text: Contents of a Luau module or JSON document
            fmt: Which encoding ``source_text`` uses
            source: Name used in error messages

        Returns:
            Registry with entries in first-seen order

        Raises:
            MalformedRegistryError: On syntax errors or invalid entries
            DuplicateKeyError: If a key appears twice
        """
        if fmt is RegistryFormat.STRUCTURED_DATA:
            root = self._load_json(source_text, source)
        else:
            root = self._load_luau(source_text, source)

        registry = Registry()
        self._flatten(root, [], registry, source)
        return registry

    def _load_json(self, text: str, source: str) -> _Table:
        try:
            root = json.loads(text, object_pairs_hook=_json_pairs)
        except json.JSONDecodeError as e:
            raise MalformedRegistryError(source, e.msg, e.lineno) from e

        if not isinstance(root, _Table):
            raise MalformedRegistryError(source, "expected an object at the root")
        return root

    def _load_luau(self, text: str, source: str) -> _Table:
        try:
            chunk = lua_ast.parse(strip_type_annotations(text))
        except SyntaxException as e:
            match = _SYNTAX_ERROR_LINE.search(str(e))
            raise MalformedRegistryError(source, str(e), int(match.group(1)) if match else None) from e

        local_values: dict[str, astnodes.Node | None] = {}
        returned: list[astnodes.Node] = []
        for statement in chunk.body.body:
            if isinstance(statement, astnodes.LocalAssign):
                values = statement.values or []
                for position, target in enumerate(statement.targets):
                    local_values.setdefault(target.id, values[position] if position < len(values) else None)
            elif isinstance(statement, astnodes.Return):
                values = statement.values
                returned = values if isinstance(values, list) else [values]

        local_assets = local_values.get(ASSETS_NAME)
        if isinstance(local_assets, astnodes.Table):
            return self._lua_table(local_assets, source)

        for value in returned:
            if isinstance(value, astnodes.Name) and value.id == ASSETS_NAME:
                break
            if not isinstance(value, astnodes.Table):
                continue
            for table_field in value.fields:
                if self._lua_key(table_field, source) != ASSETS_NAME:
                    continue
                inner = table_field.value
                if isinstance(inner, astnodes.Name):
                    inner = local_values.get(inner.id)
                if isinstance(inner, astnodes.Table):
                    return self._lua_table(inner, source)
                raise MalformedRegistryError(source, "'assets' is not a table", _line_of(table_field))

        raise MalformedRegistryError(source, "could not find an assets table")

    def _lua_table(self, node: astnodes.Table, source: str) -> _Table:
        table = _Table()
        for table_field in node.fields:
            key = self._lua_key(table_field, source)
            value = self._lua_value(table_field.value, source) if key is not None else None
            table.fields.append((key, value, _line_of(table_field)))
        return table

    def _lua_key(self, table_field: astnodes.Field, source: str) -> str | None:
        key = table_field.key
        if isinstance(key, astnodes.Name) and not table_field.between_brackets:
            return key.id
        if isinstance(key, astnodes.String):
            return self._lua_string(key, source)
        # Positional and numeric keys carry no asset name
        return None

    def _lua_value(self, node: astnodes.Node, source: str) -> Any:
        if isinstance(node, astnodes.Table):
            return self._lua_table(node, source)
        if isinstance(node, astnodes.String):
            return self._lua_string(node, source)
        if isinstance(node, astnodes.Number):
            return node.n
        if isinstance(node, astnodes.UMinusOp) and isinstance(node.operand, astnodes.Number):
            return -node.operand.n
        if isinstance(node, astnodes.TrueExpr):
            return True
        if isinstance(node, astnodes.FalseExpr):
            return False
        if isinstance(node, astnodes.Nil):
            return None
        raise MalformedRegistryError(source, f"unsupported expression ({type(node).__name__})", _line_of(node))

    @staticmethod
    def _lua_string(node: astnodes.String, source: str) -> str:
        if node.delimiter == astnodes.StringDelimiter.DOUBLE_SQUARE:
            return node.s
        try:
            return unquote_string(node.s)
        except ValueError as e:
            raise MalformedRegistryError(source, str(e), _line_of(node)) from e

    def _flatten(
        self,
        table: _Table,
        prefix: list[str],
        registry: Registry,
        source: str,
    ) -> None:
        seen: set[str] = set()
        for key, value, line in table.fields:
            if key is None:
                # Positional fields carry no asset name
                continue

            segment = format_asset_id(key)
            if segment is None or segment == "" or KEY_SEPARATOR in segment:
                raise MalformedRegistryError(source, f"invalid key {key!r}", line)

            path = [*prefix, segment]
            full_key = KEY_SEPARATOR.join(path)
            if segment in seen:
                raise DuplicateKeyError(full_key, source)
            seen.add(segment)

            if isinstance(value, _Table) and not value.is_entry:
                self._flatten(value, path, registry, source)
                continue

            entry = self._entry(full_key, value, source, line)
            try:
                registry.add(entry)
            except DuplicateKeyError as e:
                raise DuplicateKeyError(full_key, source) from e

    def _entry(self, key: str, value: Any, source: str, line: int | None) -> AssetEntry:
        if not isinstance(value, _Table):
            asset_id = format_asset_id(value)
            if asset_id is None:
                raise MalformedRegistryError(source, f"unsupported value for '{key}'", line)
            return AssetEntry(key=key, asset_id=asset_id)

        fields: dict[str, Any] = {}
        for name, field_value, field_line in value.fields:
            if name is None:
                continue
            if name in fields:
                raise MalformedRegistryError(
                    source, f"duplicate field '{name}' in '{key}'", field_line or line
                )
            fields[name] = field_value

        asset_id = format_asset_id(fields["id"])
        if asset_id is None:
            raise MalformedRegistryError(source, f"invalid id for '{key}'", line)

        width = self._dimension(fields.get("width"), key, "width", source, line)
        height = self._dimension(fields.get("height"), key, "height", source, line)
        if (width is None) != (height is None):
            raise MalformedRegistryError(
                source, f"'{key}' must have both width and height or neither", line
            )

        raw_highlight = fields.get("highlightId", fields.get("highlight_id"))
        highlight_id = None
        if raw_highlight is not None:
            highlight_id = format_asset_id(raw_highlight)
            if highlight_id is None:
                raise MalformedRegistryError(source, f"invalid highlightId for '{key}'", line)

        return AssetEntry(
            key=key,
            asset_id=asset_id,
            width=width,
            height=height,
            highlight_id=highlight_id,
        )

    @staticmethod
    def _dimension(value: Any, key: str, name: str, source: str, line: int | None) -> int | None:
        if value is None:
            return None
        if isinstance(value, str) and value.isdigit():
            value = int(value)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise MalformedRegistryError(source, f"{name} of '{key}' is not a number", line)
        if isinstance(value, float) and not value.is_integer():
            raise MalformedRegistryError(source, f"{name} of '{key}' is not an integer", line)
        number = int(value)
        if number < 0:
            raise MalformedRegistryError(source, f"{name} of '{key}' is negative", line)
        # Unreadable images used to be recorded as 0x0
        return number or None


def load_registry(path: Path, fmt: RegistryFormat | None = None) -> Registry:
    """Read and parse a registry file.

    Args:
        path: Path to a .luau/.lua module or a .json document
        fmt: Override the format detected from the extension

    Raises:
        AssetIOError: If the file cannot be read
        MalformedRegistryError: On syntax errors or invalid entries
        DuplicateKeyError: If a key appears twice
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise AssetIOError(path, e.strerror or str(e)) from e

    return RegistryParser().parse(text, fmt or RegistryFormat.from_path(path), source=str(path))


_KEY_UNION_START = re.compile(r"^export type AssetKey =", re.MULTILINE)
_STRING_LITERAL = re.compile(r'"(?:[^"\\]|\\.)*"')
_DECLARED_FIELD = re.compile(r'^\s*("(?:[^"\\]|\\.)*"|[A-Za-z_$][A-Za-z0-9_$]*): (.+?);?$')


def parse_declarations(text: str, source: str = "<string>") -> list[tuple[str, str]]:
    """Recover ``(key, type_name)`` pairs from a generated declaration module.

    Walks the nested ``declare const assets`` shape in order.

    Raises:
        MalformedRegistryError: If the shape cannot be found or is unbalanced
    """
    lines = text.splitlines()
    try:
        start = next(i for i, line in enumerate(lines) if line.startswith("declare const assets: {"))
    except StopIteration:
        raise MalformedRegistryError(source, "could not find 'declare const assets'") from None

    entries: list[tuple[str, str]] = []
    stack: list[str] = []
    for number, line in enumerate(lines[start + 1 :], start=start + 2):
        stripped = line.strip()
        if stripped in ("}", "};"):
            if not stack:
                return entries
            stack.pop()
            continue

        match = _DECLARED_FIELD.match(line)
        if match is None:
            raise MalformedRegistryError(source, f"unexpected line {stripped!r}", number)
        raw_key, type_text = match.groups()
        name = json.loads(raw_key) if raw_key.startswith('"') else raw_key
        if type_text == "{":
            stack.append(name)
        else:
            entries.append((KEY_SEPARATOR.join([*stack, name]), type_text.rstrip(";")))

    raise MalformedRegistryError(source, "unterminated 'declare const assets'")


def parse_declared_key_union(text: str) -> list[str]:
    """Recover the members of ``export type AssetKey`` in order."""
    match = _KEY_UNION_START.search(text)
    if match is None:
        return []
    end = text.find(";", match.end())
    body = text[match.end() : end if end >= 0 else len(text)]
    return [json.loads(literal) for literal in _STRING_LITERAL.findall(body)]
