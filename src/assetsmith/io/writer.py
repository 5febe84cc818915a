"""Registry writer for the runtime and type-declaration modules.

This module provides the RegistryEmitter class, which renders one
Registry as a Luau runtime module and a TypeScript declaration module.
Both are pure functions of the registry, so an unchanged registry always
produces byte-identical files.
"""

import json
import re
from pathlib import Path
from typing import NamedTuple, Union

from assetsmith.domain import KEY_SEPARATOR, AssetEntry, Registry
from assetsmith.exceptions import AssetIOError, DuplicateKeyError
from assetsmith.io.luau import is_identifier, quote_string
from assetsmith.io.reader import (
    RegistryFormat,
    RegistryParser,
    parse_declarations,
    parse_declared_key_union,
)

GENERATOR_NAME = "assetsmith"

# Declaration type names, chosen by which optional fields an entry carries
BASE_TYPE = "AssetMeta"
SIZED_TYPE = "SizedAssetMeta"
HIGHLIGHTED_TYPE = "HighlightedAssetMeta"

_Tree = dict[str, Union["_Tree", AssetEntry]]

_TS_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")


class EmittedModules(NamedTuple):
    """The two generated modules."""

    runtime: str
    declarations: str


def declared_type_for(entry: AssetEntry) -> str:
    """Return the declaration type that matches an entry's fields."""
    if entry.has_dimensions and entry.highlight_id is not None:
        return f"{SIZED_TYPE} & {HIGHLIGHTED_TYPE}"
    if entry.has_dimensions:
        return SIZED_TYPE
    if entry.highlight_id is not None:
        return HIGHLIGHTED_TYPE
    return BASE_TYPE


def _build_tree(registry: Registry) -> _Tree:
    """Nest flat keys per segment, keeping first-seen order."""
    root: _Tree = {}
    for entry in registry:
        node = root
        *categories, name = entry.segments
        for position, segment in enumerate(categories):
            child = node.setdefault(segment, {})
            if isinstance(child, AssetEntry):
                raise DuplicateKeyError(KEY_SEPARATOR.join(categories[: position + 1]))
            node = child
        if name in node:
            raise DuplicateKeyError(entry.key)
        node[name] = entry
    return root


class RegistryEmitter:
    """Serializes a Registry into its runtime and declaration modules.

    Example:
        modules = RegistryEmitter().emit(registry)
        Path("assets.luau").write_text(modules.runtime)
    """

    def __init__(self, generator_name: str = GENERATOR_NAME) -> None:
        self.generator_name = generator_name

    def emit(self, registry: Registry) -> EmittedModules:
        """Render both modules from the same nesting of the registry.

        Raises:
            DuplicateKeyError: If one key is both an entry and a category
        """
        tree = _build_tree(registry)
        return EmittedModules(
            runtime=self._runtime_module(tree),
            declarations=self._declaration_module(tree),
        )

    def _runtime_module(self, tree: _Tree) -> str:
        lines = [
            f"-- This file is automatically @generated by {self.generator_name}.",
            "-- DO NOT EDIT MANUALLY.",
            "",
            "local assets = {",
        ]
        self._luau_table(tree, 1, lines)
        lines += [
            "}",
            "",
            "return {",
            "\tassets = assets",
            "}",
        ]
        return "\n".join(lines) + "\n"

    def _luau_table(self, tree: _Tree, depth: int, lines: list[str]) -> None:
        indent = "\t" * depth
        inner = "\t" * (depth + 1)
        for name, node in tree.items():
            key = name if is_identifier(name) else f"[{quote_string(name)}]"
            lines.append(f"{indent}{key} = {{")
            if isinstance(node, AssetEntry):
                lines.append(f"{inner}id = {quote_string(node.asset_id)},")
                if node.has_dimensions:
                    lines.append(f"{inner}width = {node.width},")
                    lines.append(f"{inner}height = {node.height},")
                if node.highlight_id is not None:
                    lines.append(f"{inner}highlightId = {quote_string(node.highlight_id)},")
            else:
                self._luau_table(node, depth + 1, lines)
            lines.append(f"{indent}}},")

    def _declaration_module(self, tree: _Tree) -> str:
        keys = _tree_keys(tree)
        lines = [
            f"// This file is automatically @generated by {self.generator_name}.",
            "// DO NOT EDIT MANUALLY.",
            "",
            f"export interface {BASE_TYPE} {{",
            "\tid: string;",
            "\twidth?: number;",
            "\theight?: number;",
            "\thighlightId?: string;",
            "}",
            "",
            f"export interface {SIZED_TYPE} extends {BASE_TYPE} {{",
            "\twidth: number;",
            "\theight: number;",
            "}",
            "",
            f"export interface {HIGHLIGHTED_TYPE} extends {BASE_TYPE} {{",
            "\thighlightId: string;",
            "}",
            "",
        ]
        if keys:
            lines.append("export type AssetKey =")
            lines += [f"\t| {_ts_string(key)}" for key in keys]
            lines[-1] += ";"
        else:
            lines.append("export type AssetKey = never;")
        lines += ["", "declare const assets: {"]
        self._ts_shape(tree, 1, lines)
        lines += ["};", "", "export { assets };"]
        return "\n".join(lines) + "\n"

    def _ts_shape(self, tree: _Tree, depth: int, lines: list[str]) -> None:
        indent = "    " * depth
        for name, node in tree.items():
            key = name if _is_ts_identifier(name) else _ts_string(name)
            if isinstance(node, AssetEntry):
                lines.append(f"{indent}{key}: {declared_type_for(node)};")
            else:
                lines.append(f"{indent}{key}: {{")
                self._ts_shape(node, depth + 1, lines)
                lines.append(f"{indent}}};")


def _ts_string(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _is_ts_identifier(text: str) -> bool:
    return _TS_IDENTIFIER.fullmatch(text) is not None


def write_modules(
    modules: EmittedModules,
    runtime_path: Path,
    declarations_path: Path,
) -> list[Path]:
    """Write both modules, skipping files whose contents are unchanged.

    Returns:
        Paths that were actually written

    Raises:
        AssetIOError: If a file cannot be written
    """
    written: list[Path] = []
    for path, text in ((runtime_path, modules.runtime), (declarations_path, modules.declarations)):
        try:
            if path.is_file() and path.read_text(encoding="utf-8") == text:
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8", newline="\n")
        except OSError as e:
            raise AssetIOError(path, e.strerror or str(e)) from e
        written.append(path)
    return written


def verify_consistency(runtime_text: str, declarations_text: str) -> list[str]:
    """Compare a runtime module against a declaration module.

    Checks that both describe the same keys in the same order and that each
    declared type matches the fields the runtime entry carries.

    Returns:
        Human-readable problems (empty when consistent)

    Raises:
        RegistryError: If either text cannot be parsed
    """
    registry = RegistryParser().parse(runtime_text, RegistryFormat.RUNTIME_MODULE, source="runtime module")
    declared = parse_declarations(declarations_text, source="declaration module")
    union = parse_declared_key_union(declarations_text)

    problems: list[str] = []
    runtime_keys = registry.keys()
    declared_keys = [key for key, _ in declared]

    for key in runtime_keys:
        if key not in declared_keys:
            problems.append(f"'{key}' is missing from the declarations")
    for key in declared_keys:
        if key not in registry:
            problems.append(f"'{key}' is declared but not in the runtime module")
    if union != declared_keys:
        problems.append("AssetKey union does not match the declared shape")
    if not problems and runtime_keys != declared_keys:
        problems.append("keys appear in a different order")

    for key, type_name in declared:
        entry = registry.get(key)
        if entry is not None and declared_type_for(entry) != type_name:
            problems.append(f"'{key}' is declared as {type_name} but carries {declared_type_for(entry)}")

    return problems


def _tree_keys(tree: _Tree) -> list[str]:
    """Entry keys in the order the nested modules list them."""
    ordered: list[str] = []
    for node in tree.values():
        if isinstance(node, AssetEntry):
            ordered.append(node.key)
        else:
            ordered.extend(_tree_keys(node))
    return ordered
