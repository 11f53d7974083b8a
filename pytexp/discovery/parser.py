"""Test-entity extraction from Python source via Tree-sitter.

Only top-level statements are inspected. Test functions become Function
entities of the module; test classes contribute themselves plus their test
methods, and are dropped entirely when they hold no test methods.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from ..errors import EntityParseError
from .types import DiscoveryRules, EntityKind, ParsedEntity

PYTHON_LANGUAGE = "python"
MISSING_PARSER_ERROR = (
    "Tree-sitter parser package not found. Install tree-sitter-language-pack or tree-sitter-languages."
)
FUNCTION_NODE_TYPE = "function_definition"
CLASS_NODE_TYPE = "class_definition"
DECORATED_NODE_TYPE = "decorated_definition"


@lru_cache(maxsize=4)
def _load_parser(language_name: str):
    """Load a Tree-sitter parser using supported provider packages.

    Tries ``tree_sitter_language_pack`` first, then ``tree_sitter_languages``.
    Returns ``(parser, error_message)``.
    """
    errors: list[str] = []

    try:
        from tree_sitter_language_pack import get_parser

        return get_parser(language_name), None
    except ModuleNotFoundError:
        pass
    except Exception as exc:
        errors.append(f"Failed to load Tree-sitter parser for {language_name}: {exc}")

    try:
        from tree_sitter_languages import get_parser

        return get_parser(language_name), None
    except ModuleNotFoundError:
        pass
    except Exception as exc:
        errors.append(f"Failed to load Tree-sitter parser for {language_name}: {exc}")

    if errors:
        return None, errors[0]

    return None, MISSING_PARSER_ERROR


def _node_text(source_bytes: bytes, node) -> str:
    """Decode source slice covered by a Tree-sitter node."""
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _unwrap_definition(node):
    """Return the ``def``/``class`` node behind optional decorators."""
    if node.type == DECORATED_NODE_TYPE:
        definition = node.child_by_field_name("definition")
        if definition is not None:
            return definition
    return node


def _definition_name(source_bytes: bytes, node) -> str:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return ""
    return _node_text(source_bytes, name_node)


def _line_of(node) -> int:
    return int(node.start_point[0]) + 1


def _first_error_line(node) -> int | None:
    """Return the 1-based line of the first error or missing node, if any."""
    if node.type == "ERROR" or node.is_missing:
        return _line_of(node)
    if not node.has_error:
        return None
    for child in node.children:
        line = _first_error_line(child)
        if line is not None:
            return line
    return _line_of(node)


def _class_entities(
    source_bytes: bytes,
    class_node,
    class_name: str,
    rules: DiscoveryRules,
) -> list[ParsedEntity]:
    body = class_node.child_by_field_name("body")
    if body is None:
        return []
    methods: list[ParsedEntity] = []
    for statement in body.named_children:
        definition = _unwrap_definition(statement)
        if definition.type != FUNCTION_NODE_TYPE:
            continue
        name = _definition_name(source_bytes, definition)
        if rules.is_test_function_name(name):
            methods.append(
                ParsedEntity(
                    name=name,
                    kind=EntityKind.FUNCTION,
                    source_line=_line_of(definition),
                    class_name=class_name,
                )
            )
    if not methods:
        return []
    class_entity = ParsedEntity(
        name=class_name,
        kind=EntityKind.CLASS,
        source_line=_line_of(class_node),
    )
    return [class_entity, *methods]


def parse_source(
    source: str,
    path: Path | str = "<source>",
    rules: DiscoveryRules | None = None,
) -> list[ParsedEntity]:
    """Parse ``source`` and return its test entities in declaration order.

    Raises ``EntityParseError`` when no parser is available or when the source
    does not parse cleanly.
    """
    rules = rules or DiscoveryRules()
    parser, parser_error = _load_parser(PYTHON_LANGUAGE)
    if parser is None:
        raise EntityParseError(path, parser_error or MISSING_PARSER_ERROR)

    source_bytes = source.encode("utf-8", errors="replace")
    try:
        tree = parser.parse(source_bytes)
    except Exception as exc:
        raise EntityParseError(path, f"Tree-sitter parse failed: {exc}") from exc

    root = tree.root_node
    error_line = _first_error_line(root)
    if error_line is not None:
        raise EntityParseError(path, "invalid syntax", line=error_line)

    entities: list[ParsedEntity] = []
    for statement in root.named_children:
        definition = _unwrap_definition(statement)
        if definition.type == FUNCTION_NODE_TYPE:
            name = _definition_name(source_bytes, definition)
            if rules.is_test_function_name(name):
                entities.append(
                    ParsedEntity(name=name, kind=EntityKind.FUNCTION, source_line=_line_of(definition))
                )
        elif definition.type == CLASS_NODE_TYPE:
            class_name = _definition_name(source_bytes, definition)
            if rules.is_test_class_name(class_name):
                entities.extend(_class_entities(source_bytes, definition, class_name, rules))
    return entities


def read_source(path: Path) -> str:
    """Read a source file as UTF-8, tolerating a BOM and undecodable bytes."""
    return path.read_bytes().decode("utf-8-sig", errors="replace")


def parse_file(path: Path, rules: DiscoveryRules | None = None) -> list[ParsedEntity]:
    """Read and parse one file; read failures surface as ``EntityParseError``."""
    try:
        source = read_source(path)
    except OSError as exc:
        raise EntityParseError(path, f"cannot read file: {exc}") from exc
    return parse_source(source, path=path, rules=rules)
