"""Source parser — tree-sitter front end for JS/TS/JSX/TSX files.

``.ts`` files use the TypeScript grammar; everything else that may contain
JSX (``.tsx``, ``.jsx``, ``.js`` ...) uses the TSX grammar. A tree that
contains any ERROR or MISSING node is treated as unparseable: callers get
``None`` and a warning is logged, never an exception.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import structlog
import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, Tree

log = structlog.get_logger("archbase_cli.analyzers")

_TYPESCRIPT_LANGUAGE = Language(tstypescript.language_typescript())
_TSX_LANGUAGE = Language(tstypescript.language_tsx())

_TSX_SUFFIXES = {".tsx", ".jsx", ".js", ".mjs", ".cjs"}
SOURCE_SUFFIXES = frozenset({".ts", ".mts", ".cts"} | _TSX_SUFFIXES)


def language_for(suffix: str) -> Language:
    if suffix.lower() in (".ts", ".mts", ".cts"):
        return _TYPESCRIPT_LANGUAGE
    return _TSX_LANGUAGE


class SourceParser:
    """Parse source text into a tree-sitter tree.

    A new ``Parser`` is created per call so one instance can be shared by
    worker threads.
    """

    def parse_tree(self, source: str | bytes, suffix: str = ".tsx") -> Tree:
        """Parse without the error check; the tree may contain ERROR nodes."""
        data = source.encode("utf-8") if isinstance(source, str) else source
        return Parser(language_for(suffix)).parse(data)

    def parse(self, source: str | bytes, suffix: str = ".tsx", origin: str = "<string>") -> Tree | None:
        tree = self.parse_tree(source, suffix)
        if tree.root_node.has_error:
            log.warning("parser.syntax_error", file=origin)
            return None
        return tree

    def parse_file(self, path: str | Path) -> tuple[str, Tree] | None:
        """Read and parse *path*. Returns ``(text, tree)`` or ``None``."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            log.warning("parser.read_failed", file=str(path), error=str(exc))
            return None
        tree = self.parse(text, path.suffix, origin=str(path))
        if tree is None:
            return None
        return text, tree


# ── tree helpers ─────────────────────────────────────────────────────────


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal (document order), iterative."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def first_error(root: Node) -> Node | None:
    """First ERROR or MISSING node in document order."""
    if not root.has_error:
        return None
    for node in walk(root):
        if node.type == "ERROR" or node.is_missing:
            return node
    return None


def node_text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def string_value(node: Node | None) -> str:
    """Literal value of a ``string`` node (quotes stripped)."""
    text = node_text(node)
    if len(text) >= 2 and text[0] in "'\"`" and text[-1] == text[0]:
        return text[1:-1]
    return text


def start_position(node: Node) -> tuple[int, int]:
    """(1-based line, 0-based column)."""
    return node.start_point[0] + 1, node.start_point[1]


def jsx_elements(root: Node) -> Iterator[tuple[Node, Node]]:
    """Yield ``(element, opening_tag)`` for paired and self-closing JSX elements."""
    for node in walk(root):
        if node.type == "jsx_element":
            opening = node.child_by_field_name("open_tag")
            if opening is None:
                opening = next(
                    (c for c in node.named_children if c.type == "jsx_opening_element"), None
                )
            if opening is not None:
                yield node, opening
        elif node.type == "jsx_self_closing_element":
            yield node, node


def jsx_name(opening: Node) -> str | None:
    """Plain identifier name of a JSX tag; ``None`` for member/namespaced names."""
    name = opening.child_by_field_name("name")
    if name is None or name.type != "identifier":
        return None
    return node_text(name)


def jsx_attributes(opening: Node) -> Iterator[tuple[str, Node | None]]:
    """Yield ``(prop_name, value_node)``; value is ``None`` for bare boolean props."""
    for child in opening.named_children:
        if child.type != "jsx_attribute":
            continue
        parts = child.named_children
        if not parts or parts[0].type != "property_identifier":
            continue
        value = parts[1] if len(parts) > 1 else None
        yield node_text(parts[0]), value


def jsx_expression_inner(value: Node) -> Node | None:
    """The expression inside ``{...}``, if any."""
    inner = value.named_children
    return inner[0] if inner else None
