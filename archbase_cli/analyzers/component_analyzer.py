"""Component analyzer — one-pass fact extraction from React component files.

Collected per file:
    imports        every import declaration (Archbase ones also as dependencies)
    components     function declarations and arrow/function expressions bound
                   to an uppercase name; the last one in the file names the result
    props          destructured first parameter and ``*Props`` interface members
    dataSource     ``dataSource.<member>`` accesses (drives the version heuristic)
    hooks          calls to identifiers starting with ``use`` (duplicates kept)
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from tree_sitter import Node, Tree

from archbase_cli.analyzers.files import find_files
from archbase_cli.analyzers.heuristics import (
    classify_complexity,
    classify_data_source_member,
    complexity_score,
)
from archbase_cli.analyzers.source_parser import SourceParser, node_text, string_value, walk
from archbase_cli.models.component import (
    ComponentAnalysis,
    DataSourceUsage,
    DataSourceVersion,
    ImportInfo,
    PropDefinition,
)

log = structlog.get_logger("archbase_cli.analyzers")

DEFAULT_PATTERN = "**/*.{ts,tsx}"

_DEPENDENCY_MARKERS = ("@archbase", "./datasource")
_FUNCTION_VALUES = {"arrow_function", "function_expression", "function"}
_KEYWORD_TYPES = {"string", "number", "boolean", "any"}


def is_component_name(name: str) -> bool:
    return bool(name) and "A" <= name[0] <= "Z"


@dataclass
class ComponentFacts:
    """Mutable accumulator filled during the tree walk."""

    name: str = ""
    props: list[PropDefinition] = field(default_factory=list)
    imports: list[ImportInfo] = field(default_factory=list)
    has_data_source: bool = False
    version: DataSourceVersion = "unknown"
    fields: list[str] = field(default_factory=list)
    hooks: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)


class ComponentFactExtractor:
    """Walks a tree once and dispatches on node type."""

    def extract(self, tree: Tree) -> ComponentFacts:
        facts = ComponentFacts()
        handlers = {
            "import_statement": self._on_import,
            "function_declaration": self._on_function_declaration,
            "function_expression": self._on_exported_function,
            "function": self._on_exported_function,
            "variable_declarator": self._on_variable_declarator,
            "interface_declaration": self._on_interface,
            "member_expression": self._on_member_expression,
            "call_expression": self._on_call,
        }
        for node in walk(tree.root_node):
            handler = handlers.get(node.type)
            if handler is not None and node.is_named:
                handler(node, facts)
        return facts

    # ── imports ──────────────────────────────────────────────────────────

    def _on_import(self, node: Node, facts: ComponentFacts) -> None:
        source = string_value(node.child_by_field_name("source"))
        specifiers: list[str] = []
        is_default = False
        clause = next((c for c in node.named_children if c.type == "import_clause"), None)
        if clause is not None:
            for child in clause.named_children:
                if child.type == "identifier":
                    specifiers.append(node_text(child))
                    is_default = True
                elif child.type == "named_imports":
                    for spec in child.named_children:
                        if spec.type != "import_specifier":
                            continue
                        imported = spec.child_by_field_name("name")
                        if imported is not None:
                            specifiers.append(string_value(imported))

        facts.imports.append(ImportInfo(source=source, specifiers=specifiers, is_default=is_default))
        if any(marker in source for marker in _DEPENDENCY_MARKERS):
            facts.dependencies.append(source)

    # ── components ───────────────────────────────────────────────────────

    def _on_function_declaration(self, node: Node, facts: ComponentFacts) -> None:
        name = node_text(node.child_by_field_name("name"))
        if is_component_name(name):
            facts.name = name
            self._props_from_parameters(node, facts)

    def _on_exported_function(self, node: Node, facts: ComponentFacts) -> None:
        # `export default function Name() {}` can surface as a named function expression
        if node.parent is not None and node.parent.type == "export_statement":
            self._on_function_declaration(node, facts)

    def _on_variable_declarator(self, node: Node, facts: ComponentFacts) -> None:
        value = node.child_by_field_name("value")
        target = node.child_by_field_name("name")
        if value is None or value.type not in _FUNCTION_VALUES:
            return
        if target is None or target.type != "identifier":
            return
        name = node_text(target)
        if is_component_name(name):
            facts.name = name
            self._props_from_parameters(value, facts)

    def _props_from_parameters(self, function: Node, facts: ComponentFacts) -> None:
        params = function.child_by_field_name("parameters")
        if params is None:
            return
        first = next(
            (p for p in params.named_children if p.type in ("required_parameter", "optional_parameter")),
            None,
        )
        if first is None:
            return
        pattern = first.child_by_field_name("pattern")
        if pattern is None or pattern.type != "object_pattern":
            return
        for prop in pattern.named_children:
            name = _destructured_name(prop)
            if name:
                facts.props.append(PropDefinition(name=name, type="unknown", required=False))

    # ── interfaces ───────────────────────────────────────────────────────

    def _on_interface(self, node: Node, facts: ComponentFacts) -> None:
        if "Props" not in node_text(node.child_by_field_name("name")):
            return
        body = node.child_by_field_name("body")
        if body is None:
            return
        for member in body.named_children:
            if member.type != "property_signature":
                continue
            key = member.child_by_field_name("name")
            if key is None or key.type != "property_identifier":
                continue
            optional = any(c.type == "?" for c in member.children)
            annotation = member.child_by_field_name("type")
            type_node = annotation.named_children[0] if annotation and annotation.named_children else None
            prop = PropDefinition(name=node_text(key), type=type_string(type_node), required=not optional)
            facts.props.append(prop)

            if prop.name in ("dataSource", "dataField"):
                facts.has_data_source = True
                if prop.name == "dataField":
                    facts.fields.append(prop.name)

    # ── dataSource and hooks ─────────────────────────────────────────────

    def _on_member_expression(self, node: Node, facts: ComponentFacts) -> None:
        obj = node.child_by_field_name("object")
        if obj is None or obj.type != "identifier" or node_text(obj) != "dataSource":
            return
        facts.has_data_source = True
        prop = node.child_by_field_name("property")
        if prop is not None and prop.type == "property_identifier":
            facts.version = classify_data_source_member(facts.version, node_text(prop))

    def _on_call(self, node: Node, facts: ComponentFacts) -> None:
        callee = node.child_by_field_name("function")
        if callee is not None and callee.type == "identifier":
            name = node_text(callee)
            if name.startswith("use"):
                facts.hooks.append(name)


def _destructured_name(prop: Node) -> str:
    if prop.type == "shorthand_property_identifier_pattern":
        return node_text(prop)
    if prop.type == "pair_pattern":
        key = prop.child_by_field_name("key")
        if key is not None and key.type == "property_identifier":
            return node_text(key)
    if prop.type == "object_assignment_pattern":
        left = prop.child_by_field_name("left")
        if left is not None and left.type == "shorthand_property_identifier_pattern":
            return node_text(left)
    return ""


def _union_members(node: Node) -> list[Node]:
    members: list[Node] = []
    for child in node.named_children:
        if child.type == "union_type":
            members.extend(_union_members(child))
        else:
            members.append(child)
    return members


def type_string(node: Node | None) -> str:
    """Render a type annotation the way props are reported."""
    if node is None:
        return "unknown"
    if node.type == "predefined_type":
        text = node_text(node)
        return text if text in _KEYWORD_TYPES else "unknown"
    if node.type == "type_identifier":
        return node_text(node)
    if node.type == "generic_type":
        name = node.child_by_field_name("name")
        if name is not None and name.type == "type_identifier":
            return node_text(name)
        return "unknown"
    if node.type == "union_type":
        return " | ".join(type_string(m) for m in _union_members(node))
    return "unknown"


class ComponentAnalyzer:
    """read -> parse -> extract -> classify, per file."""

    def __init__(self, parser: SourceParser | None = None, workers: int = 1) -> None:
        self._parser = parser or SourceParser()
        self._extractor = ComponentFactExtractor()
        self._workers = max(1, workers)

    def analyze_source(self, source: str, file_path: str, suffix: str | None = None) -> ComponentAnalysis | None:
        tree = self._parser.parse(source, suffix or Path(file_path).suffix or ".tsx", origin=file_path)
        if tree is None:
            return None
        return self._build(self._extractor.extract(tree), file_path)

    def analyze_file(self, file_path: str | Path) -> ComponentAnalysis | None:
        parsed = self._parser.parse_file(file_path)
        if parsed is None:
            log.warning("component.analysis_skipped", file=str(file_path))
            return None
        _, tree = parsed
        return self._build(self._extractor.extract(tree), str(file_path))

    def analyze_directory(self, dir_path: str | Path, pattern: str = DEFAULT_PATTERN) -> list[ComponentAnalysis]:
        """Analyze every matching file; keep only files that declare a component."""
        files = find_files(dir_path, [pattern])
        log.info("component.directory_scan", root=str(dir_path), files=len(files), workers=self._workers)
        if self._workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=self._workers) as executor:
                results = list(executor.map(self.analyze_file, files))
        else:
            results = [self.analyze_file(f) for f in files]
        return [r for r in results if r is not None and r.name]

    @staticmethod
    def _build(facts: ComponentFacts, file_path: str) -> ComponentAnalysis:
        score = complexity_score(
            props=len(facts.props),
            hooks=len(facts.hooks),
            dependencies=len(facts.dependencies),
            has_data_source=facts.has_data_source,
        )
        return ComponentAnalysis(
            name=facts.name,
            file_path=file_path,
            props=facts.props,
            imports=facts.imports,
            data_source_usage=DataSourceUsage(
                has_data_source=facts.has_data_source,
                version=facts.version,
                fields=facts.fields,
            ),
            complexity=classify_complexity(score),
            hooks=facts.hooks,
            dependencies=facts.dependencies,
        )
