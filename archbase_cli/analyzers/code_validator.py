"""Code validator — syntax, import and structure checks for TS/TSX files.

One tree-sitter walk per file collects the facts the rules need. Rules are
plain functions appending errors or warnings to the result; a file is valid
when no error-severity issue was recorded. A syntax error stops the rules
and leaves the metrics empty.

Project validation adds package.json and tsconfig.json checks and merges
the results of every source file under ``src/``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import structlog
from tree_sitter import Node

from archbase_cli.analyzers.component_analyzer import is_component_name
from archbase_cli.analyzers.files import find_files
from archbase_cli.analyzers.source_parser import (
    SourceParser,
    first_error,
    jsx_elements,
    jsx_name,
    node_text,
    start_position,
    string_value,
    walk,
)
from archbase_cli.exceptions import AnalyzerError
from archbase_cli.models.validation import (
    CodeMetrics,
    ValidationIssue,
    ValidationResult,
    ValidationWarning,
)

log = structlog.get_logger("archbase_cli.analyzers")

SOURCE_PATTERN = "**/*.{ts,tsx}"
DEFAULT_IGNORE = ["node_modules/**", "dist/**", "build/**"]
REQUIRED_DEPENDENCIES = ("react", "react-dom")
RECOMMENDED_DEPENDENCIES = ("typescript", "@types/react", "@types/react-dom")
REQUIRED_SCRIPTS = ("build", "dev")

_LOGICAL_OPERATORS = {"&&", "||", "??"}
_TEST_MARKERS = (".test.", ".spec.", "__tests__/")
_TYPESCRIPT_MARKERS = ("interface ", ": ", "type ")


@dataclass
class SourceFacts:
    imports: list[str] = field(default_factory=list)
    component_name: str = ""
    component_count: int = 0
    hook_count: int = 0
    branch_count: int = 0
    has_default_export: bool = False
    has_props_interface: bool = False
    jsx_tags: list[str] = field(default_factory=list)


def collect_facts(root: Node) -> SourceFacts:
    facts = SourceFacts()
    for node in walk(root):
        kind = node.type
        if kind == "import_statement":
            facts.imports.append(string_value(node.child_by_field_name("source")))
        elif kind == "export_statement":
            if any(child.type == "default" for child in node.children):
                facts.has_default_export = True
        elif kind == "function_declaration":
            name = node_text(node.child_by_field_name("name"))
            if is_component_name(name):
                facts.component_name = name
                facts.component_count += 1
            if name.startswith("use"):
                facts.hook_count += 1
        elif kind == "interface_declaration":
            if node_text(node.child_by_field_name("name")).endswith("Props"):
                facts.has_props_interface = True
        elif kind == "call_expression":
            callee = node.child_by_field_name("function")
            if callee is not None and callee.type == "identifier" and node_text(callee).startswith("use"):
                facts.hook_count += 1
        elif kind in ("if_statement", "ternary_expression"):
            facts.branch_count += 1
        elif kind == "binary_expression":
            operator = node.child_by_field_name("operator")
            if operator is not None and operator.type in _LOGICAL_OPERATORS:
                facts.branch_count += 1
    facts.jsx_tags = [jsx_name(opening) or "" for _, opening in jsx_elements(root)]
    return facts


def compute_metrics(code: str, facts: SourceFacts, file_name: str) -> CodeMetrics:
    normalized = file_name.replace("\\", "/")
    return CodeMetrics(
        lines_of_code=len(code.split("\n")),
        complexity=1 + facts.branch_count,
        component_count=facts.component_count,
        hook_count=facts.hook_count,
        import_count=len(facts.imports),
        has_tests=any(marker in normalized for marker in _TEST_MARKERS),
        has_typescript=any(marker in code for marker in _TYPESCRIPT_MARKERS),
    )


def describe_syntax_error(node: Node) -> str:
    if node.is_missing:
        return f"missing '{node.type}'"
    text = node_text(node).strip()
    if not text:
        return "unexpected end of input"
    return f"unexpected '{text.splitlines()[0][:40]}'"


# ── rules ────────────────────────────────────────────────────────────────

Rule = Callable[[SourceFacts, str, ValidationResult], None]


def check_default_export(facts: SourceFacts, code: str, result: ValidationResult) -> None:
    if facts.component_name and not facts.has_default_export:
        result.warnings.append(
            ValidationWarning(
                message="React component should have a default export",
                suggestion=f"Add `export default {facts.component_name}`",
            )
        )


def check_props_interface(facts: SourceFacts, code: str, result: ValidationResult) -> None:
    name = facts.component_name
    if name and not facts.has_props_interface and "props" in code:
        result.warnings.append(
            ValidationWarning(
                message=f"Component {name} should define a Props interface",
                suggestion=f"Add interface {name}Props {{ ... }}",
            )
        )


def check_react_import(facts: SourceFacts, code: str, result: ValidationResult) -> None:
    if facts.jsx_tags and "react" not in facts.imports:
        result.errors.append(ValidationIssue(type="import", message="Missing React import for JSX usage"))


def check_archbase_import(facts: SourceFacts, code: str, result: ValidationResult) -> None:
    uses_archbase = any(tag.startswith("Archbase") for tag in facts.jsx_tags)
    if uses_archbase and not any("archbase" in source for source in facts.imports):
        result.errors.append(
            ValidationIssue(type="import", message="Missing @archbase/react import for Archbase components")
        )


DEFAULT_RULES: tuple[Rule, ...] = (
    check_default_export,
    check_props_interface,
    check_react_import,
    check_archbase_import,
)


def check_package_json(manifest: Any, result: ValidationResult) -> None:
    if not isinstance(manifest, dict):
        result.errors.append(ValidationIssue(type="structure", message="package.json must hold a JSON object"))
        return
    dependencies = {**(manifest.get("dependencies") or {}), **(manifest.get("devDependencies") or {})}
    for dep in REQUIRED_DEPENDENCIES:
        if dep not in dependencies:
            result.errors.append(ValidationIssue(type="structure", message=f"Missing required dependency: {dep}"))
    for dep in RECOMMENDED_DEPENDENCIES:
        if dep not in dependencies:
            result.warnings.append(
                ValidationWarning(
                    message=f"Missing recommended dependency: {dep}",
                    suggestion=f"Add {dep} for better development experience",
                )
            )
    scripts = manifest.get("scripts") or {}
    for script in REQUIRED_SCRIPTS:
        if script not in scripts:
            result.warnings.append(
                ValidationWarning(
                    message=f"Missing script: {script}",
                    suggestion=f'Add "{script}" script to package.json',
                )
            )


class CodeValidator:
    """Validate single sources, files or a whole project."""

    def __init__(self, parser: SourceParser | None = None, rules: tuple[Rule, ...] = DEFAULT_RULES) -> None:
        self._parser = parser or SourceParser()
        self._rules = rules

    def validate_code(self, code: str, file_name: str = "generated.tsx") -> ValidationResult:
        result = ValidationResult()
        tree = self._parser.parse_tree(code, Path(file_name).suffix or ".tsx")
        error_node = first_error(tree.root_node)
        if error_node is not None:
            line, column = start_position(error_node)
            result.errors.append(
                ValidationIssue(
                    type="syntax",
                    message=f"Parse error: {describe_syntax_error(error_node)}",
                    line=line,
                    column=column,
                )
            )
            log.debug("validator.syntax_error", file=file_name, line=line, column=column)
            return result.settle()

        facts = collect_facts(tree.root_node)
        result.metrics = compute_metrics(code, facts, file_name)
        for rule in self._rules:
            rule(facts, code, result)
        return result.settle()

    def validate_file(self, path: str | Path) -> ValidationResult:
        path = Path(path)
        try:
            code = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            log.warning("validator.read_failed", file=str(path), error=str(exc))
            issue = ValidationIssue(type="syntax", message=f"Failed to read file: {exc}", file=str(path))
            return ValidationResult(errors=[issue]).settle()

        result = self.validate_code(code, str(path))
        for entry in [*result.errors, *result.warnings]:
            entry.file = str(path)
        return result

    def validate_project(self, project_path: str | Path, ignore: list[str] | None = None) -> ValidationResult:
        root = Path(project_path)
        if not root.is_dir():
            raise AnalyzerError(f"Project directory not found: {root}")

        result = ValidationResult()
        package_json = root / "package.json"
        if not package_json.is_file():
            result.errors.append(ValidationIssue(type="structure", message="Missing package.json file"))
        else:
            try:
                manifest = json.loads(package_json.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                result.errors.append(ValidationIssue(type="structure", message=f"Invalid package.json: {exc}"))
            else:
                check_package_json(manifest, result)

        if not (root / "tsconfig.json").is_file():
            result.warnings.append(
                ValidationWarning(
                    message="Missing tsconfig.json - TypeScript configuration recommended",
                    suggestion="Add tsconfig.json for better type checking",
                )
            )

        src = root / "src"
        files = find_files(src, [SOURCE_PATTERN], DEFAULT_IGNORE if ignore is None else ignore) if src.is_dir() else []
        for path in files:
            file_result = self.validate_file(path)
            result.errors.extend(file_result.errors)
            result.warnings.extend(file_result.warnings)
            result.metrics.merge(file_result.metrics)

        result.settle()
        log.info(
            "validator.project_validated",
            project=str(root),
            files=len(files),
            errors=len(result.errors),
            warnings=len(result.warnings),
        )
        return result
