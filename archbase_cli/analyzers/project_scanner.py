"""Project scanner — Archbase component usage across a whole project.

For every matched file the scanner records each JSX occurrence of a known
Archbase component that was imported from an Archbase module, types its
props, guesses the DataSource generation in use and flags common mistakes.
Per-file results are independent; the project aggregate is merged by
component name and does not depend on the order files were processed in.
"""

from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Literal

import structlog
from tree_sitter import Node

from archbase_cli.analyzers.files import find_files
from archbase_cli.analyzers.source_parser import (
    SourceParser,
    jsx_attributes,
    jsx_elements,
    jsx_expression_inner,
    jsx_name,
    node_text,
    start_position,
    string_value,
    walk,
)
from archbase_cli.exceptions import AnalyzerError
from archbase_cli.models.base import export_json
from archbase_cli.models.scan import (
    AutoFixResult,
    ComponentIssue,
    ComponentStats,
    ComponentUsage,
    DependencyReport,
    MigrationSummary,
    PatternSummary,
    ProjectScanResult,
    ScanReport,
    ScanStatistics,
    UsageProp,
)

log = structlog.get_logger("archbase_cli.scanner")

ARCHBASE_COMPONENTS = frozenset(
    {
        "ArchbaseEdit", "ArchbaseSelect", "ArchbaseDataTable", "ArchbaseFormTemplate",
        "ArchbaseDataGrid", "ArchbaseRemoteDataSource", "ArchbaseLocalDataSource",
        "ArchbaseCheckbox", "ArchbaseRadio", "ArchbaseSwitch", "ArchbaseSlider",
        "ArchbaseTextArea", "ArchbasePasswordInput", "ArchbaseNumberInput",
        "ArchbaseDatePicker", "ArchbaseTimePicker", "ArchbaseColorPicker",
        "ArchbaseFileUpload", "ArchbaseImageUpload", "ArchbaseRichTextEditor",
        "ArchbaseCodeEditor", "ArchbaseMarkdownEditor", "ArchbaseTagInput",
        "ArchbaseAutocomplete", "ArchbaseMultiSelect", "ArchbaseTreeSelect",
        "ArchbaseAsyncSelect", "ArchbaseButton", "ArchbaseIconButton",
        "ArchbaseModal", "ArchbaseDrawer", "ArchbasePopover", "ArchbaseTooltip",
        "ArchbaseNotification", "ArchbaseAlert", "ArchbaseLoading", "ArchbaseSkeleton",
    }
)  # fmt: skip


@dataclass(frozen=True)
class PatternDefinition:
    components: tuple[str, ...]
    description: str


PROJECT_PATTERNS: dict[str, PatternDefinition] = {
    "form-with-datasource": PatternDefinition(
        ("ArchbaseFormTemplate", "ArchbaseRemoteDataSource"), "Form with DataSource integration"
    ),
    "crud-with-datagrid": PatternDefinition(
        ("ArchbaseDataGrid", "ArchbaseRemoteDataSource"), "CRUD interface with DataGrid"
    ),
    "async-loading": PatternDefinition(
        ("ArchbaseLoading", "ArchbaseAsyncSelect"), "Async operations with loading states"
    ),
    "validation-with-feedback": PatternDefinition(
        ("ArchbaseFormTemplate", "ArchbaseAlert"), "Form validation with user feedback"
    ),
}

REQUIRED_PROPS: dict[str, list[str]] = {
    "ArchbaseEdit": ["dataSource", "dataField"],
    "ArchbaseSelect": ["dataSource", "dataField"],
    "ArchbaseDataGrid": ["dataSource"],
    "ArchbaseFormTemplate": ["dataSource"],
    "ArchbaseRemoteDataSource": ["url"],
    "ArchbaseButton": [],
    "ArchbaseModal": ["opened"],
}

V2_KEYWORDS = ("appendToFieldArray", "isDataSourceV2", "ArchbaseRemoteDataSource", "useArchbaseDataSource")
V1_KEYWORDS = ("forceUpdate", "setFieldValue", "getFieldValue", "ArchbaseDataSource")

RECOMMENDED_DEPENDENCIES = ("@mantine/core", "@mantine/hooks", "@emotion/react", "react-query")

DEFAULT_INCLUDE = ["**/*.{ts,tsx,js,jsx}"]
DEFAULT_EXCLUDE = ["node_modules/**", "dist/**", "build/**", ".git/**"]


@dataclass
class ScanOptions:
    project_path: str
    include_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    workers: int = 1
    generate_report: bool = False
    output_path: str = "archbase-scan-report.json"


def detect_data_source_version(content: str, prop_value: Any) -> Literal["v1", "v2"] | None:
    """Guess the DataSource generation from keywords anywhere in the file.

    Decided only when exactly one generation's keywords are present.
    """
    if not prop_value:
        return None
    has_v2 = any(k in content for k in V2_KEYWORDS)
    has_v1 = any(k in content for k in V1_KEYWORDS)
    if has_v2 and not has_v1:
        return "v2"
    if has_v1 and not has_v2:
        return "v1"
    return None


def _literal_number(text: str) -> int | float | str:
    try:
        return int(text, 0)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return text


def classify_prop_value(value: Node | None) -> tuple[str, Any]:
    """Map a JSX attribute value to ``(type, value)``."""
    if value is None:
        return "unknown", None
    if value.type == "string":
        return "string", string_value(value)
    if value.type == "jsx_expression":
        inner = jsx_expression_inner(value)
        if inner is None:
            return "unknown", None
        if inner.type in ("true", "false"):
            return "boolean", inner.type == "true"
        if inner.type == "number":
            return "number", _literal_number(node_text(inner))
        if inner.type == "identifier":
            return "variable", node_text(inner)
    return "unknown", None


def archbase_imports(root: Node) -> dict[str, str]:
    """Local names of named imports from Archbase modules, mapped to their source."""
    imports: dict[str, str] = {}
    for node in walk(root):
        if node.type != "import_statement":
            continue
        source = string_value(node.child_by_field_name("source"))
        if "archbase" not in source:
            continue
        for clause in node.named_children:
            if clause.type != "import_clause":
                continue
            for group in clause.named_children:
                if group.type != "named_imports":
                    continue
                for spec in group.named_children:
                    if spec.type != "import_specifier":
                        continue
                    local = spec.child_by_field_name("alias") or spec.child_by_field_name("name")
                    imports[node_text(local)] = source
    return imports


def detect_component_issues(name: str, props: list[UsageProp]) -> list[ComponentIssue]:
    issues: list[ComponentIssue] = []
    names = {p.name for p in props}
    for required in REQUIRED_PROPS.get(name, []):
        if required not in names:
            issues.append(
                ComponentIssue(
                    type="error",
                    message=f"Missing required prop: {required}",
                    fix=f"Add {required} prop to {name}",
                )
            )

    if name == "ArchbaseEdit" and "dataSource" not in names:
        issues.append(
            ComponentIssue(
                type="warning",
                message="ArchbaseEdit without dataSource prop may not update automatically",
                fix="Add dataSource prop for automatic data binding",
            )
        )

    data_source = next((p for p in props if p.name == "dataSource"), None)
    if data_source is not None and data_source.type == "variable":
        issues.append(
            ComponentIssue(
                type="suggestion",
                message="Consider using ArchbaseDataSource V2 for better performance",
                fix="Migrate to ArchbaseRemoteDataSource for reactive updates",
            )
        )
    return issues


def detect_component_patterns(name: str, props: list[UsageProp], content: str) -> list[str]:
    names = {p.name for p in props}
    patterns: list[str] = []
    if name == "ArchbaseFormTemplate" and "dataSource" in names:
        patterns.append("form-with-datasource")
    if name == "ArchbaseDataGrid" and "ArchbaseRemoteDataSource" in content:
        patterns.append("crud-with-datagrid")
    if "Async" in name or "loading" in names:
        patterns.append("async-loading")
    if "validation" in content or "error" in content:
        patterns.append("validation-with-feedback")
    return patterns


def aggregate_usage(components: list[ComponentUsage]) -> dict[str, ComponentStats]:
    """Merge usages by component name. Counts are summed, so order is irrelevant."""
    stats: dict[str, ComponentStats] = {}
    for usage in components:
        entry = stats.setdefault(usage.name, ComponentStats(name=usage.name))
        entry.usage_count += 1
        if usage.file not in entry.files:
            entry.files.append(usage.file)
        for prop in usage.props:
            entry.prop_usage[prop.name] = entry.prop_usage.get(prop.name, 0) + 1
    for entry in stats.values():
        entry.files.sort()
        entry.prop_usage = dict(sorted(entry.prop_usage.items()))
    return dict(sorted(stats.items()))


class ProjectScanner:
    """Scan a project for Archbase component usage."""

    def __init__(self, parser: SourceParser | None = None) -> None:
        self._parser = parser or SourceParser()

    def scan_project(self, options: ScanOptions) -> ProjectScanResult:
        root = Path(options.project_path)
        if not root.is_dir():
            raise AnalyzerError(f"Project path not found: {options.project_path}")

        files = find_files(root, options.include_patterns, options.exclude_patterns)
        log.info("scanner.started", root=str(root), files=len(files), workers=options.workers)

        components: list[ComponentUsage] = []
        files_scanned = 0
        for usages in self._analyze_all(files, root, options.workers):
            if usages is None:
                continue
            files_scanned += 1
            components.extend(usages)
        components.sort(key=lambda c: (c.file, c.line, c.column, c.name))

        migration = self.analyze_migration(components)
        result = ProjectScanResult(
            components=components,
            usage_by_component=aggregate_usage(components),
            statistics=self.generate_statistics(components, files_scanned),
            patterns=self.detect_patterns(components),
            migration=migration,
            dependencies=self.analyze_dependencies(root),
        )
        log.info(
            "scanner.finished",
            files_scanned=files_scanned,
            components=len(components),
            issues=result.statistics.issues_found,
        )

        if options.generate_report:
            self.generate_report(result, options.output_path)
        return result

    def _analyze_all(self, files: list[Path], root: Path, workers: int):
        if workers <= 1 or len(files) <= 1:
            for path in files:
                yield self.analyze_file(path, root)
            return
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self.analyze_file, path, root) for path in files]
            for future in as_completed(futures):
                yield future.result()

    # ── per file ─────────────────────────────────────────────────────────

    def analyze_file(self, path: Path, project_root: Path) -> list[ComponentUsage] | None:
        """Usages in one file, or ``None`` when the file cannot be read or parsed."""
        parsed = self._parser.parse_file(path)
        if parsed is None:
            log.warning("scanner.file_skipped", file=str(path))
            return None
        content, tree = parsed
        try:
            rel = path.resolve().relative_to(project_root.resolve()).as_posix()
        except ValueError:
            rel = str(path)
        return self.analyze_tree(tree.root_node, content, rel)

    def analyze_source(self, content: str, file: str, suffix: str = ".tsx") -> list[ComponentUsage] | None:
        tree = self._parser.parse(content, suffix, origin=file)
        if tree is None:
            return None
        return self.analyze_tree(tree.root_node, content, file)

    def analyze_tree(self, root: Node, content: str, file: str) -> list[ComponentUsage]:
        imports = archbase_imports(root)
        usages: list[ComponentUsage] = []
        for element, opening in jsx_elements(root):
            name = jsx_name(opening)
            if name is None or name not in ARCHBASE_COMPONENTS or name not in imports:
                continue
            usages.append(self._component_usage(name, imports[name], element, opening, file, content))
        return usages

    def _component_usage(
        self,
        name: str,
        import_path: str,
        element: Node,
        opening: Node,
        file: str,
        content: str,
    ) -> ComponentUsage:
        props: list[UsageProp] = []
        has_data_source = False
        version: Literal["v1", "v2"] | None = None
        for prop_name, value in jsx_attributes(opening):
            prop_type, prop_value = classify_prop_value(value)
            props.append(UsageProp(name=prop_name, type=prop_type, value=prop_value))
            if prop_name == "dataSource":
                has_data_source = True
                version = detect_data_source_version(content, prop_value)

        line, column = start_position(element)
        issues = detect_component_issues(name, props)
        for issue in issues:
            issue.line, issue.column = line, column

        return ComponentUsage(
            name=name,
            import_path=import_path,
            props=props,
            file=file,
            line=line,
            column=column,
            has_data_source=has_data_source,
            data_source_version=version,
            patterns=detect_component_patterns(name, props, content),
            issues=issues,
        )

    # ── project level ────────────────────────────────────────────────────

    @staticmethod
    def analyze_dependencies(project_root: Path) -> DependencyReport:
        package_json = project_root / "package.json"
        if not package_json.is_file():
            return DependencyReport()
        try:
            data = json.loads(package_json.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.warning("scanner.package_json_unreadable", file=str(package_json), error=str(exc))
            return DependencyReport()

        deps: dict[str, str] = {**(data.get("dependencies") or {}), **(data.get("devDependencies") or {})}
        return DependencyReport(
            archbase_version=deps.get("@archbase/react"),
            react_version=deps.get("react"),
            missing_dependencies=[d for d in RECOMMENDED_DEPENDENCIES if not deps.get(d)],
        )

    @staticmethod
    def detect_patterns(components: list[ComponentUsage]) -> PatternSummary:
        names = {c.name for c in components}
        seen = {p for c in components for p in c.patterns}

        detected = [
            pattern
            for pattern, definition in PROJECT_PATTERNS.items()
            if all(comp in names for comp in definition.components) or pattern in seen
        ]
        recommended: list[str] = []
        if "ArchbaseFormTemplate" in names and "form-with-datasource" not in detected:
            recommended.append("form-with-datasource")
        if "ArchbaseDataGrid" in names and "crud-with-datagrid" not in detected:
            recommended.append("crud-with-datagrid")
        missing = [p for p in PROJECT_PATTERNS if p not in detected and p not in recommended]
        return PatternSummary(detected=detected, missing=missing, recommended=recommended)

    @staticmethod
    def analyze_migration(components: list[ComponentUsage]) -> MigrationSummary:
        candidates = [
            c
            for c in components
            if c.data_source_version == "v1" or (c.has_data_source and c.data_source_version is None)
        ]
        effort: Literal["Low", "Medium", "High"] = "Low"
        if len(candidates) > 25:
            effort = "High"
        elif len(candidates) > 10:
            effort = "Medium"

        recommendations: list[str] = []
        if candidates:
            recommendations.append(f"Migrate {len(candidates)} components to DataSource V2")
            recommendations.append("Use ArchbaseRemoteDataSource for better performance")
            recommendations.append("Implement reactive data binding patterns")
        if any(
            c.name == "ArchbaseFormTemplate" and "validation-with-feedback" not in c.patterns
            for c in components
        ):
            recommendations.append("Add validation feedback to forms")

        return MigrationSummary(
            v1_to_v2_candidates=candidates,
            estimated_effort=effort,
            recommendations=recommendations,
        )

    @staticmethod
    def generate_statistics(components: list[ComponentUsage], files_scanned: int) -> ScanStatistics:
        return ScanStatistics(
            total_components=len(components),
            archbase_components=len(components),
            v1_components=sum(1 for c in components if c.data_source_version == "v1"),
            v2_components=sum(1 for c in components if c.data_source_version == "v2"),
            files_scanned=files_scanned,
            issues_found=sum(len(c.issues) for c in components),
        )

    @staticmethod
    def generate_recommendations(result: ProjectScanResult) -> list[str]:
        recommendations: list[str] = []
        if result.statistics.issues_found > 0:
            recommendations.append(f"Fix {result.statistics.issues_found} component issues found")
        if result.migration.v1_to_v2_candidates:
            recommendations.append("Consider migrating to DataSource V2 for better performance")
        if result.dependencies.missing_dependencies:
            recommendations.append("Install recommended dependencies for better integration")
        if result.patterns.recommended:
            recommendations.append("Implement recommended patterns for better maintainability")
        return recommendations

    def build_report(self, result: ProjectScanResult) -> ScanReport:
        return ScanReport(
            generated_at=datetime.now(timezone.utc).isoformat(),
            summary=result.statistics,
            components=result.components,
            usage_by_component=result.usage_by_component,
            patterns=result.patterns,
            migration=result.migration,
            dependencies=result.dependencies,
            recommendations=self.generate_recommendations(result),
        )

    def generate_report(self, result: ProjectScanResult, output_path: str | Path) -> Path:
        path = export_json(self.build_report(result), output_path)
        log.info("scanner.report_written", path=str(path))
        return path

    @staticmethod
    def auto_fix(result: ProjectScanResult, dry_run: bool = True) -> AutoFixResult:
        """Count fixable issues. Errors always need a human and are skipped."""
        outcome = AutoFixResult()
        for component in result.components:
            for issue in component.issues:
                if issue.fix and issue.type != "error":
                    log.info(
                        "scanner.would_fix" if dry_run else "scanner.fix",
                        message=issue.message,
                        file=component.file,
                        line=component.line,
                    )
                    outcome.fixed += 1
                else:
                    outcome.skipped += 1
        return outcome
