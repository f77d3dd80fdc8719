"""Project pattern analyzer — mines recurring usage from an existing project.

Looks at DataSource usage, form composition, Archbase component usage,
validation rules and page layout in every source file, then promotes
frequent form and DataSource shapes to reusable patterns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import structlog
from tree_sitter import Node

from archbase_cli.analyzers.files import find_files
from archbase_cli.analyzers.source_parser import (
    SourceParser,
    jsx_attributes,
    jsx_elements,
    jsx_name,
    node_text,
    string_value,
    walk,
)
from archbase_cli.exceptions import AnalyzerError
from archbase_cli.models.base import export_json
from archbase_cli.models.patterns import (
    ComponentUsagePattern,
    DataSourcePattern,
    FormPattern,
    PageStructure,
    ProjectPattern,
    ProjectPatternAnalysis,
    Recommendation,
    ValidationPattern,
)

log = structlog.get_logger("archbase_cli.analyzers")

SOURCE_GLOB = "**/*.{tsx,ts,jsx,js}"
IGNORED = ["node_modules/**", "dist/**", "build/**", "**/*.test.*", "**/*.spec.*", "**/*.d.ts"]

FIELD_TYPES = {
    "ArchbaseEdit": "text",
    "ArchbasePasswordEdit": "password",
    "ArchbaseNumberEdit": "number",
    "ArchbaseSelect": "select",
    "ArchbaseCheckbox": "checkbox",
    "ArchbaseDatePicker": "date",
    "ArchbaseTextArea": "textarea",
}

DATASOURCE_CONTENT_PATTERNS = [
    ("useArchbaseDataSource", "hook-based"),
    ("createDataSource", "factory-pattern"),
    ("dataSource.fieldByName", "field-access"),
    ("dataSource.search", "search-functionality"),
    ("dataSource.sort", "sorting"),
    ("dataSource.pagination", "pagination"),
]

COMPONENT_CONTENT_PATTERNS = [
    ("useState", "stateful"),
    ("useEffect", "with-effects"),
    ("memo", "memoized"),
    ("forwardRef", "with-ref"),
]

PATH_CONTEXTS = [
    ("form", "forms"),
    ("page", "pages"),
    ("modal", "modals"),
    ("dashboard", "dashboard"),
    ("admin", "admin"),
    ("list", "lists"),
]

YUP_RULES = [(".required(", "required"), (".email(", "email"), (".min(", "min-length"), (".max(", "max-length"), (".matches(", "regex")]
ZOD_RULES = [("z.string()", "string"), ("z.number()", "number"), ("z.email()", "email"), ("z.min(", "min-length")]

FORM_PATTERN_MIN_FREQUENCY = 2
DATASOURCE_PATTERN_MIN_USAGE = 3
HIGH_FREQUENCY = 5


def detect_data_source_patterns(content: str) -> list[str]:
    patterns = [name for needle, name in DATASOURCE_CONTENT_PATTERNS if needle in content]
    if "appendToFieldArray" in content or "removeFromFieldArray" in content:
        patterns.append("array-field-management")
    return patterns


def detect_validation_library(content: str) -> str:
    if "yup." in content or "* as yup" in content:
        return "yup"
    if "z." in content or 'from "zod"' in content:
        return "zod"
    if "validate" in content or "validation" in content:
        return "custom"
    return "none"


def form_complexity(field_type_count: int) -> str:
    if field_type_count > 5:
        return "high"
    if field_type_count > 2:
        return "medium"
    return "low"


def component_contexts(file: str) -> list[str]:
    return [context for needle, context in PATH_CONTEXTS if needle in file]


@dataclass
class _FileView:
    """What the individual passes need from one parsed file."""

    file: str
    content: str
    root: Node
    elements: list[tuple[str, Node]] = field(default_factory=list)


class ProjectPatternAnalyzer:
    def __init__(self, project_path: str | Path, parser: SourceParser | None = None) -> None:
        self.project_path = Path(project_path)
        self._parser = parser or SourceParser()

    def analyze_project(self) -> ProjectPatternAnalysis:
        if not self.project_path.is_dir():
            raise AnalyzerError(f"Project path not found: {self.project_path}")

        result = ProjectPatternAnalysis()
        files = find_files(self.project_path, [SOURCE_GLOB], IGNORED)
        log.info("patterns.started", root=str(self.project_path), files=len(files))

        for path in files:
            view = self._load(path)
            if view is None:
                continue
            self._data_source_usage(view, result)
            self._form_patterns(view, result)
            self._component_usage(view, result)
            self._validation_patterns(view, result)
            self._page_structure(view, result)

        self._process_patterns(result)
        self._recommend(result)
        return result

    def export_analysis(self, result: ProjectPatternAnalysis, output_path: str | Path) -> Path:
        path = export_json(result, output_path)
        log.info("patterns.exported", path=str(path))
        return path

    def _load(self, path: Path) -> _FileView | None:
        parsed = self._parser.parse_file(path)
        if parsed is None:
            log.warning("patterns.file_skipped", file=str(path))
            return None
        content, tree = parsed
        view = _FileView(
            file=path.relative_to(self.project_path).as_posix(),
            content=content,
            root=tree.root_node,
        )
        for _, opening in jsx_elements(tree.root_node):
            name = jsx_name(opening)
            if name is not None:
                view.elements.append((name, opening))
        return view

    # ── passes ───────────────────────────────────────────────────────────

    def _data_source_usage(self, view: _FileView, result: ProjectPatternAnalysis) -> None:
        components: list[str] = []
        for node in walk(view.root):
            if node.type != "import_statement":
                continue
            if string_value(node.child_by_field_name("source")) != "@archbase/react":
                continue
            for spec in walk(node):
                if spec.type == "import_specifier":
                    imported = node_text(spec.child_by_field_name("name"))
                    if "DataSource" in imported:
                        components.append(imported)
        if not components:
            return

        has_v1 = has_v2 = False
        props: dict[str, int] = {}
        content_is_v2 = "appendToFieldArray" in view.content or "isDataSourceV2" in view.content
        for name, opening in view.elements:
            if not name.startswith("Archbase"):
                continue
            for prop, _ in jsx_attributes(opening):
                if prop in ("dataSource", "dataField"):
                    has_v1 = True
                if content_is_v2:
                    has_v2 = True
                props[prop] = props.get(prop, 0) + 1

        version = ("mixed" if has_v1 else "v2") if has_v2 else "v1"
        for component in components:
            existing = next(
                (d for d in result.data_source_usage if d.component == component and d.version == version),
                None,
            )
            if existing is not None:
                existing.usage_count += 1
                existing.files.append(view.file)
                for prop, count in props.items():
                    existing.common_props[prop] = existing.common_props.get(prop, 0) + count
            else:
                result.data_source_usage.append(
                    DataSourcePattern(
                        version=version,
                        component=component,
                        usage_count=1,
                        common_props=dict(props),
                        patterns=detect_data_source_patterns(view.content),
                        files=[view.file],
                    )
                )

    def _form_patterns(self, view: _FileView, result: ProjectPatternAnalysis) -> None:
        validation = detect_validation_library(view.content)
        field_types: list[str] = []
        features: list[str] = []
        layout = "vertical"

        for name, opening in view.elements:
            field_type = FIELD_TYPES.get(name)
            if field_type and field_type not in field_types:
                field_types.append(field_type)
            for feature, matched in (
                ("form-builder", name == "FormBuilder"),
                ("wizard", "Wizard" in name),
                ("multi-step", "Step" in name),
            ):
                if matched and feature not in features:
                    features.append(feature)
            for prop, value in jsx_attributes(opening):
                if prop == "layout" and value is not None and value.type == "string":
                    layout = string_value(value)

        if not field_types:
            return
        complexity = form_complexity(len(field_types))
        existing = next(
            (
                f
                for f in result.form_patterns
                if f.validation_library == validation and f.layout == layout and f.complexity == complexity
            ),
            None,
        )
        if existing is not None:
            existing.frequency += 1
        else:
            result.form_patterns.append(
                FormPattern(
                    field_types=field_types,
                    validation_library=validation,
                    layout=layout,
                    common_features=features,
                    complexity=complexity,
                    frequency=1,
                )
            )

    def _component_usage(self, view: _FileView, result: ProjectPatternAnalysis) -> None:
        local: dict[str, tuple[int, dict[str, int]]] = {}
        for name, opening in view.elements:
            if not name.startswith("Archbase"):
                continue
            count, props = local.get(name, (0, {}))
            for prop, _ in jsx_attributes(opening):
                props[prop] = props.get(prop, 0) + 1
            local[name] = (count + 1, props)

        for component, (count, props) in local.items():
            existing = next((c for c in result.component_usage if c.component == component), None)
            if existing is not None:
                existing.usage_count += count
                for prop, n in props.items():
                    existing.common_props[prop] = existing.common_props.get(prop, 0) + n
            else:
                result.component_usage.append(
                    ComponentUsagePattern(
                        component=component,
                        usage_count=count,
                        common_props=props,
                        patterns=[p for needle, p in COMPONENT_CONTENT_PATTERNS if needle in view.content],
                        contexts=component_contexts(view.file),
                    )
                )

    def _validation_patterns(self, view: _FileView, result: ProjectPatternAnalysis) -> None:
        content = view.content
        if "yup." in content:
            kind, table = "yup", YUP_RULES
        elif "z." in content:
            kind, table = "zod", ZOD_RULES
        else:
            return
        rules = [rule for needle, rule in table if needle in content]
        if not rules:
            return

        existing = next((v for v in result.validation_patterns if v.type == kind), None)
        if existing is not None:
            existing.frequency += 1
            existing.rules.extend(r for r in rules if r not in existing.rules)
        else:
            result.validation_patterns.append(
                ValidationPattern(type=kind, rules=rules, frequency=1, examples=[view.file])
            )

    def _page_structure(self, view: _FileView, result: ProjectPatternAnalysis) -> None:
        content = view.content
        layout = "unknown"
        if "Sidebar" in content or "sidebar" in content:
            layout = "sidebar"
        elif "Header" in content or "header" in content:
            layout = "header"
        elif "Dashboard" in content or "dashboard" in content:
            layout = "dashboard"

        sections = [s for s in ("header", "sidebar", "footer", "main") if s in content]
        has_navigation = "navigation" in content or "nav" in content
        if has_navigation:
            sections.append("navigation")
        if not sections:
            return
        has_auth = any(word in content for word in ("auth", "login", "user"))

        existing = next((p for p in result.page_structures if p.layout == layout), None)
        if existing is not None:
            existing.frequency += 1
        else:
            result.page_structures.append(
                PageStructure(
                    layout=layout,
                    sections=sections,
                    navigation="present" if has_navigation else "absent",
                    authentication=has_auth,
                    frequency=1,
                )
            )

    # ── derived ──────────────────────────────────────────────────────────

    @staticmethod
    def _process_patterns(result: ProjectPatternAnalysis) -> None:
        for form in result.form_patterns:
            if form.frequency < FORM_PATTERN_MIN_FREQUENCY:
                continue
            result.patterns.append(
                ProjectPattern(
                    name=f"form-{form.validation_library}-{form.layout}",
                    type="form",
                    frequency=form.frequency,
                    description=f"{form.layout} form with {form.validation_library} validation",
                    template=f"forms/{form.validation_library}-{form.layout}.j2",
                    parameters={
                        "validation": form.validation_library,
                        "layout": form.layout,
                        "fieldTypes": form.field_types,
                        "complexity": form.complexity,
                    },
                )
            )
        for usage in result.data_source_usage:
            if usage.usage_count < DATASOURCE_PATTERN_MIN_USAGE:
                continue
            result.patterns.append(
                ProjectPattern(
                    name=f"datasource-{usage.version}-{usage.component}",
                    type="component",
                    frequency=usage.usage_count,
                    files=list(usage.files),
                    description=f"{usage.component} used with DataSource {usage.version}",
                    template=f"components/datasource-{usage.version}.j2",
                    parameters={
                        "version": usage.version,
                        "component": usage.component,
                        "commonProps": dict(usage.common_props),
                        "patterns": list(usage.patterns),
                    },
                )
            )

    @staticmethod
    def _recommend(result: ProjectPatternAnalysis) -> None:
        versions = [d.version for d in result.data_source_usage]
        if "v1" in versions and "v2" not in versions:
            result.recommendations.append(
                Recommendation(
                    type="parameter",
                    title="Add DataSource V2 support",
                    description="The project only uses DataSource V1. Consider migrating to V2 for better performance.",
                    priority="medium",
                    implementation="Pass --datasource-version=v2 to the generators",
                )
            )

        frequent = [p for p in result.patterns if p.frequency >= HIGH_FREQUENCY]
        if frequent:
            result.recommendations.append(
                Recommendation(
                    type="template",
                    title="Create dedicated templates",
                    description=f"Found {len(frequent)} frequent patterns that deserve dedicated templates.",
                    priority="high",
                    implementation="Create templates for the most used patterns",
                )
            )

        libraries = {v.type for v in result.validation_patterns}
        if {"yup", "zod"} <= libraries:
            result.recommendations.append(
                Recommendation(
                    type="parameter",
                    title="Make the validation library selectable",
                    description="The project uses both Yup and Zod.",
                    priority="medium",
                    implementation="Pass --validation=yup|zod to the form generators",
                )
            )
