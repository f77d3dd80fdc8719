"""View generator: CRUD list views over ArchbaseDataGrid."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

import structlog

from archbase_cli.exceptions import GeneratorError
from archbase_cli.generators.base import BaseGenerator
from archbase_cli.generators.form import dto_properties
from archbase_cli.generators.naming import admin_route, capitalize_first, feature_name, strip_suffix
from archbase_cli.generators.rendering import TemplateRenderer

log = structlog.get_logger("archbase_cli.generators")

_COLUMN_TYPES = {
    "string": "text",
    "number": "number",
    "boolean": "boolean",
    "date": "date",
    "string[]": "text",
    "number[]": "number",
}
_FILTERABLE = {"text", "email", "enum", "date", "datetime", "number"}
_NOT_SORTABLE = {"image"}
_DEFAULT_SIZES = {"uuid": 400, "date": 140, "datetime": 140, "image": 140, "enum": 120}
# (name fragment, width); first match wins
_NAME_WIDTHS = (
    ("status", 120),
    ("code", 100),
    ("nome", 200),
    ("name", 200),
    ("email", 180),
    ("descric", 300),
)
_FILTER_INPUTS = {"enum": "select", "date": "date", "datetime": "date", "number": "number", "boolean": "checkbox"}


@dataclass
class ViewColumn:
    name: str
    type: str = "text"
    label: str = ""
    required: bool = False
    filterable: bool = True
    sortable: bool = True
    size: int | None = None

    @property
    def filter_input(self) -> str:
        return _FILTER_INPUTS.get(self.type, "text")


@dataclass
class ViewOptions:
    name: str
    output: str = "."
    fields: str | None = None
    dto: str | None = None
    typescript: bool = True
    test: bool = False
    story: bool = False
    category: str | None = None
    feature: str | None = None
    with_permissions: bool = True
    with_filters: bool = True
    with_pagination: bool = True
    with_sorting: bool = True
    page_size: int = 25


def default_columns() -> list[ViewColumn]:
    return [
        ViewColumn("name", "text", "Name", size=200),
        ViewColumn("status", "enum", "Status", size=120),
    ]


def column_type_for(ts_type: str) -> str:
    if ts_type[:1].isupper():
        return "enum"
    clean = re.sub(r"\s+", "", ts_type).lower()
    if "date" in clean or "time" in clean:
        return "date"
    return _COLUMN_TYPES.get(clean, "text")


def column_width(ts_type: str, field_name: str) -> int:
    lowered = field_name.lower()
    for fragment, width in _NAME_WIDTHS:
        if fragment in lowered:
            return width
    if ts_type == "boolean":
        return 80
    if ts_type == "number":
        return 100
    if "Date" in ts_type:
        return 150
    return 150


def parse_columns(spec: str | None) -> list[ViewColumn]:
    """``name:type,...``; the type defaults to ``text``."""
    if not spec:
        return default_columns()
    columns: list[ViewColumn] = []
    for raw in spec.split(","):
        if not raw.strip():
            continue
        name, _, column_type = raw.strip().partition(":")
        name, column_type = name.strip(), column_type.strip() or "text"
        if not name:
            raise GeneratorError(f"Invalid field spec '{raw.strip()}'")
        columns.append(
            ViewColumn(
                name=name,
                type=column_type,
                label=capitalize_first(name),
                required=True,
                filterable=column_type in _FILTERABLE,
                sortable=column_type not in _NOT_SORTABLE,
                size=_DEFAULT_SIZES.get(column_type),
            )
        )
    return columns


def columns_from_dto(content: str) -> list[ViewColumn]:
    return [
        ViewColumn(
            name=name,
            type=column_type_for(ts_type),
            label=capitalize_first(name),
            size=column_width(ts_type, name),
        )
        for name, ts_type, _ in dto_properties(content)
    ]


class ViewGenerator(BaseGenerator[ViewOptions]):
    name = "view"

    def validate(self, options: ViewOptions) -> None:
        if not options.name:
            raise GeneratorError("View name is required")
        if options.page_size <= 0:
            raise GeneratorError("Page size must be positive")

    def resolve_columns(self, options: ViewOptions) -> list[ViewColumn]:
        if options.dto:
            try:
                content = Path(options.dto).read_text(encoding="utf-8")
            except OSError as exc:
                raise GeneratorError(f"Failed to extract fields from DTO: {exc}") from exc
            return columns_from_dto(content)
        return parse_columns(options.fields)

    def build_context(self, options: ViewOptions, columns: list[ViewColumn]) -> dict:
        category = options.category or "configuracao"
        feature = options.feature or feature_name(options.name, "View")
        return {
            "component_name": options.name,
            "entity_name": strip_suffix(options.name, "View"),
            "fields": columns,
            "typescript": options.typescript,
            "with_permissions": options.with_permissions,
            "with_filters": options.with_filters,
            "with_pagination": options.with_pagination,
            "with_sorting": options.with_sorting,
            "page_size": options.page_size,
            "category": category,
            "feature": feature,
            "admin_route": admin_route(category, feature),
            "feature_constant": feature.upper().replace("-", "_"),
            "text_columns": [c for c in columns if c.type == "text"],
            "enum_columns": [c for c in columns if c.type == "enum"],
            "date_columns": [c for c in columns if c.type in ("date", "datetime")],
            "image_columns": [c for c in columns if c.type == "image"],
            "uuid_columns": [c for c in columns if c.type == "uuid"],
            "has_filterable_columns": any(c.filterable for c in columns),
            "has_sortable_columns": any(c.sortable for c in columns),
            "has_image_columns": any(c.type == "image" for c in columns),
            "has_enum_columns": any(c.type == "enum" for c in columns),
            "has_date_columns": any(c.type in ("date", "datetime") for c in columns),
        }

    def _generate(self, options: ViewOptions, renderer: TemplateRenderer) -> list[str]:
        columns = self.resolve_columns(options)
        context = self.build_context(options, columns)
        log.info("view.generate", name=options.name, columns=len(columns))

        output = Path(options.output)
        ext = ".tsx" if options.typescript else ".jsx"
        files = [self.render_to(renderer, "views/crud-list.tsx.j2", context, output / f"{options.name}{ext}")]
        if options.test:
            files.append(
                self.render_to(renderer, "views/test.tsx.j2", context, output / "__tests__" / f"{options.name}.test{ext}")
            )
        if options.story:
            files.append(
                self.render_to(
                    renderer, "views/story.tsx.j2", context, output / "__stories__" / f"{options.name}.stories{ext}"
                )
            )
        return files
