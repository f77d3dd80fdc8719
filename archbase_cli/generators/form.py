"""Form generator: FormBuilder based React forms bound to a DataSource."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import structlog

from archbase_cli.exceptions import GeneratorError
from archbase_cli.generators.base import BaseGenerator
from archbase_cli.generators.naming import admin_route, capitalize_first, feature_name, strip_suffix
from archbase_cli.generators.rendering import TemplateRenderer

log = structlog.get_logger("archbase_cli.generators")

ValidationLibrary = Literal["yup", "zod", "none"]

# Fields every DomainGenerator DTO may carry; never form inputs.
SYSTEM_FIELDS = {
    "id",
    "code",
    "version",
    "createEntityDate",
    "updateEntityDate",
    "createdByUser",
    "lastModifiedByUser",
}
_DTO_FIELD_RE = re.compile(r"^[ \t]*(\w+)[?!]?:[ \t]*([^;=()\n]+);", re.MULTILINE)
_INPUT_TYPES = {
    "string": "text",
    "number": "number",
    "boolean": "checkbox",
    "date": "date",
}
_TS_TYPES = {
    "number": "number",
    "checkbox": "boolean",
    "array": "any[]",
}
_REQUIRED_LOOKBEHIND = 200
_INPUT_COMPONENTS = {
    "select": "ArchbaseSelect",
    "textarea": "ArchbaseTextArea",
    "checkbox": "ArchbaseCheckbox",
}


@dataclass
class FormField:
    name: str
    type: str = "text"
    label: str = ""
    required: bool = True
    placeholder: str = ""
    validation: str = ""

    @property
    def ts_type(self) -> str:
        return _TS_TYPES.get(self.type, "string")

    @property
    def capitalized_name(self) -> str:
        return capitalize_first(self.name)


@dataclass
class FormOptions:
    name: str
    output: str = "."
    fields: str | None = None
    dto: str | None = None
    validation: ValidationLibrary = "yup"
    template: str = "basic"
    typescript: bool = True
    test: bool = False
    story: bool = False
    data_source_version: Literal["v1", "v2"] = "v2"
    with_array_fields: bool = False
    layout: Literal["vertical", "horizontal", "grid"] = "vertical"
    category: str | None = None
    feature: str | None = None


def default_fields() -> list[FormField]:
    return [
        FormField("name", "text", "Name", True, "Enter name..."),
        FormField("email", "email", "Email", True, "Enter email..."),
    ]


def validation_for_type(input_type: str) -> str:
    if input_type == "email":
        return "yup.string().email().required()"
    if input_type == "password":
        return "yup.string().min(6).required()"
    if input_type == "number":
        return "yup.number().required()"
    return "yup.string().required()"


def parse_fields(spec: str | None) -> list[FormField]:
    """``name:type,email:email``; the type defaults to ``text``."""
    if not spec:
        return default_fields()
    fields: list[FormField] = []
    for raw in spec.split(","):
        if not raw.strip():
            continue
        name, _, input_type = raw.strip().partition(":")
        name, input_type = name.strip(), input_type.strip() or "text"
        if not name:
            raise GeneratorError(f"Invalid field spec '{raw.strip()}'")
        fields.append(
            FormField(
                name=name,
                type=input_type,
                label=capitalize_first(name),
                required=True,
                placeholder=f"Enter {name}...",
                validation=validation_for_type(input_type),
            )
        )
    return fields


def input_type_for(ts_type: str, field_name: str = "") -> str:
    """Form input type for a DTO property, by type and then by name."""
    if ts_type[:1].isupper():
        return "select"
    clean = re.sub(r"\s+", "", ts_type).lower()
    if "[]" in clean:
        return "array"
    if "email" in field_name.lower():
        return "email"
    return _INPUT_TYPES.get(clean, "text")


def dto_properties(content: str) -> list[tuple[str, str, str]]:
    """(name, type, preceding text) for each user property of a DTO class."""
    properties: list[tuple[str, str, str]] = []
    previous_end = 0
    for match in _DTO_FIELD_RE.finditer(content):
        name = match.group(1)
        # decorators belong to this property only if they follow the previous one
        before = content[max(previous_end, match.start() - _REQUIRED_LOOKBEHIND) : match.start()]
        previous_end = match.end()
        if name in SYSTEM_FIELDS or name.startswith("isNovo"):
            continue
        properties.append((name, match.group(2).strip(), before))
    return properties


def fields_from_dto(content: str) -> list[FormField]:
    fields: list[FormField] = []
    for name, ts_type, before in dto_properties(content):
        input_type = input_type_for(ts_type, name)
        fields.append(
            FormField(
                name=name,
                type=input_type,
                label=capitalize_first(name),
                required="@IsNotEmpty" in before or "@NotEmpty" in before,
                placeholder=f"Enter {name}...",
                validation=validation_for_type(input_type),
            )
        )
    return fields


def component_imports(fields: list[FormField], validation: str) -> list[str]:
    archbase = ["ArchbaseEdit"]
    for f in fields:
        component = _INPUT_COMPONENTS.get(f.type)
        if component and component not in archbase:
            archbase.append(component)
    imports = [
        "import React, { useCallback } from 'react';",
        f"import {{ {', '.join(archbase)} }} from 'archbase-react';",
        "import { Button } from '@mantine/core';",
    ]
    if validation != "none":
        imports.append(f"import * as {validation} from '{validation}';")
    return imports


def validation_schema(fields: list[FormField], library: str) -> list[str]:
    """One schema entry per field, e.g. ``email: yup.string().required().email()``."""
    if library == "none":
        return []
    entries: list[str] = []
    for f in fields:
        if f.type == "number":
            rule = f"{library}.number()"
        elif f.type == "array":
            rule = f"{library}.array()"
        else:
            rule = f"{library}.string()"
        if f.required:
            rule += ".required()"
        if f.type == "email":
            rule += ".email()"
        entries.append(f"{f.name}: {rule}")
    return entries


def data_source_imports(version: str) -> list[str]:
    if version == "v2":
        return ["FormBuilder", "FieldConfig", "ArchbaseDataSourceV2", "useArchbaseDataSource"]
    return ["FormBuilder", "FieldConfig", "ArchbaseDataSource"]


class FormGenerator(BaseGenerator[FormOptions]):
    name = "form"

    def validate(self, options: FormOptions) -> None:
        if not options.name:
            raise GeneratorError("Form name is required")
        if options.validation not in ("yup", "zod", "none"):
            raise GeneratorError(f"Unknown validation library '{options.validation}'")
        if options.data_source_version not in ("v1", "v2"):
            raise GeneratorError(f"Unknown DataSource version '{options.data_source_version}'")

    def resolve_fields(self, options: FormOptions) -> list[FormField]:
        if options.dto:
            try:
                content = Path(options.dto).read_text(encoding="utf-8")
            except OSError as exc:
                raise GeneratorError(f"Failed to extract fields from DTO: {exc}") from exc
            return fields_from_dto(content)
        return parse_fields(options.fields)

    def build_context(self, options: FormOptions, fields: list[FormField]) -> dict:
        category = options.category or "configuracao"
        feature = options.feature or feature_name(options.name, "Form")
        array_fields = [f for f in fields if f.type == "array"]
        return {
            "component_name": options.name,
            "entity_name": strip_suffix(options.name, "Form"),
            "fields": fields,
            "use_validation": options.validation != "none",
            "validation_library": options.validation,
            "typescript": options.typescript,
            "has_required_fields": any(f.required for f in fields),
            "imports": component_imports(fields, options.validation),
            "validation_schema": validation_schema(fields, options.validation),
            "data_source_version": options.data_source_version,
            "with_array_fields": options.with_array_fields,
            "layout": options.layout,
            "has_array_fields": bool(array_fields),
            "array_fields": array_fields,
            "data_source_imports": data_source_imports(options.data_source_version),
            "array_field_methods": (
                ["appendToFieldArray", "removeFromFieldArray", "moveInFieldArray"]
                if options.with_array_fields or array_fields
                else []
            ),
            "category": category,
            "feature": feature,
            "admin_route": admin_route(category, feature),
        }

    def _generate(self, options: FormOptions, renderer: TemplateRenderer) -> list[str]:
        fields = self.resolve_fields(options)
        context = self.build_context(options, fields)
        template = f"forms/{options.template}.tsx.j2"
        if options.data_source_version == "v2" and (options.with_array_fields or context["has_array_fields"]):
            template = "forms/datasource-v2.tsx.j2"
        log.info("form.generate", name=options.name, template=template, fields=len(fields))

        output = Path(options.output)
        ext = ".tsx" if options.typescript else ".jsx"
        files = [self.render_to(renderer, template, context, output / f"{options.name}{ext}")]
        if options.test:
            files.append(
                self.render_to(renderer, "forms/test.tsx.j2", context, output / "__tests__" / f"{options.name}.test{ext}")
            )
        if options.story:
            files.append(
                self.render_to(
                    renderer, "forms/story.tsx.j2", context, output / "__stories__" / f"{options.name}.stories{ext}"
                )
            )
        return files
