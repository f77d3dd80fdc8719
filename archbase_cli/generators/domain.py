"""Domain generator: DTO classes, enums and status-value arrays.

Fields come from explicit ``name:type[:required]`` specs or from a Java
class (source text or file path). Java parsing is line based: field
declarations with optional visibility, annotation lines directly above a
field decide ``required`` and the validation kind, ``enum X { A, B }``
blocks become enum files.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from pathlib import Path

import structlog

from archbase_cli.analyzers.java_analyzer import load_java_source
from archbase_cli.exceptions import GeneratorError
from archbase_cli.generators.base import BaseGenerator
from archbase_cli.generators.naming import lower_first, strip_suffix
from archbase_cli.generators.rendering import HelperRegistry, TemplateRenderer, default_helpers

log = structlog.get_logger("archbase_cli.generators")

_CLASS_RE = re.compile(r"class\s+(\w+)")
_ENUM_RE = re.compile(r"enum\s+(\w+)\s*\{([^}]+)\}")
_FIELD_RE = re.compile(
    r"^(?:(?:private|public|protected)\s+)?((?:(?:static|final|transient|volatile)\s+)*)"
    r"([\w.]+(?:<[\w\s,.<>?]+>)?(?:\[\])?)\s+(\w+)\s*(?:=.*)?;"
)
_COLLECTION_RE = re.compile(r"\[\]|List<|Set<|>")

_SKIPPED_FIELDS = {"serialVersionUID", "logger", "log"}
_NOT_TYPES = {"return", "throw", "package", "import", "new", "case", "goto"}
_REQUIRED_ANNOTATIONS = ("@NotNull", "@NotEmpty", "@NotBlank")

JAVA_TO_TS = {
    "String": "string",
    "Integer": "number",
    "int": "number",
    "Long": "number",
    "long": "number",
    "Double": "number",
    "double": "number",
    "Float": "number",
    "float": "number",
    "Boolean": "boolean",
    "boolean": "boolean",
    "Date": "string",
    "LocalDate": "string",
    "LocalDateTime": "string",
    "LocalTime": "string",
    "UUID": "string",
    "BigDecimal": "number",
}
_PRIMITIVES = set(JAVA_TO_TS) | {"string", "number", "boolean"}


@dataclass
class DomainField:
    name: str
    type: str
    required: bool = False
    validation: str = ""
    description: str = ""
    is_array: bool = False
    nested: bool = False


@dataclass
class EnumDefinition:
    name: str
    values: list[str]
    description: str = ""


AUDIT_FIELDS = (
    DomainField("id", "string", required=True),
    DomainField("code", "string"),
    DomainField("version", "number"),
    DomainField("createEntityDate", "string"),
    DomainField("updateEntityDate", "string"),
    DomainField("createdByUser", "string"),
    DomainField("lastModifiedByUser", "string"),
)


@dataclass
class DomainOptions:
    name: str = ""
    output: str = "."
    fields: list[DomainField] = field(default_factory=list)
    enums: list[EnumDefinition] = field(default_factory=list)
    with_audit_fields: bool = False
    with_validation: bool = True
    with_constructor: bool = True
    with_factory: bool = True
    java_input: str | None = None


def base_type(java_type: str) -> str:
    return _COLLECTION_RE.sub("", java_type)


def is_collection(java_type: str) -> bool:
    return "[]" in java_type or "List<" in java_type or "Set<" in java_type


def is_primitive(java_type: str) -> bool:
    return base_type(java_type) in _PRIMITIVES


def ts_type(java_type: str) -> str:
    """Java field type as a TypeScript property type."""
    if is_collection(java_type):
        base = base_type(java_type)
        return JAVA_TO_TS.get(base, base) + "[]"
    return JAVA_TO_TS.get(java_type, java_type)


def parse_field_spec(spec: str) -> DomainField:
    """``name:type[:required]``; the type defaults to ``string``."""
    parts = [p.strip() for p in spec.split(":")]
    if not parts[0]:
        raise GeneratorError(f"Invalid field spec '{spec}'")
    java_type = parts[1] if len(parts) > 1 and parts[1] else "string"
    required = len(parts) > 2 and parts[2].lower() in ("required", "true", "1")
    return DomainField(
        name=parts[0],
        type=java_type,
        required=required,
        is_array=is_collection(java_type),
        nested=not is_primitive(java_type),
    )


def parse_enum_spec(spec: str) -> EnumDefinition:
    """``Status=ACTIVE|INACTIVE``."""
    name, _, values = spec.partition("=")
    if not name.strip() or not values.strip():
        raise GeneratorError(f"Invalid enum spec '{spec}' (expected Name=A|B)")
    return EnumDefinition(name=name.strip(), values=[v.strip() for v in values.split("|") if v.strip()])


def _validation_for(annotations: list[str]) -> tuple[bool, str]:
    text = " ".join(annotations)
    required = any(a in text for a in _REQUIRED_ANNOTATIONS)
    if "@Email" in text:
        return required, "email"
    if "@Size" in text:
        return required, "size"
    if "@Min" in text or "@Max" in text:
        return required, "numeric"
    return required, ""


def parse_java_class(source: str) -> tuple[str, list[DomainField], list[EnumDefinition]]:
    """Return ``(class_name, fields, enums)`` found in a Java class."""
    class_match = _CLASS_RE.search(source)
    class_name = class_match.group(1) if class_match else ""

    enums: list[EnumDefinition] = []
    for match in _ENUM_RE.finditer(source):
        values = [re.sub(r";.*$", "", v.strip(), flags=re.S).strip() for v in match.group(2).split(",")]
        enums.append(EnumDefinition(name=match.group(1), values=[v for v in values if v]))

    fields: list[DomainField] = []
    pending: list[str] = []
    for raw in source.splitlines():
        line = raw.strip()
        if line.startswith("@"):
            pending.append(line)
            continue
        match = _FIELD_RE.match(line)
        annotations, pending = pending, []
        if match is None:
            continue
        modifiers, java_type, name = match.groups()
        if "static" in modifiers or java_type in _NOT_TYPES or name in _SKIPPED_FIELDS:
            continue
        required, validation = _validation_for(annotations)
        fields.append(
            DomainField(
                name=name,
                type=java_type,
                required=required,
                validation=validation,
                is_array=is_collection(java_type),
                nested=not is_primitive(java_type),
            )
        )
    return class_name, fields, enums


class DomainGenerator(BaseGenerator[DomainOptions]):
    name = "domain"

    def helpers(self) -> HelperRegistry:
        registry = default_helpers()
        registry.add_helper("ts_type", ts_type)
        registry.add_helper(
            "validation_message",
            lambda field_name, entity: f"mentors:{field_name} {entity.lower()} must be provided",
        )
        return registry

    def validate(self, options: DomainOptions) -> None:
        if not options.name and not options.java_input:
            raise GeneratorError("Domain name or Java input is required")

    def resolve(self, options: DomainOptions) -> DomainOptions:
        """Fold a Java class, when given, into the options."""
        if not options.java_input:
            return options
        class_name, fields, enums = parse_java_class(load_java_source(options.java_input))
        name = options.name or class_name
        if not name:
            raise GeneratorError("No class name found in Java input")
        log.info("domain.java_parsed", name=name, fields=len(fields), enums=len(enums))
        return replace(options, name=name, fields=fields, enums=enums or options.enums)

    def build_context(self, options: DomainOptions) -> dict:
        entity_name = strip_suffix(options.name, "Dto")
        dto_name = options.name if options.name.endswith("Dto") else f"{options.name}Dto"
        audit = list(AUDIT_FIELDS) if options.with_audit_fields else []
        audit_names = {f.name for f in audit}
        all_fields = audit + [f for f in options.fields if f.name not in audit_names]

        enum_names = {e.name for e in options.enums}
        referenced = sorted(
            {base_type(f.type) for f in all_fields if f.nested and base_type(f.type).endswith("Dto")}
        )
        return {
            "name": options.name,
            "entity_name": entity_name,
            "dto_name": dto_name,
            "fields": all_fields,
            "has_required_fields": any(f.required for f in all_fields),
            "has_enum_fields": any(f.type in enum_names for f in all_fields),
            "has_nested_fields": any(f.nested for f in all_fields),
            "has_array_fields": any(f.is_array for f in all_fields),
            "enums": options.enums,
            "has_enums": bool(options.enums),
            "nested_imports": referenced,
            "with_audit_fields": options.with_audit_fields,
            "with_validation": options.with_validation,
            "with_constructor": options.with_constructor,
            "with_factory": options.with_factory,
            "camel_case_name": lower_first(entity_name),
            "new_instance_flag": f"isNovo{entity_name}",
            "needs_validation": options.with_validation and any(f.required for f in all_fields),
            "needs_uuid": options.with_factory or options.with_audit_fields,
        }

    def _generate(self, options: DomainOptions, renderer: TemplateRenderer) -> list[str]:
        options = self.resolve(options)
        context = self.build_context(options)
        output = Path(options.output)
        files = [self.render_to(renderer, "domain/dto.ts.j2", context, output / f"{context['dto_name']}.ts")]
        for enum in options.enums:
            enum_context = {
                **context,
                "enum_name": enum.name,
                "enum_values": enum.values,
                "enum_description": enum.description,
            }
            files.append(self.render_to(renderer, "domain/enum.ts.j2", enum_context, output / f"{enum.name}.ts"))
        if options.enums:
            files.append(
                self.render_to(
                    renderer,
                    "domain/status-values.ts.j2",
                    context,
                    output / f"{context['entity_name']}StatusValues.ts",
                )
            )
        return files
