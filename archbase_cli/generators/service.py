"""Remote API service generator.

Produces an ``ArchbaseRemoteApiService`` subclass for an entity. When a Spring
controller is supplied its methods become extra service methods: verb from
the ``*Mapping`` annotation, endpoint from the annotation value, parameter
source from ``@PathVariable`` / ``@RequestParam`` / ``@RequestBody`` and
Java types mapped to TypeScript.

After writing, the service is registered in the project's IoC files
(``src/ioc/*IOCTypes.ts`` and ``src/ioc/*ContainerIOC.ts``). Registration is
best effort: problems are logged and never fail the generation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

import structlog

from archbase_cli.analyzers.java_analyzer import (
    JavaControllerAnalyzer,
    load_java_source,
    split_top_level,
)
from archbase_cli.exceptions import GeneratorError
from archbase_cli.generators.base import BaseGenerator
from archbase_cli.generators.naming import capitalize_first, pascal_case
from archbase_cli.generators.rendering import HelperRegistry, TemplateRenderer, default_helpers
from archbase_cli.models.java import JavaMethod, JavaParameter
from archbase_cli.models.service import ServiceMethod, ServiceParameter

log = structlog.get_logger("archbase_cli.generators")

_JAVA_TO_TS = {
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
    "Date": "Date",
    "LocalDate": "Date",
    "LocalDateTime": "Date",
    "List": "Array",
    "Set": "Array",
    "Map": "Record",
    "void": "void",
    "Void": "void",
}
_GENERIC_RE = re.compile(r"^(\w+)<(.+)>$")
_RESPONSE_ENTITY_RE = re.compile(r"ResponseEntity<(.+)>")
_DTO_RE = re.compile(r"(\w+Dto)")
_VERBS = (
    ("getmapping", "get"),
    ("postmapping", "post"),
    ("putmapping", "put"),
    ("deletemapping", "delete"),
    ("patchmapping", "patch"),
)
_SOURCES = (
    ("pathvariable", "path"),
    ("requestparam", "query"),
    ("requestbody", "body"),
)
_CLOSING_BRACE_RE = re.compile(r"\n};")
_BINDING_RE = re.compile(r"container\s*\n\s*\.bind[^;]+;")


@dataclass
class ServiceOptions:
    service_name: str
    entity_name: str
    entity_type: str
    output: str = "."
    id_type: str = "string"
    endpoint: str | None = None
    java_controller: str | None = None
    generate_dto: bool = False
    register_ioc: bool = True


def map_java_type_to_typescript(java_type: str) -> str:
    """``List<UserDto>`` -> ``UserDto[]``, ``Map<String, Long>`` -> ``Record<string, number>``."""
    java_type = java_type.strip()
    generic = _GENERIC_RE.match(java_type)
    if generic:
        base = _JAVA_TO_TS.get(generic.group(1), generic.group(1))
        args = split_top_level(generic.group(2))
        if base == "Record":
            # keys are always strings on the wire
            return f"Record<string, {map_java_type_to_typescript(args[-1])}>"
        inner = ", ".join(map_java_type_to_typescript(a) for a in args)
        if base == "Array":
            return f"{inner}[]"
        return f"{base}<{inner}>"
    if java_type.endswith("[]"):
        return f"{map_java_type_to_typescript(java_type[:-2])}[]"
    return _JAVA_TO_TS.get(java_type, java_type)


def http_method_for(method: JavaMethod) -> str:
    for annotation in method.annotations:
        name = annotation.name.lower()
        for marker, verb in _VERBS:
            if marker in name:
                return verb
    return "get"


def endpoint_for(method: JavaMethod, base_endpoint: str) -> str:
    for annotation in method.annotations:
        if annotation.value:
            value = annotation.value.replace('"', "").replace("'", "")
            return f"{base_endpoint}{value}" if value.startswith("/") else f"{base_endpoint}/{value}"
    return base_endpoint


def parameter_source(parameter: JavaParameter) -> str:
    for annotation in parameter.annotations:
        name = annotation.name.lower()
        for marker, source in _SOURCES:
            if marker in name:
                return source
    return "query"


def transform_java_methods(methods: list[JavaMethod], base_endpoint: str) -> list[ServiceMethod]:
    transformed: list[ServiceMethod] = []
    for method in methods:
        return_type = map_java_type_to_typescript(method.return_type)
        return_type = _RESPONSE_ENTITY_RE.sub(r"\1", return_type)
        transformed.append(
            ServiceMethod(
                name=method.name,
                http_method=http_method_for(method),
                return_type=return_type,
                parameters=[
                    ServiceParameter(
                        name=p.name,
                        type=map_java_type_to_typescript(p.type),
                        source=parameter_source(p),
                    )
                    for p in method.parameters
                ],
                endpoint=endpoint_for(method, base_endpoint),
            )
        )
    return transformed


def default_imports(entity_type: str, project_name: str) -> list[str]:
    imports = [
        "import { injectable, inject } from 'inversify';",
        "import { ArchbaseRemoteApiService, ArchbaseRemoteApiClient, ARCHBASE_IOC_API_TYPE } from 'archbase-react';",
    ]
    if entity_type:
        imports.append(f"import {{ {entity_type} }} from '../domain/{entity_type}';")
    if project_name:
        imports.append(f"import {{ API_TYPE }} from '../ioc/{pascal_case(project_name)}IOCTypes';")
    return imports


def method_imports(imports: list[str], methods: list[ServiceMethod], entity_type: str) -> list[str]:
    """Append imports for DTOs referenced by method return types."""
    extra: list[str] = []
    for method in methods:
        match = _DTO_RE.search(method.return_type)
        if match and match.group(1) != entity_type:
            line = f"import {{ {match.group(1)} }} from '../domain/{match.group(1)}';"
            if line not in imports and line not in extra:
                extra.append(line)
    return imports + extra


# ── template helpers ─────────────────────────────────────────────────────


def build_method_params(parameters: list[ServiceParameter]) -> str:
    return ", ".join(f"{p.name}: {p.type}" for p in parameters)


def build_url_params(endpoint: str, parameters: list[ServiceParameter]) -> str:
    url = endpoint
    for p in parameters:
        if p.source == "path":
            url = url.replace("{" + p.name + "}", "${" + p.name + "}")
    return url


def query_params(parameters: list[ServiceParameter]) -> list[ServiceParameter]:
    return [p for p in parameters if p.source == "query"]


def body_param(parameters: list[ServiceParameter]) -> str:
    return next((p.name for p in parameters if p.source == "body"), "{}")


def should_transform(return_type: str) -> bool:
    return "Dto" in return_type and "[]" not in return_type and "List" not in return_type


def is_array(return_type: str) -> bool:
    return "[]" in return_type or "List<" in return_type


# ── IoC registration ─────────────────────────────────────────────────────


def register_in_ioc_types(project_root: Path, entity_name: str) -> bool:
    files = sorted((project_root / "src" / "ioc").glob("*IOCTypes.ts"))
    if not files:
        raise GeneratorError("IOC Types file not found")
    path = files[0]
    content = path.read_text(encoding="utf-8")
    if f"{entity_name}:" in content:
        log.info("service.ioc_type_exists", entity=entity_name, path=str(path))
        return False
    if not _CLOSING_BRACE_RE.search(content):
        raise GeneratorError(f"Could not find API_TYPE object in {path}")
    entry = f'\n  {entity_name}: "{entity_name}",'
    path.write_text(_CLOSING_BRACE_RE.sub(lambda m: entry + m.group(0), content, count=1), encoding="utf-8")
    log.info("service.ioc_type_added", entity=entity_name, path=str(path))
    return True


def register_in_container(project_root: Path, service_name: str, entity_name: str) -> bool:
    files = sorted((project_root / "src" / "ioc").glob("*ContainerIOC.ts"))
    if not files:
        raise GeneratorError("IOC Container file not found")
    path = files[0]
    content = path.read_text(encoding="utf-8")
    if f"API_TYPE.{entity_name}" in content:
        log.info("service.ioc_binding_exists", service=service_name, path=str(path))
        return False

    bindings = list(_BINDING_RE.finditer(content))
    if not bindings:
        raise GeneratorError(f"Could not find container bindings in {path}")
    binding = f"\ncontainer\n  .bind<{service_name}>(API_TYPE.{entity_name})\n  .to({service_name});"
    end = bindings[-1].end()
    content = content[:end] + binding + content[end:]

    service_import = f'import {{ {service_name} }} from "../services/{service_name}";\n'
    last_import = content.rfind("import")
    if last_import == -1:
        content = service_import + content
    else:
        line_end = content.find("\n", last_import)
        line_end = len(content) if line_end == -1 else line_end + 1
        content = content[:line_end] + service_import + content[line_end:]

    path.write_text(content, encoding="utf-8")
    log.info("service.ioc_binding_added", service=service_name, path=str(path))
    return True


class ServiceGenerator(BaseGenerator[ServiceOptions]):
    name = "service"

    def __init__(
        self,
        template_dirs: list[Path] | None = None,
        java_analyzer: JavaControllerAnalyzer | None = None,
    ) -> None:
        super().__init__(template_dirs)
        self._java = java_analyzer or JavaControllerAnalyzer()

    def helpers(self) -> HelperRegistry:
        registry = default_helpers()
        registry.add_helper("capitalize", capitalize_first)
        registry.add_helper("lowercase", lambda s: (s or "").lower())
        registry.add_helper("build_method_params", build_method_params)
        registry.add_helper("build_url_params", build_url_params)
        registry.add_helper("has_query_params", lambda ps: bool(query_params(ps)))
        registry.add_helper("query_params", query_params)
        registry.add_helper("body_param", body_param)
        registry.add_helper("has_body_param", lambda ps: any(p.source == "body" for p in ps))
        registry.add_helper("should_transform", should_transform)
        registry.add_helper("is_array", is_array)
        return registry

    def validate(self, options: ServiceOptions) -> None:
        if not options.service_name:
            raise GeneratorError("Service name is required")
        if not options.entity_name:
            raise GeneratorError("Entity name is required")
        if not options.entity_type:
            raise GeneratorError("Entity type is required")

    def build_context(self, options: ServiceOptions) -> dict:
        project_name = Path(options.output).resolve().name
        endpoint = options.endpoint or f"/api/v1/{options.entity_name.lower()}s"
        context = {
            "service_name": options.service_name,
            "entity_name": options.entity_name,
            "entity_type": options.entity_type,
            "id_type": options.id_type or "string",
            "endpoint": endpoint,
            "has_custom_methods": False,
            "custom_methods": [],
            "imports": default_imports(options.entity_type, project_name),
        }
        if options.java_controller:
            analysis = self._java.analyze(load_java_source(options.java_controller))
            if analysis.methods:
                methods = transform_java_methods(analysis.methods, endpoint)
                context["has_custom_methods"] = True
                context["custom_methods"] = methods
                context["imports"] = method_imports(context["imports"], methods, options.entity_type)
        return context

    def _generate(self, options: ServiceOptions, renderer: TemplateRenderer) -> list[str]:
        log.info("service.generate", service=options.service_name, entity=options.entity_name)
        context = self.build_context(options)
        output = Path(options.output)
        files = [
            self.render_to(
                renderer,
                "service.ts.j2",
                context,
                output / "services" / f"{options.service_name}.ts",
            )
        ]
        if options.generate_dto:
            files.append(
                self.render_to(renderer, "dto.ts.j2", context, output / "dto" / f"{options.entity_name}Dto.ts")
            )
        if options.register_ioc:
            self.register_ioc(output, options)
        return files

    @staticmethod
    def register_ioc(project_root: Path, options: ServiceOptions) -> None:
        try:
            register_in_ioc_types(project_root, options.entity_name)
            register_in_container(project_root, options.service_name, options.entity_name)
        except (GeneratorError, OSError) as exc:
            log.warning("service.ioc_registration_failed", service=options.service_name, error=str(exc))
