"""Generator registry: the closed set of code generators the CLI exposes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import structlog

from archbase_cli.exceptions import GeneratorError
from archbase_cli.generators.base import BaseGenerator

log = structlog.get_logger("archbase_cli.registry")


@dataclass
class GeneratorDescriptor:
    name: str
    description: str
    factory: Callable[..., BaseGenerator]
    options: type
    templates: tuple[str, ...] = ()


class GeneratorRegistry:
    def __init__(self) -> None:
        self._generators: dict[str, GeneratorDescriptor] = {}

    def register(self, descriptor: GeneratorDescriptor) -> None:
        self._generators[descriptor.name] = descriptor
        log.debug("registry.generator_registered", name=descriptor.name)

    def get(self, name: str) -> GeneratorDescriptor | None:
        return self._generators.get(name)

    def require(self, name: str) -> GeneratorDescriptor:
        descriptor = self.get(name)
        if descriptor is None:
            raise GeneratorError(f"Unknown generator '{name}' (available: {', '.join(self.names())})")
        return descriptor

    def create(self, name: str, *args, **kwargs) -> BaseGenerator:
        return self.require(name).factory(*args, **kwargs)

    def names(self) -> list[str]:
        return sorted(self._generators)

    def list_all(self) -> list[GeneratorDescriptor]:
        return [self._generators[n] for n in self.names()]


def create_default_registry() -> GeneratorRegistry:
    """Registry with every built-in generator."""
    from archbase_cli.generators.domain import DomainGenerator, DomainOptions
    from archbase_cli.generators.form import FormGenerator, FormOptions
    from archbase_cli.generators.navigation import NavigationGenerator, NavigationOptions
    from archbase_cli.generators.service import ServiceGenerator, ServiceOptions
    from archbase_cli.generators.view import ViewGenerator, ViewOptions

    registry = GeneratorRegistry()
    registry.register(
        GeneratorDescriptor(
            name="domain",
            description="DTO class, enums and status values from fields or a Java class",
            factory=DomainGenerator,
            options=DomainOptions,
            templates=("domain/dto.ts.j2", "domain/enum.ts.j2", "domain/status-values.ts.j2"),
        )
    )
    registry.register(
        GeneratorDescriptor(
            name="form",
            description="FormBuilder form bound to a DataSource (v1 or v2)",
            factory=FormGenerator,
            options=FormOptions,
            templates=(
                "forms/basic.tsx.j2",
                "forms/datasource-v2.tsx.j2",
                "forms/test.tsx.j2",
                "forms/story.tsx.j2",
            ),
        )
    )
    registry.register(
        GeneratorDescriptor(
            name="view",
            description="CRUD list view over ArchbaseDataGrid",
            factory=ViewGenerator,
            options=ViewOptions,
            templates=("views/crud-list.tsx.j2", "views/test.tsx.j2", "views/story.tsx.j2"),
        )
    )
    registry.register(
        GeneratorDescriptor(
            name="service",
            description="Remote API service, optionally derived from a Spring controller",
            factory=ServiceGenerator,
            options=ServiceOptions,
            templates=("service.ts.j2", "dto.ts.j2"),
        )
    )
    registry.register(
        GeneratorDescriptor(
            name="navigation",
            description="Admin navigation item and route constants",
            factory=NavigationGenerator,
            options=NavigationOptions,
            templates=("navigation/navigation-item.tsx.j2", "navigation/route-constants.ts.j2"),
        )
    )
    return registry
