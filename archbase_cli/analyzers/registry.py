"""Closed, statically populated set of analyzers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

import structlog

from archbase_cli.exceptions import AnalyzerError

log = structlog.get_logger("archbase_cli.registry")


class AnalyzerInput(Enum):
    """What an analyzer consumes."""

    SOURCE_FILE = "source_file"
    SOURCE_TREE = "source_tree"
    JAVA_SOURCE = "java_source"
    MARKDOWN_TREE = "markdown_tree"


@dataclass
class AnalyzerDescriptor:
    name: str
    description: str
    input: AnalyzerInput
    factory: Callable[..., object]
    file_patterns: list[str] = field(default_factory=list)


class AnalyzerRegistry:
    def __init__(self) -> None:
        self._analyzers: dict[str, AnalyzerDescriptor] = {}

    def register(self, descriptor: AnalyzerDescriptor) -> None:
        self._analyzers[descriptor.name] = descriptor
        log.debug("registry.analyzer_registered", name=descriptor.name)

    def get(self, name: str) -> AnalyzerDescriptor | None:
        return self._analyzers.get(name)

    def require(self, name: str) -> AnalyzerDescriptor:
        descriptor = self.get(name)
        if descriptor is None:
            raise AnalyzerError(f"Unknown analyzer '{name}' (available: {', '.join(self.names())})")
        return descriptor

    def create(self, name: str, *args, **kwargs) -> object:
        return self.require(name).factory(*args, **kwargs)

    def names(self) -> list[str]:
        return sorted(self._analyzers)

    def list_all(self) -> list[AnalyzerDescriptor]:
        return [self._analyzers[n] for n in self.names()]

    def find_by_input(self, kind: AnalyzerInput) -> list[AnalyzerDescriptor]:
        return [d for d in self.list_all() if d.input is kind]


def create_default_registry() -> AnalyzerRegistry:
    """Registry with every built-in analyzer."""
    from archbase_cli.analyzers.code_validator import SOURCE_PATTERN, CodeValidator
    from archbase_cli.analyzers.component_analyzer import DEFAULT_PATTERN, ComponentAnalyzer
    from archbase_cli.analyzers.documentation_analyzer import DocumentationAnalyzer
    from archbase_cli.analyzers.java_analyzer import JavaControllerAnalyzer
    from archbase_cli.analyzers.pattern_analyzer import SOURCE_GLOB, ProjectPatternAnalyzer
    from archbase_cli.analyzers.project_scanner import DEFAULT_INCLUDE, ProjectScanner

    registry = AnalyzerRegistry()
    registry.register(
        AnalyzerDescriptor(
            name="component",
            description="Props, imports, hooks and DataSource usage of React components",
            input=AnalyzerInput.SOURCE_FILE,
            factory=ComponentAnalyzer,
            file_patterns=[DEFAULT_PATTERN],
        )
    )
    registry.register(
        AnalyzerDescriptor(
            name="scan",
            description="Archbase component usage, issues and migration candidates",
            input=AnalyzerInput.SOURCE_TREE,
            factory=ProjectScanner,
            file_patterns=list(DEFAULT_INCLUDE),
        )
    )
    registry.register(
        AnalyzerDescriptor(
            name="patterns",
            description="Recurring form, DataSource and page patterns",
            input=AnalyzerInput.SOURCE_TREE,
            factory=ProjectPatternAnalyzer,
            file_patterns=[SOURCE_GLOB],
        )
    )
    registry.register(
        AnalyzerDescriptor(
            name="docs",
            description="DataSource V2 content, examples and guides in Markdown docs",
            input=AnalyzerInput.MARKDOWN_TREE,
            factory=DocumentationAnalyzer,
            file_patterns=["**/*.md"],
        )
    )
    registry.register(
        AnalyzerDescriptor(
            name="validate",
            description="Syntax, import and structure checks with code metrics",
            input=AnalyzerInput.SOURCE_FILE,
            factory=CodeValidator,
            file_patterns=[SOURCE_PATTERN],
        )
    )
    registry.register(
        AnalyzerDescriptor(
            name="java",
            description="Spring controller class, base mapping and methods",
            input=AnalyzerInput.JAVA_SOURCE,
            factory=JavaControllerAnalyzer,
        )
    )
    return registry
