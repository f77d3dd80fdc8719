"""Tests for AnalyzerRegistry and GeneratorRegistry."""

from __future__ import annotations

from pathlib import Path

import pytest

from archbase_cli.analyzers.component_analyzer import ComponentAnalyzer
from archbase_cli.analyzers.documentation_analyzer import DocumentationAnalyzer
from archbase_cli.analyzers.registry import (
    AnalyzerDescriptor,
    AnalyzerInput,
    AnalyzerRegistry,
)
from archbase_cli.analyzers.registry import create_default_registry as create_analyzer_registry
from archbase_cli.config import BUNDLED_TEMPLATES_DIR
from archbase_cli.exceptions import AnalyzerError, GeneratorError
from archbase_cli.generators.form import FormGenerator, FormOptions
from archbase_cli.generators.registry import GeneratorDescriptor, GeneratorRegistry
from archbase_cli.generators.registry import create_default_registry as create_generator_registry


class TestAnalyzerRegistry:
    def test_register_and_get(self):
        registry = AnalyzerRegistry()
        registry.register(
            AnalyzerDescriptor(
                name="test",
                description="test analyzer",
                input=AnalyzerInput.SOURCE_FILE,
                factory=ComponentAnalyzer,
            )
        )
        assert registry.get("test") is not None
        assert registry.get("nonexistent") is None

    def test_require_unknown(self):
        with pytest.raises(AnalyzerError, match="Unknown analyzer 'nope'"):
            create_analyzer_registry().require("nope")

    def test_default_names(self):
        assert create_analyzer_registry().names() == ["component", "docs", "java", "patterns", "scan", "validate"]

    def test_find_by_input(self):
        registry = create_analyzer_registry()
        trees = registry.find_by_input(AnalyzerInput.SOURCE_TREE)
        assert [d.name for d in trees] == ["patterns", "scan"]
        assert [d.name for d in registry.find_by_input(AnalyzerInput.JAVA_SOURCE)] == ["java"]
        assert [d.name for d in registry.find_by_input(AnalyzerInput.SOURCE_FILE)] == ["component", "validate"]

    def test_create(self, tmp_path):
        analyzer = create_analyzer_registry().create("docs", tmp_path)
        assert isinstance(analyzer, DocumentationAnalyzer)
        assert analyzer.docs_path == Path(tmp_path)


class TestGeneratorRegistry:
    def test_register_and_get(self):
        registry = GeneratorRegistry()
        registry.register(
            GeneratorDescriptor(name="form", description="forms", factory=FormGenerator, options=FormOptions)
        )
        assert registry.get("form").options is FormOptions
        assert registry.get("view") is None

    def test_require_unknown(self):
        with pytest.raises(GeneratorError, match="available: domain, form, navigation, service, view"):
            create_generator_registry().require("widget")

    def test_create_returns_fresh_instances(self):
        registry = create_generator_registry()
        first = registry.create("form")
        second = registry.create("form")
        assert isinstance(first, FormGenerator)
        assert first is not second

    def test_declared_templates_are_bundled(self):
        for descriptor in create_generator_registry().list_all():
            for template in descriptor.templates:
                assert (BUNDLED_TEMPLATES_DIR / template).is_file(), template

    def test_generator_names_match_registry(self):
        for descriptor in create_generator_registry().list_all():
            assert descriptor.factory().name == descriptor.name
