"""Project-wide pattern mining records."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from archbase_cli.models.base import ArchbaseModel


class DataSourcePattern(ArchbaseModel):
    version: Literal["v1", "v2", "mixed"]
    component: str
    usage_count: int = 1
    common_props: dict[str, int] = Field(default_factory=dict)
    patterns: list[str] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)


class FormPattern(ArchbaseModel):
    field_types: list[str] = Field(default_factory=list)
    validation_library: Literal["yup", "zod", "custom", "none"] = "none"
    layout: str = "vertical"
    common_features: list[str] = Field(default_factory=list)
    complexity: Literal["low", "medium", "high"] = "low"
    frequency: int = 1


class ComponentUsagePattern(ArchbaseModel):
    component: str
    usage_count: int = 0
    common_props: dict[str, int] = Field(default_factory=dict)
    patterns: list[str] = Field(default_factory=list)
    contexts: list[str] = Field(default_factory=list)


class ValidationPattern(ArchbaseModel):
    type: Literal["yup", "zod", "custom"]
    rules: list[str] = Field(default_factory=list)
    frequency: int = 1
    examples: list[str] = Field(default_factory=list)


class PageStructure(ArchbaseModel):
    layout: str
    sections: list[str] = Field(default_factory=list)
    navigation: Literal["present", "absent"] = "absent"
    authentication: bool = False
    frequency: int = 1


class ProjectPattern(ArchbaseModel):
    name: str
    type: Literal["form", "component"]
    frequency: int
    files: list[str] = Field(default_factory=list)
    description: str
    template: str
    parameters: dict[str, Any] = Field(default_factory=dict)
    examples: list[str] = Field(default_factory=list)


class Recommendation(ArchbaseModel):
    type: str  # parameter | template | generator | knowledge
    title: str
    description: str
    priority: Literal["low", "medium", "high"]
    implementation: str
    affected_generators: list[str] | None = None


class ProjectPatternAnalysis(ArchbaseModel):
    patterns: list[ProjectPattern] = Field(default_factory=list)
    data_source_usage: list[DataSourcePattern] = Field(default_factory=list)
    form_patterns: list[FormPattern] = Field(default_factory=list)
    component_usage: list[ComponentUsagePattern] = Field(default_factory=list)
    validation_patterns: list[ValidationPattern] = Field(default_factory=list)
    page_structures: list[PageStructure] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list)
