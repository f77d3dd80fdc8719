"""Documentation mining records."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from archbase_cli.models.base import ArchbaseModel
from archbase_cli.models.patterns import Recommendation

ApiVersion = Literal["v1", "v2", "both"]


class DataSourceV2Content(ArchbaseModel):
    new_features: list[str] = Field(default_factory=list)
    new_methods: list[str] = Field(default_factory=list)
    migration_patterns: list[str] = Field(default_factory=list)
    usage_examples: list[str] = Field(default_factory=list)
    performance_improvements: list[str] = Field(default_factory=list)
    breaking_changes: list[str] = Field(default_factory=list)


class CodeExample(ArchbaseModel):
    title: str
    description: str = ""
    code: str
    language: str
    tags: list[str] = Field(default_factory=list)
    data_source_features: list[str] = Field(default_factory=list)


class ApiReference(ArchbaseModel):
    method: str
    component: str = "DataSource"
    description: str = ""
    parameters: list[str] = Field(default_factory=list)
    return_type: str = "void"
    version: ApiVersion = "both"
    examples: list[str] = Field(default_factory=list)


class BestPractice(ArchbaseModel):
    category: str
    title: str
    description: str
    related_components: list[str] = Field(default_factory=list)


class MigrationGuide(ArchbaseModel):
    from_: str = Field(default="DataSource V1", alias="from")
    to: str = "DataSource V2"
    description: str
    steps: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)


class DocComponentPattern(ArchbaseModel):
    component: str
    pattern: str
    description: str = ""
    code_example: str = ""
    data_source_version: ApiVersion = "both"
    complexity: Literal["low", "medium", "high"] = "low"


class DocumentationAnalysis(ArchbaseModel):
    data_source_v2: DataSourceV2Content = Field(default_factory=DataSourceV2Content)
    component_patterns: list[DocComponentPattern] = Field(default_factory=list)
    code_examples: list[CodeExample] = Field(default_factory=list)
    api_reference: list[ApiReference] = Field(default_factory=list)
    best_practices: list[BestPractice] = Field(default_factory=list)
    migration_guides: list[MigrationGuide] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list)
