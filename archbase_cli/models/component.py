"""Per-file React component facts."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from archbase_cli.models.base import ArchbaseModel

DataSourceVersion = Literal["v1", "v2", "unknown"]
Complexity = Literal["low", "medium", "high"]


class PropDefinition(ArchbaseModel):
    name: str
    type: str
    required: bool
    description: str | None = None
    default_value: Any = None


class ImportInfo(ArchbaseModel):
    source: str
    specifiers: list[str] = Field(default_factory=list)
    is_default: bool = False


class DataSourceUsage(ArchbaseModel):
    has_data_source: bool = False
    version: DataSourceVersion = "unknown"
    fields: list[str] = Field(default_factory=list)


class ComponentAnalysis(ArchbaseModel):
    """Facts extracted from one source file."""

    name: str
    file_path: str
    props: list[PropDefinition] = Field(default_factory=list)
    imports: list[ImportInfo] = Field(default_factory=list)
    data_source_usage: DataSourceUsage = Field(default_factory=DataSourceUsage)
    complexity: Complexity = "low"
    hooks: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
