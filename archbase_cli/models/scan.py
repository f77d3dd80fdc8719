"""Project scan records: Archbase component usages and their aggregates."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from archbase_cli.models.base import ArchbaseModel

IssueType = Literal["warning", "error", "suggestion"]


class ComponentIssue(ArchbaseModel):
    type: IssueType
    message: str
    fix: str | None = None
    line: int | None = None
    column: int | None = None


class UsageProp(ArchbaseModel):
    name: str
    type: str  # string | boolean | number | variable | unknown
    value: Any = None


class ComponentUsage(ArchbaseModel):
    """One JSX occurrence of an Archbase component."""

    name: str
    import_path: str
    props: list[UsageProp] = Field(default_factory=list)
    file: str
    line: int  # 1-based
    column: int  # 0-based
    has_data_source: bool = False
    data_source_version: Literal["v1", "v2"] | None = None
    patterns: list[str] = Field(default_factory=list)
    issues: list[ComponentIssue] = Field(default_factory=list)


class ComponentStats(ArchbaseModel):
    """Aggregate of every usage of one component across the project."""

    name: str
    usage_count: int = 0
    files: list[str] = Field(default_factory=list)
    prop_usage: dict[str, int] = Field(default_factory=dict)


class ScanStatistics(ArchbaseModel):
    total_components: int = 0
    archbase_components: int = 0
    v1_components: int = 0
    v2_components: int = 0
    files_scanned: int = 0
    issues_found: int = 0


class PatternSummary(ArchbaseModel):
    detected: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    recommended: list[str] = Field(default_factory=list)


class MigrationSummary(ArchbaseModel):
    v1_to_v2_candidates: list[ComponentUsage] = Field(default_factory=list)
    estimated_effort: Literal["Low", "Medium", "High"] = "Low"
    recommendations: list[str] = Field(default_factory=list)


class OutdatedDependency(ArchbaseModel):
    name: str
    current: str
    latest: str


class DependencyReport(ArchbaseModel):
    archbase_version: str | None = None
    react_version: str | None = None
    missing_dependencies: list[str] = Field(default_factory=list)
    outdated_dependencies: list[OutdatedDependency] = Field(default_factory=list)


class ProjectScanResult(ArchbaseModel):
    components: list[ComponentUsage] = Field(default_factory=list)
    usage_by_component: dict[str, ComponentStats] = Field(default_factory=dict)
    statistics: ScanStatistics = Field(default_factory=ScanStatistics)
    patterns: PatternSummary = Field(default_factory=PatternSummary)
    migration: MigrationSummary = Field(default_factory=MigrationSummary)
    dependencies: DependencyReport = Field(default_factory=DependencyReport)


class ScanReport(ArchbaseModel):
    """The on-disk report written by ``ProjectScanner.generate_report``."""

    generated_at: str
    summary: ScanStatistics
    components: list[ComponentUsage] = Field(default_factory=list)
    usage_by_component: dict[str, ComponentStats] = Field(default_factory=dict)
    patterns: PatternSummary
    migration: MigrationSummary
    dependencies: DependencyReport
    recommendations: list[str] = Field(default_factory=list)


class AutoFixResult(ArchbaseModel):
    fixed: int = 0
    skipped: int = 0
    errors: list[str] = Field(default_factory=list)
