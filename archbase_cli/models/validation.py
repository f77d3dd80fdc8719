"""Code validation records: errors, best-practice warnings and metrics."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from archbase_cli.models.base import ArchbaseModel


class ValidationIssue(ArchbaseModel):
    type: Literal["syntax", "import", "type", "structure"]
    message: str
    severity: Literal["error", "warning"] = "error"
    file: str | None = None
    line: int | None = None
    column: int | None = None


class ValidationWarning(ArchbaseModel):
    type: Literal["best-practice", "performance", "accessibility", "security"] = "best-practice"
    message: str
    suggestion: str | None = None
    file: str | None = None
    line: int | None = None


class CodeMetrics(ArchbaseModel):
    lines_of_code: int = 0
    complexity: int = 0
    component_count: int = 0
    hook_count: int = 0
    import_count: int = 0
    has_tests: bool = False
    has_typescript: bool = Field(default=False, alias="hasTypeScript")

    def merge(self, other: CodeMetrics) -> None:
        self.lines_of_code += other.lines_of_code
        self.complexity += other.complexity
        self.component_count += other.component_count
        self.hook_count += other.hook_count
        self.import_count += other.import_count
        self.has_tests = self.has_tests or other.has_tests
        self.has_typescript = self.has_typescript or other.has_typescript


class ValidationResult(ArchbaseModel):
    is_valid: bool = True
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationWarning] = Field(default_factory=list)
    metrics: CodeMetrics = Field(default_factory=CodeMetrics)

    def settle(self) -> ValidationResult:
        """Recompute ``is_valid`` from error severities."""
        self.is_valid = not any(e.severity == "error" for e in self.errors)
        return self
