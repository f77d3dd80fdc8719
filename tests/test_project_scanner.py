"""Tests for ProjectScanner (Archbase component usage across a project)."""

from __future__ import annotations

import json

import pytest

from archbase_cli.analyzers.project_scanner import (
    ProjectScanner,
    ScanOptions,
    aggregate_usage,
    detect_data_source_version,
)
from archbase_cli.exceptions import AnalyzerError


@pytest.fixture
def scan_result(react_project):
    return ProjectScanner().scan_project(ScanOptions(project_path=str(react_project)))


class TestVersionDetection:
    def test_no_value(self):
        assert detect_data_source_version("appendToFieldArray", None) is None

    def test_v2_keywords(self):
        assert detect_data_source_version("<ArchbaseRemoteDataSource />", "ds") == "v2"

    def test_v1_keywords(self):
        assert detect_data_source_version("ds.setFieldValue('a', 1)", "ds") == "v1"

    def test_mixed_is_undecided(self):
        assert detect_data_source_version("appendToFieldArray forceUpdate", "ds") is None


class TestAnalyzeSource:
    def test_only_imported_archbase_components(self):
        source = """\
import { ArchbaseEdit } from '@archbase/react';
export const A = () => (
  <div>
    <ArchbaseEdit dataSource={ds} dataField="name" />
    <ArchbaseSelect dataSource={ds} />
  </div>
);
"""
        usages = ProjectScanner().analyze_source(source, "A.tsx")
        assert [u.name for u in usages] == ["ArchbaseEdit"]
        assert (usages[0].line, usages[0].column) == (4, 4)
        assert usages[0].import_path == "@archbase/react"

    def test_prop_types(self):
        source = """\
import { ArchbaseDataGrid } from 'archbase-react';
export const A = () => <ArchbaseDataGrid dataSource={ds} title="Users" pageSize={25} striped={true} dense />;
"""
        (usage,) = ProjectScanner().analyze_source(source, "A.tsx")
        props = {p.name: (p.type, p.value) for p in usage.props}
        assert props == {
            "dataSource": ("variable", "ds"),
            "title": ("string", "Users"),
            "pageSize": ("number", 25),
            "striped": ("boolean", True),
            "dense": ("unknown", None),
        }

    def test_invalid_source(self):
        assert ProjectScanner().analyze_source("const = <", "Broken.tsx") is None


class TestScanProject:
    def test_missing_project(self, tmp_path):
        with pytest.raises(AnalyzerError):
            ProjectScanner().scan_project(ScanOptions(project_path=str(tmp_path / "nope")))

    def test_components_sorted_and_positioned(self, scan_result):
        assert [(c.file, c.name) for c in scan_result.components] == [
            ("src/forms/UserForm.tsx", "ArchbaseFormTemplate"),
            ("src/forms/UserForm.tsx", "ArchbaseEdit"),
            ("src/forms/UserForm.tsx", "ArchbaseEdit"),
            ("src/pages/UserList.tsx", "ArchbaseDataGrid"),
            ("src/pages/UserList.tsx", "ArchbaseButton"),
        ]
        template = scan_result.components[0]
        assert (template.line, template.column) == (16, 4)

    def test_node_modules_ignored(self, scan_result):
        assert not any("node_modules" in c.file for c in scan_result.components)

    def test_statistics(self, scan_result):
        stats = scan_result.statistics
        assert stats.files_scanned == 3
        assert stats.total_components == 5
        assert stats.v2_components == 2
        assert stats.v1_components == 0
        assert stats.issues_found == 5

    def test_issues(self, scan_result):
        bare_edit = scan_result.components[2]
        assert [i.type for i in bare_edit.issues] == ["error", "warning"]
        assert bare_edit.issues[0].message == "Missing required prop: dataSource"
        assert bare_edit.issues[0].line == bare_edit.line

    def test_usage_aggregate(self, scan_result):
        edit = scan_result.usage_by_component["ArchbaseEdit"]
        assert edit.usage_count == 2
        assert edit.files == ["src/forms/UserForm.tsx"]
        assert edit.prop_usage == {"dataField": 2, "dataSource": 1, "label": 1}

    def test_aggregate_is_order_independent(self, scan_result):
        forward = aggregate_usage(scan_result.components)
        backward = aggregate_usage(list(reversed(scan_result.components)))
        assert forward == backward

    def test_parallel_scan_matches_serial(self, react_project, scan_result):
        parallel = ProjectScanner().scan_project(ScanOptions(project_path=str(react_project), workers=4))
        assert parallel.components == scan_result.components
        assert parallel.statistics == scan_result.statistics

    def test_patterns(self, scan_result):
        assert "form-with-datasource" in scan_result.patterns.detected
        assert scan_result.patterns.recommended == ["crud-with-datagrid"]

    def test_dependencies(self, scan_result):
        deps = scan_result.dependencies
        assert deps.archbase_version == "2.1.0"
        assert deps.react_version == "^18.2.0"
        assert deps.missing_dependencies == ["@mantine/hooks", "@emotion/react", "react-query"]

    def test_migration(self, scan_result):
        assert scan_result.migration.v1_to_v2_candidates == []
        assert scan_result.migration.estimated_effort == "Low"
        assert scan_result.migration.recommendations == ["Add validation feedback to forms"]


class TestReportAndFixes:
    def test_report_written(self, react_project, tmp_path):
        output = tmp_path / "reports" / "scan.json"
        ProjectScanner().scan_project(
            ScanOptions(project_path=str(react_project), generate_report=True, output_path=str(output))
        )
        data = json.loads(output.read_text())
        assert data["summary"]["filesScanned"] == 3
        assert "generatedAt" in data
        assert "Fix 5 component issues found" in data["recommendations"]

    def test_recommendations(self, scan_result):
        assert ProjectScanner.generate_recommendations(scan_result) == [
            "Fix 5 component issues found",
            "Install recommended dependencies for better integration",
            "Implement recommended patterns for better maintainability",
        ]

    def test_auto_fix_counts(self, scan_result):
        outcome = ProjectScanner.auto_fix(scan_result)
        assert outcome.fixed == 3
        assert outcome.skipped == 2
        assert outcome.errors == []
