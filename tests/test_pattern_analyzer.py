"""Tests for ProjectPatternAnalyzer."""

from __future__ import annotations

import json

import pytest

from archbase_cli.analyzers.pattern_analyzer import (
    ProjectPatternAnalyzer,
    component_contexts,
    detect_validation_library,
    form_complexity,
)
from archbase_cli.exceptions import AnalyzerError

V1_FORM = """\
import React from 'react';
import { ArchbaseDataSource, ArchbaseEdit, ArchbaseSelect } from '@archbase/react';

export const OrderForm = ({ ds }) => (
  <div>
    <ArchbaseEdit dataSource={ds} dataField="number" />
    <ArchbaseSelect dataSource={ds} dataField="status" />
  </div>
);
"""


class TestHelpers:
    def test_validation_library(self):
        assert detect_validation_library("import * as yup from 'yup'") == "yup"
        assert detect_validation_library("const s = z.object({})") == "zod"
        assert detect_validation_library("function validate() {}") == "custom"
        assert detect_validation_library("const a = 1") == "none"

    @pytest.mark.parametrize("count,expected", [(1, "low"), (2, "low"), (3, "medium"), (5, "medium"), (6, "high")])
    def test_form_complexity(self, count, expected):
        assert form_complexity(count) == expected

    def test_contexts(self):
        assert component_contexts("src/admin/forms/UserForm.tsx") == ["forms", "admin"]


class TestProjectPatternAnalyzer:
    def test_missing_project(self, tmp_path):
        with pytest.raises(AnalyzerError):
            ProjectPatternAnalyzer(tmp_path / "nope").analyze_project()

    def test_component_usage(self, react_project):
        result = ProjectPatternAnalyzer(react_project).analyze_project()
        usage = {u.component: u for u in result.component_usage}
        assert usage["ArchbaseEdit"].usage_count == 2
        assert usage["ArchbaseEdit"].common_props["dataField"] == 2
        assert usage["ArchbaseEdit"].contexts == ["forms"]
        assert usage["ArchbaseEdit"].patterns == ["stateful", "with-effects"]
        assert "ArchbaseDataGrid" in usage

    def test_data_source_and_forms(self, react_project):
        result = ProjectPatternAnalyzer(react_project).analyze_project()
        (ds,) = result.data_source_usage
        assert ds.component == "ArchbaseRemoteDataSource"
        assert ds.version == "mixed"
        assert ds.patterns == ["array-field-management"]
        assert ds.files == ["src/forms/UserForm.tsx"]

        (form,) = result.form_patterns
        assert form.validation_library == "yup"
        assert form.field_types == ["text"]

        (validation,) = result.validation_patterns
        assert validation.type == "yup"
        assert validation.rules == ["required"]

    def test_v1_only_recommends_v2(self, tmp_path):
        (tmp_path / "OrderForm.tsx").write_text(V1_FORM, encoding="utf-8")
        result = ProjectPatternAnalyzer(tmp_path).analyze_project()
        assert [d.version for d in result.data_source_usage] == ["v1"]
        assert [r.title for r in result.recommendations] == ["Add DataSource V2 support"]

    def test_frequent_forms_become_patterns(self, tmp_path):
        for name in ("OrderForm", "InvoiceForm"):
            (tmp_path / f"{name}.tsx").write_text(V1_FORM.replace("OrderForm", name), encoding="utf-8")
        result = ProjectPatternAnalyzer(tmp_path).analyze_project()
        form_patterns = [p for p in result.patterns if p.type == "form"]
        assert [p.name for p in form_patterns] == ["form-none-vertical"]
        assert form_patterns[0].frequency == 2

    def test_export(self, react_project, tmp_path):
        analyzer = ProjectPatternAnalyzer(react_project)
        path = analyzer.export_analysis(analyzer.analyze_project(), tmp_path / "out" / "patterns.json")
        data = json.loads(path.read_text())
        assert "dataSourceUsage" in data
        assert "componentUsage" in data
