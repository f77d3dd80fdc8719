"""Tests for DocumentationAnalyzer."""

from __future__ import annotations

import pytest

from archbase_cli.analyzers.documentation_analyzer import (
    DocumentationAnalyzer,
    assess_complexity,
    categorize,
    detect_version_from_example,
)
from archbase_cli.exceptions import AnalyzerError

DATASOURCE_V2_DOC = """\
# DataSource V2

DataSource V2 introduces reactive array fields.

### `appendToFieldArray`
Appends an item to an array field.
Param: fieldName
Returns: void

```tsx
dataSource.appendToFieldArray('items', item);
```

Best practice: bind ArchbaseEdit to a dataSource instead of local state.

## Migration from V1
1. Replace ArchbaseDataSource with ArchbaseRemoteDataSource
2. Use appendToFieldArray for arrays
"""


@pytest.fixture
def docs_dir(tmp_path):
    (tmp_path / "guides").mkdir()
    (tmp_path / "guides" / "datasource-v2.md").write_text(DATASOURCE_V2_DOC, encoding="utf-8")
    (tmp_path / "README.txt").write_text("not markdown", encoding="utf-8")
    return tmp_path


class TestHelpers:
    def test_categorize(self):
        assert categorize("forms/basic.md") == "forms"
        assert categorize("datasource/v2.md") == "datasource"
        assert categorize("intro.md") == "general"

    def test_version_from_example(self):
        assert detect_version_from_example("ds.appendToFieldArray('a', 1)") == "v2"
        assert detect_version_from_example("<ArchbaseEdit dataSource={ds} dataField='a' />") == "v1"
        assert detect_version_from_example("const a = 1;") == "both"

    def test_complexity(self):
        assert assess_complexity("const a = 1;") == "low"
        assert assess_complexity("yup.string()") == "medium"
        assert assess_complexity("\n" * 40) == "high"


class TestDocumentationAnalyzer:
    def test_missing_dir(self, tmp_path):
        with pytest.raises(AnalyzerError):
            DocumentationAnalyzer(tmp_path / "nope").analyze_documentation()

    def test_data_source_v2(self, docs_dir):
        result = DocumentationAnalyzer(docs_dir).analyze_documentation()
        assert "reactive array fields." in result.data_source_v2.new_features
        assert "appendToFieldArray" in result.data_source_v2.new_methods

    def test_api_reference(self, docs_dir):
        result = DocumentationAnalyzer(docs_dir).analyze_documentation()
        (ref,) = result.api_reference
        assert ref.method == "appendToFieldArray"
        assert ref.parameters == ["fieldName"]
        assert ref.return_type == "void"
        assert ref.version == "v2"
        assert ref.examples == ["dataSource.appendToFieldArray('items', item);"]

    def test_code_examples(self, docs_dir):
        result = DocumentationAnalyzer(docs_dir).analyze_documentation()
        (example,) = result.code_examples
        assert example.language == "tsx"
        assert example.data_source_features == ["array-field-management"]

    def test_best_practices(self, docs_dir):
        result = DocumentationAnalyzer(docs_dir).analyze_documentation()
        (practice,) = result.best_practices
        assert practice.category == "datasource"
        assert practice.related_components == ["ArchbaseEdit"]

    def test_migration_guide(self, docs_dir):
        result = DocumentationAnalyzer(docs_dir).analyze_documentation()
        (guide,) = result.migration_guides
        assert guide.description == "Migration from V1"
        assert guide.steps == [
            "Replace ArchbaseDataSource with ArchbaseRemoteDataSource",
            "Use appendToFieldArray for arrays",
        ]

    def test_recommendations(self, docs_dir):
        result = DocumentationAnalyzer(docs_dir).analyze_documentation()
        assert [r.type for r in result.recommendations] == ["parameter", "template", "generator"]

    def test_export_uses_from_alias(self, docs_dir, tmp_path):
        analyzer = DocumentationAnalyzer(docs_dir)
        path = analyzer.export_analysis(analyzer.analyze_documentation(), tmp_path / "docs.json")
        text = path.read_text()
        assert '"from": "DataSource V1"' in text
        assert '"migrationGuides"' in text
