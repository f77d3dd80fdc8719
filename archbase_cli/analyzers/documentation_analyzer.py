"""Mines Archbase Markdown documentation.

Everything is keyword/regex driven. English and Portuguese phrasings are
both recognised since the upstream docs mix them.
"""

from __future__ import annotations

import re
from pathlib import Path

import structlog

from archbase_cli.analyzers.files import find_files
from archbase_cli.exceptions import AnalyzerError
from archbase_cli.models.base import export_json
from archbase_cli.models.docs import (
    ApiReference,
    ApiVersion,
    BestPractice,
    CodeExample,
    DocComponentPattern,
    DocumentationAnalysis,
    MigrationGuide,
)
from archbase_cli.models.patterns import Recommendation

log = structlog.get_logger("archbase_cli.analyzers")

_FEATURE_RES = [
    re.compile(r"(?:new feature|nova funcionalidade|novo recurso)[:\s]*(.+)", re.I),
    re.compile(r"(?:introduces|introduz)[:\s]*(.+)", re.I),
    re.compile(r"(?:added|adicionado)[:\s]*(.+)", re.I),
]
_METHOD_RES = [
    re.compile(r"(?:```\w*\s*)?(\w+(?:To|From|Field|Array)\w*)\s*\("),
    re.compile(r"(?:`|\*\*)?(\w+(?:To|From|Field|Array)\w*)\s*\("),
    re.compile(r"(?:método|method)[:\s]*`?(\w+)`?", re.I),
]
_PERFORMANCE_KEYWORDS = [
    "performance", "performante", "otimização", "optimization",
    "faster", "mais rápido", "efficiency", "eficiência",
]  # fmt: skip
_BREAKING_RES = [
    re.compile(r"(?:breaking change|mudança que quebra|alteração incompatível)[:\s]*(.+)", re.I),
    re.compile(r"(?:deprecated|depreciado|obsoleto)[:\s]*(.+)", re.I),
    re.compile(r"(?:removed|removido)[:\s]*(.+)", re.I),
]
_PRACTICE_RES = [
    re.compile(r"(?:best practice|boa prática|recomendação|recommendation)[:\s]*(.+)", re.I),
    re.compile(r"(?:✅|👍|✓)[:\s]*(.+)", re.I),
    re.compile(r"(?:❌|👎|✗)[:\s]*(.+)", re.I),
]
_MIGRATION_KEYWORDS = ["migration", "migração", "upgrade", "atualização", "v1 to v2", "v1 para v2"]
_BENEFIT_KEYWORDS = ["benefit", "vantagem", "improvement", "melhoria"]

_CODE_BLOCK_RE = re.compile(r"```(\w+)?\s*\n([\s\S]*?)\n```")
_ANY_CODE_BLOCK_RE = re.compile(r"```\w*\s*\n([\s\S]*?)\n```")
_API_HEADING_RE = re.compile(
    r"(?:###|##|\*\*)\s*`?(\w+(?:To|From|Field|Array)\w*)`?\s*(?:\([^)]*\))?\s*(?:###|##|\*\*)?"
)
_PARAM_RE = re.compile(r"(?:param|parameter|parâmetro)[:\s]*`?(\w+)`?", re.I)
_RETURN_RE = re.compile(r"(?:returns?|retorna)[:\s]*`?([^`\n]+)`?", re.I)
_SECTION_SPLIT_RE = re.compile(r"(?:###|##)\s*")
_STEP_RE = re.compile(r"(?:\d+\.|•|\*)\s*(.+)")
_PATTERN_RE = re.compile(r"(?:pattern|padrão)[:\s]*(.+)", re.I)
_COMPONENT_NAME_RE = re.compile(r"Archbase\w+")
_MARKUP_RE = re.compile(r"[*_`]")

CODE_LANGUAGES = {"typescript", "javascript", "tsx", "jsx", "ts", "js"}
DATASOURCE_METHODS = [
    "appendToFieldArray", "removeFromFieldArray", "moveInFieldArray",
    "fieldByName", "getFieldValue", "setFieldValue",
    "search", "sort", "filter", "paginate",
    "createDataSource", "useArchbaseDataSource",
]  # fmt: skip
V2_ONLY_METHODS = {"appendToFieldArray", "removeFromFieldArray", "moveInFieldArray"}
CODE_FEATURES = [
    ("appendToFieldArray", "array-field-management"),
    ("removeFromFieldArray", "array-field-management"),
    ("fieldByName", "field-access"),
    ("search(", "search"),
    ("sort(", "sorting"),
    ("filter(", "filtering"),
    ("pagination", "pagination"),
    ("useArchbaseDataSource", "hook-usage"),
    ("createDataSource", "factory-pattern"),
]


def is_data_source_method(method: str) -> bool:
    lowered = method.lower()
    return any(m.lower() in lowered for m in DATASOURCE_METHODS) or "DataSource" in method


def detect_data_source_features(code: str) -> list[str]:
    features: list[str] = []
    for needle, feature in CODE_FEATURES:
        if needle in code:
            features.append(feature)
    return features


def detect_code_tags(code: str, file: str) -> list[str]:
    tags: list[str] = []
    if "Form" in code:
        tags.append("form")
    if "Table" in code:
        tags.append("table")
    if "Edit" in code or "Input" in code:
        tags.append("input")
    if "Select" in code:
        tags.append("select")
    if "validation" in code:
        tags.append("validation")
    if "yup" in code or "zod" in code:
        tags.append("validation")
    if "dashboard" in file:
        tags.append("dashboard")
    if "admin" in file:
        tags.append("admin")
    return tags


def categorize(file: str) -> str:
    for needle, category in (
        ("form", "forms"),
        ("table", "tables"),
        ("datasource", "datasource"),
        ("component", "components"),
    ):
        if needle in file:
            return category
    return "general"


def assess_complexity(code: str) -> str:
    lines = len(code.split("\n"))
    has_hooks = "use" in code
    has_validation = any(k in code for k in ("validation", "yup", "zod"))
    many_components = len(_COMPONENT_NAME_RE.findall(code)) > 3
    if lines > 30 or (has_hooks and has_validation and many_components):
        return "high"
    if lines > 15 or has_validation or many_components:
        return "medium"
    return "low"


def detect_version_from_example(code: str) -> ApiVersion:
    if "appendToFieldArray" in code or "removeFromFieldArray" in code:
        return "v2"
    if "dataSource" in code and "dataField" in code:
        return "v2" if "V2" in code else "v1"
    return "both"


def _sentences_with(keyword: str, text: str) -> list[str]:
    regex = re.compile(rf"([^.]*{re.escape(keyword)}[^.]*\.?)", re.I)
    return [m.group(1).strip() for m in regex.finditer(text) if m.group(1)]


def _dedupe(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


class DocumentationAnalyzer:
    def __init__(self, docs_path: str | Path) -> None:
        self.docs_path = Path(docs_path)

    def analyze_documentation(self) -> DocumentationAnalysis:
        if not self.docs_path.is_dir():
            raise AnalyzerError(f"Documentation path not found: {self.docs_path}")

        result = DocumentationAnalysis()
        files = find_files(self.docs_path, ["**/*.md"], ["node_modules/**", "**/node_modules/**"])
        log.info("docs.started", root=str(self.docs_path), files=len(files))

        for path in files:
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                log.warning("docs.file_skipped", file=str(path), error=str(exc))
                continue
            rel = path.relative_to(self.docs_path).as_posix()
            log.debug("docs.analyzing", file=rel)
            self.analyze_content(content, rel, result)

        self._process(result)
        self._recommend(result)
        return result

    def analyze_content(self, content: str, file: str, result: DocumentationAnalysis) -> None:
        self._data_source_v2(content, result)
        self._code_examples(content, file, result)
        self._api_references(content, result)
        self._best_practices(content, file, result)
        self._migration_guides(content, result)
        self._component_patterns(content, file, result)

    def export_analysis(self, result: DocumentationAnalysis, output_path: str | Path) -> Path:
        path = export_json(result, output_path)
        log.info("docs.exported", path=str(path))
        return path

    # ── extractors ───────────────────────────────────────────────────────

    @staticmethod
    def _data_source_v2(content: str, result: DocumentationAnalysis) -> None:
        lowered = content.lower()
        if not ("datasource v2" in lowered or "datasourcev2" in lowered or "ArchbaseDataSourceV2" in content):
            return
        v2 = result.data_source_v2
        for regex in _FEATURE_RES:
            v2.new_features.extend(m.group(1).strip() for m in regex.finditer(content) if m.group(1).strip())
        for regex in _METHOD_RES:
            v2.new_methods.extend(
                m.group(1) for m in regex.finditer(content) if m.group(1) and is_data_source_method(m.group(1))
            )
        for keyword in _PERFORMANCE_KEYWORDS:
            v2.performance_improvements.extend(_sentences_with(keyword, content))
        for regex in _BREAKING_RES:
            v2.breaking_changes.extend(m.group(1).strip() for m in regex.finditer(content) if m.group(1))

    @staticmethod
    def _code_examples(content: str, file: str, result: DocumentationAnalysis) -> None:
        for match in _CODE_BLOCK_RE.finditer(content):
            language = match.group(1) or "javascript"
            code = match.group(2)
            if language not in CODE_LANGUAGES:
                continue
            features = detect_data_source_features(code)
            if not features and "Archbase" not in code:
                continue

            before = content[: match.start()].split("\n")
            title_line = before[-1] or (before[-2] if len(before) > 1 else "")
            title = re.sub(r"[#*`_]", "", title_line).strip()
            result.code_examples.append(
                CodeExample(
                    title=title or "Code example",
                    description=_description_before(before),
                    code=code.strip(),
                    language=language,
                    tags=detect_code_tags(code, file),
                    data_source_features=features,
                )
            )

    @staticmethod
    def _api_references(content: str, result: DocumentationAnalysis) -> None:
        for match in _API_HEADING_RE.finditer(content):
            method = match.group(1)
            if not is_data_source_method(method):
                continue
            after = content[match.end() :]
            returns = _RETURN_RE.search(after)
            result.api_reference.append(
                ApiReference(
                    method=method,
                    description=_method_description(after),
                    parameters=[m.group(1) for m in _PARAM_RE.finditer(after)],
                    return_type=returns.group(1).strip() if returns else "void",
                    version=_api_version(content, method),
                    examples=[m.group(1).strip() for m in _ANY_CODE_BLOCK_RE.finditer(after[:1000])],
                )
            )

    @staticmethod
    def _best_practices(content: str, file: str, result: DocumentationAnalysis) -> None:
        for regex in _PRACTICE_RES:
            for match in regex.finditer(content):
                text = match.group(1)
                if not text:
                    continue
                result.best_practices.append(
                    BestPractice(
                        category=categorize(file),
                        title="Recommended practice",
                        description=text.strip(),
                        related_components=_dedupe(_COMPONENT_NAME_RE.findall(text)),
                    )
                )

    @staticmethod
    def _migration_guides(content: str, result: DocumentationAnalysis) -> None:
        lowered = content.lower()
        seen = {g.description for g in result.migration_guides}
        for keyword in _MIGRATION_KEYWORDS:
            if keyword not in lowered:
                continue
            for section in _SECTION_SPLIT_RE.split(content):
                if keyword not in section.lower():
                    continue
                title = section.split("\n")[0] or "Migration guide"
                steps = [m.group(1).strip() for m in _STEP_RE.finditer(section) if m.group(1)]
                if not steps or title in seen:
                    continue
                seen.add(title)
                benefits = [s for k in _BENEFIT_KEYWORDS for s in _sentences_with(k, section)]
                result.migration_guides.append(MigrationGuide(description=title, steps=steps, benefits=benefits))

    @staticmethod
    def _component_patterns(content: str, file: str, result: DocumentationAnalysis) -> None:
        stem = Path(file).stem
        component = stem if stem.startswith("Archbase") else "General"
        for match in _PATTERN_RE.finditer(content):
            if not match.group(1):
                continue
            tail = content[match.start() :]
            block = _ANY_CODE_BLOCK_RE.search(tail)
            code = block.group(1).strip() if block else ""
            result.component_patterns.append(
                DocComponentPattern(
                    component=component,
                    pattern=match.group(1).strip(),
                    description=_description_after(tail),
                    code_example=code,
                    data_source_version=detect_version_from_example(code),
                    complexity=assess_complexity(code),
                )
            )

    # ── post-processing ──────────────────────────────────────────────────

    @staticmethod
    def _process(result: DocumentationAnalysis) -> None:
        v2 = result.data_source_v2
        v2.new_features = _dedupe(v2.new_features)
        v2.new_methods = _dedupe(v2.new_methods)
        result.code_examples.sort(key=lambda e: len(e.data_source_features), reverse=True)
        result.api_reference.sort(key=lambda r: r.method)

    @staticmethod
    def _recommend(result: DocumentationAnalysis) -> None:
        recs = result.recommendations
        if result.data_source_v2.new_features:
            recs.append(
                Recommendation(
                    type="parameter",
                    title="Add a --datasource-version option",
                    description="Let code generation choose between DataSource V1 and V2",
                    implementation="Add --datasource-version=v1|v2 to every generator",
                    priority="high",
                    affected_generators=["form", "view", "component"],
                )
            )
        if any("Array" in m for m in result.data_source_v2.new_methods):
            recs.append(
                Recommendation(
                    type="template",
                    title="Array management template",
                    description="Create a template for components that manage arrays of data",
                    implementation="Template using appendToFieldArray, removeFromFieldArray, moveInFieldArray",
                    priority="medium",
                    affected_generators=["form", "component"],
                )
            )
        if result.migration_guides:
            recs.append(
                Recommendation(
                    type="generator",
                    title="V1 to V2 migration generator",
                    description="Add a command that migrates existing DataSource V1 code to V2",
                    implementation="archbase migrate datasource --from=v1 --to=v2",
                    priority="medium",
                    affected_generators=["migrate"],
                )
            )
        if result.component_patterns:
            recs.append(
                Recommendation(
                    type="knowledge",
                    title="Update the knowledge base",
                    description="Add the patterns extracted from the documentation to the knowledge base",
                    implementation="Import patterns, examples and best practices into the CLI",
                    priority="high",
                    affected_generators=["knowledge"],
                )
            )


def _description_before(lines: list[str]) -> str:
    for line in reversed(lines[-5:]):
        text = line.strip()
        if text and not text.startswith(("#", "```")) and len(text) > 20:
            return _MARKUP_RE.sub("", text)
    return ""


def _description_after(tail: str) -> str:
    for line in tail.split("\n")[1:5]:
        text = line.strip()
        if text and not text.startswith("#") and len(text) > 10:
            return _MARKUP_RE.sub("", text)
    return ""


def _method_description(after: str) -> str:
    parts: list[str] = []
    for line in after.split("\n"):
        text = line.strip()
        if not text or text.startswith(("#", "```")):
            break
        parts.append(text)
    return _MARKUP_RE.sub("", " ".join(parts))


def _api_version(content: str, method: str) -> ApiVersion:
    index = content.find(method)
    context = content[max(0, index - 500) : index + 500] if index != -1 else ""
    if "v2" in context or "V2" in context:
        return "v2"
    if "v1" in context or "V1" in context:
        return "v1"
    if method in V2_ONLY_METHODS:
        return "v2"
    return "both"
