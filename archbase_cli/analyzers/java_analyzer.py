"""Java controller analyzer — line/regex based Spring controller parsing.

Not a Java grammar: signatures are recognised line by line. A signature
whose parentheses are not balanced on its first line is joined with the
following lines until they are. Annotation lines directly above a method
are attached to it. Lines that do not look like a method are skipped.
"""

from __future__ import annotations

import re
from pathlib import Path

import structlog

from archbase_cli.exceptions import AnalyzerError
from archbase_cli.models.java import (
    JavaAnnotation,
    JavaControllerAnalysis,
    JavaMethod,
    JavaParameter,
)

log = structlog.get_logger("archbase_cli.analyzers")

_CLASS_RE = re.compile(r"class\s+(\w+)")
_BASE_MAPPING_RE = re.compile(r"@RequestMapping\s*\(\s*[\"']([^\"']+)[\"']\s*\)")
_VISIBILITY_RE = re.compile(r"\b(?:public|protected|private)\b")
_TYPE_DECLARATION_RE = re.compile(r"\b(?:class|interface|enum)\b")
_STATEMENT_KEYWORDS = frozenset(
    {"return", "throw", "new", "else", "if", "for", "while", "do", "switch", "case", "try", "catch"}
)
_METHOD_RE = re.compile(
    r"^(?:(public|protected|private)\s+)?"
    r"((?:(?:static|final|abstract|synchronized|default)\s+)*)"
    r"([\w.]+(?:<[\w\s,.<>?\[\]]+>)?(?:\[\])?)\s+"
    r"(\w+)\s*\("
)
_ANNOTATION_RE = re.compile(r"@(\w+)(?:\s*\(([^)]*)\))?")
_PARAM_ANNOTATION_RE = re.compile(r"(@\w+(?:\s*\([^)]*\))?)")
_ATTRIBUTE_RE = re.compile(r"(\w+)\s*=\s*[\"']?([^\"',]+)[\"']?")
_FINAL_RE = re.compile(r"\bfinal\s+")

_QUALIFIED_TYPES = {
    "java.lang.String": "String",
    "java.lang.Integer": "Integer",
    "java.lang.Long": "Long",
    "java.lang.Boolean": "Boolean",
    "java.util.List": "List",
    "java.util.Set": "Set",
    "java.util.Map": "Map",
    "java.util.Date": "Date",
    "java.time.LocalDate": "LocalDate",
    "java.time.LocalDateTime": "LocalDateTime",
}


def load_java_source(source_or_path: str) -> str:
    """Treat *source_or_path* as a file path when such a file exists, else as source text.

    A single-line argument ending in ``.java`` that names no file is an error.
    """
    candidate = source_or_path.strip()
    if "\n" not in candidate and len(candidate) < 4096:
        path = Path(candidate)
        try:
            if path.is_file():
                return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise AnalyzerError(f"Cannot read Java source {candidate}: {exc}") from exc
        if candidate.endswith(".java"):
            raise AnalyzerError(f"Java source file not found: {candidate}")
    return source_or_path


def paren_balance(text: str) -> int:
    return text.count("(") - text.count(")")


def split_top_level(text: str, sep: str = ",") -> list[str]:
    """Split on *sep* outside ``<>`` and ``()`` nesting."""
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    for char in text:
        if char in "<(":
            depth += 1
        elif char in ">)":
            depth -= 1
        elif char == sep and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return parts


def normalize_type(java_type: str) -> str:
    java_type = _FINAL_RE.sub("", java_type)
    for qualified, short in _QUALIFIED_TYPES.items():
        java_type = java_type.replace(qualified, short)
    return java_type.strip()


def parse_annotations(text: str) -> list[JavaAnnotation]:
    annotations: list[JavaAnnotation] = []
    for match in _ANNOTATION_RE.finditer(text):
        annotation = JavaAnnotation(name=match.group(1))
        raw = (match.group(2) or "").strip()
        if raw.startswith(('"', "'")):
            annotation.value = raw.replace('"', "").replace("'", "")
        elif "=" in raw:
            annotation.attributes = {m.group(1): m.group(2) for m in _ATTRIBUTE_RE.finditer(raw)}
        elif raw.startswith("{"):
            first = raw.strip("{}").split(",")[0].strip()
            annotation.value = first.replace('"', "").replace("'", "")
        annotations.append(annotation)
    return annotations


def parse_parameters(params: str) -> list[JavaParameter]:
    parameters: list[JavaParameter] = []
    for raw in split_top_level(params):
        found = _PARAM_ANNOTATION_RE.findall(raw)
        annotations = [a for text in found for a in parse_annotations(text)[:1]]
        clean = raw
        for text in found:
            clean = clean.replace(text, "", 1)
        parts = clean.split()
        if len(parts) < 2:
            continue
        parameters.append(
            JavaParameter(
                name=parts[-1],
                type=normalize_type(" ".join(parts[:-1])),
                annotations=annotations,
            )
        )
    return parameters


def _split_leading_annotations(text: str) -> tuple[str, str]:
    """Separate ``@A(...) @B`` prefixes from the rest of a signature."""
    pos = 0
    while True:
        while pos < len(text) and text[pos].isspace():
            pos += 1
        match = re.match(r"@\w+", text[pos:])
        if match is None:
            break
        pos += match.end()
        rest = text[pos:]
        stripped = rest.lstrip()
        if stripped.startswith("("):
            start = pos + (len(rest) - len(stripped))
            depth = 0
            for i in range(start, len(text)):
                if text[i] == "(":
                    depth += 1
                elif text[i] == ")":
                    depth -= 1
                    if depth == 0:
                        pos = i + 1
                        break
            else:
                pos = len(text)
    return text[:pos].strip(), text[pos:].strip()


def _parameter_text(signature: str, open_index: int) -> str:
    depth = 0
    for i in range(open_index, len(signature)):
        if signature[i] == "(":
            depth += 1
        elif signature[i] == ")":
            depth -= 1
            if depth == 0:
                return signature[open_index + 1 : i]
    return signature[open_index + 1 :]


def _is_comment(line: str) -> bool:
    return line.startswith(("//", "/*", "*"))


class JavaControllerAnalyzer:
    """Extract class name, base mapping and methods from a Spring controller."""

    def analyze(self, source: str) -> JavaControllerAnalysis:
        class_match = _CLASS_RE.search(source)
        class_name = class_match.group(1) if class_match else ""
        mapping_match = _BASE_MAPPING_RE.search(source)
        analysis = JavaControllerAnalysis(
            class_name=class_name,
            base_mapping=mapping_match.group(1) if mapping_match else None,
        )

        lines = [line.strip() for line in source.splitlines()]
        pending: list[str] = []
        i = 0
        while i < len(lines):
            line = lines[i]
            if not line or _is_comment(line):
                i += 1
                continue

            if line.startswith("@"):
                annotation = line
                # multi-line annotation arguments
                while paren_balance(annotation) > 0 and i + 1 < len(lines):
                    i += 1
                    annotation += " " + lines[i]
                head, rest = _split_leading_annotations(annotation)
                pending.append(head)
                if not rest:
                    i += 1
                    continue
                line = rest

            if _VISIBILITY_RE.search(line) and "(" in line and not _TYPE_DECLARATION_RE.search(line):
                signature = line
                while paren_balance(signature) > 0 and i + 1 < len(lines):
                    i += 1
                    signature += " " + lines[i]
                method = self._parse_method(signature, pending, class_name)
                if method is not None:
                    analysis.methods.append(method)

            pending = []
            i += 1

        log.debug(
            "java.controller_parsed",
            class_name=analysis.class_name,
            methods=len(analysis.methods),
        )
        return analysis

    def analyze_file(self, path: str | Path) -> JavaControllerAnalysis:
        try:
            source = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise AnalyzerError(f"Cannot read Java source {path}: {exc}") from exc
        return self.analyze(source)

    @staticmethod
    def _parse_method(signature: str, pending: list[str], class_name: str) -> JavaMethod | None:
        inline_annotations, body = _split_leading_annotations(signature)
        match = _METHOD_RE.match(body)
        if match is None:
            return None
        visibility, extra, return_type, name = match.groups()
        if return_type in _STATEMENT_KEYWORDS:
            return None
        if name == class_name:
            return None  # constructor

        annotation_text = " ".join(pending + [inline_annotations])
        modifiers = [visibility or "public"] + extra.split()
        return JavaMethod(
            name=name,
            return_type=return_type,
            parameters=parse_parameters(_parameter_text(body, match.end() - 1)),
            annotations=parse_annotations(annotation_text),
            modifiers=modifiers,
        )
