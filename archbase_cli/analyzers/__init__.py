from archbase_cli.analyzers.code_validator import CodeValidator
from archbase_cli.analyzers.component_analyzer import ComponentAnalyzer, ComponentFactExtractor
from archbase_cli.analyzers.documentation_analyzer import DocumentationAnalyzer
from archbase_cli.analyzers.java_analyzer import JavaControllerAnalyzer
from archbase_cli.analyzers.pattern_analyzer import ProjectPatternAnalyzer
from archbase_cli.analyzers.project_scanner import ProjectScanner, ScanOptions
from archbase_cli.analyzers.source_parser import SourceParser

__all__ = [
    "CodeValidator",
    "ComponentAnalyzer",
    "ComponentFactExtractor",
    "DocumentationAnalyzer",
    "JavaControllerAnalyzer",
    "ProjectPatternAnalyzer",
    "ProjectScanner",
    "ScanOptions",
    "SourceParser",
]
