from archbase_cli.models.base import (
    ArchbaseModel,
    export_json,
    export_json_list,
    load_json,
    to_json,
    to_json_list,
)
from archbase_cli.models.component import (
    ComponentAnalysis,
    DataSourceUsage,
    ImportInfo,
    PropDefinition,
)
from archbase_cli.models.docs import DocumentationAnalysis
from archbase_cli.models.java import (
    JavaAnnotation,
    JavaControllerAnalysis,
    JavaMethod,
    JavaParameter,
)
from archbase_cli.models.patterns import ProjectPatternAnalysis
from archbase_cli.models.scan import (
    ComponentIssue,
    ComponentStats,
    ComponentUsage,
    ProjectScanResult,
    UsageProp,
)
from archbase_cli.models.service import ServiceMethod, ServiceParameter
from archbase_cli.models.validation import CodeMetrics, ValidationIssue, ValidationResult, ValidationWarning

__all__ = [
    "ArchbaseModel",
    "CodeMetrics",
    "ComponentAnalysis",
    "ComponentIssue",
    "ComponentStats",
    "ComponentUsage",
    "DataSourceUsage",
    "DocumentationAnalysis",
    "ImportInfo",
    "JavaAnnotation",
    "JavaControllerAnalysis",
    "JavaMethod",
    "JavaParameter",
    "ProjectPatternAnalysis",
    "ProjectScanResult",
    "PropDefinition",
    "ServiceMethod",
    "ServiceParameter",
    "UsageProp",
    "ValidationIssue",
    "ValidationResult",
    "ValidationWarning",
    "export_json",
    "export_json_list",
    "load_json",
    "to_json",
    "to_json_list",
]
