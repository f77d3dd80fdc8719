"""CLI entry point: archbase.

Subcommands:
    archbase generate domain|form|view|service|navigation NAME ...
    archbase analyze component PATH        # one file or a directory
    archbase analyze java SOURCE_OR_FILE   # Spring controller
    archbase scan PROJECT                  # Archbase component usage report
    archbase analyze-project PATH          # recurring project patterns
    archbase analyze-docs PATH             # Markdown documentation knowledge
    archbase validate file|project PATH    # syntax, imports, structure, metrics
    archbase list generators|analyzers
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn

import click
from pydantic import BaseModel

from archbase_cli import __version__, config
from archbase_cli.analyzers.code_validator import CodeValidator
from archbase_cli.analyzers.component_analyzer import DEFAULT_PATTERN, ComponentAnalyzer
from archbase_cli.analyzers.documentation_analyzer import DocumentationAnalyzer
from archbase_cli.analyzers.java_analyzer import JavaControllerAnalyzer, load_java_source
from archbase_cli.analyzers.pattern_analyzer import ProjectPatternAnalyzer
from archbase_cli.analyzers.project_scanner import (
    DEFAULT_EXCLUDE,
    DEFAULT_INCLUDE,
    ProjectScanner,
    ScanOptions,
)
from archbase_cli.analyzers.registry import create_default_registry as create_analyzer_registry
from archbase_cli.core.logging import setup_logging
from archbase_cli.exceptions import ArchbaseError, CommandError
from archbase_cli.generators.base import GenerationResult
from archbase_cli.generators.domain import DomainGenerator, DomainOptions, parse_enum_spec, parse_field_spec
from archbase_cli.generators.form import FormGenerator, FormOptions
from archbase_cli.generators.navigation import NavigationGenerator, NavigationOptions
from archbase_cli.generators.registry import create_default_registry as create_generator_registry
from archbase_cli.generators.service import ServiceGenerator, ServiceOptions
from archbase_cli.generators.view import ViewGenerator, ViewOptions
from archbase_cli.models.base import export_json, export_json_list, to_json, to_json_list
from archbase_cli.models.validation import ValidationResult


def _fail(exc: Exception) -> NoReturn:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


def _emit(record: BaseModel | list[BaseModel], as_json: bool, output: str | None, summary: str) -> None:
    """Write *record* to a file, print it as JSON, or print a one-line summary."""
    many = isinstance(record, list)
    if output:
        path = export_json_list(record, output) if many else export_json(record, output)
        click.echo(f"Results written to {path}")
    elif as_json:
        click.echo(to_json_list(record) if many else to_json(record))
    else:
        click.echo(summary)


def _report(result: GenerationResult) -> None:
    if not result.success:
        for error in result.errors:
            click.echo(f"Error: {error}", err=True)
        sys.exit(1)
    for path in result.files:
        click.echo(f"  created {path}")


def _json_options(func):
    func = click.option("-o", "--output", default=None, help="Write JSON results to this file")(func)
    func = click.option("--json", "as_json", is_flag=True, help="Print JSON results to stdout")(func)
    return func


@click.group()
@click.version_option(__version__, prog_name="archbase")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """Archbase CLI: code generation and analysis for Archbase React projects."""
    setup_logging(verbose)


# ── generate ─────────────────────────────────────────────────────────────


@main.group()
def generate() -> None:
    """Generate source files from templates."""


@generate.command("domain")
@click.argument("name", required=False, default="")
@click.option("-o", "--output", default=".", help="Output directory")
@click.option("-f", "--field", "fields", multiple=True, help="Field spec name:type[:required]")
@click.option("-e", "--enum", "enums", multiple=True, help="Enum spec Name=A|B|C")
@click.option("--java", "java_input", default=None, help="Java class source or file to derive fields from")
@click.option("--audit/--no-audit", "with_audit_fields", default=False, help="Add audit fields")
@click.option("--validation/--no-validation", "with_validation", default=True)
@click.option("--constructor/--no-constructor", "with_constructor", default=True)
@click.option("--factory/--no-factory", "with_factory", default=True)
def generate_domain(
    name: str,
    output: str,
    fields: tuple[str, ...],
    enums: tuple[str, ...],
    java_input: str | None,
    with_audit_fields: bool,
    with_validation: bool,
    with_constructor: bool,
    with_factory: bool,
) -> None:
    """Generate a DTO with optional enums and status values."""
    try:
        options = DomainOptions(
            name=name,
            output=output,
            fields=[parse_field_spec(f) for f in fields],
            enums=[parse_enum_spec(e) for e in enums],
            with_audit_fields=with_audit_fields,
            with_validation=with_validation,
            with_constructor=with_constructor,
            with_factory=with_factory,
            java_input=java_input,
        )
        result = DomainGenerator().generate(options)
    except ArchbaseError as exc:
        _fail(exc)
    _report(result)


@generate.command("form")
@click.argument("name")
@click.option("-o", "--output", default=".", help="Output directory")
@click.option("--fields", default=None, help="Comma separated name:type list")
@click.option("--dto", default=None, type=click.Path(), help="DTO file to extract fields from")
@click.option("--validation", type=click.Choice(["yup", "zod", "none"]), default="yup")
@click.option("--template", default="basic", help="Form template name")
@click.option("--datasource-version", type=click.Choice(["v1", "v2"]), default="v2")
@click.option("--array-fields", "with_array_fields", is_flag=True, help="Enable array field helpers")
@click.option("--layout", type=click.Choice(["vertical", "horizontal", "grid"]), default="vertical")
@click.option("--category", default=None)
@click.option("--feature", default=None)
@click.option("--typescript/--javascript", default=True)
@click.option("--test", is_flag=True, help="Also generate a test file")
@click.option("--story", is_flag=True, help="Also generate a Storybook story")
def generate_form(
    name: str,
    output: str,
    fields: str | None,
    dto: str | None,
    validation: str,
    template: str,
    datasource_version: str,
    with_array_fields: bool,
    layout: str,
    category: str | None,
    feature: str | None,
    typescript: bool,
    test: bool,
    story: bool,
) -> None:
    """Generate a FormBuilder form."""
    options = FormOptions(
        name=name,
        output=output,
        fields=fields,
        dto=dto,
        validation=validation,
        template=template,
        typescript=typescript,
        test=test,
        story=story,
        data_source_version=datasource_version,
        with_array_fields=with_array_fields,
        layout=layout,
        category=category,
        feature=feature,
    )
    try:
        result = FormGenerator().generate(options)
    except ArchbaseError as exc:
        _fail(exc)
    _report(result)


@generate.command("view")
@click.argument("name")
@click.option("-o", "--output", default=".", help="Output directory")
@click.option("--fields", default=None, help="Comma separated name:type list")
@click.option("--dto", default=None, type=click.Path(), help="DTO file to extract columns from")
@click.option("--category", default=None)
@click.option("--feature", default=None)
@click.option("--page-size", default=25, type=int)
@click.option("--permissions/--no-permissions", "with_permissions", default=True)
@click.option("--filters/--no-filters", "with_filters", default=True)
@click.option("--pagination/--no-pagination", "with_pagination", default=True)
@click.option("--sorting/--no-sorting", "with_sorting", default=True)
@click.option("--typescript/--javascript", default=True)
@click.option("--test", is_flag=True, help="Also generate a test file")
@click.option("--story", is_flag=True, help="Also generate a Storybook story")
def generate_view(
    name: str,
    output: str,
    fields: str | None,
    dto: str | None,
    category: str | None,
    feature: str | None,
    page_size: int,
    with_permissions: bool,
    with_filters: bool,
    with_pagination: bool,
    with_sorting: bool,
    typescript: bool,
    test: bool,
    story: bool,
) -> None:
    """Generate a CRUD list view."""
    options = ViewOptions(
        name=name,
        output=output,
        fields=fields,
        dto=dto,
        typescript=typescript,
        test=test,
        story=story,
        category=category,
        feature=feature,
        with_permissions=with_permissions,
        with_filters=with_filters,
        with_pagination=with_pagination,
        with_sorting=with_sorting,
        page_size=page_size,
    )
    try:
        result = ViewGenerator().generate(options)
    except ArchbaseError as exc:
        _fail(exc)
    _report(result)


@generate.command("service")
@click.argument("name")
@click.option("--entity", required=True, help="Entity name, e.g. User")
@click.option("--entity-type", default=None, help="Entity DTO type (default: <entity>Dto)")
@click.option("-o", "--output", default=".", help="Project directory")
@click.option("--id-type", default="string")
@click.option("--endpoint", default=None, help="Base endpoint (default: /api/v1/<entity>s)")
@click.option("--java-controller", default=None, help="Spring controller source or file")
@click.option("--dto", "generate_dto", is_flag=True, help="Also generate a DTO skeleton")
@click.option("--no-ioc", "skip_ioc", is_flag=True, help="Do not register the service in IoC files")
def generate_service(
    name: str,
    entity: str,
    entity_type: str | None,
    output: str,
    id_type: str,
    endpoint: str | None,
    java_controller: str | None,
    generate_dto: bool,
    skip_ioc: bool,
) -> None:
    """Generate a remote API service."""
    options = ServiceOptions(
        service_name=name,
        entity_name=entity,
        entity_type=entity_type or f"{entity}Dto",
        output=output,
        id_type=id_type,
        endpoint=endpoint,
        java_controller=java_controller,
        generate_dto=generate_dto,
        register_ioc=not skip_ioc,
    )
    try:
        result = ServiceGenerator().generate(options)
    except ArchbaseError as exc:
        _fail(exc)
    _report(result)


@generate.command("navigation")
@click.argument("name")
@click.option("--category", required=True, help="Admin menu category")
@click.option("--label", default="", help="Menu label")
@click.option("-o", "--output", default=".", help="Output directory")
@click.option("--feature", default=None)
@click.option("--icon", default="IconList")
@click.option("--color", default="blue")
@click.option("--group", default=None)
@click.option("--sidebar/--no-sidebar", "show_in_sidebar", default=True)
@click.option("--form/--no-form", "with_form", default=True)
@click.option("--view/--no-view", "with_view", default=True)
@click.option("--typescript/--javascript", default=True)
def generate_navigation(
    name: str,
    category: str,
    label: str,
    output: str,
    feature: str | None,
    icon: str,
    color: str,
    group: str | None,
    show_in_sidebar: bool,
    with_form: bool,
    with_view: bool,
    typescript: bool,
) -> None:
    """Generate a navigation item and route constants."""
    options = NavigationOptions(
        name=name,
        category=category,
        label=label,
        output=output,
        typescript=typescript,
        feature=feature,
        icon=icon,
        color=color,
        show_in_sidebar=show_in_sidebar,
        with_form=with_form,
        with_view=with_view,
        group=group,
    )
    try:
        result = NavigationGenerator().generate(options)
    except ArchbaseError as exc:
        _fail(exc)
    _report(result)


# ── analyze ──────────────────────────────────────────────────────────────


@main.group()
def analyze() -> None:
    """Analyze components and controllers."""


@analyze.command("component")
@click.argument("path", type=click.Path(exists=True))
@click.option("--pattern", default=DEFAULT_PATTERN, help="Glob used when PATH is a directory")
@click.option("--workers", default=None, type=int, help="Parallel workers (default: ARCHBASE_SCAN_WORKERS)")
@_json_options
def analyze_component(path: str, pattern: str, workers: int | None, as_json: bool, output: str | None) -> None:
    """Analyze a React component file or every component in a directory."""
    analyzer = ComponentAnalyzer(workers=workers or config.scan_workers())
    target = Path(path)
    if target.is_dir():
        results = analyzer.analyze_directory(target, pattern)
        _emit(results, as_json, output, f"Analyzed {len(results)} components in {path}")
        return

    result = analyzer.analyze_file(target)
    if result is None:
        _fail(CommandError(f"Could not parse {path}"))
    _emit(
        result,
        as_json,
        output,
        f"{result.name or '(anonymous)'}: {len(result.props)} props, "
        f"{len(result.hooks)} hooks, complexity {result.complexity}, "
        f"DataSource {result.data_source_usage.version}",
    )


@analyze.command("java")
@click.argument("source")
@_json_options
def analyze_java(source: str, as_json: bool, output: str | None) -> None:
    """Analyze a Spring controller given as a file path or as source text."""
    try:
        result = JavaControllerAnalyzer().analyze(load_java_source(source))
    except ArchbaseError as exc:
        _fail(exc)
    _emit(result, as_json, output, f"{result.class_name or '(unnamed)'}: {len(result.methods)} methods")


# ── scan and project analysis ────────────────────────────────────────────


@main.command("scan")
@click.argument("project", type=click.Path(exists=True, file_okay=False))
@click.option("--include", "include", multiple=True, help="Include glob (repeatable)")
@click.option("--exclude", "exclude", multiple=True, help="Exclude glob (repeatable)")
@click.option("--workers", default=None, type=int, help="Parallel workers (default: ARCHBASE_SCAN_WORKERS)")
@click.option("--report", "report_path", default=None, help="Write the full scan report to this file")
@click.option("--auto-fix", is_flag=True, help="Count fixable issues")
@click.option("--apply", is_flag=True, help="With --auto-fix, log fixes as applied instead of dry run")
@click.option("--json", "as_json", is_flag=True, help="Print JSON results to stdout")
def scan(
    project: str,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    workers: int | None,
    report_path: str | None,
    auto_fix: bool,
    apply: bool,
    as_json: bool,
) -> None:
    """Scan a project for Archbase component usage."""
    options = ScanOptions(
        project_path=project,
        include_patterns=list(include) or list(DEFAULT_INCLUDE),
        exclude_patterns=list(exclude) or list(DEFAULT_EXCLUDE),
        workers=workers or config.scan_workers(),
        generate_report=report_path is not None,
        output_path=report_path or "archbase-scan-report.json",
    )
    scanner = ProjectScanner()
    try:
        result = scanner.scan_project(options)
    except ArchbaseError as exc:
        _fail(exc)

    if as_json:
        click.echo(to_json(result))
    else:
        stats = result.statistics
        click.echo(f"Files scanned:        {stats.files_scanned}")
        click.echo(f"Archbase components:  {stats.archbase_components}")
        click.echo(f"DataSource V1 / V2:   {stats.v1_components} / {stats.v2_components}")
        click.echo(f"Issues found:         {stats.issues_found}")
        for recommendation in scanner.generate_recommendations(result):
            click.echo(f"  - {recommendation}")
    if report_path:
        click.echo(f"Report written to {report_path}", err=as_json)
    if auto_fix:
        outcome = scanner.auto_fix(result, dry_run=not apply)
        click.echo(f"Fixable issues: {outcome.fixed}, skipped: {outcome.skipped}", err=as_json)


@main.command("analyze-project")
@click.argument("path", type=click.Path(exists=True, file_okay=False))
@_json_options
def analyze_project(path: str, as_json: bool, output: str | None) -> None:
    """Find recurring form, DataSource and page patterns in a project."""
    result = ProjectPatternAnalyzer(path).analyze_project()
    _emit(
        result,
        as_json,
        output,
        f"{len(result.patterns)} patterns, {len(result.form_patterns)} forms, "
        f"{len(result.recommendations)} recommendations",
    )


@main.command("analyze-docs")
@click.argument("path", type=click.Path(exists=True, file_okay=False))
@_json_options
def analyze_docs(path: str, as_json: bool, output: str | None) -> None:
    """Extract DataSource V2 knowledge, examples and guides from Markdown docs."""
    result = DocumentationAnalyzer(path).analyze_documentation()
    _emit(
        result,
        as_json,
        output,
        f"{len(result.code_examples)} code examples, {len(result.api_reference)} API references, "
        f"{len(result.migration_guides)} migration guides",
    )


# ── validate ─────────────────────────────────────────────────────────────


def _show_validation(result: ValidationResult) -> None:
    metrics = result.metrics
    click.echo("VALID" if result.is_valid else "INVALID")
    click.echo(f"  Lines of code: {metrics.lines_of_code}")
    click.echo(f"  Components:    {metrics.component_count}")
    click.echo(f"  Hooks:         {metrics.hook_count}")
    click.echo(f"  Imports:       {metrics.import_count}")
    click.echo(f"  Complexity:    {metrics.complexity}")
    click.echo(f"  TypeScript:    {'yes' if metrics.has_typescript else 'no'}")
    if result.errors:
        click.echo("Errors:")
        for index, error in enumerate(result.errors, 1):
            location = f" (line {error.line}:{error.column})" if error.line else ""
            where = f" [{error.file}]" if error.file else ""
            click.echo(f"  {index}. {error.message}{location}{where}")
    if result.warnings:
        click.echo("Warnings:")
        for index, warning in enumerate(result.warnings, 1):
            click.echo(f"  {index}. {warning.message}")
            if warning.suggestion:
                click.echo(f"     {warning.suggestion}")


def _finish_validation(result: ValidationResult, as_json: bool) -> None:
    if as_json:
        click.echo(to_json(result))
    else:
        _show_validation(result)
    if not result.is_valid:
        sys.exit(1)


@main.group()
def validate() -> None:
    """Validate generated code and project structure."""


@validate.command("file")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print JSON results to stdout")
def validate_file(path: str, as_json: bool) -> None:
    """Validate one TypeScript/React file. Exits 1 when it has errors."""
    _finish_validation(CodeValidator().validate_file(path), as_json)


@validate.command("project")
@click.argument("path", type=click.Path(exists=True, file_okay=False))
@click.option("--ignore", default="node_modules,dist,build", help="Comma separated directories to skip under src/")
@click.option("--json", "as_json", is_flag=True, help="Print JSON results to stdout")
def validate_project(path: str, ignore: str, as_json: bool) -> None:
    """Validate package.json, tsconfig.json and every source file under src/."""
    patterns = [f"{name.strip().rstrip('/')}/**" for name in ignore.split(",") if name.strip()]
    try:
        result = CodeValidator().validate_project(path, patterns)
    except ArchbaseError as exc:
        _fail(exc)
    _finish_validation(result, as_json)


# ── list ─────────────────────────────────────────────────────────────────


@main.group("list")
def list_group() -> None:
    """List built-in generators and analyzers."""


@list_group.command("generators")
def list_generators() -> None:
    for descriptor in create_generator_registry().list_all():
        click.echo(f"{descriptor.name:<12} {descriptor.description}")


@list_group.command("analyzers")
def list_analyzers() -> None:
    for descriptor in create_analyzer_registry().list_all():
        click.echo(f"{descriptor.name:<12} {descriptor.description}")


if __name__ == "__main__":
    main()
