"""Template based code generators."""

from archbase_cli.generators.base import BaseGenerator, GenerationResult
from archbase_cli.generators.domain import DomainGenerator, DomainOptions
from archbase_cli.generators.form import FormGenerator, FormOptions
from archbase_cli.generators.navigation import NavigationGenerator, NavigationOptions
from archbase_cli.generators.registry import GeneratorRegistry, create_default_registry
from archbase_cli.generators.rendering import HelperRegistry, TemplateRenderer
from archbase_cli.generators.service import ServiceGenerator, ServiceOptions
from archbase_cli.generators.view import ViewGenerator, ViewOptions

__all__ = [
    "BaseGenerator",
    "DomainGenerator",
    "DomainOptions",
    "FormGenerator",
    "FormOptions",
    "GenerationResult",
    "GeneratorRegistry",
    "HelperRegistry",
    "NavigationGenerator",
    "NavigationOptions",
    "ServiceGenerator",
    "ServiceOptions",
    "TemplateRenderer",
    "ViewGenerator",
    "ViewOptions",
    "create_default_registry",
]
