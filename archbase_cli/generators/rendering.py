"""Template rendering with per-call helper injection.

Every generator builds its own ``TemplateRenderer`` for each ``generate()``
call. Helpers (Jinja2 filters and globals) are collected in a
``HelperRegistry`` and installed on a fresh ``jinja2.Environment``, so two
generators never see each other's helpers and nothing is registered
process-wide.

Template lookup walks ``config.template_dirs()``: the directory named by
``ARCHBASE_TEMPLATES_DIR`` first, then the templates bundled with the
package.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import jinja2
import structlog

from archbase_cli import config
from archbase_cli.exceptions import GeneratorError, TemplateNotFoundError
from archbase_cli.generators.naming import (
    camel_case,
    capitalize_first,
    kebab_case,
    lower_first,
    pascal_case,
)

log = structlog.get_logger("archbase_cli.generators")


class HelperRegistry:
    """Named filters and globals for one rendering context."""

    def __init__(self) -> None:
        self._filters: dict[str, Callable[..., Any]] = {}
        self._globals: dict[str, Any] = {}

    def add_filter(self, name: str, func: Callable[..., Any]) -> HelperRegistry:
        self._filters[name] = func
        return self

    def add_global(self, name: str, value: Any) -> HelperRegistry:
        self._globals[name] = value
        return self

    def add_helper(self, name: str, func: Callable[..., Any]) -> HelperRegistry:
        """Register *func* both as a filter and as a callable global."""
        return self.add_filter(name, func).add_global(name, func)

    @property
    def filters(self) -> dict[str, Callable[..., Any]]:
        return dict(self._filters)

    @property
    def globals(self) -> dict[str, Any]:
        return dict(self._globals)

    def names(self) -> list[str]:
        return sorted(set(self._filters) | set(self._globals))

    def install(self, env: jinja2.Environment) -> None:
        env.filters.update(self._filters)
        env.globals.update(self._globals)


def _to_json(value: Any) -> str:
    return json.dumps(value, indent=2)


def default_helpers() -> HelperRegistry:
    """Helpers every generator template may rely on."""
    registry = HelperRegistry()
    registry.add_helper("eq", lambda a, b: a == b)
    registry.add_helper("neq", lambda a, b: a != b)
    registry.add_helper("capitalize_first", capitalize_first)
    registry.add_helper("lower_first", lower_first)
    registry.add_helper("kebab_case", kebab_case)
    registry.add_helper("pascal_case", pascal_case)
    registry.add_helper("camel_case", camel_case)
    registry.add_filter("to_json", _to_json)
    return registry


class TemplateRenderer:
    """Jinja2 environment scoped to a single generation call."""

    def __init__(
        self,
        helpers: HelperRegistry | None = None,
        template_dirs: list[Path] | None = None,
    ) -> None:
        self._dirs = [Path(d) for d in (template_dirs or config.template_dirs())]
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader([str(d) for d in self._dirs]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,
        )
        (helpers or default_helpers()).install(self._env)

    @property
    def environment(self) -> jinja2.Environment:
        return self._env

    def has_template(self, name: str) -> bool:
        try:
            self._env.get_template(name)
        except jinja2.TemplateNotFound:
            return False
        return True

    def render(self, name: str, context: dict[str, Any]) -> str:
        try:
            template = self._env.get_template(name)
        except jinja2.TemplateNotFound as exc:
            raise TemplateNotFoundError(name, [str(d) for d in self._dirs]) from exc
        except jinja2.TemplateSyntaxError as exc:
            raise GeneratorError(f"Template '{name}' is invalid: {exc.message} (line {exc.lineno})") from exc
        log.debug("generator.template_render", template=name)
        try:
            return template.render(**context)
        except jinja2.TemplateError as exc:
            raise GeneratorError(f"Rendering '{name}' failed: {exc}") from exc
