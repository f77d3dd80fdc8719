"""Navigation generator: admin navigation item and route constants."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import structlog

from archbase_cli.exceptions import GeneratorError
from archbase_cli.generators.base import BaseGenerator
from archbase_cli.generators.naming import admin_route, capitalize_first, feature_name, pascal_case
from archbase_cli.generators.rendering import TemplateRenderer

log = structlog.get_logger("archbase_cli.generators")


@dataclass
class NavigationOptions:
    name: str
    category: str
    label: str = ""
    output: str = "."
    typescript: bool = True
    feature: str | None = None
    icon: str = "IconList"
    color: str = "blue"
    show_in_sidebar: bool = True
    with_form: bool = True
    with_view: bool = True
    group: str | None = None


def constant_name(value: str) -> str:
    return value.upper().replace("-", "_")


class NavigationGenerator(BaseGenerator[NavigationOptions]):
    name = "navigation"

    def validate(self, options: NavigationOptions) -> None:
        if not options.name:
            raise GeneratorError("Navigation name is required")
        if not options.category:
            raise GeneratorError("Navigation category is required")

    def build_context(self, options: NavigationOptions) -> dict:
        feature = options.feature or feature_name(options.name, "Navigation")
        category = options.category
        component_base = pascal_case(feature)
        variable_base = component_base[:1].lower() + component_base[1:]
        return {
            "name": options.name,
            "label": options.label or capitalize_first(feature),
            "icon": options.icon,
            "color": options.color,
            "show_in_sidebar": options.show_in_sidebar,
            "category": category,
            "feature": feature,
            "category_constant": f"{constant_name(category)}_CATEGORY",
            "feature_constant": constant_name(feature),
            "admin_route": admin_route(category, feature),
            "form_route": f"{admin_route(category, feature)}/:{variable_base}Id",
            "view_component": f"{component_base}View",
            "form_component": f"{component_base}Form",
            "with_form": options.with_form,
            "with_view": options.with_view,
            "group": options.group,
            "label_key": f"mentors:{component_base}",
            "category_label_key": f"mentors:{capitalize_first(category)}",
            "view_var_name": f"{variable_base}View",
            "form_var_name": f"{variable_base}Form",
            "group_var_name": f"{category}GroupMenu",
            "id_param": f"{variable_base}Id",
            "routes_var_name": f"{variable_base}Routes",
        }

    def _generate(self, options: NavigationOptions, renderer: TemplateRenderer) -> list[str]:
        context = self.build_context(options)
        log.info("navigation.generate", name=options.name, route=context["admin_route"])
        output = Path(options.output)
        ext = ".tsx" if options.typescript else ".jsx"
        return [
            self.render_to(
                renderer, "navigation/navigation-item.tsx.j2", context, output / f"{options.name}Navigation{ext}"
            ),
            self.render_to(renderer, "navigation/route-constants.ts.j2", context, output / f"{options.name}Routes.ts"),
        ]
