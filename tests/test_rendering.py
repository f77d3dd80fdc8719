"""Tests for template rendering, helper isolation and naming helpers."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from archbase_cli import config
from archbase_cli.exceptions import GeneratorError, TemplateNotFoundError
from archbase_cli.generators.domain import DomainGenerator
from archbase_cli.generators.naming import (
    admin_route,
    camel_case,
    feature_name,
    kebab_case,
    pascal_case,
    strip_suffix,
)
from archbase_cli.generators.rendering import HelperRegistry, TemplateRenderer, default_helpers
from archbase_cli.generators.service import ServiceGenerator


@pytest.fixture
def template_dir(tmp_path):
    (tmp_path / "hello.txt.j2").write_text("Hello {{ shout(name) }}!\n", encoding="utf-8")
    (tmp_path / "case.txt.j2").write_text("{{ kebab_case(name) }} {{ name | pascal_case }}\n", encoding="utf-8")
    (tmp_path / "broken.txt.j2").write_text("{% if %}\n", encoding="utf-8")
    return tmp_path


class TestNaming:
    @pytest.mark.parametrize(
        "value,expected",
        [("UserManagement", "user-management"), ("Cliente", "cliente"), ("user", "user")],
    )
    def test_kebab_case(self, value, expected):
        assert kebab_case(value) == expected

    def test_pascal_and_camel(self):
        assert pascal_case("my-app") == "MyApp"
        assert pascal_case("my_app") == "MyApp"
        assert camel_case("order-item") == "orderItem"

    def test_strip_suffix(self):
        assert strip_suffix("ClienteView", "View") == "Cliente"
        assert strip_suffix("Cliente", "View") == "Cliente"

    def test_feature_and_route(self):
        assert feature_name("ClienteView", "View") == "cliente"
        assert admin_route("vendas", "order-item") == "/admin/vendas/order-item"


class TestHelperRegistry:
    def test_add_helper_registers_filter_and_global(self):
        registry = HelperRegistry().add_helper("shout", str.upper)
        assert "shout" in registry.filters
        assert "shout" in registry.globals
        assert registry.names() == ["shout"]

    def test_defaults(self):
        names = default_helpers().names()
        for helper in ("eq", "neq", "capitalize_first", "kebab_case", "to_json"):
            assert helper in names

    def test_generators_do_not_share_helpers(self):
        service_env = ServiceGenerator().renderer().environment
        domain_env = DomainGenerator().renderer().environment
        assert "build_url_params" in service_env.globals
        assert "build_url_params" not in domain_env.globals
        assert "validation_message" in domain_env.globals
        assert "validation_message" not in service_env.globals


class TestTemplateRenderer:
    def test_render_with_helper(self, template_dir):
        helpers = default_helpers().add_helper("shout", str.upper)
        renderer = TemplateRenderer(helpers, [template_dir])
        assert renderer.render("hello.txt.j2", {"name": "ana"}) == "Hello ANA!\n"

    def test_default_helpers_as_global_and_filter(self, template_dir):
        renderer = TemplateRenderer(template_dirs=[template_dir])
        assert renderer.render("case.txt.j2", {"name": "OrderItem"}) == "order-item OrderItem\n"

    def test_missing_template(self, template_dir):
        renderer = TemplateRenderer(template_dirs=[template_dir])
        assert not renderer.has_template("missing.j2")
        with pytest.raises(TemplateNotFoundError) as excinfo:
            renderer.render("missing.j2", {})
        assert excinfo.value.name == "missing.j2"
        assert excinfo.value.searched == [str(template_dir)]

    def test_syntax_error(self, template_dir):
        renderer = TemplateRenderer(template_dirs=[template_dir])
        with pytest.raises(GeneratorError, match="broken.txt.j2"):
            renderer.render("broken.txt.j2", {})

    def test_unknown_helper_is_render_error(self, template_dir):
        renderer = TemplateRenderer(template_dirs=[template_dir])
        with pytest.raises(GeneratorError):
            renderer.render("hello.txt.j2", {"name": "ana"})


class TestTemplateDirs:
    def test_bundled_only(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("ARCHBASE_TEMPLATES_DIR", None)
            assert config.template_dirs() == [config.BUNDLED_TEMPLATES_DIR]

    def test_override_first(self, tmp_path):
        with patch.dict(os.environ, {"ARCHBASE_TEMPLATES_DIR": str(tmp_path)}):
            assert config.template_dirs() == [tmp_path, config.BUNDLED_TEMPLATES_DIR]

    def test_scan_workers(self):
        with patch.dict(os.environ, {"ARCHBASE_SCAN_WORKERS": "4"}):
            assert config.scan_workers() == 4
        with patch.dict(os.environ, {"ARCHBASE_SCAN_WORKERS": "many"}):
            assert config.scan_workers() == 1
