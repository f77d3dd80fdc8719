"""Tests for the Spring controller parser."""

from __future__ import annotations

import pytest

from archbase_cli.analyzers.java_analyzer import (
    JavaControllerAnalyzer,
    load_java_source,
    normalize_type,
    parse_annotations,
    parse_parameters,
    split_top_level,
)
from archbase_cli.exceptions import AnalyzerError


class TestHelpers:
    def test_split_top_level_respects_generics(self):
        assert split_top_level("Map<String, Long> a, int b") == ["Map<String, Long> a", "int b"]

    def test_normalize_type(self):
        assert normalize_type("final java.util.List<java.lang.String>") == "List<String>"

    def test_annotation_value(self):
        (annotation,) = parse_annotations('@GetMapping("/{id}")')
        assert annotation.name == "GetMapping"
        assert annotation.value == "/{id}"

    def test_annotation_attributes(self):
        (annotation,) = parse_annotations('@RequestParam(name = "page", required = false)')
        assert annotation.value is None
        assert annotation.attributes == {"name": "page", "required": "false"}

    def test_parameters_with_annotations(self):
        params = parse_parameters("@PathVariable String id, @RequestBody final UserDto body")
        assert [(p.name, p.type) for p in params] == [("id", "String"), ("body", "UserDto")]
        assert params[0].annotations[0].name == "PathVariable"
        assert params[1].annotations[0].name == "RequestBody"

    def test_load_java_source_text(self):
        assert load_java_source("class A {}\n") == "class A {}\n"

    def test_load_java_source_path(self, tmp_path, controller_source):
        path = tmp_path / "UserController.java"
        path.write_text(controller_source, encoding="utf-8")
        assert load_java_source(str(path)) == controller_source

    def test_load_java_source_missing_file(self, tmp_path):
        with pytest.raises(AnalyzerError, match="not found"):
            load_java_source(str(tmp_path / "UserContrller.java"))


class TestJavaControllerAnalyzer:
    def setup_method(self):
        self.analyzer = JavaControllerAnalyzer()

    def test_class_and_base_mapping(self, controller_source):
        analysis = self.analyzer.analyze(controller_source)
        assert analysis.class_name == "UserController"
        assert analysis.base_mapping == "/api/users"

    def test_constructor_is_not_a_method(self, controller_source):
        analysis = self.analyzer.analyze(controller_source)
        assert [m.name for m in analysis.methods] == ["getUser", "listUsers", "importUsers"]

    def test_method_signature(self, controller_source):
        get_user = self.analyzer.analyze(controller_source).methods[0]
        assert get_user.return_type == "ResponseEntity<UserDto>"
        assert get_user.modifiers == ["public"]
        assert [a.name for a in get_user.annotations] == ["GetMapping"]
        assert get_user.annotations[0].value == "/{id}"
        (param,) = get_user.parameters
        assert (param.name, param.type) == ("id", "String")
        assert param.annotations[0].name == "PathVariable"

    def test_multiline_parameters(self, controller_source):
        list_users = self.analyzer.analyze(controller_source).methods[1]
        assert [(p.name, p.type) for p in list_users.parameters] == [("name", "String"), ("page", "Integer")]
        assert list_users.parameters[0].annotations[0].attributes == {"required": "false"}

    def test_annotations_do_not_leak_between_methods(self, controller_source):
        methods = self.analyzer.analyze(controller_source).methods
        assert [a.name for a in methods[2].annotations] == ["PostMapping"]

    def test_inline_annotation(self):
        source = """\
public class ItemController {
    @DeleteMapping("/{id}") public void remove(@PathVariable Long id) {}
}
"""
        (method,) = self.analyzer.analyze(source).methods
        assert method.name == "remove"
        assert method.annotations[0].name == "DeleteMapping"

    def test_missing_file(self, tmp_path):
        with pytest.raises(AnalyzerError):
            self.analyzer.analyze_file(tmp_path / "Missing.java")

    def test_statements_in_bodies_are_not_methods(self):
        source = """\
public class UserController {
    @GetMapping
    public List<UserDto> all() {
        return publicUsers(id);
    }

    private List<UserDto> publicUsers(String id) {
        if (id == null) throw new IllegalStateException("private access");
        return service.findPublic(id);
    }
}
"""
        methods = self.analyzer.analyze(source).methods
        assert [m.name for m in methods] == ["all", "publicUsers"]
        assert [m.return_type for m in methods] == ["List<UserDto>", "List<UserDto>"]

    def test_method_named_like_a_type_keyword(self):
        source = "public class C {\n    public String classify(String value) {\n        return value;\n    }\n}\n"
        (method,) = self.analyzer.analyze(source).methods
        assert method.name == "classify"
