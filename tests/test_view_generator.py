"""Tests for ViewGenerator (CRUD list views)."""

from __future__ import annotations

import pytest

from archbase_cli.exceptions import GeneratorError
from archbase_cli.generators.view import (
    ViewGenerator,
    ViewOptions,
    column_type_for,
    column_width,
    columns_from_dto,
    parse_columns,
)


class TestColumns:
    def test_defaults(self):
        columns = parse_columns(None)
        assert [(c.name, c.type, c.size) for c in columns] == [("name", "text", 200), ("status", "enum", 120)]

    def test_spec_flags(self):
        columns = {c.name: c for c in parse_columns("name:text,photo:image,id:uuid,active:boolean")}
        assert columns["name"].filterable and columns["name"].sortable
        assert columns["photo"].sortable is False
        assert columns["photo"].size == 140
        assert columns["id"].size == 400
        assert columns["active"].filterable is False
        assert columns["active"].filter_input == "checkbox"

    @pytest.mark.parametrize(
        "ts,expected",
        [("string", "text"), ("number", "number"), ("boolean", "boolean"), ("Status", "enum"), ("datetime", "date")],
    )
    def test_column_type_for(self, ts, expected):
        assert column_type_for(ts) == expected

    @pytest.mark.parametrize(
        "ts,name,width",
        [
            ("string", "status", 120),
            ("string", "productCode", 100),
            ("string", "nome", 200),
            ("string", "email", 180),
            ("string", "descricao", 300),
            ("boolean", "active", 80),
            ("number", "age", 100),
            ("Date", "birthDate", 150),
            ("string", "notes", 150),
        ],
    )
    def test_column_width(self, ts, name, width):
        assert column_width(ts, name) == width

    def test_from_dto(self, customer_dto):
        columns = {c.name: c for c in columns_from_dto(customer_dto.read_text())}
        assert "id" not in columns
        assert columns["nome"].size == 200
        assert columns["status"].type == "enum"
        assert columns["age"].type == "number"


class TestViewGenerator:
    def test_page_size_must_be_positive(self):
        with pytest.raises(GeneratorError):
            ViewGenerator().generate(ViewOptions(name="UserView", page_size=0))

    def test_crud_list(self, tmp_path):
        result = ViewGenerator().generate(ViewOptions(name="UserView", output=str(tmp_path), page_size=50))
        assert result.success, result.errors
        content = (tmp_path / "UserView.tsx").read_text()
        assert "const USER_ROUTE = '/admin/configuracao/user';" in content
        assert 'dataField="status"' in content
        assert "size={120}" in content
        assert "pageSize={50}" in content

    def test_category_and_feature(self):
        options = ViewOptions(name="OrderItemView", category="vendas")
        context = ViewGenerator().build_context(options, parse_columns(None))
        assert context["feature"] == "order-item"
        assert context["feature_constant"] == "ORDER_ITEM"
        assert context["admin_route"] == "/admin/vendas/order-item"
        assert [c.name for c in context["enum_columns"]] == ["status"]

    def test_test_and_story(self, tmp_path):
        options = ViewOptions(name="UserView", output=str(tmp_path), typescript=False, test=True, story=True)
        result = ViewGenerator().generate(options)
        assert result.files == [
            str(tmp_path / "UserView.jsx"),
            str(tmp_path / "__tests__" / "UserView.test.jsx"),
            str(tmp_path / "__stories__" / "UserView.stories.jsx"),
        ]
