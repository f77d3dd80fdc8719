"""Tests for ServiceGenerator: Java type mapping, method transform, IoC wiring."""

from __future__ import annotations

import pytest

from archbase_cli.analyzers.java_analyzer import JavaControllerAnalyzer
from archbase_cli.exceptions import GeneratorError
from archbase_cli.generators.service import (
    ServiceGenerator,
    ServiceOptions,
    build_url_params,
    default_imports,
    map_java_type_to_typescript,
    method_imports,
    register_in_container,
    register_in_ioc_types,
    transform_java_methods,
)
from archbase_cli.models.service import ServiceParameter

IOC_TYPES = """\
export const API_TYPE = {
  User: "User",
};
"""

CONTAINER = """\
import { Container } from "inversify";
import { UserService } from "../services/UserService";

const container = new Container();

container
  .bind<UserService>(API_TYPE.User)
  .to(UserService);

export default container;
"""


@pytest.fixture
def ioc_project(tmp_path):
    ioc = tmp_path / "src" / "ioc"
    ioc.mkdir(parents=True)
    (ioc / "DemoIOCTypes.ts").write_text(IOC_TYPES, encoding="utf-8")
    (ioc / "DemoContainerIOC.ts").write_text(CONTAINER, encoding="utf-8")
    return tmp_path


# ── Type mapping ──────────────────────────────────────────────────────────


class TestTypeMapping:
    @pytest.mark.parametrize(
        "java,ts",
        [
            ("String", "string"),
            ("Long", "number"),
            ("boolean", "boolean"),
            ("LocalDate", "Date"),
            ("void", "void"),
            ("UserDto", "UserDto"),
            ("List<UserDto>", "UserDto[]"),
            ("Set<String>", "string[]"),
            ("String[]", "string[]"),
            ("Map<String, Long>", "Record<string, number>"),
            ("Map<String, List<UserDto>>", "Record<string, UserDto[]>"),
            ("Page<UserDto>", "Page<UserDto>"),
        ],
    )
    def test_map(self, java, ts):
        assert map_java_type_to_typescript(java) == ts


# ── Method transform ──────────────────────────────────────────────────────


class TestTransform:
    def test_get_by_id(self, controller_source):
        methods = JavaControllerAnalyzer().analyze(controller_source).methods
        get_user = transform_java_methods(methods, "/api/v1/users")[0]
        assert get_user.name == "getUser"
        assert get_user.http_method == "get"
        assert get_user.return_type == "UserDto"
        assert get_user.endpoint == "/api/v1/users/{id}"
        assert get_user.parameters == [ServiceParameter(name="id", type="string", source="path")]

    def test_query_and_body_sources(self, controller_source):
        methods = JavaControllerAnalyzer().analyze(controller_source).methods
        _, list_users, import_users = transform_java_methods(methods, "/api/v1/users")
        assert list_users.endpoint == "/api/v1/users"
        assert list_users.return_type == "UserDto[]"
        assert [p.source for p in list_users.parameters] == ["query", "query"]
        assert [p.type for p in list_users.parameters] == ["string", "number"]

        assert import_users.http_method == "post"
        assert import_users.return_type == "void"
        assert import_users.parameters[0].source == "body"
        assert import_users.parameters[0].type == "UserDto[]"

    def test_url_params(self):
        params = [ServiceParameter(name="id", type="string", source="path")]
        assert build_url_params("/api/users/{id}", params) == "/api/users/${id}"

    def test_method_imports_skip_entity(self, controller_source):
        methods = transform_java_methods(JavaControllerAnalyzer().analyze(controller_source).methods, "/x")
        imports = method_imports(default_imports("UserDto", "demo"), methods, "UserDto")
        assert sum("import { UserDto }" in line for line in imports) == 1

    def test_other_dto_imported(self, controller_source):
        methods = transform_java_methods(JavaControllerAnalyzer().analyze(controller_source).methods, "/x")
        imports = method_imports(default_imports("AccountDto", "demo"), methods, "AccountDto")
        assert "import { UserDto } from '../domain/UserDto';" in imports


# ── IoC registration ──────────────────────────────────────────────────────


class TestIocRegistration:
    def test_types_entry_added_once(self, ioc_project):
        assert register_in_ioc_types(ioc_project, "Order") is True
        assert register_in_ioc_types(ioc_project, "Order") is False
        content = (ioc_project / "src" / "ioc" / "DemoIOCTypes.ts").read_text()
        assert content.count('Order: "Order",') == 1
        assert content.rstrip().endswith("};")

    def test_container_binding_added(self, ioc_project):
        assert register_in_container(ioc_project, "OrderService", "Order") is True
        content = (ioc_project / "src" / "ioc" / "DemoContainerIOC.ts").read_text()
        assert ".bind<OrderService>(API_TYPE.Order)" in content
        assert 'import { OrderService } from "../services/OrderService";' in content
        assert content.index(".bind<UserService>") < content.index(".bind<OrderService>")
        assert register_in_container(ioc_project, "OrderService", "Order") is False

    def test_missing_ioc_files(self, tmp_path):
        with pytest.raises(GeneratorError):
            register_in_ioc_types(tmp_path, "Order")
        with pytest.raises(GeneratorError):
            register_in_container(tmp_path, "OrderService", "Order")


# ── Generator ─────────────────────────────────────────────────────────────


class TestServiceGenerator:
    def test_validation(self, tmp_path):
        with pytest.raises(GeneratorError):
            ServiceGenerator().generate(ServiceOptions("", "User", "UserDto", output=str(tmp_path)))

    def test_generates_service(self, tmp_path):
        result = ServiceGenerator().generate(
            ServiceOptions("UserService", "User", "UserDto", output=str(tmp_path), register_ioc=False)
        )
        assert result.success, result.errors
        path = tmp_path / "services" / "UserService.ts"
        assert result.files == [str(path)]
        content = path.read_text()
        assert "export class UserService extends ArchbaseRemoteApiService<UserDto, string>" in content
        assert "return '/api/v1/users';" in content
        assert "entity.isNovoUser" in content

    def test_custom_methods_from_controller(self, tmp_path, controller_source):
        controller = tmp_path / "UserController.java"
        controller.write_text(controller_source, encoding="utf-8")
        result = ServiceGenerator().generate(
            ServiceOptions(
                "UserService",
                "User",
                "UserDto",
                output=str(tmp_path),
                java_controller=str(controller),
                generate_dto=True,
                register_ioc=False,
            )
        )
        assert result.success, result.errors
        assert len(result.files) == 2
        content = (tmp_path / "services" / "UserService.ts").read_text()
        assert "async getUser(id: string): Promise<UserDto>" in content
        assert "this.client.get<UserDto>(`/api/v1/users/${id}`" in content
        assert "async importUsers(users: UserDto[]): Promise<void>" in content
        assert (tmp_path / "dto" / "UserDto.ts").is_file()

    def test_mistyped_controller_path(self, tmp_path):
        result = ServiceGenerator().generate(
            ServiceOptions(
                "UserService",
                "User",
                "UserDto",
                output=str(tmp_path),
                java_controller=str(tmp_path / "UserContrller.java"),
                register_ioc=False,
            )
        )
        assert not result.success
        assert "Java source file not found" in result.errors[0]
        assert not (tmp_path / "services" / "UserService.ts").exists()

    def test_registers_ioc(self, ioc_project):
        result = ServiceGenerator().generate(ServiceOptions("OrderService", "Order", "OrderDto", output=str(ioc_project)))
        assert result.success
        assert "Order:" in (ioc_project / "src" / "ioc" / "DemoIOCTypes.ts").read_text()

    def test_missing_ioc_does_not_fail(self, tmp_path):
        result = ServiceGenerator().generate(ServiceOptions("OrderService", "Order", "OrderDto", output=str(tmp_path)))
        assert result.success

    def test_missing_template_dir_fails(self, tmp_path):
        generator = ServiceGenerator(template_dirs=[tmp_path / "no-templates"])
        result = generator.generate(
            ServiceOptions("UserService", "User", "UserDto", output=str(tmp_path), register_ioc=False)
        )
        assert not result.success
        assert result.files == []
        assert "service.ts.j2" in result.errors[0]
