"""
Permx Catalog Tests

Permission definitions, the identifier registry and the module catalog.
"""

import pytest

from permx.catalog import ModuleCatalog, PermissionModule, PermissionRegistry, import_modules
from permx.exceptions import ResolutionError
from permx.schemas.permission import BasePermission, Group, PermissionState, Subject

from conftest import CreatePost, ManageUsers, ViewProfile


class TestPermissionDefinition:

    def test_identity_key(self):
        assert ViewProfile().key == ("user", "view_profile")
        assert ViewProfile() == ViewProfile()
        assert len({ViewProfile(), ViewProfile(), CreatePost()}) == 2

    def test_default_state(self):
        permission = ViewProfile()

        assert permission.get_default_state("members") == PermissionState.ALLOW
        assert permission.get_default_state("guests") == PermissionState.DENY

    def test_can_change_state(self):
        permission = ManageUsers()

        assert permission.can_change_state("admins") is False
        assert permission.can_change_state("members") is True

    def test_is_immutable(self):
        permission = CreatePost()

        with pytest.raises(AttributeError):
            permission.title = "Something else"

    def test_keyword_definition(self):
        permission = BasePermission(
            id="export",
            module_id="reports",
            default_state="allow",
            fixed_groups=["guests"],
        )

        assert permission.get_default_state("anyone") == PermissionState.ALLOW
        assert permission.fixed_groups == ("guests",)

    def test_requires_identity(self):
        with pytest.raises(ValueError):
            BasePermission(id="orphan")

    def test_rejects_unknown_attribute(self):
        with pytest.raises(TypeError):
            BasePermission(id="x", module_id="y", colour="red")

    def test_state_labels(self):
        assert PermissionState.ALLOW.label == "Allow"
        assert PermissionState.DENY.label == "Deny"
        assert PermissionState.DEFAULT.label == "Default"

    def test_subject_group_ids(self):
        subject = Subject(id="u1", groups=["members", Group(id="editors", name="Editors")])

        assert subject.group_ids == ["members", "editors"]


class TestPermissionRegistry:

    @pytest.fixture
    def registry(self):
        return PermissionRegistry()

    def test_resolve_instance_passthrough(self, registry):
        permission = CreatePost()
        assert registry.resolve(permission) is permission

    def test_resolve_class(self, registry):
        assert registry.resolve(CreatePost) == CreatePost()

    def test_resolve_identifier(self, registry):
        registry.register("content.create_post", CreatePost)

        assert registry.resolve("content.create_post") == CreatePost()

    def test_decorator_registration(self, registry):
        @registry.permission("reports.export")
        class ExportReports(BasePermission):
            id = "export"
            module_id = "reports"

        assert "reports.export" in registry
        assert registry.resolve("reports.export").key == ("reports", "export")

    def test_unknown_identifier(self, registry):
        with pytest.raises(ResolutionError) as exc:
            registry.resolve("content.missing")

        assert exc.value.reference == "content.missing"
        assert isinstance(exc.value, LookupError)

    def test_uninstantiable_class(self, registry):
        class Incomplete(BasePermission):
            id = "incomplete"

        with pytest.raises(ResolutionError):
            registry.resolve(Incomplete)

    def test_not_a_reference(self, registry):
        with pytest.raises(ResolutionError):
            registry.resolve(42)

    def test_unregister(self, registry):
        registry.register("content.create_post", CreatePost)

        assert registry.unregister("content.create_post") is True
        assert registry.unregister("content.create_post") is False


class TestModuleCatalog:

    def test_lists_modules(self, catalog):
        assert [m.id for m in catalog.list_modules()] == ["user", "admin", "content", "legacy"]

    def test_builds_permissions_in_module_order(self, catalog):
        keys = [p.key for p in catalog.build_permissions()]

        assert keys == [
            ("user", "view_profile"),
            ("admin", "manage_users"),
            ("content", "create_post"),
        ]

    def test_non_permission_module_provides_nothing(self, catalog):
        assert catalog.get_module("legacy") is not None
        assert catalog.permissions_of("legacy") == []
        assert catalog.permissions_of("missing") == []

    def test_registers_identifiers(self, catalog):
        assert set(catalog.registry.identifiers()) == {
            "user.view_profile",
            "admin.manage_users",
            "content.create_post",
        }
        resolved = catalog.registry.resolve("admin.manage_users")
        assert resolved is catalog.permissions_of("admin")[0]

    def test_duplicate_module_rejected(self, catalog):
        with pytest.raises(ValueError):
            catalog.add_module(PermissionModule("user", [ViewProfile]))

    def test_module_class_declaration(self):
        class ContentModule(PermissionModule):
            id = "content"
            permissions = (CreatePost,)

        catalog = ModuleCatalog([ContentModule()])

        assert catalog.build_permissions() == [CreatePost()]


class TestImportModules:

    def test_module_class_is_instantiated(self):
        modules = import_modules("conftest:ContentModule")

        assert [m.id for m in modules] == ["content"]
        assert isinstance(modules[0], PermissionModule)

    def test_factory_with_dotted_path(self):
        modules = import_modules("conftest.staff_modules")

        assert [m.id for m in modules] == ["user", "admin"]

    def test_catalog_from_import_paths(self):
        catalog = ModuleCatalog.from_import_paths(["conftest:ContentModule", "conftest:staff_modules"])

        assert [m.id for m in catalog.list_modules()] == ["content", "user", "admin"]
        assert catalog.registry.resolve("admin.manage_users") == ManageUsers()

    def test_empty_paths_give_empty_catalog(self):
        assert ModuleCatalog.from_import_paths([]).build_permissions() == []

    @pytest.mark.parametrize("path", ["ContentModule", ":ContentModule", "conftest:"])
    def test_invalid_path(self, path):
        with pytest.raises(ValueError):
            import_modules(path)
