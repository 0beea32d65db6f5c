"""Tests for AuthScope — derived names, validation and merge()."""

from __future__ import annotations

import dataclasses

import pytest

from sqla_rbac.config import AuthScope, foreign_key_for, underscore
from tests.conftest import (
    Permission,
    PermissionRole,
    Role,
    RoleUser,
    User,
    make_scope,
)


class AdminAccount:
    pass


class HTTPClient:
    pass


class PUser:
    pass


class TestForeignKeyFor:
    def test_simple_name(self):
        assert foreign_key_for(User) == "user_id"

    def test_camel_case_name(self):
        assert foreign_key_for(AdminAccount) == "admin_account_id"

    def test_leading_acronym(self):
        assert foreign_key_for(HTTPClient) == "http_client_id"
        assert foreign_key_for(PUser) == "p_user_id"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Post", "post"),
            ("SuperAdmin", "super_admin"),
            ("HTTPClient", "http_client"),
            ("APIKey2Token", "api_key2_token"),
            ("super-admin", "super_admin"),
        ],
    )
    def test_underscore(self, name, expected):
        assert underscore(name) == expected


class TestAuthScopeDefaults:
    def test_defaults(self):
        scope = make_scope()
        assert scope.name == "default"
        assert scope.with_permissions is True
        assert scope.force_context is False
        assert scope.log_decisions is False

    def test_foreign_keys_derived_from_class_names(self):
        scope = make_scope()
        assert scope.subject_foreign_key == "user_id"
        assert scope.role_foreign_key == "role_id"
        assert scope.permission_foreign_key == "permission_id"

    def test_explicit_foreign_key_kept(self):
        scope = make_scope(subject_foreign_key="user_id")
        assert scope.subject_foreign_key == "user_id"

    def test_table_names(self):
        scope = make_scope()
        assert scope.subjects_table_name == "users"
        assert scope.roles_table_name == "roles"
        assert scope.permissions_table_name == "permissions"
        assert scope.role_subjects_table_name == "role_users"
        assert scope.permission_subjects_table_name == "permission_users"
        assert scope.permission_roles_table_name == "permission_roles"

    def test_frozen(self):
        scope = make_scope()
        with pytest.raises(dataclasses.FrozenInstanceError):
            scope.force_context = True  # type: ignore[misc]


class TestAuthScopeValidation:
    def test_empty_name_rejected(self):
        with pytest.raises(ValueError, match="non-empty"):
            make_scope(name="")

    def test_missing_permission_classes_rejected(self):
        with pytest.raises(ValueError, match="permission_role_class"):
            make_scope(permission_role_class=None)

    def test_roles_only_scope(self):
        scope = AuthScope(
            subject_class=User,
            role_class=Role,
            role_subject_class=RoleUser,
            with_permissions=False,
        )
        assert scope.permission_class is None
        assert scope.permission_foreign_key is None
        assert scope.permissions_table_name is None

    def test_join_class_without_foreign_key_column(self):
        with pytest.raises(ValueError, match="account_id"):
            make_scope(subject_foreign_key="account_id")

    def test_undeclared_foreign_key_rejected(self):
        class LooseJoin:
            __rbac_foreign_keys__ = ("user_id",)
            user_id = None
            role_id = None

        with pytest.raises(ValueError, match="__rbac_foreign_keys__"):
            make_scope(role_subject_class=LooseJoin)

    def test_permission_join_classes_checked(self):
        with pytest.raises(ValueError, match="PermissionUser"):
            make_scope(permission_foreign_key="perm_id")


class TestMerge:
    def test_overrides_applied(self):
        scope = make_scope()
        strict = scope.merge(force_context=True, log_decisions=True)
        assert strict.force_context is True
        assert strict.log_decisions is True
        assert strict.with_permissions is True

    def test_original_unchanged(self):
        scope = make_scope()
        scope.merge(force_context=True)
        assert scope.force_context is False

    def test_classes_and_keys_carried_over(self):
        merged = make_scope().merge(name="api")
        assert merged.name == "api"
        assert merged.permission_class is Permission
        assert merged.permission_role_class is PermissionRole
        assert merged.role_foreign_key == "role_id"

    def test_none_keeps_value(self):
        scope = make_scope(force_context=True)
        assert scope.merge(force_context=None).force_context is True

    def test_explicit_false_overrides(self):
        scope = make_scope(force_context=True)
        assert scope.merge(force_context=False).force_context is False


class TestResolveForceContext:
    def test_none_uses_scope_default(self):
        assert make_scope().resolve_force_context(None) is False
        assert make_scope(force_context=True).resolve_force_context(None) is True

    def test_explicit_value_wins(self):
        assert make_scope(force_context=True).resolve_force_context(False) is False
        assert make_scope().resolve_force_context(True) is True
