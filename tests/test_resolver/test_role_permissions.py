"""Tests for RolePermissions — granting permissions to roles."""

from __future__ import annotations

import pytest

from sqla_rbac.context import Context
from sqla_rbac.exceptions import PermissionsDisabledError
from sqla_rbac.resolver import RolePermissions
from tests.conftest import Comment, PermissionRole, Post


@pytest.fixture()
def editor(session, scope, sample_data) -> RolePermissions:
    return RolePermissions(session, sample_data["roles"]["editor"], scope=scope)


@pytest.fixture()
def reviewer(session, scope, sample_data) -> RolePermissions:
    return RolePermissions(session, sample_data["roles"]["reviewer"], scope=scope)


class TestRolePermissions:
    def test_disabled_scope(self, session, scope, sample_data):
        with pytest.raises(PermissionsDisabledError):
            RolePermissions(
                session,
                sample_data["roles"]["editor"],
                scope=scope.merge(with_permissions=False),
            )

    def test_assign(self, editor, sample_data):
        record = editor.assign_permission("publish")
        assert isinstance(record, PermissionRole)
        assert record.role_id == sample_data["roles"]["editor"].id
        assert record.context == Context()
        assert editor.assign_permission("publish") is record

    def test_role_bound_context_limits_grants(self, reviewer, sample_data):
        assert reviewer.assign_permission("publish", Comment) is None
        assert reviewer.assign_permission("publish") is None
        assert reviewer.assign_permission("publish", sample_data["posts"][42]) is not None

    def test_permission_bound_context_limits_grants(self, editor):
        assert editor.assign_permission("delete", Comment) is None
        assert editor.assign_permission("delete", Post) is not None

    def test_has_permission_walks_chain(self, editor, sample_data):
        editor.assign_permission("publish", Post)
        assert editor.has_permission("publish", sample_data["posts"][42]) is True
        assert editor.has_permission("publish", Post) is True
        assert editor.has_permission("publish") is False
        assert editor.has_permission("publish", Comment) is False

    def test_has_permission_forced(self, editor, sample_data):
        publish = sample_data["permissions"]["publish"]
        editor.assign_permission(publish)
        assert editor.has_permission(publish, sample_data["posts"][42], force_context=True) is False
        assert editor.has_permission(publish, force_context=True) is True

    def test_has_permission_unknown(self, editor):
        assert editor.has_permission("fly") is False

    def test_unassign(self, editor):
        editor.assign_permission("edit", Post)
        assert editor.unassign_permission("edit") is False
        assert editor.unassign_permission("edit", Post) is True
        assert editor.has_permission("edit", Post) is False
        assert editor.unassign_permission("fly") is False

    def test_permissions_for(self, reviewer, sample_data):
        reviewer.assign_permission("publish", sample_data["posts"][42])
        reviewer.assign_permission("delete", Post)

        assert {p.slug for p in reviewer.permissions_for(sample_data["posts"][42])} == {
            "publish",
            "delete",
        }
        assert [p.slug for p in reviewer.permissions_for(Post)] == ["delete"]
        assert [
            p.slug for p in reviewer.permissions_for(sample_data["posts"][42], force_context=True)
        ] == ["publish"]

    def test_permission_role_for(self, editor, sample_data):
        edit = sample_data["permissions"]["edit"]
        record = editor.assign_permission(edit, Post)
        assert editor.permission_role_for(edit, Context("Post")) is record
        assert editor.permission_role_for(edit, Context("Post", 42)) is None
