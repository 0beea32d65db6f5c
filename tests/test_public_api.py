"""Tests for public API surface — verifies all __init__.py re-exports."""

from __future__ import annotations

import importlib

import pytest


class TestTopLevelExports:
    EXPECTED = {
        "__version__",
        "AuthScope",
        "Context",
        "DuplicateAssignmentError",
        "InvalidContextError",
        "PermissionCapable",
        "PermissionsDisabledError",
        "RbacError",
        "RoleCapable",
        "RolePermissions",
        "ScopeNotFoundError",
        "ScopeRegistry",
        "SubjectAuthorization",
        "SubjectLike",
        "SubjectPermissions",
        "SubjectRoles",
        "ValidationError",
        "authorization_for",
        "configure",
        "get_default_registry",
        "get_scope",
        "register_scope",
        "role_permissions_for",
    }

    def test_all_matches_expected(self) -> None:
        import sqla_rbac

        assert set(sqla_rbac.__all__) == self.EXPECTED

    def test_version_is_string(self) -> None:
        import sqla_rbac

        assert isinstance(sqla_rbac.__version__, str)


@pytest.mark.parametrize(
    "module_name",
    [
        "sqla_rbac",
        "sqla_rbac.config",
        "sqla_rbac.context",
        "sqla_rbac.exceptions",
        "sqla_rbac.explain",
        "sqla_rbac.models",
        "sqla_rbac.resolver",
        "sqla_rbac.testing",
    ],
)
def test_all_names_resolve(module_name: str) -> None:
    """Every name in ``__all__`` must exist on the module."""
    module = importlib.import_module(module_name)
    for name in module.__all__:
        assert hasattr(module, name), f"{module_name}.{name} is missing"
