"""Resolver — role and permission assignment and lookup."""

from sqla_rbac.resolver._permissions import SubjectPermissions
from sqla_rbac.resolver._queries import (
    context_clause,
    subject_permissions_stmt,
    subject_roles_stmt,
)
from sqla_rbac.resolver._role_permissions import RolePermissions
from sqla_rbac.resolver._roles import SubjectRoles
from sqla_rbac.resolver._targets import find_or_create, find_target, verify_target_context

__all__ = [
    "RolePermissions",
    "SubjectPermissions",
    "SubjectRoles",
    "context_clause",
    "find_or_create",
    "find_target",
    "subject_permissions_stmt",
    "subject_roles_stmt",
    "verify_target_context",
]
