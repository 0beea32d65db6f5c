"""Declarative building blocks for role, permission and join tables."""

from sqla_rbac.models._mixins import (
    ContextColumnsMixin,
    JoinRecordMixin,
    PermissionMixin,
    PermissionRoleMixin,
    PermissionSubjectMixin,
    RoleMixin,
    RoleSubjectMixin,
)

__all__ = [
    "ContextColumnsMixin",
    "JoinRecordMixin",
    "PermissionMixin",
    "PermissionRoleMixin",
    "PermissionSubjectMixin",
    "RoleMixin",
    "RoleSubjectMixin",
]
