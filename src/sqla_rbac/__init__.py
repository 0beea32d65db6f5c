"""sqla-rbac — Context-aware role and permission management for SQLAlchemy 2.0.

Roles and permissions can be granted globally, for a model class, or for a
single model instance; checks fall back from instance to class to global.

Example::

    from sqla_rbac import AuthScope, authorization_for, register_scope

    register_scope(AuthScope(subject_class=User, role_class=Role, ...))

    auth = authorization_for(session, user)
    auth.assign_role("editor", post)
    auth.has_role("editor", post)        # True
    auth.has_role("editor", Post)        # False
    auth.can("publish", post)
"""

from importlib.metadata import PackageNotFoundError, version

from sqla_rbac._subject import SubjectAuthorization, authorization_for, role_permissions_for
from sqla_rbac._types import PermissionCapable, RoleCapable, SubjectLike
from sqla_rbac.config import (
    AuthScope,
    ScopeRegistry,
    configure,
    get_default_registry,
    get_scope,
    register_scope,
)
from sqla_rbac.context import Context
from sqla_rbac.exceptions import (
    DuplicateAssignmentError,
    InvalidContextError,
    PermissionsDisabledError,
    RbacError,
    ScopeNotFoundError,
    ValidationError,
)
from sqla_rbac.resolver import RolePermissions, SubjectPermissions, SubjectRoles

try:
    __version__ = version("sqla-rbac")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
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
]
