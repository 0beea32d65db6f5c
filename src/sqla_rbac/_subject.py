"""SubjectAuthorization — one object exposing a subject's roles and permissions."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy.orm import Session

from sqla_rbac._types import ContextArg, SubjectLike, TargetRef
from sqla_rbac.config._config import AuthScope
from sqla_rbac.config._registry import ScopeRegistry, get_default_registry
from sqla_rbac.exceptions import PermissionsDisabledError
from sqla_rbac.resolver._permissions import SubjectPermissions
from sqla_rbac.resolver._role_permissions import RolePermissions
from sqla_rbac.resolver._roles import SubjectRoles

__all__ = ["SubjectAuthorization", "authorization_for", "role_permissions_for"]


def _resolve_scope(
    scope: AuthScope | None,
    registry: ScopeRegistry | None,
    scope_name: str,
) -> AuthScope:
    if scope is not None:
        return scope
    target = registry if registry is not None else get_default_registry()
    return target.lookup(scope_name)


class SubjectAuthorization:
    """Role and permission operations for one subject.

    The scope is resolved once, at construction. Permission support is
    decided then as well: with ``with_permissions=False`` the
    :attr:`permissions` resolver is ``None`` and every permission method
    raises :class:`~sqla_rbac.exceptions.PermissionsDisabledError`.

    Args:
        session: Session used for every lookup and write.
        subject: The subject being authorized.
        scope: Explicit auth scope. Takes precedence over *registry*.
        registry: Registry to look *scope_name* up in. Defaults to the
            global registry.
        scope_name: Name of the registered scope to use.

    Example::

        auth = SubjectAuthorization(session, user)
        auth.assign_role("admin")
        auth.has_role("admin", post)      # True, global assignments apply
        auth.can("publish", post)
    """

    def __init__(
        self,
        session: Session,
        subject: SubjectLike,
        *,
        scope: AuthScope | None = None,
        registry: ScopeRegistry | None = None,
        scope_name: str = "default",
    ) -> None:
        self._scope = _resolve_scope(scope, registry, scope_name)
        self._subject = subject
        self._roles = SubjectRoles(session, subject, scope=self._scope)
        self._permissions: SubjectPermissions | None = None
        if self._scope.with_permissions:
            self._permissions = SubjectPermissions(
                session, subject, scope=self._scope, roles=self._roles
            )

    def __repr__(self) -> str:
        return f"SubjectAuthorization({self._subject!r}, scope={self._scope.name!r})"

    @property
    def scope(self) -> AuthScope:
        return self._scope

    @property
    def subject(self) -> SubjectLike:
        return self._subject

    @property
    def roles(self) -> SubjectRoles:
        return self._roles

    @property
    def permissions(self) -> SubjectPermissions | None:
        return self._permissions

    def _require_permissions(self) -> SubjectPermissions:
        if self._permissions is None:
            raise PermissionsDisabledError(
                f"Auth scope {self._scope.name!r} has permissions disabled"
            )
        return self._permissions

    # -- roles -------------------------------------------------------------

    def target_role(
        self, role: TargetRef, context: ContextArg = None, force_context: bool | None = None
    ) -> Any | None:
        return self._roles.target_role(role, context, force_context)

    def assign_role(
        self, role: TargetRef, context: ContextArg = None, force_context: bool | None = None
    ) -> Any | None:
        return self._roles.assign_role(role, context, force_context)

    def unassign_role(
        self, role: TargetRef, context: ContextArg = None, force_context: bool | None = None
    ) -> bool:
        return self._roles.unassign_role(role, context, force_context)

    def has_role(
        self, role: TargetRef, context: ContextArg = None, force_context: bool | None = None
    ) -> bool:
        return self._roles.has_role(role, context, force_context)

    def has_role_or_higher(
        self, role: TargetRef, context: ContextArg = None, force_context: bool | None = None
    ) -> bool:
        return self._roles.has_role_or_higher(role, context, force_context)

    def highest_role(
        self, context: ContextArg = None, force_context: bool | None = None
    ) -> Any | None:
        return self._roles.highest_role(context, force_context)

    def roles_for(
        self, context: ContextArg = None, force_context: bool | None = None
    ) -> Sequence[Any]:
        return self._roles.roles_for(context, force_context)

    def has_roles_for(self, context: ContextArg = None, force_context: bool | None = None) -> bool:
        return self._roles.has_roles_for(context, force_context)

    # -- permissions -------------------------------------------------------

    def target_permission(
        self,
        permission: TargetRef,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> Any | None:
        return self._require_permissions().target_permission(permission, context, force_context)

    def assign_permission(
        self,
        permission: TargetRef,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> Any | None:
        return self._require_permissions().assign_permission(permission, context, force_context)

    def unassign_permission(
        self,
        permission: TargetRef,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> bool:
        return self._require_permissions().unassign_permission(permission, context, force_context)

    def has_permission(
        self,
        permission: TargetRef,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> bool:
        return self._require_permissions().has_permission(permission, context, force_context)

    def permissions_for(
        self, context: ContextArg = None, force_context: bool | None = None
    ) -> Sequence[Any]:
        return self._require_permissions().permissions_for(context, force_context)

    def has_permissions_for(
        self, context: ContextArg = None, force_context: bool | None = None
    ) -> bool:
        return self._require_permissions().has_permissions_for(context, force_context)

    # -- aliases -----------------------------------------------------------

    at_least_role = has_role_or_higher
    role_or_higher = has_role_or_higher
    remove_role = unassign_role
    can = has_permission
    allowed_to = has_permission
    remove_permission = unassign_permission


def authorization_for(
    session: Session,
    subject: SubjectLike,
    *,
    scope: AuthScope | None = None,
    registry: ScopeRegistry | None = None,
    scope_name: str = "default",
) -> SubjectAuthorization:
    """Build a :class:`SubjectAuthorization` for *subject*.

    Example::

        authorization_for(session, user).has_role("admin")
    """
    return SubjectAuthorization(
        session, subject, scope=scope, registry=registry, scope_name=scope_name
    )


def role_permissions_for(
    session: Session,
    role: Any,
    *,
    scope: AuthScope | None = None,
    registry: ScopeRegistry | None = None,
    scope_name: str = "default",
) -> RolePermissions:
    """Build a :class:`~sqla_rbac.resolver.RolePermissions` for *role*.

    Raises:
        PermissionsDisabledError: If the scope has permissions disabled.
    """
    return RolePermissions(session, role, scope=_resolve_scope(scope, registry, scope_name))
