"""RolePermissions — grant permissions to a role."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from sqla_rbac._types import ContextArg, TargetRef
from sqla_rbac.config._config import AuthScope
from sqla_rbac.context._context import Context
from sqla_rbac.exceptions import PermissionsDisabledError
from sqla_rbac.resolver._base import ScopedResolver
from sqla_rbac.resolver._queries import permission_role_stmt, role_permissions_stmt
from sqla_rbac.resolver._targets import destroy, find_or_create, find_target, verify_target_context

__all__ = ["RolePermissions"]


class RolePermissions(ScopedResolver):
    """Permission grants held by a single role.

    Subjects holding the role inherit these grants (see
    :meth:`SubjectPermissions.has_permission`).

    Example::

        editor = RolePermissions(session, editor_role, scope=scope)
        editor.assign_permission("publish")           # everywhere
        editor.assign_permission("delete", Post)      # on every Post
        editor.has_permission("delete", post)         # True via Post
    """

    def __init__(self, session: Session, role: Any, *, scope: AuthScope) -> None:
        if not scope.with_permissions:
            raise PermissionsDisabledError(f"Auth scope {scope.name!r} has permissions disabled")
        super().__init__(session, role, scope=scope)
        self._role = role

    @property
    def role(self) -> Any:
        return self._role

    def target_permission(
        self,
        permission: TargetRef,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> Any | None:
        """Resolve a permission instance or slug, walking the context chain."""
        return find_target(
            self._session,
            self._scope.permission_class,  # type: ignore[arg-type]
            permission,
            Context.parse(context),
            self._scope.resolve_force_context(force_context),
        )

    def assign_permission(
        self,
        permission: TargetRef,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> Any | None:
        """Grant a permission to the role within *context*.

        Both the permission and the role must be assignable within
        *context*: a role bound to ``Post`` cannot receive grants for
        ``Comment``.

        Returns:
            The permission-role record (existing or new), or ``None``.
        """
        ctx = Context.parse(context)
        target = self.target_permission(permission, ctx, force_context)
        if not (verify_target_context(target, ctx) and verify_target_context(self._role, ctx)):
            self._log_assignment("assign_permission", target, ctx, None)
            return None

        record = find_or_create(
            self._session,
            self._scope.permission_role_class,  # type: ignore[arg-type]
            {
                self._scope.role_foreign_key: self._role.id,
                self._scope.permission_foreign_key: target.id,
                "context_type": ctx.class_name,
                "context_id": ctx.id,
            },
        )
        self._log_assignment("assign_permission", target, ctx, record)
        return record

    def unassign_permission(
        self,
        permission: TargetRef,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> bool:
        """Remove the role's grant made at exactly *context*."""
        ctx = Context.parse(context)
        target = self.target_permission(permission, ctx, force_context)
        if target is None:
            return False

        record = self.permission_role_for(target, ctx)
        if record is None:
            self._log_assignment("unassign_permission", target, ctx, False)
            return False
        removed = destroy(self._session, record)
        self._log_assignment("unassign_permission", target, ctx, removed)
        return removed

    def has_permission(
        self,
        permission: TargetRef,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> bool:
        """Check whether the role was granted a permission within *context*.

        Unless forced, walks ``context.chain()`` and stops at the first grant.
        """
        force = self._scope.resolve_force_context(force_context)
        ctx = Context.parse(context)
        target = self.target_permission(permission, ctx, force)
        if target is None:
            self._log_check("role_has_permission", None, ctx, force, False)
            return False

        for candidate in (ctx,) if force else ctx.chain():
            if self.permission_role_for(target, candidate) is not None:
                self._log_check("role_has_permission", target, ctx, force, True, candidate)
                return True
        self._log_check("role_has_permission", target, ctx, force, False)
        return False

    def permissions_for(
        self,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> list[Any]:
        """Return every permission granted to the role within *context*."""
        force = self._scope.resolve_force_context(force_context)
        stmt = role_permissions_stmt(
            self._scope,
            self._role.id,
            Context.parse(context),
            wildcard=not force,
        )
        return list(self._session.scalars(stmt).all())

    def permission_role_for(self, target: Any, context: Context) -> Any | None:
        """The role's grant of *target* at exactly *context*, if any."""
        stmt = permission_role_stmt(self._scope, [self._role.id], target.id, context)
        return self._session.scalars(stmt).first()
