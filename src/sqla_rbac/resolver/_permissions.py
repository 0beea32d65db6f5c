"""SubjectPermissions — direct and role-inherited permissions for one subject."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy.orm import Session

from sqla_rbac._types import ContextArg, SubjectLike, TargetRef
from sqla_rbac.config._config import AuthScope
from sqla_rbac.context._context import Context
from sqla_rbac.exceptions import PermissionsDisabledError
from sqla_rbac.resolver._base import ScopedResolver
from sqla_rbac.resolver._queries import (
    permission_role_stmt,
    permission_subject_stmt,
    subject_permissions_stmt,
)
from sqla_rbac.resolver._roles import SubjectRoles
from sqla_rbac.resolver._targets import destroy, find_or_create, find_target, verify_target_context

__all__ = ["SubjectPermissions"]


class SubjectPermissions(ScopedResolver):
    """Permission operations for a single subject within an auth scope.

    A subject has a permission when it was granted directly, or granted to
    any role the subject holds.

    Args:
        session: The session used for lookups and writes.
        subject: The subject being authorized.
        scope: The auth scope; must have ``with_permissions`` set.
        roles: Role resolver to share; built from the same arguments when
            omitted.

    Raises:
        PermissionsDisabledError: If the scope has permissions disabled.

    Example::

        perms = SubjectPermissions(session, user, scope=scope)
        perms.has_permission("publish", post)
        perms.permissions_for(post)
    """

    def __init__(
        self,
        session: Session,
        subject: SubjectLike,
        *,
        scope: AuthScope,
        roles: SubjectRoles | None = None,
    ) -> None:
        if not scope.with_permissions:
            raise PermissionsDisabledError(f"Auth scope {scope.name!r} has permissions disabled")
        super().__init__(session, subject, scope=scope)
        self._subject = subject
        self._roles = roles if roles is not None else SubjectRoles(session, subject, scope=scope)

    @property
    def roles(self) -> SubjectRoles:
        return self._roles

    # -- targets -----------------------------------------------------------

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

    # -- assignment --------------------------------------------------------

    def assign_permission(
        self,
        permission: TargetRef,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> Any | None:
        """Grant a permission directly to the subject within *context*.

        Returns:
            The permission-subject record (existing or new), or ``None`` if
            the permission does not resolve or cannot be granted there.
        """
        ctx = Context.parse(context)
        target = self.target_permission(permission, ctx, force_context)
        if not verify_target_context(target, ctx):
            self._log_assignment("assign_permission", target, ctx, None)
            return None

        record = find_or_create(
            self._session,
            self._scope.permission_subject_class,  # type: ignore[arg-type]
            {
                self._scope.subject_foreign_key: self._subject.id,
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
        """Remove a direct grant made at exactly *context*.

        Grants inherited through roles are untouched.
        """
        ctx = Context.parse(context)
        target = self.target_permission(permission, ctx, force_context)
        if target is None:
            return False

        record = self.permission_subject_for(target, ctx)
        if record is None:
            self._log_assignment("unassign_permission", target, ctx, False)
            return False
        removed = destroy(self._session, record)
        self._log_assignment("unassign_permission", target, ctx, removed)
        return removed

    # -- checks ------------------------------------------------------------

    def has_permission(
        self,
        permission: TargetRef,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> bool:
        """Check whether the subject holds a permission within *context*.

        The subject's roles are resolved once at *context* (scope default
        resolution, so globally held roles count). Unless forced, each step
        of ``context.chain()`` is then tried in order: a direct grant at
        that step, or a grant at that step to one of those roles.
        """
        force = self._scope.resolve_force_context(force_context)
        ctx = Context.parse(context)
        target = self.target_permission(permission, ctx, force)
        if target is None:
            self._log_check("has_permission", None, ctx, force, False)
            return False

        role_ids = self._role_ids(ctx)
        for candidate in (ctx,) if force else ctx.chain():
            if self.permission_role_or_subject_for(target, candidate, role_ids) is not None:
                self._log_check("has_permission", target, ctx, force, True, candidate)
                return True
        self._log_check("has_permission", target, ctx, force, False)
        return False

    def permissions_for(
        self,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> list[Any]:
        """Return every permission held within *context*.

        Includes direct grants and grants to the subject's roles. Forced,
        both grant paths must match *context* exactly; otherwise rows with
        a NULL context component match as well.
        """
        return list(self._session.scalars(self._permissions_stmt(context, force_context)).all())

    def has_permissions_for(
        self,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> bool:
        """Return whether :meth:`permissions_for` would return anything."""
        stmt = self._permissions_stmt(context, force_context).limit(1)
        return self._session.scalars(stmt).first() is not None

    # -- single-context lookups -------------------------------------------

    def permission_subject_for(self, target: Any, context: Context) -> Any | None:
        """The direct grant of *target* at exactly *context*, if any."""
        stmt = permission_subject_stmt(self._scope, self._subject.id, target.id, context)
        return self._session.scalars(stmt).first()

    def permission_role_for(
        self,
        target: Any,
        context: Context,
        role_ids: Sequence[Any] | None = None,
    ) -> Any | None:
        """A grant of *target* at exactly *context* to one of the subject's roles.

        *role_ids* defaults to the roles held at *context*.
        """
        if role_ids is None:
            role_ids = self._role_ids(context)
        if not role_ids:
            return None
        stmt = permission_role_stmt(self._scope, role_ids, target.id, context)
        return self._session.scalars(stmt).first()

    def permission_role_or_subject_for(
        self,
        target: Any,
        context: Context,
        role_ids: Sequence[Any] | None = None,
    ) -> Any | None:
        """The direct grant at *context*, else a role grant at *context*."""
        record = self.permission_subject_for(target, context)
        if record is not None:
            return record
        return self.permission_role_for(target, context, role_ids)

    # -- internals ---------------------------------------------------------

    def _role_ids(self, context: Context) -> list[Any]:
        return [role.id for role in self._roles.roles_for(context)]

    def _permissions_stmt(self, context: ContextArg, force_context: bool | None) -> Any:
        force = self._scope.resolve_force_context(force_context)
        ctx = Context.parse(context)
        return subject_permissions_stmt(
            self._scope,
            self._subject.id,
            self._role_ids(ctx),
            ctx,
            wildcard=not force,
        )
