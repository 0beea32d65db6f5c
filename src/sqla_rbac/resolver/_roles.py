"""SubjectRoles — role assignment and lookup for one subject."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from sqla_rbac._types import ContextArg, SubjectLike, TargetRef
from sqla_rbac.config._config import AuthScope
from sqla_rbac.context._context import Context
from sqla_rbac.resolver._base import ScopedResolver
from sqla_rbac.resolver._queries import (
    role_subject_or_higher_stmt,
    role_subject_stmt,
    subject_roles_stmt,
)
from sqla_rbac.resolver._targets import destroy, find_or_create, find_target, verify_target_context

__all__ = ["SubjectRoles"]


class SubjectRoles(ScopedResolver):
    """Role operations for a single subject within an auth scope.

    Every operation takes an optional *context* (anything
    ``Context.parse`` accepts) and *force_context*. With
    ``force_context=None`` the scope's default applies.

    Example::

        roles = SubjectRoles(session, user, scope=scope)
        roles.assign_role("editor", post)
        roles.has_role("editor", post)        # True
        roles.has_role("editor", Post)        # False, only granted on one post
        roles.highest_role(post)              # <Role 'editor' ...>
    """

    def __init__(self, session: Session, subject: SubjectLike, *, scope: AuthScope) -> None:
        super().__init__(session, subject, scope=scope)
        self._subject = subject

    @property
    def subject(self) -> SubjectLike:
        return self._subject

    # -- targets -----------------------------------------------------------

    def target_role(
        self,
        role: TargetRef,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> Any | None:
        """Resolve a role instance or slug, walking the context chain.

        See :func:`~sqla_rbac.resolver.find_target`.
        """
        return find_target(
            self._session,
            self._scope.role_class,
            role,
            Context.parse(context),
            self._scope.resolve_force_context(force_context),
        )

    # -- assignment --------------------------------------------------------

    def assign_role(
        self,
        role: TargetRef,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> Any | None:
        """Assign a role to the subject within *context*.

        Idempotent: assigning the same role in the same context again
        returns the existing record.

        Returns:
            The role-subject record, or ``None`` if the role does not
            resolve or is bound to a context that does not contain
            *context*.
        """
        ctx = Context.parse(context)
        target = self.target_role(role, ctx, force_context)
        if not verify_target_context(target, ctx):
            self._log_assignment("assign_role", target, ctx, None)
            return None

        record = find_or_create(
            self._session,
            self._scope.role_subject_class,
            {
                self._scope.subject_foreign_key: self._subject.id,
                self._scope.role_foreign_key: target.id,
                "context_type": ctx.class_name,
                "context_id": ctx.id,
            },
        )
        self._log_assignment("assign_role", target, ctx, record)
        return record

    def unassign_role(
        self,
        role: TargetRef,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> bool:
        """Remove the subject's assignment of a role at exactly *context*.

        Returns:
            ``True`` if an assignment was removed, ``False`` if the role
            does not resolve or was not assigned there.
        """
        ctx = Context.parse(context)
        target = self.target_role(role, ctx, force_context)
        if target is None:
            return False

        record = self.role_subject_for(target, ctx)
        if record is None:
            self._log_assignment("unassign_role", target, ctx, False)
            return False
        removed = destroy(self._session, record)
        self._log_assignment("unassign_role", target, ctx, removed)
        return removed

    # -- checks ------------------------------------------------------------

    def has_role(
        self,
        role: TargetRef,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> bool:
        """Check whether the subject holds a role within *context*.

        Unless forced, the assignment is looked up at *context*, then at
        the owning class (instance contexts only), then globally. The first
        hit wins.
        """
        force = self._scope.resolve_force_context(force_context)
        ctx = Context.parse(context)
        target = self.target_role(role, ctx, force)
        if target is None:
            self._log_check("has_role", None, ctx, force, False)
            return False

        for candidate in (ctx,) if force else ctx.chain():
            if self.role_subject_for(target, candidate) is not None:
                self._log_check("has_role", target, ctx, force, True, candidate)
                return True
        self._log_check("has_role", target, ctx, force, False)
        return False

    def has_role_or_higher(
        self,
        role: TargetRef,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> bool:
        """Check for the role itself or any role of equal or higher level.

        ``has_role`` is consulted first; then each context the check is
        allowed to see is searched for an assignment whose role has
        ``level >= target.level`` and is bound to the target's context.
        """
        force = self._scope.resolve_force_context(force_context)
        ctx = Context.parse(context)
        target = self.target_role(role, ctx, force)
        if target is None:
            self._log_check("has_role_or_higher", None, ctx, force, False)
            return False
        if self.has_role(target, ctx, force):
            return True

        for candidate in (ctx,) if force else ctx.chain():
            if self.role_subject_or_higher_for(target, candidate) is not None:
                self._log_check("has_role_or_higher", target, ctx, force, True, candidate)
                return True
        self._log_check("has_role_or_higher", target, ctx, force, False)
        return False

    def highest_role(
        self,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> Any | None:
        """Return the highest-level role held within *context*, or ``None``.

        Uses the same resolution as :meth:`roles_for`; ties go to the
        lowest role id.
        """
        role = self._scope.role_class
        stmt = (
            self._roles_stmt(context, force_context)
            .order_by(role.level.desc(), role.id)  # type: ignore[attr-defined]
            .limit(1)
        )
        return self._session.scalars(stmt).first()

    def roles_for(
        self,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> list[Any]:
        """Return every role held within *context*.

        Forced, only assignments made at exactly *context* count. Otherwise
        assignments with a NULL context component count too, so global and
        class-level assignments are included in one query.
        """
        return list(self._session.scalars(self._roles_stmt(context, force_context)).all())

    def has_roles_for(
        self,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> bool:
        """Return whether :meth:`roles_for` would return anything."""
        stmt = self._roles_stmt(context, force_context).limit(1)
        return self._session.scalars(stmt).first() is not None

    # -- single-context lookups -------------------------------------------

    def role_subject_for(self, target: Any, context: Context) -> Any | None:
        """The assignment of *target* at exactly *context*, if any."""
        stmt = role_subject_stmt(self._scope, self._subject.id, target.id, context)
        return self._session.scalars(stmt).first()

    def role_subject_or_higher_for(self, target: Any, context: Context) -> Any | None:
        """An assignment at exactly *context* of a role ranking at least *target*."""
        stmt = role_subject_or_higher_stmt(self._scope, self._subject.id, target, context)
        return self._session.scalars(stmt).first()

    # -- internals ---------------------------------------------------------

    def _roles_stmt(self, context: ContextArg, force_context: bool | None) -> Any:
        force = self._scope.resolve_force_context(force_context)
        return subject_roles_stmt(
            self._scope,
            self._subject.id,
            Context.parse(context),
            wildcard=not force,
        )
