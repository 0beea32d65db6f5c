"""explain_role() / explain_permission() — walk a check step by step."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from sqla_rbac._subject import _resolve_scope
from sqla_rbac._types import ContextArg, SubjectLike, TargetRef
from sqla_rbac.config._config import AuthScope
from sqla_rbac.config._registry import ScopeRegistry
from sqla_rbac.context._context import Context
from sqla_rbac.explain._models import AccessExplanation, ContextStep
from sqla_rbac.resolver._permissions import SubjectPermissions
from sqla_rbac.resolver._queries import permission_role_stmt
from sqla_rbac.resolver._roles import SubjectRoles
from sqla_rbac.resolver._targets import normalize_slug

__all__ = ["explain_permission", "explain_role"]


def _describe_ref(ref: Any) -> str:
    slug = getattr(ref, "slug", None)
    return str(slug) if slug is not None else normalize_slug(ref)


def _not_found(
    check: str, subject: Any, ref: Any, ctx: Context, force: bool
) -> AccessExplanation:
    return AccessExplanation(
        check=check,
        subject_repr=repr(subject),
        target=_describe_ref(ref),
        context=str(ctx),
        force_context=force,
        target_found=False,
        granted=False,
        steps=[],
    )


def explain_role(
    session: Session,
    subject: SubjectLike,
    role: TargetRef,
    context: ContextArg = None,
    force_context: bool | None = None,
    *,
    scope: AuthScope | None = None,
    registry: ScopeRegistry | None = None,
    scope_name: str = "default",
) -> AccessExplanation:
    """Explain a :meth:`~sqla_rbac.resolver.SubjectRoles.has_role` check.

    Every step of the chain is evaluated (the real check stops at the first
    match), so the output also shows redundant assignments.

    Returns:
        An ``AccessExplanation`` whose ``granted`` equals ``has_role``'s result.
    """
    resolved = _resolve_scope(scope, registry, scope_name)
    roles = SubjectRoles(session, subject, scope=resolved)
    force = resolved.resolve_force_context(force_context)
    ctx = Context.parse(context)

    target = roles.target_role(role, ctx, force)
    if target is None:
        return _not_found("has_role", subject, role, ctx, force)

    steps: list[ContextStep] = []
    for candidate in (ctx,) if force else ctx.chain():
        matched = roles.role_subject_for(target, candidate) is not None
        steps.append(
            ContextStep(
                context=str(candidate),
                matched=matched,
                via="subject" if matched else None,
            )
        )

    return AccessExplanation(
        check="has_role",
        subject_repr=repr(subject),
        target=target.slug,
        context=str(ctx),
        force_context=force,
        target_found=True,
        granted=any(step.matched for step in steps),
        steps=steps,
    )


def explain_permission(
    session: Session,
    subject: SubjectLike,
    permission: TargetRef,
    context: ContextArg = None,
    force_context: bool | None = None,
    *,
    scope: AuthScope | None = None,
    registry: ScopeRegistry | None = None,
    scope_name: str = "default",
) -> AccessExplanation:
    """Explain a :meth:`~sqla_rbac.resolver.SubjectPermissions.has_permission` check.

    For each chain step a direct grant is reported as ``via="subject"``;
    otherwise the first of the subject's roles (highest level first) with a
    grant at that step is reported as ``via="role:<slug>"``.

    Raises:
        PermissionsDisabledError: If the scope has permissions disabled.
    """
    resolved = _resolve_scope(scope, registry, scope_name)
    perms = SubjectPermissions(session, subject, scope=resolved)
    force = resolved.resolve_force_context(force_context)
    ctx = Context.parse(context)

    target = perms.target_permission(permission, ctx, force)
    if target is None:
        return _not_found("has_permission", subject, permission, ctx, force)

    held = sorted(perms.roles.roles_for(ctx), key=lambda r: (-r.level, r.id))
    steps: list[ContextStep] = []
    for candidate in (ctx,) if force else ctx.chain():
        via: str | None = None
        if perms.permission_subject_for(target, candidate) is not None:
            via = "subject"
        else:
            for held_role in held:
                stmt = permission_role_stmt(resolved, [held_role.id], target.id, candidate)
                if session.scalars(stmt).first() is not None:
                    via = f"role:{held_role.slug}"
                    break
        steps.append(ContextStep(context=str(candidate), matched=via is not None, via=via))

    return AccessExplanation(
        check="has_permission",
        subject_repr=repr(subject),
        target=target.slug,
        context=str(ctx),
        force_context=force,
        target_found=True,
        granted=any(step.matched for step in steps),
        steps=steps,
    )
