"""Statement builders for role and permission lookups.

Four shapes cover every lookup the resolvers make:

- exact match on (keys, context) — ``join_record_stmt``,
  ``role_subject_stmt``, ``permission_subject_stmt``,
  ``permission_role_stmt``, ``target_stmt``
- level threshold — ``role_subject_or_higher_stmt``
- NULL-or-equal wildcard — ``subject_roles_stmt(wildcard=True)``
- two-table outer-join union — ``subject_permissions_stmt``

Every builder returns a ``Select``; callers decide how to execute it.
All mapped classes are expected to expose an ``id`` primary key.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import ColumnElement, Select, and_, or_, select

from sqla_rbac.config._config import AuthScope
from sqla_rbac.context._context import (
    Context,
    sql_context_type_is,
    sql_is_null_or_equal,
    sql_is_or_equal,
)

__all__ = [
    "context_clause",
    "join_record_stmt",
    "permission_role_stmt",
    "permission_subject_stmt",
    "role_permissions_stmt",
    "role_subject_or_higher_stmt",
    "role_subject_stmt",
    "subject_permissions_stmt",
    "subject_roles_stmt",
    "target_stmt",
]


def context_clause(
    entity: Any,
    context: Context,
    *,
    wildcard: bool = False,
) -> ColumnElement[bool]:
    """Match *entity*'s context columns against *context*.

    With ``wildcard=False`` the row's context must equal *context* exactly
    (NULL matching only NULL). With ``wildcard=True`` a NULL column matches
    any value, so global rows and class-level rows are picked up alongside
    exact ones. ``context_type`` is always compared case-insensitively.

    Example::

        context_clause(RoleUser, Context("Post", 42), wildcard=True)
        # (lower(context_type) = 'post' OR context_type IS NULL)
        #   AND (context_id = 42 OR context_id IS NULL)
    """
    match_id = sql_is_null_or_equal if wildcard else sql_is_or_equal
    return and_(
        sql_context_type_is(entity.context_type, context.class_name, wildcard=wildcard),
        match_id(entity.context_id, context.id),
    )


def join_record_stmt(join_class: Any, values: Mapping[str, Any]) -> Select[Any]:
    """Exact lookup of a join record by column values.

    NULL-safe, and ``context_type`` is compared case-insensitively so the
    lookup agrees with insert-time uniqueness validation.
    """
    clauses = [
        sql_context_type_is(join_class.context_type, value)
        if key == "context_type"
        else sql_is_or_equal(getattr(join_class, key), value)
        for key, value in values.items()
    ]
    return select(join_class).where(*clauses).limit(1)


def target_stmt(entity: Any, slug: str, context: Context) -> Select[Any]:
    """Find a role or permission by slug bound to exactly *context*."""
    return (
        select(entity)
        .where(entity.slug == slug, context_clause(entity, context))
        .limit(1)
    )


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------


def role_subject_stmt(
    scope: AuthScope,
    subject_id: Any,
    role_id: Any,
    context: Context,
) -> Select[Any]:
    """The subject's assignment of one role at exactly *context*."""
    role = scope.role_class
    role_subject = scope.role_subject_class
    role_fk = getattr(role_subject, scope.role_foreign_key)
    return (
        select(role_subject)
        .join(role, role_fk == role.id)
        .where(
            getattr(role_subject, scope.subject_foreign_key) == subject_id,
            role_fk == role_id,
            context_clause(role_subject, context),
        )
        .limit(1)
    )


def role_subject_or_higher_stmt(
    scope: AuthScope,
    subject_id: Any,
    target: Any,
    context: Context,
) -> Select[Any]:
    """An assignment at exactly *context* whose role outranks or equals *target*.

    The candidate role must be bound to the same context as *target*
    (NULL matching NULL), so a level-10 role for ``Comment`` does not
    satisfy a level-5 role for ``Post``.
    """
    role = scope.role_class
    role_subject = scope.role_subject_class
    return (
        select(role_subject)
        .join(
            role,
            getattr(role_subject, scope.role_foreign_key) == role.id,
        )
        .where(
            getattr(role_subject, scope.subject_foreign_key) == subject_id,
            context_clause(role_subject, context),
            role.level >= target.level,
            sql_context_type_is(role.context_type, target.context_type),
            sql_is_or_equal(role.context_id, target.context_id),
        )
        .limit(1)
    )


def subject_roles_stmt(
    scope: AuthScope,
    subject_id: Any,
    context: Context,
    *,
    wildcard: bool,
) -> Select[Any]:
    """All distinct roles the subject holds at *context*.

    ``wildcard=True`` also returns roles whose assignment row has a NULL
    context component, which is how global and class-level assignments
    apply to narrower contexts in a single query.
    """
    role = scope.role_class
    role_subject = scope.role_subject_class
    return (
        select(role)
        .join(
            role_subject,
            getattr(role_subject, scope.role_foreign_key) == role.id,
        )
        .where(
            getattr(role_subject, scope.subject_foreign_key) == subject_id,
            context_clause(role_subject, context, wildcard=wildcard),
        )
        .distinct()
    )


# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------


def permission_subject_stmt(
    scope: AuthScope,
    subject_id: Any,
    permission_id: Any,
    context: Context,
) -> Select[Any]:
    """The subject's direct grant of one permission at exactly *context*."""
    permission_subject = scope.permission_subject_class
    return (
        select(permission_subject)
        .where(
            getattr(permission_subject, scope.subject_foreign_key) == subject_id,
            getattr(permission_subject, scope.permission_foreign_key) == permission_id,
            context_clause(permission_subject, context),
        )
        .limit(1)
    )


def permission_role_stmt(
    scope: AuthScope,
    role_ids: Sequence[Any],
    permission_id: Any,
    context: Context,
) -> Select[Any]:
    """A grant of one permission to any of *role_ids* at exactly *context*."""
    permission_role = scope.permission_role_class
    return (
        select(permission_role)
        .where(
            getattr(permission_role, scope.role_foreign_key).in_(list(role_ids)),
            getattr(permission_role, scope.permission_foreign_key) == permission_id,
            context_clause(permission_role, context),
        )
        .limit(1)
    )


def subject_permissions_stmt(
    scope: AuthScope,
    subject_id: Any,
    role_ids: Sequence[Any],
    context: Context,
    *,
    wildcard: bool,
) -> Select[Any]:
    """Union of direct and role-inherited permissions at *context*.

    Both join tables are LEFT JOINed onto the permission table and the two
    grant paths are OR'd, so one statement returns every permission the
    subject holds directly or through one of *role_ids*.
    """
    permission = scope.permission_class
    permission_role = scope.permission_role_class
    permission_subject = scope.permission_subject_class
    permission_fk = scope.permission_foreign_key
    return (
        select(permission)
        .outerjoin(
            permission_role,
            getattr(permission_role, permission_fk) == permission.id,
        )
        .outerjoin(
            permission_subject,
            getattr(permission_subject, permission_fk) == permission.id,
        )
        .where(
            or_(
                and_(
                    getattr(permission_subject, scope.subject_foreign_key) == subject_id,
                    context_clause(permission_subject, context, wildcard=wildcard),
                ),
                and_(
                    getattr(permission_role, scope.role_foreign_key).in_(list(role_ids)),
                    context_clause(permission_role, context, wildcard=wildcard),
                ),
            )
        )
        .distinct()
    )


def role_permissions_stmt(
    scope: AuthScope,
    role_id: Any,
    context: Context,
    *,
    wildcard: bool,
) -> Select[Any]:
    """All distinct permissions granted to one role at *context*."""
    permission = scope.permission_class
    permission_role = scope.permission_role_class
    return (
        select(permission)
        .join(
            permission_role,
            getattr(permission_role, scope.permission_foreign_key) == permission.id,
        )
        .where(
            getattr(permission_role, scope.role_foreign_key) == role_id,
            context_clause(permission_role, context, wildcard=wildcard),
        )
        .distinct()
    )
