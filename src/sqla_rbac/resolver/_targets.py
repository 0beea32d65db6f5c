"""Target resolution and idempotent persistence of join records."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sqla_rbac._audit import log_assignment_conflict
from sqla_rbac.config._config import underscore
from sqla_rbac.context._context import Context
from sqla_rbac.exceptions import DuplicateAssignmentError
from sqla_rbac.resolver._queries import join_record_stmt, target_stmt

__all__ = [
    "destroy",
    "find_or_create",
    "find_target",
    "normalize_slug",
    "verify_target_context",
]


def normalize_slug(ref: Any) -> str:
    """Turn a slug reference (string or enum member) into a stored slug.

    Slugs are stored in snake_case, so ``"SuperAdmin"`` and
    ``"super-admin"`` both look up ``"super_admin"``.
    """
    if isinstance(ref, enum.Enum):
        ref = ref.value
    return underscore(str(ref))


def find_target(
    session: Session,
    entity: type,
    ref: Any,
    context: Context,
    force_context: bool,
) -> Any | None:
    """Resolve a role or permission reference.

    Instances of *entity* are returned unchanged. Anything else is treated
    as a slug and looked up bound to *context*; unless *force_context* is
    set the lookup continues along ``context.chain()`` and the first match
    wins.

    Returns:
        The resolved instance, or ``None`` if nothing matches.

    Example::

        find_target(session, Role, "editor", Context("Post", 42), False)
        # Role 'editor' bound to Post 42, else to Post, else global
    """
    if isinstance(ref, entity):
        return ref
    if ref is None:
        return None

    slug = normalize_slug(ref)
    candidates = (context,) if force_context else context.chain()
    for candidate in candidates:
        found = session.scalars(target_stmt(entity, slug, candidate)).first()
        if found is not None:
            return found
    return None


def verify_target_context(target: Any, context: Context) -> bool:
    """Return whether *target* may be assigned within *context*.

    An unbound (global) target is assignable anywhere; a class-bound target
    within its class and that class's instances; an instance-bound target
    only within its own instance.
    """
    if target is None:
        return False
    return Context(target.context_type, target.context_id).contains(context)


def find_or_create(session: Session, join_class: type, values: Mapping[str, Any]) -> Any:
    """Return the join record matching *values*, creating it when absent.

    The insert runs inside a SAVEPOINT. If a concurrent writer got there
    first, the resulting ``IntegrityError`` or ``DuplicateAssignmentError``
    rolls back only the savepoint and the existing row is returned.

    Raises:
        ValidationError: If the new record is invalid.
        IntegrityError: If the insert failed and no matching row exists.
    """
    stmt = join_record_stmt(join_class, values)
    existing = session.scalars(stmt).first()
    if existing is not None:
        return existing

    record = join_class(**values)
    try:
        with session.begin_nested():
            session.add(record)
            session.flush()
    except (IntegrityError, DuplicateAssignmentError):
        existing = session.scalars(stmt).first()
        if existing is None:
            raise
        log_assignment_conflict(join_type=join_class, values=dict(values))
        return existing
    return record


def destroy(session: Session, record: Any) -> bool:
    """Delete *record* and flush. Returns ``True``."""
    session.delete(record)
    session.flush()
    return True
