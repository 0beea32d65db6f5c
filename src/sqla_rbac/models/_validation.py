"""Insert-time validation for join records."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Connection, and_, select

from sqla_rbac.context._context import sql_context_type_is, sql_is_or_equal
from sqla_rbac.exceptions import DuplicateAssignmentError, ValidationError

__all__ = ["validate_foreign_keys", "validate_join_record", "validate_uniqueness"]


def validate_foreign_keys(target: Any) -> None:
    """Require both foreign keys of a join record to be present integers.

    Raises:
        ValidationError: Naming the first offending column.
    """
    model = type(target).__name__
    for key in type(target).__rbac_foreign_keys__:
        value = getattr(target, key)
        if value is None:
            raise ValidationError(model=model, field=key, message=f"{model}.{key} can't be blank")
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(
                model=model,
                field=key,
                message=f"{model}.{key} must be an integer, got {value!r}",
            )


def validate_uniqueness(connection: Connection, target: Any) -> None:
    """Reject a second row for the same foreign keys and context.

    ``context_type`` is compared case-insensitively and NULL matches NULL,
    which a plain UNIQUE constraint does not guarantee.

    Raises:
        DuplicateAssignmentError: If an equivalent row already exists.
    """
    cls = type(target)
    table = cls.__table__
    keys: tuple[str, ...] = cls.__rbac_foreign_keys__

    stmt = (
        select(table.c[keys[0]])
        .where(
            and_(
                *[table.c[key] == getattr(target, key) for key in keys],
                sql_context_type_is(table.c.context_type, target.context_type),
                sql_is_or_equal(table.c.context_id, target.context_id),
            )
        )
        .limit(1)
    )
    if connection.execute(stmt).first() is not None:
        raise DuplicateAssignmentError(
            model=cls.__name__,
            message=(
                f"{cls.__name__} already exists for "
                + ", ".join(f"{key}={getattr(target, key)!r}" for key in keys)
                + f" in context ({target.context_type!r}, {target.context_id!r})"
            ),
        )


def validate_join_record(mapper: Any, connection: Connection, target: Any) -> None:
    """``before_insert`` hook run for every join record."""
    validate_foreign_keys(target)
    validate_uniqueness(connection, target)
