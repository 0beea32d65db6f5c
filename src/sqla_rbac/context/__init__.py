"""Authorization contexts — global, class and instance scopes."""

from __future__ import annotations

from sqla_rbac.context._context import (
    Context,
    sql_context_type_is,
    sql_is_null_or_equal,
    sql_is_or_equal,
)

__all__ = ["Context", "sql_context_type_is", "sql_is_null_or_equal", "sql_is_or_equal"]
