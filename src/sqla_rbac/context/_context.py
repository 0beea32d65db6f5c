"""Context — the scope a role or permission grant is evaluated against."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import ColumnElement, func, or_

from sqla_rbac.exceptions import InvalidContextError

__all__ = ["Context", "sql_context_type_is", "sql_is_null_or_equal", "sql_is_or_equal"]

_MISSING = object()


@dataclass(frozen=True, slots=True)
class Context:
    """A global, class-level or instance-level authorization scope.

    Attributes:
        class_name: Name of the model class, or ``None`` for the global scope.
        id: Primary key of the model instance, or ``None`` for global and
            class scopes.

    Two contexts are equal when both components match; ``None`` only equals
    ``None``. Wildcard matching of missing components happens in the
    queries built for ``roles_for`` / ``permissions_for``, never here.

    Example::

        Context()                 # global
        Context("Post")           # every Post
        Context("Post", 42)       # Post 42
        Context.parse(post)       # same as Context("Post", post.id)
    """

    class_name: str | None = None
    id: Any = None

    def __post_init__(self) -> None:
        if self.id is not None and self.class_name is None:
            raise InvalidContextError(
                value=(self.class_name, self.id),
                message=f"Context id {self.id!r} given without a class name",
            )

    @classmethod
    def parse(cls, value: object = None) -> Context:
        """Classify *value* into a global, class or instance context.

        Accepts ``None``, a ``Context``, a class, a class name, a
        ``(class_or_name, id)`` pair or a model instance with an ``id``.

        Raises:
            InvalidContextError: If *value* cannot be classified, or names
                an identifier without a resolvable type.
        """
        if value is None:
            return cls()
        if isinstance(value, Context):
            return value
        if isinstance(value, type):
            return cls(value.__name__)
        if isinstance(value, str):
            if not value:
                raise InvalidContextError(value=value, message="Context class name is empty")
            return cls(value)
        if isinstance(value, tuple):
            if len(value) != 2:
                raise InvalidContextError(value=value)
            class_name, ident = value
            if isinstance(class_name, type):
                class_name = class_name.__name__
            return cls(class_name, ident)

        ident = getattr(value, "id", _MISSING)
        if ident is _MISSING:
            raise InvalidContextError(value=value)
        if ident is None:
            raise InvalidContextError(
                value=value,
                message=f"{type(value).__name__} instance has no id; flush it before use",
            )
        return cls(type(value).__name__, ident)

    @property
    def is_global(self) -> bool:
        return self.class_name is None

    @property
    def is_class(self) -> bool:
        return self.class_name is not None and self.id is None

    @property
    def is_instance(self) -> bool:
        return self.id is not None

    def class_context(self) -> Context:
        """Return the class-level context owning this one."""
        return Context(self.class_name)

    def chain(self) -> tuple[Context, ...]:
        """Return the fallback chain, most specific first.

        Instance contexts fall back to their class and then to global;
        class contexts fall back to global.
        """
        if self.is_instance:
            return (self, self.class_context(), Context())
        if self.is_class:
            return (self, Context())
        return (self,)

    def contains(self, other: Context) -> bool:
        """Return whether *other* lies within this scope.

        The global context contains everything, a class context contains
        itself and its instances, an instance context only itself. Class
        names compare case-insensitively, as stored context types do.
        """
        if self.is_global:
            return True
        if other.class_name is None:
            return False
        if self.class_name.lower() != other.class_name.lower():  # type: ignore[union-attr]
            return False
        return self.id is None or self.id == other.id

    def __str__(self) -> str:
        if self.is_global:
            return "<global>"
        if self.is_class:
            return self.class_name  # type: ignore[return-value]
        return f"{self.class_name}#{self.id}"


def sql_is_or_equal(column: Any, value: object) -> ColumnElement[bool]:
    """Build ``column IS NULL`` for a missing value, else ``column = value``.

    Example::

        sql_is_or_equal(RoleUser.context_id, None)  # role_users.context_id IS NULL
        sql_is_or_equal(RoleUser.context_id, 42)    # role_users.context_id = :param
    """
    if value is None:
        return column.is_(None)
    return column == value


def sql_is_null_or_equal(column: Any, value: object) -> ColumnElement[bool]:
    """Build the wildcard form: NULL rows match any *value*."""
    return or_(sql_is_or_equal(column, value), column.is_(None))


def sql_context_type_is(
    column: Any,
    class_name: str | None,
    *,
    wildcard: bool = False,
) -> ColumnElement[bool]:
    """Match a ``context_type`` column case-insensitively.

    ``None`` matches only NULL. With ``wildcard=True`` a NULL column
    matches any *class_name*, as in :func:`sql_is_null_or_equal`.

    Example::

        sql_context_type_is(RoleUser.context_type, "Post")
        # lower(role_users.context_type) = 'post'
    """
    if class_name is None:
        match = column.is_(None)
    else:
        match = func.lower(column) == class_name.lower()
    if wildcard and class_name is not None:
        return or_(match, column.is_(None))
    return match
