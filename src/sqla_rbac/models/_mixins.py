"""Declarative mixins for roles, permissions and their join records."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Integer, String, UniqueConstraint, event, inspect
from sqlalchemy.exc import InvalidRequestError
from sqlalchemy.orm import Mapped, backref, declared_attr, mapped_column, relationship

from sqla_rbac.context._context import Context
from sqla_rbac.models._validation import validate_join_record

__all__ = [
    "ContextColumnsMixin",
    "JoinRecordMixin",
    "PermissionMixin",
    "PermissionRoleMixin",
    "PermissionSubjectMixin",
    "RoleMixin",
    "RoleSubjectMixin",
]


class ContextColumnsMixin:
    """Nullable ``context_type`` / ``context_id`` columns plus a ``context`` view.

    Both columns NULL means global, only ``context_id`` NULL means
    class-level.
    """

    context_type: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)
    context_id: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)

    @property
    def context(self) -> Context:
        return Context(self.context_type, self.context_id)

    @context.setter
    def context(self, value: Any) -> None:
        ctx = Context.parse(value)
        self.context_type = ctx.class_name
        self.context_id = ctx.id


class RoleMixin(ContextColumnsMixin):
    """Columns for a role: ``slug``, ``level`` and an optional bound context.

    Higher ``level`` means more privileged. A role bound to a context can
    only be assigned within that context. Collections of join records
    (``role_users``, ``permission_roles``) are added by the join mixins.

    Example::

        class Role(RoleMixin, Base):
            __tablename__ = "roles"

            id: Mapped[int] = mapped_column(primary_key=True)
    """

    slug: Mapped[str] = mapped_column(String(255))
    level: Mapped[int] = mapped_column(Integer, default=0)

    @declared_attr.directive
    def __table_args__(cls) -> tuple[Any, ...]:
        return (
            UniqueConstraint(
                "slug",
                "context_type",
                "context_id",
                name=f"uq_{cls.__tablename__}_slug_context",
            ),
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.slug!r} level={self.level} context={self.context}>"


class PermissionMixin(ContextColumnsMixin):
    """Columns for a permission: ``slug`` and an optional bound context."""

    slug: Mapped[str] = mapped_column(String(255))

    @declared_attr.directive
    def __table_args__(cls) -> tuple[Any, ...]:
        return (
            UniqueConstraint(
                "slug",
                "context_type",
                "context_id",
                name=f"uq_{cls.__tablename__}_slug_context",
            ),
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.slug!r} context={self.context}>"


def _linked_class(join_class: Any, key: str) -> type:
    """The mapped class the foreign key column *key* of *join_class* points at."""
    column = join_class.__table__.c[key]
    tables = {fk.column.table for fk in column.foreign_keys}
    for mapper in inspect(join_class).registry.mappers:
        if mapper.local_table in tables and mapper.inherits is None:
            return mapper.class_
    raise InvalidRequestError(f"{join_class.__name__}.{key} does not reference a mapped class")


def _link(join_class: Any, position: int) -> Any:
    """Many-to-one link from a join record to one of its two endpoints.

    The endpoint gets a ``__rbac_backref__`` collection (the join table name
    by default) with ``cascade="all, delete"``, so deleting a subject, role
    or permission deletes its join records. Set ``__rbac_backref__ = None``
    to declare the reverse side yourself.
    """
    key: str = join_class.__rbac_foreign_keys__[position]
    backref_name = getattr(join_class, "__rbac_backref__", join_class.__tablename__)
    return relationship(
        lambda: _linked_class(join_class, key),
        foreign_keys=lambda: [join_class.__table__.c[key]],
        backref=backref(backref_name, cascade="all, delete") if backref_name else None,
    )


class JoinRecordMixin(ContextColumnsMixin):
    """Shared behavior of the three association records.

    Subclasses set ``__rbac_foreign_keys__`` to the names of their two
    foreign key columns (attribute key and column name must match), owner
    first: subject then role, subject then permission, role then
    permission. Rows are validated on insert: both keys present and
    integral, and no other row for the same keys and context.

    Each concrete mixin links the record to both endpoints and gives the
    endpoints a cascading collection named after the join table.
    """

    @declared_attr.directive
    def __table_args__(cls) -> tuple[Any, ...]:
        keys: tuple[str, ...] = cls.__rbac_foreign_keys__
        return (
            UniqueConstraint(
                *keys,
                "context_id",
                "context_type",
                name=f"uq_{cls.__tablename__}_context",
            ),
        )

    def __repr__(self) -> str:
        keys = ", ".join(f"{key}={getattr(self, key)!r}" for key in type(self).__rbac_foreign_keys__)
        return f"<{type(self).__name__} {keys} context={self.context}>"


class RoleSubjectMixin(JoinRecordMixin):
    """Subject ↔ role assignment, scoped by an optional context.

    Provides ``subject`` and ``role`` links; ``User.role_users`` and
    ``Role.role_users`` are added as cascading collections.

    Example::

        class RoleUser(RoleSubjectMixin, Base):
            __tablename__ = "role_users"
            __rbac_foreign_keys__ = ("user_id", "role_id")

            id: Mapped[int] = mapped_column(primary_key=True)
            user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
            role_id: Mapped[int] = mapped_column(ForeignKey("roles.id"))
    """

    @declared_attr
    def subject(cls) -> Mapped[Any]:
        return _link(cls, 0)

    @declared_attr
    def role(cls) -> Mapped[Any]:
        return _link(cls, 1)


class PermissionSubjectMixin(JoinRecordMixin):
    """Subject ↔ permission grant, scoped by an optional context.

    Provides ``subject`` and ``permission`` links.
    """

    @declared_attr
    def subject(cls) -> Mapped[Any]:
        return _link(cls, 0)

    @declared_attr
    def permission(cls) -> Mapped[Any]:
        return _link(cls, 1)


class PermissionRoleMixin(JoinRecordMixin):
    """Role ↔ permission grant, scoped by an optional context.

    Provides ``role`` and ``permission`` links.
    """

    @declared_attr
    def role(cls) -> Mapped[Any]:
        return _link(cls, 0)

    @declared_attr
    def permission(cls) -> Mapped[Any]:
        return _link(cls, 1)


event.listen(JoinRecordMixin, "before_insert", validate_join_record, propagate=True)
