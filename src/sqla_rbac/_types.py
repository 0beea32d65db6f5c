"""Shared protocols and type aliases for sqla-rbac."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from sqla_rbac.context._context import Context

__all__ = [
    "ContextArg",
    "PermissionCapable",
    "RoleCapable",
    "SubjectLike",
    "TargetRef",
]

# Anything Context.parse() accepts: a Context, a model class, a class name,
# a (class, id) pair, a model instance, or None for the global context.
ContextArg = Union["Context", type, str, tuple, Any, None]

# A role or permission given either as a mapped instance or by slug.
TargetRef = Union[Any, str]


@runtime_checkable
class SubjectLike(Protocol):
    """Structural type for authorization subjects.

    Any persisted object with an integer ``id`` attribute satisfies this
    protocol; in practice it is the host application's user model.

    Example::

        user = session.get(User, 1)
        assert isinstance(user, SubjectLike)
    """

    @property
    def id(self) -> int: ...


class RoleCapable(Protocol):
    """Role operations available on a subject."""

    def assign_role(
        self, role: TargetRef, context: ContextArg = None, force_context: bool | None = None
    ) -> Any | None: ...

    def unassign_role(
        self, role: TargetRef, context: ContextArg = None, force_context: bool | None = None
    ) -> bool: ...

    def has_role(
        self, role: TargetRef, context: ContextArg = None, force_context: bool | None = None
    ) -> bool: ...

    def has_role_or_higher(
        self, role: TargetRef, context: ContextArg = None, force_context: bool | None = None
    ) -> bool: ...

    def highest_role(
        self, context: ContextArg = None, force_context: bool | None = None
    ) -> Any | None: ...

    def roles_for(
        self, context: ContextArg = None, force_context: bool | None = None
    ) -> Sequence[Any]: ...


class PermissionCapable(Protocol):
    """Permission operations available on a subject."""

    def assign_permission(
        self,
        permission: TargetRef,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> Any | None: ...

    def unassign_permission(
        self,
        permission: TargetRef,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> bool: ...

    def has_permission(
        self,
        permission: TargetRef,
        context: ContextArg = None,
        force_context: bool | None = None,
    ) -> bool: ...

    def permissions_for(
        self, context: ContextArg = None, force_context: bool | None = None
    ) -> Sequence[Any]: ...
