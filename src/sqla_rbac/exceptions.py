"""Exception hierarchy for sqla-rbac."""

from __future__ import annotations

__all__ = [
    "DuplicateAssignmentError",
    "InvalidContextError",
    "PermissionsDisabledError",
    "RbacError",
    "ScopeNotFoundError",
    "ValidationError",
]


class RbacError(Exception):
    """Base exception for all sqla-rbac errors."""


class InvalidContextError(RbacError):
    """A context argument could not be turned into a ``Context``.

    Raised for identifiers without a type, unsaved model instances and
    values that are neither models, classes, names nor contexts.

    Attributes:
        value: The offending input.

    Example::

        try:
            Context.parse((None, 42))
        except InvalidContextError as exc:
            print(exc.value)
    """

    def __init__(self, *, value: object, message: str | None = None) -> None:
        self.value = value
        if message is None:
            message = f"Cannot build an authorization context from {value!r}"
        super().__init__(message)


class ValidationError(RbacError):
    """A join record failed validation when it was written.

    Attributes:
        model: Class name of the join record.
        field: The offending column, or ``None`` for record-level errors.
    """

    def __init__(
        self,
        *,
        model: str,
        field: str | None = None,
        message: str | None = None,
    ) -> None:
        self.model = model
        self.field = field
        if message is None:
            message = f"{model} is invalid" if field is None else f"{model}.{field} is invalid"
        super().__init__(message)


class DuplicateAssignmentError(ValidationError):
    """The same (foreign keys, context) assignment already exists.

    Assignment operations treat this as "already assigned" and return the
    existing record instead of propagating it.
    """


class ScopeNotFoundError(RbacError):
    """No auth scope is registered under the requested name.

    Attributes:
        name: The scope name that was looked up.
    """

    def __init__(self, *, name: str) -> None:
        self.name = name
        super().__init__(f"No auth scope registered under {name!r}")


class PermissionsDisabledError(RbacError):
    """A permission operation was requested on a scope without permissions.

    Raised when ``AuthScope.with_permissions`` is ``False``.
    """
