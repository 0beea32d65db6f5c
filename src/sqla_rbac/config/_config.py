"""AuthScope — immutable per-domain configuration for sqla-rbac."""

from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = ["AuthScope", "foreign_key_for", "underscore"]

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def underscore(name: str) -> str:
    """Convert a CamelCase name to snake_case.

    Example::

        underscore("AdminAccount")  # "admin_account"
        underscore("HTTPClient")    # "http_client"
        underscore("super-admin")   # "super_admin"
    """
    return _CAMEL_BOUNDARY.sub("_", name).replace("-", "_").lower()


def foreign_key_for(cls: type) -> str:
    """Derive the conventional foreign key name for a model class.

    Example::

        foreign_key_for(User)          # "user_id"
        foreign_key_for(AdminAccount)  # "admin_account_id"
        foreign_key_for(HTTPClient)    # "http_client_id"
    """
    return f"{underscore(cls.__name__)}_id"


def _table_name(cls: type | None) -> str | None:
    if cls is None:
        return None
    table = getattr(cls, "__table__", None)
    if table is not None:
        return str(table.name)
    return getattr(cls, "__tablename__", None)


@dataclass(frozen=True, slots=True)
class AuthScope:
    """Entity types, naming and defaults for one authorization domain.

    An application usually has a single scope named ``"default"``; several
    scopes let unrelated subject types (e.g. users and API clients) keep
    separate role tables.

    Attributes:
        subject_class: The mapped class being authorized (e.g. ``User``).
        role_class: Mapped class built on ``RoleMixin``.
        role_subject_class: Join class built on ``RoleSubjectMixin``.
        permission_class: Mapped class built on ``PermissionMixin``.
        permission_subject_class: Join class built on ``PermissionSubjectMixin``.
        permission_role_class: Join class built on ``PermissionRoleMixin``.
        name: Registry key for this scope.
        with_permissions: Enable permission resolution on subjects.
        force_context: Default for every ``force_context=None`` argument.
        log_decisions: Log checks and assignments via the ``sqla_rbac`` logger.
        subject_foreign_key: Column naming the subject on join classes.
            Derived from ``subject_class`` when omitted.
        role_foreign_key: Column naming the role on join classes.
        permission_foreign_key: Column naming the permission on join classes.

    Example::

        scope = AuthScope(
            subject_class=User,
            role_class=Role,
            role_subject_class=RoleUser,
            permission_class=Permission,
            permission_subject_class=PermissionUser,
            permission_role_class=PermissionRole,
        )
        scope.subject_foreign_key  # "user_id"
    """

    subject_class: type
    role_class: type
    role_subject_class: type
    permission_class: type | None = None
    permission_subject_class: type | None = None
    permission_role_class: type | None = None
    name: str = "default"
    with_permissions: bool = True
    force_context: bool = False
    log_decisions: bool = False
    subject_foreign_key: str | None = None
    role_foreign_key: str | None = None
    permission_foreign_key: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("AuthScope name must be a non-empty string")
        if self.with_permissions:
            missing = [
                attr
                for attr in (
                    "permission_class",
                    "permission_subject_class",
                    "permission_role_class",
                )
                if getattr(self, attr) is None
            ]
            if missing:
                raise ValueError(
                    f"with_permissions=True requires {', '.join(missing)} "
                    f"(scope {self.name!r})"
                )

        # Use object.__setattr__ because the dataclass is frozen
        if self.subject_foreign_key is None:
            object.__setattr__(self, "subject_foreign_key", foreign_key_for(self.subject_class))
        if self.role_foreign_key is None:
            object.__setattr__(self, "role_foreign_key", foreign_key_for(self.role_class))
        if self.permission_foreign_key is None and self.permission_class is not None:
            object.__setattr__(
                self, "permission_foreign_key", foreign_key_for(self.permission_class)
            )

        self._check_join_class(
            self.role_subject_class, self.subject_foreign_key, self.role_foreign_key
        )
        if self.with_permissions:
            self._check_join_class(
                self.permission_subject_class,
                self.subject_foreign_key,
                self.permission_foreign_key,
            )
            self._check_join_class(
                self.permission_role_class,
                self.role_foreign_key,
                self.permission_foreign_key,
            )

    @staticmethod
    def _check_join_class(join_class: type | None, *keys: str | None) -> None:
        if join_class is None:
            return
        declared = set(getattr(join_class, "__rbac_foreign_keys__", ()))
        for key in keys:
            if key is None or not hasattr(join_class, key):
                raise ValueError(f"{join_class.__name__} has no foreign key column {key!r}")
            if key not in declared:
                raise ValueError(
                    f"{join_class.__name__}.__rbac_foreign_keys__ must include {key!r}, "
                    f"got {tuple(declared)!r}"
                )

    # -- table names -------------------------------------------------------

    @property
    def subjects_table_name(self) -> str | None:
        return _table_name(self.subject_class)

    @property
    def roles_table_name(self) -> str | None:
        return _table_name(self.role_class)

    @property
    def permissions_table_name(self) -> str | None:
        return _table_name(self.permission_class)

    @property
    def role_subjects_table_name(self) -> str | None:
        return _table_name(self.role_subject_class)

    @property
    def permission_subjects_table_name(self) -> str | None:
        return _table_name(self.permission_subject_class)

    @property
    def permission_roles_table_name(self) -> str | None:
        return _table_name(self.permission_role_class)

    def merge(
        self,
        *,
        name: str | None = None,
        with_permissions: bool | None = None,
        force_context: bool | None = None,
        log_decisions: bool | None = None,
    ) -> AuthScope:
        """Return a new scope with non-None overrides applied.

        Entity classes and foreign keys are carried over unchanged.

        Example::

            strict = scope.merge(force_context=True)
        """
        return AuthScope(
            subject_class=self.subject_class,
            role_class=self.role_class,
            role_subject_class=self.role_subject_class,
            permission_class=self.permission_class,
            permission_subject_class=self.permission_subject_class,
            permission_role_class=self.permission_role_class,
            name=name if name is not None else self.name,
            with_permissions=(
                with_permissions if with_permissions is not None else self.with_permissions
            ),
            force_context=force_context if force_context is not None else self.force_context,
            log_decisions=log_decisions if log_decisions is not None else self.log_decisions,
            subject_foreign_key=self.subject_foreign_key,
            role_foreign_key=self.role_foreign_key,
            permission_foreign_key=self.permission_foreign_key,
        )

    def resolve_force_context(self, force_context: bool | None) -> bool:
        """Return *force_context*, or this scope's default when it is ``None``."""
        return self.force_context if force_context is None else force_context
