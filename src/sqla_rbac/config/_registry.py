"""ScopeRegistry — named lookup of AuthScope instances."""

from __future__ import annotations

from sqla_rbac.config._config import AuthScope
from sqla_rbac.exceptions import ScopeNotFoundError

__all__ = [
    "ScopeRegistry",
    "configure",
    "get_default_registry",
    "get_scope",
    "register_scope",
]


class ScopeRegistry:
    """Registry that maps scope names to ``AuthScope`` configurations.

    Thread-safe for reads after startup. Scopes are immutable; replacing
    one swaps the whole object, so resolvers built earlier keep the scope
    they were constructed with.

    Example::

        registry = ScopeRegistry()
        registry.register(AuthScope(subject_class=User, ...))
        scope = registry.lookup("default")
    """

    def __init__(self) -> None:
        self._scopes: dict[str, AuthScope] = {}

    def register(self, scope: AuthScope, *, replace: bool = False) -> AuthScope:
        """Register *scope* under ``scope.name``.

        Args:
            scope: The scope to register.
            replace: Allow overwriting an existing scope of the same name.

        Returns:
            The registered scope.

        Raises:
            ValueError: If the name is taken and ``replace`` is ``False``.
        """
        if scope.name in self._scopes and not replace:
            raise ValueError(f"Auth scope {scope.name!r} is already registered")
        self._scopes[scope.name] = scope
        return scope

    def lookup(self, name: str = "default") -> AuthScope:
        """Return the scope registered under *name*.

        Raises:
            ScopeNotFoundError: If no scope has that name.
        """
        try:
            return self._scopes[name]
        except KeyError:
            raise ScopeNotFoundError(name=name) from None

    def has_scope(self, name: str = "default") -> bool:
        return name in self._scopes

    def names(self) -> set[str]:
        return set(self._scopes)

    def clear(self) -> None:
        """Remove all registered scopes.

        Primarily useful in test teardown.
        """
        self._scopes.clear()


# Module-level default registry (singleton).
_default_registry = ScopeRegistry()


def get_default_registry() -> ScopeRegistry:
    """Return the global default (singleton) scope registry."""
    return _default_registry


def register_scope(
    scope: AuthScope,
    *,
    registry: ScopeRegistry | None = None,
    replace: bool = False,
) -> AuthScope:
    """Register *scope* in *registry* (the default registry when omitted).

    Example::

        register_scope(AuthScope(subject_class=User, ...))
    """
    target = registry if registry is not None else get_default_registry()
    return target.register(scope, replace=replace)


def get_scope(name: str = "default", *, registry: ScopeRegistry | None = None) -> AuthScope:
    """Look up a registered scope by name."""
    target = registry if registry is not None else get_default_registry()
    return target.lookup(name)


def configure(
    name: str = "default",
    *,
    with_permissions: bool | None = None,
    force_context: bool | None = None,
    log_decisions: bool | None = None,
    registry: ScopeRegistry | None = None,
) -> AuthScope:
    """Replace a registered scope with a copy carrying the given overrides.

    Only non-None values are applied. Returns the new scope.

    Example::

        configure(force_context=True)
        # Checks on the default scope no longer walk the context chain
    """
    target = registry if registry is not None else get_default_registry()
    merged = target.lookup(name).merge(
        with_permissions=with_permissions,
        force_context=force_context,
        log_decisions=log_decisions,
    )
    return target.register(merged, replace=True)
