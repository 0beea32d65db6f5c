"""Configuration module for sqla-rbac."""

from __future__ import annotations

from sqla_rbac.config._config import AuthScope, foreign_key_for, underscore
from sqla_rbac.config._registry import (
    ScopeRegistry,
    configure,
    get_default_registry,
    get_scope,
    register_scope,
)

__all__ = [
    "AuthScope",
    "ScopeRegistry",
    "configure",
    "foreign_key_for",
    "get_default_registry",
    "get_scope",
    "register_scope",
    "underscore",
]
