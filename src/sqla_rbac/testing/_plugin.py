"""sqla-rbac pytest plugin -- auto-discovered via pytest11 entry point.

This module is registered as a pytest plugin in ``pyproject.toml``::

    [project.entry-points.pytest11]
    sqla_rbac = "sqla_rbac.testing._plugin"
"""

from __future__ import annotations

from sqla_rbac.testing._fixtures import (  # noqa: F401
    isolated_rbac_state,
    rbac_registry,
)

__all__ = ["isolated_rbac_state", "rbac_registry"]
