"""Import fixtures from sqla_rbac.testing for test discovery."""

from sqla_rbac.testing._fixtures import isolated_rbac_state, rbac_registry

__all__ = ["isolated_rbac_state", "rbac_registry"]
