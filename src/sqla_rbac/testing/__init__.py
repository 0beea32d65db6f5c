"""sqla-rbac testing utilities — isolation, fixtures and assertions.

- **Isolation**: ``isolated_rbac`` swaps out the default scope registry.
- **Fixtures**: ``rbac_registry``, ``isolated_rbac_state``.
- **Assertion helpers**: ``assert_has_role``, ``assert_lacks_role``,
  ``assert_has_permission``, ``assert_lacks_permission``,
  ``assert_roles_for``.

Example::

    from sqla_rbac.testing import assert_has_role

    def test_editor_on_post(session, user, post, scope):
        authorization_for(session, user, scope=scope).assign_role("editor", post)
        assert_has_role(session, user, "editor", post, scope=scope)
"""

from sqla_rbac.testing._assertions import (
    assert_has_permission,
    assert_has_role,
    assert_lacks_permission,
    assert_lacks_role,
    assert_roles_for,
)
from sqla_rbac.testing._fixtures import isolated_rbac_state, rbac_registry
from sqla_rbac.testing._isolation import isolated_rbac

__all__ = [
    "assert_has_permission",
    "assert_has_role",
    "assert_lacks_permission",
    "assert_lacks_role",
    "assert_roles_for",
    "isolated_rbac",
    "isolated_rbac_state",
    "rbac_registry",
]
