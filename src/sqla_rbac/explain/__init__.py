"""Explain mode — step-by-step insight into role and permission checks."""

from sqla_rbac.explain._access import explain_permission, explain_role
from sqla_rbac.explain._models import AccessExplanation, ContextStep

__all__ = [
    "AccessExplanation",
    "ContextStep",
    "explain_permission",
    "explain_role",
]
