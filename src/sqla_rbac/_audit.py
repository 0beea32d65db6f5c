"""Audit logging for role and permission decisions."""

from __future__ import annotations

import logging
from typing import Any

from sqla_rbac.context._context import Context

__all__ = ["log_assignment", "log_assignment_conflict", "log_check"]

logger = logging.getLogger("sqla_rbac")


def _describe(target: Any) -> str:
    slug = getattr(target, "slug", None)
    return repr(slug) if slug is not None else repr(target)


def log_check(
    *,
    check: str,
    owner: Any,
    target: Any,
    context: Context,
    force_context: bool,
    granted: bool,
    matched: Context | None = None,
) -> None:
    """Log the outcome of a role or permission check.

    Logging levels:
    - INFO: Summary (check, owner, target, context, verdict)
    - DEBUG: The chain step that granted access
    - WARNING: Target could not be resolved

    Example::

        log_check(
            check="has_role",
            owner=user,
            target=role,
            context=Context("Post", 42),
            force_context=False,
            granted=True,
            matched=Context(),
        )
    """
    if target is None:
        logger.warning(
            "%s: no target resolved in %s for %r — denied",
            check,
            context,
            owner,
        )
        return

    logger.info(
        "%s: %s in %s%s for %r — %s",
        check,
        _describe(target),
        context,
        " (forced)" if force_context else "",
        owner,
        "granted" if granted else "denied",
    )

    if granted and matched is not None and logger.isEnabledFor(logging.DEBUG):
        logger.debug("%s: %s matched at %s", check, _describe(target), matched)


def log_assignment(
    *,
    action: str,
    owner: Any,
    target: Any,
    context: Context,
    record: Any,
) -> None:
    """Log an assign/unassign outcome.

    A ``None``/``False`` record means the operation was rejected or found
    nothing to remove.
    """
    if not record:
        logger.info(
            "%s: %s not applied in %s for %r",
            action,
            _describe(target),
            context,
            owner,
        )
        return
    logger.info("%s: %s in %s for %r", action, _describe(target), context, owner)


def log_assignment_conflict(*, join_type: type, values: dict[str, Any]) -> None:
    """Log a concurrent duplicate insert that was resolved to the existing row.

    Goes to the ``sqla_rbac.conflict`` sub-logger at DEBUG so operators can
    enable it independently.
    """
    logging.getLogger("sqla_rbac.conflict").debug(
        "CONFLICT:%s %s — existing record reused",
        join_type.__name__,
        values,
    )
