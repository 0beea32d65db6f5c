"""Shared state and audit hooks for the resolvers."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from sqla_rbac._audit import log_assignment, log_check
from sqla_rbac.config._config import AuthScope
from sqla_rbac.context._context import Context

__all__ = ["ScopedResolver"]


class ScopedResolver:
    """Holds the session, the owner (subject or role) and the auth scope."""

    def __init__(self, session: Session, owner: Any, *, scope: AuthScope) -> None:
        self._session = session
        self._owner = owner
        self._scope = scope

    @property
    def scope(self) -> AuthScope:
        return self._scope

    @property
    def session(self) -> Session:
        return self._session

    def _log_check(
        self,
        check: str,
        target: Any,
        context: Context,
        force: bool,
        granted: bool,
        matched: Context | None = None,
    ) -> None:
        if self._scope.log_decisions:
            log_check(
                check=check,
                owner=self._owner,
                target=target,
                context=context,
                force_context=force,
                granted=granted,
                matched=matched,
            )

    def _log_assignment(self, action: str, target: Any, context: Context, record: Any) -> None:
        if self._scope.log_decisions:
            log_assignment(
                action=action,
                owner=self._owner,
                target=target,
                context=context,
                record=record,
            )
