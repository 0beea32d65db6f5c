"""Tests for audit logging of checks and assignments."""

from __future__ import annotations

import logging

import pytest

from sqla_rbac._audit import log_assignment, log_assignment_conflict, log_check
from sqla_rbac.context import Context
from sqla_rbac.resolver import RolePermissions, SubjectPermissions, SubjectRoles
from tests.conftest import Post, RoleUser


def _rbac_records(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.name.startswith("sqla_rbac")]


class TestResolverLogging:
    def test_logging_disabled_by_default(self, session, scope, sample_data, caplog):
        roles = SubjectRoles(session, sample_data["users"]["alice"], scope=scope)
        with caplog.at_level(logging.DEBUG, logger="sqla_rbac"):
            roles.assign_role("admin")
            roles.has_role("admin", Post)
            roles.has_role("superuser")
        assert _rbac_records(caplog) == []

    def test_granted_check(self, session, scope, sample_data, caplog):
        roles = SubjectRoles(
            session, sample_data["users"]["alice"], scope=scope.merge(log_decisions=True)
        )
        roles.assign_role("admin")
        with caplog.at_level(logging.DEBUG, logger="sqla_rbac"):
            assert roles.has_role("admin", sample_data["posts"][42]) is True

        info = [r for r in _rbac_records(caplog) if r.levelno == logging.INFO]
        debug = [r for r in _rbac_records(caplog) if r.levelno == logging.DEBUG]
        assert len(info) == 1
        assert "has_role" in info[0].message
        assert "'admin'" in info[0].message
        assert "Post#42" in info[0].message
        assert "granted" in info[0].message
        assert len(debug) == 1
        assert "matched at <global>" in debug[0].message

    def test_denied_forced_check(self, session, scope, sample_data, caplog):
        roles = SubjectRoles(
            session, sample_data["users"]["alice"], scope=scope.merge(log_decisions=True)
        )
        admin = sample_data["roles"]["admin"]
        with caplog.at_level(logging.INFO, logger="sqla_rbac"):
            roles.has_role(admin, Post, force_context=True)
        (record,) = _rbac_records(caplog)
        assert "(forced)" in record.message
        assert "denied" in record.message

    def test_unresolved_target_warns(self, session, scope, sample_data, caplog):
        perms = SubjectPermissions(
            session, sample_data["users"]["bob"], scope=scope.merge(log_decisions=True)
        )
        with caplog.at_level(logging.INFO, logger="sqla_rbac"):
            assert perms.has_permission("fly") is False
        (record,) = _rbac_records(caplog)
        assert record.levelno == logging.WARNING
        assert "no target resolved" in record.message

    def test_assignment_logged(self, session, scope, sample_data, caplog):
        editor = RolePermissions(
            session, sample_data["roles"]["editor"], scope=scope.merge(log_decisions=True)
        )
        with caplog.at_level(logging.INFO, logger="sqla_rbac"):
            editor.assign_permission("publish")
            editor.assign_permission("delete")
        messages = [r.message for r in _rbac_records(caplog)]
        assert messages[0].startswith("assign_permission: 'publish' in <global>")
        assert "not applied" in messages[1]


class TestLogFunctions:
    def test_log_check_info(self, caplog):
        with caplog.at_level(logging.INFO, logger="sqla_rbac"):
            log_check(
                check="has_role",
                owner="user-1",
                target=None,
                context=Context("Post"),
                force_context=False,
                granted=False,
            )
        assert caplog.records[0].levelno == logging.WARNING
        assert "Post" in caplog.records[0].message

    def test_log_assignment_without_slug(self, caplog):
        with caplog.at_level(logging.INFO, logger="sqla_rbac"):
            log_assignment(
                action="unassign_role",
                owner="user-1",
                target="editor",
                context=Context(),
                record=True,
            )
        assert caplog.records[0].message == "unassign_role: 'editor' in <global> for 'user-1'"

    def test_conflict_logger(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="sqla_rbac.conflict"):
            log_assignment_conflict(join_type=RoleUser, values={"user_id": 1})
        (record,) = caplog.records
        assert record.name == "sqla_rbac.conflict"
        assert record.message.startswith("CONFLICT:RoleUser")
