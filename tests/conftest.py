"""Shared test fixtures for sqla-rbac tests."""

from __future__ import annotations

import pytest
from sqlalchemy import ForeignKey, Integer, String, create_engine, event
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    Session,
    mapped_column,
    sessionmaker,
)

from sqla_rbac.config import AuthScope
from sqla_rbac.models import (
    PermissionMixin,
    PermissionRoleMixin,
    PermissionSubjectMixin,
    RoleMixin,
    RoleSubjectMixin,
)

# ---------------------------------------------------------------------------
# Test models
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))

    def __repr__(self) -> str:
        return f"<User {self.name}>"


class Role(RoleMixin, Base):
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class Permission(PermissionMixin, Base):
    __tablename__ = "permissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class RoleUser(RoleSubjectMixin, Base):
    __tablename__ = "role_users"
    __rbac_foreign_keys__ = ("user_id", "role_id")

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    role_id: Mapped[int] = mapped_column(ForeignKey("roles.id"))


class PermissionUser(PermissionSubjectMixin, Base):
    __tablename__ = "permission_users"
    __rbac_foreign_keys__ = ("user_id", "permission_id")

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    permission_id: Mapped[int] = mapped_column(ForeignKey("permissions.id"))


class PermissionRole(PermissionRoleMixin, Base):
    __tablename__ = "permission_roles"
    __rbac_foreign_keys__ = ("role_id", "permission_id")

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    role_id: Mapped[int] = mapped_column(ForeignKey("roles.id"))
    permission_id: Mapped[int] = mapped_column(ForeignKey("permissions.id"))


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200))


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    body: Mapped[str] = mapped_column(String(200))


def make_scope(**overrides: object) -> AuthScope:
    """Build the standard test scope; keyword arguments override fields."""
    fields: dict[str, object] = {
        "subject_class": User,
        "role_class": Role,
        "role_subject_class": RoleUser,
        "permission_class": Permission,
        "permission_subject_class": PermissionUser,
        "permission_role_class": PermissionRole,
    }
    fields.update(overrides)
    return AuthScope(**fields)  # type: ignore[arg-type]


def make_engine():
    """In-memory SQLite engine with working SAVEPOINTs and all tables created.

    pysqlite's own transaction handling breaks SAVEPOINT, so BEGIN is
    emitted explicitly.
    """
    eng = create_engine("sqlite:///:memory:", echo=False)

    @event.listens_for(eng, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(eng, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(eng)
    return eng


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def engine():
    eng = make_engine()
    yield eng
    eng.dispose()


@pytest.fixture()
def session(engine):
    """Provide a transactional session that rolls back after each test."""
    factory = sessionmaker(bind=engine)
    sess = factory()
    try:
        yield sess
    finally:
        sess.rollback()
        sess.close()


@pytest.fixture()
def scope() -> AuthScope:
    return make_scope()


@pytest.fixture()
def sample_data(session: Session) -> dict[str, dict]:
    """Seed users, posts, comments, roles and permissions.

    Roles:
        admin (10, global), editor (5, global), reviewer (3, every Post),
        owner (1, Post 42 only), moderator (8, every Comment).
    Permissions:
        publish (global), edit (global), delete (every Post).
    """
    users = {
        "alice": User(id=1, name="alice"),
        "bob": User(id=2, name="bob"),
    }
    posts = {
        42: Post(id=42, title="Hello"),
        99: Post(id=99, title="Other"),
    }
    comments = {7: Comment(id=7, body="Nice")}
    roles = {
        "admin": Role(id=1, slug="admin", level=10),
        "editor": Role(id=2, slug="editor", level=5),
        "reviewer": Role(id=3, slug="reviewer", level=3, context_type="Post"),
        "owner": Role(id=4, slug="owner", level=1, context_type="Post", context_id=42),
        "moderator": Role(id=5, slug="moderator", level=8, context_type="Comment"),
    }
    permissions = {
        "publish": Permission(id=1, slug="publish"),
        "edit": Permission(id=2, slug="edit"),
        "delete": Permission(id=3, slug="delete", context_type="Post"),
    }
    for group in (users, posts, comments, roles, permissions):
        session.add_all(group.values())
    session.flush()
    return {
        "users": users,
        "posts": posts,
        "comments": comments,
        "roles": roles,
        "permissions": permissions,
    }
