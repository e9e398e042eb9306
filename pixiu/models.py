"""Database models for clouds, users, menus, roles and audit events."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy import (
    BigInteger,
    DateTime,
    Integer,
    SmallInteger,
    String,
    Text,
    UniqueConstraint,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, reconstructor


class RecordNotFoundError(LookupError):
    """The requested record does not exist."""


class RecordNotUpdatedError(Exception):
    """An update matched no record, usually because of a stale resource version."""

    def __init__(self, message: str = "record not updated") -> None:
        super().__init__(message)


class Base(DeclarativeBase):
    pass


_Id = BigInteger().with_variant(Integer, "sqlite")


def _str(length: int = 255, **kwargs: Any) -> Any:
    return mapped_column(String(length), default="", nullable=False, **kwargs)


def _text() -> Any:
    return mapped_column(Text, default="", nullable=False)


class _ModelMixin:
    id: Mapped[int] = mapped_column(_Id, primary_key=True, autoincrement=True)
    gmt_create: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, nullable=False)
    gmt_modified: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, nullable=False)
    resource_version: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)


class Cloud(_ModelMixin, Base):
    __tablename__ = "clouds"

    name: Mapped[str] = _str(unique=True)
    alias_name: Mapped[str] = _str()
    status: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    cloud_type: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    kube_version: Mapped[str] = _str()
    node_number: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    resources: Mapped[str] = _str()
    description: Mapped[str] = _text()
    extension: Mapped[str] = _text()


class Cluster(_ModelMixin, Base):
    """Deployment settings of a self-built kubernetes cluster."""

    __tablename__ = "clusters"

    cloud_id: Mapped[int] = mapped_column(BigInteger, unique=True, default=0, nullable=False)
    api_server: Mapped[str] = _str()
    version: Mapped[str] = _str()
    runtime: Mapped[str] = _str()
    cni: Mapped[str] = _str()
    service_cidr: Mapped[str] = _str()
    pod_cidr: Mapped[str] = _str()
    proxy_mode: Mapped[str] = _str()


class Node(_ModelMixin, Base):
    __tablename__ = "nodes"

    cloud_id: Mapped[int] = mapped_column(BigInteger, index=True, default=0, nullable=False)
    role: Mapped[str] = _str()
    host_name: Mapped[str] = _str()
    address: Mapped[str] = _str()
    user: Mapped[str] = _str()
    password: Mapped[str] = _str()


class User(_ModelMixin, Base):
    __tablename__ = "users"

    name: Mapped[str] = _str(unique=True)
    password: Mapped[str] = _str(256)
    status: Mapped[int] = mapped_column(SmallInteger, default=0, nullable=False)
    role: Mapped[str] = _str(128)
    email: Mapped[str] = _str(128)
    description: Mapped[str] = _text()
    extension: Mapped[str] = _text()


class KubeConfig(_ModelMixin, Base):
    __tablename__ = "kube_configs"

    service_account: Mapped[str] = _str(unique=True)
    cloud_id: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    cloud_name: Mapped[str] = _str(index=True)
    cluster_role: Mapped[str] = _str()
    config: Mapped[str] = _text()
    expiration_timestamp: Mapped[str] = _str()


class Event(_ModelMixin, Base):
    __tablename__ = "events"

    user: Mapped[str] = _str()
    client_ip: Mapped[str] = _str()
    operator: Mapped[str] = _str()
    object: Mapped[str] = _str()
    message: Mapped[str] = _text()


class Menu(_ModelMixin, Base):
    """A menu entry, button or API permission; ``children`` is not stored."""

    __tablename__ = "menus"

    status: Mapped[int] = mapped_column(SmallInteger, default=0, nullable=False)
    memo: Mapped[str] = _str(128)
    parent_id: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    url: Mapped[str] = _str(128)
    name: Mapped[str] = _str(128)
    sequence: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    menu_type: Mapped[int] = mapped_column(SmallInteger, default=0, nullable=False)
    icon: Mapped[str] = _str(32)
    method: Mapped[str] = _str(32)
    code: Mapped[str] = _str(128)

    def __init__(self, **kwargs: Any) -> None:
        self.children: list[Menu] = list(kwargs.pop("children", []))
        super().__init__(**kwargs)

    @reconstructor
    def _init_on_load(self) -> None:
        self.children = []


class RoleMenu(_ModelMixin, Base):
    __tablename__ = "role_menus"
    __table_args__ = (UniqueConstraint("role_id", "menu_id", name="uk_role_menu_role_id"),)

    role_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    menu_id: Mapped[int] = mapped_column(BigInteger, nullable=False)


class Role(_ModelMixin, Base):
    """A role; ``children`` is not stored."""

    __tablename__ = "roles"

    memo: Mapped[str] = _str(128)
    name: Mapped[str] = _str(128)
    sequence: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    parent_id: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    status: Mapped[int] = mapped_column(SmallInteger, default=0, nullable=False)

    def __init__(self, **kwargs: Any) -> None:
        self.children: list[Role] = list(kwargs.pop("children", []))
        super().__init__(**kwargs)

    @reconstructor
    def _init_on_load(self) -> None:
        self.children = []


class Rule(_ModelMixin, Base):
    """A policy rule: ptype, then role, path and method in columns v0 to v2."""

    __tablename__ = "rules"

    ptype: Mapped[str] = _str(100)
    role: Mapped[str] = mapped_column("v0", String(100), default="", nullable=False)
    path: Mapped[str] = mapped_column("v1", String(100), default="", nullable=False)
    method: Mapped[str] = mapped_column("v2", String(100), default="", nullable=False)
    v3: Mapped[str] = _str(100)
    v4: Mapped[str] = _str(100)
    v5: Mapped[str] = _str(100)


class UserRole(_ModelMixin, Base):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role_id", name="uk_user_role_user_id"),)

    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    role_id: Mapped[int] = mapped_column(BigInteger, nullable=False)


def _stamp_create(mapper: Any, connection: Any, target: Any) -> None:
    now = datetime.now()
    target.gmt_create = now
    target.gmt_modified = now


def _stamp_update(mapper: Any, connection: Any, target: Any) -> None:
    target.gmt_modified = datetime.now()


for _cls in (Menu, RoleMenu, Role, Rule, UserRole):
    event.listen(_cls, "before_insert", _stamp_create)
    event.listen(_cls, "before_update", _stamp_update)


@dataclass
class PageMenu:
    """One page of menus arranged as a tree, with the total count."""

    menus: list[Menu] = field(default_factory=list)
    total: int = 0


@dataclass
class PageRole:
    """One page of roles arranged as a tree, with the total count."""

    roles: list[Role] = field(default_factory=list)
    total: int = 0


def create_schema(engine: Engine) -> None:
    """Create every table that does not exist yet."""
    Base.metadata.create_all(engine)