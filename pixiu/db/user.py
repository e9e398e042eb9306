"""Data access for users, their roles and the menus those roles grant."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.orm import Session

from pixiu.db.menu import build_menu_tree
from pixiu.db.role import build_role_tree
from pixiu.models import (
    Menu,
    RecordNotFoundError,
    RecordNotUpdatedError,
    Role,
    RoleMenu,
    User,
    UserRole,
)


@contextmanager
def _transaction(session: Session) -> Iterator[None]:
    try:
        yield
        session.commit()
    except Exception:
        session.rollback()
        raise


def _paginate(stmt: Select, page: int, page_size: int) -> Select:
    if page_size > 0:
        stmt = stmt.limit(page_size)
    offset = (page - 1) * page_size
    if offset > 0:
        stmt = stmt.offset(offset)
    return stmt


def _enabled_role_ids(uid: int) -> Select:
    return (
        select(Role.id)
        .join(UserRole, UserRole.role_id == Role.id)
        .where(UserRole.user_id == uid, Role.status == 1)
    )


class UserDao:
    """Stores users and resolves their roles and permissions."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, obj: User) -> User:
        now = datetime.now()
        obj.gmt_create = now
        obj.gmt_modified = now
        with _transaction(self._session):
            self._session.add(obj)
        return obj

    def update(self, uid: int, resource_version: int, updates: Mapping[str, Any]) -> None:
        """Apply ``updates`` if the user is still at ``resource_version``."""
        values = dict(updates)
        values["gmt_modified"] = datetime.now()
        values["resource_version"] = resource_version + 1
        with _transaction(self._session):
            result = self._session.execute(
                update(User)
                .where(User.id == uid, User.resource_version == resource_version)
                .values(**values)
            )
            if result.rowcount == 0:
                raise RecordNotUpdatedError()

    def delete(self, uid: int) -> None:
        with _transaction(self._session):
            self._session.execute(delete(User).where(User.id == uid))

    def get(self, uid: int) -> User:
        obj = self._session.scalars(select(User).where(User.id == uid).order_by(User.id)).first()
        if obj is None:
            raise RecordNotFoundError(f"user {uid} not found")
        return obj

    def list(self, page: int, page_size: int) -> tuple[list[User], int]:
        """Return one page of users and the total number of users."""
        users = list(self._session.scalars(_paginate(select(User).order_by(User.id), page, page_size)))
        total = self._session.scalar(select(func.count()).select_from(User)) or 0
        return users, total

    def update_status(self, uid: int, status: int) -> None:
        with _transaction(self._session):
            self._session.execute(update(User).where(User.id == uid).values(status=status))

    def update_internal(self, uid: int, updates: Mapping[str, Any]) -> None:
        """Apply ``updates`` regardless of the resource version."""
        values = dict(updates)
        values["gmt_modified"] = datetime.now()
        with _transaction(self._session):
            result = self._session.execute(update(User).where(User.id == uid).values(**values))
            if result.rowcount == 0:
                raise RecordNotUpdatedError()

    def get_by_name(self, name: str) -> User:
        obj = self._session.scalars(select(User).where(User.name == name).order_by(User.id)).first()
        if obj is None:
            raise RecordNotFoundError(f"user {name!r} not found")
        return obj

    def set_user_roles(self, uid: int, role_ids: Iterable[int]) -> None:
        """Replace the roles bound to the user."""
        with _transaction(self._session):
            self._session.execute(delete(UserRole).where(UserRole.user_id == uid))
            self._session.add_all(UserRole(user_id=uid, role_id=rid) for rid in role_ids)

    def get_roles_by_user(self, uid: int) -> list[Role]:
        """The user's roles and their direct children, as a tree from the top level."""
        bound = select(UserRole.role_id).where(UserRole.user_id == uid)
        stmt = (
            select(Role)
            .where(or_(Role.id.in_(bound), Role.parent_id.in_(bound)))
            .order_by(Role.id.asc(), Role.sequence.desc())
        )
        roles = list(self._session.scalars(stmt))
        return build_role_tree(roles, 0)

    def get_buttons_by_user_id(self, uid: int) -> list[Menu]:
        """Enabled buttons and API permissions granted through the user's enabled roles."""
        stmt = (
            select(Menu)
            .join(RoleMenu, RoleMenu.menu_id == Menu.id)
            .where(
                RoleMenu.role_id.in_(_enabled_role_ids(uid)),
                Menu.menu_type.in_([2, 3]),
                Menu.status == 1,
            )
            .distinct()
            .order_by(Menu.id)
        )
        return list(self._session.scalars(stmt))

    def get_left_menus_by_user_id(self, uid: int) -> list[Menu]:
        """Enabled side-bar menus granted through the user's enabled roles, as a tree."""
        stmt = (
            select(Menu)
            .join(RoleMenu, RoleMenu.menu_id == Menu.id)
            .where(
                RoleMenu.role_id.in_(_enabled_role_ids(uid)),
                Menu.menu_type == 1,
                Menu.status == 1,
            )
            .distinct()
            .order_by(Menu.parent_id.asc(), Menu.sequence.desc(), Menu.id)
        )
        menus = list(self._session.scalars(stmt))
        if not menus:
            return []
        return build_menu_tree(menus, 0)