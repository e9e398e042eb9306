"""Data access for roles and their menu permissions."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.orm import Session

from pixiu.apitypes import UpdateRoleReq
from pixiu.models import (
    Menu,
    PageRole,
    RecordNotFoundError,
    RecordNotUpdatedError,
    Role,
    RoleMenu,
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


def _paginate(stmt: Select, page: int, limit: int) -> Select:
    if limit > 0:
        stmt = stmt.limit(limit)
    offset = (page - 1) * limit
    if offset > 0:
        stmt = stmt.offset(offset)
    return stmt


def build_role_tree(roles: list[Role], parent_id: int) -> list[Role]:
    """Arrange ``roles`` under ``parent_id``, filling in each node's children."""
    tree = []
    for node in roles:
        if node.parent_id == parent_id:
            node.children = build_role_tree(roles, node.id)
            tree.append(node)
    return tree


class RoleDao:
    """Stores roles, their hierarchy and the menus granted to them."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, obj: Role) -> Role:
        with _transaction(self._session):
            self._session.add(obj)
        return obj

    def update(self, req: UpdateRoleReq, role_id: int) -> None:
        """Overwrite a role if it is still at the request's resource version."""
        resource_version = req.resource_version
        values = req.to_dict()
        values["resource_version"] = resource_version + 1
        values["gmt_modified"] = datetime.now()
        with _transaction(self._session):
            result = self._session.execute(
                update(Role)
                .where(Role.id == role_id, Role.resource_version == resource_version)
                .values(**values)
            )
            if result.rowcount == 0:
                raise RecordNotUpdatedError("update failed")

    def delete(self, role_id: int) -> None:
        """Delete a role with its direct children, its menu grants and the user bindings."""
        child_ids = list(self._session.scalars(select(Role.id).where(Role.parent_id == role_id)))
        with _transaction(self._session):
            self._session.execute(delete(RoleMenu).where(RoleMenu.role_id == role_id))
            self._session.execute(
                delete(Role).where(or_(Role.id == role_id, Role.parent_id == role_id))
            )
            self._session.execute(
                delete(UserRole).where(UserRole.role_id.in_([role_id, *child_ids]))
            )

    def get(self, role_id: int) -> list[Role]:
        """Return the role and its direct children, arranged as a tree from the top level."""
        stmt = (
            select(Role)
            .where(or_(Role.id == role_id, Role.parent_id == role_id))
            .order_by(Role.sequence.desc(), Role.id)
        )
        roles = list(self._session.scalars(stmt))
        if not roles:
            raise RecordNotFoundError(f"role {role_id} not found")
        return build_role_tree(roles, 0)

    def list(self, page: int, limit: int) -> PageRole:
        """Return roles as a tree.

        With page and limit both 0 every role is returned; otherwise one page of
        top-level roles with their direct children.
        """
        by_sequence = (Role.sequence.desc(), Role.id)

        if page == 0 and limit == 0:
            roles = list(self._session.scalars(select(Role).order_by(*by_sequence)))
            total = self._session.scalar(select(func.count()).select_from(Role))
            return PageRole(roles=build_role_tree(roles, 0), total=total or 0)

        stmt = select(Role).where(Role.parent_id == 0).order_by(*by_sequence)
        roles = list(self._session.scalars(_paginate(stmt, page, limit)))

        top_ids = [r.id for r in roles]
        if top_ids:
            roles.extend(
                self._session.scalars(
                    select(Role).where(Role.parent_id.in_(top_ids)).order_by(Role.id)
                )
            )

        total = self._session.scalar(
            select(func.count()).select_from(Role).where(Role.parent_id == 0)
        )
        return PageRole(roles=build_role_tree(roles, 0), total=total or 0)

    def get_menus_by_role_id(self, role_id: int) -> list[Menu]:
        """Menus granted to the role, ordered by parent id then sequence."""
        stmt = (
            select(Menu)
            .join(RoleMenu, RoleMenu.menu_id == Menu.id)
            .where(RoleMenu.role_id == role_id)
            .order_by(Menu.parent_id.asc(), Menu.sequence.asc(), Menu.id)
        )
        return list(self._session.scalars(stmt))

    def set_role(self, role_id: int, menu_ids: Iterable[int]) -> None:
        """Replace the menus granted to the role."""
        with _transaction(self._session):
            self._session.execute(delete(RoleMenu).where(RoleMenu.role_id == role_id))
            self._session.add_all(RoleMenu(role_id=role_id, menu_id=mid) for mid in menu_ids)

    def get_roles_by_menu_id(self, menu_id: int) -> list[int]:
        stmt = select(RoleMenu.role_id).where(RoleMenu.menu_id == menu_id).order_by(RoleMenu.role_id)
        return list(self._session.scalars(stmt))

    def get_role_by_name(self, name: str) -> Role:
        obj = self._session.scalars(select(Role).where(Role.name == name).order_by(Role.id)).first()
        if obj is None:
            raise RecordNotFoundError(f"role {name!r} not found")
        return obj

    def update_status(self, role_id: int, status: int) -> None:
        with _transaction(self._session):
            self._session.execute(update(Role).where(Role.id == role_id).values(status=status))