"""Data access for menus, buttons and API permissions."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.orm import Session

from pixiu.apitypes import UpdateMenusReq
from pixiu.models import (
    Menu,
    PageMenu,
    RecordNotFoundError,
    RecordNotUpdatedError,
    RoleMenu,
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


def build_menu_tree(menus: list[Menu], parent_id: int) -> list[Menu]:
    """Arrange ``menus`` under ``parent_id``, filling in each node's children."""
    tree = []
    for node in menus:
        if node.parent_id == parent_id:
            node.children = build_menu_tree(menus, node.id)
            tree.append(node)
    return tree


class MenuDao:
    """Stores menus and arranges them into trees."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, obj: Menu) -> Menu:
        with _transaction(self._session):
            self._session.add(obj)
        return obj

    def update(self, req: UpdateMenusReq, menu_id: int) -> None:
        """Overwrite a menu if it is still at the request's resource version."""
        resource_version = req.resource_version
        values = req.to_dict()
        values["resource_version"] = resource_version + 1
        values["gmt_modified"] = datetime.now()
        with _transaction(self._session):
            result = self._session.execute(
                update(Menu)
                .where(Menu.id == menu_id, Menu.resource_version == resource_version)
                .values(**values)
            )
            if result.rowcount == 0:
                raise RecordNotUpdatedError("update failed")

    def delete(self, menu_id: int) -> None:
        """Delete a menu, its direct children and their role bindings."""
        with _transaction(self._session):
            self._session.execute(delete(RoleMenu).where(RoleMenu.menu_id == menu_id))
            self._session.execute(
                delete(Menu).where(or_(Menu.id == menu_id, Menu.parent_id == menu_id))
            )

    def get(self, menu_id: int) -> Menu:
        obj = self._session.scalars(select(Menu).where(Menu.id == menu_id).order_by(Menu.id)).first()
        if obj is None:
            raise RecordNotFoundError(f"menu {menu_id} not found")
        return obj

    def list(self, page: int, limit: int, menu_types: Iterable[int]) -> PageMenu:
        """Return menus of the given types as a tree.

        With page and limit both 0 every menu is returned; otherwise one page of
        top-level menus with two levels of descendants.
        """
        type_filter = Menu.menu_type.in_(list(menu_types))
        by_sequence = (Menu.sequence.desc(), Menu.id)

        if page == 0 and limit == 0:
            menus = list(self._session.scalars(select(Menu).where(type_filter).order_by(*by_sequence)))
            total = self._session.scalar(select(func.count()).select_from(Menu).where(type_filter))
            return PageMenu(menus=build_menu_tree(menus, 0), total=total or 0)

        stmt = select(Menu).where(Menu.parent_id == 0, type_filter).order_by(*by_sequence)
        menus = list(self._session.scalars(_paginate(stmt, page, limit)))

        top_ids = [m.id for m in menus]
        if top_ids:
            children = list(
                self._session.scalars(
                    select(Menu).where(Menu.parent_id.in_(top_ids), type_filter).order_by(Menu.id)
                )
            )
            menus.extend(children)
            child_ids = [m.id for m in children]
            if child_ids:
                menus.extend(
                    self._session.scalars(
                        select(Menu).where(Menu.parent_id.in_(child_ids), type_filter).order_by(Menu.id)
                    )
                )

        total = self._session.scalar(
            select(func.count()).select_from(Menu).where(Menu.parent_id == 0, type_filter)
        )
        return PageMenu(menus=build_menu_tree(menus, 0), total=total or 0)

    def get_by_ids(self, menu_ids: Iterable[int]) -> list[Menu]:
        stmt = select(Menu).where(Menu.id.in_(list(menu_ids))).order_by(Menu.id)
        return list(self._session.scalars(stmt))

    def get_by_url_and_method(self, url: str, method: str) -> Menu:
        obj = self._session.scalars(
            select(Menu).where(Menu.url == url, Menu.method == method).order_by(Menu.id)
        ).first()
        if obj is None:
            raise RecordNotFoundError(f"menu {method} {url} not found")
        return obj

    def update_status(self, menu_id: int, status: int) -> None:
        with _transaction(self._session):
            self._session.execute(update(Menu).where(Menu.id == menu_id).values(status=status))