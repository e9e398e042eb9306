import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session

from pixiu.apitypes import UpdateRoleReq
from pixiu.db.role import RoleDao, build_role_tree
from pixiu.models import (
    Menu,
    RecordNotFoundError,
    RecordNotUpdatedError,
    Role,
    RoleMenu,
    UserRole,
    create_schema,
)


@pytest.fixture
def session():
    engine = create_engine("sqlite://")
    create_schema(engine)
    with Session(engine) as s:
        yield s
    engine.dispose()


@pytest.fixture
def dao(session):
    return RoleDao(session)


def _role(dao, name, parent_id=0, sequence=0, status=1):
    return dao.create(Role(name=name, parent_id=parent_id, sequence=sequence, status=status))


def _menu(session, name, parent_id=0, sequence=0):
    menu = Menu(name=name, parent_id=parent_id, sequence=sequence, url="/" + name, method="GET",
                menu_type=2, status=1)
    session.add(menu)
    session.commit()
    return menu


def test_build_role_tree_without_database():
    top = Role(id=1, parent_id=0, name="top")
    child = Role(id=2, parent_id=1, name="child")
    other = Role(id=3, parent_id=0, name="other")
    tree = build_role_tree([top, child, other], 0)
    assert [r.name for r in tree] == ["top", "other"]
    assert [r.name for r in tree[0].children] == ["child"]
    assert tree[1].children == []


def test_create_and_get_by_name(dao):
    role = _role(dao, "admin")
    found = dao.get_role_by_name("admin")
    assert found.id == role.id
    assert found.resource_version == 0


def test_get_by_name_missing_raises(dao):
    with pytest.raises(RecordNotFoundError):
        dao.get_role_by_name("nobody")


def test_update_bumps_version_and_rejects_stale(dao):
    role = _role(dao, "dev")
    req = UpdateRoleReq(name="ops", memo="m", sequence=5, parent_id=0, status=1, resource_version=0)
    dao.update(req, role.id)
    updated = dao.get_role_by_name("ops")
    assert updated.resource_version == 1
    assert updated.sequence == 5
    with pytest.raises(RecordNotUpdatedError):
        dao.update(req, role.id)


def test_get_returns_tree(dao):
    parent = _role(dao, "parent")
    _role(dao, "child", parent_id=parent.id)
    tree = dao.get(parent.id)
    assert [r.name for r in tree] == ["parent"]
    assert [r.name for r in tree[0].children] == ["child"]


def test_get_missing_raises(dao):
    with pytest.raises(RecordNotFoundError):
        dao.get(42)


def test_list_all_and_paged(dao):
    _role(dao, "p1", sequence=1)
    p2 = _role(dao, "p2", sequence=9)
    _role(dao, "c", parent_id=p2.id)

    full = dao.list(0, 0)
    assert [r.name for r in full.roles] == ["p2", "p1"]
    assert [r.name for r in full.roles[0].children] == ["c"]
    assert full.total == 3

    page = dao.list(1, 1)
    assert [r.name for r in page.roles] == ["p2"]
    assert [r.name for r in page.roles[0].children] == ["c"]
    assert page.total == 2

    second = dao.list(2, 1)
    assert [r.name for r in second.roles] == ["p1"]


def test_set_role_and_menus_order(session, dao):
    role = _role(dao, "r")
    m_a = _menu(session, "a", sequence=2)
    m_b = _menu(session, "b", sequence=1)
    m_c = _menu(session, "c", parent_id=m_a.id)
    dao.set_role(role.id, [m_a.id, m_b.id, m_c.id])
    assert [m.name for m in dao.get_menus_by_role_id(role.id)] == ["b", "a", "c"]

    dao.set_role(role.id, [m_c.id])
    assert [m.name for m in dao.get_menus_by_role_id(role.id)] == ["c"]


def test_get_roles_by_menu_id(session, dao):
    r1 = _role(dao, "r1")
    r2 = _role(dao, "r2")
    menu = _menu(session, "m")
    dao.set_role(r1.id, [menu.id])
    dao.set_role(r2.id, [menu.id])
    assert dao.get_roles_by_menu_id(menu.id) == sorted([r1.id, r2.id])


def test_delete_removes_children_grants_and_bindings(session, dao):
    parent = _role(dao, "parent")
    child = _role(dao, "child", parent_id=parent.id)
    keep = _role(dao, "keep")
    menu = _menu(session, "m")
    parent_id, child_id, keep_id = parent.id, child.id, keep.id
    dao.set_role(parent_id, [menu.id])
    session.add_all([UserRole(user_id=1, role_id=parent_id), UserRole(user_id=2, role_id=child_id),
                     UserRole(user_id=3, role_id=keep_id)])
    session.commit()

    dao.delete(parent_id)

    remaining = list(session.scalars(select(Role.name)))
    assert remaining == ["keep"]
    assert session.scalar(select(func.count()).select_from(RoleMenu)) == 0
    assert list(session.scalars(select(UserRole.role_id))) == [keep_id]


def test_update_status(dao):
    role = _role(dao, "s", status=0)
    dao.update_status(role.id, 1)
    assert dao.get_role_by_name("s").status == 1