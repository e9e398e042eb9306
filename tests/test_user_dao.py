import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from pixiu.db.user import UserDao
from pixiu.models import (
    Menu,
    RecordNotFoundError,
    RecordNotUpdatedError,
    Role,
    RoleMenu,
    User,
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
    return UserDao(session)


def _add(session, obj):
    session.add(obj)
    session.commit()
    return obj


def test_create_get_and_get_by_name(dao):
    user = dao.create(User(name="alice", email="alice@example.com"))
    assert dao.get(user.id).name == "alice"
    assert dao.get_by_name("alice").email == "alice@example.com"


def test_get_missing_raises(dao):
    with pytest.raises(RecordNotFoundError):
        dao.get(99)
    with pytest.raises(RecordNotFoundError):
        dao.get_by_name("ghost")


def test_update_with_version(dao):
    user = dao.create(User(name="bob"))
    dao.update(user.id, 0, {"email": "bob@example.com"})
    fresh = dao.get(user.id)
    assert fresh.email == "bob@example.com"
    assert fresh.resource_version == 1
    with pytest.raises(RecordNotUpdatedError):
        dao.update(user.id, 0, {"email": "old@example.com"})


def test_update_internal(dao):
    user = dao.create(User(name="carol"))
    dao.update_internal(user.id, {"description": "ops"})
    fresh = dao.get(user.id)
    assert fresh.description == "ops"
    assert fresh.resource_version == 0
    with pytest.raises(RecordNotUpdatedError):
        dao.update_internal(user.id + 100, {"description": "x"})


def test_list_pagination(dao):
    for name in ("u1", "u2", "u3"):
        dao.create(User(name=name))
    users, total = dao.list(2, 2)
    assert [u.name for u in users] == ["u3"]
    assert total == 3
    first, _ = dao.list(1, 2)
    assert [u.name for u in first] == ["u1", "u2"]


def test_delete(dao):
    user = dao.create(User(name="dave"))
    uid = user.id
    dao.delete(uid)
    with pytest.raises(RecordNotFoundError):
        dao.get(uid)


def test_update_status(dao):
    user = dao.create(User(name="erin", status=0))
    dao.update_status(user.id, 2)
    assert dao.get(user.id).status == 2


def test_roles_by_user_tree_and_replacement(session, dao):
    user = dao.create(User(name="frank"))
    top = _add(session, Role(name="top", parent_id=0, status=1))
    _add(session, Role(name="sub", parent_id=top.id, status=1))
    other = _add(session, Role(name="other", parent_id=0, status=1))

    dao.set_user_roles(user.id, [top.id])
    tree = dao.get_roles_by_user(user.id)
    assert [r.name for r in tree] == ["top"]
    assert [r.name for r in tree[0].children] == ["sub"]

    dao.set_user_roles(user.id, [other.id])
    assert [r.name for r in dao.get_roles_by_user(user.id)] == ["other"]


def test_buttons_and_left_menus(session, dao):
    user = dao.create(User(name="grace"))
    enabled = _add(session, Role(name="enabled", parent_id=0, status=1))
    disabled = _add(session, Role(name="disabled", parent_id=0, status=0))

    def menu(name, menu_type, status=1, parent_id=0, sequence=0):
        return _add(session, Menu(name=name, menu_type=menu_type, status=status,
                                  parent_id=parent_id, sequence=sequence, url="/" + name, method="GET"))

    btn = menu("btn", 2)
    api = menu("api", 3)
    off = menu("off", 2, status=0)
    left = menu("left", 1)
    left_child = menu("left_child", 1, parent_id=left.id)
    hidden = menu("hidden", 2)

    for m in (btn, api, off, left, left_child):
        session.add(RoleMenu(role_id=enabled.id, menu_id=m.id))
    session.add(RoleMenu(role_id=disabled.id, menu_id=hidden.id))
    session.commit()
    dao.set_user_roles(user.id, [enabled.id, disabled.id])

    assert sorted(m.name for m in dao.get_buttons_by_user_id(user.id)) == ["api", "btn"]

    tree = dao.get_left_menus_by_user_id(user.id)
    assert [m.name for m in tree] == ["left"]
    assert [m.name for m in tree[0].children] == ["left_child"]


def test_left_menus_empty_for_user_without_roles(dao):
    user = dao.create(User(name="henry"))
    assert dao.get_left_menus_by_user_id(user.id) == []
    assert dao.get_buttons_by_user_id(user.id) == []