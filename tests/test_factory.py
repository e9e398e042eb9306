from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from pixiu.db.factory import DaoFactory
from pixiu.models import Cloud, Event, KubeConfig, Menu, Role, User, create_schema


@pytest.fixture
def factory():
    engine = create_engine("sqlite://")
    create_schema(engine)
    with Session(engine) as s:
        yield DaoFactory(s)
    engine.dispose()


def test_cloud_and_kube_config_share_session(factory):
    cloud = factory.cloud().create(Cloud(name="c1", alias_name="first"))
    factory.kube_config().create(
        KubeConfig(service_account="sa", cloud_id=cloud.id, cloud_name="c1")
    )
    assert factory.cloud().count() == 1
    assert factory.kube_config().get_by_cloud(cloud.id).service_account == "sa"


def test_user_role_menu_daos(factory):
    user = factory.user().create(User(name="alice"))
    role = factory.role().create(Role(name="admin", parent_id=0))
    menu = factory.menu().create(Menu(name="m", parent_id=0, menu_type=2, url="/m", method="GET"))

    factory.role().set_role(role.id, [menu.id])
    factory.user().set_user_roles(user.id, [role.id])

    assert [m.name for m in factory.role().get_menus_by_role_id(role.id)] == ["m"]
    assert [r.name for r in factory.user().get_roles_by_user(user.id)] == ["admin"]
    assert [m.id for m in factory.menu().get_by_ids([menu.id])] == [menu.id]


def test_audit_dao(factory):
    factory.audit().create(Event(user="alice", client_ip="127.0.0.1", operator="op", object="cloud"))
    events = factory.audit().list(datetime(2000, 1, 1))
    assert [(e.user, e.object) for e in events] == [("alice", "cloud")]


def test_each_call_returns_fresh_dao_on_same_session(factory):
    first = factory.user()
    second = factory.user()
    assert first is not second
    first.create(User(name="bob"))
    assert second.get_by_name("bob").name == "bob"