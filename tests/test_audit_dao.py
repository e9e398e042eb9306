from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from pixiu.db.audit import AuditDao
from pixiu.models import Event, create_schema


@pytest.fixture
def session():
    engine = create_engine("sqlite://")
    create_schema(engine)
    with Session(engine) as s:
        yield s
    engine.dispose()


@pytest.fixture
def dao(session):
    return AuditDao(session)


def test_create_stamps_times(dao):
    before = datetime.now()
    event = dao.create(Event(user="alice", client_ip="127.0.0.1", operator="新建", object="cloud"))
    assert event.id >= 1
    assert event.gmt_create == event.gmt_modified
    assert event.gmt_create >= before


def test_list_returns_events_after_timestamp(dao):
    dao.create(Event(user="alice"))
    dao.create(Event(user="bob"))
    events = dao.list(datetime.now() - timedelta(hours=1))
    assert [e.user for e in events] == ["alice", "bob"]


def test_list_excludes_older_events(dao):
    dao.create(Event(user="alice"))
    assert dao.list(datetime.now() + timedelta(hours=1)) == []


def test_delete_removes_events_before_timestamp(dao):
    dao.create(Event(user="alice"))
    dao.create(Event(user="bob"))
    dao.delete(datetime.now() + timedelta(seconds=1))
    assert dao.list(datetime.now() - timedelta(days=1)) == []


def test_delete_keeps_newer_events(dao):
    dao.create(Event(user="alice"))
    dao.delete(datetime.now() - timedelta(days=7))
    events = dao.list(datetime.now() - timedelta(days=1))
    assert [e.user for e in events] == ["alice"]


def test_list_filters_by_stored_creation_time(dao, session):
    old = dao.create(Event(user="old"))
    dao.create(Event(user="new"))
    old.gmt_create = datetime.now() - timedelta(days=10)
    session.commit()
    events = dao.list(datetime.now() - timedelta(days=1))
    assert [e.user for e in events] == ["new"]