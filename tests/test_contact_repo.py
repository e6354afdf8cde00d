import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from repos.contact_repo import ContactRepository
from utils.errors import StoreError

_DDL = """
CREATE TABLE contacts (
    id TEXT PRIMARY KEY,
    name TEXT,
    email TEXT,
    phone TEXT,
    message TEXT,
    captcha_score REAL,
    acknowledged BOOLEAN NOT NULL DEFAULT 0,
    created_on INTEGER,
    updated_on INTEGER
)
"""


def _engine(rows):
    engine = create_engine("sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False})
    with engine.begin() as conn:
        conn.execute(text(_DDL))
        for r in rows:
            conn.execute(
                text(
                    "INSERT INTO contacts (id, name, email, phone, message, captcha_score, acknowledged, created_on, updated_on) "
                    "VALUES (:id, :name, :email, :phone, :message, :captcha_score, :acknowledged, :created_on, :updated_on)"
                ),
                r,
            )
    return engine


def _row(cid, acknowledged, created_on):
    return {
        "id": cid,
        "name": f"name-{cid}",
        "email": f"{cid}@example.com",
        "phone": "555-0100",
        "message": "hello",
        "captcha_score": 0.9,
        "acknowledged": acknowledged,
        "created_on": created_on,
        "updated_on": created_on,
    }


def test_list_unacknowledged_excludes_acknowledged():
    repo = ContactRepository(_engine([_row("a", False, 1), _row("b", True, 2), _row("c", False, 3), _row("d", True, 4)]))
    contacts = repo.list_unacknowledged()
    assert [c.id for c in contacts] == ["a", "c"]
    assert all(not c.acknowledged for c in contacts)


def test_list_unacknowledged_orders_by_creation_time():
    repo = ContactRepository(_engine([_row("late", False, 300), _row("early", False, 100), _row("mid", False, 200)]))
    assert [c.id for c in repo.list_unacknowledged()] == ["early", "mid", "late"]


def test_list_unacknowledged_maps_columns():
    repo = ContactRepository(_engine([_row("a", False, 42)]))
    c = repo.list_unacknowledged()[0]
    assert c.name == "name-a"
    assert c.email == "a@example.com"
    assert c.captcha_score == pytest.approx(0.9)
    assert c.created_on == 42


def test_list_unacknowledged_empty():
    repo = ContactRepository(_engine([_row("a", True, 1)]))
    assert repo.list_unacknowledged() == []


def test_list_unacknowledged_wraps_query_failure():
    engine = create_engine("sqlite://", poolclass=StaticPool)
    repo = ContactRepository(engine)
    with pytest.raises(StoreError):
        repo.list_unacknowledged()


def test_list_unacknowledged_wraps_undecodable_row():
    bad = _row("a", False, 1)
    bad["captcha_score"] = "n/a"
    repo = ContactRepository(_engine([bad]))
    with pytest.raises(StoreError):
        repo.list_unacknowledged()
