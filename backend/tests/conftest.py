import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from school_api.database import build_engine, create_db_and_tables
from school_api.main import create_app


@pytest.fixture()
def db_url(tmp_path):
    """A fresh SQLite database file per test."""
    return f"sqlite:///{tmp_path / 'test.db'}"


@pytest.fixture()
def client(db_url):
    with TestClient(create_app(db_url)) as c:
        yield c


@pytest.fixture()
def session(db_url):
    engine = build_engine(db_url)
    create_db_and_tables(engine)
    with Session(engine) as s:
        yield s
    engine.dispose()


def student_payload(**overrides):
    payload = {"firstName": "Ann", "lastName": "Lee", "age": 20, "email": "ann@x.com"}
    payload.update(overrides)
    return payload


def teacher_payload(**overrides):
    payload = {"firstName": "Mark", "lastName": "Stone", "age": 45, "email": "mark@school.org", "subject": "Math"}
    payload.update(overrides)
    return payload


@pytest.fixture()
def make_student(client):
    def _make(**overrides):
        r = client.post("/students/save", json=student_payload(**overrides))
        assert r.status_code == 200, r.text
        return r.json()["id"]
    return _make


@pytest.fixture()
def make_teacher(client):
    def _make(**overrides):
        r = client.post("/teachers/save", json=teacher_payload(**overrides))
        assert r.status_code == 200, r.text
        return r.json()["id"]
    return _make
