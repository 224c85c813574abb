import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from studyflow.ai.generator import TaskGenerator, get_task_generator
from studyflow.database import Base, get_db, make_engine
from studyflow.main import app
from studyflow.schemas.user import UserUpsert
from studyflow.storage import DatabaseStorage

from .fakes import FakeBackend


# Fresh SQLite file per test
@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'studyflow-test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(db):
    return DatabaseStorage(db)


@pytest.fixture
def make_user(storage):
    def _make_user(name=None):
        name = name or uuid.uuid4().hex[:8]
        return storage.upsert_user(UserUpsert(id=name, email=f"{name}@example.com"))
    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob")


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def client(session_factory, backend):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_task_generator] = lambda: TaskGenerator(backend)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def signup(client):
    """Register and log in a fresh user; returns auth headers."""
    def _signup(email=None, password="Pass123!"):
        email = email or f"user_{uuid.uuid4().hex[:8]}@example.com"
        r = client.post("/api/auth/register", json={"email": email, "password": password})
        assert r.status_code == 201, r.text
        r = client.post("/api/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['token']}"}
    return _signup


@pytest.fixture
def auth(signup):
    return signup()
