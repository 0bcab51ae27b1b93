import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.database import Base, build_engine, get_db
from app.core.sessions import SessionStore
from main import app


@pytest.fixture()
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def sessions():
    return SessionStore()


@pytest.fixture()
def make_client(engine, sessions, tmp_path, monkeypatch):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    app.dependency_overrides[get_db] = override_get_db
    previous_sessions = app.state.sessions
    app.state.sessions = sessions

    yield lambda: TestClient(app)

    app.state.sessions = previous_sessions
    app.dependency_overrides.clear()


@pytest.fixture()
def client(make_client):
    return make_client()


@pytest.fixture()
def signup():
    def _signup(client, email, password="secret", name=None):
        payload = {"email": email, "password": password}
        if name is not None:
            payload["name"] = name
        return client.post("/api/signup", json=payload)

    return _signup
