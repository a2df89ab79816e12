import os
import io
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure tests use an in-memory SQLite DB and never reach the model API
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["OPENROUTER_API_KEY"] = ""

from bloodreport import config
from bloodreport.app import app
from bloodreport.db.session import Base, get_db
from bloodreport.models.blood_test import BloodTest
from bloodreport.routes import chat_routes
from bloodreport.utils.rate_limit import reset_limiter


# In-memory SQLite shared across connections
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = _override_get_db


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def upload_root(tmp_path, monkeypatch):
    root = tmp_path / "uploads"
    monkeypatch.setattr(config, "UPLOAD_ROOT", root)
    return root


@pytest.fixture(autouse=True)
def fresh_state(monkeypatch):
    # ensure limiter and chat history are fresh each test
    monkeypatch.setattr(config, "OPENROUTER_API_KEY", "")
    reset_limiter()
    chat_routes.history_store.clear()
    yield
    chat_routes.history_store.clear()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def upload(client):
    def _upload(name="panel.txt", content=b"Hemoglobin 14 g/dL", content_type="text/plain", user=None):
        headers = {"X-User-Id": user} if user else {}
        files = {"file": (name, io.BytesIO(content), content_type)}
        return client.post("/api/blood-tests/upload", files=files, headers=headers)
    return _upload


@pytest.fixture
def processed_test(client, upload):
    resp = upload()
    assert resp.status_code == 201, resp.text
    test_id = resp.json()["id"]
    r = client.post(f"/api/blood-tests/{test_id}/process")
    assert r.status_code == 200, r.text
    return r.json()


@pytest.fixture
def make_test(db):
    def _make(user_id="anonymous", processed=True, **kwargs) -> BloodTest:
        item = BloodTest(
            user_id=user_id,
            file_path=kwargs.pop("file_path", "/nonexistent/panel.pdf"),
            file_name=kwargs.pop("file_name", "panel.pdf"),
            file_type=kwargs.pop("file_type", "application/pdf"),
            file_size=kwargs.pop("file_size", 10),
            processed=processed,
            **kwargs,
        )
        db.add(item)
        db.commit()
        db.refresh(item)
        return item
    return _make
