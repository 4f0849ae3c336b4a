from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from config import Settings
from core.credentials import CredentialStore
from core.feed import FeedQueryEngine
from core.follow_graph import FollowGraph
from core.store import RecordStore
from database import build_engine, build_session_factory, init_db
from main import create_app
from models.honk import Honk


TEST_SETTINGS = Settings(
    database_url="sqlite://",
    secret_key="test-secret",
    kdf_iterations=1000,
    kdf_workers=2,
)

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = build_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return RecordStore(db)


@pytest.fixture
def credentials():
    credentials = CredentialStore(iterations=1000, workers=2)
    yield credentials
    credentials.shutdown()


@pytest.fixture
def graph(store):
    return FollowGraph(store)


@pytest.fixture
def feed(store, graph):
    return FeedQueryEngine(store, graph, page_size=5)


@pytest.fixture
def make_user(store, credentials):
    def _make_user(username, password="password123"):
        credential = credentials.derive(password)
        return store.add_user(username, credential.hash, credential.salt)
    return _make_user


@pytest.fixture
def make_honks(db):
    """Adds honks with strictly increasing timestamps, oldest first."""
    counter = {"minutes": 0}

    def _make_honks(user, *contents):
        honks = []
        for content in contents:
            counter["minutes"] += 1
            honk = Honk(
                user_id=user.id,
                content=content,
                created_at=BASE_TIME + timedelta(minutes=counter["minutes"]),
            )
            db.add(honk)
            honks.append(honk)
        db.commit()
        return honks
    return _make_honks


@pytest.fixture
def client():
    app = create_app(TEST_SETTINGS)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def register(client):
    """Registers a user over HTTP and returns its bearer auth header."""
    def _register(username, password="password123"):
        response = client.post("/register", json={"username": username, "password": password})
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}
    return _register
