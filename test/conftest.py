import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from rutz.database_storage import DatabaseStorage
from rutz.main import SESSION_COOKIE_NAME, create_app
from rutz.mem_storage import MemStorage


def sqlite_storage():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    storage = DatabaseStorage(engine)
    storage.initialize()
    return storage


@pytest.fixture(params=["memory", "database"])
def storage(request):
    if request.param == "memory":
        return MemStorage()
    return sqlite_storage()


@pytest.fixture
def client(storage):
    client = TestClient(create_app(storage=storage))
    client.cookies.set(SESSION_COOKIE_NAME, "abc")
    return client
