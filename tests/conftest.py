import fakeredis
import pytest
from fakeredis import aioredis as fake_aioredis
from fastapi.testclient import TestClient

from app.api.dependencies import get_catalog, get_library_store
from app.core.app import app
from app.services.library_store import LibraryStore
from tests.fakes import FakeCatalog


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def redis_server() -> fakeredis.FakeServer:
    return fakeredis.FakeServer()


@pytest.fixture
def store(redis_server) -> LibraryStore:
    return LibraryStore(client=fake_aioredis.FakeRedis(server=redis_server, decode_responses=True))


@pytest.fixture
def client(catalog, store):
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_library_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
