import pytest
from fastapi.testclient import TestClient

from locallibrary.core.config import Settings
from locallibrary.core.store import CatalogStore
from locallibrary.main import create_app

from factories import seed_catalog


@pytest.fixture
def settings(tmp_path):
    db_file = tmp_path / "catalog.db"
    return Settings(database_url=f"sqlite:///{db_file}", environment="test", log_level="WARNING")


@pytest.fixture
def store(settings):
    store = CatalogStore(settings.database_url)
    store.open()
    yield store
    store.close()


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def app_store(client):
    return client.app.state.store


@pytest.fixture
def catalog_data(app_store):
    """A small catalog: two authors, two genres, three books, three copies."""
    return seed_catalog(app_store)

