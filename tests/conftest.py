from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from src.config import Settings
from src.main import create_app
from src.services.resizer import ImageResizer

from tests.fakes import FakeObjectStore


@pytest.fixture
def origin_store() -> FakeObjectStore:
    return FakeObjectStore("origin")


@pytest.fixture
def cache_store() -> FakeObjectStore:
    return FakeObjectStore("cache")


@pytest.fixture
def resizer(origin_store: FakeObjectStore, cache_store: FakeObjectStore) -> ImageResizer:
    return ImageResizer(origin=origin_store, cache=cache_store)


@pytest.fixture
def settings() -> Settings:
    return Settings(origin_bucket="origin", cache_bucket="cache")


@pytest.fixture
async def client(settings: Settings, resizer: ImageResizer) -> AsyncIterator[AsyncClient]:
    app = create_app(settings, resizer=resizer)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
