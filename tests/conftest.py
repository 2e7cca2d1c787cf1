import pytest
from fastapi.testclient import TestClient

from helpers import PROXY_ROUTES
from recipe_harvester.app.core.config import Settings
from recipe_harvester.app.main import create_app


@pytest.fixture
def settings():
    return Settings(
        proxy_routes=list(PROXY_ROUTES),
        fetch_max_attempts=3,
        fetch_base_delay_ms=2000,
        _env_file=None,
    )


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def _sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return _sleep


@pytest.fixture
def client():
    return TestClient(create_app())
