from datetime import datetime, timezone
from typing import Callable

import pytest
from fastapi.testclient import TestClient

from opus_api.api.fastapi_app import create_app
from opus_api.config import Settings
from opus_api.data import InMemoryStyleStore

API_KEY = "test-internal-key"
FIXED_NOW = datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def settings() -> Settings:
    return Settings(
        internal_api_key=API_KEY,
        supabase_url="https://example.supabase.co",
        supabase_service_role_key="service-role",
    )


@pytest.fixture
def store() -> InMemoryStyleStore:
    s = InMemoryStyleStore(clock=fixed_clock)
    s.add_style("s1", "Chill")
    s.add_style("s2", "Afterhours")
    for i in range(1, 5):
        s.add_track(
            "s1",
            f"t{i}",
            sim_duration_seconds=180 + i,
            song={
                "id": f"t{i}",
                "artist": f"Artist {i}",
                "title": f"Title {i}",
                "album": None,
                "peak_year": 1990 + i,
                "run_time_seconds": 200,
                "styles": "Chill",
            },
        )
    return s


@pytest.fixture
def make_client(settings: Settings) -> Callable[..., TestClient]:
    def _make(store, with_key: bool = True) -> TestClient:
        headers = {"X-API-Key": API_KEY} if with_key else {}
        return TestClient(create_app(settings, store), headers=headers)

    return _make


@pytest.fixture
def client(make_client, store) -> TestClient:
    return make_client(store)
