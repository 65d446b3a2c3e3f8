import pytest

from opus_api.api.fastapi_app import create_app
from opus_api.core import ConfigError

UNAUTHORIZED = {"error": {"message": "Unauthorized", "status": 401}}


@pytest.mark.parametrize(
    "method, path",
    [
        ("GET", "/styles"),
        ("GET", "/styles/s1/tracks"),
        ("GET", "/styles/s1/assignments"),
        ("PUT", "/styles/s1/assignments"),
        ("DELETE", "/styles/s1/assignments"),
        ("GET", "/styles/s1/weights"),
        ("PUT", "/styles/s1/weights"),
        ("GET", "/styles/s1/playback-profile"),
        ("GET", "/v1/styles"),
    ],
)
def test_routes_require_api_key(make_client, store, method, path) -> None:
    client = make_client(store, with_key=False)
    response = client.request(method, path)
    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED


def test_wrong_api_key_is_rejected(make_client, store, settings) -> None:
    client = make_client(store, with_key=False)
    response = client.get("/styles", headers={"X-API-Key": settings.internal_api_key + "x"})
    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED


def test_unauthorized_write_does_not_touch_store(make_client, store) -> None:
    client = make_client(store, with_key=False)
    client.put(
        "/styles/s1/assignments",
        json={"assignments": [{"library_song_id": "t1", "class_code": "A"}]},
    )
    assert store.list_assignments("s1") == []


def test_unknown_route_uses_error_body(client) -> None:
    response = client.get("/nope")
    assert response.status_code == 404
    assert response.json() == {"error": {"message": "Not Found", "status": 404}}


def test_cors_preflight_for_allowed_origin(make_client, store) -> None:
    client = make_client(store, with_key=False)
    response = client.options(
        "/styles",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "PUT",
            "Access-Control-Request-Headers": "X-API-Key",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_create_app_fails_fast_without_config(monkeypatch) -> None:
    for name in ("OPUS_INTERNAL_API_KEY", "SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY"):
        monkeypatch.delenv(name, raising=False)

    with pytest.raises(ConfigError, match="OPUS_INTERNAL_API_KEY"):
        create_app()
