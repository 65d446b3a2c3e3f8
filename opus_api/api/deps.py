import hmac

from fastapi import Header, Request

from opus_api.config import Settings
from opus_api.core import UnauthorizedError
from opus_api.data import StyleStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> StyleStore:
    return request.app.state.store


def require_internal_key(
    request: Request,
    x_api_key: str | None = Header(default=None),
) -> None:
    """
    Shared-key guard for every route except /health.

    The X-API-Key header must match OPUS_INTERNAL_API_KEY exactly.
    """
    if request.method == "OPTIONS":
        return

    expected = get_settings(request).internal_api_key
    if not x_api_key or not hmac.compare_digest(
        x_api_key.encode("utf-8"), expected.encode("utf-8")
    ):
        raise UnauthorizedError()
