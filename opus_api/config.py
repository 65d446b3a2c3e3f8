import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from dotenv import load_dotenv

from opus_api.core import ConfigError

load_dotenv()

DEFAULT_PORT = 8787
DEFAULT_CORS_ORIGINS = ["http://localhost:3000"]
DEFAULT_STORE_TIMEOUT_SECONDS = 15.0

# Row caps for list endpoints
STYLE_TRACKS_LIMIT = 3000
PROFILE_TRACK_LIMIT = 5000

API_KEY_HEADER = "X-API-Key"


@dataclass(frozen=True)
class Settings:
    internal_api_key: str
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    port: int = DEFAULT_PORT
    environment: str = "development"
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    store_timeout: float = DEFAULT_STORE_TIMEOUT_SECONDS
    log_level: str = "INFO"


def _split_origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


def _must(env: Mapping[str, str], name: str) -> str:
    value = (env.get(name) or "").strip()
    if not value:
        raise ConfigError(f"Missing required env var: {name}")
    return value


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    *,
    require_store: bool = True,
) -> Settings:
    """
    Build Settings from the environment (after .env has been loaded).

    OPUS_INTERNAL_API_KEY is always required. SUPABASE_URL and
    SUPABASE_SERVICE_ROLE_KEY are required unless require_store=False
    (in-memory store). Raises ConfigError naming the first missing variable.
    """
    env = os.environ if environ is None else environ

    api_key = _must(env, "OPUS_INTERNAL_API_KEY")
    if require_store:
        supabase_url = _must(env, "SUPABASE_URL")
        service_key = _must(env, "SUPABASE_SERVICE_ROLE_KEY")
    else:
        supabase_url = (env.get("SUPABASE_URL") or "").strip()
        service_key = (env.get("SUPABASE_SERVICE_ROLE_KEY") or "").strip()

    try:
        port = int(env.get("PORT") or DEFAULT_PORT)
        timeout = float(env.get("SUPABASE_TIMEOUT_SECONDS") or DEFAULT_STORE_TIMEOUT_SECONDS)
    except ValueError as e:
        raise ConfigError(f"Invalid numeric setting: {e}") from e

    cors_raw = env.get("CORS_ORIGIN") or ""
    origins = _split_origins(cors_raw) or list(DEFAULT_CORS_ORIGINS)

    return Settings(
        internal_api_key=api_key,
        supabase_url=supabase_url.rstrip("/"),
        supabase_service_role_key=service_key,
        port=port,
        environment=env.get("APP_ENV") or "development",
        cors_origins=origins,
        store_timeout=timeout,
        log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
    )
