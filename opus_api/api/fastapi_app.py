from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from opus_api import __version__
from opus_api.config import API_KEY_HEADER, Settings, load_settings
from opus_api.core import configure_logging, log_info
from opus_api.data import PostgrestStyleStore, StyleStore

from .deps import require_internal_key
from .errors import register_error_handlers
from .health import router as health_router
from .styles.assignments import router as assignments_router
from .styles.playback_profile import router as playback_profile_router
from .styles.routes import router as styles_router
from .styles.tracks import router as tracks_router
from .styles.weights import router as weights_router

STYLE_ROUTERS = (
    styles_router,
    tracks_router,
    assignments_router,
    weights_router,
    playback_profile_router,
)

# Prefix used by deployed front-end clients; same routes, hidden from the schema
LEGACY_PREFIX = "/v1"


def build_store(settings: Settings) -> StyleStore:
    return PostgrestStyleStore(
        settings.supabase_url,
        settings.supabase_service_role_key,
        timeout=settings.store_timeout,
    )


def create_app(
    settings: Settings | None = None,
    store: StyleStore | None = None,
) -> FastAPI:
    """
    Build the API with its settings and store injected.

    Missing arguments are built from the environment, which fails fast with
    ConfigError when the API key or database credentials are absent.
    """
    if settings is None:
        settings = load_settings()
    if store is None:
        store = build_store(settings)

    configure_logging(settings.log_level)

    app = FastAPI(
        title="Opus Style API",
        version=__version__,
        description="Internal API for styles, class assignments and playback profiles.",
    )
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", API_KEY_HEADER, "Authorization"],
    )
    register_error_handlers(app)

    # Health stays unauthenticated
    app.include_router(health_router, tags=["health"])

    guarded = [Depends(require_internal_key)]
    for router in STYLE_ROUTERS:
        app.include_router(router, tags=["styles"], dependencies=guarded)
        app.include_router(
            router,
            prefix=LEGACY_PREFIX,
            dependencies=guarded,
            include_in_schema=False,
        )

    log_info(
        f"Opus API ready ({settings.environment}, store={type(store).__name__}, "
        f"cors={settings.cors_origins})"
    )
    return app
