import asyncio
from contextlib import asynccontextmanager
from datetime import timedelta
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .db.store import KeyValueStore
from .routers import health, rates, watchlist, settings as settings_router
from .services.desk import RateDesk
from .services.http_client import make_client
from .services.messaging import init_messaging
from .services.rate_service import RateService
from .services.rates.cache_service import RateCache


def create_app(settings_override: Settings | None = None) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp DB). Falls back to cached get_settings().
    """
    settings = settings_override or get_settings()
    if settings.db_path is None:
        settings.init_post_load()
    # Initialize logging early
    init_logging(debug=settings.debug)

    store = KeyValueStore(settings.db_path)  # type: ignore[arg-type]
    try:
        store.ensure_schema()
    except Exception:
        # Failing to init storage is fatal; re-raise after logging
        logging.getLogger("ratedesk").exception("failed to initialize storage")
        raise

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = make_client(settings.http_timeout_seconds)
        cache = RateCache(
            store, max_age=timedelta(hours=settings.rates_cache_max_age_hours)
        )
        desk = RateDesk(RateService(client, settings), cache)
        desk.restore_session()
        app.state.desk = desk
        # Fire and forget; keep a reference so the task is not collected early
        app.state.messaging_task = asyncio.create_task(init_messaging(settings, client))
        try:
            yield
        finally:
            app.state.messaging_task.cancel()
            await client.aclose()

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.not_found_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(errors.InvalidCurrencyCode, errors.invalid_currency_handler)
    app.add_exception_handler(errors.OfflineError, errors.offline_handler)
    app.add_exception_handler(
        errors.AllProvidersFailed, errors.providers_unavailable_handler
    )
    app.add_exception_handler(
        errors.ConversionFailed, errors.providers_unavailable_handler
    )
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(rates.router)
    app.include_router(watchlist.router)
    app.include_router(settings_router.router)

    @app.get("/")
    async def root():
        return {"message": "Rate Desk API", "version": settings.version}

    return app
