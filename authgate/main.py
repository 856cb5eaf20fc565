# authgate/main.py (async version)

import logging
from typing import Optional
from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from contextlib import asynccontextmanager

from authgate import __version__
from authgate.adapters.configuration.config import Settings, settings
from authgate.adapters.configuration.container import AuthContainer
from authgate.adapters.inbound.api.v1.router import api_router
from authgate.application.ports.outbound import (
    IPasswordHasher,
    IRateLimiter,
    ITokenBlacklist,
    IUserRepository,
)
from authgate.shared.middleware import (
    AsyncExceptionMiddleware,
    AsyncJWTAuthenticationMiddleware,
    AsyncRateLimitingMiddleware,
    AuthHooks,
)
from authgate.shared.middleware.exception_middleware import register_exception_handlers

# ─── UNIQUE LOGGING CONFIGURATION ─────────────────────────────────────────────────
level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL, logging.INFO)
logging.basicConfig(
    level=level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


# ────────────────────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Async context manager to handle startup and shutdown events.
    Starts the token blacklist sweeper and, when configured, prepares the database.
    """
    # Startup
    logger.info("Application starting up...")
    await app.state.container.startup()

    yield

    # Shutdown
    logger.info("Application shutting down...")
    await app.state.container.shutdown()


def create_app(
        app_settings: Optional[Settings] = None,
        *,
        user_repository: Optional[IUserRepository] = None,
        token_blacklist: Optional[ITokenBlacklist] = None,
        rate_limiter: Optional[IRateLimiter] = None,
        password_hasher: Optional[IPasswordHasher] = None,
        hooks: Optional[AuthHooks] = None,
) -> FastAPI:
    app_settings = app_settings or settings
    container = AuthContainer(
        app_settings,
        user_repository=user_repository,
        token_blacklist=token_blacklist,
        rate_limiter=rate_limiter,
        password_hasher=password_hasher,
        hooks=hooks,
    )

    app = FastAPI(
        title="AuthGate",
        description="JWT authentication and token lifecycle",
        version=__version__,
        debug=app_settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.container = container

    register_exception_handlers(app)

    # Middlewares: the last one added runs first, so a request goes through
    # exception mapping -> rate limiting -> JWT authentication -> route
    app.add_middleware(
        AsyncJWTAuthenticationMiddleware,
        token_service=container.token_service,
        whitelist_paths=app_settings.AUTH_WHITELIST_PATHS,
        blacklist_paths=app_settings.AUTH_BLACKLIST_PATHS,
        hooks=container.hooks,
    )
    app.add_middleware(
        AsyncRateLimitingMiddleware,
        rate_limiter=container.rate_limiter,
        token_service=container.token_service,
        limit=app_settings.RATE_LIMIT_REQUESTS_PER_WINDOW,
        enabled=app_settings.RATE_LIMIT_ENABLED,
        whitelist_paths=app_settings.AUTH_WHITELIST_PATHS,
    )
    app.add_middleware(AsyncExceptionMiddleware, environment=app_settings.ENVIRONMENT)

    # Routers
    app.include_router(api_router, prefix="/api")

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema

        spec = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )

        # Validation errors are answered with 400 invalid_request, not 422
        for schema in ("HTTPValidationError", "ValidationError"):
            spec.get("components", {}).get("schemas", {}).pop(schema, None)

        for path in spec.get("paths", {}).values():
            for op in path.values():
                op.get("responses", {}).pop("422", None)

        app.openapi_schema = spec
        return spec

    app.openapi = custom_openapi
    return app


app = create_app()
