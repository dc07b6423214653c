"""Application factory: middleware stack, access log, database and routers."""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional
from urllib.parse import urlsplit

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from slowapi.middleware import SlowAPIMiddleware

from boilerplate.api.errors import register_error_handlers, unhandled_error_middleware
from boilerplate.api.limiter import RateLimitScopeMiddleware, limiter
from boilerplate.api.static import SizedStaticFiles
from boilerplate.config import (
    AppConfig,
    DatabaseConfig,
    load_app_config,
    load_database_config,
    load_env_file,
)
from boilerplate.core.access_log import (
    AccessLogConfig,
    AccessLogFormat,
    LogRotationWatchdog,
    RequestLogMiddleware,
    SinkRouter,
)
from boilerplate.core.logger import LoggerConfig, configure
from boilerplate.infra.database.engine import (
    build_engine,
    build_session_factory,
    close_engine,
    init_db,
)

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Frame-Options": "SAMEORIGIN",
    "X-XSS-Protection": "1; mode=block",
}


async def security_headers_middleware(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


def base_url_port(base_url: str) -> int:
    parts = urlsplit(base_url)
    if parts.port is not None:
        return parts.port
    return 443 if parts.scheme == "https" else 80


def _warn_on_port_mismatch(config: AppConfig) -> None:
    port = base_url_port(config.base_url)
    if port != config.port:
        logger.warning(
            "BASE_URL %s points at port %d but the server listens on %d",
            config.base_url, port, config.port,
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── Startup ──────────────────────────────────────────────────
    configure(app.state.logger_config)
    config: AppConfig = app.state.config
    _warn_on_port_mismatch(config)

    app.state.watchdog.start()

    try:
        engine = build_engine(app.state.db_config)
        app.state.session_factory = build_session_factory(engine)
        if config.db_init_on_startup:
            await init_db(app.state.db_config)
    except Exception as exc:
        logger.warning("API: database not initialised (%s); data routes will fail", exc)

    logger.info(
        "API: started in %s mode, access logs in %s",
        config.environment, app.state.access_config.log_dir,
    )

    yield

    # ── Shutdown ─────────────────────────────────────────────────
    await app.state.watchdog.stop()
    app.state.access_router.close()
    await close_engine()
    app.state.session_factory = None
    logger.info("API: shut down")


def create_app(
    app_config: Optional[AppConfig] = None,
    access_config: Optional[AccessLogConfig] = None,
    db_config: Optional[DatabaseConfig] = None,
    logger_config: Optional[LoggerConfig] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Configs default to their ``from_env()`` values after loading ``.env``.
    Middleware, outermost first: GZip, access log, CORS, rate limit,
    security headers, unhandled-error catch-all.
    """
    load_env_file()
    app_config = app_config or load_app_config()
    access_config = access_config or AccessLogConfig.from_env()
    db_config = db_config or load_database_config()

    app = FastAPI(
        title="Boilerplate API",
        version="1.0.0",
        description="REST API with access logging, auth tokens, uploads and a users CRUD.",
        lifespan=lifespan,
    )
    app.state.config = app_config
    app.state.access_config = access_config
    app.state.db_config = db_config
    app.state.logger_config = logger_config
    app.state.session_factory = None

    app.state.limiter = limiter
    register_error_handlers(app)

    access_router = SinkRouter.from_config(access_config)
    app.state.access_router = access_router
    app.state.watchdog = LogRotationWatchdog(access_router.sinks, interval=access_config.check_interval)

    # Last added runs first
    app.middleware("http")(unhandled_error_middleware)
    app.middleware("http")(security_headers_middleware)
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(RateLimitScopeMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(app_config.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if access_config.enabled:
        app.add_middleware(
            RequestLogMiddleware,
            log_format=AccessLogFormat.for_mode(access_config.production),
            router=access_router,
        )
    app.add_middleware(GZipMiddleware, minimum_size=1024)

    # ── Routers ───────────────────────────────────────────────────
    from boilerplate.api.routers import auth, uploads, users

    app.include_router(auth.router)
    app.include_router(uploads.router)
    app.include_router(users.router, prefix="/api/v1")

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    # Catch-all mount, keep last
    if os.path.isdir(app_config.public_dir):
        app.mount("/", SizedStaticFiles(directory=app_config.public_dir, html=True), name="public")
    else:
        logger.debug("Public directory %s missing, static files disabled", app_config.public_dir)

    return app
