"""
FastAPI application entry point.
Mounts routes, middleware (request context, CORS, Prometheus) and the
exception handlers that keep every response inside the envelope.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from product_api.api.v1.router import api_router
from product_api.config import get_settings
from product_api.core.error_handlers import register_error_handlers
from product_api.core.logging_config import configure_logging
from product_api.core.middleware import RequestContextMiddleware
from product_api.db.session import engine

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup log line; dispose the connection pool on shutdown."""
    logger.info("app.startup", app=app.title)
    yield
    await engine.dispose()
    logger.info("app.shutdown", app=app.title)


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level, json=settings.log_json)

    app = FastAPI(
        title=settings.app_name,
        description="Authenticated product catalogue: CRUD, search and pagination behind JWT auth and rate limiting.",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS for frontend/API consumers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Added last so it wraps CORS and sees every request first.
    app.add_middleware(RequestContextMiddleware)

    register_error_handlers(app)

    # Prometheus metrics at /metrics, outside the rate-limited API router
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
