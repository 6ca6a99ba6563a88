"""
FastAPI application factory for the OAuth relay.
"""

import logging

from fastapi import FastAPI

from oauth_relay.api.dependencies import app_lifespan
from oauth_relay.api.exception_handlers import register_exception_handlers
from oauth_relay.api.middleware import RequestIDMiddleware
from oauth_relay.api.routes import auth_router_root, health_router_root
from oauth_relay.config import get_settings


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_application() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=app_lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None,
    )

    # CORS is handled per route: only /auth/token is readable cross-origin.
    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)

    app.include_router(health_router_root)
    app.include_router(auth_router_root)

    return app


app = create_application()
