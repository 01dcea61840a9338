"""FastAPI application entry point."""

from fastapi import FastAPI

from polyglot.api.main import api_router
from polyglot.core.config import settings
from polyglot.core.logging import get_logger, setup_logging
from polyglot.server import WebServer

setup_logging()
logger = get_logger(__name__)


def create_server() -> WebServer:
    """Configure routes and layers of the service."""
    return (
        WebServer()
        .mount(api_router, prefix=settings.API_V1_STR)
        .i18n_dir(settings.I18N_DIR, strict=settings.I18N_STRICT)
        # Outermost layer so every other layer and handler sees the locale
        .layer_i18n(settings.DEFAULT_LANGUAGE, settings.LOCALE_POLICY)
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = create_server().into_app()

    @app.get("/health", tags=["health"])
    async def root_health():
        """Root health check endpoint."""
        return {"status": "ok", "service": settings.PROJECT_NAME}

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve ``app`` with uvicorn."""
    create_server().start(app)
