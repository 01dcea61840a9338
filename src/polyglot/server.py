"""Chainable builder for a FastAPI app speaking localized envelopes.

Routes and middleware layers are only recorded by the builder methods and
applied together in ``into_app``: all routes first, then every layer in
the order it was added (each new layer wraps the previous ones). Calling
``layer_i18n()`` before or after ``mount()`` therefore gives the same app.
"""

from collections.abc import Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any
import uuid

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import uvicorn

from polyglot.core.config import settings
from polyglot.core.exceptions import AppError, SystemFailure
from polyglot.core.logging import bind_request_context, get_logger
from polyglot.i18n.catalog import Catalog, get_catalog, init_catalog
from polyglot.i18n.middleware import LocaleMiddleware, request_locale
from polyglot.i18n.negotiation import LocalePolicy
from polyglot.i18n.translator import init_translations
from polyglot.resp.envelope import R
from polyglot.resp.errors import validation_failure_from_pydantic

logger = get_logger(__name__)


def install_exception_handlers(app: FastAPI) -> None:
    """Turn every error raised by a handler into a localized envelope."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Business, validation and wrapped system errors."""
        envelope: R[Any] = R.err(exc, request_locale(request))
        logger.info("app_error", path=str(request.url.path), **exc.to_dict())
        return envelope.to_response()

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Request parsing failures become an illegal-parameter envelope."""
        failure = validation_failure_from_pydantic(exc.errors())
        envelope: R[Any] = R.err(failure, request_locale(request))
        return envelope.to_response()

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Anything else is an internal error with an opaque message."""
        envelope: R[Any] = R.err(SystemFailure(exc), request_locale(request))
        return envelope.to_response()


class WebServer:
    """Builds and runs the application.

    Example:
        WebServer(host="127.0.0.1", port=8080)
            .mount(api_router)
            .layer_i18n()
            .start()
    """

    def __init__(
        self,
        router: APIRouter | None = None,
        host: str | None = None,
        port: int | None = None,
        *,
        title: str | None = None,
    ) -> None:
        self.host = host or settings.HOST
        self.port = port or settings.PORT
        self.title = title or settings.PROJECT_NAME
        self._routers: list[tuple[APIRouter, str]] = []
        self._layers: list[Callable[[FastAPI], None]] = []
        self._i18n_dir: Path = settings.I18N_DIR
        self._i18n_strict: bool = settings.I18N_STRICT
        self._catalog: Catalog | None = None
        if router is not None:
            self.mount(router)

    def mount(self, router: APIRouter, prefix: str = "") -> "WebServer":
        """Add a router's routes to the app."""
        self._routers.append((router, prefix))
        return self

    def layer(self, middleware_class: type, **options: Any) -> "WebServer":
        """Wrap the app in an ASGI middleware class."""
        self._layers.append(lambda app: app.add_middleware(middleware_class, **options))
        return self

    def layer_i18n(
        self,
        default_locale: str | None = None,
        policy: LocalePolicy | None = None,
    ) -> "WebServer":
        """Negotiate and bind the request locale from Accept-Language."""
        return self.layer(LocaleMiddleware, default_locale=default_locale, policy=policy)

    def i18n_dir(self, path: str | Path, *, strict: bool | None = None) -> "WebServer":
        """Load the catalog from a directory at startup."""
        self._i18n_dir = Path(path)
        if strict is not None:
            self._i18n_strict = strict
        return self

    def catalog(self, catalog: Catalog) -> "WebServer":
        """Install a prebuilt catalog at startup instead of scanning a directory."""
        self._catalog = catalog
        return self

    def _install_catalog(self) -> None:
        if self._catalog is not None:
            init_catalog(self._catalog)
        else:
            init_translations(self._i18n_dir, strict=self._i18n_strict)

    def into_app(self) -> FastAPI:
        """Create the FastAPI application with every route and layer applied."""

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            """Application lifespan handler."""
            # A strict catalog failure propagates and aborts startup
            self._install_catalog()

            logger.info(
                "application_startup",
                environment=settings.ENVIRONMENT,
                debug=settings.DEBUG,
                languages=sorted(get_catalog().languages),
                default_language=settings.DEFAULT_LANGUAGE,
            )
            yield
            logger.info("application_shutdown")

        app = FastAPI(
            title=self.title,
            openapi_url=f"{settings.API_V1_STR}/openapi.json",
            docs_url=f"{settings.API_V1_STR}/docs",
            redoc_url=f"{settings.API_V1_STR}/redoc",
            lifespan=lifespan,
        )

        install_exception_handlers(app)

        @app.middleware("http")
        async def add_request_id(request: Request, call_next):
            """Add unique request ID to each request for tracing."""
            request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
            bind_request_context(request_id, locale=request_locale(request))

            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response

        for router, prefix in self._routers:
            app.include_router(router, prefix=prefix)

        for apply_layer in self._layers:
            apply_layer(app)

        return app

    def start(self, app: FastAPI | None = None) -> None:
        """Serve until SIGINT / SIGTERM, then shut down gracefully.

        Args:
            app: An app previously built with ``into_app``. Built here if omitted.
        """
        logger.info("server_starting", host=self.host, port=self.port)
        uvicorn.run(app or self.into_app(), host=self.host, port=self.port)
        logger.info("server_stopped")
