"""Locale middleware for Accept-Language header negotiation.

Binds the negotiated locale for everything that runs downstream of it:
other middleware, dependencies, route handlers, exception handlers and any
task or threadpool call they start.

Uses pure ASGI middleware to avoid BaseHTTPMiddleware's contextvars issues.
See: https://github.com/encode/starlette/discussions/1729
"""

from starlette.datastructures import Headers, MutableHeaders
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from polyglot.core.config import settings
from polyglot.i18n.catalog import get_catalog
from polyglot.i18n.context import get_locale, reset_locale, set_locale
from polyglot.i18n.negotiation import LocalePolicy, negotiate_locale

# Key used in request state for the negotiated locale
LOCALE_STATE_KEY = "locale"


def request_locale(connection: HTTPConnection) -> str:
    """Locale negotiated for a request.

    Reads request state first: handlers registered for bare ``Exception``
    run in Starlette's outermost middleware, after the locale binding has
    already been released.
    """
    locale = connection.scope.get("state", {}).get(LOCALE_STATE_KEY)
    if isinstance(locale, str):
        return locale
    return get_locale(settings.DEFAULT_LANGUAGE) or settings.DEFAULT_LANGUAGE


class LocaleMiddleware:
    """Pure ASGI middleware that binds the request locale.

    Also adds a Content-Language header to responses. The binding is
    released in a finally block, so it never outlives the request even if
    the downstream app raises or the request is cancelled.
    """

    def __init__(
        self,
        app: ASGIApp,
        default_locale: str | None = None,
        policy: LocalePolicy | None = None,
    ) -> None:
        self.app = app
        self.default_locale = default_locale or settings.DEFAULT_LANGUAGE
        self.policy: LocalePolicy = policy or settings.LOCALE_POLICY

    def resolve(self, accept_language: str | None) -> str:
        """Negotiate against the languages of the installed catalog."""
        return negotiate_locale(
            accept_language, get_catalog(), self.default_locale, self.policy
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI interface."""
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        locale = self.resolve(headers.get("accept-language"))

        # Exposed to handlers as request.state.locale
        scope.setdefault("state", {})[LOCALE_STATE_KEY] = locale

        async def send_with_locale(message: Message) -> None:
            """Wrapper to add Content-Language header to response."""
            if message["type"] == "http.response.start":
                response_headers = MutableHeaders(raw=list(message.get("headers", [])))
                response_headers["Content-Language"] = locale
                message["headers"] = response_headers.raw

            await send(message)

        token = set_locale(locale)
        try:
            await self.app(scope, receive, send_with_locale)
        finally:
            reset_locale(token)
