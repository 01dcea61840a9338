"""Internationalization (i18n) module.

Provides localized messages for response envelopes:
- a message catalog parsed once from per-language JSON or TOML files
- Accept-Language negotiation and a request-scoped locale
- rendering of ``{name}`` placeholders with visible fallbacks
"""

from polyglot.i18n.catalog import (
    Catalog,
    get_catalog,
    init_catalog,
    is_catalog_initialized,
    reset_catalog,
)
from polyglot.i18n.context import (
    LOCALE_NOT_SET,
    current_locale,
    get_locale,
    reset_locale,
    set_locale,
    with_locale,
)
from polyglot.i18n.middleware import LocaleMiddleware, request_locale
from polyglot.i18n.negotiation import (
    CatalogMatcher,
    LocalePreference,
    negotiate,
    negotiate_locale,
    parse_accept_language,
)
from polyglot.i18n.template import Literal, MessageTemplate, Placeholder, parse
from polyglot.i18n.translator import init_translations, message_of, render, translate

__all__ = [
    "LOCALE_NOT_SET",
    "Catalog",
    "CatalogMatcher",
    "Literal",
    "LocaleMiddleware",
    "LocalePreference",
    "MessageTemplate",
    "Placeholder",
    "current_locale",
    "get_catalog",
    "get_locale",
    "init_catalog",
    "init_translations",
    "is_catalog_initialized",
    "message_of",
    "negotiate",
    "negotiate_locale",
    "parse",
    "parse_accept_language",
    "render",
    "request_locale",
    "reset_catalog",
    "reset_locale",
    "set_locale",
    "translate",
    "with_locale",
]
