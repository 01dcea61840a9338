"""Request-scoped locale context using contextvars.

Each request runs in its own asyncio task, and every task works on its own
copy of the context, so a locale bound for one request is never visible to
another. Tasks and threadpool calls started while a locale is bound inherit
a copy of it.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token

# Returned by current_locale() outside any request
LOCALE_NOT_SET = "not set"

_locale_context: ContextVar[str | None] = ContextVar("locale", default=None)


def current_locale() -> str:
    """The bound locale, or the ``"not set"`` sentinel."""
    locale = _locale_context.get()
    return LOCALE_NOT_SET if locale is None else locale


def get_locale(default: str | None = None) -> str | None:
    """The bound locale, or ``default`` outside a request."""
    locale = _locale_context.get()
    return default if locale is None else locale


def set_locale(locale: str) -> Token[str | None]:
    """Bind the locale for the current context.

    Args:
        locale: The BCP 47 locale code (e.g., "en", "zh-CN")

    Returns:
        Token that must be passed to reset_locale to restore the previous value.
    """
    return _locale_context.set(locale)


def reset_locale(token: Token[str | None]) -> None:
    """Restore the locale that was bound before ``set_locale``."""
    _locale_context.reset(token)


@contextmanager
def with_locale(locale: str) -> Iterator[str]:
    """Bind ``locale`` for the duration of the block.

    The previous binding is restored on every exit path, including
    exceptions and task cancellation.

    Example:
        with with_locale("en"):
            translate("200")  # "Ok"
    """
    token = set_locale(locale)
    try:
        yield locale
    finally:
        reset_locale(token)
