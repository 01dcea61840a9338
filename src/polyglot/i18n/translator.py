"""Message rendering against the process-wide catalog.

Missing languages, keys and arguments never raise: they render as visible
sentinel text (or an empty substitution) so the gap shows up in responses.
"""

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from polyglot.core.config import settings
from polyglot.core.exceptions import CatalogError
from polyglot.core.logging import get_logger
from polyglot.i18n.catalog import Catalog, get_catalog, init_catalog
from polyglot.i18n.context import get_locale
from polyglot.i18n.template import Placeholder

logger = get_logger(__name__)

RenderArgs = Mapping[str, Any] | Iterable[tuple[str, Any]]


def init_translations(
    directory: str | Path | None = None,
    *,
    strict: bool | None = None,
) -> bool:
    """Load the catalog directory and install it process-wide.

    This should be called once at application startup. Later calls leave
    the installed catalog untouched and return False. A directory that is
    missing or unreadable installs nothing, so a later call with a valid
    directory still takes effect.

    Args:
        directory: Catalog directory. Defaults to ``settings.I18N_DIR``.
        strict: Fail on the first bad file. Defaults to ``settings.I18N_STRICT``.

    Returns:
        True if this call installed a catalog.

    Raises:
        CatalogError: only when ``strict`` is set.
    """
    directory = settings.I18N_DIR if directory is None else directory
    strict = settings.I18N_STRICT if strict is None else strict

    try:
        catalog = Catalog.from_directory(directory, strict=strict)
    except CatalogError as e:
        if strict:
            raise
        logger.error("catalog_dir_unreadable", path=str(directory), error=str(e))
        return False
    return init_catalog(catalog)


def render(
    lang: str,
    key: str,
    args: RenderArgs = (),
    catalog: Catalog | None = None,
) -> str:
    """Render message ``key`` in ``lang``.

    Args:
        lang: Locale tag, must match a catalog language exactly
        key: Message key, usually a stringified business code
        args: Placeholder values, as a mapping or ordered (name, value) pairs.
            The first pair with a matching name wins.
        catalog: Catalog to use. Defaults to the process-wide one.

    Returns:
        The rendered text, ``"[Missing Lang: <lang>]"`` or
        ``"[Missing Key: <key>]"``.

    Example:
        render("en", "200", [("name", "Jason")])
        # "Hello, Jason!" for the template "Hello, {name}!"
    """
    catalog = get_catalog() if catalog is None else catalog

    templates = catalog.messages(lang)
    if templates is None:
        return f"[Missing Lang: {lang}]"

    template = templates.get(key)
    if template is None:
        return f"[Missing Key: {key}]"

    pairs = list(args.items() if isinstance(args, Mapping) else args)

    parts: list[str] = []
    for segment in template:
        if isinstance(segment, Placeholder):
            parts.append(_lookup(pairs, segment.name))
        else:
            parts.append(segment.text)
    return "".join(parts)


def _lookup(pairs: list[tuple[str, Any]], name: str) -> str:
    for arg_name, value in pairs:
        if arg_name == name:
            return str(value)
    return ""


def translate(key: str, locale: str | None = None, **params: Any) -> str:
    """Render ``key`` in ``locale``, or in the request's locale if omitted.

    Outside a request the configured DEFAULT_LANGUAGE is used.

    Example:
        translate("404", resource="User")
    """
    target_locale = locale or get_locale(settings.DEFAULT_LANGUAGE)
    return render(target_locale, key, params)


def message_of(code: int, locale: str | None = None) -> str:
    """Localized message for a business code."""
    return translate(str(int(code)), locale)
