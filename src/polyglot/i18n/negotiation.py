"""Accept-Language content negotiation.

Handles header formats like:
- "en-US,en;q=0.9,es;q=0.8"
- "fr"
- "zh-CN"
"""

from collections.abc import Callable, Iterable
import math
from typing import Literal, NamedTuple

from polyglot.i18n.catalog import Catalog

LocalePolicy = Literal["catalog", "first"]


class LocalePreference(NamedTuple):
    """One ranked entry of an Accept-Language header."""

    quality: float
    tag: str


def parse_accept_language(header: str | None) -> list[LocalePreference]:
    """Parse an Accept-Language header into preferences, best first.

    A missing or unparseable ``q`` counts as 1.0. Entries with the same
    quality keep their header order.
    """
    if not header:
        return []

    preferences: list[LocalePreference] = []
    for raw_part in header.split(","):
        sections = raw_part.split(";")
        tag = sections[0].strip()
        if not tag:
            continue
        preferences.append(LocalePreference(_parse_quality(sections[1:]), tag))

    # list.sort is stable, so ties stay in header order
    preferences.sort(key=lambda p: p.quality, reverse=True)
    return preferences


def _parse_quality(params: list[str]) -> float:
    for param in params:
        name, _, value = param.partition("=")
        if name.strip().lower() != "q":
            continue
        try:
            quality = float(value.strip())
        except ValueError:
            return 1.0
        if math.isnan(quality):
            return 1.0
        return min(max(quality, 0.0), 1.0)
    return 1.0


def negotiate(
    header: str | None,
    is_supported: Callable[[str], bool],
    default: str,
    policy: LocalePolicy = "catalog",
) -> str:
    """Pick the best supported locale for an Accept-Language header.

    Tags are tried in preference order. When none is supported as written:
    - "catalog" policy retries each tag lower-cased, then its primary
      subtag ("en-US" -> "en"), and finally returns ``default``
    - "first" policy returns the highest ranked tag even if unsupported

    Args:
        header: The Accept-Language header value, or None if absent
        is_supported: Predicate telling whether a tag has messages
        default: Locale used when nothing matches
        policy: Fallback policy, see above

    Returns:
        The chosen locale tag.
    """
    preferences = parse_accept_language(header)
    if not preferences:
        return default

    for preference in preferences:
        if is_supported(preference.tag):
            return preference.tag

    if policy == "first":
        return preferences[0].tag

    for preference in preferences:
        tag = preference.tag.lower()
        if is_supported(tag):
            return tag
        primary = tag.split("-", 1)[0]
        if primary and is_supported(primary):
            return primary

    return default


class CatalogMatcher:
    """Case-insensitive ``is_supported`` predicate over catalog languages.

    ``canonical`` maps a matched tag back to the catalog's own spelling,
    so "zh-cn" resolves to a "zh-CN" catalog entry.
    """

    def __init__(self, languages: Iterable[str]) -> None:
        self._by_lower = {lang.lower(): lang for lang in languages}

    def __call__(self, tag: str) -> bool:
        return tag.lower() in self._by_lower

    def canonical(self, tag: str) -> str:
        return self._by_lower.get(tag.lower(), tag)


def negotiate_locale(
    header: str | None,
    catalog: Catalog,
    default: str,
    policy: LocalePolicy = "catalog",
) -> str:
    """Negotiate against the languages present in ``catalog``."""
    matcher = CatalogMatcher(catalog.languages)
    return matcher.canonical(negotiate(header, matcher, default, policy))
