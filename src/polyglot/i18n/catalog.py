"""Message catalog: language -> message key -> parsed template.

Two builders exist and intentionally differ in strictness:

- ``Catalog.build`` takes in-memory sources (the "compiled-in" case) and
  rejects the whole build on any malformed entry.
- ``Catalog.from_directory`` scans ``<lang>.json`` / ``<lang>.toml`` files
  and skips files it cannot read or parse, logging each one. Passing
  ``strict=True`` turns the first bad file into a ``CatalogError``. A
  directory that is missing or cannot be listed always raises, since there
  is nothing to build from.

The process-wide catalog is installed once with ``init_catalog``. Later
installs are ignored (first writer wins) regardless of which builder
produced them.
"""

from collections.abc import Iterable, Mapping
import json
from pathlib import Path
import threading
import tomllib
from types import MappingProxyType
from typing import Any, ClassVar

from polyglot.core.exceptions import CatalogError
from polyglot.core.logging import get_logger
from polyglot.i18n.template import MessageTemplate, parse, template_source

logger = get_logger(__name__)

# File suffix -> parser for directory catalogs
_PARSERS = {
    ".json": json.loads,
    ".toml": tomllib.loads,
}


class Catalog:
    """Immutable set of parsed message templates."""

    __slots__ = ("_messages",)

    def __init__(
        self, messages: Mapping[str, Mapping[str, MessageTemplate]] | None = None
    ) -> None:
        self._messages: Mapping[str, Mapping[str, MessageTemplate]] = MappingProxyType(
            {
                lang: MappingProxyType(dict(templates))
                for lang, templates in (messages or {}).items()
            }
        )

    @classmethod
    def build(cls, sources: Iterable[tuple[str, Mapping[str, str]]]) -> "Catalog":
        """Parse every raw template of every language.

        Raises:
            CatalogError: if any language tag, key or template is malformed.
                Nothing is returned in that case.
        """
        messages: dict[str, dict[str, MessageTemplate]] = {}
        for lang, raw_messages in sources:
            if not isinstance(lang, str) or not lang:
                raise CatalogError(f"invalid language tag {lang!r}")
            messages.setdefault(lang, {}).update(_parse_messages(raw_messages, lang))
        return cls(messages)

    @classmethod
    def from_directory(cls, directory: str | Path, *, strict: bool = False) -> "Catalog":
        """Load one language per ``<lang>.json`` or ``<lang>.toml`` file.

        Files with other suffixes are ignored. Unless ``strict`` is set,
        unreadable or malformed files are logged and skipped.

        Raises:
            CatalogError: if the directory is missing or cannot be listed,
                or, with ``strict``, on the first bad file.
        """
        path = Path(directory)
        try:
            if not path.is_dir():
                raise CatalogError("i18n directory not found", str(path))
            files = sorted(path.iterdir())
        except OSError as e:
            raise CatalogError(f"cannot read i18n directory: {e}", str(path)) from e

        messages: dict[str, dict[str, MessageTemplate]] = {}
        for file in files:
            parser = _PARSERS.get(file.suffix.lower())
            if parser is None or not file.is_file():
                continue
            try:
                messages[file.stem] = _load_file(file, parser)
            except CatalogError as e:
                if strict:
                    raise
                logger.error("catalog_file_skipped", path=str(file), error=str(e))
                continue
            logger.info(
                "catalog_language_loaded", lang=file.stem, keys=len(messages[file.stem])
            )

        return cls(messages)

    @property
    def languages(self) -> frozenset[str]:
        return frozenset(self._messages)

    def has_language(self, lang: str) -> bool:
        return lang in self._messages

    def get(self, lang: str, key: str) -> MessageTemplate | None:
        """Template for ``key`` in ``lang``, or None if either is unknown."""
        templates = self._messages.get(lang)
        if templates is None:
            return None
        return templates.get(key)

    def messages(self, lang: str) -> Mapping[str, MessageTemplate] | None:
        return self._messages.get(lang)

    def to_dict(self) -> dict[str, dict[str, str]]:
        """Raw template text per language, for diagnostics and comparisons."""
        return {
            lang: {key: template_source(t) for key, t in templates.items()}
            for lang, templates in self._messages.items()
        }

    def __len__(self) -> int:
        return len(self._messages)

    def __contains__(self, lang: object) -> bool:
        return lang in self._messages

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Catalog):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Catalog(languages={sorted(self._messages)})"


def _parse_messages(raw_messages: Any, source: str) -> dict[str, MessageTemplate]:
    if not isinstance(raw_messages, Mapping):
        raise CatalogError("expected a mapping of key to template", source)

    parsed: dict[str, MessageTemplate] = {}
    for key, raw in raw_messages.items():
        if not isinstance(key, str) or not isinstance(raw, str):
            raise CatalogError(f"entry {key!r} is not a string template", source)
        parsed[key] = parse(raw)
    return parsed


def _load_file(file: Path, parser: Any) -> dict[str, MessageTemplate]:
    try:
        content = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogError(f"cannot read file: {e}", str(file)) from e

    try:
        data = parser(content)
    except ValueError as e:
        raise CatalogError(f"cannot parse file: {e}", str(file)) from e

    return _parse_messages(data, str(file))


class _CatalogState:
    """Holds the process-wide catalog.

    Uses class variables to avoid a module-level global statement.
    """

    catalog: ClassVar[Catalog | None] = None
    lock: ClassVar[threading.Lock] = threading.Lock()


_EMPTY = Catalog()


def init_catalog(catalog: Catalog) -> bool:
    """Install ``catalog`` as the process-wide catalog.

    Only the first call has an effect. A later call is a successful no-op:
    it leaves the installed catalog in place and is not an error.

    Returns:
        True if this call installed ``catalog``. False means a catalog was
        already installed, not that installation failed.
    """
    if _CatalogState.catalog is not None:
        logger.warning("catalog_already_initialized")
        return False

    with _CatalogState.lock:
        if _CatalogState.catalog is not None:
            logger.warning("catalog_already_initialized")
            return False
        _CatalogState.catalog = catalog

    logger.info("catalog_initialized", languages=sorted(catalog.languages))
    return True


def get_catalog() -> Catalog:
    """The installed catalog, or an empty one before initialization."""
    catalog = _CatalogState.catalog
    return _EMPTY if catalog is None else catalog


def is_catalog_initialized() -> bool:
    return _CatalogState.catalog is not None


def reset_catalog() -> None:
    """Drop the installed catalog. Test helper only."""
    with _CatalogState.lock:
        _CatalogState.catalog = None
