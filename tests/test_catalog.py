"""Tests for catalog building, directory loading and one-time install."""

import json
from pathlib import Path
import threading

import pytest

from polyglot.core.exceptions import CatalogError
from polyglot.i18n.catalog import (
    Catalog,
    get_catalog,
    init_catalog,
    is_catalog_initialized,
)
from polyglot.i18n.template import Literal, Placeholder
from polyglot.i18n.translator import init_translations, render


@pytest.fixture
def locales_dir(tmp_path):
    (tmp_path / "en.toml").write_text('200 = "Ok"\n', encoding="utf-8")
    (tmp_path / "zh.json").write_text(json.dumps({"200": "成功"}), encoding="utf-8")
    (tmp_path / "ignore.txt").write_text('200 = "Ignored"\n', encoding="utf-8")
    (tmp_path / "bad.toml").write_text("200 = ", encoding="utf-8")
    (tmp_path / "nested.json").write_text(
        json.dumps({"200": {"text": "Ok"}}), encoding="utf-8"
    )
    return tmp_path


class TestBuild:
    def test_parses_every_template(self, catalog):
        assert catalog.get("en", "greet") == (
            Literal("Hello, "),
            Placeholder("name"),
            Literal("!"),
        )
        assert catalog.languages == frozenset({"en", "zh", "zh-CN"})

    def test_unknown_language_or_key(self, catalog):
        assert catalog.get("fr", "200") is None
        assert catalog.get("en", "999") is None

    def test_non_string_template_fails_whole_build(self):
        with pytest.raises(CatalogError):
            Catalog.build([("en", {"200": "Ok"}), ("zh", {"200": 200})])

    def test_non_mapping_source_fails(self):
        with pytest.raises(CatalogError):
            Catalog.build([("en", ["Ok"])])  # type: ignore[list-item]

    def test_empty_language_tag_fails(self):
        with pytest.raises(CatalogError):
            Catalog.build([("", {"200": "Ok"})])

    def test_catalog_is_read_only(self, catalog):
        with pytest.raises(TypeError):
            catalog.messages("en")["200"] = ()  # type: ignore[index]

    def test_to_dict_round_trips_sources(self):
        sources = {"en": {"200": "Ok", "greet": "Hello, {name}!"}}
        assert Catalog.build(sources.items()).to_dict() == sources


class TestFromDirectory:
    def test_skips_bad_files_and_keeps_good_ones(self, locales_dir):
        catalog = Catalog.from_directory(locales_dir)

        assert catalog.languages == frozenset({"en", "zh"})
        assert catalog.to_dict() == {"en": {"200": "Ok"}, "zh": {"200": "成功"}}

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(CatalogError):
            Catalog.from_directory(tmp_path / "does-not-exist")

    def test_unlistable_directory_raises(self, locales_dir, monkeypatch):
        def denied(self):
            raise PermissionError("denied")

        monkeypatch.setattr(Path, "iterdir", denied)

        with pytest.raises(CatalogError, match="cannot read i18n directory"):
            Catalog.from_directory(locales_dir)

    def test_strict_raises_on_first_bad_file(self, locales_dir):
        with pytest.raises(CatalogError):
            Catalog.from_directory(locales_dir, strict=True)

    def test_strict_raises_on_missing_directory(self, tmp_path):
        with pytest.raises(CatalogError):
            Catalog.from_directory(tmp_path / "nope", strict=True)

    def test_init_translations_installs_directory(self, locales_dir):
        assert init_translations(locales_dir) is True
        assert get_catalog().get("en", "200") == (Literal("Ok"),)

    def test_missing_directory_does_not_block_later_load(self, locales_dir):
        assert init_translations(locales_dir / "does-not-exist") is False
        assert not is_catalog_initialized()

        assert init_translations(locales_dir) is True
        assert render("en", "200") == "Ok"

    def test_unlistable_directory_does_not_block_later_load(
        self, locales_dir, monkeypatch
    ):
        def denied(self):
            raise PermissionError("denied")

        with monkeypatch.context() as patched:
            patched.setattr(Path, "iterdir", denied)
            assert init_translations(locales_dir) is False

        assert not is_catalog_initialized()
        assert init_translations(locales_dir) is True
        assert render("zh", "200") == "成功"

    def test_strict_init_translations_raises_on_missing_directory(self, tmp_path):
        with pytest.raises(CatalogError):
            init_translations(tmp_path / "nope", strict=True)
        assert not is_catalog_initialized()


class TestInitCatalog:
    def test_empty_before_init(self):
        assert not is_catalog_initialized()
        assert len(get_catalog()) == 0

    def test_first_build_wins(self, catalog):
        other = Catalog.build([("en", {"200": "Overridden"})])

        assert init_catalog(catalog) is True
        assert init_catalog(other) is False
        assert get_catalog() == catalog
        assert get_catalog().to_dict()["en"]["200"] == "Ok"

    def test_directory_reload_is_ignored(self, locales_dir, tmp_path_factory):
        other_dir = tmp_path_factory.mktemp("other")
        (other_dir / "en.toml").write_text('200 = "Overridden"\n', encoding="utf-8")

        assert init_translations(locales_dir) is True
        assert init_translations(other_dir) is False
        assert get_catalog().to_dict()["en"]["200"] == "Ok"

    def test_concurrent_init_installs_exactly_once(self):
        candidates = [Catalog.build([(f"l{i}", {"200": str(i)})]) for i in range(16)]
        barrier = threading.Barrier(len(candidates))
        results: list[bool] = [False] * len(candidates)

        def install(index: int) -> None:
            barrier.wait()
            results[index] = init_catalog(candidates[index])

        threads = [
            threading.Thread(target=install, args=(i,)) for i in range(len(candidates))
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count(True) == 1
        assert get_catalog() is candidates[results.index(True)]
