"""Tests for resource providers and the catalog fallback chain."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from dyntranslator.errors import ResourceNotFoundError
from dyntranslator.resources import (
    MappingResourceProvider,
    PathResourceLoader,
    parse_catalog,
)


@pytest.fixture
def provider() -> MappingResourceProvider:
    return MappingResourceProvider(
        {1: "Hello %1$s", 2: "Good bye", 3: "Settings"},
        {"es": {1: "Hola %1$s", 2: "Adiós"}, "es-MX": {2: "Bye, güey"}},
    )


class TestMappingResourceProvider:
    """Most specific catalog wins, default catalog is the last resort."""

    def test_exact_locale(self, provider: MappingResourceProvider) -> None:
        assert provider.get_string(2, "es_MX") == "Bye, güey"

    def test_language_fallback(self, provider: MappingResourceProvider) -> None:
        assert provider.get_string(1, "es-MX") == "Hola %1$s"

    def test_default_fallback(self, provider: MappingResourceProvider) -> None:
        assert provider.get_string(3, "es") == "Settings"
        assert provider.get_string(1, "bg") == "Hello %1$s"

    def test_invalid_locale_uses_default(self, provider: MappingResourceProvider) -> None:
        assert provider.get_string(1, "not a locale") == "Hello %1$s"

    def test_missing_identifier(self, provider: MappingResourceProvider) -> None:
        with pytest.raises(ResourceNotFoundError) as exc_info:
            provider.get_string(99, "es")
        assert exc_info.value.identifier == 99
        assert exc_info.value.locale_code == "es"

    def test_localized_only_identifier(self) -> None:
        provider = MappingResourceProvider({}, {"es": {5: "Solo"}})
        assert provider.get_string(5, "es") == "Solo"
        with pytest.raises(ResourceNotFoundError):
            provider.get_string(5, "kv")

    def test_add_catalog_merges(self, provider: MappingResourceProvider) -> None:
        provider.add_catalog("ES", {3: "Ajustes"})
        assert provider.get_string(3, "es") == "Ajustes"
        assert provider.get_string(1, "es") == "Hola %1$s"

    def test_has_localized_catalog(self, provider: MappingResourceProvider) -> None:
        assert provider.has_localized_catalog("es-mx")
        assert not provider.has_localized_catalog("bg")


class TestParseCatalog:
    def test_string_keys_become_ints(self) -> None:
        assert parse_catalog({"1001": "Hello"}) == {1001: "Hello"}

    def test_non_object_rejected(self) -> None:
        with pytest.raises(ValueError, match="must be a JSON object"):
            parse_catalog(["Hello"])

    def test_non_integer_key_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-integer resource id"):
            parse_catalog({"greeting": "Hello"})

    def test_non_string_value_rejected(self) -> None:
        with pytest.raises(ValueError, match="must be a string"):
            parse_catalog({"1": 5})


class TestPathResourceLoader:
    """Catalogs read from disk."""

    @pytest.fixture
    def res_dir(self, tmp_path: Path) -> Path:
        for name, catalog in {
            "default": {"1": "Hello %1$s", "2": "Good bye"},
            "es": {"2": "Adiós"},
        }.items():
            directory = tmp_path / name
            directory.mkdir()
            (directory / "strings.json").write_text(json.dumps(catalog), encoding="utf-8")
        return tmp_path

    def test_reads_catalogs(self, res_dir: Path) -> None:
        loader = PathResourceLoader(str(res_dir / "{locale}" / "strings.json"))

        assert loader.get_string(2, "es") == "Adiós"
        assert loader.get_string(1, "es") == "Hello %1$s"
        assert loader.get_string(2, "bg") == "Good bye"

    def test_missing_placeholder_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="must contain '\\{locale\\}'"):
            PathResourceLoader(str(tmp_path / "strings.json"))

    def test_catalogs_cached_until_reload(self, res_dir: Path) -> None:
        loader = PathResourceLoader(str(res_dir / "{locale}" / "strings.json"))
        assert loader.get_string(2, "es") == "Adiós"

        (res_dir / "es" / "strings.json").write_text(
            json.dumps({"2": "Chao"}), encoding="utf-8"
        )
        assert loader.get_string(2, "es") == "Adiós"

        loader.reload()
        assert loader.get_string(2, "es") == "Chao"

    def test_corrupt_catalog_ignored(self, res_dir: Path) -> None:
        bg = res_dir / "bg"
        bg.mkdir()
        (bg / "strings.json").write_text("{broken", encoding="utf-8")
        loader = PathResourceLoader(str(res_dir / "{locale}" / "strings.json"))

        assert loader.get_string(2, "bg") == "Good bye"

    @pytest.mark.parametrize("name", ["../etc", "a/b", "a\\b", ""])
    def test_unsafe_names_rejected(self, res_dir: Path, name: str) -> None:
        loader = PathResourceLoader(str(res_dir / "{locale}" / "strings.json"))
        with pytest.raises(ValueError):
            loader.load(name)

    def test_custom_default_name(self, tmp_path: Path) -> None:
        base = tmp_path / "values"
        base.mkdir()
        (base / "strings.json").write_text(json.dumps({"1": "Base"}), encoding="utf-8")
        loader = PathResourceLoader(
            str(tmp_path / "{locale}" / "strings.json"), default_name="values"
        )

        assert loader.get_string(1, "es") == "Base"
