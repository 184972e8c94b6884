"""Tests for loading catalogs from disk."""

import json

import pytest

from i18n_audit.catalog.loader import catalog_files, load_catalogs, read_catalog
from i18n_audit.models.enums import IssueType
from i18n_audit.models.errors import CatalogLoadError


def _write(path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")


class TestCatalogFiles:
    """Test partition discovery."""

    def test_single_file_then_sorted_partitions(self, tmp_path):
        """The flat file comes first, partitions follow by name."""
        _write(tmp_path / "en.json", {})
        _write(tmp_path / "en" / "deferred.json", {})
        _write(tmp_path / "en" / "critical.json", {})
        _write(tmp_path / "en" / "notes.txt", "ignored")

        files = catalog_files(tmp_path, "en")

        assert [f.relative_to(tmp_path).as_posix() for f in files] == [
            "en.json",
            "en/critical.json",
            "en/deferred.json",
        ]


class TestReadCatalog:
    """Test reading single catalog files."""

    def test_invalid_json(self, tmp_path):
        """Malformed JSON raises CatalogLoadError."""
        path = tmp_path / "en.json"
        _write(path, "{ not json")
        with pytest.raises(CatalogLoadError):
            read_catalog(path)

    def test_top_level_must_be_object(self, tmp_path):
        """A JSON array is not a catalog."""
        path = tmp_path / "en.json"
        _write(path, ["a"])
        with pytest.raises(CatalogLoadError):
            read_catalog(path)


class TestLoadCatalogs:
    """Test per-locale loading and merging."""

    def test_partitions_merged(self, tmp_path):
        """Critical and deferred partitions form one tree."""
        _write(tmp_path / "en" / "critical.json", {"Header": {"title": "Welcome"}})
        _write(tmp_path / "en" / "deferred.json", {"Header": {"nav": {"home": "Home"}}})
        _write(tmp_path / "zh.json", {"Header": {"title": "欢迎"}})

        trees, issues = load_catalogs(tmp_path, ["en", "zh"])

        assert issues == []
        assert trees["en"] == {"Header": {"title": "Welcome", "nav": {"home": "Home"}}}
        assert trees["zh"] == {"Header": {"title": "欢迎"}}

    def test_broken_partition_is_a_warning(self, tmp_path):
        """A broken file is skipped and reported; the rest still loads."""
        _write(tmp_path / "en" / "critical.json", {"a": "1"})
        _write(tmp_path / "en" / "deferred.json", "{ broken")

        trees, issues = load_catalogs(tmp_path, ["en"])

        assert trees["en"] == {"a": "1"}
        (issue,) = issues
        assert issue.type == IssueType.CATALOG_LOAD_ERROR
        assert not issue.is_error
        assert issue.file.endswith("deferred.json")

    def test_missing_locale_is_a_warning(self, tmp_path):
        """A locale without files yields an empty tree and a warning."""
        trees, issues = load_catalogs(tmp_path, ["de"])

        assert trees == {"de": {}}
        assert [issue.type for issue in issues] == [IssueType.CATALOG_LOAD_ERROR]
