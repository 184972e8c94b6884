"""Loading of per-locale catalog files from disk.

A locale's catalog is ``<messages>/<locale>.json`` and/or every
``<messages>/<locale>/*.json`` partition (e.g. ``critical.json`` and
``deferred.json``), merged in that order with partitions sorted by name.
"""

import json
import logging
from pathlib import Path
from typing import Any

from i18n_audit.catalog.indexer import merge_trees
from i18n_audit.constants import CATALOG_SUFFIX
from i18n_audit.models.call_site import Issue
from i18n_audit.models.enums import IssueType
from i18n_audit.models.errors import CatalogLoadError

logger = logging.getLogger(__name__)


def catalog_files(messages_dir: Path, locale: str) -> list[Path]:
    """Catalog files of one locale, in merge order."""
    files = []
    single = messages_dir / f"{locale}{CATALOG_SUFFIX}"
    if single.is_file():
        files.append(single)
    partition_dir = messages_dir / locale
    if partition_dir.is_dir():
        files.extend(sorted(partition_dir.glob(f"*{CATALOG_SUFFIX}")))
    return files


def read_catalog(path: Path) -> dict[str, Any]:
    """Read one catalog file.

    Raises:
        CatalogLoadError: If the file is unreadable, invalid JSON, or not an object

    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CatalogLoadError(f"Cannot load {path.name}: {e}", context={"file": str(path)}) from e
    if not isinstance(data, dict):
        raise CatalogLoadError(
            f"{path.name} must contain a JSON object", context={"file": str(path)}
        )
    return data


def load_catalogs(messages_dir: Path, locales: list[str]) -> tuple[dict[str, dict[str, Any]], list[Issue]]:
    """Load and merge every locale's partitions.

    Unreadable partitions are reported as warnings and treated as empty so the
    scan still runs.

    Returns:
        Merged tree per locale, and load warnings

    """
    trees: dict[str, dict[str, Any]] = {}
    issues: list[Issue] = []
    for locale in locales:
        files = catalog_files(messages_dir, locale)
        if not files:
            logger.warning("No catalog files for locale %s in %s", locale, messages_dir)
            issues.append(
                Issue(
                    type=IssueType.CATALOG_LOAD_ERROR,
                    message=f"No catalog files for locale {locale}",
                    file=str(messages_dir),
                )
            )
        partitions = []
        for path in files:
            try:
                partitions.append(read_catalog(path))
                logger.info("Loaded catalog %s", path)
            except CatalogLoadError as e:
                logger.warning("%s", e)
                issues.append(Issue(type=IssueType.CATALOG_LOAD_ERROR, message=str(e), file=str(path)))
        trees[locale] = merge_trees(*partitions)
    return trees, issues
