"""Catalog flattening into leaf-key and object-path sets."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from i18n_audit.constants import KEY_SEPARATOR


def merge_trees(*trees: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge catalog partitions.

    Nested objects merge key by key; any other value overwrites whatever the
    earlier partitions held. Inputs are not modified.
    """
    merged: dict[str, Any] = {}
    for tree in trees:
        for key, value in tree.items():
            current = merged.get(key)
            if isinstance(value, Mapping) and isinstance(current, Mapping):
                merged[key] = merge_trees(current, value)
            elif isinstance(value, Mapping):
                merged[key] = merge_trees(value)
            else:
                merged[key] = value
    return merged


def _join(prefix: str, key: str) -> str:
    return f"{prefix}{KEY_SEPARATOR}{key}" if prefix else key


def leaf_keys(tree: Mapping[str, Any], prefix: str = "") -> set[str]:
    """Dotted paths whose value is directly translatable (not a plain object)."""
    keys = set()
    for key, value in tree.items():
        full_key = _join(prefix, key)
        if isinstance(value, Mapping):
            keys.update(leaf_keys(value, full_key))
        else:
            keys.add(full_key)
    return keys


def object_paths(tree: Mapping[str, Any], prefix: str = "") -> set[str]:
    """Dotted paths whose value is a nested object (a namespace boundary)."""
    paths = set()
    for key, value in tree.items():
        if isinstance(value, Mapping):
            full_key = _join(prefix, key)
            paths.add(full_key)
            paths.update(object_paths(value, full_key))
    return paths


@dataclass(frozen=True)
class CatalogIndex:
    """Union of leaf keys and object paths over the configured locales."""

    leaf_keys: frozenset[str]
    object_paths: frozenset[str]
    locale_leaf_keys: dict[str, frozenset[str]] = field(default_factory=dict)

    @property
    def locales(self) -> list[str]:
        """Indexed locales, in configuration order."""
        return list(self.locale_leaf_keys)

    def locale_gaps(self) -> dict[str, list[str]]:
        """Per locale, the known leaf keys that locale does not define."""
        return {
            locale: sorted(self.leaf_keys - keys) for locale, keys in self.locale_leaf_keys.items()
        }


class CatalogIndexer:
    """Builds a CatalogIndex from one merged tree per locale."""

    def index(self, trees: Mapping[str, Mapping[str, Any]], locales: list[str]) -> CatalogIndex:
        """Index the configured locales.

        Args:
            trees: Merged catalog tree per locale
            locales: Locales to include; absent ones count as empty

        Returns:
            Union index across locales

        """
        locale_leaf_keys: dict[str, frozenset[str]] = {}
        all_leaf_keys: set[str] = set()
        all_object_paths: set[str] = set()
        for locale in locales:
            tree = trees.get(locale, {})
            keys = frozenset(leaf_keys(tree))
            locale_leaf_keys[locale] = keys
            all_leaf_keys |= keys
            all_object_paths |= object_paths(tree)
        return CatalogIndex(
            leaf_keys=frozenset(all_leaf_keys),
            object_paths=frozenset(all_object_paths),
            locale_leaf_keys=locale_leaf_keys,
        )
