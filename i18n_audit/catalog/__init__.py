"""Translation catalog loading and indexing."""

from i18n_audit.catalog.indexer import CatalogIndex, CatalogIndexer, leaf_keys, merge_trees, object_paths

__all__ = ["CatalogIndex", "CatalogIndexer", "leaf_keys", "merge_trees", "object_paths"]
