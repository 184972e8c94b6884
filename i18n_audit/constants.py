"""Analyzer constants."""

# Report output
REPORT_FILENAME = "translation-scan-report.json"
MAX_LISTED_KEYS = 10  # Console shows at most this many missing/unused keys

# Source files
TYPESCRIPT_ONLY_SUFFIXES = (".ts", ".mts", ".cts")  # No JSX, angle-bracket casts allowed

# Catalogs
CATALOG_SUFFIX = ".json"
KEY_SEPARATOR = "."

# Module resolution
SOURCE_SUFFIXES = (".tsx", ".ts", ".jsx", ".js", ".mts", ".cts", ".mjs", ".cjs")
DEFAULT_EXPORT = "default"
PATH_ALIAS_PREFIXES = ("@/", "~/")  # tsconfig-style aliases for the source root
