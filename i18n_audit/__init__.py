"""Static translation-key auditor for JS/TS i18n code bases."""

__version__ = "1.0.0"
