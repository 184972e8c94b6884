"""Shared fixtures for analyzer tests."""

import pytest

from i18n_audit.config import AnalyzerSettings
from i18n_audit.services.scanner import TranslationScanner


@pytest.fixture
def make_settings():
    """Build settings that ignore any local .env file."""

    def _make(**overrides) -> AnalyzerSettings:
        overrides.setdefault("locales", ["en"])
        return AnalyzerSettings(_env_file=None, **overrides)

    return _make


@pytest.fixture
def make_scanner(make_settings):
    """Build a scanner with setting overrides."""

    def _make(**overrides) -> TranslationScanner:
        return TranslationScanner(make_settings(**overrides))

    return _make


@pytest.fixture
def extract_keys(make_scanner):
    """Resolve the keys used by in-memory sources.

    Accepts a single source string (analysed as ``page.tsx``) or a dict of
    path -> source.
    """

    def _extract(sources, **overrides) -> list[str]:
        if isinstance(sources, str):
            sources = {"page.tsx": sources}
        context = make_scanner(**overrides).extract_sources(list(sources.items()))
        return context.translation_keys

    return _extract


@pytest.fixture
def scan(make_scanner):
    """Run the full pipeline over in-memory sources and an ``en`` catalog."""

    def _scan(sources, catalog: dict, **overrides):
        if isinstance(sources, str):
            sources = {"page.tsx": sources}
        return make_scanner(**overrides).scan_sources(list(sources.items()), {"en": catalog})

    return _scan
