"""Scan pipeline: parse, resolve, extract, defer, diff, report."""

import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

from i18n_audit.analysis.bindings import NamespaceBindingResolver
from i18n_audit.analysis.context import AnalysisContext, FileAnalysis
from i18n_audit.analysis.deferred import DeferredJsxResolver
from i18n_audit.analysis.extractor import KeyCallExtractor
from i18n_audit.analysis.parser import SourceUnitParser
from i18n_audit.analysis.scope import ScopeBuilder
from i18n_audit.catalog.indexer import CatalogIndexer
from i18n_audit.config import AnalyzerSettings
from i18n_audit.models.call_site import Issue
from i18n_audit.models.enums import IssueType
from i18n_audit.models.errors import SourceParseError
from i18n_audit.models.report import ScanReport
from i18n_audit.services.diff_engine import UsageDiffEngine
from i18n_audit.services.log_service import LogService
from i18n_audit.services.report_assembler import ReportAssembler

logger = logging.getLogger(__name__)

Source = tuple[str, str]  # (path, text)


class TranslationScanner:
    """Runs the whole analysis over a batch of source files.

    Per-file work (parse, scope build, binding resolution, extraction) is
    isolated: a file that fails becomes a ``parse_error`` entry and the run
    continues. With ``jobs > 1`` per-file work runs on a thread pool and the
    results are merged in input order, so the report does not depend on it.
    """

    def __init__(
        self, settings: AnalyzerSettings | None = None, log_service: LogService | None = None
    ) -> None:
        """Initialize the scanner and its pipeline stages.

        Args:
            settings: Analyzer settings (defaults to environment-derived settings)
            log_service: Structured logger for scan events

        """
        self.settings = settings or AnalyzerSettings()
        self.log_service = log_service or LogService()
        self.parser = SourceUnitParser()
        self.scope_builder = ScopeBuilder()
        self.binding_resolver = NamespaceBindingResolver(self.settings)
        self.extractor = KeyCallExtractor(self.settings)
        self.deferred_resolver = DeferredJsxResolver(
            self.binding_resolver, report_unresolved=self.settings.report_unresolved_jsx
        )
        self.indexer = CatalogIndexer()
        self.diff_engine = UsageDiffEngine(self.settings.allow_multi_namespace_keys)
        self.assembler = ReportAssembler()

    def analyze_file(self, path: str, source: str) -> FileAnalysis:
        """Parse one file and collect its bindings, candidates and JSX forwards.

        Raises:
            SourceParseError: If the file does not parse cleanly

        """
        unit = self.parser.parse(source, path)
        analysis = FileAnalysis(path=path, unit=unit, scopes=self.scope_builder.build(unit.root))
        self.binding_resolver.resolve(analysis)
        self.extractor.extract(analysis)
        return analysis

    def extract_sources(
        self, sources: Sequence[Source], context: AnalysisContext | None = None
    ) -> AnalysisContext:
        """Analyse every source and settle all call sites.

        Args:
            sources: (path, text) pairs, in report order
            context: Accumulator to extend (a fresh one by default)

        Returns:
            The context holding call sites, usages and errors

        """
        context = context or AnalysisContext()
        context.total_files += len(sources)

        if self.settings.jobs > 1 and len(sources) > 1:
            with ThreadPoolExecutor(max_workers=self.settings.jobs) as pool:
                results = list(pool.map(lambda item: self._analyze_isolated(*item), sources))
        else:
            results = [self._analyze_isolated(path, text) for path, text in sources]

        # Single writer: merge in input order
        for result in results:
            if isinstance(result, Issue):
                context.record_issue(result)
            else:
                context.merge(result)

        passes = self.deferred_resolver.run(context)
        for analysis in context.files:
            self.extractor.finalize(analysis, context)
        logger.info(
            "Extracted %d call sites from %d/%d files (%d deferred passes)",
            len(context.call_sites),
            context.scanned_files,
            context.total_files,
            passes,
        )
        context.release_files()
        return context

    def build_report(
        self,
        context: AnalysisContext,
        catalogs: Mapping[str, Mapping[str, Any]],
        catalog_issues: Sequence[Issue] = (),
    ) -> ScanReport:
        """Diff the extracted keys against the catalogs and assemble the report.

        Args:
            context: Context returned by extract_sources
            catalogs: Merged catalog tree per locale
            catalog_issues: Warnings raised while loading the catalogs

        """
        for issue in catalog_issues:
            context.record_issue(issue)
        index = self.indexer.index(catalogs, self.settings.locales)
        diff = self.diff_engine.diff(
            context.key_usages.keys(), index.leaf_keys, index.object_paths, context.key_usages
        )
        report = self.assembler.assemble(context, index, diff)
        self.log_service.run_finished(
            {
                "files": f"{report.summary.scanned_files}/{report.summary.total_files}",
                "keys": report.summary.unique_keys,
                "missing": report.summary.missing_keys,
                "unused": report.summary.unused_keys,
                "misuse": report.summary.misuse_keys,
                "errors": report.summary.error_count,
            }
        )
        return report

    def scan_sources(
        self,
        sources: Sequence[Source],
        catalogs: Mapping[str, Mapping[str, Any]],
        catalog_issues: Sequence[Issue] = (),
    ) -> ScanReport:
        """Run the full pipeline over in-memory sources."""
        return self.build_report(self.extract_sources(sources), catalogs, catalog_issues)

    def scan_paths(
        self,
        paths: Sequence[Path],
        catalogs: Mapping[str, Mapping[str, Any]],
        catalog_issues: Sequence[Issue] = (),
        root: Path | None = None,
    ) -> ScanReport:
        """Read files from disk and run the full pipeline.

        Args:
            paths: Source files
            catalogs: Merged catalog tree per locale
            catalog_issues: Warnings raised while loading the catalogs
            root: Paths are reported relative to this directory when given

        """
        context = AnalysisContext()
        sources: list[Source] = []
        for path in paths:
            display = path.relative_to(root).as_posix() if root is not None else path.as_posix()
            try:
                sources.append((display, path.read_text(encoding="utf-8")))
            except (OSError, UnicodeDecodeError) as e:
                context.total_files += 1
                context.record_issue(Issue(type=IssueType.PARSE_ERROR, message=str(e), file=display))
                self.log_service.file_failed(display, str(e))
        return self.build_report(self.extract_sources(sources, context), catalogs, catalog_issues)

    def _analyze_isolated(self, path: str, source: str) -> FileAnalysis | Issue:
        """Analyse one file, converting any failure into a parse_error entry."""
        try:
            analysis = self.analyze_file(path, source)
        except SourceParseError as e:
            self.log_service.file_failed(path, str(e))
            return Issue(
                type=IssueType.PARSE_ERROR,
                message=str(e),
                file=path,
                line=e.context.get("line"),
                column=e.context.get("column"),
            )
        except Exception as e:  # noqa: BLE001
            logger.exception("Unexpected failure while analysing %s", path)
            self.log_service.file_failed(path, f"{type(e).__name__}: {e}")
            return Issue(type=IssueType.PARSE_ERROR, message=f"{type(e).__name__}: {e}", file=path)
        self.log_service.file_scanned(path, len(analysis.pending_calls), len(analysis.deferred_tasks))
        return analysis
