"""Packaging of scan results into a ScanReport."""

from i18n_audit.analysis.context import AnalysisContext
from i18n_audit.catalog.indexer import CatalogIndex
from i18n_audit.models.call_site import Issue
from i18n_audit.models.report import (
    AnalysisSection,
    ErrorEntry,
    ScanReport,
    ScanSummary,
    UsageLocation,
    WarningEntry,
)
from i18n_audit.services.diff_engine import UsageDiff


def _error_entry(issue: Issue) -> ErrorEntry:
    return ErrorEntry(
        file=issue.file or "",
        error=issue.message,
        type=issue.type.value,
        key=issue.key,
        line=issue.line,
        column=issue.column,
    )


def _warning_entry(issue: Issue) -> WarningEntry:
    return WarningEntry(
        file=issue.file,
        message=issue.message,
        type=issue.type.value,
        key=issue.key,
        line=issue.line,
        column=issue.column,
    )


class ReportAssembler:
    """Builds the serializable report; writing it is the caller's job."""

    def assemble(self, context: AnalysisContext, index: CatalogIndex, diff: UsageDiff) -> ScanReport:
        """Combine run state, catalog index and diff into one report."""
        errors = [*context.errors, *diff.errors]
        warnings = [*context.warnings, *diff.warnings]
        translation_keys = context.translation_keys
        return ScanReport(
            summary=ScanSummary(
                total_files=context.total_files,
                scanned_files=context.scanned_files,
                error_count=len(errors),
                warning_count=len(warnings),
                total_keys=len(index.leaf_keys),
                unique_keys=len(translation_keys),
                missing_keys=len(diff.missing_keys),
                unused_keys=len(diff.unused_keys),
                misuse_keys=len(diff.misuse_keys),
            ),
            translation_keys=translation_keys,
            key_usages={
                key: [UsageLocation(**location.to_dict()) for location in context.key_usages[key]]
                for key in translation_keys
            },
            analysis=AnalysisSection(
                missing_keys=diff.missing_keys,
                unused_keys=diff.unused_keys,
                misuse_keys=diff.misuse_keys,
                fallback_matches=diff.fallback_matches,
            ),
            locale_gaps=index.locale_gaps(),
            errors=[_error_entry(issue) for issue in errors],
            warnings=[_warning_entry(issue) for issue in warnings],
        )
