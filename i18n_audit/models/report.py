"""Serializable scan report models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

__all__ = [
    "AnalysisSection",
    "ErrorEntry",
    "ScanReport",
    "ScanSummary",
    "UsageLocation",
    "WarningEntry",
]


class ReportModel(BaseModel):
    """Base model emitting camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class UsageLocation(ReportModel):
    """Where a key is used."""

    file: str
    line: int
    column: int


class ErrorEntry(ReportModel):
    """A failure entry (parse error or namespace-object misuse)."""

    # "" when the failure has no source location, so every entry carries a file
    file: str = ""
    error: str
    type: str
    key: str | None = None
    line: int | None = None
    column: int | None = None


class WarningEntry(ReportModel):
    """An informational entry."""

    file: str | None = None
    message: str
    type: str
    key: str | None = None
    line: int | None = None
    column: int | None = None


class ScanSummary(ReportModel):
    """Counts for the run."""

    total_files: int
    scanned_files: int
    error_count: int
    warning_count: int
    total_keys: int
    unique_keys: int
    missing_keys: int
    unused_keys: int
    misuse_keys: int


class AnalysisSection(ReportModel):
    """Full key listings."""

    missing_keys: list[str]
    unused_keys: list[str]
    misuse_keys: list[str]
    fallback_matches: dict[str, str] = {}


class ScanReport(ReportModel):
    """Complete report handed to the external writer."""

    summary: ScanSummary
    translation_keys: list[str]
    key_usages: dict[str, list[UsageLocation]]
    analysis: AnalysisSection
    locale_gaps: dict[str, list[str]] = {}
    errors: list[ErrorEntry] = []
    warnings: list[WarningEntry] = []

    @property
    def passed(self) -> bool:
        """No errors and no missing keys."""
        return not self.errors and not self.analysis.missing_keys

    def to_json(self) -> str:
        """Serialize with camelCase keys, omitting empty optional fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)
