"""Analyzer data models."""

from i18n_audit.models.call_site import CallSite, Issue, Location
from i18n_audit.models.enums import BindingKind, CalleeKind, IssueType, RebindPolicy
from i18n_audit.models.errors import AuditError, CatalogLoadError, SourceParseError
from i18n_audit.models.report import ScanReport

__all__ = [
    "AuditError",
    "BindingKind",
    "CallSite",
    "CalleeKind",
    "CatalogLoadError",
    "Issue",
    "IssueType",
    "Location",
    "RebindPolicy",
    "ScanReport",
    "SourceParseError",
]
