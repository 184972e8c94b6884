"""Records produced while scanning source files."""

from dataclasses import dataclass
from typing import Any

from i18n_audit.models.enums import CalleeKind, IssueType


@dataclass(frozen=True)
class Location:
    """Position of a usage in a source file.

    Lines are 1-based, columns 0-based.
    """

    file: str
    line: int
    column: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for the report."""
        return {"file": self.file, "line": self.line, "column": self.column}


@dataclass(frozen=True)
class CallSite:
    """A key-lookup call whose key has been resolved."""

    callee_kind: CalleeKind
    raw_key: str
    resolved_key: str
    file: str
    line: int
    column: int

    @property
    def location(self) -> Location:
        """Location of the call."""
        return Location(file=self.file, line=self.line, column=self.column)


@dataclass(frozen=True)
class Issue:
    """An error or warning entry destined for the report."""

    type: IssueType
    message: str
    file: str | None = None
    key: str | None = None
    line: int | None = None
    column: int | None = None

    @property
    def is_error(self) -> bool:
        """Whether this entry fails the audit."""
        return self.type.is_error
