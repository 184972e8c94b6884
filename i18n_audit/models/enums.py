"""Enums shared across the analyzer."""

from enum import Enum


class CalleeKind(str, Enum):
    """Shape of the callee at a key-lookup call site."""

    IDENTIFIER = "Identifier"
    MEMBER_EXPRESSION = "MemberExpression"


class BindingKind(str, Enum):
    """How a binding was declared."""

    VAR = "var"
    LET = "let"
    CONST = "const"
    PARAM = "param"
    FUNCTION = "function"
    CLASS = "class"
    IMPORT = "import"
    CATCH = "catch"


class IssueType(str, Enum):
    """Report entry types.

    Errors fail the audit, warnings are informational.
    """

    # Errors
    PARSE_ERROR = "parse_error"
    OBJECT_KEY_MISUSE = "object_key_misuse"

    # Warnings
    AMBIGUOUS_FALLBACK = "ambiguous_fallback"
    NAMESPACE_CONFLICT = "namespace_conflict"
    UNRESOLVED_JSX_PROP = "unresolved_jsx_prop"
    CATALOG_LOAD_ERROR = "catalog_load_error"

    @property
    def is_error(self) -> bool:
        """Whether entries of this type count as errors."""
        return self in (IssueType.PARSE_ERROR, IssueType.OBJECT_KEY_MISUSE)


class RebindPolicy(str, Enum):
    """What happens when a binding receives a second, different namespace."""

    FIRST_WINS = "first_wins"
    LAST_WINS = "last_wins"
