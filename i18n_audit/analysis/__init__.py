"""Static analysis of translation calls.

Pipeline per file: SourceUnitParser -> ScopeBuilder -> NamespaceBindingResolver
-> KeyCallExtractor. After all files: DeferredJsxResolver, then
KeyCallExtractor.finalize.
"""

from i18n_audit.analysis.bindings import NamespaceBindingResolver
from i18n_audit.analysis.context import AnalysisContext, FileAnalysis
from i18n_audit.analysis.deferred import DeferredJsxResolver
from i18n_audit.analysis.extractor import KeyCallExtractor, resolve_key_with_namespace
from i18n_audit.analysis.parser import SourceUnitParser
from i18n_audit.analysis.scope import ScopeBuilder

__all__ = [
    "AnalysisContext",
    "DeferredJsxResolver",
    "FileAnalysis",
    "KeyCallExtractor",
    "NamespaceBindingResolver",
    "ScopeBuilder",
    "SourceUnitParser",
    "resolve_key_with_namespace",
]
