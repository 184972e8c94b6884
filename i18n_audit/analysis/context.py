"""Per-file analysis state and the run-wide accumulator.

A ``FileAnalysis`` is private to one file: its bindings never leak into
another file's lookups. The ``AnalysisContext`` is the single writer for
everything that accumulates across files (call sites, usages, deferred JSX
tasks, errors) and is threaded explicitly through the pipeline.
"""

import posixpath
from dataclasses import dataclass, field

from tree_sitter import Node

from i18n_audit.analysis.parser import SourceUnit
from i18n_audit.analysis.scope import Binding, ScopeTree
from i18n_audit.analysis.syntax import NodeKey
from i18n_audit.constants import DEFAULT_EXPORT, PATH_ALIAS_PREFIXES, SOURCE_SUFFIXES
from i18n_audit.models.call_site import CallSite, Issue, Location
from i18n_audit.models.enums import CalleeKind

PropKey = tuple[Binding, str]
ComponentRef = tuple["FileAnalysis", Node]


def module_stem(path: str) -> str:
    """Module identity of a path: no source suffix, no trailing ``/index``.

    >>> module_stem("src/components/Child/index.tsx")
    'src/components/Child'
    """
    stem = posixpath.normpath(path)
    for suffix in SOURCE_SUFFIXES:
        if stem.endswith(suffix):
            stem = stem[: -len(suffix)]
            break
    if stem.endswith("/index"):
        stem = stem[: -len("/index")]
    return stem


@dataclass
class PendingCall:
    """A key-lookup candidate whose namespace is settled after the deferred phase.

    ``binding`` is the callee's binding for identifier callees and the
    object's binding for member callees; ``callee_name`` is the identifier
    name or the member property name.
    """

    callee_kind: CalleeKind
    raw_key: str
    callee_name: str
    binding: Binding | None
    line: int
    column: int


@dataclass
class FileAnalysis:
    """Bindings, namespaces and candidates of one source file."""

    path: str
    unit: SourceUnit
    scopes: ScopeTree
    # Binding -> namespace it was seeded with ("" marks a root translator)
    namespaces: dict[Binding, str] = field(default_factory=dict)
    # Function binding -> namespace its calls return
    factories: dict[Binding, str] = field(default_factory=dict)
    # (props binding, prop name) -> namespace forwarded through JSX
    prop_namespaces: dict[PropKey, str] = field(default_factory=dict)
    pending_calls: list[PendingCall] = field(default_factory=list)
    deferred_tasks: list["DeferredJsxTask"] = field(default_factory=list)
    warnings: list[Issue] = field(default_factory=list)
    # (target, source file, source node, namespace) writes already applied, so
    # re-running resolution is idempotent
    applied_writes: set[tuple[object, str, NodeKey, str]] = field(default_factory=set)

    def lookup(self, identifier: Node) -> Binding | None:
        """Binding an identifier refers to in this file."""
        return self.scopes.lookup(identifier)

    def namespace_of(self, binding: Binding | None, prop: str | None = None) -> str | None:
        """Namespace carried by a binding, or by one of its props."""
        if binding is None:
            return None
        if prop is None:
            return self.namespaces.get(binding)
        return self.prop_namespaces.get((binding, prop))


@dataclass
class DeferredJsxTask:
    """A translator passed as a JSX prop, waiting for its namespace to be known.

    The producer is ``producer_binding`` itself, or its ``producer_prop``
    member when the prop value is ``props.t``.
    """

    analysis: FileAnalysis
    attribute: Node
    component_name: str
    prop_name: str
    producer_identifier_name: str
    tag: Node
    producer_binding: Binding
    producer_prop: str | None = None

    @property
    def producer_namespace(self) -> str | None:
        """Namespace of the producer, if known yet."""
        return self.analysis.namespace_of(self.producer_binding, self.producer_prop)


@dataclass
class AnalysisContext:
    """Run-wide accumulator shared by every pipeline stage."""

    total_files: int = 0
    scanned_files: int = 0
    files: list[FileAnalysis] = field(default_factory=list)
    call_sites: list[CallSite] = field(default_factory=list)
    key_usages: dict[str, list[Location]] = field(default_factory=dict)
    deferred_tasks: list[DeferredJsxTask] = field(default_factory=list)
    # Component name -> candidate definitions across files
    components: dict[str, list[ComponentRef]] = field(default_factory=dict)
    # Module stem -> default-exported component of that file
    default_exports: dict[str, list[ComponentRef]] = field(default_factory=dict)
    errors: list[Issue] = field(default_factory=list)
    warnings: list[Issue] = field(default_factory=list)

    def merge(self, analysis: FileAnalysis) -> None:
        """Fold one successfully analysed file into the run."""
        self.scanned_files += 1
        self.files.append(analysis)
        self.deferred_tasks.extend(analysis.deferred_tasks)
        analysis.deferred_tasks = []
        for name, function in analysis.scopes.components().items():
            self.components.setdefault(name, []).append((analysis, function))
        default = analysis.scopes.default_component()
        if default is not None:
            self.default_exports.setdefault(module_stem(analysis.path), []).append((analysis, default))

    def imported_components(self, analysis: FileAnalysis, binding: Binding) -> list[ComponentRef]:
        """Candidate definitions for an imported component, excluding the importing file.

        Default imports are matched by module path; a relative specifier is
        resolved against the importing file and an ``@/`` or ``~/`` specifier
        matches any module ending with the same path. Named imports match
        component names, as do default imports whose module is not among the
        scanned files (by their local name).
        """
        candidates: list[ComponentRef] = []
        if binding.imported_name == DEFAULT_EXPORT and binding.module:
            specifier = binding.module
            if specifier.startswith("."):
                target = module_stem(posixpath.join(posixpath.dirname(analysis.path), specifier))
                candidates = list(self.default_exports.get(target, []))
            elif specifier.startswith(PATH_ALIAS_PREFIXES):
                tail = module_stem(specifier.split("/", 1)[1])
                candidates = [
                    ref
                    for stem, refs in self.default_exports.items()
                    if stem == tail or stem.endswith("/" + tail)
                    for ref in refs
                ]
            if not candidates:
                candidates = list(self.components.get(binding.name, []))
        elif binding.imported_name is not None:
            candidates = list(self.components.get(binding.imported_name, []))
        return [(other, function) for other, function in candidates if other is not analysis]

    def record_call_site(self, call_site: CallSite) -> None:
        """Store a resolved call and its usage location."""
        self.call_sites.append(call_site)
        self.key_usages.setdefault(call_site.resolved_key, []).append(call_site.location)

    def record_issue(self, issue: Issue) -> None:
        """Route an issue to the error or warning list."""
        if issue.is_error:
            self.errors.append(issue)
        else:
            self.warnings.append(issue)

    def release_files(self) -> None:
        """Drop per-file state once call sites are final, keeping its warnings."""
        for analysis in self.files:
            self.warnings.extend(analysis.warnings)
        self.files = []
        self.components = {}
        self.default_exports = {}
        self.deferred_tasks = []

    @property
    def translation_keys(self) -> list[str]:
        """Distinct resolved keys, sorted."""
        return sorted(self.key_usages)
