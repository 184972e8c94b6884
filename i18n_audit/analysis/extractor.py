"""Key-lookup call extraction.

Candidates are collected per file while its bindings are fresh, and turned
into resolved call sites only after the deferred JSX phase, because a
component's translator parameter may receive its namespace from a parent
analysed later.
"""

import logging

from tree_sitter import Node

from i18n_audit.analysis.context import AnalysisContext, DeferredJsxTask, FileAnalysis, PendingCall
from i18n_audit.analysis.syntax import (
    call_arguments,
    first_named,
    named_children,
    node_text,
    property_name,
    start_location,
    string_literal_value,
    unwrap_expression,
)
from i18n_audit.config import AnalyzerSettings
from i18n_audit.constants import KEY_SEPARATOR
from i18n_audit.models.call_site import CallSite
from i18n_audit.models.enums import CalleeKind

logger = logging.getLogger(__name__)


def resolve_key_with_namespace(raw_key: str, namespace: str | None) -> str:
    """Qualify a raw key with a namespace without double prefixing.

    Args:
        raw_key: Literal passed to the translator
        namespace: Namespace of the translator, or None/"" for none

    Returns:
        Fully qualified catalog key

    """
    if not namespace:
        return raw_key
    if raw_key == namespace or raw_key.startswith(namespace + KEY_SEPARATOR):
        return raw_key
    return f"{namespace}{KEY_SEPARATOR}{raw_key}"


class KeyCallExtractor:
    """Finds translation lookups and JSX translator forwarding."""

    def __init__(self, settings: AnalyzerSettings) -> None:
        """Initialize the extractor.

        Args:
            settings: Analyzer settings (translation function and producer names)

        """
        self.translation_functions = frozenset(settings.translation_function_names)
        self.namespace_producers = settings.namespace_producers

    def extract(self, analysis: FileAnalysis) -> None:
        """Collect key-lookup candidates and deferred JSX tasks of one file."""
        for call in analysis.scopes.calls:
            pending = self._candidate(analysis, call)
            if pending is not None:
                analysis.pending_calls.append(pending)
        for attribute in analysis.scopes.jsx_attributes:
            task = self._jsx_task(analysis, attribute)
            if task is not None:
                analysis.deferred_tasks.append(task)
        logger.debug(
            "Found %d candidate calls and %d JSX forwards in %s",
            len(analysis.pending_calls),
            len(analysis.deferred_tasks),
            analysis.path,
        )

    def finalize(self, analysis: FileAnalysis, context: AnalysisContext) -> int:
        """Resolve a file's candidates into call sites, in discovery order.

        Returns:
            Number of call sites recorded

        """
        recorded = 0
        for pending in analysis.pending_calls:
            namespace = self._namespace_for(analysis, pending)
            if namespace is None and pending.callee_name not in self.translation_functions:
                continue
            context.record_call_site(
                CallSite(
                    callee_kind=pending.callee_kind,
                    raw_key=pending.raw_key,
                    resolved_key=resolve_key_with_namespace(pending.raw_key, namespace),
                    file=analysis.path,
                    line=pending.line,
                    column=pending.column,
                )
            )
            recorded += 1
        return recorded

    @staticmethod
    def _namespace_for(analysis: FileAnalysis, pending: PendingCall) -> str | None:
        if pending.callee_kind == CalleeKind.IDENTIFIER:
            return analysis.namespace_of(pending.binding)
        if pending.callee_kind == CalleeKind.MEMBER_EXPRESSION:
            # t.rich("key") uses t's namespace, props.t("key") the forwarded prop's
            namespace = analysis.namespace_of(pending.binding)
            if namespace is None:
                namespace = analysis.namespace_of(pending.binding, pending.callee_name)
            return namespace
        raise ValueError(f"Unknown callee kind: {pending.callee_kind}")

    def _candidate(self, analysis: FileAnalysis, call: Node) -> PendingCall | None:
        arguments = call_arguments(call)
        if not arguments:
            return None
        raw_key = string_literal_value(arguments[0])
        if not raw_key:
            return None
        callee = unwrap_expression(call.child_by_field_name("function"))
        if callee is None:
            return None
        line, column = start_location(call)

        if callee.type == "identifier":
            name = node_text(callee)
            if name in self.namespace_producers:
                return None
            return PendingCall(
                callee_kind=CalleeKind.IDENTIFIER,
                raw_key=raw_key,
                callee_name=name,
                binding=analysis.lookup(callee),
                line=line,
                column=column,
            )
        if callee.type == "member_expression":
            obj = unwrap_expression(callee.child_by_field_name("object"))
            prop = property_name(callee.child_by_field_name("property"))
            if prop is None:
                return None
            binding = analysis.lookup(obj) if obj is not None and obj.type == "identifier" else None
            if binding is None and prop not in self.translation_functions:
                return None
            return PendingCall(
                callee_kind=CalleeKind.MEMBER_EXPRESSION,
                raw_key=raw_key,
                callee_name=prop,
                binding=binding,
                line=line,
                column=column,
            )
        return None

    @staticmethod
    def _jsx_task(analysis: FileAnalysis, attribute: Node) -> DeferredJsxTask | None:
        """Queue ``<Component prop={producer} />`` when the producer is a local binding."""
        parts = named_children(attribute)
        if len(parts) != 2 or parts[0].type != "property_identifier":
            return None
        if parts[1].type != "jsx_expression":
            return None
        element = attribute.parent
        tag = element.child_by_field_name("name") if element is not None else None
        if tag is None or tag.type != "identifier" or not node_text(tag)[:1].isupper():
            return None

        value = unwrap_expression(first_named(parts[1]))
        if value is None:
            return None
        producer_prop = None
        if value.type == "member_expression":
            producer_prop = property_name(value.child_by_field_name("property"))
            value = unwrap_expression(value.child_by_field_name("object"))
            if producer_prop is None or value is None:
                return None
        if value.type != "identifier":
            return None
        producer = analysis.lookup(value)
        if producer is None:
            return None
        return DeferredJsxTask(
            analysis=analysis,
            attribute=attribute,
            component_name=node_text(tag),
            prop_name=node_text(parts[0]),
            producer_identifier_name=node_text(unwrap_expression(first_named(parts[1]))),
            tag=tag,
            producer_binding=producer,
            producer_prop=producer_prop,
        )
