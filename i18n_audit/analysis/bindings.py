"""Namespace binding resolution.

Seeds bindings from namespace-producing calls and propagates them through
aliases, wrapper functions and destructuring:

    const t = useTranslations("Header");             // t -> Header
    const t2 = t;                                    // t2 -> Header
    function useHeaderT() { return useTranslations("Header"); }
    const t3 = useHeaderT();                         // t3 -> Header
    const t4 = await getTranslations({ namespace: "Meta" });   // t4 -> Meta
"""

import logging
from collections.abc import MutableMapping

from tree_sitter import Node

from i18n_audit.analysis.context import FileAnalysis
from i18n_audit.analysis.syntax import (
    call_arguments,
    function_body_result,
    is_function,
    named_children,
    node_key,
    node_text,
    property_name,
    start_location,
    string_literal_value,
    unwrap_await,
    unwrap_expression,
)
from i18n_audit.config import AnalyzerSettings
from i18n_audit.models.call_site import Issue
from i18n_audit.models.enums import IssueType, RebindPolicy

logger = logging.getLogger(__name__)

ROOT_NAMESPACE = ""


class NamespaceBindingResolver:
    """Records, per local binding, the translation namespace it carries."""

    def __init__(self, settings: AnalyzerSettings) -> None:
        """Initialize the resolver.

        Args:
            settings: Analyzer settings (hook/factory names, rebind policy)

        """
        self.hooks = frozenset(settings.namespace_hooks)
        self.factories = frozenset(settings.namespace_factories)
        self.rebind_policy = settings.rebind_policy

    def resolve(self, analysis: FileAnalysis) -> None:
        """Seed and propagate namespaces until nothing changes.

        Repeating the passes lets hoisted wrappers declared after their use,
        and aliases of later assignments, settle regardless of source order.
        """
        passes = 0
        changed = True
        while changed:
            passes += 1
            changed = False
            for function in analysis.scopes.functions:
                if function.type in ("function_declaration", "generator_function_declaration"):
                    changed |= self._detect_declared_factory(analysis, function)
            for declarator in analysis.scopes.declarators:
                changed |= self.propagate_alias(analysis, declarator)
            for assignment in analysis.scopes.assignments:
                changed |= self._bind_assignment(analysis, assignment)
        logger.debug(
            "Resolved %d namespace bindings in %s after %d passes",
            len(analysis.namespaces),
            analysis.path,
            passes,
        )

    def namespace_of_expression(self, analysis: FileAnalysis, expression: Node | None) -> str | None:
        """Namespace an expression evaluates to, if statically known."""
        node = unwrap_await(expression)
        if node is None:
            return None
        if node.type == "identifier":
            return analysis.namespace_of(analysis.lookup(node))
        if node.type == "member_expression":
            obj = unwrap_expression(node.child_by_field_name("object"))
            prop = property_name(node.child_by_field_name("property"))
            if obj is None or obj.type != "identifier" or prop is None:
                return None
            return analysis.namespace_of(analysis.lookup(obj), prop)
        if node.type != "call_expression":
            return None

        callee = unwrap_expression(node.child_by_field_name("function"))
        arguments = call_arguments(node)
        if callee is None or callee.type != "identifier" or arguments is None:
            return None
        name = node_text(callee)
        if name in self.hooks:
            return self._hook_namespace(arguments)
        if name in self.factories:
            return self._factory_namespace(arguments)
        binding = analysis.lookup(callee)
        return analysis.factories.get(binding) if binding is not None else None

    def propagate_alias(self, analysis: FileAnalysis, declarator: Node) -> bool:
        """Give a declarator's binding the namespace its initializer carries.

        Returns:
            True if any namespace was recorded

        """
        name = declarator.child_by_field_name("name")
        value = declarator.child_by_field_name("value")
        if name is None or value is None:
            return False
        if name.type == "object_pattern":
            return self._propagate_destructuring(analysis, name, value, declarator)
        if name.type != "identifier":
            return False

        binding = analysis.lookup(name)
        if binding is None:
            return False
        function = unwrap_expression(value)
        if is_function(function):
            return self._detect_factory(analysis, function, binding)
        namespace = self.namespace_of_expression(analysis, value)
        if namespace is None:
            return False
        return self.write(analysis, analysis.namespaces, binding, namespace, declarator)

    def write(
        self,
        analysis: FileAnalysis,
        mapping: MutableMapping,
        target: object,
        namespace: str,
        source: Node,
        source_path: str | None = None,
    ) -> bool:
        """Record a namespace for a binding (or prop key) honouring the rebind policy.

        Each (target, source, namespace) triple is applied at most once, which
        keeps the fixed-point loops finite under either policy while letting an
        alias follow its source when the source is rebound.

        Returns:
            True if the mapping changed

        """
        marker = (target, source_path or analysis.path, node_key(source), namespace)
        if marker in analysis.applied_writes:
            return False
        analysis.applied_writes.add(marker)

        current = mapping.get(target)
        if current is None:
            mapping[target] = namespace
            return True
        if current == namespace:
            return False

        replace = self.rebind_policy == RebindPolicy.LAST_WINS
        line, column = start_location(source)
        label = target[0].name + "." + target[1] if isinstance(target, tuple) else target.name
        analysis.warnings.append(
            Issue(
                type=IssueType.NAMESPACE_CONFLICT,
                message=(
                    f'"{label}" is bound to namespace "{current}"; '
                    f'{"replacing it with" if replace else "ignoring"} "{namespace}"'
                ),
                file=source_path or analysis.path,
                line=line,
                column=column,
            )
        )
        if replace:
            mapping[target] = namespace
        return replace

    @staticmethod
    def _hook_namespace(arguments: list[Node]) -> str | None:
        if not arguments:
            return ROOT_NAMESPACE
        if len(arguments) == 1:
            return string_literal_value(arguments[0])
        return None

    @staticmethod
    def _factory_namespace(arguments: list[Node]) -> str | None:
        if not arguments:
            return ROOT_NAMESPACE
        first = unwrap_expression(arguments[0])
        if first is None:
            return None
        if first.type != "object":
            return string_literal_value(first)
        for member in named_children(first):
            if member.type == "pair" and property_name(member.child_by_field_name("key")) == "namespace":
                return string_literal_value(member.child_by_field_name("value"))
            if member.type == "shorthand_property_identifier" and node_text(member) == "namespace":
                return None
            if member.type == "spread_element":
                return None
        return ROOT_NAMESPACE

    def _detect_factory(self, analysis: FileAnalysis, function: Node, binding: object) -> bool:
        namespace = self.namespace_of_expression(analysis, function_body_result(function))
        if namespace is None:
            return False
        return self.write(analysis, analysis.factories, binding, namespace, function)

    def _detect_declared_factory(self, analysis: FileAnalysis, function: Node) -> bool:
        name = function.child_by_field_name("name")
        if name is None or function.parent is None:
            return False
        binding = analysis.scopes.scope_for(function.parent).lookup(node_text(name))
        if binding is None:
            return False
        return self._detect_factory(analysis, function, binding)

    def _bind_assignment(self, analysis: FileAnalysis, assignment: Node) -> bool:
        left = unwrap_expression(assignment.child_by_field_name("left"))
        right = assignment.child_by_field_name("right")
        if left is None or left.type != "identifier" or right is None:
            return False
        binding = analysis.lookup(left)
        if binding is None:
            return False
        function = unwrap_expression(right)
        if is_function(function):
            return self._detect_factory(analysis, function, binding)
        namespace = self.namespace_of_expression(analysis, right)
        if namespace is None:
            return False
        return self.write(analysis, analysis.namespaces, binding, namespace, assignment)

    def _propagate_destructuring(
        self, analysis: FileAnalysis, pattern: Node, value: Node, declarator: Node
    ) -> bool:
        """``const { t } = props`` takes the namespace forwarded as ``props.t``."""
        source = unwrap_await(value)
        if source is None or source.type != "identifier":
            return False
        source_binding = analysis.lookup(source)
        if source_binding is None:
            return False

        changed = False
        for prop, local in destructured_props(pattern):
            namespace = analysis.namespace_of(source_binding, prop)
            binding = analysis.lookup(local)
            if namespace is None or binding is None:
                continue
            changed |= self.write(analysis, analysis.namespaces, binding, namespace, local)
        return changed


def destructured_props(pattern: Node) -> list[tuple[str, Node]]:
    """(prop name, local identifier) pairs of an object pattern.

    Covers ``{ t }``, ``{ t: translate }``, ``{ t = fallback }`` and
    ``{ t: translate = fallback }``; nested patterns and rest elements are skipped.
    """
    pairs = []
    for entry in named_children(pattern):
        if entry.type == "shorthand_property_identifier_pattern":
            pairs.append((node_text(entry), entry))
        elif entry.type == "object_assignment_pattern":
            left = entry.child_by_field_name("left")
            if left is not None and left.type == "shorthand_property_identifier_pattern":
                pairs.append((node_text(left), left))
        elif entry.type == "pair_pattern":
            prop = property_name(entry.child_by_field_name("key"))
            local = entry.child_by_field_name("value")
            if local is not None and local.type == "assignment_pattern":
                local = local.child_by_field_name("left")
            if prop is not None and local is not None and local.type == "identifier":
                pairs.append((prop, local))
    return pairs
