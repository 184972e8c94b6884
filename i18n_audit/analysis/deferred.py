"""Fixed-point resolution of translators forwarded through JSX props.

``<Child t={t} />`` may be analysed before ``t`` has a namespace (the parent
received it from its own parent) or before ``Child`` is known (it lives in a
file scanned later). Tasks wait in a queue; each pass resolves every task whose
producer namespace is known and whose component can be located, and passes
repeat until one makes no progress.
"""

import logging

from tree_sitter import Node

from i18n_audit.analysis.bindings import NamespaceBindingResolver, destructured_props
from i18n_audit.analysis.context import AnalysisContext, DeferredJsxTask, FileAnalysis
from i18n_audit.analysis.scope import function_parameters
from i18n_audit.analysis.syntax import node_text, start_location
from i18n_audit.models.call_site import Issue
from i18n_audit.models.enums import BindingKind, IssueType

logger = logging.getLogger(__name__)


class DeferredJsxResolver:
    """Drains the run's deferred JSX tasks to a fixed point."""

    def __init__(self, binding_resolver: NamespaceBindingResolver, *, report_unresolved: bool = False) -> None:
        """Initialize the resolver.

        Args:
            binding_resolver: Used to write parameter namespaces and re-propagate aliases
            report_unresolved: Emit a warning for forwarded translators left unresolved

        """
        self.binding_resolver = binding_resolver
        self.report_unresolved = report_unresolved

    def run(self, context: AnalysisContext) -> int:
        """Resolve queued tasks until a pass makes no progress.

        Returns:
            Number of passes performed

        """
        queue = list(context.deferred_tasks)
        passes = 0
        progress = True
        while queue and progress:
            passes += 1
            progress = False
            remaining = []
            for task in queue:
                if self.try_resolve(task, context):
                    progress = True
                else:
                    remaining.append(task)
            queue = remaining

        if queue:
            self._drop_unresolved(queue, context)
        context.deferred_tasks = []
        logger.debug("Deferred JSX resolution finished after %d passes (%d dropped)", passes, len(queue))
        return passes

    def try_resolve(self, task: DeferredJsxTask, context: AnalysisContext) -> bool:
        """Bind the producer's namespace to the component's matching parameter.

        Returns:
            True if the task is done

        """
        namespace = task.producer_namespace
        if namespace is None:
            return False
        target = self._find_component(task, context)
        if target is None:
            return False
        target_analysis, function = target
        if not self._bind_parameter(task, target_analysis, function, namespace):
            return False
        # Aliases and further forwarding inside the component can now settle
        self.binding_resolver.resolve(target_analysis)
        return True

    def _find_component(
        self, task: DeferredJsxTask, context: AnalysisContext
    ) -> tuple[FileAnalysis, Node] | None:
        """Locate the function a JSX tag renders, in this file or an imported one."""
        analysis = task.analysis
        binding = analysis.lookup(task.tag)
        if binding is None:
            return None
        if binding.kind != BindingKind.IMPORT:
            function = analysis.scopes.function_for(binding)
            return (analysis, function) if function is not None else None
        candidates = context.imported_components(analysis, binding)
        if len(candidates) != 1:
            return None
        return candidates[0]

    def _bind_parameter(
        self, task: DeferredJsxTask, analysis: FileAnalysis, function: Node, namespace: str
    ) -> bool:
        parameters = function_parameters(function)
        if not parameters:
            return False
        parameter = parameters[0]
        if parameter.type in ("required_parameter", "optional_parameter"):
            parameter = parameter.child_by_field_name("pattern")
        if parameter is not None and parameter.type == "assignment_pattern":
            parameter = parameter.child_by_field_name("left")
        if parameter is None:
            return False

        function_scope = analysis.scopes.scope_of(function)
        if function_scope is None:
            return False
        write = self.binding_resolver.write
        if parameter.type == "identifier":
            props = function_scope.bindings.get(node_text(parameter))
            if props is None:
                return False
            write(
                analysis,
                analysis.prop_namespaces,
                (props, task.prop_name),
                namespace,
                task.attribute,
                source_path=task.analysis.path,
            )
            return True
        if parameter.type == "object_pattern":
            for prop, local in destructured_props(parameter):
                if prop != task.prop_name:
                    continue
                binding = function_scope.bindings.get(node_text(local))
                if binding is None:
                    return False
                write(
                    analysis,
                    analysis.namespaces,
                    binding,
                    namespace,
                    task.attribute,
                    source_path=task.analysis.path,
                )
                return True
        return False

    def _drop_unresolved(self, queue: list[DeferredJsxTask], context: AnalysisContext) -> None:
        """Unresolved tasks are dropped; their call sites stay un-namespaced."""
        for task in queue:
            namespace = task.producer_namespace
            if not self.report_unresolved or namespace is None:
                continue
            line, column = start_location(task.attribute)
            context.record_issue(
                Issue(
                    type=IssueType.UNRESOLVED_JSX_PROP,
                    message=(
                        f'Translator "{task.producer_identifier_name}" (namespace "{namespace}") '
                        f'passed as "{task.prop_name}" to <{task.component_name}> could not be traced'
                    ),
                    file=task.analysis.path,
                    line=line,
                    column=column,
                )
            )
