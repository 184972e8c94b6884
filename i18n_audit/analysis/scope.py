"""Lexical scope tree for one source file.

Built in a single pre-order traversal. Declarations are recorded in the scope
that owns them (``var`` hoists to the enclosing function, ``let``/``const``
stay in their block), so lookups performed after the build see hoisted
functions and variables declared later in the file.
"""

from dataclasses import dataclass, field

from tree_sitter import Node

from i18n_audit.analysis.syntax import (
    NodeKey,
    call_arguments,
    is_function,
    named_children,
    node_key,
    node_text,
    property_name,
    string_literal_value,
    unwrap_expression,
)
from i18n_audit.constants import DEFAULT_EXPORT
from i18n_audit.models.enums import BindingKind

FUNCTION_SCOPE_TYPES = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "function_expression",
        "function",
        "generator_function",
        "arrow_function",
        "method_definition",
    }
)
BLOCK_SCOPE_TYPES = frozenset(
    {"statement_block", "for_statement", "for_in_statement", "catch_clause", "class_body"}
)


@dataclass(frozen=True)
class Binding:
    """One declaration within one file's scope tree."""

    name: str
    kind: BindingKind
    start_byte: int
    end_byte: int
    declaration: Node = field(compare=False, hash=False, repr=False)
    imported_name: str | None = field(default=None, compare=False)
    # Import specifier, e.g. "../components/Child"
    module: str | None = field(default=None, compare=False)


@dataclass(eq=False)
class Scope:
    """A lexical scope: module, function or block."""

    node: Node
    kind: str
    parent: "Scope | None" = None
    bindings: dict[str, Binding] = field(default_factory=dict)

    @property
    def function_scope(self) -> "Scope":
        """Nearest enclosing function or module scope."""
        scope = self
        while scope.kind == "block" and scope.parent is not None:
            scope = scope.parent
        return scope

    def declare(
        self,
        identifier: Node,
        kind: BindingKind,
        imported_name: str | None = None,
        module: str | None = None,
    ) -> Binding:
        """Declare a name; a redeclaration in the same scope keeps the first binding."""
        name = node_text(identifier)
        if name in self.bindings:
            return self.bindings[name]
        binding = Binding(
            name=name,
            kind=kind,
            start_byte=identifier.start_byte,
            end_byte=identifier.end_byte,
            declaration=identifier,
            imported_name=imported_name,
            module=module,
        )
        self.bindings[name] = binding
        return binding

    def lookup(self, name: str) -> Binding | None:
        """Resolve a name by walking enclosing scopes outward."""
        scope: Scope | None = self
        while scope is not None:
            if name in scope.bindings:
                return scope.bindings[name]
            scope = scope.parent
        return None


def pattern_identifiers(node: Node | None) -> list[Node]:
    """Identifiers introduced by a binding pattern."""
    if node is None:
        return []
    kind = node.type
    if kind in ("identifier", "shorthand_property_identifier_pattern"):
        return [node]
    if kind in ("object_pattern", "array_pattern"):
        return [ident for child in named_children(node) for ident in pattern_identifiers(child)]
    if kind == "pair_pattern":
        return pattern_identifiers(node.child_by_field_name("value"))
    if kind in ("object_assignment_pattern", "assignment_pattern"):
        return pattern_identifiers(node.child_by_field_name("left"))
    if kind == "rest_pattern":
        children = named_children(node)
        return pattern_identifiers(children[0]) if children else []
    if kind in ("required_parameter", "optional_parameter"):
        return pattern_identifiers(node.child_by_field_name("pattern"))
    return []


def declaration_kind(keyword: str) -> BindingKind:
    """Binding kind for a declaration keyword; ``using`` behaves like ``const``."""
    if keyword == "var":
        return BindingKind.VAR
    if keyword == "let":
        return BindingKind.LET
    return BindingKind.CONST


def function_parameters(function: Node) -> list[Node]:
    """Parameter nodes of a function, in order."""
    single = function.child_by_field_name("parameter")
    if single is not None:
        return [single]
    parameters = function.child_by_field_name("parameters")
    return named_children(parameters) if parameters is not None else []


class ScopeTree:
    """Scopes of one file plus the nodes later passes iterate over."""

    def __init__(self, module: Scope) -> None:
        """Initialize an empty tree rooted at the module scope."""
        self.module = module
        self._by_node: dict[NodeKey, Scope] = {node_key(module.node): module}
        # Document-ordered node lists
        self.declarators: list[Node] = []
        self.assignments: list[Node] = []
        self.functions: list[Node] = []
        self.calls: list[Node] = []
        self.jsx_attributes: list[Node] = []

    def register(self, node: Node, scope: Scope) -> None:
        """Associate a scope-creating node with its scope."""
        self._by_node[node_key(node)] = scope

    def scope_of(self, node: Node) -> Scope | None:
        """Scope created by the node itself, if any."""
        return self._by_node.get(node_key(node))

    def scope_for(self, node: Node) -> Scope:
        """Innermost scope enclosing the node."""
        current: Node | None = node
        while current is not None:
            scope = self._by_node.get(node_key(current))
            if scope is not None:
                return scope
            current = current.parent
        return self.module

    def lookup(self, identifier: Node) -> Binding | None:
        """Binding an identifier refers to."""
        return self.scope_for(identifier).lookup(node_text(identifier))

    def function_for(self, binding: Binding) -> Node | None:
        """Function a binding names.

        Handles ``function Foo() {}``, ``const Foo = () => ...`` and wrapped
        forms such as ``const Foo = memo(function Foo() {})``.
        """
        declaration = binding.declaration
        parent = declaration.parent
        if parent is None:
            return None
        if parent.type in ("function_declaration", "generator_function_declaration"):
            return parent
        if parent.type != "variable_declarator":
            return None
        name = parent.child_by_field_name("name")
        if name is None or node_key(name) != node_key(declaration):
            return None
        value = unwrap_expression(parent.child_by_field_name("value"))
        while value is not None and value.type == "call_expression":
            arguments = call_arguments(value)
            value = unwrap_expression(arguments[0]) if arguments else None
        return value if is_function(value) else None

    def components(self) -> dict[str, Node]:
        """Top-level capitalised functions, by name."""
        found = {}
        for name, binding in self.module.bindings.items():
            if not name[:1].isupper():
                continue
            function = self.function_for(binding)
            if function is not None:
                found[name] = function
        return found

    def default_component(self) -> Node | None:
        """Function exported with ``export default``.

        Covers ``export default function Page() {}``, ``export default Page``
        and wrapped forms such as ``export default memo(Page)``.
        """
        for statement in named_children(self.module.node):
            if statement.type != "export_statement":
                continue
            if not any(child.type == DEFAULT_EXPORT for child in statement.children):
                continue
            declaration = statement.child_by_field_name("declaration")
            if declaration is not None:
                return declaration if is_function(declaration) else None
            value = unwrap_expression(statement.child_by_field_name("value"))
            while value is not None and value.type == "call_expression":
                arguments = call_arguments(value)
                value = unwrap_expression(arguments[0]) if arguments else None
            if is_function(value):
                return value
            if value is not None and value.type == "identifier":
                binding = self.module.bindings.get(node_text(value))
                return self.function_for(binding) if binding is not None else None
            return None
        return None


class ScopeBuilder:
    """Builds a ScopeTree in one traversal."""

    def build(self, root: Node) -> ScopeTree:
        """Walk the program and record scopes, declarations and interesting nodes."""
        module = Scope(node=root, kind="module")
        tree = ScopeTree(module)
        stack: list[tuple[Node, Scope]] = [(root, module)]
        while stack:
            node, scope = stack.pop()
            inner = self._enter(tree, node, scope)
            self._collect(tree, node, scope)
            stack.extend((child, inner) for child in reversed(node.named_children))
        return tree

    def _enter(self, tree: ScopeTree, node: Node, scope: Scope) -> Scope:
        """Return the scope the node's children live in, creating it if needed."""
        kind = node.type
        if kind in FUNCTION_SCOPE_TYPES:
            inner = Scope(node=node, kind="function", parent=scope)
            tree.register(node, inner)
            for parameter in function_parameters(node):
                for identifier in pattern_identifiers(parameter):
                    inner.declare(identifier, BindingKind.PARAM)
            name = node.child_by_field_name("name")
            if name is not None and kind in ("function_expression", "function"):
                inner.declare(name, BindingKind.FUNCTION)
            return inner
        if kind in BLOCK_SCOPE_TYPES:
            if kind == "statement_block" and node.parent is not None and is_function(node.parent):
                # Function bodies share the parameter scope
                tree.register(node, scope)
                return scope
            inner = Scope(node=node, kind="block", parent=scope)
            tree.register(node, inner)
            if kind == "catch_clause":
                for identifier in pattern_identifiers(node.child_by_field_name("parameter")):
                    inner.declare(identifier, BindingKind.CATCH)
            elif kind == "for_in_statement" and node.child_by_field_name("kind") is not None:
                binding_kind = declaration_kind(node_text(node.child_by_field_name("kind")))
                target = inner if binding_kind != BindingKind.VAR else scope.function_scope
                for identifier in pattern_identifiers(node.child_by_field_name("left")):
                    target.declare(identifier, binding_kind)
            return inner
        return scope

    def _collect(self, tree: ScopeTree, node: Node, scope: Scope) -> None:
        kind = node.type
        if kind == "lexical_declaration":
            binding_kind = declaration_kind(node.children[0].type)
            self._declare_declarators(node, scope, binding_kind)
        elif kind == "variable_declaration":
            self._declare_declarators(node, scope.function_scope, BindingKind.VAR)
        elif kind in ("function_declaration", "generator_function_declaration"):
            name = node.child_by_field_name("name")
            if name is not None:
                scope.declare(name, BindingKind.FUNCTION)
        elif kind == "class_declaration":
            name = node.child_by_field_name("name")
            if name is not None:
                scope.declare(name, BindingKind.CLASS)
        elif kind == "import_statement":
            self._declare_imports(node, tree.module)

        if kind == "variable_declarator":
            tree.declarators.append(node)
        elif kind == "assignment_expression":
            tree.assignments.append(node)
        elif kind == "call_expression":
            tree.calls.append(node)
        elif kind == "jsx_attribute":
            tree.jsx_attributes.append(node)
        elif kind in FUNCTION_SCOPE_TYPES:
            tree.functions.append(node)

    @staticmethod
    def _declare_declarators(node: Node, scope: Scope, kind: BindingKind) -> None:
        for declarator in named_children(node):
            if declarator.type != "variable_declarator":
                continue
            for identifier in pattern_identifiers(declarator.child_by_field_name("name")):
                scope.declare(identifier, kind)

    @staticmethod
    def _declare_imports(node: Node, scope: Scope) -> None:
        source = string_literal_value(node.child_by_field_name("source"))
        for clause in named_children(node):
            if clause.type != "import_clause":
                continue
            for part in named_children(clause):
                if part.type == "identifier":
                    scope.declare(part, BindingKind.IMPORT, imported_name=DEFAULT_EXPORT, module=source)
                elif part.type == "namespace_import":
                    for identifier in named_children(part):
                        scope.declare(identifier, BindingKind.IMPORT, module=source)
                elif part.type == "named_imports":
                    for specifier in named_children(part):
                        if specifier.type != "import_specifier":
                            continue
                        name = specifier.child_by_field_name("name")
                        alias = specifier.child_by_field_name("alias")
                        local = alias or name
                        if local is not None and local.type == "identifier":
                            scope.declare(
                                local,
                                BindingKind.IMPORT,
                                imported_name=property_name(name),
                                module=source,
                            )
