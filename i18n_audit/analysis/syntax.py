"""Helpers for reading tree-sitter JS/TS syntax nodes."""

import sys

from tree_sitter import Node

SINGLE_CHARACTER_ESCAPES = {"b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v"}
LINE_TERMINATORS = frozenset({"\n", "\r", "\u2028", "\u2029"})

# Node types that wrap an expression without changing its value
TRANSPARENT_WRAPPERS = frozenset(
    {
        "parenthesized_expression",
        "as_expression",
        "satisfies_expression",
        "non_null_expression",
        "type_assertion",
    }
)

FUNCTION_TYPES = frozenset(
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

NodeKey = tuple[int, int, str]


def node_key(node: Node) -> NodeKey:
    """Stable identity of a node within one tree."""
    return (node.start_byte, node.end_byte, node.type)


def node_text(node: Node) -> str:
    """Source text of a node."""
    return node.text.decode("utf-8") if node.text is not None else ""


def named_children(node: Node) -> list[Node]:
    """Named children without comments."""
    return [child for child in node.named_children if child.type != "comment"]


def first_named(node: Node) -> Node | None:
    """First named, non-comment child."""
    children = named_children(node)
    return children[0] if children else None


def unwrap_expression(node: Node | None) -> Node | None:
    """Strip parentheses and TypeScript-only wrappers around an expression."""
    while node is not None and node.type in TRANSPARENT_WRAPPERS:
        node = first_named(node)
    return node


def unwrap_await(node: Node | None) -> Node | None:
    """Strip a single ``await`` (and surrounding wrappers) from an expression."""
    node = unwrap_expression(node)
    if node is not None and node.type == "await_expression":
        node = unwrap_expression(first_named(node))
    return node


def call_arguments(call: Node) -> list[Node] | None:
    """Arguments of a call, or None for tagged template calls."""
    arguments = call.child_by_field_name("arguments")
    if arguments is None or arguments.type != "arguments":
        return None
    return named_children(arguments)


def string_literal_value(node: Node | None) -> str | None:
    """Value of a string literal or substitution-free template string."""
    node = unwrap_expression(node)
    if node is None or node.type not in ("string", "template_string"):
        return None
    parts = []
    for child in node.named_children:
        if child.type == "string_fragment":
            parts.append(node_text(child))
        elif child.type == "escape_sequence":
            parts.append(decode_escape(node_text(child)))
        elif child.type == "template_substitution":
            return None
    # Escaped astral characters arrive as two \\uXXXX surrogate halves
    return "".join(parts).encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")


def decode_escape(escape: str) -> str:
    """Value of one JS escape sequence, backslash included.

    >>> decode_escape("\\\\x41"), decode_escape("\\\\u{1F600}") == chr(0x1F600), decode_escape("\\\\d")
    ('A', True, 'd')
    """
    body = escape[1:]
    if not body or body[0] in LINE_TERMINATORS:
        return ""
    head = body[0]
    if head == "u":
        digits = body[2:-1] if body.startswith("u{") else body[1:]
        return _code_point(int(digits, 16))
    if head == "x" and len(body) == 3:
        return _code_point(int(body[1:], 16))
    if head in "01234567":
        return _code_point(int(body, 8))
    return SINGLE_CHARACTER_ESCAPES.get(head, head)


def _code_point(value: int) -> str:
    return chr(value) if value <= sys.maxunicode else "\ufffd"


def property_name(node: Node | None) -> str | None:
    """Name of an object key or member property (identifier or string)."""
    if node is None:
        return None
    if node.type in ("property_identifier", "identifier", "shorthand_property_identifier"):
        return node_text(node)
    return string_literal_value(node)


def is_function(node: Node | None) -> bool:
    """Whether the node is any kind of function."""
    return node is not None and node.type in FUNCTION_TYPES


def function_body_result(function: Node) -> Node | None:
    """Expression a function ends by returning.

    Expression-bodied arrows return their body; block bodies must end in a
    ``return`` statement.
    """
    body = function.child_by_field_name("body")
    if body is None:
        return None
    if body.type != "statement_block":
        return body
    statements = named_children(body)
    if not statements or statements[-1].type != "return_statement":
        return None
    return first_named(statements[-1])


def start_location(node: Node) -> tuple[int, int]:
    """1-based line and 0-based column of a node."""
    return node.start_point.row + 1, node.start_point.column
