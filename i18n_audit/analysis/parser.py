"""Parsing of JS/TS/JSX/TSX source units with tree-sitter."""

import logging
from dataclasses import dataclass

import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Node, Parser, Tree

from i18n_audit.analysis.syntax import start_location
from i18n_audit.constants import TYPESCRIPT_ONLY_SUFFIXES
from i18n_audit.models.errors import SourceParseError

logger = logging.getLogger(__name__)

TSX_LANGUAGE = Language(ts_typescript.language_tsx())
TYPESCRIPT_LANGUAGE = Language(ts_typescript.language_typescript())


@dataclass
class SourceUnit:
    """One parsed source file."""

    path: str
    tree: Tree

    @property
    def root(self) -> Node:
        """Program node."""
        return self.tree.root_node


def _first_error(node: Node) -> Node | None:
    """Depth-first search for the first ERROR or MISSING node."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        if current.has_error:
            stack.extend(reversed(current.children))
    return None


class SourceUnitParser:
    """Parses source text into a syntax tree.

    The TSX grammar is used for everything except plain TypeScript files, whose
    angle-bracket type assertions clash with JSX.
    """

    def parse(self, source: str, path: str) -> SourceUnit:
        """Parse one file.

        Args:
            source: File contents
            path: File path, used for grammar selection and error context

        Returns:
            Parsed source unit

        Raises:
            SourceParseError: If the tree contains syntax errors

        """
        language = TYPESCRIPT_LANGUAGE if path.endswith(TYPESCRIPT_ONLY_SUFFIXES) else TSX_LANGUAGE
        # Parser instances are not shared so workers can parse concurrently
        tree = Parser(language).parse(source.encode("utf-8"))
        if tree.root_node.has_error:
            error = _first_error(tree.root_node)
            line, column = start_location(error) if error is not None else (1, 0)
            kind = "Missing token" if error is not None and error.is_missing else "Unexpected token"
            raise SourceParseError(
                f"{kind} ({line}:{column})",
                context={"file": path, "line": line, "column": column},
            )
        logger.debug("Parsed %s", path)
        return SourceUnit(path=path, tree=tree)
