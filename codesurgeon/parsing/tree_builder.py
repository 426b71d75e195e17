"""Annotated syntax trees built with tree-sitter.

tree-sitter gives a concrete syntax tree; ``AnnotatedTreeBuilder`` wraps
every node with a parent link and the lexical scope it lives in, which is
all the matcher needs to decide whether a declaration is top-level.

Usage:
    builder = AnnotatedTreeBuilder()
    tree = builder.build("var a = 1;")
    for node in tree.walk():
        if node.is_top_level:
            print(node.type, tree.text(node))
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from loguru import logger

from codesurgeon.constants import JAVASCRIPT_LANGUAGE
from codesurgeon.types.errors import (
    CodesurgeonError,
    ErrorCode,
    ErrorContext,
    ErrorSeverity,
    ParseError,
)

if TYPE_CHECKING:
    from tree_sitter import Language, Node, Parser, Tree


class ScopeKind(StrEnum):
    """Kinds of lexical scope a node can live in."""

    MODULE = "module"
    FUNCTION = "function"
    CLASS = "class"
    BLOCK = "block"


# Nodes whose children live in a new function scope.
FUNCTION_NODE_TYPES = frozenset({
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",
    "generator_function",
    "arrow_function",
    "method_definition",
})

CLASS_NODE_TYPES = frozenset({"class_declaration", "class"})

# Nodes whose children live in a new block scope (unless the block is a
# function body, which shares the function's scope).
BLOCK_NODE_TYPES = frozenset({
    "statement_block",
    "for_statement",
    "for_in_statement",
    "catch_clause",
    "switch_body",
    "class_static_block",
})


@dataclass(frozen=True)
class Scope:
    """A lexical scope: its kind, nesting depth, and enclosing scope."""

    kind: ScopeKind
    depth: int = 0
    owner_type: str | None = None
    parent: Scope | None = None

    @property
    def is_module(self) -> bool:
        return self.kind is ScopeKind.MODULE

    def enter(self, kind: ScopeKind, owner_type: str) -> Scope:
        """Open a nested scope."""
        return Scope(kind=kind, depth=self.depth + 1, owner_type=owner_type, parent=self)


@dataclass(eq=False)
class AnnotatedNode:
    """A tree-sitter node with its parent and scope attached."""

    node: Node
    parent: AnnotatedNode | None
    scope: Scope
    children: list[AnnotatedNode] = field(default_factory=list)

    @property
    def type(self) -> str:
        return self.node.type

    @property
    def start_byte(self) -> int:
        return self.node.start_byte

    @property
    def end_byte(self) -> int:
        return self.node.end_byte

    @property
    def start_row(self) -> int:
        return self.node.start_point[0]

    @property
    def end_row(self) -> int:
        return self.node.end_point[0]

    @property
    def line(self) -> int:
        """1-indexed line the node starts on."""
        return self.start_row + 1

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def named_children(self) -> list[AnnotatedNode]:
        return [c for c in self.children if c.node.is_named]

    @property
    def is_top_level(self) -> bool:
        """True when the node is a direct statement of the module."""
        return (
            self.parent is not None
            and self.parent.type == "program"
            and self.scope.is_module
        )

    def child_by_field(self, name: str) -> AnnotatedNode | None:
        """Annotated counterpart of ``Node.child_by_field_name``."""
        target = self.node.child_by_field_name(name)
        if target is None:
            return None
        for child in self.children:
            if child.node == target:
                return child
        return None

    def ancestors(self) -> Iterator[AnnotatedNode]:
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def walk(self) -> Iterator[AnnotatedNode]:
        """Pre-order traversal of this subtree in source order."""
        stack = [self]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))


@dataclass
class SyntaxTree:
    """Parsed source plus its annotated root."""

    source: bytes
    root: AnnotatedNode
    tree: Tree

    def walk(self) -> Iterator[AnnotatedNode]:
        return self.root.walk()

    def text(self, node: AnnotatedNode) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8")


@dataclass(frozen=True)
class SyntaxProblem:
    """A syntax error located by line and column (both 1-indexed)."""

    line: int
    column: int
    message: str


def _scope_for_children(node: AnnotatedNode) -> Scope:
    kind = node.type
    if kind in FUNCTION_NODE_TYPES:
        return node.scope.enter(ScopeKind.FUNCTION, kind)
    if kind in CLASS_NODE_TYPES:
        return node.scope.enter(ScopeKind.CLASS, kind)
    if kind in BLOCK_NODE_TYPES:
        if (
            kind == "statement_block"
            and node.parent is not None
            and node.parent.type in FUNCTION_NODE_TYPES
        ):
            return node.scope
        return node.scope.enter(ScopeKind.BLOCK, kind)
    return node.scope


def annotate(root: Node) -> AnnotatedNode:
    """Wrap a tree-sitter tree with parent links and scope data."""
    annotated_root = AnnotatedNode(root, None, Scope(ScopeKind.MODULE))
    stack = [annotated_root]
    while stack:
        current = stack.pop()
        child_scope = _scope_for_children(current)
        for child in current.node.children:
            wrapped = AnnotatedNode(child, current, child_scope)
            current.children.append(wrapped)
            stack.append(wrapped)
    return annotated_root


def _column(source: bytes, start_byte: int) -> int:
    """1-indexed character column of a byte offset."""
    line_start = source.rfind(b"\n", 0, start_byte) + 1
    return len(source[line_start:start_byte].decode("utf-8", errors="replace")) + 1


def find_syntax_problems(root: Node, source: bytes) -> list[SyntaxProblem]:
    """Locate every ERROR and missing node, in source order."""
    problems: list[SyntaxProblem] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_missing:
            message = f"missing {node.type!r}"
        elif node.is_error:
            snippet = source[node.start_byte:node.end_byte].decode(
                "utf-8", errors="replace"
            )
            snippet = snippet.strip().split("\n", 1)[0][:20]
            message = f"unexpected {snippet!r}" if snippet else "unexpected end of input"
        else:
            if node.has_error:
                stack.extend(reversed(node.children))
            continue
        problems.append(
            SyntaxProblem(
                line=node.start_point[0] + 1,
                column=_column(source, node.start_byte),
                message=message,
            )
        )
    return problems


class AnnotatedTreeBuilder:
    """Parse JavaScript into an annotated syntax tree.

    The tree-sitter parser is loaded lazily on first use and reused for
    every subsequent parse.
    """

    def __init__(self, language: str = JAVASCRIPT_LANGUAGE):
        self._language_name = language
        self._parser: Parser | None = None
        self._language: Language | None = None

    def _ensure_parser(self) -> Parser:
        if self._parser is not None:
            return self._parser

        try:
            import tree_sitter_language_pack as tslp
            from tree_sitter import Parser

            lang = tslp.get_language(self._language_name)
            parser = Parser(lang)
        except Exception as e:
            raise CodesurgeonError(
                code=ErrorCode.TREE_SITTER_FAILED,
                message=f"Failed to initialize tree-sitter for {self._language_name}: {e}",
                user_message="The JavaScript parser is not available.",
                severity=ErrorSeverity.CRITICAL,
                context=ErrorContext(component="tree_builder"),
                original_error=e,
            ) from e

        self._parser = parser
        self._language = lang
        logger.debug(f"Initialized tree-sitter parser for {self._language_name}")
        return parser

    @property
    def language(self) -> Language:
        """The tree-sitter ``Language``, for building queries."""
        self._ensure_parser()
        assert self._language is not None
        return self._language

    def parse(self, text: str) -> Tree:
        """Parse without raising on syntax errors."""
        return self._ensure_parser().parse(text.encode("utf-8"))

    def build(self, blob: str, file_path: str | None = None) -> SyntaxTree:
        """Parse ``blob`` and annotate every node.

        Raises:
            ParseError: If the source contains a syntax error.
        """
        source = blob.encode("utf-8")
        tree = self._ensure_parser().parse(source)

        if tree.root_node.has_error:
            problems = find_syntax_problems(tree.root_node, source)
            problem = problems[0] if problems else SyntaxProblem(1, 1, "syntax error")
            raise ParseError(
                problem.message,
                line=problem.line,
                column=problem.column,
                context=ErrorContext(
                    operation="build",
                    file_path=file_path,
                    component="tree_builder",
                ),
            )

        return SyntaxTree(source=source, root=annotate(tree.root_node), tree=tree)
