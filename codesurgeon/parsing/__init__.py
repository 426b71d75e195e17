"""Parsing layer: tree-sitter parse plus parent/scope annotation."""

from codesurgeon.parsing.tree_builder import (
    AnnotatedNode,
    AnnotatedTreeBuilder,
    Scope,
    ScopeKind,
    SyntaxProblem,
    SyntaxTree,
    annotate,
    find_syntax_problems,
)

__all__ = [
    "AnnotatedNode",
    "AnnotatedTreeBuilder",
    "Scope",
    "ScopeKind",
    "SyntaxProblem",
    "SyntaxTree",
    "annotate",
    "find_syntax_problems",
]
