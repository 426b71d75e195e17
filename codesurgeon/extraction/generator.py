"""Regenerate source text for a matched subtree.

The generator emits the node's own source span, applies an optional
rename edit, and normalises layout:

- a line that starts with a token is re-indented to ``indent_width``
  spaces per open bracket level
- continuation lines of a ternary or a declaration, and the body of an
  unbraced ``if``/``else``/loop, sit one level deeper than their owner
- trailing whitespace is stripped
- the inside of multi-line strings, template literals and comments is
  copied verbatim

Layout depends only on tree structure, so generating, reparsing and
generating again gives byte-identical text.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from codesurgeon.constants import DEFAULT_INDENT_WIDTH
from codesurgeon.extraction.types import RenameEdit
from codesurgeon.parsing.tree_builder import AnnotatedNode, SyntaxTree

# Nodes that open an indentation level for lines after their first.
INDENT_NODE_TYPES = frozenset({
    "statement_block",
    "class_body",
    "object",
    "object_pattern",
    "array",
    "array_pattern",
    "arguments",
    "formal_parameters",
    "parenthesized_expression",
    "switch_body",
    "switch_case",
    "switch_default",
    "named_imports",
    "export_clause",
})

# Nodes whose own continuation lines sit one level deeper.
CONTINUATION_NODE_TYPES = frozenset({
    "ternary_expression",
    "variable_declaration",
    "lexical_declaration",
})

# Statements whose body, when not a block, sits one level deeper.
# ``else_clause`` has no body field; its statement is the last named child.
BODY_FIELDS = {
    "if_statement": "consequence",
    "for_statement": "body",
    "for_in_statement": "body",
    "while_statement": "body",
    "do_statement": "body",
    "with_statement": "body",
    "else_clause": None,
}

CLOSING_TOKENS = frozenset({"}", "]", ")"})

# Multi-line tokens whose continuation lines must not be re-indented.
VERBATIM_NODE_TYPES = frozenset({"comment", "string", "template_string", "regex"})

# Multi-line tokens whose lines must also keep trailing whitespace.
STRING_NODE_TYPES = frozenset({"string", "template_string"})


@dataclass
class _Layout:
    """Per-row decisions for one generated node (rows relative to its start)."""

    depths: dict[int, int] = field(default_factory=dict)
    keep_trailing: set[int] = field(default_factory=set)


class CodeGenerator:
    """Serialize annotated subtrees back to source text."""

    def __init__(self, indent_width: int = DEFAULT_INDENT_WIDTH):
        self.indent_width = indent_width

    def generate(
        self,
        tree: SyntaxTree,
        node: AnnotatedNode,
        rename: RenameEdit | None = None,
    ) -> str:
        """Return the formatted text of ``node``, renamed if requested."""
        chunk = tree.source[node.start_byte:node.end_byte]

        if rename is not None:
            if not node.start_byte <= rename.start_byte <= rename.end_byte <= node.end_byte:
                raise ValueError(
                    f"rename span {rename.start_byte}:{rename.end_byte} lies outside "
                    f"node span {node.start_byte}:{node.end_byte}"
                )
            start = rename.start_byte - node.start_byte
            end = rename.end_byte - node.start_byte
            chunk = chunk[:start] + rename.replacement.encode("utf-8") + chunk[end:]

        layout = self._layout(node)
        indent = " " * self.indent_width
        lines = chunk.decode("utf-8").split("\n")

        out = []
        for row, line in enumerate(lines):
            depth = layout.depths.get(row)
            if depth is not None:
                line = indent * depth + line.lstrip(" \t")
            if row not in layout.keep_trailing:
                line = line.rstrip(" \t\r")
            out.append(line)
        return "\n".join(out)

    def _layout(self, node: AnnotatedNode) -> _Layout:
        base = node.start_row
        layout = _Layout()
        first_leaf: dict[int, AnnotatedNode] = {}
        verbatim_rows: set[int] = set()

        for current in node.walk():
            start_row, end_row = current.start_row, current.end_row
            if current.type in VERBATIM_NODE_TYPES and end_row > start_row:
                verbatim_rows.update(range(start_row + 1, end_row + 1))
                if current.type in STRING_NODE_TYPES:
                    layout.keep_trailing.update(
                        r - base for r in range(start_row, end_row)
                    )
            if current.is_leaf and current.end_byte > current.start_byte:
                first_leaf.setdefault(start_row, current)

        for row, leaf in first_leaf.items():
            if row in verbatim_rows:
                continue
            layout.depths[row - base] = self._depth(node, leaf, row)
        return layout

    @staticmethod
    def _depth(root: AnnotatedNode, leaf: AnnotatedNode, row: int) -> int:
        """Count distinct rows on which still-open levels were opened."""
        if leaf is root:
            return 0
        open_rows: set[int] = set()
        closed_rows: set[int] = set()
        child = leaf
        for ancestor in leaf.ancestors():
            if ancestor.start_row < row:
                if ancestor.type in INDENT_NODE_TYPES:
                    closes = (
                        leaf.type in CLOSING_TOKENS
                        and leaf.parent is ancestor
                        and ancestor.children[-1] is leaf
                    )
                    (closed_rows if closes else open_rows).add(ancestor.start_row)
                elif ancestor.type in CONTINUATION_NODE_TYPES:
                    open_rows.add(ancestor.start_row)
                elif ancestor.type in BODY_FIELDS and child.type != "statement_block":
                    if child is _body(ancestor):
                        open_rows.add(ancestor.start_row)
            if ancestor is root:
                break
            child = ancestor
        return len(open_rows - closed_rows)


def _body(statement: AnnotatedNode) -> AnnotatedNode | None:
    field_name = BODY_FIELDS[statement.type]
    if field_name is not None:
        return statement.child_by_field(field_name)
    statements = [c for c in statement.named_children if c.type != "comment"]
    return statements[-1] if statements else None
