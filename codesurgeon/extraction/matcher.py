"""Top-level entity classification and matching.

The matcher walks the annotated tree once, in source order. Every node
that is a direct statement of the module is classified by shape and
given a canonical name; each request whose name equals it gets the
node's generated text in its slot. Later matches overwrite earlier ones,
so when a name is declared twice the last declaration wins.

Usage:
    tree = AnnotatedTreeBuilder().build(source)
    slots = TopLevelMatcher().match(tree, [ExtractionTarget("Alpha")])
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import assert_never

from loguru import logger

from codesurgeon.extraction.generator import CodeGenerator
from codesurgeon.extraction.types import (
    UNRESOLVED_SEGMENT,
    AssignmentEntity,
    ClassEntity,
    DeclarationEntity,
    FunctionEntity,
    RenameEdit,
    ResultSlots,
    TopLevelEntity,
)
from codesurgeon.parsing.tree_builder import AnnotatedNode, SyntaxTree
from codesurgeon.types.core import ExtractionTarget


# ============================================================================
# Classification
# ============================================================================


def _declaration(node: AnnotatedNode, tree: SyntaxTree) -> DeclarationEntity | None:
    declarators = [c for c in node.named_children if c.type == "variable_declarator"]
    if not declarators:
        return None

    keyword = tree.text(node.children[0])
    # Only the first binding names the statement.
    binding = declarators[0].child_by_field("name")
    if binding is None or binding.type != "identifier":
        return DeclarationEntity(node=node, name=UNRESOLVED_SEGMENT, keyword=keyword)

    return DeclarationEntity(
        node=node,
        name=tree.text(binding),
        keyword=keyword,
        name_node=binding,
    )


def access_path(
    node: AnnotatedNode, tree: SyntaxTree
) -> tuple[tuple[str, ...], AnnotatedNode | None]:
    """Split a member chain into names, innermost object first.

    Returns the path and the node holding its final segment. Anything other
    than identifiers and ``.property`` accesses becomes ``UNRESOLVED_SEGMENT``.
    """
    segments: list[str] = []
    last: AnnotatedNode | None = None
    current: AnnotatedNode | None = node

    while current is not None:
        if current.type == "member_expression":
            prop = current.child_by_field("property")
            if prop is None:
                segments.append(UNRESOLVED_SEGMENT)
                break
            segments.append(tree.text(prop))
            if last is None:
                last = prop
            current = current.child_by_field("object")
        elif current.type == "identifier":
            segments.append(tree.text(current))
            if last is None:
                last = current
            break
        else:
            segments.append(UNRESOLVED_SEGMENT)
            break

    return tuple(reversed(segments)), last


def _statement(node: AnnotatedNode, tree: SyntaxTree) -> AssignmentEntity | None:
    expressions = [c for c in node.named_children if c.type != "comment"]
    if not expressions:
        return None

    expression = expressions[0]
    is_assignment = expression.type == "assignment_expression"
    target = expression.child_by_field("left") if is_assignment else expression
    if target is None:
        return None

    path, last = access_path(target, tree)
    return AssignmentEntity(
        node=node,
        path=path,
        is_assignment=is_assignment,
        last_segment_node=last,
    )


def _function(node: AnnotatedNode, tree: SyntaxTree) -> FunctionEntity | None:
    name = node.child_by_field("name")
    if name is None:
        return None
    return FunctionEntity(
        node=node,
        name=tree.text(name),
        name_node=name,
        is_generator=node.type == "generator_function_declaration",
    )


def _class(node: AnnotatedNode, tree: SyntaxTree) -> ClassEntity | None:
    name = node.child_by_field("name")
    if name is None:
        return None
    return ClassEntity(node=node, name=tree.text(name), name_node=name)


def classify(node: AnnotatedNode, tree: SyntaxTree) -> TopLevelEntity | None:
    """Classify a statement by declaration shape; ``None`` if it has none."""
    match node.type:
        case "variable_declaration" | "lexical_declaration":
            return _declaration(node, tree)
        case "expression_statement":
            return _statement(node, tree)
        case "function_declaration" | "generator_function_declaration":
            return _function(node, tree)
        case "class_declaration":
            return _class(node, tree)
        case _:
            return None


def rename_edit(entity: TopLevelEntity, new_name: str) -> RenameEdit | None:
    """Edit that renames the entity at its declaration site only.

    Declarations, functions and classes get ``new_name`` as their bound
    identifier. Assignments keep their chain and replace only its final
    segment, with the final segment of ``new_name``.
    """
    match entity:
        case DeclarationEntity(name_node=name_node):
            target, replacement = name_node, new_name
        case FunctionEntity(name_node=name_node) | ClassEntity(name_node=name_node):
            target, replacement = name_node, new_name
        case AssignmentEntity(last_segment_node=last):
            target, replacement = last, new_name.split(".")[-1]
        case _:
            assert_never(entity)

    if target is None:
        return None
    return RenameEdit(target.start_byte, target.end_byte, replacement)


# ============================================================================
# Matching
# ============================================================================


class TopLevelMatcher:
    """Match top-level entities against ordered extraction targets."""

    def __init__(self, generator: CodeGenerator | None = None):
        self._generator = generator or CodeGenerator()

    @property
    def generator(self) -> CodeGenerator:
        return self._generator

    def entities(self, tree: SyntaxTree) -> Iterator[TopLevelEntity]:
        """Yield every classified top-level entity in source order."""
        for node in tree.walk():
            if not node.is_top_level:
                continue
            entity = classify(node, tree)
            if entity is not None:
                yield entity

    def match(
        self,
        tree: SyntaxTree,
        requests: Sequence[ExtractionTarget],
    ) -> ResultSlots:
        """Fill one slot per request with the text of its matching entity."""
        slots = ResultSlots.empty(len(requests))
        if not requests:
            return slots

        for entity in self.entities(tree):
            names = entity.names
            for index, target in enumerate(requests):
                if target.name not in names:
                    continue

                rename = None
                if target.new_name is not None:
                    rename = rename_edit(entity, target.new_name)

                if slots[index] is not None:
                    logger.debug(
                        f"'{target.name}' declared again on line {entity.node.line}; "
                        "keeping the later declaration"
                    )
                slots[index] = self._generator.generate(tree, entity.node, rename)

        for index in slots.missing():
            logger.debug(f"No top-level entity named '{requests[index].name}'")

        return slots
