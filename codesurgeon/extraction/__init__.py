"""Extraction pipeline: classify, match, generate, compose.

Usage:
    from codesurgeon.extraction import TopLevelMatcher
    slots = TopLevelMatcher().match(tree, targets)
"""

from codesurgeon.extraction.types import (
    EXPORT_ROOTS,
    UNRESOLVED_SEGMENT,
    AssignmentEntity,
    ClassEntity,
    DeclarationEntity,
    EntityShape,
    FunctionEntity,
    RenameEdit,
    ResultSlots,
    TopLevelEntity,
    is_resolved,
)
from codesurgeon.extraction.generator import CodeGenerator
from codesurgeon.extraction.matcher import (
    TopLevelMatcher,
    access_path,
    classify,
    rename_edit,
)
from codesurgeon.extraction.composer import OutputBuffer, OutputComposer

__all__ = [
    "EXPORT_ROOTS",
    "UNRESOLVED_SEGMENT",
    "AssignmentEntity",
    "ClassEntity",
    "CodeGenerator",
    "DeclarationEntity",
    "EntityShape",
    "FunctionEntity",
    "OutputBuffer",
    "OutputComposer",
    "RenameEdit",
    "ResultSlots",
    "TopLevelEntity",
    "TopLevelMatcher",
    "access_path",
    "classify",
    "is_resolved",
    "rename_edit",
]
