"""Types for the extraction pipeline.

Top-level entities form a closed set of shapes. ``TopLevelEntity`` is the
union of all of them; code that dispatches on it ends in
``assert_never`` so that adding a shape is a checked change.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar

from codesurgeon.constants import UNRESOLVED_SEGMENT

if TYPE_CHECKING:
    from codesurgeon.parsing.tree_builder import AnnotatedNode

# Member chains rooted here also answer to the path below the root, as long
# as that path still has at least two segments.
EXPORT_ROOTS: tuple[tuple[str, ...], ...] = (("exports",), ("module", "exports"))


class EntityShape(StrEnum):
    """Declaration shapes the matcher understands."""

    DECLARATION = "declaration"
    ASSIGNMENT = "assignment"
    FUNCTION = "function"
    CLASS = "class"


@dataclass(frozen=True)
class RenameEdit:
    """Replace ``source[start_byte:end_byte]`` with ``replacement``."""

    start_byte: int
    end_byte: int
    replacement: str


@dataclass(frozen=True)
class DeclarationEntity:
    """``var``/``let``/``const`` statement, named by its first binding."""

    shape: ClassVar[EntityShape] = EntityShape.DECLARATION

    node: AnnotatedNode
    name: str
    keyword: str
    name_node: AnnotatedNode | None = None

    @property
    def names(self) -> tuple[str, ...]:
        return (self.name,)


@dataclass(frozen=True)
class AssignmentEntity:
    """Expression statement named by its (left-hand) access chain.

    ``exports.Foo.Bar = ...`` has path ``("exports", "Foo", "Bar")``.
    """

    shape: ClassVar[EntityShape] = EntityShape.ASSIGNMENT

    node: AnnotatedNode
    path: tuple[str, ...]
    is_assignment: bool
    last_segment_node: AnnotatedNode | None = None

    @property
    def name(self) -> str:
        return ".".join(self.path)

    @property
    def names(self) -> tuple[str, ...]:
        names = [self.name]
        for root in EXPORT_ROOTS:
            if len(self.path) > len(root) + 1 and self.path[: len(root)] == root:
                names.append(".".join(self.path[len(root):]))
        return tuple(names)


@dataclass(frozen=True)
class FunctionEntity:
    """Named function (or generator) declaration."""

    shape: ClassVar[EntityShape] = EntityShape.FUNCTION

    node: AnnotatedNode
    name: str
    name_node: AnnotatedNode
    is_generator: bool = False

    @property
    def names(self) -> tuple[str, ...]:
        return (self.name,)


@dataclass(frozen=True)
class ClassEntity:
    """Named class declaration."""

    shape: ClassVar[EntityShape] = EntityShape.CLASS

    node: AnnotatedNode
    name: str
    name_node: AnnotatedNode

    @property
    def names(self) -> tuple[str, ...]:
        return (self.name,)


TopLevelEntity = DeclarationEntity | AssignmentEntity | FunctionEntity | ClassEntity


def is_resolved(entity: TopLevelEntity) -> bool:
    """False when the entity's name contains an unanalyzable segment."""
    return UNRESOLVED_SEGMENT not in entity.name


@dataclass
class ResultSlots:
    """Generated text per request position; ``None`` where nothing matched."""

    values: list[str | None] = field(default_factory=list)

    @classmethod
    def empty(cls, size: int) -> ResultSlots:
        return cls([None] * size)

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index: int) -> str | None:
        return self.values[index]

    def __setitem__(self, index: int, value: str | None) -> None:
        self.values[index] = value

    def __iter__(self) -> Iterator[str | None]:
        return iter(self.values)

    def filled(self) -> list[str]:
        """Non-empty slots in request order."""
        return [v for v in self.values if v]

    def missing(self) -> list[int]:
        """Indices of slots nothing matched."""
        return [i for i, v in enumerate(self.values) if not v]
