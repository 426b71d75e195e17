"""
Core types shared by the aggregation, extraction and session layers.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from codesurgeon.constants import UNRESOLVED_SEGMENT

from .errors import TargetError


@dataclass(frozen=True)
class SourceDocument:
    """A source file's path and its raw text."""

    path: str
    text: str


@dataclass(frozen=True)
class ExtractionTarget:
    """A requested top-level name, optionally with the name to emit instead."""

    name: str
    new_name: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise TargetError(f"target name must be a non-empty string, got {self.name!r}")
        if UNRESOLVED_SEGMENT in self.name:
            raise TargetError(f"target name may not contain {UNRESOLVED_SEGMENT!r}: {self.name!r}")
        if self.new_name is not None and (
            not isinstance(self.new_name, str) or not self.new_name
        ):
            raise TargetError(
                f"new name for {self.name!r} must be a non-empty string, got {self.new_name!r}"
            )

    @property
    def is_rename(self) -> bool:
        return self.new_name is not None

    @classmethod
    def parse(cls, value: ExtractionTarget | str | Sequence[str]) -> ExtractionTarget:
        """Build a target from a bare name, a ``(name,)`` singleton or a
        ``(name, new_name)`` pair."""
        if isinstance(value, ExtractionTarget):
            return value
        if isinstance(value, str):
            return cls(value)
        if isinstance(value, Sequence) and len(value) == 1:
            return cls(value[0])
        if isinstance(value, Sequence) and len(value) == 2:
            name, new_name = value
            return cls(name, new_name)
        raise TargetError(
            f"expected a name or a (name, new_name) pair, got {value!r}"
        )
