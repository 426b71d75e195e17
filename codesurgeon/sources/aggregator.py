"""Concatenate registered source documents into one blob."""

from __future__ import annotations

from codesurgeon.constants import DEFAULT_SEPARATOR
from codesurgeon.types.core import SourceDocument


class SourceAggregator:
    """Insertion-ordered collection of source documents.

    Re-registering a path replaces its text but keeps its position.
    """

    def __init__(self, separator: str = DEFAULT_SEPARATOR):
        self.separator = separator
        self._documents: dict[str, SourceDocument] = {}

    def register(self, path: str, text: str) -> SourceDocument:
        document = SourceDocument(path=path, text=text)
        self._documents[path] = document
        return document

    @property
    def documents(self) -> list[SourceDocument]:
        return list(self._documents.values())

    def __contains__(self, path: object) -> bool:
        return path in self._documents

    def __len__(self) -> int:
        return len(self._documents)

    def aggregate(self) -> str:
        """Every document's text followed by the separator, in order."""
        return "".join(doc.text + self.separator for doc in self._documents.values())

    def locate(self, line: int) -> tuple[str, int] | None:
        """Map a 1-indexed blob line to ``(path, line within that document)``."""
        first = 1
        for doc in self._documents.values():
            span = (doc.text + self.separator).count("\n")
            if line < first + span:
                return doc.path, line - first + 1
            first += span
        return None

    def clear(self) -> None:
        self._documents.clear()
