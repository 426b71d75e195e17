"""Compose result slots into the session's output buffer."""

from __future__ import annotations

from codesurgeon.constants import DEFAULT_SEPARATOR
from codesurgeon.extraction.types import ResultSlots


class OutputBuffer:
    """Accumulates composed text until explicitly cleared."""

    def __init__(self, text: str = ""):
        self._text = text

    @property
    def text(self) -> str:
        return self._text

    def append(self, text: str) -> None:
        self._text += text

    def replace(self, text: str) -> None:
        self._text = text

    def clear(self) -> None:
        self._text = ""

    def __len__(self) -> int:
        return len(self._text)

    def __str__(self) -> str:
        return self._text


class OutputComposer:
    """Join filled slots in request order and append them to a buffer."""

    def __init__(self, buffer: OutputBuffer, separator: str = DEFAULT_SEPARATOR):
        self.buffer = buffer
        self.separator = separator

    def compose(self, slots: ResultSlots) -> str:
        """Append the joined slots plus one trailing separator.

        Returns the text that was appended.
        """
        text = self.separator.join(slots.filled()) + self.separator
        self.buffer.append(text)
        return text
