"""File reads and writes for a session.

Failures are logged and reported back as values, never raised, so a job
keeps going with whatever documents could be read.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from codesurgeon.constants import DEFAULT_ENCODING


@dataclass(frozen=True)
class ReadResult:
    """Outcome of reading one file: its text, or the error that stopped it."""

    path: str
    text: str | None = None
    error: OSError | UnicodeDecodeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class WriteResult:
    """Outcome of writing one file."""

    path: str
    bytes_written: int = 0
    error: OSError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def read_source(path: str, encoding: str = DEFAULT_ENCODING) -> ReadResult:
    try:
        text = Path(path).read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"{e} [{path}]")
        return ReadResult(path=path, error=e)
    return ReadResult(path=path, text=text)


async def read_sources(paths: list[str], encoding: str = DEFAULT_ENCODING) -> list[ReadResult]:
    """Read every path concurrently; results come back in argument order."""
    return list(
        await asyncio.gather(
            *(asyncio.to_thread(read_source, path, encoding) for path in paths)
        )
    )


def write_output(
    path: str,
    text: str,
    append: bool = False,
    encoding: str = DEFAULT_ENCODING,
) -> WriteResult:
    """Open, write and close ``path``; the handle is closed on every exit."""
    mode = "a" if append else "w"
    try:
        with open(path, mode, encoding=encoding) as handle:
            written = handle.write(text)
    except OSError as e:
        logger.error(f"{e} [{path}]")
        return WriteResult(path=path, error=e)
    return WriteResult(path=path, bytes_written=written)


async def write_output_async(
    path: str,
    text: str,
    append: bool = False,
    encoding: str = DEFAULT_ENCODING,
) -> WriteResult:
    return await asyncio.to_thread(write_output, path, text, append, encoding)
