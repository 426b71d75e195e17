"""Session configuration.

``SurgeonConfig`` holds the knobs a session reads on every operation.
Values come from keyword options, or from ``CODESURGEON_*`` environment
variables via ``SurgeonConfig.from_env()``.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields, replace
from typing import Any

from codesurgeon.constants import (
    DEFAULT_ENCODING,
    DEFAULT_INDENT_WIDTH,
    DEFAULT_SEPARATOR,
)
from codesurgeon.types.errors import ConfigurationError, ErrorContext

_ENV_PREFIX = "CODESURGEON_"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class SurgeonConfig:
    """Configuration for a ``Codesurgeon`` session."""

    encoding: str = DEFAULT_ENCODING
    quiet: bool = False
    separator: str = DEFAULT_SEPARATOR
    indent_width: int = DEFAULT_INDENT_WIDTH
    owner: str | None = None

    def __post_init__(self) -> None:
        if self.indent_width < 0:
            raise ConfigurationError(
                f"indent_width must be non-negative, got {self.indent_width}",
                context=ErrorContext(component="config"),
            )

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> SurgeonConfig:
        """Build a config from ``CODESURGEON_*`` environment variables."""
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        if f"{_ENV_PREFIX}ENCODING" in env:
            values["encoding"] = env[f"{_ENV_PREFIX}ENCODING"]
        if f"{_ENV_PREFIX}QUIET" in env:
            values["quiet"] = env[f"{_ENV_PREFIX}QUIET"].lower() in _TRUTHY
        if f"{_ENV_PREFIX}SEPARATOR" in env:
            # Allow escaped newlines so the value fits in a shell export.
            values["separator"] = env[f"{_ENV_PREFIX}SEPARATOR"].replace("\\n", "\n")
        if f"{_ENV_PREFIX}INDENT" in env:
            raw = env[f"{_ENV_PREFIX}INDENT"]
            try:
                values["indent_width"] = int(raw)
            except ValueError as e:
                raise ConfigurationError(
                    f"{_ENV_PREFIX}INDENT must be an integer, got {raw!r}",
                    context=ErrorContext(component="config"),
                    original_error=e,
                ) from e
        if f"{_ENV_PREFIX}OWNER" in env:
            values["owner"] = env[f"{_ENV_PREFIX}OWNER"]

        return cls(**values)

    def with_options(self, **options: Any) -> SurgeonConfig:
        """Return a copy with ``options`` applied; unknown keys are rejected."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration option(s): {', '.join(unknown)}",
                context=ErrorContext(
                    component="config",
                    additional_info={"known": sorted(known)},
                ),
            )
        return replace(self, **options)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
