"""Wrap composed output in a closure."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import StrEnum
from typing import assert_never

from codesurgeon.types.errors import ConfigurationError, ErrorContext


class WrapType(StrEnum):
    """How the closure is attached."""

    EXPRESSION = "expression"  # (function (exports) { ... }(window));
    DECLARATION = "declaration"  # var name = function (exports) { ... };


@dataclass(frozen=True)
class WrapOptions:
    """Closure shape and injected code."""

    signature: str = "exports"
    params: str = "window"
    outside: str = ""
    before: str = ""
    after: str = ""
    type: WrapType | str = WrapType.EXPRESSION
    identifier: str | None = None
    instance: bool = False


def default_identifier() -> str:
    """Timestamp-derived binding name, e.g. ``i1718000000000``."""
    return f"i{int(time.time() * 1000)}"


def wrap(body: str, options: WrapOptions | None = None) -> str:
    """Return ``body`` enclosed in the closure ``options`` describe.

    Raises:
        ConfigurationError: If ``options.type`` is not a known wrap type.
    """
    options = options or WrapOptions()
    try:
        wrap_type = WrapType(options.type)
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown wrap type {options.type!r}; expected one of "
            f"{', '.join(t.value for t in WrapType)}",
            context=ErrorContext(operation="wrap", component="wrapper"),
            original_error=e,
        ) from e

    match wrap_type:
        case WrapType.EXPRESSION:
            return "\n".join([
                options.outside,
                f"(function ({options.signature}) {{",
                options.before,
                body,
                options.after,
                f"}}({options.params}));",
            ])
        case WrapType.DECLARATION:
            identifier = options.identifier or default_identifier()
            constructor = "new " if options.instance else ""
            return "\n".join([
                f"var {identifier} = {constructor}function ({options.signature}) {{",
                options.before,
                body,
                options.after,
                "};",
            ])
        case _:
            assert_never(wrap_type)
