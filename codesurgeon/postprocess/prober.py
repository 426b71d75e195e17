"""Discover the modules composed output loads at runtime.

Two probers share the ``DependencyProber`` protocol:

- ``StaticDependencyProber`` reads ``require("x")`` calls and import
  sources from the tree-sitter tree; it executes nothing.
- ``SandboxDependencyProber`` runs the text in an isolated QuickJS
  context whose only capability is a ``require`` that records its
  argument and hands back an inert stub. Needs the ``sandbox`` extra.

Local targets (``./x``, ``../x``, ``a/b``) are reported but not inlined.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from loguru import logger

from codesurgeon.parsing.tree_builder import AnnotatedTreeBuilder


def is_local_module(name: str) -> bool:
    """Relative or path-like load targets are local files, not packages."""
    return name.startswith(".") or "/" in name


@dataclass
class ProbeReport:
    """Modules the output asked for while being probed."""

    discovered: set[str] = field(default_factory=set)
    local: list[str] = field(default_factory=list)
    new: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def record(self, name: str) -> None:
        if is_local_module(name):
            if name not in self.local:
                self.local.append(name)
        else:
            self.discovered.add(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "discovered": sorted(self.discovered),
            "local": self.local,
            "new": self.new,
            "errors": self.errors,
        }


def reconcile(discovered: Iterable[str], known: Iterable[str]) -> list[str]:
    """Names in ``discovered`` that ``known`` does not already list, sorted."""
    known_names = set(known)
    return sorted(set(discovered) - known_names)


@runtime_checkable
class DependencyProber(Protocol):
    """Anything that can list the modules a program loads."""

    @property
    def name(self) -> str:
        """Prober identifier (e.g., 'static', 'sandbox')."""
        ...

    def run(self, text: str) -> ProbeReport:
        """Probe ``text``; never raises for problems inside the program."""
        ...


_REQUIRE_QUERY = """
(call_expression
    function: (identifier) @callee
    arguments: (arguments . (string) @module))
"""

_IMPORT_QUERY = """
[
    (import_statement source: (string) @module)
    (export_statement source: (string) @module)
]
"""


class StaticDependencyProber:
    """Find load targets by reading the syntax tree."""

    def __init__(self, builder: AnnotatedTreeBuilder | None = None):
        self._builder = builder or AnnotatedTreeBuilder()

    @property
    def name(self) -> str:
        return "static"

    def run(self, text: str) -> ProbeReport:
        from tree_sitter import Query, QueryCursor

        report = ProbeReport()
        tree = self._builder.parse(text)
        if tree.root_node.has_error:
            report.errors.append("source has syntax errors; results may be partial")

        language = self._builder.language
        require_cursor = QueryCursor(Query(language, _REQUIRE_QUERY))
        for _, captures in require_cursor.matches(tree.root_node):
            callee = captures.get("callee", [])
            if not callee or callee[0].text != b"require":
                continue
            for module in captures.get("module", []):
                report.record(_string_value(module.text))

        import_cursor = QueryCursor(Query(language, _IMPORT_QUERY))
        for _, captures in import_cursor.matches(tree.root_node):
            for module in captures.get("module", []):
                report.record(_string_value(module.text))

        return report


def _string_value(raw: bytes | None) -> str:
    """Strip the quotes off a string literal's source text."""
    value = (raw or b"").decode("utf-8")
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"`":
        return value[1:-1]
    return value


# Installed before the probed program runs. ``require`` records its
# argument and returns a stub that absorbs property access and calls.
_SANDBOX_PRELUDE = """
var __codesurgeon_stub = function () {
    var handler = {
        get: function (target, key) {
            if (key === Symbol.toPrimitive) {
                return function () { return ""; };
            }
            if (key === "then") {
                return undefined;
            }
            return __codesurgeon_stub();
        },
        apply: function () { return __codesurgeon_stub(); },
        construct: function () { return __codesurgeon_stub(); }
    };
    return new Proxy(function () {}, handler);
};
var module = { exports: {} };
var exports = module.exports;
var window = globalThis;
var require = function (name) {
    __codesurgeon_require(String(name));
    return __codesurgeon_stub();
};
"""


class SandboxDependencyProber:
    """Run the program in QuickJS with ``require`` intercepted.

    The context has no file, network or module access; time and memory
    are capped. Errors raised by the program are recorded, not raised.
    """

    def __init__(self, time_limit: float = 2.0, memory_limit: int = 64 * 1024 * 1024):
        self.time_limit = time_limit
        self.memory_limit = memory_limit

    @property
    def name(self) -> str:
        return "sandbox"

    def run(self, text: str) -> ProbeReport:
        import quickjs

        report = ProbeReport()
        context = quickjs.Context()
        context.set_memory_limit(self.memory_limit)
        context.set_time_limit(self.time_limit)

        def intercept(name: str) -> None:
            if is_local_module(name):
                logger.info(f"A module was required, but not inlined to the buffer [{name}]")
            report.record(name)

        context.add_callable("__codesurgeon_require", intercept)
        context.eval(_SANDBOX_PRELUDE)

        try:
            context.eval(text)
        except quickjs.JSException as e:
            logger.warning(f"An error occurred while executing the output buffer [{e}]")
            report.errors.append(str(e))

        return report
