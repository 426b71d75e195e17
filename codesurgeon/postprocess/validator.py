"""Structural lint for composed output, built on tree-sitter queries.

Two profiles are supported:

- ``permissive`` (hint): syntax errors, ``debugger`` and ``with``
- ``strict`` (lint): everything above plus loose equality, missing
  semicolons and ``eval`` calls

Individual rules can be switched on or off by name through ``options``.
The validator never raises on bad input; it reports.

Usage:
    report = Validator().check(source, ValidationProfile.STRICT)
    for diagnostic in report.diagnostics:
        print(diagnostic.location, diagnostic.message)
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from loguru import logger

from codesurgeon.parsing.tree_builder import AnnotatedTreeBuilder, find_syntax_problems

if TYPE_CHECKING:
    from tree_sitter import Node, Query


class ValidationProfile(StrEnum):
    """Severity profiles."""

    PERMISSIVE = "permissive"
    STRICT = "strict"


SYNTAX_RULE = "syntax"
SEMICOLON_RULE = "semicolon"

# Statements that end in ';' when written out in full.
SEMICOLON_STATEMENTS = frozenset({
    "expression_statement",
    "variable_declaration",
    "lexical_declaration",
    "return_statement",
    "throw_statement",
    "break_statement",
    "continue_statement",
})

_BOTH = frozenset({ValidationProfile.PERMISSIVE, ValidationProfile.STRICT})
_STRICT = frozenset({ValidationProfile.STRICT})


@dataclass(frozen=True)
class Diagnostic:
    """One reported problem; ``line`` and ``column`` are 1-indexed."""

    line: int
    column: int
    rule: str
    message: str
    severity: str = "warning"

    @property
    def location(self) -> str:
        return f"{self.line}:{self.column}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "column": self.column,
            "rule": self.rule,
            "message": self.message,
            "severity": self.severity,
        }


@dataclass
class ValidationReport:
    """Result of a validation run."""

    profile: ValidationProfile
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.diagnostics

    def to_dict(self) -> dict[str, Any]:
        return {
            "profile": str(self.profile),
            "valid": self.valid,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


@dataclass(frozen=True)
class RuleQuery:
    """A lint rule expressed as a tree-sitter query.

    When ``text`` is set, only captures whose source text equals it count.
    """

    name: str
    query: str
    message: str
    profiles: frozenset[ValidationProfile]
    text: str | None = None


BUILTIN_RULES: list[RuleQuery] = [
    RuleQuery(
        name="debugger",
        query="(debugger_statement) @statement",
        message="Forgotten 'debugger' statement.",
        profiles=_BOTH,
    ),
    RuleQuery(
        name="with",
        query="(with_statement) @statement",
        message="Don't use 'with'.",
        profiles=_BOTH,
    ),
    RuleQuery(
        name="eqeqeq",
        query='(binary_expression operator: ["==" "!="] @operator)',
        message="Use '===' and '!==' instead of loose equality.",
        profiles=_STRICT,
    ),
    RuleQuery(
        name="evil",
        query="(call_expression function: (identifier) @callee)",
        message="eval can be harmful.",
        profiles=_STRICT,
        text="eval",
    ),
]

RULE_NAMES = frozenset({SYNTAX_RULE, SEMICOLON_RULE} | {r.name for r in BUILTIN_RULES})

ReportCallback = Callable[[ValidationReport], Any]


class Validator:
    """Check JavaScript text against a validation profile."""

    def __init__(self, builder: AnnotatedTreeBuilder | None = None):
        self._builder = builder or AnnotatedTreeBuilder()
        self._queries: dict[str, Query] = {}

    def _enabled_rules(
        self,
        profile: ValidationProfile,
        options: Mapping[str, bool] | None,
    ) -> set[str]:
        enabled = {SYNTAX_RULE}
        if profile is ValidationProfile.STRICT:
            enabled.add(SEMICOLON_RULE)
        enabled.update(r.name for r in BUILTIN_RULES if profile in r.profiles)

        for name, on in (options or {}).items():
            if name not in RULE_NAMES:
                logger.warning(f"Ignoring unknown validation option '{name}'")
                continue
            if on:
                enabled.add(name)
            else:
                enabled.discard(name)
        return enabled

    def _query(self, rule: RuleQuery) -> Query:
        if rule.name not in self._queries:
            from tree_sitter import Query

            self._queries[rule.name] = Query(self._builder.language, rule.query)
        return self._queries[rule.name]

    def _run_query(self, rule: RuleQuery, root: Node) -> Iterator[Node]:
        from tree_sitter import QueryCursor

        cursor = QueryCursor(self._query(rule))
        for _, captures in cursor.matches(root):
            for nodes in captures.values():
                for node in nodes:
                    if rule.text is not None and (node.text or b"").decode() != rule.text:
                        continue
                    yield node

    @staticmethod
    def _missing_semicolons(root: Node) -> Iterator[Node]:
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type in SEMICOLON_STATEMENTS:
                tokens = [c for c in node.children if c.type != "comment"]
                if tokens and tokens[-1].type != ";":
                    yield node
            stack.extend(reversed(node.children))

    def check(
        self,
        text: str,
        profile: ValidationProfile | str = ValidationProfile.PERMISSIVE,
        options: Mapping[str, bool] | None = None,
        on_success: ReportCallback | None = None,
        on_failure: ReportCallback | None = None,
    ) -> ValidationReport:
        """Validate ``text``; call ``on_success`` or ``on_failure`` with the report."""
        profile = ValidationProfile(profile)
        enabled = self._enabled_rules(profile, options)
        report = ValidationReport(profile=profile)

        source = text.encode("utf-8")
        tree = self._builder.parse(text)
        root = tree.root_node

        if SYNTAX_RULE in enabled and root.has_error:
            for problem in find_syntax_problems(root, source):
                report.diagnostics.append(
                    Diagnostic(
                        line=problem.line,
                        column=problem.column,
                        rule=SYNTAX_RULE,
                        message=problem.message,
                        severity="error",
                    )
                )

        for rule in BUILTIN_RULES:
            if rule.name not in enabled:
                continue
            for node in self._run_query(rule, root):
                report.diagnostics.append(_diagnostic(node, rule.name, rule.message))

        if SEMICOLON_RULE in enabled:
            for node in self._missing_semicolons(root):
                report.diagnostics.append(
                    _diagnostic(node, SEMICOLON_RULE, "Missing semicolon.", at_end=True)
                )

        report.diagnostics.sort(key=lambda d: (d.line, d.column, d.rule))

        if report.valid:
            if on_success is not None:
                on_success(report)
        elif on_failure is not None:
            on_failure(report)
        return report


def _diagnostic(node: Node, rule: str, message: str, at_end: bool = False) -> Diagnostic:
    row, column = node.end_point if at_end else node.start_point
    return Diagnostic(line=row + 1, column=column + 1, rule=rule, message=message)
