"""Passes applied to composed output: wrap, minify, validate, probe."""

from codesurgeon.postprocess.wrapper import WrapOptions, WrapType, default_identifier, wrap
from codesurgeon.postprocess.validator import (
    BUILTIN_RULES,
    Diagnostic,
    RuleQuery,
    ValidationProfile,
    ValidationReport,
    Validator,
)
from codesurgeon.postprocess.prober import (
    DependencyProber,
    ProbeReport,
    SandboxDependencyProber,
    StaticDependencyProber,
    is_local_module,
    reconcile,
)

__all__ = [
    "BUILTIN_RULES",
    "DependencyProber",
    "Diagnostic",
    "ProbeReport",
    "RuleQuery",
    "SandboxDependencyProber",
    "StaticDependencyProber",
    "ValidationProfile",
    "ValidationReport",
    "Validator",
    "WrapOptions",
    "WrapType",
    "default_identifier",
    "is_local_module",
    "reconcile",
    "wrap",
]
