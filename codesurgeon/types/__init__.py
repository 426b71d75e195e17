"""
Codesurgeon type definitions.
"""

# Core types
from .core import ExtractionTarget, SourceDocument

# Error types
from .errors import (
    CodesurgeonError,
    ConfigurationError,
    ErrorCode,
    ErrorContext,
    ErrorSeverity,
    MinifyError,
    PackageMetadataError,
    ParseError,
    TargetError,
)

__all__ = [
    # Core types
    "ExtractionTarget",
    "SourceDocument",
    # Error types
    "ErrorCode",
    "ErrorSeverity",
    "ErrorContext",
    "CodesurgeonError",
    "ConfigurationError",
    "MinifyError",
    "PackageMetadataError",
    "ParseError",
    "TargetError",
]
