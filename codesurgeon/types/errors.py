"""
Structured error handling for Codesurgeon.

Every error raised by the engine carries an ``ErrorCode`` and an
``ErrorContext`` so that callers (and the CLI) can render a consistent
message without parsing exception strings.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any

from codesurgeon.constants import utcnow


class ErrorCode(IntEnum):
    """Internal error codes for categorization."""

    # Parsing/Analysis Errors (3000-3999)
    PARSE_FAILED = 3002
    TREE_SITTER_FAILED = 3003
    MINIFY_FAILED = 3007

    # Configuration Errors (4000-4999)
    INVALID_CONFIG = 4001
    INVALID_PACKAGE = 4005

    # User Input Errors (6000-6999)
    INVALID_ARGS = 6001


class ErrorSeverity(str, Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class ErrorContext:
    """Context information for an error."""

    operation: str | None = None
    file_path: str | None = None
    component: str | None = None
    timestamp: datetime = field(default_factory=utcnow)
    additional_info: dict[str, Any] = field(default_factory=dict)


class CodesurgeonError(Exception):
    """Base error class for Codesurgeon."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        user_message: str,
        severity: str = ErrorSeverity.MEDIUM,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.severity = severity
        self.user_message = user_message
        self.context = context or ErrorContext()
        self.original_error = original_error

        self.context.timestamp = utcnow()

    def get_formatted_message(self) -> str:
        """Get a formatted error message for display to users."""
        parts = [
            f"[Error] {self.user_message}",
            f"   Code: {self.code.value}",
        ]

        if self.context.operation:
            parts.append(f"   Operation: {self.context.operation}")
        if self.context.file_path:
            parts.append(f"   File: {self.context.file_path}")
        if self.context.component:
            parts.append(f"   Component: {self.context.component}")

        return "\n".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "name": self.__class__.__name__,
            "code": self.code.value,
            "message": str(self),
            "user_message": self.user_message,
            "severity": self.severity,
            "context": {
                "operation": self.context.operation,
                "file_path": self.context.file_path,
                "component": self.context.component,
                "timestamp": self.context.timestamp.isoformat(),
                "additional_info": self.context.additional_info,
            },
            "original_error": str(self.original_error) if self.original_error else None,
        }


class ParseError(CodesurgeonError):
    """Source text could not be parsed.

    ``line`` and ``column`` are 1-indexed and point at the first
    erroneous or missing token in source order.
    """

    def __init__(
        self,
        message: str,
        line: int,
        column: int,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.PARSE_FAILED,
            message=f"{message} at line {line}, column {column}",
            user_message="Source text could not be parsed.",
            severity=ErrorSeverity.HIGH,
            context=context,
        )
        self.reason = message
        self.line = line
        self.column = column

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["line"] = self.line
        result["column"] = self.column
        return result


class TargetError(CodesurgeonError, ValueError):
    """An extraction target is neither a name nor a (name, new_name) pair."""

    def __init__(self, message: str, context: ErrorContext | None = None) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ARGS,
            message=message,
            user_message="Invalid extraction target.",
            severity=ErrorSeverity.MEDIUM,
            context=context,
        )


class ConfigurationError(CodesurgeonError):
    """Error related to configuration issues."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.INVALID_CONFIG,
            message=message,
            user_message=user_message or "Configuration error occurred.",
            severity=ErrorSeverity.HIGH,
            context=context,
            original_error=original_error,
        )


class PackageMetadataError(CodesurgeonError):
    """package.json is missing, unreadable, or not an object."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.INVALID_PACKAGE,
            message=message,
            user_message="Package metadata could not be loaded.",
            severity=ErrorSeverity.HIGH,
            context=context,
            original_error=original_error,
        )


class MinifyError(CodesurgeonError):
    """The minifier rejected the output buffer."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.MINIFY_FAILED,
            message=message,
            user_message="Output could not be minified.",
            severity=ErrorSeverity.MEDIUM,
            context=context,
            original_error=original_error,
        )
