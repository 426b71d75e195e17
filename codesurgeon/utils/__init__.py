"""
Codesurgeon utility modules.

- Logging (loguru, session IDs)
"""

from .logger import (
    base36_encode,
    configure_logging,
    generate_session_id,
    is_debug_enabled,
    logger,
)

__all__ = [
    "base36_encode",
    "configure_logging",
    "generate_session_id",
    "is_debug_enabled",
    "logger",
]
