"""
Logging utility for Codesurgeon.

All diagnostics go through loguru. The CLI installs a single stderr sink
via ``configure_logging``; library users keep whatever sinks they have.

Session IDs:
- Each ``Codesurgeon`` session binds a short ID to its log records
- Format: cs_<timestamp_base36>_<random_hex>
"""

import os
import secrets
import sys
import time

from loguru import logger as loguru_logger


def generate_session_id() -> str:
    """
    Generate a unique session ID for log correlation.

    Format: cs_<timestamp_base36>_<random_hex>
    """
    timestamp = int(time.time() * 1000)
    random_part = secrets.token_hex(4)
    return f"cs_{base36_encode(timestamp)}_{random_part}"


def base36_encode(number: int) -> str:
    """Encode an integer to base36 string."""
    if number == 0:
        return "0"

    chars = "0123456789abcdefghijklmnopqrstuvwxyz"
    result = []
    while number:
        result.append(chars[number % 36])
        number //= 36
    return "".join(reversed(result))


# ============================================================================
# Logger Configuration
# ============================================================================


def is_debug_enabled() -> bool:
    """Check if debug mode is enabled."""
    return os.environ.get("DEBUG", "").lower() == "true"


def configure_logging(debug: bool | None = None) -> None:
    """Replace loguru's sinks with a single stderr sink.

    STDOUT stays reserved for extracted source so the CLI can be piped.
    """
    if debug is None:
        debug = is_debug_enabled()

    loguru_logger.remove()
    loguru_logger.add(
        sys.stderr,
        level="DEBUG" if debug else "INFO",
        format="<level>{level: <8}</level> | {message}",
    )


# Export loguru logger for direct use
logger = loguru_logger
