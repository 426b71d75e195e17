"""Shared constants and helpers for Codesurgeon.

Centralizes default separators, encodings, the parser language, and
timezone-aware datetime helpers.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime.

    Used directly as a ``default_factory`` in dataclass fields and for the
    generated-file banner.
    """
    return datetime.now(timezone.utc)


# Text placed between aggregated documents and between extracted fragments.
DEFAULT_SEPARATOR: str = "\n\n"

DEFAULT_ENCODING: str = "utf-8"

# Spaces per bracket level when regenerating extracted declarations.
DEFAULT_INDENT_WIDTH: int = 4

# tree-sitter-language-pack grammar used for every parse.
JAVASCRIPT_LANGUAGE: str = "javascript"

# Only destinations with this suffix get a version spliced into their name.
SOURCE_SUFFIX: str = ".js"

# Owner named in the banner when neither config nor package metadata has one.
DEFAULT_OWNER: str = "Codesurgeon."

# Separates the original name from the new one in CLI rename targets.
RENAME_DELIMITER: str = "="

# Stands in for a path segment that is not a plain identifier. Targets may
# not contain it, so an unanalyzable name never matches a request.
UNRESOLVED_SEGMENT: str = "<?>"
