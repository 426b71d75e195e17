"""package.json metadata: banner text, versioned filenames, known deps."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from codesurgeon.constants import DEFAULT_OWNER, SOURCE_SUFFIX, utcnow
from codesurgeon.types.errors import ErrorContext, PackageMetadataError


def _author_name(author: Any) -> str | None:
    """package.json allows ``"Name <mail>"`` or ``{"name": ...}``."""
    if isinstance(author, str):
        return author or None
    if isinstance(author, dict):
        name = author.get("name")
        return name if isinstance(name, str) and name else None
    return None


@dataclass
class PackageMetadata:
    """The parts of package.json the session uses."""

    version: str
    name: str | None = None
    author: str | None = None
    dependencies: dict[str, str] = field(default_factory=dict)
    path: str | None = None

    @classmethod
    def from_dict(cls, data: Any, path: str | None = None) -> PackageMetadata:
        context = ErrorContext(operation="package", file_path=path, component="package")
        if not isinstance(data, dict):
            raise PackageMetadataError("package.json must contain an object", context=context)

        version = data.get("version")
        if not isinstance(version, str) or not version:
            raise PackageMetadataError("package.json has no version string", context=context)

        dependencies = data.get("dependencies") or {}
        if not isinstance(dependencies, dict):
            raise PackageMetadataError("package.json dependencies must be an object", context=context)

        return cls(
            version=version,
            name=data.get("name") if isinstance(data.get("name"), str) else None,
            author=_author_name(data.get("author")),
            dependencies={str(k): str(v) for k, v in dependencies.items()},
            path=path,
        )

    @classmethod
    def load(cls, path: str | Path) -> PackageMetadata:
        """Read and validate a package.json file.

        Raises:
            PackageMetadataError: If the file is unreadable or invalid.
        """
        path = str(path)
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise PackageMetadataError(
                f"Cannot load package metadata from {path}: {e}",
                context=ErrorContext(operation="package", file_path=path, component="package"),
                original_error=e,
            ) from e
        return cls.from_dict(data, path=path)

    def banner(self, owner: str | None = None, now: datetime | None = None) -> str:
        """Comment block prepended to written files."""
        owner = owner or self.author or DEFAULT_OWNER
        now = now or utcnow()
        return "\n".join([
            "//",
            f"// Generated on {now.strftime('%a %b %d %Y %H:%M:%S %Z')} by {owner}",
            f"// Version {self.version}",
            "//\n",
        ])

    def versioned_filename(self, path: str) -> str:
        return versioned_filename(path, self.version)

    def add_dependencies(self, names: list[str], specifier: str = "*") -> list[str]:
        """Record unknown dependencies; return the ones that were new."""
        added = []
        for name in names:
            if name not in self.dependencies:
                self.dependencies[name] = specifier
                added.append(name)
        return added


def versioned_filename(path: str, version: str) -> str:
    """Splice ``-<version>`` in before the final extension of a .js path.

    >>> versioned_filename("dist/bundle.min.js", "1.2.0")
    'dist/bundle.min-1.2.0.js'
    """
    if not path.endswith(SOURCE_SUFFIX):
        return path
    return f"{path[: -len(SOURCE_SUFFIX)]}-{version}{SOURCE_SUFFIX}"
