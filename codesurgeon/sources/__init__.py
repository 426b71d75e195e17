"""Source documents in, composed files out."""

from codesurgeon.sources.aggregator import SourceAggregator
from codesurgeon.sources.files import (
    ReadResult,
    WriteResult,
    read_source,
    read_sources,
    write_output,
    write_output_async,
)
from codesurgeon.sources.package import PackageMetadata, versioned_filename

__all__ = [
    "PackageMetadata",
    "ReadResult",
    "SourceAggregator",
    "WriteResult",
    "read_source",
    "read_sources",
    "versioned_filename",
    "write_output",
    "write_output_async",
]
