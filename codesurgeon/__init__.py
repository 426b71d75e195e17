"""
Codesurgeon - extract top-level JavaScript declarations into new bundles.

Given one or more source files and a list of top-level names, Codesurgeon
parses the sources with tree-sitter, picks out exactly those declarations
(variables, functions, classes and member assignments such as
``exports.Foo = ...``), optionally renames them, and writes them back out
in the requested order, wrapped, minified or validated as asked.
"""

__version__ = "0.1.0"

from codesurgeon.config import SurgeonConfig
from codesurgeon.session import Codesurgeon, SurgeonContext
from codesurgeon.types import (
    CodesurgeonError,
    ExtractionTarget,
    ParseError,
    SourceDocument,
)

__all__ = [
    "Codesurgeon",
    "CodesurgeonError",
    "ExtractionTarget",
    "ParseError",
    "SourceDocument",
    "SurgeonConfig",
    "SurgeonContext",
    "__version__",
]
