"""Minify composed output with calmjs.parse.

``mangle`` shortens local bindings (globals are left alone so the output
keeps its public names); ``squeeze`` drops layout whitespace. With
neither, the output is simply re-printed with four-space indentation.
"""

from __future__ import annotations

from calmjs.parse import es5, rules
from calmjs.parse.exceptions import ECMASyntaxError, ProductionError
from calmjs.parse.lexers.es5 import Lexer
from calmjs.parse.unparsers.es5 import Unparser
from loguru import logger

from codesurgeon.types.errors import ErrorContext, MinifyError


class Minifier:
    """ES5 minifier / mangler."""

    def __init__(self, indent_str: str = "    "):
        self.indent_str = indent_str

    def run(self, text: str, mangle: bool = True, squeeze: bool = True) -> str:
        """Return ``text`` minified.

        Raises:
            MinifyError: If ``text`` is not valid ES5.
        """
        try:
            program = es5(text)
        except (ECMASyntaxError, ProductionError) as e:
            raise MinifyError(
                f"Cannot minify output: {e}",
                context=ErrorContext(operation="minify", component="minifier"),
                original_error=e,
            ) from e

        if squeeze:
            active_rules = [rules.minify(drop_semi=False)]
        else:
            active_rules = [rules.indent(indent_str=self.indent_str)]
        if mangle:
            active_rules.append(
                rules.obfuscate(reserved_keywords=Lexer.keywords_dict.keys())
            )

        unparser = Unparser(rules=active_rules)
        result = "".join(chunk.text for chunk in unparser(program))
        logger.debug(f"Minified {len(text)} -> {len(result)} characters")
        return result
