"""
Tests for closure wrapping.
"""

import re

import pytest

from codesurgeon.postprocess import WrapOptions, WrapType, default_identifier, wrap
from codesurgeon.types.errors import ConfigurationError


class TestExpressionWrap:
    def test_defaults(self):
        assert wrap("var a = 1;") == (
            "\n"
            "(function (exports) {\n"
            "\n"
            "var a = 1;\n"
            "\n"
            "}(window));"
        )

    def test_injected_code_and_signature(self):
        options = WrapOptions(
            signature="root, $",
            params="this, jQuery",
            outside="'use strict';",
            before="var local = {};",
            after="root.local = local;",
        )
        assert wrap("BODY", options) == (
            "'use strict';\n"
            "(function (root, $) {\n"
            "var local = {};\n"
            "BODY\n"
            "root.local = local;\n"
            "}(this, jQuery));"
        )


class TestDeclarationWrap:
    def test_instance_declaration(self):
        options = WrapOptions(type="declaration", identifier="Mod", instance=True)
        assert wrap("return 1;", options) == (
            "var Mod = new function (exports) {\n"
            "\n"
            "return 1;\n"
            "\n"
            "};"
        )

    def test_plain_declaration(self):
        options = WrapOptions(type=WrapType.DECLARATION, identifier="Mod")
        assert wrap("x;", options).startswith("var Mod = function (exports) {\n")

    def test_generated_identifier(self):
        result = wrap("x;", WrapOptions(type="declaration"))
        assert re.match(r"var i\d+ = function \(exports\) \{", result)

    def test_default_identifier_shape(self):
        assert re.fullmatch(r"i\d+", default_identifier())


class TestInvalidWrap:
    def test_unknown_type(self):
        with pytest.raises(ConfigurationError):
            wrap("x;", WrapOptions(type="module"))
