"""
Tests for top-level classification and matching.
"""

import pytest

from codesurgeon.extraction import (
    UNRESOLVED_SEGMENT,
    AssignmentEntity,
    ClassEntity,
    DeclarationEntity,
    EntityShape,
    FunctionEntity,
    classify,
    is_resolved,
    rename_edit,
)
from codesurgeon.types.core import ExtractionTarget


def _entities(builder, matcher, source):
    return list(matcher.entities(builder.build(source)))


def _match(builder, matcher, source, *targets):
    tree = builder.build(source)
    return matcher.match(tree, [ExtractionTarget.parse(t) for t in targets])


class TestClassification:
    """Each statement shape gets the right entity and name."""

    def test_var_declaration(self, builder, matcher):
        (entity,) = _entities(builder, matcher, "var Alpha = 1;")
        assert isinstance(entity, DeclarationEntity)
        assert entity.shape is EntityShape.DECLARATION
        assert entity.name == "Alpha"
        assert entity.keyword == "var"

    @pytest.mark.parametrize("keyword", ["let", "const"])
    def test_lexical_declaration(self, builder, matcher, keyword):
        (entity,) = _entities(builder, matcher, f"{keyword} Limit = 10;")
        assert isinstance(entity, DeclarationEntity)
        assert entity.name == "Limit"
        assert entity.keyword == keyword

    def test_first_binding_names_multi_declaration(self, builder, matcher):
        (entity,) = _entities(builder, matcher, "var first = 1, second = 2;")
        assert entity.name == "first"

    def test_destructuring_is_unresolved(self, builder, matcher):
        (entity,) = _entities(builder, matcher, "var { a, b } = source;")
        assert entity.name == UNRESOLVED_SEGMENT
        assert not is_resolved(entity)

    def test_member_assignment_path(self, builder, matcher):
        (entity,) = _entities(builder, matcher, "exports.Foo.Bar = function () {};")
        assert isinstance(entity, AssignmentEntity)
        assert entity.path == ("exports", "Foo", "Bar")
        assert entity.name == "exports.Foo.Bar"
        assert entity.is_assignment

    def test_export_roots_add_short_alias(self, builder, matcher):
        (entity,) = _entities(builder, matcher, "module.exports.Foo.helper = 1;")
        assert entity.names == ("module.exports.Foo.helper", "Foo.helper")

    @pytest.mark.parametrize("source", ["exports.helper = helper;", "module.exports.helper = 1;"])
    def test_single_segment_export_has_no_alias(self, builder, matcher, source):
        (entity,) = _entities(builder, matcher, source)
        assert entity.names == (entity.name,)

    def test_plain_identifier_assignment(self, builder, matcher):
        (entity,) = _entities(builder, matcher, "counter = 0;")
        assert entity.path == ("counter",)

    def test_expression_statement_is_named_by_its_chain(self, builder, matcher):
        (entity,) = _entities(builder, matcher, "console.log;")
        assert isinstance(entity, AssignmentEntity)
        assert entity.name == "console.log"
        assert not entity.is_assignment

    def test_computed_access_is_unresolved(self, builder, matcher):
        (entity,) = _entities(builder, matcher, "this.value = 1;")
        assert entity.path == (UNRESOLVED_SEGMENT, "value")
        assert not is_resolved(entity)

    def test_call_statement_is_unresolved(self, builder, matcher):
        (entity,) = _entities(builder, matcher, "run();")
        assert not is_resolved(entity)

    def test_function_declaration(self, builder, matcher):
        (entity,) = _entities(builder, matcher, "function helper(a) { return a; }")
        assert isinstance(entity, FunctionEntity)
        assert entity.name == "helper"
        assert not entity.is_generator

    def test_generator_declaration(self, builder, matcher):
        (entity,) = _entities(builder, matcher, "function* numbers() { yield 1; }")
        assert isinstance(entity, FunctionEntity)
        assert entity.is_generator

    def test_class_declaration(self, builder, matcher):
        (entity,) = _entities(builder, matcher, "class Widget { render() {} }")
        assert isinstance(entity, ClassEntity)
        assert entity.name == "Widget"

    def test_other_statements_are_ignored(self, builder, matcher):
        source = "if (ready) { start(); }\nfor (;;) { break; }\n"
        assert _entities(builder, matcher, source) == []

    def test_classify_ignores_non_statements(self, builder):
        tree = builder.build("var a = 1;")
        assert classify(tree.root, tree) is None


class TestTopLevelOnly:
    """Nested declarations never match."""

    NESTED = (
        "function outer() {\n"
        "    var Alpha = 2;\n"
        "    function helper() {}\n"
        "    exports.Foo = 1;\n"
        "    class Inner {}\n"
        "}\n"
        "if (true) { var Beta = 1; }\n"
        "{ let Gamma = 3; }\n"
    )

    def test_nested_names_do_not_match(self, builder, matcher):
        slots = _match(
            builder, matcher, self.NESTED,
            "Alpha", "helper", "exports.Foo", "Inner", "Beta", "Gamma",
        )
        assert slots.filled() == []

    def test_only_the_outer_function_is_an_entity(self, builder, matcher):
        names = [e.name for e in _entities(builder, matcher, self.NESTED)]
        assert names == ["outer"]


class TestMatching:
    """Slots are filled in request order."""

    SOURCE = "var a=1;\nvar b=2;\nvar c=3;\n"

    def test_request_order_not_source_order(self, builder, matcher):
        slots = _match(builder, matcher, self.SOURCE, "c", "a", "b")
        assert slots.filled() == ["var c=3;", "var a=1;", "var b=2;"]

    def test_missing_names_leave_empty_slots(self, builder, matcher):
        slots = _match(builder, matcher, self.SOURCE, "a", "Missing", "c")
        assert slots.values == ["var a=1;", None, "var c=3;"]
        assert slots.missing() == [1]

    def test_duplicate_requests_each_get_a_slot(self, builder, matcher):
        slots = _match(builder, matcher, self.SOURCE, "a", "a")
        assert slots.filled() == ["var a=1;", "var a=1;"]

    def test_last_declaration_wins(self, builder, matcher):
        source = 'function helper() { return "a"; }\nfunction helper() { return "b"; }\n'
        slots = _match(builder, matcher, source, "helper")
        assert slots.filled() == ['function helper() { return "b"; }']

    def test_second_binding_of_multi_declaration_does_not_match(self, builder, matcher):
        slots = _match(builder, matcher, "var a = 1, b = 2;", "a", "b")
        assert slots.values == ["var a = 1, b = 2;", None]

    def test_alias_and_full_path_match_the_same_statement(self, builder, matcher):
        source = "exports.Foo.Bar = function(){};"
        slots = _match(builder, matcher, source, "Foo.Bar", "exports.Foo.Bar")
        assert slots.filled() == [source, source]

    def test_export_of_a_declaration_does_not_shadow_it(self, builder, matcher):
        source = "function helper(x) {\n    return x;\n}\nexports.helper = helper;\n"
        slots = _match(builder, matcher, source, "helper", "exports.helper")
        assert slots.filled() == [
            "function helper(x) {\n    return x;\n}",
            "exports.helper = helper;",
        ]

    def test_exported_variable_still_matches_its_declaration(self, builder, matcher):
        slots = _match(builder, matcher, "var a = 1;\nexports.a = a;\n", "a")
        assert slots.filled() == ["var a = 1;"]

    def test_no_requests(self, builder, matcher):
        assert len(_match(builder, matcher, self.SOURCE)) == 0


class TestRename:
    """Renames touch the declaration site only."""

    def test_rename_declaration(self, builder, matcher):
        source = "var Alpha = 1;\nvar Other = Alpha + 1;\n"
        slots = _match(builder, matcher, source, ("Alpha", "Beta"), "Other")
        assert slots.filled() == ["var Beta = 1;", "var Other = Alpha + 1;"]

    def test_rename_function_keeps_body(self, builder, matcher):
        source = "function helper(a) { return helper(a - 1); }"
        slots = _match(builder, matcher, source, ("helper", "assist"))
        assert slots.filled() == ["function assist(a) { return helper(a - 1); }"]

    def test_rename_class(self, builder, matcher):
        slots = _match(builder, matcher, "class Widget {}", ("Widget", "Gadget"))
        assert slots.filled() == ["class Gadget {}"]

    def test_rename_assignment_replaces_last_segment(self, builder, matcher):
        source = "exports.Foo.Bar = function(){};"
        slots = _match(builder, matcher, source, ("Foo.Bar", "Baz"))
        assert slots.filled() == ["exports.Foo.Baz = function(){};"]

    def test_rename_assignment_with_dotted_new_name(self, builder, matcher):
        source = "exports.Foo.Bar = 1;"
        slots = _match(builder, matcher, source, ("exports.Foo.Bar", "x.y.Qux"))
        assert slots.filled() == ["exports.Foo.Qux = 1;"]

    def test_rename_does_not_leak_into_later_matches(self, builder, matcher):
        tree = builder.build("var Alpha = 1;")
        renamed = matcher.match(tree, [ExtractionTarget("Alpha", "Beta")])
        plain = matcher.match(tree, [ExtractionTarget("Alpha")])
        assert renamed.filled() == ["var Beta = 1;"]
        assert plain.filled() == ["var Alpha = 1;"]

    def test_unresolved_declaration_has_no_rename_edit(self, builder, matcher):
        (entity,) = _entities(builder, matcher, "var [a, b] = pair;")
        assert rename_edit(entity, "renamed") is None

    def test_rename_edit_spans_the_name(self, builder, matcher):
        source = "function helper() {}"
        (entity,) = _entities(builder, matcher, source)
        edit = rename_edit(entity, "assist")
        assert source.encode()[edit.start_byte:edit.end_byte] == b"helper"
        assert edit.replacement == "assist"
