"""Tests for the statement grammar and canonical rendering."""

from pathlib import Path

import pytest

from yangkit.core.errors import ParseError
from yangkit.core.grammar import parse_document, parse_file, parse_statement
from yangkit.core.settings import IdentifierPolicy, ParserSettings


def child_names(result) -> list[str]:
    return [c.name for c in result.tree.children_of(result.root.id)]


# ---------------------------------------------------------------------------
# Successful parses
# ---------------------------------------------------------------------------


class TestParseStatement:
    def test_simple_statement(self):
        result = parse_statement("leaf x;")
        root = result.root
        assert root.name == "leaf"
        assert root.prefix is None
        assert root.argument == "x"
        assert root.children == ()
        assert str(root.position) == "1:1"
        assert result.tree.root == root.id

    def test_prefixed_keyword(self):
        root = parse_statement('ex:annotation "note";').root
        assert root.prefix == "ex"
        assert root.name == "annotation"
        assert root.keyword == "ex:annotation"
        assert root.argument == "note"

    def test_statement_without_argument(self):
        root = parse_statement("input;").root
        assert root.argument is None

    def test_quoted_and_unquoted_arguments_are_equal(self):
        assert parse_statement('leaf "a";').root.argument == parse_statement("leaf a;").root.argument

    def test_block_with_children(self):
        text = "container c {\n  leaf a;\n  leaf b { type string; }\n}"
        result = parse_statement(text)
        tree = result.tree
        assert child_names(result) == ["leaf", "leaf"]

        a, b = tree.children_of(result.root.id)
        assert a.argument == "a"
        assert a.parent == result.root.id
        assert str(a.position) == "2:3"
        assert tree.first_child(b.id, "type").argument == "string"
        assert len(tree) == 4

    def test_argument_directly_before_brace(self):
        result = parse_statement("container c{leaf a;}")
        assert result.root.argument == "c"
        assert child_names(result) == ["leaf"]

    def test_empty_block(self):
        result = parse_statement("container c {}")
        assert result.root.children == ()

    def test_comments_between_statements(self):
        text = "container c { // first\n  /* block */ leaf a; // after\n}"
        assert child_names(parse_statement(text)) == ["leaf"]

    def test_position_recorded_after_leading_whitespace(self):
        root = parse_statement("\n\n  leaf x;").root
        assert root.position.line == 3
        assert root.position.column == 3

    def test_position_recorded_at_prefix(self):
        root = parse_statement("   ex:foo;").root
        assert root.position.column == 4

    def test_rest_of_input_left_for_caller(self):
        result = parse_statement("leaf a; leaf b;")
        assert result.remainder == "leaf b;"
        assert str(result.end) == "1:9"

    def test_concatenated_argument(self):
        root = parse_statement('description "a" + "b";').root
        assert root.argument == "ab"

    @pytest.mark.parametrize("newline", ["\r", "\r\n"])
    def test_carriage_return_positions(self, newline):
        result = parse_statement(f"x {{{newline}  y z;{newline}}}")
        child = result.tree.first_child(result.root.id, "y")
        assert (child.position.line, child.position.column) == (2, 3)

    @pytest.mark.parametrize("newline", ["\r", "\r\n"])
    def test_carriage_return_dedent_matches_line_feed(self, newline):
        text = 'x {\n  y "a\n          b";\n}'
        expected = parse_statement(text).tree.to_dict()
        assert parse_statement(text.replace("\n", newline)).tree.to_dict() == expected
        assert expected["children"][0]["argument"] == "a\n     b"

    def test_deep_nesting(self):
        depth = 1500
        result = parse_document("a {" * depth + "}" * depth)
        assert len(result.tree) == depth
        innermost = list(result.tree.walk())[-1]
        assert len(list(result.tree.ancestors(innermost.id))) == depth - 1

    def test_deep_nesting_error_names_innermost_block(self):
        with pytest.raises(ParseError) as exc_info:
            parse_statement("a {" * 1500 + "b {;")
        assert "in block of 'b'" in exc_info.value.message


# ---------------------------------------------------------------------------
# Syntax errors
# ---------------------------------------------------------------------------


class TestParseErrors:
    def test_missing_terminator(self):
        with pytest.raises(ParseError) as exc_info:
            parse_statement("leaf x")
        error = exc_info.value
        assert error.expected == "';' or '{'"
        assert (error.line, error.column) == (1, 7)

    def test_unclosed_block(self):
        with pytest.raises(ParseError) as exc_info:
            parse_statement("container c {\n  leaf a;\n")
        assert exc_info.value.expected == "statement or '}'"
        assert exc_info.value.line == 3

    def test_invalid_child(self):
        with pytest.raises(ParseError) as exc_info:
            parse_statement("container c { 123; }")
        assert exc_info.value.column == 15

    def test_keyword_must_be_identifier(self):
        with pytest.raises(ParseError) as exc_info:
            parse_statement('"leaf" x;')
        assert exc_info.value.expected == "identifier"

    def test_missing_name_after_prefix(self):
        with pytest.raises(ParseError):
            parse_statement("ex: foo;")

    def test_error_message_names_file_and_position(self):
        with pytest.raises(ParseError) as exc_info:
            parse_statement("leaf x", file=Path("model.yang"))
        text = str(exc_info.value)
        assert "model.yang:1:7" in text
        assert "^^^" in text

    def test_error_without_file(self):
        with pytest.raises(ParseError) as exc_info:
            parse_statement("leaf {")
        assert "<string>:1:7" in str(exc_info.value)

    def test_legacy_policy_rejects_keywords(self):
        settings = ParserSettings(identifier_policy=IdentifierPolicy.LEGACY)
        with pytest.raises(ParseError):
            parse_statement("leaf x;", settings=settings)
        assert parse_statement("type x;", settings=settings).root.name == "type"


# ---------------------------------------------------------------------------
# Documents and files
# ---------------------------------------------------------------------------


class TestParseDocument:
    def test_trailing_content_rejected(self):
        with pytest.raises(ParseError) as exc_info:
            parse_document("leaf a; leaf b;")
        error = exc_info.value
        assert "trailing content" in error.message
        assert error.expected == "end of input"
        assert (error.line, error.column) == (1, 9)

    def test_trailing_whitespace_and_comments_allowed(self):
        result = parse_document("leaf a; // done\n/* really */\n")
        assert result.root.argument == "a"
        assert result.remainder == ""

    def test_parse_file(self, example_module_file: Path):
        result = parse_file(example_module_file)
        assert result.root.name == "module"
        assert result.root.argument == "example"

    def test_parse_file_error_names_file(self, tmp_path: Path):
        path = tmp_path / "broken.yang"
        path.write_text("module broken {\n  leaf x\n}\n")
        with pytest.raises(ParseError) as exc_info:
            parse_file(path)
        assert exc_info.value.context.file == path
        assert exc_info.value.line == 3

    def test_multi_line_description(self, example_tree):
        description = example_tree.first_child(example_tree.root, "description")
        assert description.argument == "Types used by the\nexample module."


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


ROUND_TRIP_DOCUMENTS = [
    "leaf x;",
    "container c { leaf a { type string; } leaf-list b; }",
    'ex:annotation "with spaces" { ex:nested; }',
    'description "tab\\there \\"quoted\\" back\\\\slash";',
    "pattern '[a-z]+\\d*';",
    'description "";',
    'description "line one\n    line two";',
    'container c {\n  description\n    "first\n       indented\n\n     last";\n}',
]


class TestRender:
    def test_canonical_form(self):
        result = parse_document("container c{leaf a;ex:flag;}")
        assert result.tree.render() == 'container "c" {\n  leaf "a";\n  ex:flag;\n}\n'

    def test_render_subtree(self):
        result = parse_document("container c { leaf a { type string; } }")
        leaf = result.tree.first_child(result.root.id, "leaf")
        assert result.tree.render(leaf.id) == 'leaf "a" {\n  type "string";\n}\n'

    def test_multi_line_argument_padding(self):
        result = parse_document('description "one\n             two";')
        assert result.root.argument == "one\ntwo"
        assert result.tree.render() == 'description "one\\n             two";\n'

    @pytest.mark.parametrize("text", ROUND_TRIP_DOCUMENTS)
    def test_round_trip(self, text):
        first = parse_document(text)
        second = parse_document(first.tree.render())
        assert second.tree.to_dict(positions=False) == first.tree.to_dict(positions=False)

    def test_round_trip_example_module(self, example_module_text):
        first = parse_document(example_module_text)
        second = parse_document(first.tree.render())
        assert second.tree.to_dict(positions=False) == first.tree.to_dict(positions=False)

    def test_to_dict_positions(self):
        data = parse_document("container c {\n  leaf a;\n}").tree.to_dict()
        assert data["line"] == 1
        assert data["children"][0]["line"] == 2
        assert data["children"][0]["column"] == 3
        assert data["children"][0]["children"] == []

    def test_deeply_nested_output(self):
        depth = 1500
        result = parse_document("a {" * depth + "b;" + "}" * depth)
        rendered = result.tree.render()
        lines = rendered.splitlines()
        assert len(lines) == 2 * depth + 1
        assert lines[depth] == "  " * depth + "b;"
        assert lines[-1] == "}"

        data = result.tree.to_dict(positions=False)
        for _ in range(depth):
            [data] = data["children"]
        assert data["name"] == "b"
        assert parse_document(rendered).tree.render() == rendered
