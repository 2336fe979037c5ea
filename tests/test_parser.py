"""
Tests for the parser facade and the tree-sitter to Node conversion.
"""

import pytest

from gocodemod.exceptions import ParseError
from gocodemod.parser import parse_source, validate_syntax
from gocodemod.tree import Position


SOURCE = """package main

import "fmt"

func main() {
	total := 1 + 2
	fmt.Println(total)
}
"""


class TestParseSource:
    """Test parse_source on whole files."""

    def test_root_is_source_file(self):
        """The root node is the file, starting with its package clause."""
        root = parse_source(SOURCE)
        assert root.type == "source_file"
        assert [c.type for c in root.named()] == [
            "package_clause",
            "import_declaration",
            "function_declaration",
        ]

    def test_accepts_bytes(self):
        """Byte input parses like text input."""
        root = parse_source(SOURCE.encode("utf-8"))
        assert root.named()[0].type == "package_clause"

    def test_positions_are_zero_based(self):
        """Nodes keep the rows and columns they were parsed from."""
        root = parse_source(SOURCE)
        function = root.named()[2]
        assert function.start == Position(4, 0)
        assert function.end.row == 7

    def test_syntax_error_raises(self):
        """Broken Go is rejected with the file label in the error."""
        with pytest.raises(ParseError) as exc_info:
            parse_source("package main\n\nfunc main() {\n", file_path="broken.go")
        assert exc_info.value.file_path == "broken.go"
        assert "broken.go" in str(exc_info.value)

    def test_missing_package_clause_raises(self):
        """A file must start with a package clause."""
        with pytest.raises(ParseError, match="package"):
            parse_source("func main() {}\n")

    def test_top_level_statement_raises(self):
        """Statements outside a function body are not valid Go."""
        with pytest.raises(ParseError):
            parse_source("package main\n\nx := 1\n")

    def test_default_label(self):
        """Errors without a file path use a placeholder label."""
        with pytest.raises(ParseError) as exc_info:
            parse_source("package main\nfunc (\n")
        assert exc_info.value.file_path == "<source>"


class TestConversion:
    """Test the shape of converted trees."""

    def test_block_statements_are_direct_children(self):
        """Statement lists are flattened into their block."""
        root = parse_source(SOURCE)
        body = root.named()[2].child("body")
        assert body.type == "block"
        assert [c.type for c in body.children] == ["short_var_declaration", "expression_statement"]

    def test_binary_operator_recorded(self):
        """Anonymous operator tokens are kept on the node."""
        root = parse_source(SOURCE)
        assignment = root.named()[2].child("body").children[0]
        value = assignment.child("right").named()[0]
        assert value.type == "binary_expression"
        assert value.operator == "+"
        assert value.child("left").text == "1"
        assert value.child("right").text == "2"

    def test_string_literal_is_leaf(self):
        """String literals keep their full quoted text."""
        root = parse_source(SOURCE)
        spec = root.named()[1].named()[0]
        assert spec.type == "import_spec"
        assert spec.child("path").text == '"fmt"'
        assert spec.child("path").is_leaf

    def test_comments_are_children(self):
        """Comments become leaves in the list they appear in."""
        root = parse_source("package main\n\n// Run starts everything.\nfunc Run() {\n\t// nothing yet\n}\n")
        assert root.children[1].is_comment
        assert root.children[1].text == "// Run starts everything."
        body = root.children[2].child("body")
        assert body.children[0].text == "// nothing yet"

    def test_keyed_elements_flattened(self):
        """Keys and values of composite literal elements are direct children."""
        root = parse_source('package main\n\nvar m = map[string]int{"a": 1}\n')
        literal = root.children[1].named()[0].child("value").named()[0]
        element = literal.child("body").named()[0]
        assert element.type == "keyed_element"
        assert element.child("key").text == '"a"'
        assert element.child("value").text == "1"

    def test_import_names_are_leaves(self):
        root = parse_source('package main\n\nimport (\n\t_ "embed"\n\t. "sync"\n)\n')
        specs = root.find_all(lambda n: n.type == "import_spec")
        assert [spec.child("name").text for spec in specs] == ["_", "."]

    def test_clause_ends_on_its_last_statement(self):
        """Statement terminators do not stretch a node onto the next row."""
        root = parse_source(
            "package main\n\nfunc f(s string) {\n\tswitch s {\n\tcase \"a\":\n\t\ta()\n\n\tcase \"b\":\n\t}\n}\n"
        )
        first, second = root.find_all(lambda n: n.type == "expression_case")
        assert first.end.row == 5
        assert second.blank_before

    def test_deep_operator_chain(self):
        """Conversion does not recurse once per nesting level."""
        terms = " + ".join(["x"] * 3000)
        root = parse_source(f"package main\n\nvar v = {terms}\n")
        chain = root.find_all(lambda n: n.type == "binary_expression")
        assert len(chain) == 2999
        assert root.copy().structurally_equal(root, layout=True)


class TestValidateSyntax:
    """Test validate_syntax."""

    def test_valid(self):
        assert validate_syntax(SOURCE) == (True, [])

    def test_invalid(self):
        ok, errors = validate_syntax("package main\n\nfunc main() {\n\tif {\n}\n")
        assert not ok
        assert len(errors) == 1
