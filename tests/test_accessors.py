"""
Tests for the parameter list, composite literal, import and package accessors.
"""

import pytest

from gocodemod import FieldNotFoundError, InvalidNodeError, parse
from gocodemod.mutation import Imports, MapLiteral, StructLiteral
from gocodemod.tree import Node


class TestParameterList:
    """Test ParameterList views and reordering."""

    def test_types_and_names(self):
        source_file = parse(
            "package main\n\nfunc handle(name string, ctx context.Context, opts ...Option) error {\n\treturn nil\n}\n"
        )
        params = source_file.functions()[0].params()
        assert len(params) == 3
        assert params.types() == ["string", "context.Context", "...Option"]
        assert params.names() == [["name"], ["ctx"], ["opts"]]

    def test_move_to_front(self):
        source_file = parse("package main\n\nfunc handle(name string, ctx context.Context) {}\n")
        params = source_file.functions()[0].params()
        assert params.move_to_front(".Context")
        assert params.move_to_front(".Context") is False
        assert source_file.print() == "package main\n\nfunc handle(ctx context.Context, name string) {}\n"

    def test_swap_to_front_last_match_wins(self):
        source_file = parse("package main\n\nfunc f(a A, b x.Context, c y.Context) {}\n")
        params = source_file.functions()[0].params()
        assert params.swap_to_front("Context") == 2
        assert [n[0] for n in params.names()] == ["c", "a", "b"]

    def test_swap(self):
        source_file = parse("package main\n\nfunc f(a int, b string) {}\n")
        params = source_file.functions()[0].params()
        params.swap(0, 1)
        assert "func f(b string, a int) {}" in source_file.print()

    def test_no_parameters(self):
        source_file = parse("package main\n\nfunc f() {}\n")
        params = source_file.functions()[0].params()
        assert len(params) == 0
        assert params.swap_to_front("Context") == 0


class TestMapLiteral:
    """Test MapLiteral lookups and key edits."""

    SOURCE = """package main

func main() {
	settings := map[string]string{
		"transaction_isolation": "read committed",
		"timeout":               "5s",
	}
	_ = settings
}
"""

    def literal(self, source_file):
        _, literal = source_file.find_map_literal("map[string]string")
        return literal

    def test_lookup(self):
        literal = self.literal(parse(self.SOURCE))
        assert literal.keys() == ["transaction_isolation", "timeout"]
        assert literal.has("timeout")
        assert literal.get("timeout").text == '"5s"'
        assert literal.get("missing") is None

    def test_remove_key(self):
        source_file = parse(self.SOURCE)
        literal = self.literal(source_file)
        assert literal.remove_key("timeout") == 1
        assert literal.remove_key("timeout") == 0
        assert '\t\t"transaction_isolation": "read committed",\n\t}' in source_file.print()

    def test_rename_absent_key_is_noop(self):
        source_file = parse(self.SOURCE)
        assert self.literal(source_file).rename_key("missing", "other") == 0
        assert source_file.print() == self.SOURCE

    def test_rename_non_string_key(self):
        source_file = parse('package main\n\nvar codes = map[int]string{1: "one"}\n')
        (found,) = source_file.map_literals("map[int]string").values()
        assert found[0].rename_key("1", "2") == 1
        assert source_file.print() == 'package main\n\nvar codes = map[int]string{2: "one"}\n'

    def test_requires_composite_literal(self):
        with pytest.raises(InvalidNodeError):
            MapLiteral(Node.leaf("identifier", "settings"))


class TestStructLiteral:
    """Test StructLiteral fields."""

    SOURCE = 'package main\n\nfunc main() {\n\tcfg := Config{Name: "a"}\n\t_ = cfg\n}\n'

    def literal(self, source_file) -> StructLiteral:
        (found,) = source_file.find_assignments("cfg").values()
        return found[0].struct()

    def test_fields(self):
        literal = self.literal(parse(self.SOURCE))
        assert literal.type_name == "Config"
        assert literal.fields() == ["Name"]
        assert literal.field("Name").text == '"a"'

    def test_missing_field_raises(self):
        literal = self.literal(parse(self.SOURCE))
        with pytest.raises(FieldNotFoundError) as exc_info:
            literal.field("Port")
        assert str(exc_info.value) == "Config doesn't have a field called 'Port'"
        with pytest.raises(KeyError):
            literal.field("Port")

    def test_set_new_field(self):
        source_file = parse(self.SOURCE)
        self.literal(source_file).set_field("Port", "8080")
        assert '\tcfg := Config{Name: "a", Port: 8080}' in source_file.print()

    def test_set_existing_field(self):
        source_file = parse(self.SOURCE)
        self.literal(source_file).set_field("Name", '"b"')
        assert '\tcfg := Config{Name: "b"}' in source_file.print()


class TestImports:
    """Test Imports add/remove and Package renames."""

    def test_add_turns_single_import_into_group(self):
        source_file = parse('package main\n\nimport "errors"\n\nfunc main() {}\n')
        assert source_file.imports().add("fmt")
        assert source_file.print() == (
            'package main\n\nimport (\n\t"errors"\n\t"fmt"\n)\n\nfunc main() {}\n'
        )

    def test_add_is_idempotent(self):
        source = 'package main\n\nimport "fmt"\n'
        source_file = parse(source)
        assert source_file.imports().add("fmt") is False
        assert source_file.print() == source

    def test_add_creates_declaration(self):
        source_file = parse("package main\n\nfunc main() {}\n")
        source_file.imports().add("fmt")
        assert source_file.print() == 'package main\n\nimport "fmt"\n\nfunc main() {}\n'
        assert source_file.import_paths() == ["fmt"]

    def test_add_named_import_is_sorted(self):
        source_file = parse('package main\n\nimport (\n\t"os"\n\t"fmt"\n)\n')
        source_file.imports().add("github.com/acme/log", name="xlog")
        assert source_file.print() == (
            'package main\n\nimport (\n\t"fmt"\n\txlog "github.com/acme/log"\n\t"os"\n)\n'
        )

    def test_remove_from_group(self):
        source_file = parse('package main\n\nimport (\n\t"errors"\n\t"fmt"\n)\n')
        assert source_file.imports().remove("errors") == 1
        assert source_file.print() == 'package main\n\nimport (\n\t"fmt"\n)\n'

    def test_remove_last_import_drops_declaration(self):
        source_file = parse('package main\n\nimport "fmt"\n\nfunc main() {}\n')
        assert source_file.imports().remove("fmt") == 1
        assert source_file.print() == "package main\n\nfunc main() {}\n"

    def test_remove_absent_is_noop(self):
        source = 'package main\n\nimport "fmt"\n'
        source_file = parse(source)
        assert source_file.imports().remove("os") == 0
        assert source_file.print() == source

    def test_spans_all_declarations(self):
        source_file = parse('package main\n\nimport "fmt"\nimport "os"\n')
        imports = source_file.imports()
        assert imports.paths() == ["fmt", "os"]
        assert imports.contains("os")
        assert imports.remove("os") == 1
        assert source_file.print() == 'package main\n\nimport "fmt"\n'

    def test_requires_file_root(self):
        with pytest.raises(InvalidNodeError):
            Imports(Node("block"))

    def test_package_rename(self):
        source_file = parse("package main\n\nfunc main() {}\n")
        package = source_file.package()
        assert package.name == "main"
        package.set_name("app")
        assert source_file.print().startswith("package app\n")
