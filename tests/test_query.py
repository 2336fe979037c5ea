"""
Tests for SourceFile queries and Scope grouping.
"""

import pytest

from gocodemod import InvalidNodeError, parse


SOURCE = """package service

import (
	"context"
	"errors"
	"fmt"
)

var defaultClient = newClient()

type Store interface {
	Get(ctx context.Context, key string) (string, error)
	Put(ctx context.Context, key, value string) error
}

type Service struct {
	store Store
	name  string
}

type ID int

func (s *Service) Lookup(key string) (string, error) {
	value, err := s.store.Get(context.Background(), key)
	if err != nil {
		return "", errors.Wrapf(err, "lookup %s", key)
	}
	s.name = key
	return value, nil
}

func (s Service) Name() string {
	return s.name
}

func newClient() *Service {
	settings := map[string]string{
		"transaction_isolation": "read committed",
		"timeout":               "5s",
	}
	counts := map[string]int{"a": 1}
	settings["mode"] = "fast"
	counts["a"]++
	switch len(settings) {
	case 0:
		fmt.Println("empty")
	}
	var x interface{} = counts
	switch x.(type) {
	case int:
	}
	return &Service{name: "client"}
}
"""


@pytest.fixture
def source_file():
    return parse(SOURCE, file_path="service.go")


class TestFunctionCalls:
    """Test function_calls grouping and filtering."""

    def test_grouped_by_enclosing_function(self, source_file):
        calls = source_file.function_calls()
        names = {scope.name: [c.function_name for c in found] for scope, found in calls.items()}
        assert names[""] == ["newClient"]
        assert names["Lookup"] == ["s.store.Get", "context.Background", "errors.Wrapf"]
        assert names["newClient"] == ["len", "fmt.Println"]

    def test_top_level_scope(self, source_file):
        calls = source_file.function_calls("newClient")
        (scope,) = calls.keys()
        assert scope.is_top_level
        assert scope.node is None

    def test_filter_by_name(self, source_file):
        calls = source_file.function_calls("errors.Wrapf")
        assert len(calls) == 1
        (found,) = calls.values()
        assert len(found) == 1
        assert [a.type for a in found[0].args] == [
            "identifier",
            "interpreted_string_literal",
            "identifier",
        ]

    def test_unknown_name_is_empty(self, source_file):
        assert source_file.function_calls("os.Exit") == {}

    def test_scopes_compare_across_queries(self, source_file):
        """The same function gives equal scopes from different queries."""
        call_scopes = {s.name: s for s in source_file.function_calls()}
        if_scopes = list(source_file.if_statements())
        assert if_scopes[0] == call_scopes["Lookup"]
        assert hash(if_scopes[0]) == hash(call_scopes["Lookup"])

    def test_find_call_in_scope(self, source_file):
        scope = next(s for s in source_file.function_calls() if s.name == "Lookup")
        call = scope.find_call("errors.Wrapf")
        assert call is not None
        assert call.function_name == "errors.Wrapf"
        assert scope.find_call("fmt.Println") is None

    def test_find_call_on_top_level_scope(self, source_file):
        scope = next(s for s in source_file.function_calls() if s.is_top_level)
        assert scope.find_call("newClient") is None


class TestDeclarations:
    """Test functions() and type_declarations()."""

    def test_functions_in_source_order(self, source_file):
        functions = source_file.functions()
        assert [f.name for f in functions] == ["Lookup", "Name", "newClient"]
        assert functions[0].is_method
        assert not functions[2].is_method

    def test_function_params(self, source_file):
        lookup = source_file.functions()[0]
        assert lookup.params().types() == ["string"]
        assert lookup.receiver.types() == ["*Service"]

    def test_type_declarations(self, source_file):
        types = source_file.type_declarations()
        assert [t.name for t in types] == ["Store", "Service", "ID"]
        store, service, ident = types
        assert store.is_interface and not store.is_struct
        assert service.is_struct
        assert ident.is_type_alias

    def test_interface_methods(self, source_file):
        store = source_file.type_declarations()[0]
        methods = store.methods()
        assert [m.name for m in methods] == ["Get", "Put"]
        assert methods[1].params().types() == ["context.Context", "string"]
        assert methods[1].params().names() == [["ctx"], ["key", "value"]]

    def test_struct_methods_by_value_and_pointer(self, source_file):
        service = source_file.type_declarations()[1]
        assert [m.name for m in service.methods()] == ["Lookup", "Name"]

    def test_named_type_without_methods(self, source_file):
        assert source_file.type_declarations()[2].methods() == []


class TestAssignments:
    """Test assignments() and find_assignments()."""

    def test_all_assignments(self, source_file):
        assignments = source_file.assignments()
        by_scope = {scope.name: [a.operator for a in found] for scope, found in assignments.items()}
        assert by_scope["Lookup"] == [":=", "="]
        assert by_scope["newClient"] == [":=", ":=", "="]

    def test_find_by_identifier(self, source_file):
        found = source_file.find_assignments("settings")
        (matches,) = found.values()
        assert len(matches) == 2
        assert matches[1].source() == 'settings["mode"] = "fast"'
        assert matches[0].targets[0].text == "settings"

    def test_find_by_selector(self, source_file):
        found = source_file.find_assignments("s.name")
        (matches,) = found.values()
        assert len(matches) == 1
        assert matches[0].source() == "s.name = key"

    def test_find_by_index_expression(self, source_file):
        found = source_file.find_assignments('settings["mode"]')
        (matches,) = found.values()
        assert matches[0].values[0].text == '"fast"'

    def test_find_absent(self, source_file):
        assert source_file.find_assignments("missing") == {}


class TestStatements:
    """Test if and switch statement queries."""

    def test_if_statements(self, source_file):
        ifs = source_file.if_statements()
        (found,) = ifs.values()
        assert len(found) == 1
        assert found[0].source().startswith("if err != nil {")

    def test_switch_statements_include_type_switches(self, source_file):
        (found,) = source_file.switch_statements().values()
        assert [s.is_type_switch for s in found] == [False, True]
        assert found[0].value.type == "call_expression"
        assert len(found[0].cases()) == 1


class TestMapLiterals:
    """Test map_literals() and find_map_literal()."""

    def test_filter_by_type(self, source_file):
        (found,) = source_file.map_literals("map[string]string").values()
        assert len(found) == 1
        assert found[0].keys() == ["transaction_isolation", "timeout"]

    def test_type_text_is_normalized(self, source_file):
        (found,) = source_file.map_literals("map[ string ]int").values()
        assert found[0].get("a").text == "1"

    def test_find_map_literal(self, source_file):
        scope, literal = source_file.find_map_literal("map[string]string")
        assert scope.name == "newClient"
        assert literal.has("timeout")

    def test_find_absent_map_literal(self, source_file):
        assert source_file.find_map_literal("map[int]bool") is None

    def test_non_map_type_rejected(self, source_file):
        with pytest.raises(InvalidNodeError):
            source_file.map_literals("[]string")


class TestTraversal:
    """Test traverse() and import accessors."""

    def test_traverse_visits_with_ancestry(self, source_file):
        seen = []
        source_file.traverse(lambda located: seen.append(located))
        assert seen[0].node is source_file.root
        assert seen[0].parent is None
        calls = [l for l in seen if l.node.type == "call_expression"]
        assert len(calls) == 6
        assert all(l.root.node is source_file.root for l in calls)

    def test_import_paths(self, source_file):
        assert source_file.import_paths() == ["context", "errors", "fmt"]

    def test_package(self, source_file):
        assert source_file.package().name == "service"
