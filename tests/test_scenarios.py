"""
End-to-end codemods over complete Go files.
"""

from gocodemod import parse, quote, source_code, unquote


class TestRewriteWrapfToErrorf:
    """errors.Wrapf(err, "msg") becomes fmt.Errorf("msg: %w", err)."""

    SOURCE = """package main

import "errors"

var errSomething = errors.New("oops")

func foo() error {
	return errors.Wrapf(errSomething, "some context")
}
"""

    EXPECTED = """package main

import (
	"errors"
	"fmt"
)

var errSomething = errors.New("oops")

func foo() error {
	return fmt.Errorf("some context: %w", errSomething)
}
"""

    def rewrite(self, source_file):
        scoped_calls = source_file.function_calls("errors.Wrapf")
        for calls in scoped_calls.values():
            for call in calls:
                arguments = call.arguments
                arguments.swap(0, len(arguments) - 1)
                message = arguments[0]
                message.text = quote(unquote(message.text) + ": %w")
                call.set_function("fmt.Errorf")
        if scoped_calls:
            source_file.imports().add("fmt")

    def test_rewrite(self):
        source_file = parse(self.SOURCE)
        self.rewrite(source_file)
        assert source_file.print() == self.EXPECTED

    def test_without_matches_nothing_changes(self):
        source = 'package main\n\nimport "errors"\n\nvar errSomething = errors.New("oops")\n'
        source_file = parse(source)
        self.rewrite(source_file)
        assert source_file.print() == source


class TestMoveContextToFront:
    """context.Context moves to the first parameter and argument position."""

    SOURCE = """package main

import "context"

type UserService interface {
	DoSomething(int64, context.Context) error
}

func buz(userID int64, ctx context.Context) error {
	return nil
}

func baz(userID int64, context context.Context) error {
	return buz(userID, context)
}

func foo(userID int64, ctx context.Context) error {
	err := baz(userID, ctx)
	if err != nil {
		return err
	}
	return nil
}

func main() {
	_ = foo(1, context.Background())
}
"""

    EXPECTED = """package main

import "context"

type UserService interface {
	DoSomething(context.Context, int64) error
}

func buz(ctx context.Context, userID int64) error {
	return nil
}

func baz(context context.Context, userID int64) error {
	return buz(context, userID)
}

func foo(ctx context.Context, userID int64) error {
	err := baz(ctx, userID)
	if err != nil {
		return err
	}
	return nil
}

func main() {
	_ = foo(context.Background(), 1)
}
"""

    @staticmethod
    def is_context(arg) -> bool:
        if arg.type == "call_expression":
            return source_code(arg.child("function")) == "context.Background"
        return arg.type == "identifier" and arg.text in ("ctx", "context")

    def test_move(self):
        source_file = parse(self.SOURCE)

        for function in source_file.functions():
            function.params().swap_to_front(".Context")

        for type_declaration in source_file.type_declarations():
            for method in type_declaration.methods():
                method.params().swap_to_front(".Context")

        for calls in source_file.function_calls().values():
            for call in calls:
                arguments = call.arguments
                for i, arg in enumerate(arguments.args):
                    if self.is_context(arg):
                        arguments.swap(0, i)

        assert source_file.print() == self.EXPECTED


class TestRenameMapKey:
    """Renaming a key realigns the literal's values."""

    SOURCE = """package main

func main() {
	settings := map[string]string{
		"transaction_isolation": "read committed",
		"timeout":               "5s",
	}
	_ = settings
}
"""

    def test_rename(self):
        source_file = parse(self.SOURCE)
        _, literal = source_file.find_map_literal("map[string]string")

        assert literal.rename_key("transaction_isolation", "tx_isolation") == 1
        assert source_file.print() == (
            "package main\n"
            "\n"
            "func main() {\n"
            "\tsettings := map[string]string{\n"
            "\t\t\"tx_isolation\": \"read committed\",\n"
            "\t\t\"timeout\":      \"5s\",\n"
            "\t}\n"
            "\t_ = settings\n"
            "}\n"
        )
        assert literal.keys() == ["tx_isolation", "timeout"]
