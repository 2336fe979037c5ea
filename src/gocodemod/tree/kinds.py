"""
Node kind groupings shared by the query and mutation layers.
"""

FUNCTION_TYPES = frozenset({"function_declaration", "method_declaration"})

# Nodes whose unfielded children form a statement list
STATEMENT_CONTAINERS = frozenset({
    "block",
    "expression_case",
    "type_case",
    "default_case",
    "communication_case",
})

ASSIGNMENT_TYPES = frozenset({"assignment_statement", "short_var_declaration"})

SWITCH_TYPES = frozenset({"expression_switch_statement", "type_switch_statement"})

TYPE_SPEC_TYPES = frozenset({"type_spec", "type_alias"})

STATEMENT_TYPES = frozenset({
    "expression_statement",
    "send_statement",
    "inc_statement",
    "dec_statement",
    "assignment_statement",
    "short_var_declaration",
    "var_declaration",
    "const_declaration",
    "type_declaration",
    "return_statement",
    "go_statement",
    "defer_statement",
    "if_statement",
    "for_statement",
    "expression_switch_statement",
    "type_switch_statement",
    "select_statement",
    "labeled_statement",
    "empty_labeled_statement",
    "fallthrough_statement",
    "break_statement",
    "continue_statement",
    "goto_statement",
    "block",
    "empty_statement",
})

# Expressions that may be wrapped into an expression statement
EXPRESSION_TYPES = frozenset({
    "call_expression",
    "unary_expression",
    "binary_expression",
    "selector_expression",
    "index_expression",
    "slice_expression",
    "parenthesized_expression",
    "type_assertion_expression",
    "type_conversion_expression",
    "type_instantiation_expression",
    "composite_literal",
    "func_literal",
    "identifier",
    "interpreted_string_literal",
    "raw_string_literal",
    "rune_literal",
    "int_literal",
    "float_literal",
    "imaginary_literal",
    "true",
    "false",
    "nil",
    "iota",
})

STRING_LITERAL_TYPES = frozenset({"interpreted_string_literal", "raw_string_literal"})
