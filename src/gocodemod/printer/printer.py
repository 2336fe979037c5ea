"""
GoPrinter: renders a Node tree as gofmt-formatted Go source.

Layout decisions that gofmt takes from the token file (blank lines, whether
a list is broken over several lines, trailing comments) are taken from the
original positions kept on each node. Synthesized nodes carry no positions
and fall back to the compact single-line form.
"""

import math
from typing import Callable, Dict, List, Optional, Tuple

from gocodemod.logging_config import logger
from gocodemod.tree.node import Node
from .config import BINARY_PRECEDENCE, DECLARATION_KEYWORDS, get_printer_config
from .tabwriter import Line, TabWriter


# ----------------------------------------------------------------------
# Position helpers
# ----------------------------------------------------------------------

def _row_gap(a: Node, b: Node) -> Optional[int]:
    """Rows between the end of ``a`` and the start of ``b``; None if unknown."""
    if a.end is None or b.start is None:
        return None
    return b.start.row - a.end.row


def _same_row(a: Node, b: Node) -> bool:
    return _row_gap(a, b) == 0


def _blank_before(item: Node) -> bool:
    """Whether a blank line separated ``item`` from its original predecessor."""
    return item.blank_before


def _starts_after(container: Node, item: Node) -> bool:
    if container.start is None or item.start is None:
        return False
    return item.start.row > container.start.row


def _split_case_body(clause: Node) -> Tuple[List[Node], List[Node]]:
    """
    Body items of a case clause, and the comments after its last statement
    that lead into whatever follows the clause.

    A comment on the row of the last statement (or of the case label, for
    an empty clause) stays in the body as that line's trailing comment.
    """
    items = [c for c in clause.children if c.field is None and c.type != "empty_statement"]
    last = -1
    for i, item in enumerate(items):
        if not item.is_comment:
            last = i
    body, leading = items[:last + 1], items[last + 1:]
    if not leading or any(c.start is None for c in leading):
        return items, []
    if body:
        anchor_row = body[-1].end.row if body[-1].end is not None else None
    else:
        anchor_row = clause.start.row if clause.start is not None else None
    if anchor_row == leading[0].start.row:
        body, leading = body + leading[:1], leading[1:]
    return body, leading


def _next_clause(comment: Node, clauses: List[Node]) -> Optional[Node]:
    if comment.start is None:
        return None
    for clause in clauses:
        if clause.start is not None and clause.start > comment.start:
            return clause
    return None


def _needs_formfeed(prev_size: int, size: int, count: int, log_sum: float) -> bool:
    """
    Whether a list element starting a line breaks the alignment section.

    Sizes of 0 mark elements that span lines; ``log_sum`` and ``count``
    describe the sizes seen since the section started.
    """
    if prev_size <= 0 or size <= 0:
        return True
    if count == 0 or (prev_size <= 40 and size <= 40):
        return False
    ratio = size / math.exp(log_sum / count)
    return 2.5 * ratio <= 1 or 2.5 <= ratio


# ----------------------------------------------------------------------
# Binary expression spacing (go/printer nodes.go)
# ----------------------------------------------------------------------

def _precedence(node: Node) -> int:
    return BINARY_PRECEDENCE.get(node.operator or "", 0)


_Walk = Tuple[bool, bool, int]


def _left_spine(node: Node) -> List[Node]:
    """``node`` followed by its chain of binary left operands."""
    spine = [node]
    left = node.child("left")
    while left is not None and left.type == "binary_expression":
        spine.append(left)
        left = left.child("left")
    return spine


def _walk_right(node: Node) -> _Walk:
    has4 = has5 = False
    max_problem = 0
    prec = _precedence(node)
    if prec == 4:
        has4 = True
    elif prec == 5:
        has5 = True

    right = node.child("right")
    if right is not None:
        if right.type == "binary_expression":
            # Nesting on the right needs a strictly higher precedence, so this is shallow
            if _precedence(right) > prec:
                h4, h5, mp = _walk_binary(right)
                has4, has5, max_problem = has4 or h4, has5 or h5, max(max_problem, mp)
        elif right.type == "unary_expression":
            # Spacing must keep "x / *p", "x & &y" and "x - -y" from gluing together
            pair = (node.operator or "") + (right.operator or "")
            if pair in ("/*", "&&", "&^"):
                max_problem = 5
            elif pair in ("++", "--"):
                max_problem = max(max_problem, 4)

    return has4, has5, max_problem


def _spine_walks(spine: List[Node]) -> List[_Walk]:
    """Walk results for every node of a left spine, folded bottom-up."""
    walks: List[_Walk] = [(False, False, 0)] * len(spine)
    for i in range(len(spine) - 1, -1, -1):
        has4, has5, max_problem = _walk_right(spine[i])
        if i + 1 < len(spine) and _precedence(spine[i + 1]) >= _precedence(spine[i]):
            h4, h5, mp = walks[i + 1]
            has4, has5, max_problem = has4 or h4, has5 or h5, max(max_problem, mp)
        walks[i] = (has4, has5, max_problem)
    return walks


def _walk_binary(node: Node) -> _Walk:
    return _spine_walks(_left_spine(node))[0]


def _cutoff(walk: _Walk, depth: int) -> int:
    has4, has5, max_problem = walk
    if max_problem > 0:
        return max_problem + 1
    if has4 and has5:
        return 5 if depth == 1 else 4
    return 6 if depth == 1 else 4


def _diff_prec(node: Node, prec: int) -> int:
    if node.type != "binary_expression" or prec != _precedence(node):
        return 1
    return 0


def _reduce_depth(depth: int) -> int:
    return max(depth - 1, 1)


def _is_type_name(node: Optional[Node]) -> bool:
    return node is not None and node.type in ("type_identifier", "identifier", "qualified_type", "generic_type")


def strip_parens(node: Node) -> Node:
    """Drop redundant parentheses around a control clause expression."""
    while node.type == "parenthesized_expression":
        inner = node.positional()
        if not inner:
            return node
        # Parens protect composite literals whose type is a name: if (T{}) {
        stack = [inner[0]]
        protected = False
        while stack and not protected:
            current = stack.pop()
            if current.type == "parenthesized_expression":
                continue
            if current.type == "composite_literal":
                protected = _is_type_name(current.child("type"))
                continue
            stack.extend(current.children)
        if protected:
            return node
        node = inner[0]
    return node


# ----------------------------------------------------------------------
# Output stream
# ----------------------------------------------------------------------

class _Writer:
    """Collects printed text as tabwriter lines."""

    def __init__(self):
        self.lines: List[Line] = []
        self.indent = 0
        self._current: Optional[Line] = None
        self._formfeed = False

    def _line(self) -> Line:
        if self._current is None:
            self._current = Line(indent=self.indent, formfeed=self._formfeed)
            self._formfeed = False
            self.lines.append(self._current)
        return self._current

    def formfeed(self) -> None:
        """The next line starts a new alignment section."""
        self._formfeed = True

    def mark(self) -> Tuple[Line, int]:
        """(current line, characters written on it), to measure what follows."""
        line = self._line()
        return line, sum(len(cell) for cell in line.cells)

    def write(self, text: str) -> None:
        if not text:
            return
        segments = text.split("\n")
        line = self._line()
        line.cells[-1] += segments[0]
        # Raw strings and block comments spanning lines are copied verbatim
        for segment in segments[1:]:
            line.keep_trailing = True
            line = Line(indent=0, cells=[segment], raw=True)
            self.lines.append(line)
        self._current = line

    def cell(self) -> None:
        """Terminate the current cell; the next write starts an aligned column."""
        self._line().cells.append("")

    def newline(self, count: int = 1) -> None:
        if self._current is None:
            self.lines.append(Line(indent=self.indent))
        self._current = None
        for _ in range(count - 1):
            self.lines.append(Line(indent=self.indent))

    @property
    def at_line_start(self) -> bool:
        return self._current is None


# ----------------------------------------------------------------------
# Printer
# ----------------------------------------------------------------------

class GoPrinter:
    """
    Render Node trees as Go source.

    Instances hold no per-call state and may be shared between threads.
    """

    def __init__(self, config: Optional[Dict] = None, project_root: Optional[str] = None):
        self.config = {**get_printer_config(project_root), **(config or {})}

    def print_file(self, root: Node) -> str:
        """Render a ``source_file`` root; the result ends with one newline."""
        lines = self._render(root)
        while lines and not lines[-1]:
            lines.pop()
        return "\n".join(lines) + "\n"

    def render(self, node: Node) -> str:
        """Render any node on its own, without a trailing newline."""
        lines = self._render(node)
        while lines and not lines[-1]:
            lines.pop()
        return "\n".join(lines)

    def _render(self, node: Node) -> List[str]:
        session = _Session(self.config)
        session.node(node)
        writer = TabWriter(padding=self.config["tab_padding"], indent_text=self.config["indent"])
        return writer.render(session.w.lines)


class _Session:
    """One rendering pass; dispatches on node type to ``_p_<type>`` methods."""

    def __init__(self, config: Dict):
        self.config = config
        self.w = _Writer()
        # Case clause id -> body items left after _case_clauses took the leading comments
        self._case_items: Dict[int, List[Node]] = {}

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def node(self, node: Node, depth: int = 1) -> None:
        method = getattr(self, f"_p_{node.type}", None)
        if method is not None:
            method(node, depth)
            return
        if node.is_leaf:
            self.w.write(node.text)
            return
        if not node.children:
            # A named wrapper around anonymous tokens only
            self.w.write("".join(node.tokens))
            return
        logger.debug(f"No printer rule for {node.type}, printing children")
        for i, child in enumerate(node.named()):
            if i:
                self.w.write(" ")
            self.node(child, depth)

    def field(self, node: Node, name: str, depth: int = 1, prefix: str = "") -> bool:
        """Print the child filling ``name`` (after ``prefix``) if present."""
        child = node.child(name)
        if child is None:
            return False
        self.w.write(prefix)
        self.node(child, depth)
        return True

    def joined(self, items: List[Node], sep: str, depth: int = 1) -> None:
        for i, item in enumerate(items):
            if i:
                self.w.write(sep)
            self.node(item, depth)

    # ------------------------------------------------------------------
    # Line-oriented lists
    # ------------------------------------------------------------------

    def item_lines(self, opener: Node, items: List[Node], render: Callable[[Node], None]) -> None:
        """
        Print ``items`` one per line after an opener already on the current line.

        Blank lines between items are kept (at most one); a comment that
        starts on the row where the previous item ends stays on that row.
        """
        w = self.w
        prev = None
        for item in items:
            if item.is_comment and item.start is not None:
                if prev is not None:
                    anchor_row = prev.end.row if prev.end is not None else None
                else:
                    anchor_row = opener.start.row if opener.start is not None else None
                if anchor_row == item.start.row:
                    w.cell()
                    w.write(item.text)
                    prev = item
                    continue
            w.newline(2 if prev is not None and _blank_before(item) else 1)
            if item.is_comment:
                w.write(item.text)
            else:
                render(item)
            prev = item

    def comma_list(self, container: Optional[Node], open_: str, close: str,
                   render: Callable[[Node, bool], None]) -> None:
        """
        Print a bracketed, comma separated list.

        The list breaks over lines when its first item starts on a later row
        than the opening bracket or it holds a line comment. Items that
        shared a row in the source keep sharing it.
        """
        w = self.w
        items = container.children if container is not None else []
        named = [c for c in items if not c.is_comment]

        if not self._multiline(container, items):
            self._compact_list(container, named, open_, close, render)
            return

        w.write(open_)
        w.indent += 1
        prev = None
        # Alignment sections follow go/printer exprList: a key much longer or
        # shorter than the ones before it, or a multi-line element, starts a
        # new section
        size = 0
        count = 0
        log_sum = 0.0
        shared_row = False
        for item in items:
            if item.is_comment:
                if prev is not None and _same_row(prev, item):
                    w.cell()
                    w.write(item.text)
                else:
                    w.newline(2 if prev is not None and _blank_before(item) else 1)
                    w.write(item.text)
                prev = item
                continue

            prev_size, size = size, self._element_size(container, item)
            if prev is not None and not prev.is_comment and _same_row(prev, item):
                w.write(" ")
                render(item, False)
                shared_row = True
            else:
                breaks = 2 if prev is not None and _blank_before(item) else 1
                if _needs_formfeed(prev_size, size, count, log_sum) or shared_row:
                    w.formfeed()
                if breaks > 1:
                    count, log_sum = 0, 0.0
                w.newline(breaks)
                render(item, len(named) > 1 and size > 0)
                shared_row = False
            if size > 0:
                log_sum += math.log(size)
                count += 1
            w.write(",")
            prev = item
        w.indent -= 1
        w.newline()
        w.write(close)

    def _compact_list(self, container: Optional[Node], named: List[Node], open_: str, close: str,
                      render: Callable[[Node, bool], None]) -> None:
        """
        Items follow the opening bracket; a line break the source had between
        two items is kept, with the continuation lines indented once.
        """
        w = self.w
        w.write(open_)
        broken = False
        prev = None
        for item in named:
            if prev is not None:
                w.write(",")
                gap = _row_gap(prev, item)
                if gap is not None and gap > 0:
                    if not broken:
                        w.indent += 1
                        broken = True
                    w.newline()
                else:
                    w.write(" ")
            render(item, False)
            prev = item
        if broken:
            w.indent -= 1
            # A closing bracket on its own row keeps it, after a trailing comma
            if container.end is not None and prev.end is not None and container.end.row > prev.end.row:
                w.write(",")
                w.newline()
        w.write(close)

    def _element_size(self, container: Node, item: Node) -> int:
        """
        Width of a list element for alignment; for keyed elements the width
        of the key. 0 when the element spans lines or the list was synthesized.
        """
        if not container.has_position:
            return 0
        text = self.measure(item)
        if text is None:
            return 0
        if item.type == "keyed_element":
            key = item.child("key") or item.named()[0]
            text = self.measure(key)
            if text is None:
                return 0
        return len(text)

    def measure(self, node: Node) -> Optional[str]:
        """``node`` rendered on its own; None if it does not fit on one line."""
        session = _Session(self.config)
        session.node(node)
        lines = TabWriter(padding=self.config["tab_padding"], indent_text=self.config["indent"]).render(session.w.lines)
        if len(lines) != 1:
            return None
        return lines[0]

    def _multiline(self, container: Optional[Node], items: List[Node]) -> bool:
        if container is None or not items:
            return False
        if any(c.is_comment and c.text.startswith("//") for c in items):
            return True
        if not any(not c.is_comment for c in items):
            return False
        # Reordered lists keep their layout: judge by the earliest original item
        positioned = [c for c in items if c.start is not None]
        if not positioned:
            return False
        return _starts_after(container, min(positioned, key=lambda c: c.start))

    def expr_list(self, node: Optional[Node], depth: int = 1) -> None:
        if node is None:
            return
        if node.type == "expression_list":
            self.joined(node.named(), ", ", depth)
        else:
            self.node(node, depth)

    # ------------------------------------------------------------------
    # File and declarations
    # ------------------------------------------------------------------

    def _p_source_file(self, node: Node, depth: int) -> None:
        w = self.w
        items = node.children
        prev = None
        for index, item in enumerate(items):
            if prev is not None:
                if item.is_comment and _same_row(prev, item):
                    w.cell()
                    w.write(item.text)
                    prev = item
                    continue
                w.newline(self._top_level_gap(prev, items, index))
            self.node(item)
            prev = item
        w.newline()

    def _top_level_gap(self, prev: Node, items: List[Node], index: int) -> int:
        item = items[index]
        gap = _row_gap(prev, item)
        count = 1 if gap is None else min(max(gap, 1), 1 + self.config["max_blank_lines"])

        if prev.is_comment:
            return count

        # A doc comment takes the spacing of the declaration it documents
        target = item
        i = index
        while target.is_comment and i + 1 < len(items):
            following = items[i + 1]
            if _row_gap(target, following) != 1:
                break
            target, i = following, i + 1
        if target.is_comment:
            return count
        if target is not item:
            return 2

        if prev.type == "package_clause" or DECLARATION_KEYWORDS.get(prev.type) != DECLARATION_KEYWORDS.get(target.type):
            return 2
        return count

    def _p_package_clause(self, node: Node, depth: int) -> None:
        self.w.write("package ")
        self.joined(node.positional(), "")

    def _p_import_declaration(self, node: Node, depth: int) -> None:
        self.w.write("import ")
        self.joined(node.named(), "")

    def _p_import_spec(self, node: Node, depth: int) -> None:
        self.field(node, "name")
        if node.child("name") is not None:
            self.w.write(" ")
        self.field(node, "path")

    def _p_import_spec_list(self, node: Node, depth: int) -> None:
        w = self.w
        w.write("(")
        if not node.children:
            w.write(")")
            return

        groups: List[List[Node]] = [[]]
        prev = None
        for item in node.children:
            if prev is not None and _blank_before(item):
                groups.append([])
            groups[-1].append(item)
            prev = item
        if self.config["sort_imports"]:
            groups = [self._sorted_imports(group) for group in groups]

        w.indent += 1
        for index, group in enumerate(groups):
            prev = None
            for item in group:
                if item.is_comment and prev is not None and _same_row(prev, item):
                    w.cell()
                    w.write(item.text)
                    prev = item
                    continue
                w.newline(2 if prev is None and index > 0 else 1)
                self.node(item)
                prev = item
        w.indent -= 1
        w.newline()
        w.write(")")

    @staticmethod
    def _sorted_imports(group: List[Node]) -> List[Node]:
        if any(item.is_comment for item in group):
            return group

        def key(spec: Node) -> Tuple[str, str]:
            path = spec.child("path")
            name = spec.child("name")
            return (path.text.strip("\"`") if path is not None else "", name.text if name is not None else "")

        result: List[Node] = []
        for spec in sorted(group, key=key):
            if result and key(result[-1]) == key(spec):
                continue
            result.append(spec)
        return result

    def _grouped(self, keyword: str, node: Node, render: Callable[[Node, bool], None]) -> None:
        w = self.w
        w.write(keyword + " ")
        specs = node.named()
        if "(" not in node.tokens:
            if specs:
                render(specs[0], False)
            return

        w.write("(")
        if not node.children:
            w.write(")")
            return
        aligned = len(specs) > 1
        w.indent += 1
        self.item_lines(node, node.children, lambda spec: render(spec, aligned))
        w.indent -= 1
        w.newline()
        w.write(")")

    def _p_const_declaration(self, node: Node, depth: int) -> None:
        self._grouped("const", node, self._value_spec)

    def _p_var_declaration(self, node: Node, depth: int) -> None:
        self._grouped("var", node, self._value_spec)

    def _p_type_declaration(self, node: Node, depth: int) -> None:
        self._grouped("type", node, self._type_spec)

    def _value_spec(self, spec: Node, aligned: bool) -> None:
        w = self.w
        self.joined(spec.children_by_field("name"), ", ")
        type_ = spec.child("type")
        value = spec.child("value")
        if aligned:
            w.cell()
            if type_ is not None:
                self.node(type_)
            if value is not None:
                w.cell()
                w.write("= ")
                self.expr_list(value)
            return
        self.field(spec, "type", prefix=" ")
        if value is not None:
            w.write(" = ")
            self.expr_list(value)

    def _type_spec(self, spec: Node, aligned: bool) -> None:
        w = self.w
        self.field(spec, "name")
        self.field(spec, "type_parameters")
        if aligned:
            w.cell()
        else:
            w.write(" ")
        if spec.type == "type_alias":
            w.write("= ")
        self.field(spec, "type")

    def _p_const_spec(self, node: Node, depth: int) -> None:
        self._value_spec(node, False)

    def _p_var_spec(self, node: Node, depth: int) -> None:
        self._value_spec(node, False)

    def _p_type_spec(self, node: Node, depth: int) -> None:
        self._type_spec(node, False)

    def _p_type_alias(self, node: Node, depth: int) -> None:
        self._type_spec(node, False)

    def _p_function_declaration(self, node: Node, depth: int) -> None:
        start = self.w.mark()
        self.w.write("func ")
        self.field(node, "name")
        self._signature(node)
        self._func_body(node, start)

    def _p_method_declaration(self, node: Node, depth: int) -> None:
        start = self.w.mark()
        self.w.write("func ")
        self.field(node, "receiver")
        self.w.write(" ")
        self.field(node, "name")
        self._signature(node)
        self._func_body(node, start)

    def _func_body(self, node: Node, start: Tuple[Line, int]) -> None:
        body = node.child("body")
        if body is None:
            return
        line, column = self.w.mark()
        header = column - start[1] if line is start[0] else None
        self.w.write(" ")
        text = self._one_line_body(body, header)
        if text is None:
            self.node(body)
        else:
            self.w.write(text)

    def _one_line_body(self, body: Node, header: Optional[int]) -> Optional[str]:
        """
        A function body written on one row stays on one line while the
        header and statements fit in 100 columns (go/printer funcBody).
        """
        if header is None or not body.has_position or body.start.row != body.end.row:
            return None
        statements = [c for c in body.children if c.type != "empty_statement"]
        if len(statements) > 5 or any(c.is_comment for c in statements):
            return None
        if not statements:
            return "{}"
        texts = []
        for statement in statements:
            text = self.measure(statement)
            if text is None:
                return None
            texts.append(text)
        if header + sum(len(text) for text in texts) + 2 * (len(texts) - 1) > 100:
            return None
        return "{ " + "; ".join(texts) + " }"

    def _signature(self, node: Node) -> None:
        self.field(node, "type_parameters")
        params = node.child("parameters")
        if params is None:
            self.w.write("()")
        else:
            self.node(params)
        self.field(node, "result", prefix=" ")

    def _p_parameter_list(self, node: Node, depth: int) -> None:
        self.comma_list(node, "(", ")", lambda item, _: self.node(item))

    def _p_parameter_declaration(self, node: Node, depth: int) -> None:
        names = node.children_by_field("name")
        self.joined(names, ", ")
        self.field(node, "type", prefix=" " if names else "")

    def _p_variadic_parameter_declaration(self, node: Node, depth: int) -> None:
        if node.child("name") is not None:
            self.field(node, "name")
            self.w.write(" ")
        self.w.write("...")
        self.field(node, "type")

    def _p_type_parameter_list(self, node: Node, depth: int) -> None:
        self.comma_list(node, "[", "]", lambda item, _: self.node(item))

    def _p_type_parameter_declaration(self, node: Node, depth: int) -> None:
        self.joined(node.children_by_field("name"), ", ")
        self.field(node, "type", prefix=" ")

    def _p_type_constraint(self, node: Node, depth: int) -> None:
        self.joined(node.named(), " | ")

    _p_type_elem = _p_type_constraint
    _p_constraint_elem = _p_type_constraint

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def statement(self, node: Node) -> None:
        self.node(node)

    def _p_block(self, node: Node, depth: int) -> None:
        w = self.w
        w.write("{")
        items = [c for c in node.children if c.type != "empty_statement"]
        if not items:
            span = node.end.row - node.start.row if node.has_position else 0
            if span > 0:
                w.newline()
            w.write("}")
            return
        w.indent += 1
        self.item_lines(node, items, self.statement)
        w.indent -= 1
        w.newline()
        w.write("}")

    def _p_expression_statement(self, node: Node, depth: int) -> None:
        self.joined(node.positional(), "")

    def _p_send_statement(self, node: Node, depth: int) -> None:
        self.field(node, "channel")
        self.w.write(" <- ")
        self.field(node, "value")

    def _p_inc_statement(self, node: Node, depth: int) -> None:
        self.joined(node.positional(), "")
        self.w.write("++")

    def _p_dec_statement(self, node: Node, depth: int) -> None:
        self.joined(node.positional(), "")
        self.w.write("--")

    def _p_assignment_statement(self, node: Node, depth: int) -> None:
        self._assignment(node, node.operator or "=")

    def _p_short_var_declaration(self, node: Node, depth: int) -> None:
        self._assignment(node, ":=")

    def _assignment(self, node: Node, operator: str) -> None:
        left, right = node.child("left"), node.child("right")
        depth = 1
        if _list_len(left) > 1 and _list_len(right) > 1:
            depth += 1
        self.expr_list(left, depth)
        self.w.write(f" {operator} ")
        self.expr_list(right, depth)

    def _p_return_statement(self, node: Node, depth: int) -> None:
        self.w.write("return")
        values = node.named()
        if values:
            self.w.write(" ")
            self.expr_list(values[0])

    def _p_go_statement(self, node: Node, depth: int) -> None:
        self.w.write("go ")
        self.joined(node.named(), "")

    def _p_defer_statement(self, node: Node, depth: int) -> None:
        self.w.write("defer ")
        self.joined(node.named(), "")

    def _p_break_statement(self, node: Node, depth: int) -> None:
        self._branch("break", node)

    def _p_continue_statement(self, node: Node, depth: int) -> None:
        self._branch("continue", node)

    def _p_goto_statement(self, node: Node, depth: int) -> None:
        self._branch("goto", node)

    def _branch(self, keyword: str, node: Node) -> None:
        self.w.write(keyword)
        label = node.named()
        if label:
            self.w.write(" " + label[0].text)

    def _p_fallthrough_statement(self, node: Node, depth: int) -> None:
        self.w.write("fallthrough")

    def _p_labeled_statement(self, node: Node, depth: int) -> None:
        w = self.w
        # Labels are outdented one level
        indent = w.indent
        w.indent = max(indent - 1, 0)
        self.field(node, "label")
        w.write(":")
        w.indent = indent
        body = [c for c in node.positional() if c.type != "empty_statement"]
        if body:
            w.newline()
            self.statement(body[0])

    def _p_empty_labeled_statement(self, node: Node, depth: int) -> None:
        self._p_labeled_statement(node, depth)

    def _p_if_statement(self, node: Node, depth: int) -> None:
        w = self.w
        w.write("if ")
        if node.child("initializer") is not None:
            self.field(node, "initializer")
            w.write("; ")
        condition = node.child("condition")
        if condition is not None:
            self.node(strip_parens(condition))
        w.write(" ")
        self.field(node, "consequence")
        self.field(node, "alternative", prefix=" else ")

    def _p_for_statement(self, node: Node, depth: int) -> None:
        w = self.w
        w.write("for ")
        header = [c for c in node.named() if c.field != "body"]
        if header:
            clause = header[0]
            if clause.type == "for_clause":
                self._for_clause(clause)
            elif clause.type == "range_clause":
                self.node(clause)
            else:
                self.node(strip_parens(clause))
            if not (clause.type == "for_clause" and not clause.named()):
                w.write(" ")
        self.field(node, "body")

    def _for_clause(self, node: Node) -> None:
        w = self.w
        init, condition, update = node.child("initializer"), node.child("condition"), node.child("update")
        if init is None and update is None:
            if condition is not None:
                self.node(strip_parens(condition))
            return
        if init is not None:
            self.node(init)
        w.write("; ")
        if condition is not None:
            self.node(strip_parens(condition))
        w.write(";")
        if update is not None:
            w.write(" ")
            self.node(update)

    def _p_range_clause(self, node: Node, depth: int) -> None:
        left = node.child("left")
        if left is not None:
            self.expr_list(left)
            self.w.write(" := " if ":=" in node.tokens else " = ")
        self.w.write("range ")
        self.field(node, "right")

    def _p_expression_switch_statement(self, node: Node, depth: int) -> None:
        w = self.w
        w.write("switch")
        self.field(node, "initializer", prefix=" ")
        if node.child("initializer") is not None:
            w.write(";")
        value = node.child("value")
        if value is not None:
            w.write(" ")
            self.node(strip_parens(value))
        w.write(" {")
        self._case_clauses(node)

    def _p_type_switch_statement(self, node: Node, depth: int) -> None:
        w = self.w
        w.write("switch ")
        if node.child("initializer") is not None:
            self.field(node, "initializer")
            w.write("; ")
        alias = node.child("alias")
        if alias is not None:
            self.expr_list(alias)
            w.write(" := ")
        self.field(node, "value")
        w.write(".(type) {")
        self._case_clauses(node)

    def _p_select_statement(self, node: Node, depth: int) -> None:
        self.w.write("select {")
        self._case_clauses(node)

    def _case_clauses(self, node: Node) -> None:
        """
        Case clauses sit at the indentation of their switch.

        Comments between two clauses are printed at the level of ``case``
        when they are aligned with the next clause and at body level
        otherwise, wherever the parse attached them (go/printer does the
        same when it flushes comments before a case label).
        """
        w = self.w
        entries = [c for c in node.children if c.field is None]
        clauses = [c for c in entries if not c.is_comment]
        prev = None
        for item in entries:
            if item.is_comment:
                if prev is not None and _same_row(prev, item):
                    w.cell()
                    w.write(item.text)
                else:
                    w.newline(2 if prev is not None and _blank_before(item) else 1)
                    self._between_cases(item, clauses)
                prev = item
                continue

            w.newline(2 if prev is not None and _blank_before(item) else 1)
            body, leading = _split_case_body(item)
            self._case_items[id(item)] = body
            self.node(item)
            prev = item
            for comment in leading:
                w.newline(2 if _blank_before(comment) else 1)
                self._between_cases(comment, clauses)
                prev = comment
        w.newline()
        w.write("}")

    def _between_cases(self, comment: Node, clauses: List[Node]) -> None:
        following = _next_clause(comment, clauses)
        preceded = comment.start is None or any(
            c.start is not None and c.start < comment.start for c in clauses
        )
        if following is None:
            nested = preceded and bool(clauses)
        elif comment.start is None or following.start is None:
            nested = False
        else:
            nested = preceded and comment.start.column != following.start.column
        indent = self.w.indent
        if nested:
            self.w.indent += 1
        self.w.write(comment.text)
        self.w.indent = indent

    def _case_body(self, node: Node) -> None:
        items = self._case_items.pop(id(node), None)
        if items is None:
            items = [c for c in node.children if c.field is None and c.type != "empty_statement"]
        if not items:
            return
        self.w.indent += 1
        self.item_lines(node, items, self.statement)
        self.w.indent -= 1

    def _p_expression_case(self, node: Node, depth: int) -> None:
        self.w.write("case ")
        self.expr_list(node.child("value"))
        self.w.write(":")
        self._case_body(node)

    def _p_type_case(self, node: Node, depth: int) -> None:
        self.w.write("case ")
        self.joined(node.children_by_field("type"), ", ")
        self.w.write(":")
        self._case_body(node)

    def _p_default_case(self, node: Node, depth: int) -> None:
        self.w.write("default:")
        self._case_body(node)

    def _p_communication_case(self, node: Node, depth: int) -> None:
        self.w.write("case ")
        self.field(node, "communication")
        self.w.write(":")
        self._case_body(node)

    def _p_receive_statement(self, node: Node, depth: int) -> None:
        left = node.child("left")
        if left is not None:
            self.expr_list(left)
            self.w.write(" := " if ":=" in node.tokens else " = ")
        self.field(node, "right")

    def _p_empty_statement(self, node: Node, depth: int) -> None:
        pass

    def _p_comment(self, node: Node, depth: int) -> None:
        self.w.write(node.text)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _p_expression_list(self, node: Node, depth: int) -> None:
        self.expr_list(node, depth)

    def _p_binary_expression(self, node: Node, depth: int) -> None:
        # Left-nested chains ("a + b + c + ...") are printed in a loop
        spine = _left_spine(node)
        depths = [depth]
        for parent, left in zip(spine, spine[1:]):
            depths.append(depths[-1] + _diff_prec(left, _precedence(parent)))
        walks = _spine_walks(spine)

        bottom = spine[-1]
        left = bottom.child("left")
        if left is not None:
            self.node(left, depths[-1] + _diff_prec(left, _precedence(bottom)))
        for current, level, walk in reversed(list(zip(spine, depths, walks))):
            op = current.operator or ""
            blank = _precedence(current) < _cutoff(walk, level)
            self.w.write(f" {op} " if blank else op)
            right = current.child("right")
            if right is not None:
                self.node(right, level + 1)

    def _p_unary_expression(self, node: Node, depth: int) -> None:
        self.w.write(node.operator or "")
        self.field(node, "operand", depth)

    def _p_parenthesized_expression(self, node: Node, depth: int) -> None:
        self.w.write("(")
        self.joined(node.positional(), "", _reduce_depth(depth))
        self.w.write(")")

    def _p_call_expression(self, node: Node, depth: int) -> None:
        args = node.child("arguments")
        if args is not None and len(args.named()) > 1:
            depth += 1
        self.field(node, "function", depth)
        self.field(node, "type_arguments")
        self.comma_list(args, "(", ")", lambda item, _: self.node(item, depth))

    def _p_argument_list(self, node: Node, depth: int) -> None:
        if len(node.named()) > 1:
            depth += 1
        self.comma_list(node, "(", ")", lambda item, _: self.node(item, depth))

    def _p_variadic_argument(self, node: Node, depth: int) -> None:
        self.joined(node.positional(), "", depth)
        self.w.write("...")

    def _p_selector_expression(self, node: Node, depth: int) -> None:
        self.field(node, "operand", depth)
        self.w.write(".")
        self.field(node, "field")

    def _p_index_expression(self, node: Node, depth: int) -> None:
        self.field(node, "operand", depth)
        self.w.write("[")
        indices = node.children_by_field("index")
        self.joined(indices, ", ", depth + 1)
        self.w.write("]")

    def _p_slice_expression(self, node: Node, depth: int) -> None:
        self.field(node, "operand", depth)
        indices = [node.child(name) for name in ("start", "end", "capacity")]
        if indices[2] is None:
            indices = indices[:2]
        present = [index for index in indices if index is not None]
        spaced = depth <= 1 and len(present) > 1 and any(i.type == "binary_expression" for i in present)
        w = self.w
        w.write("[")
        for i, index in enumerate(indices):
            if i:
                if spaced and indices[i - 1] is not None:
                    w.write(" ")
                w.write(":")
                if spaced and index is not None:
                    w.write(" ")
            if index is not None:
                self.node(index, depth + 1)
        w.write("]")

    def _p_type_assertion_expression(self, node: Node, depth: int) -> None:
        self.field(node, "operand", depth)
        self.w.write(".(")
        self.field(node, "type")
        self.w.write(")")

    def _p_type_conversion_expression(self, node: Node, depth: int) -> None:
        self.field(node, "type")
        self.w.write("(")
        self.field(node, "operand", depth)
        self.w.write(")")

    def _p_type_instantiation_expression(self, node: Node, depth: int) -> None:
        self.field(node, "type")
        self.w.write("[")
        self.joined([c for c in node.named() if c.field != "type"], ", ")
        self.w.write("]")

    def _p_composite_literal(self, node: Node, depth: int) -> None:
        self.field(node, "type")
        self.field(node, "body")

    def _p_literal_value(self, node: Node, depth: int) -> None:
        self.comma_list(node, "{", "}", self._literal_element)

    def _literal_element(self, item: Node, line_start: bool) -> None:
        if item.type != "keyed_element":
            self.node(item)
            return
        key, value = item.child("key"), item.child("value")
        if key is None or value is None:
            parts = item.named()
            key, value = parts[0], parts[-1]
        self.node(key)
        self.w.write(":")
        # Values of keyed elements that start a line are aligned
        if line_start:
            self.w.cell()
        else:
            self.w.write(" ")
        self.node(value)

    def _p_keyed_element(self, node: Node, depth: int) -> None:
        self._literal_element(node, False)

    def _p_func_literal(self, node: Node, depth: int) -> None:
        start = self.w.mark()
        self.w.write("func")
        self._signature(node)
        self._func_body(node, start)

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def _p_qualified_type(self, node: Node, depth: int) -> None:
        self.field(node, "package")
        self.w.write(".")
        self.field(node, "name")

    def _p_generic_type(self, node: Node, depth: int) -> None:
        self.field(node, "type")
        self.field(node, "type_arguments")

    def _p_type_arguments(self, node: Node, depth: int) -> None:
        self.comma_list(node, "[", "]", lambda item, _: self.node(item))

    def _p_pointer_type(self, node: Node, depth: int) -> None:
        self.w.write("*")
        self.joined(node.positional(), "")

    def _p_slice_type(self, node: Node, depth: int) -> None:
        self.w.write("[]")
        self.field(node, "element")

    def _p_array_type(self, node: Node, depth: int) -> None:
        self.w.write("[")
        self.field(node, "length")
        self.w.write("]")
        self.field(node, "element")

    def _p_implicit_length_array_type(self, node: Node, depth: int) -> None:
        self.w.write("[...]")
        self.field(node, "element")

    def _p_map_type(self, node: Node, depth: int) -> None:
        self.w.write("map[")
        self.field(node, "key")
        self.w.write("]")
        self.field(node, "value")

    def _p_channel_type(self, node: Node, depth: int) -> None:
        tokens = node.tokens
        if tokens and tokens[0] == "<-":
            self.w.write("<-chan ")
        elif "<-" in tokens:
            self.w.write("chan<- ")
        else:
            self.w.write("chan ")
        self.field(node, "value")

    def _p_function_type(self, node: Node, depth: int) -> None:
        self.w.write("func")
        self._signature(node)

    def _p_negated_type(self, node: Node, depth: int) -> None:
        self.w.write("~")
        self.joined(node.positional(), "")

    def _p_parenthesized_type(self, node: Node, depth: int) -> None:
        self.w.write("(")
        self.joined(node.positional(), "")
        self.w.write(")")

    def _p_struct_type(self, node: Node, depth: int) -> None:
        self.w.write("struct")
        body = node.named()
        self._member_block(body[0] if body else None, self._field_declaration)

    def _p_interface_type(self, node: Node, depth: int) -> None:
        self.w.write("interface")
        # Older grammars wrap the elements in a method_spec_list
        wrapped = [c for c in node.children if c.type == "method_spec_list"]
        self._member_block(wrapped[0] if wrapped else node, self._interface_element)

    def _member_block(self, container: Optional[Node], render: Callable[[Node, bool], None]) -> None:
        w = self.w
        items = container.children if container is not None else []
        members = [c for c in items if not c.is_comment]
        if not items:
            w.write("{}")
            return
        single_row = not container.has_position or container.start.row == container.end.row
        if len(members) == 1 and len(items) == 1 and single_row:
            w.write("{ ")
            render(members[0], False)
            w.write(" }")
            return
        w.write(" {")
        w.indent += 1
        self.item_lines(container, items, lambda item: render(item, True))
        w.indent -= 1
        w.newline()
        w.write("}")

    def _p_field_declaration_list(self, node: Node, depth: int) -> None:
        self._member_block(node, self._field_declaration)

    def _field_declaration(self, node: Node, aligned: bool) -> None:
        w = self.w
        sep = w.cell if aligned else (lambda: w.write(" "))
        names = node.children_by_field("name")
        if names:
            self.joined(names, ", ")
            sep()
        elif "*" in node.tokens:
            w.write("*")
        self.field(node, "type")
        tag = node.child("tag")
        if tag is not None:
            sep()
            self.node(tag)

    def _p_field_declaration(self, node: Node, depth: int) -> None:
        self._field_declaration(node, False)

    def _interface_element(self, node: Node, aligned: bool) -> None:
        if node.type in ("method_elem", "method_spec"):
            self.field(node, "name")
            self._signature(node)
        else:
            self.node(node)

    def _p_method_elem(self, node: Node, depth: int) -> None:
        self._interface_element(node, False)

    _p_method_spec = _p_method_elem


def _list_len(node: Optional[Node]) -> int:
    if node is None:
        return 0
    if node.type == "expression_list":
        return len(node.named())
    return 1


def source_code(node: Node) -> str:
    """
    Render ``node`` as Go source; a file root gets a trailing newline.

    Printer settings are looked up on each call, in the active project.
    """
    printer = GoPrinter()
    if node.type == "source_file":
        return printer.print_file(node)
    return printer.render(node)
