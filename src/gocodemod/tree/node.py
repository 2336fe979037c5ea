"""
Node: mutable Go syntax tree node.

Built from the tree-sitter parse by parser.converter and mutated in place by
the query handles. Every named grammar node becomes a Node; identifiers,
literals and comments are leaves carrying their source text.
"""

from typing import Callable, Iterator, List, NamedTuple, Optional, Tuple


class Position(NamedTuple):
    """Zero-based (row, column) of a node in the text it was parsed from."""
    row: int
    column: int


# Leaves whose text is the whole story, even when tree-sitter gives them children
ATOMIC_TYPES = frozenset({
    "interpreted_string_literal",
    "raw_string_literal",
    "rune_literal",
    "int_literal",
    "float_literal",
    "imaginary_literal",
    "comment",
    # Keyword-like names; some grammar versions wrap their token ("." for dot)
    "dot",
    "blank_identifier",
    "nil",
    "true",
    "false",
    "iota",
})


class Node:
    """
    A single syntax node.

    Attributes:
        type: tree-sitter node type ("call_expression", "block", ...)
        text: Source text for leaves, None for interior nodes
        children: Named children in source order (comments included)
        field: Grammar field this node fills in its parent, if any
        operator: Operator token for unary/binary/assignment nodes
        tokens: Anonymous tokens seen while parsing ("(", ":=", "<-", ...)
        start, end: Original positions; None for synthesized nodes
        blank_before: A blank line separated this node from the sibling
            preceding it in the source
    """

    __slots__ = ("type", "text", "children", "field", "operator", "tokens", "start", "end", "blank_before")

    def __init__(
        self,
        type: str,
        children: Optional[List["Node"]] = None,
        text: Optional[str] = None,
        field: Optional[str] = None,
        operator: Optional[str] = None,
        tokens: Optional[List[str]] = None,
        start: Optional[Position] = None,
        end: Optional[Position] = None,
        blank_before: bool = False,
    ):
        self.type = type
        self.text = text
        self.children = children if children is not None else []
        self.field = field
        self.operator = operator
        self.tokens = tokens if tokens is not None else []
        self.start = start
        self.end = end
        self.blank_before = blank_before

    @classmethod
    def leaf(cls, type: str, text: str, field: Optional[str] = None) -> "Node":
        """Create a synthesized leaf node."""
        return cls(type, text=text, field=field)

    @property
    def is_leaf(self) -> bool:
        return self.text is not None

    @property
    def is_comment(self) -> bool:
        return self.type == "comment"

    @property
    def has_position(self) -> bool:
        return self.start is not None and self.end is not None

    # ------------------------------------------------------------------
    # Child access
    # ------------------------------------------------------------------

    def child(self, field: str) -> Optional["Node"]:
        """Return the first child filling ``field``."""
        for child in self.children:
            if child.field == field:
                return child
        return None

    def children_by_field(self, field: str) -> List["Node"]:
        return [child for child in self.children if child.field == field]

    def positional(self) -> List["Node"]:
        """Children that fill no grammar field, comments excluded."""
        return [c for c in self.children if c.field is None and c.type != "comment"]

    def named(self) -> List["Node"]:
        """All children except comments."""
        return [c for c in self.children if c.type != "comment"]

    def index_of(self, node: "Node") -> int:
        """Index of ``node`` in children, compared by identity; -1 if absent."""
        for i, child in enumerate(self.children):
            if child is node:
                return i
        return -1

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_child(self, field: str, node: Optional["Node"]) -> None:
        """Replace the child filling ``field`` (append when absent, drop when None)."""
        existing = self.child(field)
        if node is None:
            if existing is not None:
                self.remove_child(existing)
            return
        node.field = field
        if existing is None:
            self.children.append(node)
        else:
            self.children[self.index_of(existing)] = node

    def replace_child(self, old: "Node", new: "Node") -> bool:
        index = self.index_of(old)
        if index < 0:
            return False
        new.field = old.field
        self.children[index] = new
        return True

    def remove_child(self, node: "Node") -> bool:
        index = self.index_of(node)
        if index < 0:
            return False
        del self.children[index]
        return True

    def insert_child(self, index: int, node: "Node") -> None:
        self.children.insert(index, node)

    def swap_children(self, a: "Node", b: "Node") -> None:
        """Swap two children in place; fields travel with their slots."""
        i, j = self.index_of(a), self.index_of(b)
        if i < 0 or j < 0:
            raise ValueError("both nodes must be children of this node")
        if i == j:
            return
        a.field, b.field = b.field, a.field
        self.children[i], self.children[j] = b, a

    # ------------------------------------------------------------------
    # Traversal and comparison
    # ------------------------------------------------------------------

    def walk(self) -> Iterator["Node"]:
        """Pre-order iteration over this node and all descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find_all(self, predicate: Callable[["Node"], bool]) -> List["Node"]:
        return [node for node in self.walk() if predicate(node)]

    def _shallow_copy(self) -> "Node":
        return Node(
            self.type,
            text=self.text,
            field=self.field,
            operator=self.operator,
            tokens=list(self.tokens),
            start=self.start,
            end=self.end,
            blank_before=self.blank_before,
        )

    def copy(self) -> "Node":
        """Deep copy; positions are kept."""
        root = self._shallow_copy()
        stack: List[Tuple[Node, Node]] = [(self, root)]
        while stack:
            original, clone = stack.pop()
            for child in original.children:
                child_clone = child._shallow_copy()
                clone.children.append(child_clone)
                stack.append((child, child_clone))
        return root

    def structurally_equal(self, other: "Node", layout: bool = False) -> bool:
        """
        Deep field comparison that ignores positions.

        Args:
            other: Node to compare with
            layout: Also compare anonymous tokens and blank-line flags, so
                only trees that print identically compare equal
        """
        if not isinstance(other, Node):
            return False
        # The roots may sit in different slots; only their subtrees must agree
        pairs: List[Tuple[Node, Node]] = [(self, other)]
        root = True
        while pairs:
            a, b = pairs.pop()
            if a is b:
                continue
            if (a.type, a.text, a.operator) != (b.type, b.text, b.operator):
                return False
            if not root and a.field != b.field:
                return False
            if layout and (a.tokens != b.tokens or a.blank_before != b.blank_before):
                return False
            root = False
            if len(a.children) != len(b.children):
                return False
            pairs.extend(zip(a.children, b.children))
        return True

    def __repr__(self) -> str:
        if self.is_leaf:
            return f"Node({self.type!r}, text={self.text!r})"
        return f"Node({self.type!r}, children={len(self.children)})"
