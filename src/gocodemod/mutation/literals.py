"""
Keyed views over composite literals.
"""

from typing import List, Optional, Union

from gocodemod.exceptions import FieldNotFoundError, InvalidNodeError
from gocodemod.fragments import parse_expression
from gocodemod.printer import source_code
from gocodemod.text import quote, unquote
from gocodemod.tree.ancestry import Located
from gocodemod.tree.kinds import STRING_LITERAL_TYPES
from gocodemod.tree.node import Node


def _body(literal: Node) -> Node:
    if literal.type != "composite_literal":
        raise InvalidNodeError(f"expected a composite literal, got {literal.type}")
    body = literal.child("body")
    if body is None:
        body = Node("literal_value")
        literal.set_child("body", body)
    return body


def _key_value(element: Node):
    key, value = element.child("key"), element.child("value")
    if key is None or value is None:
        parts = element.named()
        key, value = parts[0], parts[-1]
    return key, value


def _key_text(key: Node) -> str:
    if key.type in STRING_LITERAL_TYPES:
        return unquote(key.text)
    return source_code(key)


class _KeyedLiteral:

    def __init__(self, literal: Union[Node, Located]):
        self.located = literal if isinstance(literal, Located) else None
        self.node = literal.node if isinstance(literal, Located) else literal
        self.body = _body(self.node)

    def elements(self) -> List[Node]:
        return [c for c in self.body.children if c.type == "keyed_element"]

    def _find(self, key: str) -> List[Node]:
        return [e for e in self.elements() if _key_text(_key_value(e)[0]) == key]

    def keys(self) -> List[str]:
        return [_key_text(_key_value(e)[0]) for e in self.elements()]

    def has(self, key: str) -> bool:
        return bool(self._find(key))

    def source(self) -> str:
        return source_code(self.node)


class MapLiteral(_KeyedLiteral):
    """
    A map composite literal such as ``map[string]string{"a": "b"}``.

    String keys are compared unquoted; other keys by their source text.
    """

    def get(self, key: str) -> Optional[Node]:
        matches = self._find(key)
        return _key_value(matches[0])[1] if matches else None

    def rename_key(self, current: str, new: str) -> int:
        """
        Rename every element keyed ``current``; absent keys are a no-op.

        Returns:
            Number of keys renamed
        """
        matches = self._find(current)
        for element in matches:
            key = _key_value(element)[0]
            if key.type in STRING_LITERAL_TYPES:
                key.text = quote(new)
            else:
                element.replace_child(key, parse_expression(new))
        return len(matches)

    def remove_key(self, key: str) -> int:
        """Remove every element keyed ``key``; returns how many were removed."""
        matches = self._find(key)
        for element in matches:
            self.body.remove_child(element)
        return len(matches)


class StructLiteral(_KeyedLiteral):
    """A struct composite literal with keyed fields: ``T{Name: "x"}``."""

    @property
    def type_name(self) -> str:
        type_node = self.node.child("type")
        return source_code(type_node) if type_node is not None else "struct"

    def fields(self) -> List[str]:
        return self.keys()

    def field(self, key: str) -> Node:
        """
        Value expression of field ``key``.

        Raises:
            FieldNotFoundError: If the literal does not set ``key``
        """
        matches = self._find(key)
        if not matches:
            raise FieldNotFoundError(self.type_name, key)
        return _key_value(matches[0])[1]

    def set_field(self, key: str, value: Union[Node, str]) -> None:
        """Set field ``key``, appending a new keyed element when absent."""
        if isinstance(value, str):
            value = parse_expression(value)
        matches = self._find(key)
        if matches:
            element = matches[0]
            element.replace_child(_key_value(element)[1], value)
            return
        value.field = "value"
        element = Node(
            "keyed_element",
            [Node.leaf("identifier", key, field="key"), value],
        )
        self.body.children.append(element)
