"""
Views over function declarations, type declarations and parameter lists.
"""

from typing import List, Optional

from gocodemod.printer import source_code
from gocodemod.tree.ancestry import Located
from gocodemod.tree.node import Node

PARAMETER_TYPES = frozenset({"parameter_declaration", "variadic_parameter_declaration"})
INTERFACE_METHOD_TYPES = frozenset({"method_elem", "method_spec"})


class ParameterList:
    """
    Parameters of a function, method or interface method signature.

    Each entry is a parameter declaration, which may declare several names
    sharing one type (``a, b int``).
    """

    def __init__(self, node: Optional[Node]):
        self.node = node

    @property
    def params(self) -> List[Node]:
        if self.node is None:
            return []
        return [c for c in self.node.children if c.type in PARAMETER_TYPES]

    def __len__(self) -> int:
        return len(self.params)

    def __getitem__(self, index: int) -> Node:
        return self.params[index]

    def names(self) -> List[List[str]]:
        return [[n.text for n in p.children_by_field("name")] for p in self.params]

    def types(self) -> List[str]:
        """Rendered type of each parameter, "...T" for variadics."""
        rendered = []
        for param in self.params:
            type_node = param.child("type")
            text = source_code(type_node) if type_node is not None else ""
            if param.type == "variadic_parameter_declaration":
                text = "..." + text
            rendered.append(text)
        return rendered

    def swap(self, i: int, j: int) -> None:
        params = self.params
        self.node.swap_children(params[i], params[j])

    def swap_to_front(self, type_suffix: str) -> int:
        """
        Swap every parameter whose type ends with ``type_suffix`` into position 0.

        Each match is swapped with whatever is first at that moment, so when
        several parameters match, the last one ends up first.

        Returns:
            Number of swaps performed
        """
        swaps = 0
        for i in range(len(self.params)):
            params = self.params
            if i == 0 or not self._type_text(params[i]).endswith(type_suffix):
                continue
            self.node.swap_children(params[0], params[i])
            swaps += 1
        return swaps

    def move_to_front(self, type_suffix: str) -> bool:
        """
        Move the first parameter whose type ends with ``type_suffix`` to
        position 0; the others keep their relative order.
        """
        params = self.params
        for param in params:
            if not self._type_text(param).endswith(type_suffix):
                continue
            if param is params[0]:
                return False
            self.node.remove_child(param)
            self.node.insert_child(self.node.index_of(params[0]), param)
            return True
        return False

    @staticmethod
    def _type_text(param: Node) -> str:
        type_node = param.child("type")
        return source_code(type_node) if type_node is not None else ""

    def __repr__(self) -> str:
        return f"ParameterList({self.types()!r})"


class Function:
    """A top-level function or method declaration."""

    def __init__(self, located: Located):
        self.located = located

    @property
    def node(self) -> Node:
        return self.located.node

    @property
    def name(self) -> str:
        name = self.node.child("name")
        return name.text if name is not None else ""

    @property
    def is_method(self) -> bool:
        return self.node.type == "method_declaration"

    @property
    def receiver(self) -> Optional[ParameterList]:
        receiver = self.node.child("receiver")
        return ParameterList(receiver) if receiver is not None else None

    @property
    def body(self) -> Optional[Node]:
        return self.node.child("body")

    def params(self) -> ParameterList:
        return ParameterList(self.node.child("parameters"))

    def results(self) -> Optional[Node]:
        return self.node.child("result")

    def __repr__(self) -> str:
        return f"Function({self.name!r})"


class Method:
    """A method: an interface element or a declaration with a receiver."""

    def __init__(self, node: Node):
        self.node = node

    @property
    def name(self) -> str:
        name = self.node.child("name")
        return name.text if name is not None else ""

    def params(self) -> ParameterList:
        return ParameterList(self.node.child("parameters"))

    def __repr__(self) -> str:
        return f"Method({self.name!r})"


class TypeDeclaration:
    """
    A top-level ``type`` spec.

    Interfaces list their methods directly; for structs and other named
    types the file is scanned for method declarations whose receiver is
    the type, by value or by pointer.
    """

    def __init__(self, located: Located):
        self.located = located

    @property
    def node(self) -> Node:
        return self.located.node

    @property
    def name(self) -> str:
        name = self.node.child("name")
        return name.text if name is not None else ""

    @property
    def type_node(self) -> Optional[Node]:
        return self.node.child("type")

    @property
    def is_interface(self) -> bool:
        type_node = self.type_node
        return type_node is not None and type_node.type == "interface_type"

    @property
    def is_struct(self) -> bool:
        type_node = self.type_node
        return type_node is not None and type_node.type == "struct_type"

    @property
    def is_type_alias(self) -> bool:
        return not self.is_interface and not self.is_struct

    def methods(self) -> List[Method]:
        if self.is_interface:
            elements = self.type_node.children
            wrapped = [c for c in elements if c.type == "method_spec_list"]
            if wrapped:
                elements = wrapped[0].children
            return [Method(c) for c in elements if c.type in INTERFACE_METHOD_TYPES]

        methods = []
        for declaration in self.located.root.node.children:
            if declaration.type != "method_declaration":
                continue
            receiver = declaration.child("receiver")
            if receiver is None:
                continue
            for param in receiver.named():
                if _receiver_type_name(param.child("type")) == self.name:
                    methods.append(Method(declaration))
                    break
        return methods

    def __repr__(self) -> str:
        return f"TypeDeclaration({self.name!r})"


def _receiver_type_name(type_node: Optional[Node]) -> Optional[str]:
    if type_node is None:
        return None
    if type_node.type == "pointer_type":
        inner = type_node.positional()
        return _receiver_type_name(inner[0]) if inner else None
    if type_node.type == "generic_type":
        return _receiver_type_name(type_node.child("type"))
    if type_node.type in ("type_identifier", "identifier"):
        return type_node.text
    return None
