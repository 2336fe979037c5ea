"""Mutable syntax tree model and ancestry chains."""

from .node import ATOMIC_TYPES, Node, Position
from .ancestry import Located
from .positions import clear_positions

__all__ = ["ATOMIC_TYPES", "Node", "Position", "Located", "clear_positions"]
