"""
Scoped query engine over the mutable Go tree.
"""

from .engine import QueryIndex, group_by_scope, walk_located
from .scope import Scope

__all__ = [
    "QueryIndex",
    "Scope",
    "group_by_scope",
    "walk_located",
]
