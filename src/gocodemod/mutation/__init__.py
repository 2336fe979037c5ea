"""
Mutation package: statement-level primitives and typed handles.

Handles wrap located query matches; every mutation rewrites the shared
Node tree in place, so re-printing the SourceFile reflects it.
"""

from .config import get_mutation_config
from .declarations import Function, Method, ParameterList, TypeDeclaration
from .editor import FileEditor, generate_unified_diff
from .imports import Imports, Package
from .literals import MapLiteral, StructLiteral
from .statements import (
    Assignment,
    CallArguments,
    FunctionCall,
    IfStmt,
    StatementHandle,
    SwitchStmt,
)

__all__ = [
    # Statement handles
    "StatementHandle",
    "FunctionCall",
    "CallArguments",
    "Assignment",
    "IfStmt",
    "SwitchStmt",

    # Accessors
    "Function",
    "Method",
    "ParameterList",
    "TypeDeclaration",
    "MapLiteral",
    "StructLiteral",
    "Imports",
    "Package",

    # File writes
    "FileEditor",
    "generate_unified_diff",

    # Configuration
    "get_mutation_config",
]
