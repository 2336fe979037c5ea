"""
Go source printer with gofmt layout rules.
"""

from .config import PRINTER_CONFIG, get_printer_config
from .printer import GoPrinter, source_code, strip_parens
from .tabwriter import Line, TabWriter

__all__ = [
    "GoPrinter",
    "source_code",
    "strip_parens",
    "Line",
    "TabWriter",
    "PRINTER_CONFIG",
    "get_printer_config",
]
