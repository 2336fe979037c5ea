"""
Elastic tabstop alignment with text/tabwriter semantics.

The printer emits lines as lists of cells; every cell except the last is
terminated by a virtual tab. A column block is a run of consecutive lines
that all have a terminated cell in that column; each block is padded to its
widest cell plus ``padding``. Columns whose cells are all empty collapse.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class Line:
    indent: int
    cells: List[str] = field(default_factory=lambda: [""])
    # Continuation of a multi-line raw string or block comment: emitted verbatim
    raw: bool = False
    # Line ends inside a raw string, trailing whitespace is significant
    keep_trailing: bool = False
    # Starts a new alignment section, like a formfeed in text/tabwriter
    formfeed: bool = False


class TabWriter:
    """Align cell columns the way gofmt's tabwriter does."""

    def __init__(self, padding: int = 1, indent_text: str = "\t"):
        self.padding = padding
        self.indent_text = indent_text

    def render(self, lines: List[Line]) -> List[str]:
        out: List[str] = []
        start = 0
        # Sections end at indentation changes and at raw or formfeed lines
        for i in range(1, len(lines) + 1):
            if i == len(lines) or not self._same_section(lines[i - 1], lines[i]):
                out.extend(self._render_section(lines[start:i]))
                start = i
        return out

    def _same_section(self, a: Line, b: Line) -> bool:
        return not a.raw and not b.raw and not b.formfeed and a.indent == b.indent

    def _render_section(self, lines: List[Line]) -> List[str]:
        if all(len(line.cells) == 1 for line in lines):
            return [self._write(line, []) for line in lines]

        rendered: List[str] = [""] * len(lines)
        self._format(lines, 0, len(lines), [], rendered)
        return rendered

    def _format(self, lines: List[Line], line0: int, line1: int, widths: List[int], out: List[str]) -> None:
        column = len(widths)
        this = line0
        while this < line1:
            if column >= len(lines[this].cells) - 1:
                this += 1
                continue

            # Lines before the block are finished at the current depth
            for k in range(line0, this):
                out[k] = self._write(lines[k], widths)
            line0 = this

            width = 0
            discardable = True
            while this < line1 and column < len(lines[this].cells) - 1:
                cell = lines[this].cells[column]
                width = max(width, len(cell) + self.padding)
                if cell:
                    discardable = False
                this += 1

            if discardable:
                width = 0

            self._format(lines, line0, this, widths + [width], out)
            line0 = this

        for k in range(line0, line1):
            out[k] = self._write(lines[k], widths)

    def _write(self, line: Line, widths: List[int]) -> str:
        if line.raw:
            text = "".join(line.cells)
            return text if line.keep_trailing else text.rstrip()

        parts = []
        last = len(line.cells) - 1
        for j, cell in enumerate(line.cells):
            if j < last and j < len(widths):
                parts.append(cell.ljust(widths[j]))
            else:
                parts.append(cell)
        text = "".join(parts)
        if not line.keep_trailing:
            text = text.rstrip()
        if not text:
            return ""
        return self.indent_text * line.indent + text
