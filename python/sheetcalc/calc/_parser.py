"""Formula parser: classifies raw cell content.

The formula language is deliberately tiny.  Content that does not start
with ``=`` is a literal; ``=SUM(<ref>:<ref>)`` sums a rectangle; any other
``=`` content is an unrecognized formula and displays ``#NAME?``.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from sheetcalc._utils import CellRange, Coordinate

# The SUM call is searched for, not anchored, so "=SUM(A1:A2)" embedded in
# longer "=..." content still counts.  No whitespace is allowed inside.
_SUM_RE = re.compile(r"=SUM\(([A-Z]+)(\d+):([A-Z]+)(\d+)\)", re.IGNORECASE | re.ASCII)


class ContentKind(enum.Enum):
    LITERAL = "literal"
    SUM = "sum"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class ParsedContent:
    """Classification of one cell's raw content."""

    kind: ContentKind
    raw: str
    cell_range: CellRange | None = None  # set only for ContentKind.SUM

    @property
    def is_formula(self) -> bool:
        return self.kind is not ContentKind.LITERAL


def is_formula(raw: str) -> bool:
    return raw.startswith("=")


def parse_sum_range(raw: str) -> CellRange | None:
    """Return the range summed by *raw*, or None if it is not a SUM formula.

    Corners outside the grid (multi-letter columns, row 0, rows past the
    last one) make the formula unrecognized.
    """
    if not is_formula(raw):
        return None
    m = _SUM_RE.search(raw)
    if m is None:
        return None
    start_col, start_row, end_col, end_row = m.groups()
    try:
        start = Coordinate.from_key(start_col + start_row)
        end = Coordinate.from_key(end_col + end_row)
    except ValueError:
        return None
    cell_range = CellRange(start, end)
    if not cell_range.in_grid:
        return None
    return cell_range


def classify(raw: str) -> ParsedContent:
    """Classify raw cell content as a literal, SUM formula or unrecognized formula."""
    if not isinstance(raw, str):
        raise TypeError(f"Raw cell content must be str, got {type(raw).__name__}")
    if not is_formula(raw):
        return ParsedContent(ContentKind.LITERAL, raw)
    cell_range = parse_sum_range(raw)
    if cell_range is None:
        return ParsedContent(ContentKind.UNRECOGNIZED, raw)
    return ParsedContent(ContentKind.SUM, raw, cell_range)


def formula_references(raw: str) -> list[str]:
    """Every cell key a formula reads, in evaluation order (empty for non-SUM)."""
    cell_range = parse_sum_range(raw)
    if cell_range is None:
        return []
    return list(cell_range.cells())
