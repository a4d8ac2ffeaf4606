"""Grid geometry: column letters, A1 references, coordinates and ranges."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

MAX_COLUMNS = 26
MAX_ROWS = 100

COLUMN_HEADERS: tuple[str, ...] = tuple(chr(ord("A") + i) for i in range(MAX_COLUMNS))
ROW_NUMBERS: tuple[int, ...] = tuple(range(1, MAX_ROWS + 1))

_A1_RE = re.compile(r"([A-Za-z]+)(\d+)", re.ASCII)


def column_letter(idx: int) -> str:
    """1-based column index -> letters (1 -> "A", 27 -> "AA")."""
    if idx < 1:
        raise ValueError(f"Column index must be >= 1, got {idx}")
    letters = ""
    while idx:
        idx, rem = divmod(idx - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def column_index(letters: str) -> int:
    """Column letters -> 1-based index ("A" -> 1, "AA" -> 27)."""
    if not letters or not letters.isascii() or not letters.isalpha():
        raise ValueError(f"Invalid column letters: {letters!r}")
    idx = 0
    for ch in letters.upper():
        idx = idx * 26 + (ord(ch) - ord("A") + 1)
    return idx


def a1_to_rowcol(ref: str) -> tuple[int, int]:
    """Parse "B3" into 1-based ``(row, col)``; case-insensitive."""
    m = _A1_RE.fullmatch(ref)
    if not m:
        raise ValueError(f"Invalid A1 reference: {ref!r}")
    return int(m.group(2)), column_index(m.group(1))


def rowcol_to_a1(row: int, col: int) -> str:
    return f"{column_letter(col)}{row}"


# ---------------------------------------------------------------------------
# Coordinate / range model
# ---------------------------------------------------------------------------


@dataclass(frozen=True, order=True)
class Coordinate:
    """A single grid position. ``column`` and ``row`` are both 1-based."""

    column: int
    row: int

    @classmethod
    def from_key(cls, key: str) -> Coordinate:
        """Parse a key such as ``"b04"`` into ``Coordinate(2, 4)``."""
        row, col = a1_to_rowcol(key)
        return cls(col, row)

    @property
    def key(self) -> str:
        return rowcol_to_a1(self.row, self.column)

    @property
    def in_grid(self) -> bool:
        return 1 <= self.column <= MAX_COLUMNS and 1 <= self.row <= MAX_ROWS

    def __str__(self) -> str:
        return self.key


def canonical_key(key: str) -> str:
    """Validate *key* against the grid and return its canonical spelling.

    Raises ValueError for malformed keys and for positions outside the
    26 x 100 grid.
    """
    coord = Coordinate.from_key(key)
    if not coord.in_grid:
        raise ValueError(f"Cell {key!r} is outside the {MAX_COLUMNS}x{MAX_ROWS} grid")
    return coord.key


@dataclass(frozen=True)
class CellRange:
    """Rectangle spanned by two corner coordinates, in either order.

    The covered cells are the full cross-product of the column interval and
    the row interval, inclusive on both ends.
    """

    start: Coordinate
    end: Coordinate

    @classmethod
    def from_ref(cls, range_ref: str) -> CellRange:
        """Parse ``"A1:B5"`` (corners may be reversed)."""
        parts = range_ref.split(":")
        if len(parts) != 2:
            raise ValueError(f"Invalid range: {range_ref!r}")
        return cls(Coordinate.from_key(parts[0]), Coordinate.from_key(parts[1]))

    @property
    def min_col(self) -> int:
        return min(self.start.column, self.end.column)

    @property
    def max_col(self) -> int:
        return max(self.start.column, self.end.column)

    @property
    def min_row(self) -> int:
        return min(self.start.row, self.end.row)

    @property
    def max_row(self) -> int:
        return max(self.start.row, self.end.row)

    @property
    def shape(self) -> tuple[int, int]:
        """``(n_rows, n_cols)``"""
        return self.max_row - self.min_row + 1, self.max_col - self.min_col + 1

    @property
    def in_grid(self) -> bool:
        return self.start.in_grid and self.end.in_grid

    def coordinates(self) -> Iterator[Coordinate]:
        # Column-major: every row of the first column, then the next column.
        for c in range(self.min_col, self.max_col + 1):
            for r in range(self.min_row, self.max_row + 1):
                yield Coordinate(c, r)

    def cells(self) -> Iterator[str]:
        for coord in self.coordinates():
            yield coord.key

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            item = Coordinate.from_key(item)
        if not isinstance(item, Coordinate):
            return False
        return (
            self.min_col <= item.column <= self.max_col
            and self.min_row <= item.row <= self.max_row
        )

    def __len__(self) -> int:
        n_rows, n_cols = self.shape
        return n_rows * n_cols

    def __str__(self) -> str:
        return f"{self.start.key}:{self.end.key}"
