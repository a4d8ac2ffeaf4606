"""CalcEngine protocol and edit result dataclasses."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class CellDelta:
    """A single cell's display change caused by an edit."""

    cell_ref: str  # canonical "A1"
    old_value: str  # "" when the cell was not displayed before
    new_value: str
    raw_content: str = ""  # raw content after the edit


@dataclass(frozen=True)
class RecalcResult:
    """Result of applying one edit and re-running a full pass."""

    edited: str  # the cell that was written
    deltas: tuple[CellDelta, ...]  # cells whose display value changed
    total_cells: int = 0  # populated cells after the edit
    formula_cells: int = 0  # populated cells starting with "="
    circular_cells: frozenset[str] = frozenset()

    @property
    def changed_cells(self) -> list[str]:
        return [d.cell_ref for d in self.deltas]


@runtime_checkable
class CalcEngine(Protocol):
    """Protocol for engines that turn raw contents into display values."""

    def evaluate(self, cells: Mapping[str, str]) -> dict[str, str]:
        """Compute the display value of every populated cell of *cells*."""
        ...
