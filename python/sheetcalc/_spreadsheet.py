"""Spreadsheet: the cell store, the formula bar selection and display values.

This is the surface a grid renderer talks to.  Edits go through
:meth:`Spreadsheet.set_raw_content`; reads of :attr:`evaluation_map` run a
full evaluation pass whenever the store changed since the last one.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from sheetcalc._store import CellStore
from sheetcalc._utils import COLUMN_HEADERS, ROW_NUMBERS, canonical_key
from sheetcalc.calc._evaluator import SheetEvaluator
from sheetcalc.calc._graph import DependencyGraph
from sheetcalc.calc._parser import is_formula
from sheetcalc.calc._protocol import CalcEngine, CellDelta, RecalcResult

logger = logging.getLogger(__name__)

# Contents a freshly opened spreadsheet panel starts with.
SAMPLE_CELLS: dict[str, str] = {
    "A1": "Revenue", "B1": "1000", "C1": "1200", "D1": "1500",
    "A2": "Expenses", "B2": "800", "C2": "900", "D2": "1100",
    "A4": "Profit", "B4": "=SUM(B1:B2)", "C4": "=SUM(C1:C2)", "D4": "=SUM(D1:D2)",
}


class Spreadsheet:
    """A single-sheet grid of raw contents plus their display values.

    Usage::

        sheet = Spreadsheet.with_sample_data()
        sheet.display("B4")          # "1800"
        sheet.select("B1")
        sheet.edit_selected("2000")
        sheet.display("B4")          # "2800"
    """

    def __init__(
        self,
        cells: Mapping[str, str] | None = None,
        selected: str | None = "A1",
        evaluator: CalcEngine | None = None,
    ) -> None:
        self._store = CellStore(cells)
        self._evaluator: CalcEngine = evaluator if evaluator is not None else SheetEvaluator()
        self._selected = canonical_key(selected) if selected is not None else None
        self._display: dict[str, str] = {}
        self._display_revision: int | None = None

    @classmethod
    def with_sample_data(cls) -> Spreadsheet:
        return cls(SAMPLE_CELLS)

    @property
    def store(self) -> CellStore:
        return self._store

    @property
    def column_headers(self) -> tuple[str, ...]:
        return COLUMN_HEADERS

    @property
    def row_numbers(self) -> tuple[int, ...]:
        return ROW_NUMBERS

    # ------------------------------------------------------------------
    # Raw content
    # ------------------------------------------------------------------

    def get_raw_content(self, key: str) -> str:
        """Raw content of *key* (``""`` if empty); what the formula bar shows."""
        return self._store.get(key)

    def set_raw_content(self, key: str, raw: str) -> None:
        """Replace one cell's raw content. Display values refresh on next read."""
        self._store.set(key, raw)

    # ------------------------------------------------------------------
    # Display values
    # ------------------------------------------------------------------

    def get_evaluation_map(self) -> dict[str, str]:
        """Display values for the current contents, recomputed after any edit."""
        if self._display_revision != self._store.revision:
            self._display = self._evaluator.evaluate(self._store.snapshot())
            self._display_revision = self._store.revision
        return dict(self._display)

    @property
    def evaluation_map(self) -> dict[str, str]:
        return self.get_evaluation_map()

    def display(self, key: str) -> str:
        """Text rendered in the grid for *key*; ``""`` for empty cells."""
        ref = canonical_key(key)
        self.get_evaluation_map()
        return self._display.get(ref, "")

    @property
    def circular_references(self) -> set[str]:
        """SUM cells that sit on a reference cycle."""
        return DependencyGraph.from_cells(self._store.snapshot()).circular_cells()

    def apply_edit(self, key: str, raw: str) -> RecalcResult:
        """Write one cell, re-run a full pass and report what changed on screen."""
        ref = canonical_key(key)
        before = self.get_evaluation_map()
        self._store.set(ref, raw)
        after = self.get_evaluation_map()

        deltas: list[CellDelta] = []
        for cell_ref in sorted(before.keys() | after.keys()):
            old_value = before.get(cell_ref, "")
            new_value = after.get(cell_ref, "")
            if old_value != new_value:
                deltas.append(CellDelta(
                    cell_ref=cell_ref,
                    old_value=old_value,
                    new_value=new_value,
                    raw_content=self._store.get(cell_ref),
                ))

        snapshot = self._store.snapshot()
        circular = DependencyGraph.from_cells(snapshot).circular_cells()
        if circular:
            logger.debug("Cells on a reference cycle after editing %s: %s", ref, sorted(circular))

        return RecalcResult(
            edited=ref,
            deltas=tuple(deltas),
            total_cells=len(snapshot),
            formula_cells=sum(1 for raw_value in snapshot.values() if is_formula(raw_value)),
            circular_cells=frozenset(circular),
        )

    # ------------------------------------------------------------------
    # Selection / formula bar
    # ------------------------------------------------------------------

    @property
    def selected(self) -> str | None:
        return self._selected

    def select(self, key: str) -> None:
        self._selected = canonical_key(key)

    def clear_selection(self) -> None:
        self._selected = None

    @property
    def formula_input(self) -> str:
        """Raw content of the selected cell, or ``""`` when nothing is selected."""
        if self._selected is None:
            return ""
        return self._store.get(self._selected)

    def edit_selected(self, raw: str) -> RecalcResult | None:
        """Formula bar change: write *raw* into the selected cell, if any."""
        if self._selected is None:
            return None
        return self.apply_edit(self._selected, raw)

    def __repr__(self) -> str:
        return f"<Spreadsheet cells={len(self._store)} selected={self._selected}>"
