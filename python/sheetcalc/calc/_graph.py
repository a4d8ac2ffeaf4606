"""Dependency graph for SUM cells, used to report circular references."""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping

from sheetcalc.calc._parser import formula_references


class DependencyGraph:
    """Tracks which cells each SUM formula reads.

    Only recognized SUM formulas contribute edges; literals and ``#NAME?``
    formulas read nothing.
    """

    __slots__ = ("dependencies", "dependents", "formulas")

    def __init__(self) -> None:
        # cell -> set of cells it reads from
        self.dependencies: dict[str, set[str]] = {}
        # cell -> set of cells that read from it (reverse edges)
        self.dependents: dict[str, set[str]] = {}
        # cell -> raw formula text
        self.formulas: dict[str, str] = {}

    def add_formula(self, cell_ref: str, raw: str) -> None:
        """Register a SUM cell and the range it covers. Other content is ignored."""
        refs = formula_references(raw)
        if not refs:
            return
        self.formulas[cell_ref] = raw
        self.dependencies[cell_ref] = set(refs)
        for ref in refs:
            self.dependents.setdefault(ref, set()).add(cell_ref)

    def topological_order(self) -> list[str]:
        """Return formula cells in evaluation order (Kahn's algorithm).

        Raises ValueError if a circular reference is detected.
        """
        formula_cells = set(self.formulas)
        if not formula_cells:
            return []

        in_degree: dict[str, int] = {
            cell: len(self.dependencies[cell] & formula_cells) for cell in formula_cells
        }
        queue: deque[str] = deque(sorted(c for c in formula_cells if in_degree[c] == 0))

        order: list[str] = []
        while queue:
            cell = queue.popleft()
            order.append(cell)
            for dep in sorted(self.dependents.get(cell, ())):
                if dep in formula_cells:
                    in_degree[dep] -= 1
                    if in_degree[dep] == 0:
                        queue.append(dep)

        if len(order) != len(formula_cells):
            missing = sorted(formula_cells - set(order))
            raise ValueError(f"Circular reference detected involving: {missing}")
        return order

    def circular_cells(self) -> set[str]:
        """Formula cells that can reach themselves through their references.

        Cells that merely depend on a cycle without being on it are excluded.
        """
        on_cycle: set[str] = set()
        for start in self.formulas:
            if start in on_cycle:
                continue
            seen: set[str] = set()
            queue: deque[str] = deque(self.dependencies[start])
            while queue:
                cell = queue.popleft()
                if cell == start:
                    on_cycle.add(start)
                    break
                if cell in seen or cell not in self.formulas:
                    continue
                seen.add(cell)
                queue.extend(self.dependencies[cell])
        return on_cycle

    @classmethod
    def from_cells(cls, cells: Mapping[str, str]) -> DependencyGraph:
        """Build a graph from a snapshot of raw cell contents."""
        graph = cls()
        for cell_ref, raw in cells.items():
            graph.add_formula(cell_ref, raw)
        return graph
