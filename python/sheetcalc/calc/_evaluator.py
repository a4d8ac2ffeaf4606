"""SheetEvaluator: memoized evaluation of a cell snapshot with a cycle guard.

Every pass starts from an empty :class:`EvaluationContext` and resolves each
populated cell.  A cell that is re-entered while it is still being resolved
yields ``#REF!`` to the caller that re-entered it.  That token is never
memoized: the re-entered cell finishes its own computation and caches
whatever that produces, so ``A1 = =SUM(A1:A1)`` displays ``0``.

Resolution walks an explicit frame stack rather than the Python call stack
so a chain spanning the whole grid cannot hit the recursion limit.  Operands
are visited in exactly the order a recursive walk would visit them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

from sheetcalc.calc._parser import ContentKind, classify
from sheetcalc.calc._values import NAME_ERROR, REF_ERROR, format_number, to_number

logger = logging.getLogger(__name__)


@dataclass
class EvaluationContext:
    """State owned by a single evaluation pass."""

    cells: Mapping[str, str]
    # cell -> finalized display value
    memo: dict[str, str] = field(default_factory=dict)
    # cells currently being resolved
    in_progress: set[str] = field(default_factory=set)
    cycle_hits: int = 0


@dataclass
class _Frame:
    """A SUM cell whose operands are still being resolved."""

    key: str
    operands: Iterator[str]
    total: float = 0.0


class SheetEvaluator:
    """Computes display values for a snapshot of raw cell contents.

    Usage::

        evaluator = SheetEvaluator()
        display = evaluator.evaluate({"A1": "5", "A2": "=SUM(A1:A1)"})
        display["A2"]  # "5"
    """

    def evaluate(self, cells: Mapping[str, str]) -> dict[str, str]:
        """Resolve every populated cell of *cells* in a fresh pass.

        The returned map also holds empty strings for absent cells that were
        read as SUM operands.
        """
        ctx = EvaluationContext(cells)
        for key in cells:
            self.resolve(ctx, key)
        logger.debug(
            "Evaluated %d cells (%d populated, %d cycle short-circuits)",
            len(ctx.memo), len(cells), ctx.cycle_hits,
        )
        return ctx.memo

    def resolve(self, ctx: EvaluationContext, key: str) -> str:
        """Display value of *key* within the pass described by *ctx*."""
        stack: list[_Frame] = []
        result = self._enter(ctx, key, stack)

        while stack:
            frame = stack[-1]
            operand = next(frame.operands, None)
            if operand is None:
                stack.pop()
                result = self._finish(ctx, frame.key, format_number(frame.total))
                if stack:
                    stack[-1].total += to_number(result)
                continue
            value = self._enter(ctx, operand, stack)
            if value is not None:
                frame.total += to_number(value)

        assert result is not None
        return result

    def _enter(self, ctx: EvaluationContext, key: str, stack: list[_Frame]) -> str | None:
        """Start resolving *key*.

        Returns the display value when it is known immediately, or None after
        pushing a frame for a SUM whose operands still need resolving.
        """
        if key in ctx.memo:
            return ctx.memo[key]
        if key in ctx.in_progress:
            ctx.cycle_hits += 1
            logger.debug("Circular reference: %s re-entered while in progress", key)
            return REF_ERROR

        ctx.in_progress.add(key)
        parsed = classify(ctx.cells.get(key, ""))

        if parsed.kind is ContentKind.SUM:
            assert parsed.cell_range is not None
            stack.append(_Frame(key, parsed.cell_range.cells()))
            return None
        if parsed.kind is ContentKind.UNRECOGNIZED:
            logger.debug("Unrecognized formula in %s: %r", key, parsed.raw)
            return self._finish(ctx, key, NAME_ERROR)
        return self._finish(ctx, key, parsed.raw)

    @staticmethod
    def _finish(ctx: EvaluationContext, key: str, value: str) -> str:
        ctx.in_progress.discard(key)
        ctx.memo[key] = value
        return value


def evaluate(cells: Mapping[str, str]) -> dict[str, str]:
    """Display value for every populated cell of a raw-content snapshot."""
    return SheetEvaluator().evaluate(cells)
