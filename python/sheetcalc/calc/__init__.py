"""sheetcalc.calc - SUM formula evaluation for a single cell grid."""

from sheetcalc.calc._evaluator import EvaluationContext, SheetEvaluator, evaluate
from sheetcalc.calc._graph import DependencyGraph
from sheetcalc.calc._parser import ContentKind, ParsedContent, classify, parse_sum_range
from sheetcalc.calc._protocol import CalcEngine, CellDelta, RecalcResult
from sheetcalc.calc._values import NAME_ERROR, REF_ERROR, format_number, to_number

__all__ = [
    "CalcEngine",
    "CellDelta",
    "ContentKind",
    "DependencyGraph",
    "EvaluationContext",
    "NAME_ERROR",
    "ParsedContent",
    "REF_ERROR",
    "RecalcResult",
    "SheetEvaluator",
    "classify",
    "evaluate",
    "format_number",
    "parse_sum_range",
    "to_number",
]
