"""sheetcalc - cell store and SUM formula engine for a 26 x 100 grid.

Usage::

    from sheetcalc import Spreadsheet, evaluate

    # Pure evaluation of a snapshot
    evaluate({"A1": "5", "B2": "5", "C3": "=SUM(A1:B2)"})["C3"]  # "10"

    # Panel-facing state
    sheet = Spreadsheet.with_sample_data()
    sheet.select("B1")
    sheet.formula_input        # "1000"
    sheet.edit_selected("=SUM(A1:A1)")
    sheet.display("B1")        # "0"
"""

from sheetcalc._spreadsheet import SAMPLE_CELLS, Spreadsheet
from sheetcalc._store import CellStore
from sheetcalc._utils import MAX_COLUMNS, MAX_ROWS, CellRange, Coordinate
from sheetcalc.calc import NAME_ERROR, REF_ERROR, SheetEvaluator, evaluate

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CellRange",
    "CellStore",
    "Coordinate",
    "MAX_COLUMNS",
    "MAX_ROWS",
    "NAME_ERROR",
    "REF_ERROR",
    "SAMPLE_CELLS",
    "SheetEvaluator",
    "Spreadsheet",
    "evaluate",
]
