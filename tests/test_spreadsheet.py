"""Tests for the CellStore and the panel-facing Spreadsheet."""

from __future__ import annotations

from collections.abc import Mapping

import pytest

from sheetcalc import (
    NAME_ERROR,
    SAMPLE_CELLS,
    CellStore,
    Spreadsheet,
    evaluate,
)
from sheetcalc.calc import CellDelta, RecalcResult


class _CountingEngine:
    """Wraps the real evaluator and counts full passes."""

    def __init__(self) -> None:
        self.passes = 0

    def evaluate(self, cells: Mapping[str, str]) -> dict[str, str]:
        self.passes += 1
        return evaluate(cells)


class TestCellStore:
    def test_get_absent_is_empty(self) -> None:
        store = CellStore()
        assert store.get("A1") == ""
        assert store["Z100"] == ""
        assert "A1" not in store
        assert len(store) == 0

    def test_keys_canonicalized(self) -> None:
        store = CellStore()
        store["b04"] = "hello"
        assert list(store) == ["B4"]
        assert store.get("B4") == "hello"
        assert "b4" in store

    def test_empty_string_removes(self) -> None:
        store = CellStore({"A1": "x"})
        store["A1"] = ""
        assert "A1" not in store
        assert store.snapshot() == {}

    def test_delitem(self) -> None:
        store = CellStore({"A1": "x"})
        del store["a1"]
        assert len(store) == 0
        with pytest.raises(KeyError):
            del store["A1"]

    def test_revision_tracks_mutations(self) -> None:
        store = CellStore()
        assert store.revision == 0
        store["A1"] = "1"
        store["A1"] = "2"
        assert store.revision == 2
        store["B1"] = ""  # already empty
        assert store.revision == 2
        store["A1"] = ""
        assert store.revision == 3

    def test_snapshot_is_a_copy(self) -> None:
        store = CellStore({"A1": "1"})
        snap = store.snapshot()
        store["A1"] = "2"
        assert snap == {"A1": "1"}

    @pytest.mark.parametrize("key", ["AA1", "A0", "A101", "1A", ""])
    def test_invalid_keys_rejected(self, key: str) -> None:
        store = CellStore()
        with pytest.raises(ValueError):
            store[key] = "x"
        assert key not in store

    def test_non_string_content_rejected(self) -> None:
        with pytest.raises(TypeError, match="must be str"):
            CellStore({"A1": 5})  # type: ignore[dict-item]


class TestSpreadsheet:
    def test_sample_data(self) -> None:
        sheet = Spreadsheet.with_sample_data()
        assert sheet.display("A1") == "Revenue"
        assert sheet.display("B4") == "1800"
        assert sheet.display("C4") == "2100"
        assert sheet.display("D4") == "2600"
        assert sheet.display("E5") == ""
        assert sheet.store.snapshot() == SAMPLE_CELLS

    def test_raw_content_backs_formula_bar(self) -> None:
        sheet = Spreadsheet.with_sample_data()
        assert sheet.get_raw_content("B4") == "=SUM(B1:B2)"
        assert sheet.get_raw_content("Z100") == ""

    def test_edit_triggers_recompute_on_read(self) -> None:
        sheet = Spreadsheet.with_sample_data()
        assert sheet.display("B4") == "1800"
        sheet.set_raw_content("B1", "2000")
        assert sheet.display("B4") == "2800"

    def test_evaluation_map_cached_until_edit(self) -> None:
        engine = _CountingEngine()
        sheet = Spreadsheet({"A1": "1", "A2": "=SUM(A1:A1)"}, evaluator=engine)
        first = sheet.evaluation_map
        assert sheet.get_evaluation_map() == first
        assert engine.passes == 1
        sheet.set_raw_content("A1", "2")
        assert sheet.evaluation_map["A2"] == "2"
        assert engine.passes == 2

    def test_evaluation_map_is_a_copy(self) -> None:
        sheet = Spreadsheet({"A1": "1"})
        sheet.evaluation_map["A1"] = "tampered"
        assert sheet.display("A1") == "1"

    def test_unrecognized_formula_displayed(self) -> None:
        sheet = Spreadsheet({"A1": "=AVG(B1:B2)"})
        assert sheet.display("A1") == NAME_ERROR

    def test_circular_references(self) -> None:
        sheet = Spreadsheet({"A1": "=SUM(B1:B1)", "B1": "=SUM(A1:A1)", "C1": "3"})
        assert sheet.circular_references == {"A1", "B1"}
        assert sheet.display("A1") == "0"
        assert sheet.display("B1") == "0"

    def test_invalid_selection(self) -> None:
        with pytest.raises(ValueError):
            Spreadsheet(selected="AA1")

    def test_grid_axes(self) -> None:
        sheet = Spreadsheet()
        assert sheet.column_headers[0] == "A"
        assert len(sheet.column_headers) == 26
        assert sheet.row_numbers[-1] == 100


class TestApplyEdit:
    def test_reports_changed_display_values(self) -> None:
        sheet = Spreadsheet.with_sample_data()
        result = sheet.apply_edit("b1", "1500")
        assert isinstance(result, RecalcResult)
        assert result.edited == "B1"
        assert result.changed_cells == ["B1", "B4"]
        assert result.deltas[1] == CellDelta(
            cell_ref="B4", old_value="1800", new_value="2300", raw_content="=SUM(B1:B2)",
        )
        assert result.total_cells == len(SAMPLE_CELLS)
        assert result.formula_cells == 3
        assert result.circular_cells == frozenset()

    def test_clearing_a_cell(self) -> None:
        sheet = Spreadsheet.with_sample_data()
        result = sheet.apply_edit("B2", "")
        assert sheet.get_raw_content("B2") == ""
        assert "B2" not in sheet.store
        assert sheet.display("B4") == "1000"
        assert CellDelta("B2", "800", "", "") in result.deltas

    def test_no_change_no_deltas(self) -> None:
        sheet = Spreadsheet({"A1": "1"})
        result = sheet.apply_edit("A1", "1")
        assert result.deltas == ()

    def test_cycle_reported(self) -> None:
        sheet = Spreadsheet({"A1": "5"})
        result = sheet.apply_edit("A1", "=SUM(A1:A1)")
        assert result.circular_cells == frozenset({"A1"})
        assert result.deltas == (CellDelta("A1", "5", "0", "=SUM(A1:A1)"),)


class TestSelection:
    def test_default_selection(self) -> None:
        sheet = Spreadsheet.with_sample_data()
        assert sheet.selected == "A1"
        assert sheet.formula_input == "Revenue"

    def test_select_and_edit(self) -> None:
        sheet = Spreadsheet.with_sample_data()
        sheet.select("c2")
        assert sheet.selected == "C2"
        assert sheet.formula_input == "900"
        result = sheet.edit_selected("=SUM(C1:C1)")
        assert result is not None
        assert sheet.display("C2") == "1200"
        assert sheet.display("C4") == "2400"
        assert sheet.formula_input == "=SUM(C1:C1)"

    def test_no_selection(self) -> None:
        sheet = Spreadsheet({"A1": "x"}, selected=None)
        assert sheet.formula_input == ""
        assert sheet.edit_selected("y") is None
        assert sheet.get_raw_content("A1") == "x"

    def test_clear_selection(self) -> None:
        sheet = Spreadsheet()
        sheet.clear_selection()
        assert sheet.selected is None
