"""Tests for the column and cell data model."""

from __future__ import annotations

import dataclasses

import pytest
from sheetcalc import Cell, CellAddress, ColumnDefinition, ColumnType


class TestColumnType:
    @pytest.mark.parametrize("text,expected", [
        ("string", ColumnType.STRING),
        ("bOolean", ColumnType.BOOLEAN),
        ("INT", ColumnType.INT),
        (" double ", ColumnType.DOUBLE),
        (ColumnType.INT, ColumnType.INT),
    ])
    def test_parse(self, text: str, expected: ColumnType) -> None:
        assert ColumnType.parse(text) is expected

    def test_parse_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unknown column type: 'date'"):
            ColumnType.parse("date")

    def test_python_types(self) -> None:
        assert [t.python_type for t in ColumnType] == [str, int, float, bool]


class TestColumnDefinition:
    def test_frozen(self) -> None:
        col = ColumnDefinition("A", ColumnType.STRING)
        with pytest.raises(dataclasses.FrozenInstanceError):
            col.name = "B"  # type: ignore[misc]

    def test_string_type_coerced(self) -> None:
        assert ColumnDefinition("A", "boolean").type is ColumnType.BOOLEAN  # type: ignore[arg-type]


class TestCellAddress:
    def test_keys(self) -> None:
        addr = CellAddress("A", 10)
        assert addr.key == "10:A"
        assert addr.data_key == "A,10"
        assert str(addr) == "10:A"

    def test_from_key(self) -> None:
        assert CellAddress.from_key("10:A") == CellAddress("A", 10)
        assert CellAddress.from_key("0:col_x") == CellAddress("col_x", 0)

    @pytest.mark.parametrize("key", ["A,10", "x:A", "10:", ":A", "-1:A"])
    def test_from_key_invalid(self, key: str) -> None:
        with pytest.raises(ValueError):
            CellAddress.from_key(key)

    def test_negative_row(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            CellAddress("A", -1)

    def test_hashable_structural_key(self) -> None:
        assert {CellAddress("A", 1): 1}[CellAddress("A", 1)] == 1


class TestCell:
    def test_copy_is_independent(self) -> None:
        cell = Cell(CellAddress("A", 1), "hi", "hi")
        snap = cell.copy()
        cell.raw_value = "changed"
        assert snap.raw_value == "hi"
        assert snap == Cell(CellAddress("A", 1), "hi", "hi")
        assert cell.key == "1:A"
