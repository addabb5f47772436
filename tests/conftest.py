"""Shared fixtures for sheetcalc tests."""

from __future__ import annotations

import pytest
from sheetcalc import ColumnDefinition, ColumnType, Sheet, SheetRegistry


@pytest.fixture
def registry() -> SheetRegistry:
    return SheetRegistry()


@pytest.fixture
def sheet_id(registry: SheetRegistry) -> int:
    """Sheet with columns A:STRING, B:BOOLEAN, C:STRING."""
    return registry.create_sheet([
        ColumnDefinition("A", ColumnType.STRING),
        ColumnDefinition("B", ColumnType.BOOLEAN),
        ColumnDefinition("C", ColumnType.STRING),
    ])


@pytest.fixture
def typed_sheet() -> Sheet:
    """Sheet with one column of every type."""
    return Sheet(1, [
        ColumnDefinition("S", ColumnType.STRING),
        ColumnDefinition("I", ColumnType.INT),
        ColumnDefinition("D", ColumnType.DOUBLE),
        ColumnDefinition("B", ColumnType.BOOLEAN),
    ])


def sheet_state(sheet: Sheet) -> tuple[object, ...]:
    """Everything observable about a sheet, for before/after comparisons."""
    cells = [(c.key, c.raw_value, type(c.evaluated_value), c.evaluated_value) for c in sheet]
    return (cells, sheet.forward_dependencies(), sheet.reverse_dependencies())
