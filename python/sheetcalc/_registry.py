"""SheetRegistry: creates sheets and routes engine operations to them."""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Iterable, Mapping
from typing import Any

from sheetcalc._cell import CellValue
from sheetcalc._columns import ColumnDefinition, ColumnType
from sheetcalc._errors import SheetNotFoundError
from sheetcalc._sheet import Sheet
from sheetcalc.calc._protocol import WriteResult

logger = logging.getLogger(__name__)


def _to_column(entry: Any) -> ColumnDefinition:
    """Accept a ColumnDefinition, a ``(name, type)`` pair or a mapping."""
    if isinstance(entry, ColumnDefinition):
        return entry
    if isinstance(entry, Mapping):
        return ColumnDefinition(entry["name"], ColumnType.parse(entry["type"]))
    name, col_type = entry
    return ColumnDefinition(name, ColumnType.parse(col_type))


class SheetRegistry:
    """In-memory map of sheet id -> Sheet, safe for concurrent use.

    The registry lock only guards the id map; operations on a sheet use that
    sheet's own lock, so different sheets never block each other.

    Usage::

        registry = SheetRegistry()
        sheet_id = registry.create_sheet([("A", "STRING"), ("B", "BOOLEAN")])
        registry.set_cell(sheet_id, "A", 10, "hello")
        registry.get_sheet_data(sheet_id)  # {"A,10": "hello"}
    """

    def __init__(self, first_id: int = 1) -> None:
        self._sheets: dict[int, Sheet] = {}
        self._ids = itertools.count(first_id)
        self._lock = threading.Lock()

    def create_sheet(self, columns: Iterable[Any]) -> int:
        """Create a sheet with the given schema and return its id."""
        definitions = [_to_column(c) for c in columns]
        with self._lock:
            sheet_id = next(self._ids)
            self._sheets[sheet_id] = Sheet(sheet_id, definitions)
        logger.debug(
            "Created sheet %d with columns %s",
            sheet_id, [f"{c.name}:{c.type.value}" for c in definitions],
        )
        return sheet_id

    def get_sheet(self, sheet_id: int) -> Sheet:
        with self._lock:
            sheet = self._sheets.get(sheet_id)
        if sheet is None:
            raise SheetNotFoundError(f"Sheet not found: {sheet_id}")
        return sheet

    def set_cell(
        self, sheet_id: int, column: str, row: int, raw_value: str,
    ) -> WriteResult:
        return self.get_sheet(sheet_id).set_cell(column, row, raw_value)

    def get_sheet_data(self, sheet_id: int) -> dict[str, CellValue]:
        return self.get_sheet(sheet_id).data()

    def get_forward_dependencies(self, sheet_id: int) -> dict[str, list[str]]:
        return self.get_sheet(sheet_id).forward_dependencies()

    def get_reverse_dependencies(self, sheet_id: int) -> dict[str, list[str]]:
        return self.get_sheet(sheet_id).reverse_dependencies()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def sheet_ids(self) -> list[int]:
        with self._lock:
            return list(self._sheets)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sheets)

    def __contains__(self, sheet_id: object) -> bool:
        with self._lock:
            return sheet_id in self._sheets

    def __repr__(self) -> str:
        return f"<SheetRegistry sheets={self.sheet_ids()}>"
