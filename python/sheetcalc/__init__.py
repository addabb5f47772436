"""sheetcalc — in-memory reactive cell evaluation for typed sheets.

Usage::

    from sheetcalc import SheetRegistry

    registry = SheetRegistry()
    sheet_id = registry.create_sheet([("A", "STRING"), ("C", "STRING")])
    registry.set_cell(sheet_id, "A", 1, "hi")
    registry.set_cell(sheet_id, "C", 1, "lookup(A,1)")
    registry.set_cell(sheet_id, "A", 1, "hello")
    registry.get_sheet_data(sheet_id)  # {"A,1": "hello", "C,1": "hello"}
"""

from sheetcalc._cell import Cell, CellAddress, CellValue
from sheetcalc._columns import ColumnDefinition, ColumnType
from sheetcalc._errors import (
    CircularReferenceError,
    ColumnNotFoundError,
    ErrorDetail,
    ErrorKind,
    InvalidTypeError,
    SheetError,
    SheetNotFoundError,
)
from sheetcalc._export import export_xlsx, to_workbook
from sheetcalc._lock import ReadWriteLock
from sheetcalc._registry import SheetRegistry
from sheetcalc._sheet import Sheet
from sheetcalc.calc import CellDelta, SheetEngine, WriteResult

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Cell",
    "CellAddress",
    "CellDelta",
    "CellValue",
    "CircularReferenceError",
    "ColumnDefinition",
    "ColumnNotFoundError",
    "ColumnType",
    "ErrorDetail",
    "ErrorKind",
    "InvalidTypeError",
    "ReadWriteLock",
    "Sheet",
    "SheetEngine",
    "SheetError",
    "SheetNotFoundError",
    "SheetRegistry",
    "WriteResult",
    "export_xlsx",
    "to_workbook",
]
