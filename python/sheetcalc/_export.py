"""Dump a sheet's evaluated values into an openpyxl workbook."""

from __future__ import annotations

import os
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from openpyxl import Workbook
    from openpyxl.worksheet.worksheet import Worksheet

    from sheetcalc._sheet import Sheet


def _append_values(ws: Worksheet, values: Iterable[Any]) -> None:
    """Append one row, keeping every string a literal string cell."""
    from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

    ws.append([
        ILLEGAL_CHARACTERS_RE.sub("", v) if isinstance(v, str) else v
        for v in values
    ])
    for cell in ws[ws.max_row]:
        # openpyxl treats text starting with "=" as a formula
        if cell.data_type == "f":
            cell.data_type = "s"


def to_workbook(sheet: Sheet) -> Workbook:
    """Build a workbook: a header row of column names, then one row per used
    row index in ascending order.  Cells that were never written stay blank.
    Control characters Excel cannot store are dropped from text values.
    """
    from openpyxl import Workbook

    with sheet.lock.read():
        columns = [c.name for c in sheet.columns]
        by_row: dict[int, dict[str, object]] = {}
        for cell in sheet:
            by_row.setdefault(cell.address.row, {})[cell.address.column] = cell.evaluated_value

    wb = Workbook()
    ws = wb.active
    ws.title = f"Sheet {sheet.id}"
    _append_values(ws, ["row", *columns])
    for row in sorted(by_row):
        values = by_row[row]
        _append_values(ws, [row, *(values.get(name) for name in columns)])
    return wb


def export_xlsx(sheet: Sheet, filename: str | os.PathLike[str]) -> None:
    """Write :func:`to_workbook` output to *filename*."""
    to_workbook(sheet).save(str(filename))
