"""SheetEngine protocol and result dataclasses."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from sheetcalc._cell import CellAddress, CellValue

if TYPE_CHECKING:
    from sheetcalc._sheet import Sheet


@dataclass(frozen=True)
class CellDelta:
    """A dependent cell's value change from propagation."""

    key: str  # canonical "{row}:{column}"
    old_value: CellValue
    new_value: CellValue
    raw_value: str | None = None  # the lookup that produced new_value


@dataclass(frozen=True)
class WriteResult:
    """Result of a successful ``set_cell``."""

    address: CellAddress
    raw_value: str
    value: CellValue
    deltas: tuple[CellDelta, ...] = ()  # dependents whose value changed
    max_chain_depth: int = 0  # longest dependency chain from the written cell

    @property
    def propagated_cells(self) -> int:
        return len(self.deltas)


@runtime_checkable
class SheetEngine(Protocol):
    """Operations a transport layer invokes on the engine."""

    def create_sheet(self, columns: Sequence[Any]) -> int:
        """Create a sheet with an immutable column schema. Returns its id."""
        ...

    def get_sheet(self, sheet_id: int) -> Sheet:
        """Return the sheet, or raise SheetNotFoundError."""
        ...

    def set_cell(
        self, sheet_id: int, column: str, row: int, raw_value: str,
    ) -> WriteResult:
        """Write a literal or lookup. Raises a SheetError subclass on failure."""
        ...

    def get_sheet_data(self, sheet_id: int) -> dict[str, CellValue]:
        """Return ``{"{column},{row}": evaluated value}`` for every cell."""
        ...

    def get_forward_dependencies(self, sheet_id: int) -> dict[str, list[str]]:
        """Return ``{"{row}:{column}": [addresses it references]}``."""
        ...

    def get_reverse_dependencies(self, sheet_id: int) -> dict[str, list[str]]:
        """Return ``{"{row}:{column}": [addresses that reference it]}``."""
        ...
