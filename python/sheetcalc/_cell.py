"""Cell addresses and cell state."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Union

# Evaluated value of a cell. ``None`` is the absent value produced by a
# lookup into a cell that was never written.
CellValue = Union[str, int, float, bool, None]


@dataclass(frozen=True, order=True)
class CellAddress:
    """Structural cell key: column name plus non-negative row index."""

    column: str
    row: int

    def __post_init__(self) -> None:
        if self.row < 0:
            raise ValueError(f"Row index must be non-negative, got {self.row}")

    @property
    def key(self) -> str:
        """Dependency-graph key, ``"{row}:{column}"``."""
        return f"{self.row}:{self.column}"

    @property
    def data_key(self) -> str:
        """Data snapshot key, ``"{column},{row}"``."""
        return f"{self.column},{self.row}"

    @classmethod
    def from_key(cls, key: str) -> CellAddress:
        """Parse a ``"{row}:{column}"`` graph key."""
        row, sep, column = key.partition(":")
        if not sep or not row.isdigit() or not column:
            raise ValueError(f"Invalid cell key: {key!r}")
        return cls(column, int(row))

    def __str__(self) -> str:
        return self.key


@dataclass
class Cell:
    """A written cell: raw input plus its eagerly evaluated value."""

    address: CellAddress
    raw_value: str
    evaluated_value: CellValue = None

    @property
    def key(self) -> str:
        return self.address.key

    def copy(self) -> Cell:
        return replace(self)
