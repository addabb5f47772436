"""Column schema: typed, named columns fixed at sheet creation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ColumnType(Enum):
    """Data type of every cell in a column."""

    STRING = "STRING"
    INT = "INT"
    DOUBLE = "DOUBLE"
    BOOLEAN = "BOOLEAN"

    @classmethod
    def parse(cls, text: str | ColumnType) -> ColumnType:
        """Case-insensitive lookup: ``"string"`` and ``"bOolean"`` both work."""
        if isinstance(text, ColumnType):
            return text
        try:
            return cls[text.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown column type: {text!r}") from None

    @property
    def python_type(self) -> type:
        """The exact runtime type a value in this column must have."""
        return _PYTHON_TYPES[self]


_PYTHON_TYPES: dict[ColumnType, type] = {
    ColumnType.STRING: str,
    ColumnType.INT: int,
    ColumnType.DOUBLE: float,
    ColumnType.BOOLEAN: bool,
}


@dataclass(frozen=True)
class ColumnDefinition:
    """A named, typed column. Immutable once the sheet is created."""

    name: str
    type: ColumnType

    def __post_init__(self) -> None:
        if not isinstance(self.type, ColumnType):
            object.__setattr__(self, "type", ColumnType.parse(self.type))
