"""Typed failures raised by the engine.

Every error carries a stable ``kind`` tag so a transport layer can map it to
its own status codes without inspecting messages::

    try:
        registry.set_cell(sheet_id, "B", 1, "lookup(A,10)")
    except SheetError as exc:
        payload = exc.detail().as_dict()  # {"kind": "INVALID_TYPE", "message": ...}
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum


class ErrorKind(str, Enum):
    SHEET_NOT_FOUND = "SHEET_NOT_FOUND"
    COLUMN_NOT_FOUND = "COLUMN_NOT_FOUND"
    INVALID_TYPE = "INVALID_TYPE"
    CIRCULAR_REFERENCE = "CIRCULAR_REFERENCE"


@dataclass(frozen=True)
class ErrorDetail:
    """Structured error: kind tag plus human-readable message."""

    kind: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return asdict(self)


class SheetError(Exception):
    """Base class for all engine failures."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def detail(self) -> ErrorDetail:
        return ErrorDetail(kind=self.kind.value, message=self.message)


class SheetNotFoundError(SheetError):
    """Raised for an unknown sheet id."""

    kind = ErrorKind.SHEET_NOT_FOUND


class ColumnNotFoundError(SheetError):
    """Raised for a column name missing from the sheet's schema."""

    kind = ErrorKind.COLUMN_NOT_FOUND


class InvalidTypeError(SheetError):
    """Raised when a literal or resolved value does not fit the column type."""

    kind = ErrorKind.INVALID_TYPE


class CircularReferenceError(SheetError):
    """Raised when a cell's resolution chain revisits its own address."""

    kind = ErrorKind.CIRCULAR_REFERENCE
