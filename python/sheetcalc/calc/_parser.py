"""Raw value parsing: lookup syntax detection and type-directed literals."""

from __future__ import annotations

import math
import re
from functools import lru_cache

from sheetcalc._cell import CellAddress, CellValue
from sheetcalc._columns import ColumnType
from sheetcalc._errors import InvalidTypeError

# ---------------------------------------------------------------------------
# Lookup syntax
# ---------------------------------------------------------------------------

# lookup(A,10) / lookup(A, 10), surrounding whitespace allowed
LOOKUP_RE = re.compile(r"^\s*lookup\((\w+),\s*(\d+)\)\s*$", re.ASCII)

_INT_RE = re.compile(r"[+-]?[0-9]+")
# plain decimal or scientific notation; no "inf", "nan" or "_" separators
_DOUBLE_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


@lru_cache(maxsize=4096)
def parse_lookup(raw: str) -> CellAddress | None:
    """Return the referenced address if *raw* is a lookup, else ``None``."""
    m = LOOKUP_RE.match(raw)
    if m is None:
        return None
    return CellAddress(m.group(1), int(m.group(2)))


def is_lookup(raw: str) -> bool:
    return LOOKUP_RE.match(raw) is not None


# ---------------------------------------------------------------------------
# Literal parsing
# ---------------------------------------------------------------------------


def _parse_bool(raw: str) -> bool:
    lowered = raw.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise InvalidTypeError(f"Expected BOOLEAN, got: {raw!r}")


def _parse_int(raw: str) -> int:
    # int() alone would accept "4_2" and surrounding whitespace
    if not _INT_RE.fullmatch(raw):
        raise InvalidTypeError(f"Expected INT, got: {raw!r}")
    value = int(raw)
    if not INT64_MIN <= value <= INT64_MAX:
        raise InvalidTypeError(f"Expected INT, got out-of-range value: {raw!r}")
    return value


def _parse_double(raw: str) -> float:
    # float() alone would accept "nan", "inf", "1_0" and surrounding whitespace
    if not _DOUBLE_RE.fullmatch(raw):
        raise InvalidTypeError(f"Expected DOUBLE, got: {raw!r}")
    value = float(raw)
    if not math.isfinite(value):
        raise InvalidTypeError(f"Expected DOUBLE, got out-of-range value: {raw!r}")
    return value


def parse_literal(column_type: ColumnType, raw: str) -> CellValue:
    """Parse *raw* as a literal of *column_type*.

    STRING always succeeds. INT requires the whole string to be a base-10
    integer (``"42.5"`` fails). DOUBLE takes finite decimal or scientific text, so
    ``"42"`` becomes ``42.0``.  Raises :class:`InvalidTypeError` on failure.
    """
    if column_type is ColumnType.STRING:
        return raw
    if column_type is ColumnType.BOOLEAN:
        return _parse_bool(raw)
    if column_type is ColumnType.INT:
        return _parse_int(raw)
    if column_type is ColumnType.DOUBLE:
        return _parse_double(raw)
    raise InvalidTypeError(f"Unsupported column type: {column_type!r}")
