"""SheetEvaluator: resolves raw cell values against a sheet's cell store.

A raw value is either a literal, parsed with the destination column's type,
or a single-hop ``lookup(column,row)`` that adopts the referenced cell's
evaluated value.  Resolution walks the lookup chain while tracking the
current chain in a ``visiting`` set, which is how circular references are
caught.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from sheetcalc._cell import Cell, CellAddress, CellValue
from sheetcalc._columns import ColumnDefinition, ColumnType
from sheetcalc._errors import CircularReferenceError, InvalidTypeError
from sheetcalc.calc._graph import DependencyGraph
from sheetcalc.calc._parser import parse_literal, parse_lookup
from sheetcalc.calc._protocol import CellDelta

logger = logging.getLogger(__name__)


def check_type(expected: ColumnType, value: CellValue) -> None:
    """Raise :class:`InvalidTypeError` unless *value* fits *expected*.

    The absent value always fits. Otherwise the runtime type must match
    exactly: an ``int`` is not a DOUBLE and a ``bool`` is not an INT.
    """
    if value is None:
        return
    if type(value) is not expected.python_type:
        raise InvalidTypeError(
            f"Expected {expected.value}, got {type(value).__name__}: {value!r}"
        )


def _values_differ(a: CellValue, b: CellValue) -> bool:
    # True == 1 and 1 == 1.0 in Python, so compare types as well
    return type(a) is not type(b) or a != b


class SheetEvaluator:
    """Evaluates cells of one sheet.

    Usage::

        evaluator = SheetEvaluator(cells, column_lookup, graph)
        value = evaluator.evaluate(cell, set())
        deltas = evaluator.propagate(cell.key)
    """

    def __init__(
        self,
        cells: Mapping[str, Cell],
        column_lookup: Callable[[str], ColumnDefinition],
        graph: DependencyGraph,
    ) -> None:
        self._cells = cells
        self._column = column_lookup
        self._graph = graph

    # ------------------------------------------------------------------
    # Single-cell evaluation
    # ------------------------------------------------------------------

    def evaluate(self, cell: Cell, visiting: set[str]) -> CellValue:
        """Resolve *cell*'s raw value and cache it as its evaluated value.

        The lookup chain is walked iteratively, so its length is not bounded
        by the interpreter's recursion limit.  Every cell on the walked chain
        ends up holding the resolved value; nothing is cached if the walk
        raises.
        """
        chain: list[Cell] = []
        current = cell
        while True:
            key = current.key
            if key in visiting:
                raise CircularReferenceError(f"Cycle detected at {key}")
            visiting.add(key)
            chain.append(current)

            target = parse_lookup(current.raw_value)
            if target is None:
                column = self._column(current.address.column)
                value = parse_literal(column.type, current.raw_value)
                break
            ref_cell = self._cells.get(target.key)
            if ref_cell is None:
                value = None
                break
            current = ref_cell

        for walked in chain:
            walked.evaluated_value = value
        return value

    def evaluate_lookup(self, address: CellAddress, visiting: set[str]) -> CellValue:
        """Evaluate the cell at *address*; a never-written cell is absent."""
        ref_cell = self._cells.get(address.key)
        if ref_cell is None:
            return None
        return self.evaluate(ref_cell, visiting)

    def detect_cycle(self, new_cell: Cell, visiting: set[str]) -> None:
        """Walk *new_cell*'s resolution chain looking for its own address.

        *new_cell* must already hold the proposed raw value, so that a self
        or mutual reference is caught before the write is committed.
        """
        key = new_cell.key
        if key in visiting:
            raise CircularReferenceError(f"Cycle detected for {key}")
        visiting.add(key)

        target = parse_lookup(new_cell.raw_value)
        if target is not None:
            self.evaluate_lookup(target, visiting)

    # ------------------------------------------------------------------
    # Dependent propagation
    # ------------------------------------------------------------------

    def propagate(self, key: str) -> list[CellDelta]:
        """Re-evaluate every transitive dependent of *key* once.

        A lookup cell has exactly one target, so the reverse graph below
        *key* is a tree and breadth-first order reaches each dependent's
        target before the dependent itself.  Each dependent therefore takes
        its target's freshly cached value without re-walking the chain.

        Returns a delta for each dependent whose evaluated value changed.
        """
        deltas: list[CellDelta] = []
        affected = self._graph.affected_cells(key)
        for dep in affected:
            cell = self._cells.get(dep)
            if cell is None:
                continue
            old_value = cell.evaluated_value
            new_value = self._refresh(cell)
            if _values_differ(old_value, new_value):
                deltas.append(CellDelta(
                    key=dep,
                    old_value=old_value,
                    new_value=new_value,
                    raw_value=cell.raw_value,
                ))

        if affected:
            logger.debug(
                "Propagated %s to %d dependents (%d changed)",
                key, len(affected), len(deltas),
            )
        return deltas

    def _refresh(self, cell: Cell) -> CellValue:
        target = parse_lookup(cell.raw_value)
        if target is None:
            return self.evaluate(cell, set())
        ref_cell = self._cells.get(target.key)
        value = None if ref_cell is None else ref_cell.evaluated_value
        cell.evaluated_value = value
        return value
