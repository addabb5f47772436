"""Sheet: schema, cell store, dependency graph and lock for one spreadsheet."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from sheetcalc._cell import Cell, CellAddress, CellValue
from sheetcalc._columns import ColumnDefinition
from sheetcalc._errors import ColumnNotFoundError
from sheetcalc._lock import ReadWriteLock
from sheetcalc.calc._evaluator import SheetEvaluator, check_type
from sheetcalc.calc._graph import DependencyGraph
from sheetcalc.calc._parser import parse_literal, parse_lookup
from sheetcalc.calc._protocol import WriteResult

logger = logging.getLogger(__name__)


@dataclass
class _Snapshot:
    """Pre-write state of one address, enough to undo a failed write."""

    key: str
    cell: Cell | None  # copy of the old cell, None if the address was empty
    dependencies: set[str]
    created_keys: list[str] = field(default_factory=list)  # new graph entries
    # dependent key -> evaluated value before propagation
    dependent_values: dict[str, CellValue] = field(default_factory=dict)


class Sheet:
    """A single spreadsheet with an immutable typed schema.

    All writes hold the exclusive lock for their full duration; reads hold
    the shared lock, so a reader never observes a half-applied write.
    """

    __slots__ = ("_id", "_columns", "_cells", "_graph", "_evaluator", "_lock")

    def __init__(self, sheet_id: int, columns: Iterable[ColumnDefinition]) -> None:
        self._id = sheet_id
        self._columns: tuple[ColumnDefinition, ...] = tuple(columns)
        # "{row}:{column}" -> Cell, in order of first creation
        self._cells: dict[str, Cell] = {}
        self._graph = DependencyGraph()
        self._evaluator = SheetEvaluator(self._cells, self.column, self._graph)
        self._lock = ReadWriteLock()

    @property
    def id(self) -> int:
        return self._id

    @property
    def columns(self) -> tuple[ColumnDefinition, ...]:
        return self._columns

    @property
    def graph(self) -> DependencyGraph:
        return self._graph

    @property
    def lock(self) -> ReadWriteLock:
        return self._lock

    @property
    def cell_count(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells.values())

    # ------------------------------------------------------------------
    # Schema / cell access
    # ------------------------------------------------------------------

    def column(self, name: str) -> ColumnDefinition:
        """First column named *name*, or raise ColumnNotFoundError."""
        for col in self._columns:
            if col.name == name:
                return col
        raise ColumnNotFoundError(f"Column {name} not found in sheet schema")

    def get_cell(self, column: str, row: int) -> Cell | None:
        return self._cells.get(CellAddress(column, row).key)

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def set_cell(self, column: str, row: int, raw_value: str) -> WriteResult:
        """Write a literal or ``lookup(col,row)`` into ``(column, row)``.

        Validates the type and rejects circular references before the write
        becomes visible, then refreshes every transitive dependent.  On any
        failure the address's previous cell and dependencies are restored
        and the error is re-raised.
        """
        with self._lock.write():
            column_def = self.column(column)
            address = CellAddress(column, row)
            snapshot = self._take_snapshot(address.key)
            try:
                cell = self._install(address, raw_value, snapshot)

                target = parse_lookup(raw_value)
                if target is not None:
                    value = self._evaluator.evaluate_lookup(target, set())
                    check_type(column_def.type, value)
                    self._evaluator.detect_cycle(cell, set())
                    if target.key not in self._graph:
                        snapshot.created_keys.append(target.key)
                    self._graph.add_dependency(address.key, target.key)
                else:
                    value = parse_literal(column_def.type, raw_value)
                    check_type(column_def.type, value)
                    self._evaluator.detect_cycle(cell, set())

                cell.evaluated_value = value
                snapshot.dependent_values = self._dependent_values(address.key)
                deltas = self._evaluator.propagate(address.key)
            except Exception as exc:
                self._rollback(snapshot)
                logger.debug(
                    "Rejected write %s=%r on sheet %d: %s",
                    address.key, raw_value, self._id, exc,
                )
                raise

            logger.debug("Sheet %d: %s=%r -> %r", self._id, address.key, raw_value, value)
            return WriteResult(
                address=address,
                raw_value=raw_value,
                value=value,
                deltas=tuple(deltas),
                max_chain_depth=self._graph.max_depth(address.key),
            )

    def _take_snapshot(self, key: str) -> _Snapshot:
        old = self._cells.get(key)
        return _Snapshot(
            key=key,
            cell=old.copy() if old is not None else None,
            dependencies=self._graph.dependencies(key),
        )

    def _install(self, address: CellAddress, raw_value: str, snapshot: _Snapshot) -> Cell:
        """Speculatively put the new raw value in place and drop old edges."""
        key = address.key
        cell = self._cells.get(key)
        if cell is None:
            cell = Cell(address, raw_value)
            self._cells[key] = cell
        else:
            cell.raw_value = raw_value
            cell.evaluated_value = None

        if key not in self._graph:
            snapshot.created_keys.append(key)
        self._graph.clear_dependencies(key)
        return cell

    def _dependent_values(self, key: str) -> dict[str, CellValue]:
        values = {}
        for dep in self._graph.affected_cells(key):
            cell = self._cells.get(dep)
            if cell is not None:
                values[dep] = cell.evaluated_value
        return values

    def _rollback(self, snapshot: _Snapshot) -> None:
        """Restore the address captured in *snapshot* and its dependents."""
        key = snapshot.key
        if snapshot.cell is None:
            self._cells.pop(key, None)
        else:
            cell = self._cells.get(key)
            if cell is None:
                self._cells[key] = snapshot.cell.copy()
            else:
                cell.raw_value = snapshot.cell.raw_value
                cell.evaluated_value = snapshot.cell.evaluated_value
        for dep, old_value in snapshot.dependent_values.items():
            self._cells[dep].evaluated_value = old_value

        self._graph.set_dependencies(key, snapshot.dependencies)
        for created in reversed(snapshot.created_keys):
            self._graph.discard(created)

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def data(self) -> dict[str, CellValue]:
        """``{"{column},{row}": evaluated value}`` for every cell."""
        with self._lock.read():
            return {c.address.data_key: c.evaluated_value for c in self._cells.values()}

    def raw_values(self) -> dict[str, str]:
        """``{"{column},{row}": raw value}`` for every cell."""
        with self._lock.read():
            return {c.address.data_key: c.raw_value for c in self._cells.values()}

    def forward_dependencies(self) -> dict[str, list[str]]:
        """``{"{row}:{column}": [cells it references]}``."""
        with self._lock.read():
            return self._graph.snapshot()[0]

    def reverse_dependencies(self) -> dict[str, list[str]]:
        """``{"{row}:{column}": [cells that reference it]}``."""
        with self._lock.read():
            return self._graph.snapshot()[1]

    def __repr__(self) -> str:
        cols = ", ".join(f"{c.name}:{c.type.value}" for c in self._columns)
        return f"<Sheet id={self._id} columns=[{cols}] cells={len(self._cells)}>"
