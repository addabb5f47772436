"""sheetcalc.calc - lookup evaluation, cycle detection and propagation."""

from sheetcalc.calc._evaluator import SheetEvaluator, check_type
from sheetcalc.calc._graph import DependencyGraph
from sheetcalc.calc._parser import LOOKUP_RE, is_lookup, parse_literal, parse_lookup
from sheetcalc.calc._protocol import CellDelta, SheetEngine, WriteResult

__all__ = [
    "CellDelta",
    "DependencyGraph",
    "LOOKUP_RE",
    "SheetEngine",
    "SheetEvaluator",
    "WriteResult",
    "check_type",
    "is_lookup",
    "parse_literal",
    "parse_lookup",
]
