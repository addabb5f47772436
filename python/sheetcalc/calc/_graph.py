"""Dependency graph between cells, kept symmetric in both directions."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable


class DependencyGraph:
    """Tracks which cells a cell reads from, and which cells read from it.

    All cell keys use the canonical ``"{row}:{column}"`` format.  Both maps
    are only ever updated together, so for every pair ``(s, t)``::

        t in forward[s]  <=>  s in reverse[t]
    """

    __slots__ = ("forward", "reverse")

    def __init__(self) -> None:
        # cell -> set of cells it reads from
        self.forward: dict[str, set[str]] = {}
        # cell -> set of cells that read from it (reverse edges)
        self.reverse: dict[str, set[str]] = {}

    def __contains__(self, key: str) -> bool:
        return key in self.forward

    def ensure(self, key: str) -> None:
        """Give *key* an entry (possibly empty) in both maps."""
        self.forward.setdefault(key, set())
        self.reverse.setdefault(key, set())

    def add_dependency(self, source: str, target: str) -> None:
        """Record that *source* reads from *target*."""
        self.ensure(source)
        self.ensure(target)
        self.forward[source].add(target)
        self.reverse[target].add(source)

    def clear_dependencies(self, key: str) -> set[str]:
        """Drop all of *key*'s forward edges. Returns the former targets."""
        self.ensure(key)
        old_targets = self.forward[key]
        for target in old_targets:
            self.reverse[target].discard(key)
        self.forward[key] = set()
        return old_targets

    def set_dependencies(self, key: str, targets: Iterable[str]) -> None:
        """Replace *key*'s forward set with *targets*, reverse side included."""
        self.clear_dependencies(key)
        for target in targets:
            self.add_dependency(key, target)

    def discard(self, key: str) -> None:
        """Remove *key*'s entries entirely. It must have no edges left."""
        if self.forward.get(key) or self.reverse.get(key):
            raise ValueError(f"Cannot discard {key}: it still has edges")
        self.forward.pop(key, None)
        self.reverse.pop(key, None)

    def dependencies(self, key: str) -> set[str]:
        return set(self.forward.get(key, ()))

    def dependents(self, key: str) -> set[str]:
        return set(self.reverse.get(key, ()))

    def affected_cells(self, key: str) -> list[str]:
        """All cells transitively reading from *key*, in BFS order.

        Each cell appears once; *key* itself is excluded.
        """
        queue: deque[str] = deque([key])
        visited: set[str] = {key}
        order: list[str] = []

        while queue:
            cell = queue.popleft()
            for dep in sorted(self.reverse.get(cell, ())):
                if dep not in visited:
                    visited.add(dep)
                    order.append(dep)
                    queue.append(dep)

        return order

    def max_depth(self, key: str) -> int:
        """Longest dependency chain from *key* through its dependents."""
        depth: dict[str, int] = {key: 0}
        queue: deque[str] = deque([key])
        max_d = 0

        while queue:
            cell = queue.popleft()
            current_depth = depth[cell]
            for dep in self.reverse.get(cell, ()):
                new_depth = current_depth + 1
                if dep not in depth or new_depth > depth[dep]:
                    depth[dep] = new_depth
                    max_d = max(max_d, new_depth)
                    queue.append(dep)

        return max_d

    def is_symmetric(self) -> bool:
        """Check the forward/reverse mutual-inverse invariant."""
        for source, targets in self.forward.items():
            for target in targets:
                if source not in self.reverse.get(target, ()):
                    return False
        for target, sources in self.reverse.items():
            for source in sources:
                if target not in self.forward.get(source, ()):
                    return False
        return True

    def snapshot(self) -> tuple[dict[str, list[str]], dict[str, list[str]]]:
        """Copy of both maps as ``{key: sorted list}`` dicts."""
        return (
            {k: sorted(v) for k, v in self.forward.items()},
            {k: sorted(v) for k, v in self.reverse.items()},
        )
