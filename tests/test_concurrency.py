"""Tests for per-sheet reader/writer locking and concurrent registry use."""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest
from sheetcalc import InvalidTypeError, ReadWriteLock, SheetRegistry

# ---------------------------------------------------------------------------
# ReadWriteLock unit tests
# ---------------------------------------------------------------------------


class TestReadWriteLock:
    def test_readers_share(self) -> None:
        lock = ReadWriteLock()
        with lock.read():
            with lock.read():
                assert lock.readers == 2
        assert lock.readers == 0

    def test_writer_excludes_readers(self) -> None:
        lock = ReadWriteLock()
        entered = threading.Event()

        def reader() -> None:
            with lock.read():
                entered.set()

        with lock.write():
            assert lock.write_locked
            t = threading.Thread(target=reader)
            t.start()
            assert not entered.wait(timeout=0.1)
        t.join(timeout=2)
        assert entered.is_set()
        assert not lock.write_locked

    def test_writer_waits_for_readers(self) -> None:
        lock = ReadWriteLock()
        acquired = threading.Event()

        def writer() -> None:
            with lock.write():
                acquired.set()

        with lock.read():
            t = threading.Thread(target=writer)
            t.start()
            assert not acquired.wait(timeout=0.1)
        t.join(timeout=2)
        assert acquired.is_set()

    def test_waiting_writer_blocks_new_readers(self) -> None:
        lock = ReadWriteLock()
        order: list[str] = []
        lock.acquire_read()

        def writer() -> None:
            with lock.write():
                order.append("writer")

        def late_reader() -> None:
            with lock.read():
                order.append("reader")

        w = threading.Thread(target=writer)
        w.start()
        time.sleep(0.05)
        r = threading.Thread(target=late_reader)
        r.start()
        time.sleep(0.05)
        assert order == []
        lock.release_read()
        w.join(timeout=2)
        r.join(timeout=2)
        assert order == ["writer", "reader"]

    def test_released_on_exception(self) -> None:
        lock = ReadWriteLock()
        with pytest.raises(RuntimeError):
            with lock.write():
                raise RuntimeError("boom")
        assert not lock.write_locked
        with lock.read():
            pass


# ---------------------------------------------------------------------------
# Engine-level concurrency
# ---------------------------------------------------------------------------


class TestConcurrentWrites:
    def test_two_threads_different_cells(self, registry: SheetRegistry, sheet_id: int) -> None:
        t1 = threading.Thread(target=registry.set_cell, args=(sheet_id, "A", 10, "foo"))
        t2 = threading.Thread(target=registry.set_cell, args=(sheet_id, "B", 10, "true"))
        t1.start()
        t2.start()
        t1.join()
        t2.join()
        data = registry.get_sheet_data(sheet_id)
        assert data["A,10"] == "foo"
        assert data["B,10"] is True

    def test_many_writers_keep_graph_consistent(self, registry: SheetRegistry) -> None:
        sheet_id = registry.create_sheet([("A", "INT")])
        registry.set_cell(sheet_id, "A", 0, "0")

        def work(i: int) -> None:
            row = i % 20 + 1
            if i % 3 == 0:
                registry.set_cell(sheet_id, "A", 0, str(i))
            else:
                registry.set_cell(sheet_id, "A", row, f"lookup(A,{row - 1})")

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(work, range(300)))

        sheet = registry.get_sheet(sheet_id)
        assert sheet.graph.is_symmetric()
        data = registry.get_sheet_data(sheet_id)
        root = data["A,0"]
        # every row is a lookup chain back to row 0
        assert all(value == root for value in data.values())

    def test_readers_never_see_partial_writes(self, registry: SheetRegistry) -> None:
        sheet_id = registry.create_sheet([("S", "STRING")])
        registry.set_cell(sheet_id, "S", 0, "v0")
        for row in range(1, 30):
            registry.set_cell(sheet_id, "S", row, f"lookup(S,{row - 1})")

        stop = threading.Event()
        torn: list[dict] = []

        def reader() -> None:
            while not stop.is_set():
                data = registry.get_sheet_data(sheet_id)
                if len(set(data.values())) != 1:
                    torn.append(data)

        readers = [threading.Thread(target=reader) for _ in range(4)]
        for t in readers:
            t.start()
        for i in range(1, 50):
            registry.set_cell(sheet_id, "S", 0, f"v{i}")
        stop.set()
        for t in readers:
            t.join()

        assert torn == []
        assert set(registry.get_sheet_data(sheet_id).values()) == {"v49"}

    def test_failures_under_contention_roll_back(self, registry: SheetRegistry) -> None:
        sheet_id = registry.create_sheet([("I", "INT")])
        registry.set_cell(sheet_id, "I", 1, "1")

        def bad(_: int) -> None:
            with pytest.raises(InvalidTypeError):
                registry.set_cell(sheet_id, "I", 1, "oops")

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(bad, range(50)))
        assert registry.get_sheet_data(sheet_id) == {"I,1": 1}


class TestConcurrentRegistry:
    def test_concurrent_create_unique_ids(self, registry: SheetRegistry) -> None:
        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(lambda _: registry.create_sheet([("A", "STRING")]), range(200)))
        assert len(set(ids)) == 200
        assert sorted(registry.sheet_ids()) == sorted(ids)

    def test_sheets_do_not_block_each_other(self, registry: SheetRegistry) -> None:
        first = registry.create_sheet([("A", "STRING")])
        second = registry.create_sheet([("A", "STRING")])
        with registry.get_sheet(first).lock.write():
            # a write on another sheet completes while the first is held
            t = threading.Thread(target=registry.set_cell, args=(second, "A", 1, "x"))
            t.start()
            t.join(timeout=2)
            assert not t.is_alive()
        assert registry.get_sheet_data(second) == {"A,1": "x"}
