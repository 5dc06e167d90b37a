"""Tests for the reference stores."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from scopeid.core.generator import UniqueIdGenerator
from scopeid.stores import FileDataStore, MemoryDataStore, OptimisticDataStore


class TestMemoryDataStore:
    def test_satisfies_contract(self):
        assert isinstance(MemoryDataStore(), OptimisticDataStore)

    def test_unknown_scope_initialized(self):
        store = MemoryDataStore(initial_value=7)
        assert store.peek("orders") is None
        assert store.get_data("orders") == "7"
        assert store.peek("orders") == "7"

    def test_write_after_read_succeeds(self):
        store = MemoryDataStore()
        store.get_data("orders")
        assert store.try_optimistic_write("orders", "101") is True
        assert store.peek("orders") == "101"

    def test_write_without_read_fails(self):
        store = MemoryDataStore()
        store.put("orders", "5")
        assert store.try_optimistic_write("orders", "10") is False
        assert store.peek("orders") == "5"

    def test_write_fails_when_value_changed(self):
        store = MemoryDataStore()
        store.get_data("orders")
        store.put("orders", "50")
        assert store.try_optimistic_write("orders", "101") is False
        assert store.peek("orders") == "50"

    def test_consecutive_writes_chain(self):
        store = MemoryDataStore()
        store.get_data("orders")
        assert store.try_optimistic_write("orders", "101")
        assert store.try_optimistic_write("orders", "201")

    def test_reads_are_tracked_per_thread(self):
        store = MemoryDataStore()
        store.get_data("orders")

        other_result: list[bool] = []

        def _other() -> None:
            store.get_data("orders")
            other_result.append(store.try_optimistic_write("orders", "11"))

        t = threading.Thread(target=_other)
        t.start()
        t.join()

        assert other_result == [True]
        assert store.try_optimistic_write("orders", "21") is False


class TestFileDataStore:
    def test_satisfies_contract(self, tmp_path):
        assert isinstance(FileDataStore(tmp_path), OptimisticDataStore)

    def test_unknown_scope_initialized_on_disk(self, tmp_path):
        store = FileDataStore(tmp_path / "ids", initial_value=3)
        assert store.get_data("orders") == "3"
        assert (tmp_path / "ids" / "orders.txt").read_text() == "3"

    def test_write_after_read(self, tmp_path):
        store = FileDataStore(tmp_path)
        store.get_data("orders")
        assert store.try_optimistic_write("orders", "101") is True
        assert (tmp_path / "orders.txt").read_text() == "101"
        assert list(tmp_path.glob("*.tmp")) == []

    def test_write_without_read_fails(self, tmp_path):
        store = FileDataStore(tmp_path)
        assert store.try_optimistic_write("orders", "101") is False
        assert not (tmp_path / "orders.txt").exists()

    def test_conflicting_instances(self, tmp_path):
        first = FileDataStore(tmp_path)
        second = FileDataStore(tmp_path)

        first.get_data("orders")
        second.get_data("orders")
        assert second.try_optimistic_write("orders", "101") is True
        assert first.try_optimistic_write("orders", "101") is False
        assert (tmp_path / "orders.txt").read_text() == "101"

    def test_reads_existing_record(self, tmp_path):
        (tmp_path / "orders.txt").write_text("12345")
        assert FileDataStore(tmp_path).get_data("orders") == "12345"

    @pytest.mark.parametrize("name", ["", "../escape", "a/b", ".hidden", "-flag"])
    def test_rejects_unsafe_scope_names(self, tmp_path, name):
        with pytest.raises(ValueError):
            FileDataStore(tmp_path).get_data(name)

    def test_generators_over_separate_instances_never_collide(self, tmp_path):
        generators = [
            UniqueIdGenerator(FileDataStore(tmp_path), batch_size=10, max_write_attempts=500)
            for _ in range(3)
        ]

        def _draw(gen: UniqueIdGenerator) -> list[int]:
            return [gen.next_id("orders") for _ in range(60)]

        with ThreadPoolExecutor(max_workers=3) as pool:
            results = list(pool.map(_draw, generators))

        all_ids = [i for batch in results for i in batch]
        assert len(set(all_ids)) == 180

    def test_restart_skips_unissued_ids(self, tmp_path):
        gen = UniqueIdGenerator(FileDataStore(tmp_path), batch_size=100)
        assert gen.next_id("orders") == 1

        restarted = UniqueIdGenerator(FileDataStore(tmp_path), batch_size=100)
        assert restarted.next_id("orders") == 101
