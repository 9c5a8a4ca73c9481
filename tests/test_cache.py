"""Tests for the device cache."""

import threading

from pcie_api.core.cache import DeviceCache


def _generation(gen: int, vendors: int = 50) -> dict:
    return {
        f"v{i:03d}": {"name": f"gen-{gen}", "devices": {"d0": {"name": "x", "interface": "PCIe", "memory_size": ""}}}
        for i in range(vendors)
    }


class TestDeviceCache:
    def test_starts_empty(self):
        store = DeviceCache()
        assert store.snapshot().dataset == {}
        assert store.stats() == {
            "vendor_count": 0,
            "last_updated": None,
            "update_count": 0,
            "error_count": 0,
            "has_data": False,
        }

    def test_commit_replaces_and_counts(self, t4_dataset):
        store = DeviceCache()
        store.commit(t4_dataset)
        stats = store.stats()
        assert stats["vendor_count"] == 1
        assert stats["update_count"] == 1
        assert stats["has_data"] is True
        assert stats["last_updated"] is not None
        assert store.snapshot().dataset == t4_dataset

    def test_commit_is_whole_replacement(self, t4_dataset):
        store = DeviceCache()
        store.commit(_generation(1, vendors=3))
        store.commit(t4_dataset)
        assert store.snapshot().dataset == t4_dataset

    def test_record_error_leaves_dataset_alone(self, t4_dataset):
        store = DeviceCache()
        store.commit(t4_dataset)
        before = store.snapshot()
        assert store.record_error() == 1
        after = store.snapshot()
        assert after.dataset is before.dataset
        assert after.last_updated == before.last_updated
        assert after.update_count == 1
        assert after.error_count == 1

    def test_old_snapshot_is_not_touched_by_commit(self):
        store = DeviceCache()
        store.commit(_generation(1))
        held = store.snapshot()
        store.commit(_generation(2))
        assert {v["name"] for v in held.dataset.values()} == {"gen-1"}
        assert held.update_count == 1

    def test_concurrent_readers_never_see_mixed_generations(self):
        store = DeviceCache()
        store.commit(_generation(0))
        stop = threading.Event()
        torn: list[set] = []

        def reader():
            while not stop.is_set():
                names = {v["name"] for v in store.snapshot().dataset.values()}
                if len(names) != 1:
                    torn.append(names)

        def writer(start: int):
            for gen in range(start, start + 200):
                store.commit(_generation(gen))
                store.record_error()

        readers = [threading.Thread(target=reader) for _ in range(4)]
        writers = [threading.Thread(target=writer, args=(n * 1000,)) for n in range(1, 3)]
        for t in readers + writers:
            t.start()
        for t in writers:
            t.join()
        stop.set()
        for t in readers:
            t.join()

        assert torn == []
        assert store.stats()["update_count"] == 401
        assert store.stats()["error_count"] == 400
