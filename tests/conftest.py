"""Pytest configuration and shared fixtures."""

import copy
import json

import httpx
import pytest

from pcie_api.core import cache, scheduler
from pcie_api.core.cache import DeviceCache
from pcie_api.sources import provider_configs

T4_DATASET = {
    "10de": {
        "name": "NVIDIA Corporation",
        "devices": {
            "1eb8": {"name": "TU104GL [Tesla T4]", "interface": "PCIe", "memory_size": "16GB"},
        },
    },
}


@pytest.fixture
def t4_dataset() -> dict:
    return copy.deepcopy(T4_DATASET)


@pytest.fixture
def t4_payload() -> bytes:
    return json.dumps(T4_DATASET).encode()


@pytest.fixture
def device_cache(monkeypatch) -> DeviceCache:
    """Swap the process-wide cache for a fresh, empty one."""
    fresh = DeviceCache()
    monkeypatch.setattr(cache, "device_cache", fresh)
    return fresh


@pytest.fixture(autouse=True)
def _reset_scheduler(monkeypatch):
    monkeypatch.setattr(scheduler, "_running", False)
    monkeypatch.setattr(scheduler, "_refresh_tasks", set())


@pytest.fixture
def remote(monkeypatch):
    """
    Point the fetcher at a fake publisher. Call with a handler
    (httpx.Request -> httpx.Response, sync or async); returns the list of
    requests seen.
    """
    seen: list[httpx.Request] = []

    def install(handler):
        def recording(request: httpx.Request):
            seen.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(recording))
        monkeypatch.setattr(provider_configs, "dataset_client", lambda: client)
        return seen

    return install
