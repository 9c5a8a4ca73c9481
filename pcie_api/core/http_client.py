"""
pcie_api/core/http_client.py
Shared async httpx client for the remote dataset (raw.githubusercontent.com).
Created lazily, reused across refreshes, closed on shutdown.
"""

import httpx

from pcie_api.core.config import FETCH_TIMEOUT

_dataset_client: httpx.AsyncClient | None = None

_LIMITS = httpx.Limits(max_connections=10, max_keepalive_connections=5)
_HEADERS = {
    "User-Agent": "pcie-api/1.0 (+https://github.com/akash-network/provider-configs)",
    "Accept":     "application/json, text/plain, */*",
}


def dataset_client() -> httpx.AsyncClient:
    global _dataset_client
    if _dataset_client is None or _dataset_client.is_closed:
        _dataset_client = httpx.AsyncClient(
            headers=_HEADERS,
            timeout=FETCH_TIMEOUT,
            follow_redirects=True,
            limits=_LIMITS,
        )
    return _dataset_client


async def close_all() -> None:
    global _dataset_client
    if _dataset_client and not _dataset_client.is_closed:
        await _dataset_client.aclose()
    _dataset_client = None
