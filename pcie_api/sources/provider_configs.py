"""
pcie_api/sources/provider_configs.py
═══════════════════════════════════════════════════════════════════════════════
akash-network/provider-configs — raw gpus.json from GitHub.

Returns the raw body bytes; decoding and checking is the validator's job.
Anything other than a complete 200 response within the deadline is a
FetchError.
═══════════════════════════════════════════════════════════════════════════════
"""

import asyncio
import logging

import httpx

from pcie_api.core import config
from pcie_api.core.errors import FetchError
from pcie_api.core.http_client import dataset_client

log = logging.getLogger("provider_configs")


async def fetch_dataset_payload(url: str | None = None) -> bytes:
    url = url or config.DATASET_URL
    client = dataset_client()
    try:
        resp = await asyncio.wait_for(client.get(url), timeout=config.FETCH_DEADLINE_S)
    except asyncio.TimeoutError as ex:
        raise FetchError(
            f"Fetch exceeded {config.FETCH_DEADLINE_S:.0f}s deadline", url=url
        ) from ex
    except (httpx.HTTPError, httpx.InvalidURL) as ex:
        # connect/read errors, httpx timeouts, malformed PCIE_DATASET_URL
        raise FetchError(f"Error fetching data: {ex!r}", url=url) from ex

    if resp.status_code != 200:
        raise FetchError(
            f"HTTP error: received status code {resp.status_code}",
            status_code=resp.status_code,
            url=url,
        )

    log.debug(f"Fetched {len(resp.content)} bytes from {url}")
    return resp.content
