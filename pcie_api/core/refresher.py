"""
pcie_api/core/refresher.py
═══════════════════════════════════════════════════════════════════════════════
One refresh = fetch → validate → commit, strictly in that order.

Fail-closed:
  • fetch fails      → record_error(), cache untouched
  • validation fails → record_error(), cache untouched
  • accepted         → commit() swaps in the whole new dataset

The timer and the webhook both call refresh(). Concurrent refreshes are
allowed to overlap; whichever commits last wins.
═══════════════════════════════════════════════════════════════════════════════
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from pcie_api.core import cache
from pcie_api.core.cache import DeviceCache
from pcie_api.core.errors import DatasetValidationError, FetchError
from pcie_api.core.validator import validate
from pcie_api.sources import provider_configs

log = logging.getLogger("refresher")


class RefreshStatus(str, enum.Enum):
    COMMITTED = "committed"
    REJECTED_FETCH = "rejected_fetch"
    REJECTED_VALIDATION = "rejected_validation"


@dataclass(frozen=True)
class RefreshOutcome:
    status: RefreshStatus
    reason: str = ""
    detail: str = ""

    @property
    def committed(self) -> bool:
        return self.status is RefreshStatus.COMMITTED


async def refresh(store: Optional[DeviceCache] = None) -> RefreshOutcome:
    store = store or cache.device_cache
    log.info("Attempting to update device data...")

    try:
        payload = await provider_configs.fetch_dataset_payload()
    except FetchError as ex:
        errors = store.record_error()
        log.error(f"Fetch failed, keeping previous data: {ex} (errors={errors})")
        return RefreshOutcome(RefreshStatus.REJECTED_FETCH, reason="fetch_error", detail=str(ex))

    try:
        dataset = validate(payload)
    except DatasetValidationError as ex:
        errors = store.record_error()
        log.error(
            f"JSON validation failed, keeping previous data: [{ex.reason}] {ex} "
            f"(errors={errors})"
        )
        return RefreshOutcome(RefreshStatus.REJECTED_VALIDATION, reason=ex.reason, detail=str(ex))

    store.commit(dataset)
    return RefreshOutcome(RefreshStatus.COMMITTED)
