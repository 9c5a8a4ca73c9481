"""
pcie_api/core/cache.py
═══════════════════════════════════════════════════════════════════════════
Atomic in-memory cache for the device dataset.
  • Only the refresher calls commit() / record_error()
  • Routers only read: snapshot() / stats()
  • State is an immutable CacheState; writers build the replacement fully,
    then swap the single reference under a lock → readers never lock and
    never see a torn write
  • A failed refresh never calls commit() → the last good dataset stays
═══════════════════════════════════════════════════════════════════════════
"""

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Optional

from pcie_api.core.config import TZ
from pcie_api.core.models import Dataset

log = logging.getLogger("cache")


@dataclass(frozen=True)
class CacheState:
    # Treated as read-only once published; never mutated in place.
    dataset: Dataset = field(default_factory=dict)
    last_updated: Optional[datetime] = None
    update_count: int = 0
    error_count: int = 0

    @property
    def has_data(self) -> bool:
        return len(self.dataset) > 0


class DeviceCache:
    """Process-wide holder of the committed dataset plus health counters."""

    def __init__(self) -> None:
        self._state = CacheState()
        self._write_lock = threading.Lock()

    def snapshot(self) -> CacheState:
        """Current committed state. A single reference read, no lock."""
        return self._state

    def commit(self, dataset: Dataset) -> CacheState:
        """Replace the dataset wholesale and bump update_count."""
        now = datetime.now(TZ)
        with self._write_lock:
            old = self._state
            self._state = replace(
                old,
                dataset=dataset,
                last_updated=now,
                update_count=old.update_count + 1,
            )
            new = self._state
        log.info(
            f"Successfully updated device data: {len(new.dataset)} vendors "
            f"(was {len(old.dataset)}), update #{new.update_count}"
        )
        return new

    def record_error(self) -> int:
        """Bump error_count, leave the dataset alone. Returns the new count."""
        with self._write_lock:
            self._state = replace(self._state, error_count=self._state.error_count + 1)
            return self._state.error_count

    def stats(self) -> dict[str, Any]:
        """Metadata only — safe to expose in /health."""
        s = self._state
        return {
            "vendor_count": len(s.dataset),
            "last_updated": s.last_updated.isoformat() if s.last_updated else None,
            "update_count": s.update_count,
            "error_count":  s.error_count,
            "has_data":     s.has_data,
        }


device_cache = DeviceCache()
