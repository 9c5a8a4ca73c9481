"""
pcie_api/core/scheduler.py
═══════════════════════════════════════════════════════════════════════════════
Background refresh scheduling with two sources feeding one refresh():

  1. ONE timer loop ever (guarded by _running flag)
  2. Every tick spawns refresh() as its own task → a slow fetch never delays
     the next tick
  3. Webhooks call trigger_refresh() → same task type, same refresh()
  4. Fetches are deadline-bounded, so in-flight refresh tasks cannot pile up
     without limit
  5. Pending refresh tasks are tracked so shutdown can cancel them
═══════════════════════════════════════════════════════════════════════════════
"""

import asyncio
import logging
from typing import Optional

from pcie_api.core import refresher
from pcie_api.core.config import REFRESH_INTERVAL_S

log = logging.getLogger("scheduler")

# ── State ─────────────────────────────────────────────────────────────────────
_running       = False
_refresh_tasks: set[asyncio.Task] = set()


def _on_refresh_done(task: asyncio.Task) -> None:
    _refresh_tasks.discard(task)
    if task.cancelled():
        return
    ex = task.exception()
    if ex is not None:
        # refresh() absorbs fetch/validation errors; anything here is a bug
        log.error(f"{task.get_name()} crashed: {ex!r}")
        return
    outcome = task.result()
    log.debug(f"{task.get_name()} finished: {outcome.status.value} {outcome.reason}")


def trigger_refresh(source: str) -> asyncio.Task:
    """Schedule refresh() on the running loop and return immediately."""
    task = asyncio.create_task(refresher.refresh(), name=f"refresh[{source}]")
    _refresh_tasks.add(task)
    task.add_done_callback(_on_refresh_done)
    return task


def pending_refreshes() -> int:
    return len(_refresh_tasks)


async def run_scheduler(interval: Optional[float] = None) -> None:
    """
    Started once from the app lifespan. Runs until cancelled.
    The initial fetch is done by the lifespan itself, so the first tick
    fires one interval after startup.
    """
    global _running
    if _running:
        log.warning("Scheduler already running — ignoring duplicate start")
        return
    _running = True
    interval = interval or REFRESH_INTERVAL_S
    log.info(f"Scheduler started (every {interval:.0f}s)")

    try:
        while True:
            await asyncio.sleep(interval)
            try:
                trigger_refresh("timer")
            except Exception as ex:
                log.error(f"Tick error (continuing): {ex}")
    finally:
        _running = False
        log.info("Scheduler stopped")


async def cancel_pending() -> None:
    """Cancel in-flight refresh tasks and wait for them to unwind."""
    tasks = list(_refresh_tasks)
    for t in tasks:
        t.cancel()
    if tasks:
        await asyncio.gather(*tasks, return_exceptions=True)
        log.info(f"Cancelled {len(tasks)} in-flight refresh(es)")
