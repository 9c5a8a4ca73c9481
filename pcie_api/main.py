"""
pcie_api/main.py  — PCIe device registry API
Startup: initial fetch, then the periodic refresh scheduler.
All read endpoints are cache-only; the webhook only schedules work.
"""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pcie_api.core import cache, config, refresher, scheduler
from pcie_api.core.http_client import close_all
from pcie_api.routers import devices

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
log = logging.getLogger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("Starting server and performing initial data fetch...")
    await refresher.refresh()

    stats = cache.device_cache.stats()
    if not stats["has_data"]:
        log.warning("Failed to fetch initial data. Server will start but with no device data.")
    else:
        log.info(f"Initial fetch successful: loaded {stats['vendor_count']} vendors")

    timer = asyncio.create_task(scheduler.run_scheduler(), name="refresh-timer")
    yield
    log.info("Server is shutting down...")
    timer.cancel()
    with suppress(asyncio.CancelledError):
        await timer
    await scheduler.cancel_pending()
    await close_all()
    log.info("Server gracefully stopped")


app = FastAPI(
    title="PCIe Device Registry API",
    description=(
        "Cache-first mirror of the akash-network provider-configs GPU list. "
        f"Refreshed every {config.REFRESH_INTERVAL_S:.0f}s and on webhook; "
        "a bad upstream fetch never replaces the last good dataset."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(devices.router)


@app.get("/", tags=["meta"])
async def root():
    return {
        "status":  "online",
        "version": "1.0.0",
        "source":  config.DATASET_URL,
        "endpoints": {
            "devices": "/devices/gpus",
            "stats":   "/devices/gpus/stats",
            "webhook": "/devices/gpus/webhook (POST)",
            "health":  "/health",
            "docs":    "/docs",
        },
    }


@app.get("/health", tags=["meta"])
async def health():
    """200 once a dataset has been committed, 503 before that."""
    stats = cache.device_cache.stats()
    if stats["has_data"]:
        return {"status": "healthy", "stats": stats}
    return JSONResponse({"status": "unhealthy", "stats": stats}, status_code=503)


def run() -> None:
    """Console entry point: serve over TLS on the configured address."""
    log.info(f"Starting HTTPS server on {config.LISTEN_HOST}:{config.LISTEN_PORT}")
    uvicorn.run(
        app,
        host=config.LISTEN_HOST,
        port=config.LISTEN_PORT,
        ssl_certfile=config.CERT_FILE,
        ssl_keyfile=config.KEY_FILE,
        timeout_keep_alive=config.KEEP_ALIVE_S,
        timeout_graceful_shutdown=config.SHUTDOWN_GRACE_S,
        log_level="info",
    )


if __name__ == "__main__":
    run()
