"""
pcie_api/routers/devices.py
Endpoints:
  GET  /devices/gpus          → full dataset (503 until the first good fetch)
  GET  /devices/gpus/stats    → cache counters, always 200
  POST /devices/gpus/webhook  → schedules an immediate refresh, acks at once

Reads come from the in-memory cache only. Zero external calls on the
request path.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.requests import ClientDisconnect

from pcie_api.core import cache, scheduler
from pcie_api.core.errors import EncodingError

log    = logging.getLogger("devices_router")
router = APIRouter(prefix="/devices/gpus", tags=["devices"])

NO_DATA = {"error": "No device data available"}
INTERNAL_ERROR = {"error": "Internal server error"}


def _render(content) -> JSONResponse:
    try:
        return JSONResponse(content)
    except (TypeError, ValueError) as ex:
        raise EncodingError(f"Error encoding response: {ex}") from ex


@router.get("")
async def get_devices():
    snap = cache.device_cache.snapshot()
    if not snap.has_data:
        return JSONResponse(NO_DATA, status_code=503)
    try:
        return _render(snap.dataset)
    except EncodingError as ex:
        log.error(str(ex))
        return JSONResponse(INTERNAL_ERROR, status_code=500)


@router.get("/stats")
async def get_stats():
    try:
        return _render(cache.device_cache.stats())
    except EncodingError as ex:
        log.error(str(ex))
        return JSONResponse(INTERNAL_ERROR, status_code=500)


@router.post("/webhook")
async def webhook(request: Request):
    try:
        body = await request.body()
    except ClientDisconnect as ex:
        log.error(f"Error reading webhook body: {ex!r}")
        return JSONResponse({"error": "Error reading request"}, status_code=500)

    log.info(f"Received webhook: {body.decode('utf-8', errors='replace')}")
    log.info("Webhook received, triggering immediate update...")
    scheduler.trigger_refresh("webhook")

    return {"status": "webhook received", "action": "update triggered"}
