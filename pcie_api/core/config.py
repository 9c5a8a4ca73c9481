"""
pcie_api/core/config.py
═══════════════════════════════════════════════════════════════════════════════
SOURCE:

  akash-network/provider-configs  →  devices/pcie/gpus.json
                                      vendor id → {name, devices: {device id → …}}
                                      served raw from GitHub, no auth

Only the listen address and the refresh interval are meant to be tuned per
deployment. Everything else is fixed for the container image.
═══════════════════════════════════════════════════════════════════════════════
"""

import logging
import os

import httpx
import pytz

log = logging.getLogger("config")

# ── Remote dataset ────────────────────────────────────────────────────────────
DATASET_URL = os.environ.get(
    "PCIE_DATASET_URL",
    "https://raw.githubusercontent.com/akash-network/provider-configs/main/devices/pcie/gpus.json",
)
FETCH_TIMEOUT  = httpx.Timeout(15.0, connect=10.0)
FETCH_DEADLINE_S = 30.0     # whole request incl. body, on top of per-op timeouts

# ── Refresh ───────────────────────────────────────────────────────────────────
DEFAULT_REFRESH_INTERVAL_S = 5 * 60


def _interval_from_env() -> float:
    raw = os.environ.get("PCIE_REFRESH_INTERVAL_S", "")
    if not raw:
        return DEFAULT_REFRESH_INTERVAL_S
    try:
        value = float(raw)
    except ValueError:
        value = 0
    if value <= 0:
        log.warning(
            f"PCIE_REFRESH_INTERVAL_S={raw!r} is not a positive number — "
            f"using {DEFAULT_REFRESH_INTERVAL_S}s"
        )
        return DEFAULT_REFRESH_INTERVAL_S
    return value


REFRESH_INTERVAL_S = _interval_from_env()

# ── Server ────────────────────────────────────────────────────────────────────
LISTEN_HOST = os.environ.get("PCIE_LISTEN_HOST", "0.0.0.0")
LISTEN_PORT = int(os.environ.get("PCIE_LISTEN_PORT", "443"))

# Certificate + key are mounted at the root of the container
CERT_FILE = "/cert.pem"
KEY_FILE  = "/key.pem"

KEEP_ALIVE_S        = 60
SHUTDOWN_GRACE_S    = 30

# last_updated is stamped in this zone
TZ = pytz.timezone(os.environ.get("PCIE_TZ", "UTC"))
