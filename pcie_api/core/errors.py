"""Exception hierarchy for the device registry."""

from typing import Optional


class PcieApiError(Exception):
    """Base exception for all service errors."""


class FetchError(PcieApiError):
    """Remote dataset could not be fetched (network, timeout, non-200, body read)."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, url: str = "") -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class EncodingError(PcieApiError):
    """Current snapshot could not be serialised for a response."""


# ── Validation ────────────────────────────────────────────────────────────────

class DatasetValidationError(PcieApiError):
    """Candidate payload rejected. ``reason`` is a stable machine-readable code."""

    reason = "invalid"


class MalformedSyntax(DatasetValidationError):
    reason = "malformed_syntax"


class SchemaMismatch(DatasetValidationError):
    reason = "schema_mismatch"


class EmptyDataset(DatasetValidationError):
    reason = "empty_dataset"


class MissingVendorField(DatasetValidationError):
    reason = "missing_vendor_field"

    def __init__(self, vendor_id: str, field: str) -> None:
        self.vendor_id = vendor_id
        self.field = field
        if field == "devices":
            msg = f"vendor {vendor_id} has nil devices map"
        else:
            msg = f"vendor {vendor_id} missing {field}"
        super().__init__(msg)


class MissingDeviceField(DatasetValidationError):
    reason = "missing_device_field"

    def __init__(self, vendor_id: str, device_id: str, field: str) -> None:
        self.vendor_id = vendor_id
        self.device_id = device_id
        self.field = field
        super().__init__(f"device {device_id} under vendor {vendor_id} missing {field}")
