"""
pcie_api/core/validator.py
═══════════════════════════════════════════════════════════════════════════
Gatekeeper between the remote source and the cache.
  • Pure: bytes in, Dataset out (or an exception), no side effects
  • Checks run in order and stop at the first failure:
        syntax → shape → non-empty → vendor fields → device fields
  • memory_size is optional and never checked
═══════════════════════════════════════════════════════════════════════════
"""

import json

from pydantic import ValidationError

from pcie_api.core.errors import (
    EmptyDataset,
    MalformedSyntax,
    MissingDeviceField,
    MissingVendorField,
    SchemaMismatch,
)
from pcie_api.core.models import DATASET_ADAPTER, Dataset


def validate(payload: bytes) -> Dataset:
    """
    Return the decoded Dataset, or raise a DatasetValidationError subclass
    describing the first problem found.
    """
    try:
        doc = json.loads(payload, parse_constant=_reject_constant)
    except ValueError as ex:   # JSONDecodeError and UnicodeDecodeError
        raise MalformedSyntax(f"invalid JSON syntax: {ex}") from ex
    except RecursionError as ex:
        raise MalformedSyntax("invalid JSON syntax: nesting too deep") from ex

    # top-level null decodes to "no vendors"
    if doc is None:
        doc = {}

    try:
        vendors = DATASET_ADAPTER.validate_python(doc)
    except ValidationError as ex:
        raise SchemaMismatch(
            f"JSON structure validation failed: {ex.error_count()} error(s), "
            f"first at {_loc(ex)}"
        ) from ex

    if not vendors:
        raise EmptyDataset("empty device data")

    dataset: Dataset = {}
    for vendor_id, vendor in vendors.items():
        if vendor is None or not vendor.name:
            raise MissingVendorField(vendor_id, "name")
        if vendor.devices is None:
            raise MissingVendorField(vendor_id, "devices")

        for device_id, device in vendor.devices.items():
            if device is None or not device.name:
                raise MissingDeviceField(vendor_id, device_id, "name")
            if not device.interface:
                raise MissingDeviceField(vendor_id, device_id, "interface")

        dataset[vendor_id] = vendor.model_dump()

    return dataset


def _loc(ex: ValidationError) -> str:
    errors = ex.errors()
    if not errors:
        return "<root>"
    return ".".join(str(p) for p in errors[0].get("loc", ())) or "<root>"


def _reject_constant(name: str):
    # NaN / Infinity / -Infinity are not JSON
    raise ValueError(f"non-standard constant {name}")
