"""
pcie_api/core/models.py
Shape of the remote gpus.json document.

  {
    "10de": {
      "name": "NVIDIA Corporation",
      "devices": {
        "1eb8": {"name": "TU104GL [Tesla T4]", "interface": "PCIe", "memory_size": "16GB"}
      }
    }
  }

Missing string fields (and JSON null) become "" so the validator can report
them as missing rather than as a type error. Unknown keys are ignored.
A missing "devices" key stays None — that is a distinct failure from {}.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator

# vendor id → vendor group; device id → device
Dataset = dict[str, dict[str, Any]]


class Device(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    interface: str = ""
    memory_size: str = ""

    @field_validator("name", "interface", "memory_size", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class VendorGroup(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    devices: Optional[dict[str, Optional[Device]]] = None

    @field_validator("name", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value


DATASET_ADAPTER: TypeAdapter[dict[str, Optional[VendorGroup]]] = TypeAdapter(
    dict[str, Optional[VendorGroup]]
)
