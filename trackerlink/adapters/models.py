from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class GatewayMetadata(BaseModel):
    model_config = ConfigDict(extra="allow")

    rssi: Optional[float] = None
    snr: Optional[float] = None


class NormalizedPayload(BaseModel):
    """Host-side uplink context Datacake hands to a payload decoder."""

    model_config = ConfigDict(extra="allow")

    # Hosts may send null entries; they count as a gateway without metadata.
    gateways: List[Optional[GatewayMetadata]] = Field(default_factory=list)
    data_rate: Optional[Union[str, int]] = None


class DatacakeField(BaseModel):
    field: str
    value: Any = None
