"""
Host adapters that reshape a decoded reading for a downstream platform.

- ``chirpstack``: network-server codec callback with unit-suffixed values.
- ``datacake``: metrics-platform decoder returning field records.
"""
from trackerlink.adapters.models import DatacakeField, GatewayMetadata, NormalizedPayload

__all__ = ["DatacakeField", "GatewayMetadata", "NormalizedPayload"]
