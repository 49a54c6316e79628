"""
This package contains the modules that turn raw uplink payloads received from
the tracker into measurements.

Sub-packages handle specific data formats:

- ``tlv``: TLV (Tag-Length-Value) sensor record decoding.
"""
