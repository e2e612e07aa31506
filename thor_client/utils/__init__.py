"""
ThorClient - Utilities Package
================================
Common utility functions and helpers.
"""

from thor_client.utils.serialization import (
    strip_hex_prefix,
    is_hex,
    bytes_to_hex,
    hex_to_bytes,
    int_to_big_endian,
    big_endian_to_int,
    int_to_fixed_bytes,
    hex_to_int,
)

__all__ = [
    "strip_hex_prefix",
    "is_hex",
    "bytes_to_hex",
    "hex_to_bytes",
    "int_to_big_endian",
    "big_endian_to_int",
    "int_to_fixed_bytes",
    "hex_to_int",
]
