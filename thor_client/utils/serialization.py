"""
ThorClient - Serialization Utilities
======================================
Hex and big-endian integer helpers shared by the codec, the ABI layer
and the transport.
"""

import re
from typing import Optional

from thor_client.errors import ArgumentError


_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


# ============================================================================
# HEX PREFIX
# ============================================================================

def strip_hex_prefix(value: str) -> str:
    """
    Remove a leading ``0x``/``0X`` prefix.

    Examples:
        >>> strip_hex_prefix("0xabc")
        'abc'
        >>> strip_hex_prefix("abc")
        'abc'
    """
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


def is_hex(value: str, allow_prefix: bool = True) -> bool:
    """
    Check if a string is hex (even length not required).

    Examples:
        >>> is_hex("0xdeadbeef")
        True
        >>> is_hex("0xZZ")
        False
    """
    if not isinstance(value, str):
        return False
    body = strip_hex_prefix(value) if allow_prefix else value
    return bool(_HEX_RE.match(body))


# ============================================================================
# BYTES/HEX CONVERSION
# ============================================================================

def bytes_to_hex(data: bytes, prefix: bool = True) -> str:
    """
    Convert bytes to lower-case hex string.

    Examples:
        >>> bytes_to_hex(b"\\x00\\x01")
        '0x0001'
        >>> bytes_to_hex(b"", prefix=False)
        ''
    """
    encoded = bytes(data).hex()
    return f"0x{encoded}" if prefix else encoded


def hex_to_bytes(hex_str: str, length: Optional[int] = None, field: str = "hex") -> bytes:
    """
    Convert hex string (with or without ``0x``) to bytes.

    Odd-length input is left-padded with one zero nibble (``0x1`` → ``b"\\x01"``).

    Args:
        hex_str: Hex string
        length: Exact byte length required (None = any)
        field: Argument name used in error messages

    Raises:
        ArgumentError: If not hex or wrong length

    Examples:
        >>> hex_to_bytes("0x0102")
        b'\\x01\\x02'
    """
    if not isinstance(hex_str, str):
        raise ArgumentError(
            f"{field} must be a hex string, got {type(hex_str).__name__}",
            code="INVALID_HEX",
            details={"field": field}
        )

    body = strip_hex_prefix(hex_str.strip())
    if not _HEX_RE.match(body):
        raise ArgumentError(
            f"{field} is not valid hex: {hex_str!r}",
            code="INVALID_HEX",
            details={"field": field}
        )

    if len(body) % 2:
        body = "0" + body

    data = bytes.fromhex(body)

    if length is not None and len(data) != length:
        raise ArgumentError(
            f"{field} must be {length} bytes, got {len(data)}",
            code="INVALID_LENGTH",
            details={"field": field, "expected": length, "actual": len(data)}
        )

    return data


# ============================================================================
# BIG-ENDIAN INTEGERS
# ============================================================================

def int_to_big_endian(value: int) -> bytes:
    """
    Minimal big-endian encoding (no leading zero bytes, zero → ``b""``).

    Examples:
        >>> int_to_big_endian(0)
        b''
        >>> int_to_big_endian(21000)
        b'R\\x08'
    """
    if value < 0:
        raise ArgumentError(f"Cannot encode negative integer {value}", code="NEGATIVE_INTEGER")
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


def big_endian_to_int(data: bytes) -> int:
    """Inverse of int_to_big_endian (``b""`` → 0)."""
    return int.from_bytes(data, "big")


def int_to_fixed_bytes(value: int, length: int, field: str = "value") -> bytes:
    """
    Left-padded big-endian encoding to exactly ``length`` bytes.

    Raises:
        ArgumentError: If value does not fit
    """
    try:
        return value.to_bytes(length, "big")
    except OverflowError:
        raise ArgumentError(
            f"{field} does not fit in {length} bytes: {value}",
            code="INTEGER_OVERFLOW",
            details={"field": field, "length": length}
        )


def hex_to_int(hex_str: str, field: str = "value") -> int:
    """
    Parse ``0x``-prefixed (or bare) hex quantity.

    Examples:
        >>> hex_to_int("0x5208")
        21000
    """
    return big_endian_to_int(hex_to_bytes(hex_str, field=field))


# ============================================================================
# EXPORT
# ============================================================================

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
