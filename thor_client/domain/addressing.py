"""
ThorClient - Address Value Type
=================================
Address a 20 bytes, rappresentazioni hex con/senza prefisso.

Security Level: HIGH
Last Updated: 2026-10-17
Version: 1.0.0

Address Format:
- Payload: 20 bytes = ultimi 20 bytes di Keccak256(pubkey non compressa senza 0x04)
- Rappresentazione canonica: "0x" + 40 hex lower-case
- Input accettati: "0x…", "0X…", senza prefisso, legacy "VX…"
- Checksum EIP-55 opzionale (solo rendering)

Example Address: 0xc71adc46c5891a8963ea5a5eeaf578e0a2959779
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union

from eth_utils import to_checksum_address

from thor_client.constants import ADDRESS_LENGTH
from thor_client.domain.crypto_core import compute_keccak256
from thor_client.errors import ArgumentError
from thor_client.utils.serialization import hex_to_bytes, is_hex


# Prefisso storico del client originale ("VX" + 40 hex)
LEGACY_PREFIX = "VX"


# ============================================================================
# ADDRESS CLASS
# ============================================================================

@dataclass(frozen=True)
class Address:
    """
    Address immutabile da 20 bytes.

    Attributes:
        value (bytes): 20 bytes raw

    Examples:
        >>> a = Address.from_hex("0xc71ADC46c5891a8963Ea5A5eeAF578E0A2959779")
        >>> b = Address.from_hex("c71adc46c5891a8963ea5a5eeaf578e0a2959779")
        >>> a == b
        True
        >>> a.to_hex()
        '0xc71adc46c5891a8963ea5a5eeaf578e0a2959779'
    """

    value: bytes

    def __post_init__(self):
        if not isinstance(self.value, (bytes, bytearray)):
            raise ArgumentError(
                f"Address value must be bytes, got {type(self.value).__name__}",
                code="INVALID_ADDRESS"
            )
        if len(self.value) != ADDRESS_LENGTH:
            raise ArgumentError(
                f"Address must be {ADDRESS_LENGTH} bytes, got {len(self.value)}",
                code="INVALID_ADDRESS",
                details={"length": len(self.value)}
            )
        # bytearray → bytes (hashable, immutabile)
        object.__setattr__(self, "value", bytes(self.value))

    # ------------------------------------------------------------------------
    # CONSTRUCTORS
    # ------------------------------------------------------------------------

    @classmethod
    def from_hex(cls, text: str) -> Address:
        """
        Parse address da stringa hex.

        Raises:
            ArgumentError: Se non hex o lunghezza diversa da 20 bytes
        """
        if not isinstance(text, str):
            raise ArgumentError(
                f"Address must be a string, got {type(text).__name__}",
                code="INVALID_ADDRESS"
            )

        body = text.strip()
        if body[:2].upper() == LEGACY_PREFIX:
            body = body[2:]

        if not is_hex(body) or len(body.removeprefix("0x").removeprefix("0X")) != ADDRESS_LENGTH * 2:
            raise ArgumentError(
                f"Invalid address: {text!r}",
                code="INVALID_ADDRESS",
                details={"address": text}
            )

        return cls(hex_to_bytes(body, length=ADDRESS_LENGTH, field="address"))

    @classmethod
    def from_public_key(cls, public_key: bytes) -> Address:
        """
        Deriva address da public key secp256k1 non compressa.

        Args:
            public_key: 65 bytes (0x04 ‖ X ‖ Y) oppure 64 bytes (X ‖ Y)

        Returns:
            Address: keccak256(X ‖ Y)[12:]
        """
        if len(public_key) == 65 and public_key[0] == 0x04:
            public_key = public_key[1:]
        if len(public_key) != 64:
            raise ArgumentError(
                f"Uncompressed public key expected, got {len(public_key)} bytes",
                code="INVALID_PUBLIC_KEY"
            )
        return cls(compute_keccak256(public_key)[-ADDRESS_LENGTH:])

    # ------------------------------------------------------------------------
    # RENDERING
    # ------------------------------------------------------------------------

    def to_hex(self, prefix: bool = True) -> str:
        """Hex lower-case (con "0x" di default)"""
        encoded = self.value.hex()
        return f"0x{encoded}" if prefix else encoded

    def to_checksum(self) -> str:
        """Rendering EIP-55 mixed-case"""
        return to_checksum_address(self.value)

    def to_bytes(self) -> bytes:
        return self.value

    def __str__(self) -> str:
        return self.to_hex()

    def __repr__(self) -> str:
        return f"Address({self.to_hex()})"


# ============================================================================
# HELPERS
# ============================================================================

AddressLike = Union[Address, str, bytes]


def to_address(value: AddressLike, field: str = "address") -> Address:
    """
    Normalizza Address/str/bytes in Address.

    Raises:
        ArgumentError: Se None o malformato
    """
    if value is None:
        raise ArgumentError(f"{field} is null", code="NULL_ARGUMENT", details={"field": field})
    if isinstance(value, Address):
        return value
    if isinstance(value, (bytes, bytearray)):
        return Address(bytes(value))
    if isinstance(value, str):
        return Address.from_hex(value)
    raise ArgumentError(
        f"{field} must be Address, hex string or bytes, got {type(value).__name__}",
        code="INVALID_ADDRESS",
        details={"field": field}
    )


def validate_address(text: str) -> bool:
    """
    Check address string senza sollevare eccezioni.

    Examples:
        >>> validate_address("0xc71ADC46c5891a8963Ea5A5eeAF578E0A2959779")
        True
        >>> validate_address("0x1234")
        False
    """
    try:
        Address.from_hex(text)
        return True
    except ArgumentError:
        return False


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "Address",
    "AddressLike",
    "to_address",
    "validate_address",
]
