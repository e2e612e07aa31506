"""
ThorClient - KeyPair Management
=================================
Coppia chiavi secp256k1 per la firma delle transazioni.

Security Level: CRITICAL
Last Updated: 2026-10-17
Version: 1.0.0

Features:
- Scalare privato in bytearray azzerabile (wipe / context manager)
- Public key non compressa (65 bytes) via cryptography
- Address derivato: keccak256(pub[1:])[12:]
- Firma recuperabile RFC 6979 low-S via eth-keys

SECURITY:
La chiave privata non viene mai loggata né inclusa nel repr.
Il client non conserva chiavi: vivono solo nello scope del chiamante.
"""

from __future__ import annotations
from typing import Optional, Union

from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from eth_keys import keys
from eth_keys.exceptions import ValidationError as EthKeysValidationError

from thor_client.constants import PRIVATE_KEY_LENGTH
from thor_client.domain.addressing import Address
from thor_client.errors import ArgumentError, SigningError
from thor_client.logging_setup import get_logger
from thor_client.utils.serialization import hex_to_bytes


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("keypairs")


# ============================================================================
# KEYPAIR CLASS
# ============================================================================

class ECKeyPair:
    """
    Coppia chiavi secp256k1.

    Attributes:
        public_key (bytes): 65 bytes, 0x04 ‖ X ‖ Y
        address (Address): Address derivato

    Security:
        - Scalare privato in bytearray, azzerato da wipe()/__exit__
        - Dopo wipe() ogni firma solleva SigningError

    Examples:
        >>> with ECKeyPair.from_hex("7582be84…e26a") as kp:
        ...     kp.address.to_hex()
        '0xd989829d88b0ed1b06edf5c50174ecfa64f14a64'
    """

    __slots__ = ("_secret", "_public_key", "_address")

    def __init__(self, private_key: Union[bytes, bytearray]):
        if not isinstance(private_key, (bytes, bytearray)):
            raise SigningError(
                f"Private key must be bytes, got {type(private_key).__name__}",
                code="INVALID_PRIVATE_KEY"
            )
        if len(private_key) != PRIVATE_KEY_LENGTH:
            raise SigningError(
                f"Private key must be {PRIVATE_KEY_LENGTH} bytes, got {len(private_key)}",
                code="INVALID_PRIVATE_KEY"
            )

        try:
            scalar = ec.derive_private_key(int.from_bytes(private_key, "big"), ec.SECP256K1())
        except ValueError as e:
            raise SigningError(
                "Private key scalar out of curve range",
                code="INVALID_PRIVATE_KEY"
            ) from e

        self._secret = bytearray(private_key)
        self._public_key = scalar.public_key().public_bytes(
            Encoding.X962, PublicFormat.UncompressedPoint
        )
        self._address = Address.from_public_key(self._public_key)

        logger.debug("KeyPair loaded", extra_data={"address": self._address.to_hex()})

    # ------------------------------------------------------------------------
    # CONSTRUCTORS
    # ------------------------------------------------------------------------

    @classmethod
    def from_hex(cls, text: str) -> ECKeyPair:
        """
        Carica da hex (con o senza 0x).

        Raises:
            SigningError: Se hex malformato o scalare fuori range
        """
        try:
            raw = bytearray(hex_to_bytes(text, length=PRIVATE_KEY_LENGTH, field="private_key"))
        except ArgumentError as e:
            # Il valore non finisce nel messaggio
            raise SigningError("Malformed private key hex", code="INVALID_PRIVATE_KEY") from e
        try:
            return cls(raw)
        finally:
            raw[:] = bytes(len(raw))

    @classmethod
    def generate(cls) -> ECKeyPair:
        """Nuova chiave casuale (cryptography / OS CSPRNG)"""
        scalar = ec.generate_private_key(ec.SECP256K1())
        value = scalar.private_numbers().private_value
        return cls(bytearray(value.to_bytes(PRIVATE_KEY_LENGTH, "big")))

    # ------------------------------------------------------------------------
    # PROPERTIES
    # ------------------------------------------------------------------------

    @property
    def public_key(self) -> bytes:
        return self._public_key

    @property
    def address(self) -> Address:
        return self._address

    @property
    def is_wiped(self) -> bool:
        return not any(self._secret)

    # ------------------------------------------------------------------------
    # SIGNING
    # ------------------------------------------------------------------------

    def sign_hash(self, message_hash: bytes) -> bytes:
        """
        Firma recuperabile di un hash da 32 bytes.

        Args:
            message_hash: Digest da firmare (signing hash transazione)

        Returns:
            bytes: r(32) ‖ s(32) ‖ recovery(1), recovery in {0, 1}

        Raises:
            SigningError: Se chiave azzerata o hash di lunghezza errata
        """
        if self.is_wiped:
            raise SigningError("KeyPair has been wiped", code="KEY_WIPED")
        if not isinstance(message_hash, bytes) or len(message_hash) != 32:
            raise SigningError("Message hash must be 32 bytes", code="INVALID_HASH")

        try:
            signature = keys.PrivateKey(bytes(self._secret)).sign_msg_hash(message_hash)
        except EthKeysValidationError as e:
            logger.error("Signing failed", extra_data={"error": type(e).__name__})
            raise SigningError(f"Failed to sign hash: {e}", code="SIGN_FAILED") from e

        return signature.to_bytes()

    # ------------------------------------------------------------------------
    # LIFECYCLE
    # ------------------------------------------------------------------------

    def wipe(self) -> None:
        """Azzera lo scalare privato in memoria"""
        for i in range(len(self._secret)):
            self._secret[i] = 0

    def __enter__(self) -> ECKeyPair:
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.wipe()
        return None

    def __repr__(self) -> str:
        return f"ECKeyPair(address={self._address.to_hex()})"

    __str__ = __repr__


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "ECKeyPair",
]
