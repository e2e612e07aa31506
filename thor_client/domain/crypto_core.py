"""
ThorClient - Cryptographic Core Layer
=======================================
Primitive crittografiche di basso livello del client.

Security Level: CRITICAL
Last Updated: 2026-10-17
Version: 1.0.0

SECURITY NOTICE:
Questo modulo implementa primitive usate per hash di firma e id
transazione. Ogni modifica rompe la compatibilità con il nodo.

Algorithms:
- Hash: BLAKE2b-256 (signing hash, tx id), Keccak-256 (address, selector ABI)
- Curve: secp256k1
- Randomness: CSPRNG (secrets) per nonce transazione

Dependencies:
- eth-utils (keccak)
- hashlib (stdlib)
"""

import hashlib
import secrets

from eth_utils import keccak

from thor_client.constants import TX_NONCE_LENGTH
from thor_client.errors import SigningError
from thor_client.logging_setup import get_logger


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("crypto")


# ============================================================================
# HASH FUNCTIONS
# ============================================================================

def compute_blake2b256(*chunks: bytes) -> bytes:
    """
    Compute BLAKE2b con digest da 32 bytes.

    BLAKE2b-256 è l'hash di consenso della chain per:
    - Signing hash della transazione (encoding canonico non firmato)
    - Transaction ID (signing hash ‖ address firmatario)

    Args:
        *chunks: Dati concatenati in ordine

    Returns:
        bytes: 32-byte hash digest

    Raises:
        SigningError: Se input non bytes

    Examples:
        >>> compute_blake2b256(b"").hex()[:16]
        '0e5751c026e543b2'
    """
    try:
        hasher = hashlib.blake2b(digest_size=32)
        for chunk in chunks:
            hasher.update(chunk)
        return hasher.digest()
    except TypeError as e:
        logger.error("BLAKE2b computation failed", extra_data={"error": str(e)})
        raise SigningError(f"BLAKE2b-256 hash failed: {e}", code="HASH_ERROR")


def compute_keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 (variante pre-standard, NON SHA3-256).

    Usato per:
    - Address derivation (ultimi 20 bytes di keccak(pubkey))
    - Selector ABI (primi 4 bytes di keccak(signature metodo))

    Examples:
        >>> compute_keccak256(b"").hex()[:16]
        'c5d2460186f7233c'
    """
    return keccak(data)


# ============================================================================
# RANDOMNESS
# ============================================================================

def generate_random_bytes(length: int) -> bytes:
    """
    Genera bytes casuali crittograficamente sicuri.

    Args:
        length: Numero bytes

    Returns:
        bytes: Random bytes (CSPRNG)
    """
    if length <= 0:
        raise ValueError(f"length must be positive, got {length}")
    return secrets.token_bytes(length)


def generate_tx_nonce() -> bytes:
    """
    Genera nonce transazione (8 bytes random).

    Thread-safe: `secrets` attinge dal CSPRNG del sistema operativo, quindi
    chiamate concorrenti producono valori indipendenti.

    Returns:
        bytes: Nonce da 8 bytes

    Examples:
        >>> len(generate_tx_nonce())
        8
    """
    return generate_random_bytes(TX_NONCE_LENGTH)


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "compute_blake2b256",
    "compute_keccak256",
    "generate_random_bytes",
    "generate_tx_nonce",
]
