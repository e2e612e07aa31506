"""
ThorClient - Transaction Signer
=================================
Signing hash, firma recuperabile e calcolo id transazione.

Security Level: CRITICAL
Last Updated: 2026-10-17
Version: 1.0.0

Pipeline:
1. signing_hash = blake2b256(encode_unsigned(raw))
2. signature = ECDSA secp256k1 (RFC 6979, low-S) ‖ recovery id (0/1)
3. id = blake2b256(signing_hash ‖ address firmatario)

La firma è deterministica: stessa transazione + stessa chiave → stessi bytes.
"""

from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError as EthKeysValidationError

from thor_client.constants import SIGNATURE_LENGTH
from thor_client.domain.addressing import Address
from thor_client.domain.codec import encode_unsigned
from thor_client.domain.crypto_core import compute_blake2b256
from thor_client.domain.keypairs import ECKeyPair
from thor_client.domain.models import RawTransaction, SignedTransaction
from thor_client.errors import SigningError
from thor_client.logging_setup import get_logger


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("signing")


# ============================================================================
# HASHES
# ============================================================================

def compute_signing_hash(raw: RawTransaction) -> bytes:
    """
    Hash firmato: blake2b256 dell'encoding canonico non firmato.

    Examples:
        >>> compute_signing_hash(reference_tx).hex()[:16]
        '2a1c25ce0d66f452'
    """
    return compute_blake2b256(encode_unsigned(raw))


def compute_tx_id(signing_hash: bytes, origin: Address) -> bytes:
    """
    Id transazione: blake2b256(signing_hash ‖ origin).

    Coincide con l'id restituito dal nodo in POST /transactions.
    """
    return compute_blake2b256(signing_hash, origin.to_bytes())


# ============================================================================
# SIGN / RECOVER
# ============================================================================

def sign(raw: RawTransaction, key_pair: ECKeyPair) -> SignedTransaction:
    """
    Firma transazione con la chiave fornita.

    Args:
        raw: Transazione non firmata
        key_pair: Chiave del mittente (non conservata)

    Returns:
        SignedTransaction: Transazione firmata

    Raises:
        SigningError: Chiave malformata/azzerata o errore hash

    Examples:
        >>> with ECKeyPair.from_hex(secret) as kp:
        ...     signed = sign(raw, kp)
        >>> signed.origin == kp.address
        True
    """
    if not isinstance(key_pair, ECKeyPair):
        raise SigningError(
            f"key_pair must be ECKeyPair, got {type(key_pair).__name__}",
            code="INVALID_PRIVATE_KEY"
        )

    signing_hash = compute_signing_hash(raw)
    signature = key_pair.sign_hash(signing_hash)
    signed = raw.with_signature(signature)

    logger.debug(
        "Transaction signed",
        extra_data={
            "origin": key_pair.address.to_hex(),
            "id": compute_tx_id(signing_hash, key_pair.address).hex(),
            "clauses": len(raw.clauses),
        }
    )

    return signed


def recover_signer(signing_hash: bytes, signature: bytes) -> Address:
    """
    Recupera address firmatario da hash + firma 65 bytes.

    Raises:
        SigningError: Firma malformata o non recuperabile
    """
    if not isinstance(signature, bytes) or len(signature) != SIGNATURE_LENGTH:
        raise SigningError(
            f"Signature must be {SIGNATURE_LENGTH} bytes",
            code="INVALID_SIGNATURE"
        )

    try:
        public_key = keys.Signature(signature).recover_public_key_from_msg_hash(signing_hash)
    except (BadSignature, EthKeysValidationError) as e:
        raise SigningError(f"Cannot recover signer: {e}", code="INVALID_SIGNATURE") from e

    return Address(public_key.to_canonical_address())


def verify(signed: SignedTransaction, expected_origin: Address = None) -> bool:
    """
    Verifica che la firma sia recuperabile (e, se indicato, del firmatario atteso).

    Returns:
        bool: False se firma invalida, mai eccezioni
    """
    try:
        origin = recover_signer(signed.signing_hash, signed.signature)
    except SigningError:
        return False
    return expected_origin is None or origin == expected_origin


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "compute_signing_hash",
    "compute_tx_id",
    "sign",
    "recover_signer",
    "verify",
]
