"""
ThorClient - Canonical Transaction Codec
==========================================
Encoding RLP canonico delle transazioni (firmate e non) e decoding inverso.

Security Level: CRITICAL
Last Updated: 2026-10-17
Version: 1.0.0

Wire Format (non firmata):
    rlp([chainTag, blockRef, expiration, [[to, value, data], ...],
         gasPriceCoef, gas, dependsOn, nonce, reserved])

Regole:
- Interi (anche blockRef e nonce) big-endian minimali, zero → stringa vuota
- to / dependsOn assenti → stringa vuota
- reserved: lista vuota se features == 0, altrimenti [features]
- Firmata: stessi campi + signature (65 bytes) come decimo elemento

IMPORTANTE: ogni deviazione produce un signing hash diverso e la
transazione viene rifiutata dal nodo.
"""

import rlp
from rlp.sedes import Binary, CountableList, big_endian_int, binary

from thor_client.constants import (
    ADDRESS_LENGTH,
    BLOCK_REF_LENGTH,
    SIGNATURE_LENGTH,
    TX_ID_LENGTH,
    TX_NONCE_LENGTH,
    TxFeature,
)
from thor_client.domain.addressing import Address
from thor_client.domain.models import RawTransaction, SignedTransaction, ToClause
from thor_client.errors import ArgumentError, EncodingError
from thor_client.logging_setup import get_logger
from thor_client.utils.serialization import big_endian_to_int, int_to_fixed_bytes


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("codec")


# ============================================================================
# RLP SEDES
# ============================================================================

class ClauseRLP(rlp.Serializable):
    fields = [
        ("to", Binary.fixed_length(ADDRESS_LENGTH, allow_empty=True)),
        ("value", big_endian_int),
        ("data", binary),
    ]


_UNSIGNED_FIELDS = [
    ("chain_tag", big_endian_int),
    ("block_ref", big_endian_int),
    ("expiration", big_endian_int),
    ("clauses", CountableList(ClauseRLP)),
    ("gas_price_coef", big_endian_int),
    ("gas", big_endian_int),
    ("depends_on", Binary.fixed_length(TX_ID_LENGTH, allow_empty=True)),
    ("nonce", big_endian_int),
    ("reserved", CountableList(big_endian_int)),
]


class UnsignedTransactionRLP(rlp.Serializable):
    fields = _UNSIGNED_FIELDS


class SignedTransactionRLP(rlp.Serializable):
    fields = _UNSIGNED_FIELDS + [
        ("signature", Binary.fixed_length(SIGNATURE_LENGTH)),
    ]


# ============================================================================
# MODEL → SEDES
# ============================================================================

def _clause_to_rlp(clause: ToClause) -> ClauseRLP:
    return ClauseRLP(
        to=clause.to.to_bytes() if clause.to is not None else b"",
        value=clause.value,
        data=clause.data,
    )


def _unsigned_values(raw: RawTransaction) -> dict:
    return {
        "chain_tag": raw.chain_tag,
        "block_ref": big_endian_to_int(raw.block_ref),
        "expiration": raw.expiration,
        "clauses": [_clause_to_rlp(c) for c in raw.clauses],
        "gas_price_coef": raw.gas_price_coef,
        "gas": raw.gas,
        "depends_on": raw.depends_on or b"",
        "nonce": big_endian_to_int(raw.nonce),
        "reserved": [raw.features] if raw.features else [],
    }


def encode_unsigned(raw: RawTransaction) -> bytes:
    """
    Encoding canonico della transazione non firmata.

    Input del signing hash: blake2b256(encode_unsigned(raw)).

    Returns:
        bytes: RLP deterministico
    """
    return rlp.encode(UnsignedTransactionRLP(**_unsigned_values(raw)))


def encode_signed(signed: SignedTransaction) -> bytes:
    """
    Encoding canonico della transazione firmata (body di POST /transactions).
    """
    return rlp.encode(SignedTransactionRLP(
        signature=signed.signature,
        **_unsigned_values(signed.raw)
    ))


# ============================================================================
# SEDES → MODEL
# ============================================================================

def _rlp_to_raw(decoded: rlp.Serializable) -> RawTransaction:
    if len(decoded.reserved) > 1:
        raise EncodingError(
            "Unsupported reserved field: more than one element",
            code="UNSUPPORTED_RESERVED"
        )
    features = decoded.reserved[0] if decoded.reserved else 0
    if decoded.reserved and features == 0:
        raise EncodingError("Non-canonical reserved field", code="NON_CANONICAL")
    if features & ~int(TxFeature.DELEGATED):
        raise EncodingError(
            f"Unknown transaction feature bits: {features:#x}",
            code="UNKNOWN_FEATURE",
            details={"features": features}
        )

    clauses = tuple(
        ToClause(
            to=Address(c.to) if c.to else None,
            value=c.value,
            data=c.data,
        )
        for c in decoded.clauses
    )

    return RawTransaction(
        chain_tag=decoded.chain_tag,
        block_ref=int_to_fixed_bytes(decoded.block_ref, BLOCK_REF_LENGTH, field="block_ref"),
        expiration=decoded.expiration,
        clauses=clauses,
        gas_price_coef=decoded.gas_price_coef,
        gas=decoded.gas,
        nonce=int_to_fixed_bytes(decoded.nonce, TX_NONCE_LENGTH, field="nonce"),
        depends_on=decoded.depends_on or None,
        features=features,
    )


def _decode(data: bytes, sedes) -> rlp.Serializable:
    if not isinstance(data, (bytes, bytearray)):
        raise EncodingError(
            f"Encoded transaction must be bytes, got {type(data).__name__}",
            code="INVALID_INPUT"
        )
    try:
        return rlp.decode(bytes(data), sedes=sedes)
    except (rlp.DecodingError, rlp.DeserializationError) as e:
        logger.debug("RLP decoding failed", extra_data={"error": str(e), "size": len(data)})
        raise EncodingError(f"Malformed transaction encoding: {e}", code="MALFORMED_RLP") from e


def decode_raw_transaction(data: bytes) -> RawTransaction:
    """
    Decodifica encoding non firmato.

    Raises:
        EncodingError: Se RLP malformato o interi non canonici (zeri iniziali)
    """
    decoded = _decode(data, UnsignedTransactionRLP)
    try:
        return _rlp_to_raw(decoded)
    except ArgumentError as e:
        raise EncodingError(f"Invalid transaction field: {e.message}", code="INVALID_FIELD") from e


def decode_signed_transaction(data: bytes) -> SignedTransaction:
    """
    Decodifica encoding firmato.

    Examples:
        >>> decoded = decode_signed_transaction(signed.encode())
        >>> decoded == signed
        True
    """
    decoded = _decode(data, SignedTransactionRLP)
    try:
        return SignedTransaction(raw=_rlp_to_raw(decoded), signature=decoded.signature)
    except ArgumentError as e:
        raise EncodingError(f"Invalid transaction field: {e.message}", code="INVALID_FIELD") from e


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "encode_unsigned",
    "encode_signed",
    "decode_raw_transaction",
    "decode_signed_transaction",
]
