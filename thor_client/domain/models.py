"""
ThorClient - Domain Models
============================
Modelli immutabili della transazione: clausole, transazione non firmata,
transazione firmata, riferimenti a blocchi e revisioni.

Security Level: CRITICAL
Last Updated: 2026-10-17
Version: 1.0.0

Models:
- ToClause: singola azione (to, value, data)
- RawTransaction: transazione non firmata
- SignedTransaction: transazione + firma 65 bytes
- TransferResult: id restituito dal nodo
- BlockRef: primi 8 bytes di un block id
- Revision: selettore di blocco per le letture ("best", numero, id)

IMPORTANTE: l'ordine e la codifica dei campi sono definiti in
thor_client.domain.codec. Questi modelli validano solo tipi e range.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple, Union

from thor_client.constants import (
    BLOCK_ID_LENGTH,
    BLOCK_REF_LENGTH,
    MAX_UINT8,
    MAX_UINT32,
    MAX_UINT64,
    MAX_UINT256,
    SIGNATURE_LENGTH,
    TX_ID_LENGTH,
    TX_NONCE_LENGTH,
)
from thor_client.domain.addressing import Address
from thor_client.errors import ArgumentError, format_argument_error
from thor_client.utils.serialization import bytes_to_hex, hex_to_bytes, is_hex


# ============================================================================
# VALIDATION HELPERS
# ============================================================================

def _check_uint(name: str, value: Any, maximum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= maximum:
        raise format_argument_error(name, value, f"integer in [0, {maximum}]",
                                    code="OUT_OF_RANGE")


def _check_bytes(name: str, value: Any, length: int) -> None:
    if not isinstance(value, bytes) or len(value) != length:
        raise format_argument_error(name, value, f"{length} bytes",
                                    code="INVALID_LENGTH")


# ============================================================================
# CLAUSE
# ============================================================================

@dataclass(frozen=True)
class ToClause:
    """
    Singola azione della transazione.

    Attributes:
        to (Optional[Address]): Destinatario, None solo per deploy contratto
        value (int): VET trasferiti in unità minime
        data (bytes): Call data ABI (vuoto per trasferimento semplice)

    Examples:
        >>> clause = ToClause(to=Address.from_hex("0x7567…ffed"), value=10000)
        >>> clause.data
        b''
    """

    to: Optional[Address]
    value: int = 0
    data: bytes = b""

    def __post_init__(self):
        if self.to is not None and not isinstance(self.to, Address):
            raise format_argument_error("to", self.to, "Address or None", code="INVALID_ADDRESS")
        _check_uint("value", self.value, MAX_UINT256)
        if not isinstance(self.data, (bytes, bytearray)):
            raise format_argument_error("data", self.data, "bytes", code="INVALID_DATA")
        object.__setattr__(self, "data", bytes(self.data))

    @property
    def is_deployment(self) -> bool:
        return self.to is None

    def to_dict(self) -> Dict[str, Any]:
        """Formato JSON del nodo (value come hex)"""
        return {
            "to": self.to.to_hex() if self.to is not None else None,
            "value": hex(self.value),
            "data": bytes_to_hex(self.data),
        }


# ============================================================================
# BLOCK REFERENCES
# ============================================================================

@dataclass(frozen=True)
class BlockRef:
    """
    Riferimento a blocco: primi 8 bytes del block id.

    I primi 4 bytes di un block id sono il numero di blocco big-endian.

    Examples:
        >>> ref = BlockRef.from_block_id("0x00000000aabbccdd" + "00" * 24)
        >>> ref.to_hex()
        '0x00000000aabbccdd'
    """

    value: bytes

    def __post_init__(self):
        _check_bytes("block_ref", self.value, BLOCK_REF_LENGTH)

    @classmethod
    def from_block_id(cls, block_id: str) -> BlockRef:
        raw = hex_to_bytes(block_id, length=BLOCK_ID_LENGTH, field="block_id")
        return cls(raw[:BLOCK_REF_LENGTH])

    @classmethod
    def from_hex(cls, text: str) -> BlockRef:
        return cls(hex_to_bytes(text, length=BLOCK_REF_LENGTH, field="block_ref"))

    @property
    def block_number(self) -> int:
        return int.from_bytes(self.value[:4], "big")

    def to_hex(self) -> str:
        return bytes_to_hex(self.value)

    def __str__(self) -> str:
        return self.to_hex()


@dataclass(frozen=True)
class Revision:
    """
    Selettore di blocco per le letture: "best", numero o block id.

    Examples:
        >>> str(Revision.best())
        'best'
        >>> str(Revision.of(12))
        '12'
    """

    value: str

    BEST = "best"

    @classmethod
    def best(cls) -> Revision:
        return cls(cls.BEST)

    @classmethod
    def of(cls, revision: Union[Revision, int, str, None]) -> Revision:
        """
        Normalizza revisione (None → best).

        Raises:
            ArgumentError: Se numero negativo o stringa non riconosciuta
        """
        if revision is None:
            return cls.best()
        if isinstance(revision, Revision):
            return revision
        if isinstance(revision, bool):
            raise format_argument_error("revision", revision, "best, block number or block id")
        if isinstance(revision, int):
            _check_uint("revision", revision, MAX_UINT32)
            return cls(str(revision))
        if isinstance(revision, str):
            text = revision.strip().lower()
            if text == cls.BEST:
                return cls.best()
            if text.isdigit():
                return cls.of(int(text))
            if is_hex(text) and len(text.removeprefix("0x")) == BLOCK_ID_LENGTH * 2:
                return cls(bytes_to_hex(hex_to_bytes(text)))
        raise format_argument_error("revision", revision, "best, block number or block id")

    def __str__(self) -> str:
        return self.value


# ============================================================================
# TRANSACTIONS
# ============================================================================

@dataclass(frozen=True)
class RawTransaction:
    """
    Transazione non firmata.

    Attributes:
        chain_tag (int): Ultimo byte del genesis id (0..255)
        block_ref (bytes): 8 bytes, primi bytes di un block id recente
        expiration (int): Validità in blocchi dopo block_ref (uint32)
        clauses (Tuple[ToClause, ...]): Azioni in ordine
        gas_price_coef (int): Coefficiente prezzo gas (0..255)
        gas (int): Gas massimo (uint64)
        depends_on (Optional[bytes]): Id tx (32 bytes) da cui dipende
        nonce (bytes): 8 bytes casuali scelti dal mittente
        features (int): Bitmap del campo reserved (0 = nessuna)

    Security:
        - Immutabile
        - Costruire tramite create_raw_transaction() per la validazione completa
    """

    chain_tag: int
    block_ref: bytes
    expiration: int
    clauses: Tuple[ToClause, ...]
    gas_price_coef: int
    gas: int
    nonce: bytes
    depends_on: Optional[bytes] = None
    features: int = 0

    def __post_init__(self):
        _check_uint("chain_tag", self.chain_tag, MAX_UINT8)
        _check_bytes("block_ref", self.block_ref, BLOCK_REF_LENGTH)
        _check_uint("expiration", self.expiration, MAX_UINT32)
        _check_uint("gas_price_coef", self.gas_price_coef, MAX_UINT8)
        _check_uint("gas", self.gas, MAX_UINT64)
        _check_bytes("nonce", self.nonce, TX_NONCE_LENGTH)
        _check_uint("features", self.features, MAX_UINT32)
        if self.depends_on is not None:
            _check_bytes("depends_on", self.depends_on, TX_ID_LENGTH)

        clauses = tuple(self.clauses)
        for clause in clauses:
            if not isinstance(clause, ToClause):
                raise format_argument_error("clauses", clause, "ToClause", code="INVALID_CLAUSE")
        object.__setattr__(self, "clauses", clauses)

    # ------------------------------------------------------------------------
    # ENCODING
    # ------------------------------------------------------------------------

    def encode(self) -> bytes:
        """Encoding canonico non firmato"""
        from thor_client.domain.codec import encode_unsigned
        return encode_unsigned(self)

    @property
    def signing_hash(self) -> bytes:
        """blake2b256(encoding non firmato)"""
        from thor_client.domain.signing import compute_signing_hash
        return compute_signing_hash(self)

    @property
    def is_delegated(self) -> bool:
        return bool(self.features & 1)

    def with_signature(self, signature: bytes) -> SignedTransaction:
        return SignedTransaction(raw=self, signature=signature)

    def with_nonce(self, nonce: bytes) -> RawTransaction:
        return replace(self, nonce=nonce)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chainTag": self.chain_tag,
            "blockRef": bytes_to_hex(self.block_ref),
            "expiration": self.expiration,
            "clauses": [c.to_dict() for c in self.clauses],
            "gasPriceCoef": self.gas_price_coef,
            "gas": self.gas,
            "dependsOn": bytes_to_hex(self.depends_on) if self.depends_on else None,
            "nonce": bytes_to_hex(self.nonce),
            "features": self.features,
        }


@dataclass(frozen=True)
class SignedTransaction:
    """
    Transazione firmata: raw + firma r(32) ‖ s(32) ‖ recovery(1).

    Examples:
        >>> signed = sign(raw, key_pair)
        >>> signed.origin == key_pair.address
        True
        >>> signed.id_hex.startswith("0x")
        True
    """

    raw: RawTransaction
    signature: bytes = field(repr=False)

    def __post_init__(self):
        if not isinstance(self.raw, RawTransaction):
            raise format_argument_error("raw", self.raw, "RawTransaction")
        _check_bytes("signature", self.signature, SIGNATURE_LENGTH)
        if self.signature[-1] not in (0, 1):
            raise ArgumentError(
                f"Invalid recovery id: {self.signature[-1]}",
                code="INVALID_SIGNATURE"
            )

    def encode(self) -> bytes:
        """Encoding canonico firmato (bytes da inviare al nodo)"""
        from thor_client.domain.codec import encode_signed
        return encode_signed(self)

    def encode_hex(self) -> str:
        return bytes_to_hex(self.encode())

    @property
    def signing_hash(self) -> bytes:
        return self.raw.signing_hash

    @property
    def origin(self) -> Address:
        """Address del firmatario recuperato dalla firma"""
        from thor_client.domain.signing import recover_signer
        return recover_signer(self.signing_hash, self.signature)

    @property
    def id(self) -> bytes:
        """blake2b256(signing_hash ‖ origin)"""
        from thor_client.domain.signing import compute_tx_id
        return compute_tx_id(self.signing_hash, self.origin)

    @property
    def id_hex(self) -> str:
        return bytes_to_hex(self.id)


@dataclass(frozen=True)
class TransferResult:
    """Risultato submission: id transazione restituito dal nodo"""

    id: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id}


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "ToClause",
    "BlockRef",
    "Revision",
    "RawTransaction",
    "SignedTransaction",
    "TransferResult",
]
