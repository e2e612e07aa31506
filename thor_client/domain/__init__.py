"""
ThorClient - Domain Package
=============================
Modelli, encoding canonico e firma delle transazioni.
"""

# Value types
from thor_client.domain.addressing import Address, to_address, validate_address
from thor_client.domain.amount import Amount, Token, VET, VTHO

# Keys
from thor_client.domain.keypairs import ECKeyPair

# Models
from thor_client.domain.models import (
    ToClause,
    BlockRef,
    Revision,
    RawTransaction,
    SignedTransaction,
    TransferResult,
)

# Codec
from thor_client.domain.codec import (
    encode_unsigned,
    encode_signed,
    decode_raw_transaction,
    decode_signed_transaction,
)

# Factory / signer
from thor_client.domain.tx_factory import create_raw_transaction, RawTransactionFactory
from thor_client.domain.signing import (
    compute_signing_hash,
    compute_tx_id,
    sign,
    recover_signer,
    verify,
)

# Crypto
from thor_client.domain.crypto_core import generate_tx_nonce

__all__ = [
    "Address",
    "to_address",
    "validate_address",
    "Amount",
    "Token",
    "VET",
    "VTHO",
    "ECKeyPair",
    "ToClause",
    "BlockRef",
    "Revision",
    "RawTransaction",
    "SignedTransaction",
    "TransferResult",
    "encode_unsigned",
    "encode_signed",
    "decode_raw_transaction",
    "decode_signed_transaction",
    "create_raw_transaction",
    "RawTransactionFactory",
    "compute_signing_hash",
    "compute_tx_id",
    "sign",
    "recover_signer",
    "verify",
    "generate_tx_nonce",
]
