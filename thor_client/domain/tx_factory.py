"""
ThorClient - Raw Transaction Factory
======================================
Validazione e assemblaggio della transazione non firmata.

Security Level: HIGH
Last Updated: 2026-10-17
Version: 1.0.0

Validazioni:
- almeno una clausola
- chain tag e gas price coef su un byte
- block ref e nonce esattamente 8 bytes
- expiration uint32, gas uint64
- depends_on 32 bytes se presente

Tutti gli errori sono ArgumentError, sollevati prima di qualsiasi I/O.
"""

from typing import Optional, Union

from thor_client.constants import INTRINSIC_GAS, MAX_UINT8, MAX_UINT32, MAX_UINT64, TxFeature
from thor_client.domain.models import BlockRef, RawTransaction, ToClause
from thor_client.errors import ArgumentError, format_argument_error
from thor_client.logging_setup import get_logger


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("tx_factory")


# ============================================================================
# PRE-FLIGHT VALIDATION
# ============================================================================

def validate_tx_parameters(gas: int, gas_price_coef: int, expiration: int) -> None:
    """
    Valida i parametri forniti dal chiamante prima di interrogare il nodo.

    Chain tag, block ref e nonce arrivano dopo (nodo / CSPRNG) e sono
    validati da create_raw_transaction().

    Raises:
        ArgumentError: Parametro mancante o fuori range
    """
    for name, value, maximum in (
        ("gas", gas, MAX_UINT64),
        ("gas_price_coef", gas_price_coef, MAX_UINT8),
        ("expiration", expiration, MAX_UINT32),
    ):
        if value is None:
            raise ArgumentError(f"{name} is null", code="NULL_ARGUMENT", details={"field": name})
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= maximum:
            raise format_argument_error(name, value, f"integer in [0, {maximum}]",
                                        code="OUT_OF_RANGE")


# ============================================================================
# FACTORY FUNCTION
# ============================================================================

def create_raw_transaction(
    chain_tag: int,
    block_ref: Union[bytes, BlockRef],
    expiration: int,
    gas: int,
    gas_price_coef: int,
    nonce: bytes,
    *clauses: ToClause,
    depends_on: Optional[bytes] = None,
    features: int = 0
) -> RawTransaction:
    """
    Crea transazione non firmata validata.

    Args:
        chain_tag: Ultimo byte del genesis id
        block_ref: 8 bytes (o BlockRef)
        expiration: Blocchi di validità dopo block_ref
        gas: Gas massimo (>= 21000 atteso, non imposto)
        gas_price_coef: 0..255
        nonce: 8 bytes
        *clauses: Almeno una ToClause
        depends_on: Id tx da cui dipende (32 bytes)
        features: Bitmap reserved (0 = nessuna)

    Returns:
        RawTransaction: Transazione immutabile

    Raises:
        ArgumentError: Se un campo è mancante o fuori range

    Examples:
        >>> raw = create_raw_transaction(
        ...     0x27, BlockRef.from_hex("0x00000000aabbccdd"), 720, 21000, 0,
        ...     generate_tx_nonce(), ToClause(to=receiver, value=10**18)
        ... )
        >>> len(raw.clauses)
        1
    """
    if not clauses:
        raise ArgumentError("At least one clause is required", code="EMPTY_CLAUSES")

    for name, value in (
        ("chain_tag", chain_tag),
        ("block_ref", block_ref),
        ("expiration", expiration),
        ("gas", gas),
        ("gas_price_coef", gas_price_coef),
        ("nonce", nonce),
    ):
        if value is None:
            raise ArgumentError(f"{name} is null", code="NULL_ARGUMENT", details={"field": name})

    if isinstance(block_ref, BlockRef):
        block_ref = block_ref.value

    raw = RawTransaction(
        chain_tag=chain_tag,
        block_ref=block_ref,
        expiration=expiration,
        clauses=clauses,
        gas_price_coef=gas_price_coef,
        gas=gas,
        nonce=nonce,
        depends_on=depends_on,
        features=features,
    )

    if raw.features & ~int(TxFeature.DELEGATED):
        raise format_argument_error("features", features, "known feature bits",
                                    code="UNKNOWN_FEATURE")

    if gas < INTRINSIC_GAS:
        logger.debug(
            "Gas below intrinsic cost, node will reject the transaction",
            extra_data={"gas": gas, "intrinsic": INTRINSIC_GAS}
        )

    logger.debug(
        "Raw transaction created",
        extra_data={
            "chain_tag": chain_tag,
            "clauses": len(raw.clauses),
            "gas": gas,
            "expiration": expiration,
        }
    )

    return raw


# ============================================================================
# FACTORY CLASS
# ============================================================================

class RawTransactionFactory:
    """
    Factory stateless per chi preferisce un handle iniettabile.

    Examples:
        >>> factory = RawTransactionFactory()
        >>> raw = factory.create(chain_tag, block_ref, 720, 50000, 0, nonce, clause)
    """

    def create(
        self,
        chain_tag: int,
        block_ref: Union[bytes, BlockRef],
        expiration: int,
        gas: int,
        gas_price_coef: int,
        nonce: bytes,
        *clauses: ToClause,
        depends_on: Optional[bytes] = None,
        features: int = 0
    ) -> RawTransaction:
        return create_raw_transaction(
            chain_tag, block_ref, expiration, gas, gas_price_coef, nonce, *clauses,
            depends_on=depends_on, features=features
        )


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "validate_tx_parameters",
    "create_raw_transaction",
    "RawTransactionFactory",
]
