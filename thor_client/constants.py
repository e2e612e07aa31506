"""
ThorClient - Core Constants
=============================
Costanti di protocollo: lunghezze wire, chain tag, contratti nativi,
parametri di default per le transazioni.

Security Level: CRITICAL
Last Updated: 2026-10-17
Version: 1.0.0

IMPORTANTE: le lunghezze e l'ordine dei campi sono invarianti di
compatibilità wire. Una modifica produce transazioni rifiutate dal nodo.
"""

from enum import IntEnum
from typing import Final


# ============================================================================
# IDENTIFICAZIONE PROGETTO
# ============================================================================

CLIENT_NAME: Final[str] = "ThorClient"
SOFTWARE_VERSION: Final[str] = "1.0.0"
USER_AGENT: Final[str] = f"thorclient-python/{SOFTWARE_VERSION}"


# ============================================================================
# LUNGHEZZE WIRE (bytes)
# ============================================================================

ADDRESS_LENGTH: Final[int] = 20
BLOCK_REF_LENGTH: Final[int] = 8
TX_NONCE_LENGTH: Final[int] = 8
TX_ID_LENGTH: Final[int] = 32
BLOCK_ID_LENGTH: Final[int] = 32
PRIVATE_KEY_LENGTH: Final[int] = 32
SIGNATURE_LENGTH: Final[int] = 65  # r(32) + s(32) + recovery(1)
SELECTOR_LENGTH: Final[int] = 4
ABI_SLOT_LENGTH: Final[int] = 32

# Limiti numerici dei campi transazione
MAX_UINT8: Final[int] = 2**8 - 1
MAX_UINT32: Final[int] = 2**32 - 1
MAX_UINT64: Final[int] = 2**64 - 1
MAX_UINT256: Final[int] = 2**256 - 1


# ============================================================================
# CHAIN TAG (ultimo byte del genesis block id)
# ============================================================================

class ChainTag(IntEnum):
    """Chain tag delle reti pubbliche"""
    MAINNET = 0x4a
    TESTNET = 0x27


# ============================================================================
# TRANSACTION DEFAULTS
# ============================================================================

# Costo intrinseco minimo di una tx (assunto dal chiamante, non imposto)
INTRINSIC_GAS: Final[int] = 21_000

# Costo per clausola (gas stimato a valle dal nodo)
CLAUSE_GAS: Final[int] = 16_000

# Expiration suggerita in blocchi (~2 ore con block time 10s)
DEFAULT_EXPIRATION: Final[int] = 720

DEFAULT_GAS_PRICE_COEF: Final[int] = 0


class TxFeature(IntEnum):
    """Bit del campo `reserved.features`"""
    NONE = 0
    DELEGATED = 1  # VIP-191, firma del delegator non supportata dal client


# ============================================================================
# CONTRATTI NATIVI
# ============================================================================

# Address = bytes ASCII del nome, left-padded a 20 bytes
PROTOTYPE_CONTRACT_ADDRESS: Final[str] = "0x000000000000000000000050726f746f74797065"
ENERGY_CONTRACT_ADDRESS: Final[str] = "0x0000000000000000000000000000456e65726779"


# ============================================================================
# TOKEN
# ============================================================================

VET_DECIMALS: Final[int] = 18
VTHO_DECIMALS: Final[int] = 18


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "CLIENT_NAME",
    "SOFTWARE_VERSION",
    "USER_AGENT",
    "ADDRESS_LENGTH",
    "BLOCK_REF_LENGTH",
    "TX_NONCE_LENGTH",
    "TX_ID_LENGTH",
    "BLOCK_ID_LENGTH",
    "PRIVATE_KEY_LENGTH",
    "SIGNATURE_LENGTH",
    "SELECTOR_LENGTH",
    "ABI_SLOT_LENGTH",
    "MAX_UINT8",
    "MAX_UINT32",
    "MAX_UINT64",
    "MAX_UINT256",
    "ChainTag",
    "INTRINSIC_GAS",
    "CLAUSE_GAS",
    "DEFAULT_EXPIRATION",
    "DEFAULT_GAS_PRICE_COEF",
    "TxFeature",
    "PROTOTYPE_CONTRACT_ADDRESS",
    "ENERGY_CONTRACT_ADDRESS",
    "VET_DECIMALS",
    "VTHO_DECIMALS",
]
