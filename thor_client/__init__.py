"""
ThorClient - VeChain Thor Client
==================================
Costruzione, firma e invio transazioni Thor; client del contratto
Prototype (multi-party payment).

Version: 1.0.0
Author: ThorClient Team
License: MIT
"""

__version__ = "1.0.0"
__author__ = "ThorClient Team"
__license__ = "MIT"

# Core imports
from thor_client.config import ClientSettings, get_settings
from thor_client.domain.addressing import Address
from thor_client.domain.amount import Amount, Token, VET, VTHO
from thor_client.domain.keypairs import ECKeyPair
from thor_client.domain.models import RawTransaction, SignedTransaction, ToClause, TransferResult
from thor_client.domain.tx_factory import create_raw_transaction
from thor_client.network.transport import HttpTransport

# Services
from thor_client.services.transaction_service import TransactionService
from thor_client.services.contract_service import ContractService
from thor_client.services.prototype_service import PrototypeService

__all__ = [
    # Version
    "__version__",

    # Core
    "ClientSettings",
    "get_settings",
    "Address",
    "Amount",
    "Token",
    "VET",
    "VTHO",
    "ECKeyPair",
    "RawTransaction",
    "SignedTransaction",
    "ToClause",
    "TransferResult",
    "create_raw_transaction",
    "HttpTransport",

    # Services
    "TransactionService",
    "ContractService",
    "PrototypeService",
]
