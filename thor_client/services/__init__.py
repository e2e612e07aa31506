"""
ThorClient - Services Package
===============================
Servizi high-level: submission, contratti, Prototype (MPP).
"""

from thor_client.services.transaction_service import TransactionService
from thor_client.services.contract_service import ContractService
from thor_client.services.prototype_service import PrototypeService

__all__ = [
    "TransactionService",
    "ContractService",
    "PrototypeService",
]
