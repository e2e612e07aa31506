"""
ThorClient - Network Package
==============================
Trasporto REST verso il nodo e schemi dei payload.
"""

from thor_client.network.transport import Transport, HttpTransport
from thor_client.network.schemas import (
    Block,
    TransactionDetail,
    Receipt,
    ContractCallResult,
    SubmitResponse,
)

__all__ = [
    "Transport",
    "HttpTransport",
    "Block",
    "TransactionDetail",
    "Receipt",
    "ContractCallResult",
    "SubmitResponse",
]
