"""
ThorClient - Contracts Package
================================
ABI encoding, clause building e metadata dei contratti nativi.
"""

from thor_client.contracts.abi import (
    AbiDefinition,
    AbiParam,
    ContractAbi,
    compute_selector,
    encode_call,
    encode_call_by_name,
    decode_result,
)
from thor_client.contracts.clauses import (
    ContractCall,
    build_contract_clause,
    build_vet_clause,
    build_token_transfer_clause,
    build_call,
    fan_out,
)
from thor_client.contracts.prototype import (
    PROTOTYPE_ADDRESS,
    get_prototype_abi,
    get_energy_abi,
)

__all__ = [
    "AbiDefinition",
    "AbiParam",
    "ContractAbi",
    "compute_selector",
    "encode_call",
    "encode_call_by_name",
    "decode_result",
    "ContractCall",
    "build_contract_clause",
    "build_vet_clause",
    "build_token_transfer_clause",
    "build_call",
    "fan_out",
    "PROTOTYPE_ADDRESS",
    "get_prototype_abi",
    "get_energy_abi",
]
