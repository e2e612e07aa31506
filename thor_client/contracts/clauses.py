"""
ThorClient - Clause Builder
=============================
Costruzione clausole: una ToClause per ogni azione logica.

Security Level: HIGH
Last Updated: 2026-10-17
Version: 1.0.0

Clause Types:
- Contract clause: value 0, data = call ABI
- VET transfer: value valorizzato, data vuoto (o fornito)
- Token transfer (VTHO): transfer(address,uint256) verso il contratto token
- Read call: payload {value, data} per POST /accounts/{addr}
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from thor_client.contracts.abi import AbiDefinition, encode_call
from thor_client.contracts.prototype import get_energy_abi
from thor_client.domain.addressing import Address, AddressLike, to_address
from thor_client.domain.amount import Amount, Token
from thor_client.domain.models import ToClause
from thor_client.errors import ArgumentError, require_same_length
from thor_client.logging_setup import get_logger
from thor_client.utils.serialization import bytes_to_hex


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("clauses")


# ============================================================================
# READ CALL PAYLOAD
# ============================================================================

@dataclass(frozen=True)
class ContractCall:
    """
    Payload di una chiamata in sola lettura.

    Attributes:
        data (bytes): Call data ABI
        value (int): VET simulati (default 0)
        caller (Optional[Address]): msg.sender simulato
        gas (Optional[int]): Gas massimo per l'esecuzione
    """

    data: bytes
    value: int = 0
    caller: Optional[Address] = None
    gas: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Body JSON di POST /accounts/{address}"""
        body: Dict[str, Any] = {
            "value": hex(self.value),
            "data": bytes_to_hex(self.data),
        }
        if self.caller is not None:
            body["caller"] = self.caller.to_hex()
        if self.gas is not None:
            body["gas"] = self.gas
        return body


# ============================================================================
# CLAUSE BUILDERS
# ============================================================================

def build_contract_clause(contract: AddressLike, abi: AbiDefinition, *args: Any) -> ToClause:
    """
    Clausola di invocazione contratto (value zero).

    Raises:
        EncodingError: Argomenti non codificabili

    Examples:
        >>> clause = build_contract_clause(PROTOTYPE_ADDRESS, add_user_abi, receiver, user)
        >>> clause.data[:4].hex()
        '8ca3b448'
    """
    return ToClause(
        to=to_address(contract, field="contract"),
        value=0,
        data=encode_call(abi, *args),
    )


def _minimal_value(amount: Union[Amount, int], native_only: bool) -> int:
    if amount is None:
        raise ArgumentError("amount is null", code="NULL_ARGUMENT", details={"field": "amount"})
    if isinstance(amount, Amount):
        if native_only and not amount.token.is_native:
            raise ArgumentError(
                f"{amount.token.symbol} is not the native token",
                code="INVALID_TOKEN"
            )
        return amount.value
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ArgumentError(
            f"amount must be Amount or int, got {type(amount).__name__}",
            code="INVALID_AMOUNT"
        )
    return amount


def build_vet_clause(to: AddressLike, amount: Union[Amount, int], data: bytes = b"") -> ToClause:
    """
    Trasferimento VET semplice.

    Examples:
        >>> clause = build_vet_clause(receiver, Amount.from_decimal(VET, "21.12"))
        >>> clause.value
        21120000000000000000
        >>> clause.data
        b''
    """
    return ToClause(
        to=to_address(to, field="to"),
        value=_minimal_value(amount, native_only=True),
        data=data,
    )


def build_token_transfer_clause(
    token: Token,
    to: AddressLike,
    amount: Union[Amount, int]
) -> ToClause:
    """
    Trasferimento token ERC20 (es. VTHO): transfer(to, amount) sul contratto.

    Raises:
        ArgumentError: Token nativo (usare build_vet_clause)
    """
    if token is None or token.is_native:
        raise ArgumentError(
            "Token transfer requires a token contract",
            code="INVALID_TOKEN"
        )
    if isinstance(amount, Amount) and amount.token != token:
        raise ArgumentError(
            f"Amount is in {amount.token.symbol}, expected {token.symbol}",
            code="INVALID_TOKEN"
        )

    abi = get_energy_abi().require("transfer")
    return build_contract_clause(
        token.contract,
        abi,
        to_address(to, field="to"),
        _minimal_value(amount, native_only=False),
    )


def build_call(abi: AbiDefinition, *args: Any, caller: Optional[AddressLike] = None) -> ContractCall:
    """Payload read-only {value: 0, data}"""
    return ContractCall(
        data=encode_call(abi, *args),
        caller=to_address(caller, field="caller") if caller is not None else None,
    )


def fan_out(contract: AddressLike, abi: AbiDefinition, *columns: Sequence[Any]) -> List[ToClause]:
    """
    Una clausola per riga di array paralleli.

    Tutte le colonne vengono validate (stessa lunghezza) prima di
    costruire qualsiasi clausola.

    Args:
        contract: Contratto destinatario
        abi: Metodo da invocare
        *columns: Una sequenza per argomento del metodo

    Raises:
        ArgumentError: Colonna None o lunghezze diverse

    Examples:
        >>> clauses = fan_out(PROTOTYPE_ADDRESS, add_user_abi, [r1, r2], [u1, u2])
        >>> len(clauses)
        2
    """
    rows = require_same_length(**{f"column_{i}": c for i, c in enumerate(columns)})
    target = to_address(contract, field="contract")

    clauses = [
        build_contract_clause(target, abi, *(column[row] for column in columns))
        for row in range(rows)
    ]

    logger.debug(
        "Clauses built",
        extra_data={"method": abi.name, "contract": target.to_hex(), "count": len(clauses)}
    )

    return clauses


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "ContractCall",
    "build_contract_clause",
    "build_vet_clause",
    "build_token_transfer_clause",
    "build_call",
    "fan_out",
]
