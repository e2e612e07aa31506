"""
ThorClient - Node Schemas
===========================
Pydantic models per i payload dell'API REST del nodo.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from thor_client.utils.serialization import is_hex, strip_hex_prefix


def _hex_quantity(value: Any) -> Any:
    """'0x1bc16d674ec80000' → int (gli int passano invariati)"""
    if isinstance(value, str):
        text = value.strip()
        if text[:2] in ("0x", "0X"):
            return int(text[2:] or "0", 16)
        return int(text)
    return value


class NodeModel(BaseModel):
    """Base: alias camelCase del nodo, campi sconosciuti ignorati"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


# ============================================================================
# BLOCKS
# ============================================================================

class Block(NodeModel):
    """Blocco (GET /blocks/{revision})"""
    number: int = Field(..., description="Block number")
    id: str = Field(..., description="Block id (hex, 32 bytes)")
    size: int = Field(0, description="Block size in bytes")
    parent_id: Optional[str] = Field(None, alias="parentID", description="Parent block id")
    timestamp: int = Field(..., description="Block timestamp (unix)")
    gas_limit: int = Field(0, alias="gasLimit", description="Block gas limit")
    beneficiary: Optional[str] = Field(None, description="Reward beneficiary")
    gas_used: int = Field(0, alias="gasUsed", description="Gas used")
    total_score: int = Field(0, alias="totalScore", description="Accumulated score")
    signer: Optional[str] = Field(None, description="Block signer")
    is_trunk: bool = Field(True, alias="isTrunk", description="Block on trunk")
    transactions: List[str] = Field(default_factory=list, description="Transaction ids")


# ============================================================================
# TRANSACTIONS
# ============================================================================

class TxMeta(NodeModel):
    """Posizione della tx nella chain"""
    block_id: str = Field(..., alias="blockID", description="Including block id")
    block_number: int = Field(..., alias="blockNumber", description="Including block number")
    block_timestamp: int = Field(..., alias="blockTimestamp", description="Including block timestamp")


class ClauseSchema(NodeModel):
    """Clausola come restituita dal nodo"""
    to: Optional[str] = Field(None, description="Recipient, null for deployment")
    value: int = Field(0, description="VET in minimal units")
    data: str = Field("0x", description="Call data (hex)")

    @field_validator("value", mode="before")
    @classmethod
    def parse_value(cls, v: Any) -> Any:
        return _hex_quantity(v)


class TransactionDetail(NodeModel):
    """Transazione (GET /transactions/{id})"""
    id: str = Field(..., description="Transaction id")
    chain_tag: Optional[int] = Field(None, alias="chainTag", description="Chain tag")
    block_ref: Optional[str] = Field(None, alias="blockRef", description="Block ref (hex)")
    expiration: Optional[int] = Field(None, description="Expiration in blocks")
    clauses: List[ClauseSchema] = Field(default_factory=list, description="Clauses")
    gas_price_coef: Optional[int] = Field(None, alias="gasPriceCoef", description="Gas price coefficient")
    gas: Optional[int] = Field(None, description="Gas limit")
    origin: Optional[str] = Field(None, description="Signer address")
    delegator: Optional[str] = Field(None, description="Fee delegator")
    nonce: Optional[str] = Field(None, description="Nonce (hex)")
    depends_on: Optional[str] = Field(None, alias="dependsOn", description="Dependency tx id")
    size: Optional[int] = Field(None, description="Encoded size")
    raw: Optional[str] = Field(None, description="Signed encoding (raw=true)")
    meta: Optional[TxMeta] = Field(None, description="Null while pending")

    @property
    def is_pending(self) -> bool:
        return self.meta is None


# ============================================================================
# RECEIPTS
# ============================================================================

class Event(NodeModel):
    """Log evento"""
    address: str = Field(..., description="Emitting contract")
    topics: List[str] = Field(default_factory=list, description="Indexed topics")
    data: str = Field("0x", description="Non-indexed data")


class Transfer(NodeModel):
    """Trasferimento VET"""
    sender: str = Field(..., description="Sender")
    recipient: str = Field(..., description="Recipient")
    amount: int = Field(..., description="Amount in minimal units")

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        return _hex_quantity(v)


class ReceiptOutput(NodeModel):
    """Output di una clausola"""
    contract_address: Optional[str] = Field(None, alias="contractAddress", description="Deployed contract")
    events: List[Event] = Field(default_factory=list, description="Events")
    transfers: List[Transfer] = Field(default_factory=list, description="Transfers")


class ReceiptMeta(TxMeta):
    """Meta del receipt"""
    tx_id: str = Field(..., alias="txID", description="Transaction id")
    tx_origin: str = Field(..., alias="txOrigin", description="Transaction signer")


class Receipt(NodeModel):
    """Receipt (GET /transactions/{id}/receipt)"""
    gas_used: int = Field(..., alias="gasUsed", description="Gas used")
    gas_payer: str = Field(..., alias="gasPayer", description="Account paying gas")
    paid: int = Field(..., description="VTHO paid (minimal units)")
    reward: int = Field(0, description="VTHO reward (minimal units)")
    reverted: bool = Field(..., description="Execution reverted")
    meta: ReceiptMeta = Field(..., description="Inclusion metadata")
    outputs: List[ReceiptOutput] = Field(default_factory=list, description="Clause outputs")

    @field_validator("paid", "reward", mode="before")
    @classmethod
    def parse_quantities(cls, v: Any) -> Any:
        return _hex_quantity(v)


# ============================================================================
# CONTRACT CALLS
# ============================================================================

class ContractCallResult(NodeModel):
    """Risultato chiamata read-only (POST /accounts/{address})"""
    data: str = Field("0x", description="Return data (hex)")
    events: List[Event] = Field(default_factory=list, description="Events")
    transfers: List[Transfer] = Field(default_factory=list, description="Transfers")
    gas_used: int = Field(0, alias="gasUsed", description="Gas used")
    reverted: bool = Field(False, description="Execution reverted")
    vm_error: Optional[str] = Field("", alias="vmError", description="VM error message")

    @field_validator("data", mode="before")
    @classmethod
    def validate_data(cls, v: Any) -> Any:
        if v is None:
            return "0x"
        if not isinstance(v, str):
            return v
        body = strip_hex_prefix(v.strip())
        if not is_hex(body, allow_prefix=False) or len(body) % 2:
            raise ValueError("Invalid return data: not even-length hex")
        return "0x" + body.lower()

    @property
    def data_bytes(self) -> bytes:
        return bytes.fromhex(self.data[2:])


class SubmitResponse(NodeModel):
    """Risposta POST /transactions"""
    id: str = Field(..., description="Transaction id")


__all__ = [
    "Block",
    "TxMeta",
    "ClauseSchema",
    "TransactionDetail",
    "Event",
    "Transfer",
    "ReceiptOutput",
    "ReceiptMeta",
    "Receipt",
    "ContractCallResult",
    "SubmitResponse",
]
