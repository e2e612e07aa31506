"""
ThorClient - Contract Service
===============================
Query di chain/blocchi, chiamate read-only e pipeline di invocazione.

Security Level: HIGH
Last Updated: 2026-10-17
Version: 1.0.0

Pipeline invoke_contract_method:
1. Validazione parametri (nessun I/O)
2. Chain tag (genesis) + block ref (best block) dal nodo
3. Nonce fresco (CSPRNG) + create_raw_transaction
4. sign_then_transfer
"""

from typing import Optional, Sequence, Union

from thor_client.config import ClientSettings, get_settings
from thor_client.contracts.clauses import (
    ContractCall,
    build_token_transfer_clause,
    build_vet_clause,
)
from thor_client.domain.addressing import AddressLike, to_address
from thor_client.domain.amount import Amount, Token
from thor_client.domain.crypto_core import generate_tx_nonce
from thor_client.domain.keypairs import ECKeyPair
from thor_client.domain.models import BlockRef, Revision, ToClause, TransferResult
from thor_client.domain.tx_factory import create_raw_transaction, validate_tx_parameters
from thor_client.errors import ArgumentError, ClientIOError, ConfigError, require_same_length
from thor_client.logging_setup import get_logger
from thor_client.network.schemas import Block, ContractCallResult
from thor_client.network.transport import Transport
from thor_client.services.transaction_service import TransactionService, parse_payload


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("contract_service")


# ============================================================================
# CONTRACT SERVICE
# ============================================================================

class ContractService:
    """
    Servizio blocchi e contratti.

    Attributes:
        transport: Trasporto verso il nodo
        transactions: TransactionService per la submission
        config: Configurazione client

    Examples:
        >>> service = ContractService(transport)
        >>> hex(service.get_chain_tag())
        '0x27'
        >>> service.get_best_block_ref().to_hex()
        '0x00a1b2c3d4e5f601'
    """

    def __init__(
        self,
        transport: Transport,
        transactions: Optional[TransactionService] = None,
        config: Optional[ClientSettings] = None
    ):
        self.transport = transport
        self.config = config or get_settings()
        self.transactions = transactions or TransactionService(transport, self.config)
        self._chain_tag: Optional[int] = None

    # ========================================================================
    # BLOCKS
    # ========================================================================

    def get_block(self, revision: Union[Revision, int, str, None] = None) -> Optional[Block]:
        """Blocco per revisione (default best), None se inesistente"""
        payload = self.transport.get(f"/blocks/{Revision.of(revision)}")
        if payload is None:
            return None
        return parse_payload(Block, payload, "GET block")

    def _require_block(self, revision: Union[Revision, int, str]) -> Block:
        block = self.get_block(revision)
        if block is None:
            raise ClientIOError(f"Block {revision} not found", code="BLOCK_NOT_FOUND")
        return block

    def get_chain_tag(self) -> int:
        """
        Chain tag: ultimo byte del genesis block id (cached).

        Raises:
            ConfigError: Chain tag diverso da quello atteso per la rete configurata
        """
        if self._chain_tag is not None:
            return self._chain_tag

        genesis = self._require_block(0)
        chain_tag = int(genesis.id[-2:], 16)

        expected = self.config.expected_chain_tag()
        if expected is not None and chain_tag != expected:
            raise ConfigError(
                f"Node chain tag 0x{chain_tag:02x} does not match network "
                f"'{self.config.network}' (0x{expected:02x})",
                code="CHAIN_TAG_MISMATCH",
                details={"chain_tag": chain_tag, "expected": expected}
            )

        self._chain_tag = chain_tag
        logger.debug("Chain tag resolved", extra_data={"chain_tag": chain_tag})
        return chain_tag

    def get_best_block_ref(self) -> BlockRef:
        """Block ref: primi 8 bytes del best block id"""
        best = self._require_block(Revision.best())
        return BlockRef.from_block_id(best.id)

    # ========================================================================
    # READ CALLS
    # ========================================================================

    def call_contract(
        self,
        call: ContractCall,
        contract: AddressLike,
        revision: Union[Revision, int, str, None] = None
    ) -> ContractCallResult:
        """
        Esegue chiamata read-only (POST /accounts/{contract}).

        Il revert viaggia in ContractCallResult.reverted, mai come eccezione.

        Raises:
            ArgumentError: call/contract mancanti
            ClientIOError: Errore di trasporto
        """
        if call is None:
            raise ArgumentError("call is null", code="NULL_ARGUMENT", details={"field": "call"})
        target = to_address(contract, field="contract")
        params = {"revision": str(Revision.of(revision))}

        payload = self.transport.post(f"/accounts/{target.to_hex()}", call.to_dict(), params)
        if payload is None:
            raise ClientIOError("Empty contract call response", code="INVALID_RESPONSE")

        result = parse_payload(ContractCallResult, payload, "POST accounts")
        if result.reverted:
            logger.info(
                "Contract call reverted",
                extra_data={"contract": target.to_hex(), "vm_error": result.vm_error}
            )
        return result

    # ========================================================================
    # WRITE PIPELINE
    # ========================================================================

    def invoke_contract_method(
        self,
        clauses: Sequence[ToClause],
        gas: int,
        gas_price_coef: Optional[int],
        expiration: Optional[int],
        key_pair: ECKeyPair,
        depends_on: Optional[bytes] = None
    ) -> TransferResult:
        """
        Crea, firma e invia una transazione con le clausole date.

        Args:
            clauses: Clausole (almeno una)
            gas: Gas massimo
            gas_price_coef: 0..255 (None = default config)
            expiration: Blocchi (None = default config, 720)
            key_pair: Chiave del mittente
            depends_on: Id tx da cui dipende

        Raises:
            ArgumentError: Parametri invalidi (prima di qualsiasi I/O)
            ClientIOError: Errore di trasporto
        """
        if gas_price_coef is None:
            gas_price_coef = self.config.default_gas_price_coef
        if expiration is None:
            expiration = self.config.default_expiration

        if not clauses:
            raise ArgumentError("At least one clause is required", code="EMPTY_CLAUSES")
        if key_pair is None:
            raise ArgumentError("key_pair is null", code="NULL_ARGUMENT", details={"field": "key_pair"})
        validate_tx_parameters(gas, gas_price_coef, expiration)

        chain_tag = self.get_chain_tag()
        block_ref = self.get_best_block_ref()

        raw = create_raw_transaction(
            chain_tag,
            block_ref,
            expiration,
            gas,
            gas_price_coef,
            generate_tx_nonce(),
            *clauses,
            depends_on=depends_on,
        )

        return self.transactions.sign_then_transfer(raw, key_pair)

    # ========================================================================
    # TRANSFERS
    # ========================================================================

    def transfer_vet(
        self,
        receivers: Sequence[AddressLike],
        amounts: Sequence[Union[Amount, int]],
        gas: int,
        gas_price_coef: Optional[int],
        expiration: Optional[int],
        key_pair: ECKeyPair
    ) -> TransferResult:
        """Una clausola VET per coppia (receiver, amount)"""
        require_same_length(receivers=receivers, amounts=amounts)
        clauses = [build_vet_clause(to, amount) for to, amount in zip(receivers, amounts)]
        return self.invoke_contract_method(clauses, gas, gas_price_coef, expiration, key_pair)

    def transfer_token(
        self,
        token: Token,
        receivers: Sequence[AddressLike],
        amounts: Sequence[Union[Amount, int]],
        gas: int,
        gas_price_coef: Optional[int],
        expiration: Optional[int],
        key_pair: ECKeyPair
    ) -> TransferResult:
        """Una clausola transfer(address,uint256) per coppia, verso il contratto token"""
        require_same_length(receivers=receivers, amounts=amounts)
        clauses = [
            build_token_transfer_clause(token, to, amount)
            for to, amount in zip(receivers, amounts)
        ]
        return self.invoke_contract_method(clauses, gas, gas_price_coef, expiration, key_pair)


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "ContractService",
]
