"""
ThorClient - Prototype (MPP) Service
======================================
Operazioni del contratto nativo Prototype: master, utenti, piani, sponsor.

Security Level: HIGH
Last Updated: 2026-10-17
Version: 1.0.0

Operations:
- Read:  master, isUser, userPlan, userCredit, currentSponsor, isSponsor
- Write: setMaster, addUser, removeUser, setUserPlan, sponsor, selectSponsor

Regole write:
- Array paralleli validati (stessa lunghezza) prima di costruire clausole
- Una clausola per riga, tutte in una sola transazione
- Nessuna chiamata al nodo se la validazione fallisce
"""

from typing import Any, Optional, Sequence, Tuple, Union

from thor_client.contracts.abi import AbiDefinition, ContractAbi, decode_result
from thor_client.contracts.clauses import build_call, fan_out
from thor_client.contracts.prototype import PROTOTYPE_ADDRESS, get_prototype_abi
from thor_client.domain.addressing import AddressLike, to_address
from thor_client.domain.amount import Amount
from thor_client.domain.keypairs import ECKeyPair
from thor_client.domain.models import Revision, TransferResult
from thor_client.domain.tx_factory import validate_tx_parameters
from thor_client.errors import ArgumentError, format_argument_error, require_same_length
from thor_client.logging_setup import get_logger
from thor_client.network.schemas import ContractCallResult
from thor_client.services.contract_service import ContractService


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("prototype_service")


RevisionLike = Union[Revision, int, str, None]


def _require(name: str, value: Any) -> None:
    if value is None:
        raise ArgumentError(f"{name} is null", code="NULL_ARGUMENT", details={"field": name})


# ============================================================================
# PROTOTYPE SERVICE
# ============================================================================

class PrototypeService:
    """
    Client del contratto Prototype (multi-party payment).

    Attributes:
        contracts: ContractService (chain tag, block ref, submission)
        abi: Registry ABI del contratto

    Examples:
        >>> mpp = PrototypeService(ContractService(transport))
        >>> result = mpp.add_user([receiver], [user], gas=70000, key_pair=kp)
        >>> result.id.startswith("0x")
        True
    """

    def __init__(self, contracts: ContractService, abi: Optional[ContractAbi] = None):
        self.contracts = contracts
        self.abi = abi or get_prototype_abi()
        self.address = PROTOTYPE_ADDRESS

    # ========================================================================
    # INTERNALS
    # ========================================================================

    def _method(self, name: str) -> AbiDefinition:
        return self.abi.require(name)

    def _read(self, method: str, *args: Any, revision: RevisionLike = None) -> ContractCallResult:
        for index, arg in enumerate(args):
            _require(f"{method}.arg{index}", arg)
        call = build_call(self._method(method), *args)
        return self.contracts.call_contract(call, self.address, revision)

    def _write(
        self,
        method: str,
        columns: Sequence[Sequence[Any]],
        gas: int,
        gas_price_coef: Optional[int],
        expiration: Optional[int],
        key_pair: ECKeyPair
    ) -> TransferResult:
        _require("key_pair", key_pair)
        config = self.contracts.config
        validate_tx_parameters(
            gas,
            config.default_gas_price_coef if gas_price_coef is None else gas_price_coef,
            config.default_expiration if expiration is None else expiration,
        )

        clauses = fan_out(self.address, self._method(method), *columns)
        if not clauses:
            raise ArgumentError(f"{method}: no rows to submit", code="EMPTY_CLAUSES")

        logger.info(
            "Submitting Prototype transaction",
            extra_data={"method": method, "clauses": len(clauses), "origin": key_pair.address.to_hex()}
        )

        return self.contracts.invoke_contract_method(
            clauses, gas, gas_price_coef, expiration, key_pair
        )

    def decode(self, method: str, result: ContractCallResult) -> Tuple[Any, ...]:
        """
        Decodifica return data di una lettura.

        Returns:
            Tuple[Any, ...]: Valori (vuota se la chiamata è andata in revert)
        """
        if result.reverted:
            return ()
        return decode_result(self._method(method), result.data_bytes)

    # ========================================================================
    # MASTER
    # ========================================================================

    def get_master_address(self, receiver: AddressLike, revision: RevisionLike = None) -> ContractCallResult:
        """master(address)"""
        _require("receiver", receiver)
        return self._read("master", to_address(receiver, "receiver"), revision=revision)

    def set_master_address(
        self,
        receivers: Sequence[AddressLike],
        new_masters: Sequence[AddressLike],
        gas: int,
        gas_price_coef: Optional[int] = None,
        expiration: Optional[int] = None,
        key_pair: ECKeyPair = None
    ) -> TransferResult:
        """setMaster(address,address) per ogni coppia (receiver, new_master)"""
        require_same_length(receivers=receivers, new_masters=new_masters)
        return self._write("setMaster", [receivers, new_masters], gas, gas_price_coef, expiration, key_pair)

    # ========================================================================
    # USERS
    # ========================================================================

    def add_user(
        self,
        receivers: Sequence[AddressLike],
        users: Sequence[AddressLike],
        gas: int,
        gas_price_coef: Optional[int] = None,
        expiration: Optional[int] = None,
        key_pair: ECKeyPair = None
    ) -> TransferResult:
        """
        addUser(address,address): receivers[i] paga il gas di users[i].

        Raises:
            ArgumentError: Array None o di lunghezza diversa (nessuna chiamata al nodo)
        """
        require_same_length(receivers=receivers, users=users)
        return self._write("addUser", [receivers, users], gas, gas_price_coef, expiration, key_pair)

    def remove_users(
        self,
        receivers: Sequence[AddressLike],
        users: Sequence[AddressLike],
        gas: int,
        gas_price_coef: Optional[int] = None,
        expiration: Optional[int] = None,
        key_pair: ECKeyPair = None
    ) -> TransferResult:
        """removeUser(address,address) per ogni coppia"""
        require_same_length(receivers=receivers, users=users)
        return self._write("removeUser", [receivers, users], gas, gas_price_coef, expiration, key_pair)

    def set_user_plans(
        self,
        receivers: Sequence[AddressLike],
        credits: Sequence[Union[Amount, int]],
        recovery_rates: Sequence[Union[Amount, int]],
        gas: int,
        gas_price_coef: Optional[int] = None,
        expiration: Optional[int] = None,
        key_pair: ECKeyPair = None
    ) -> TransferResult:
        """
        setUserPlan(address,uint256,uint256).

        Args:
            credits: Credito per utente (VTHO)
            recovery_rates: VTHO recuperati per secondo
        """
        require_same_length(receivers=receivers, credits=credits, recovery_rates=recovery_rates)
        return self._write(
            "setUserPlan", [receivers, credits, recovery_rates],
            gas, gas_price_coef, expiration, key_pair
        )

    def is_user(self, receiver: AddressLike, user: AddressLike, revision: RevisionLike = None) -> ContractCallResult:
        """isUser(address,address)"""
        _require("receiver", receiver)
        _require("user", user)
        return self._read("isUser", to_address(receiver, "receiver"), to_address(user, "user"),
                          revision=revision)

    def get_user_plan(self, receiver: AddressLike, revision: RevisionLike = None) -> ContractCallResult:
        """userPlan(address) → (credit, recoveryRate)"""
        _require("receiver", receiver)
        return self._read("userPlan", to_address(receiver, "receiver"), revision=revision)

    def get_user_credit(self, receiver: AddressLike, user: AddressLike, revision: RevisionLike = None) -> ContractCallResult:
        """userCredit(address,address)"""
        _require("receiver", receiver)
        _require("user", user)
        return self._read("userCredit", to_address(receiver, "receiver"), to_address(user, "user"),
                          revision=revision)

    # ========================================================================
    # SPONSORS
    # ========================================================================

    def sponsor(
        self,
        receivers: Sequence[AddressLike],
        yes_or_no: bool,
        gas: int,
        gas_price_coef: Optional[int] = None,
        expiration: Optional[int] = None,
        key_pair: ECKeyPair = None
    ) -> TransferResult:
        """sponsor(address,bool): stesso flag per tutti i receivers"""
        _require("receivers", receivers)
        _require("yes_or_no", yes_or_no)
        if not isinstance(yes_or_no, bool):
            raise format_argument_error("yes_or_no", yes_or_no, "bool")
        flags = [yes_or_no] * len(receivers)
        return self._write("sponsor", [receivers, flags], gas, gas_price_coef, expiration, key_pair)

    def select_sponsor(
        self,
        receivers: Sequence[AddressLike],
        sponsors: Sequence[AddressLike],
        gas: int,
        gas_price_coef: Optional[int] = None,
        expiration: Optional[int] = None,
        key_pair: ECKeyPair = None
    ) -> TransferResult:
        """selectSponsor(address,address) per ogni coppia"""
        require_same_length(receivers=receivers, sponsors=sponsors)
        return self._write("selectSponsor", [receivers, sponsors], gas, gas_price_coef, expiration, key_pair)

    def get_current_sponsor(self, receiver: AddressLike, revision: RevisionLike = None) -> ContractCallResult:
        """currentSponsor(address)"""
        _require("receiver", receiver)
        return self._read("currentSponsor", to_address(receiver, "receiver"), revision=revision)

    def is_sponsor(self, receiver: AddressLike, sponsor: AddressLike, revision: RevisionLike = None) -> ContractCallResult:
        """isSponsor(address,address)"""
        _require("receiver", receiver)
        _require("sponsor", sponsor)
        return self._read("isSponsor", to_address(receiver, "receiver"), to_address(sponsor, "sponsor"),
                          revision=revision)


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "PrototypeService",
]
