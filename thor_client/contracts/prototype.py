"""
ThorClient - Prototype Contract Metadata
==========================================
Address e metadata ABI del contratto nativo Prototype (multi-party payment).

Security Level: MEDIUM
Last Updated: 2026-10-17
Version: 1.0.0

Il contratto gestisce per ogni account ("self"):
- master: account autorizzato a gestire utenti e sponsor
- users: account i cui costi gas sono pagati da self
- user plan: credito e recovery rate per utente
- sponsors: account che pagano per self
"""

from functools import lru_cache

from thor_client.constants import PROTOTYPE_CONTRACT_ADDRESS
from thor_client.contracts.abi import ContractAbi
from thor_client.domain.addressing import Address


PROTOTYPE_ADDRESS = Address.from_hex(PROTOTYPE_CONTRACT_ADDRESS)


PROTOTYPE_ABI_JSON = """[
  {"constant": true, "name": "master", "type": "function", "payable": false,
   "inputs": [{"name": "_self", "type": "address"}],
   "outputs": [{"name": "", "type": "address"}], "stateMutability": "view"},
  {"constant": false, "name": "setMaster", "type": "function", "payable": false,
   "inputs": [{"name": "_self", "type": "address"}, {"name": "_newMaster", "type": "address"}],
   "outputs": [], "stateMutability": "nonpayable"},
  {"constant": false, "name": "addUser", "type": "function", "payable": false,
   "inputs": [{"name": "_self", "type": "address"}, {"name": "_user", "type": "address"}],
   "outputs": [], "stateMutability": "nonpayable"},
  {"constant": false, "name": "removeUser", "type": "function", "payable": false,
   "inputs": [{"name": "_self", "type": "address"}, {"name": "_user", "type": "address"}],
   "outputs": [], "stateMutability": "nonpayable"},
  {"constant": false, "name": "setUserPlan", "type": "function", "payable": false,
   "inputs": [{"name": "_self", "type": "address"}, {"name": "_credit", "type": "uint256"},
              {"name": "_recoveryRate", "type": "uint256"}],
   "outputs": [], "stateMutability": "nonpayable"},
  {"constant": true, "name": "isUser", "type": "function", "payable": false,
   "inputs": [{"name": "_self", "type": "address"}, {"name": "_user", "type": "address"}],
   "outputs": [{"name": "", "type": "bool"}], "stateMutability": "view"},
  {"constant": true, "name": "userPlan", "type": "function", "payable": false,
   "inputs": [{"name": "_self", "type": "address"}],
   "outputs": [{"name": "credit", "type": "uint256"}, {"name": "recoveryRate", "type": "uint256"}],
   "stateMutability": "view"},
  {"constant": true, "name": "userCredit", "type": "function", "payable": false,
   "inputs": [{"name": "_self", "type": "address"}, {"name": "_user", "type": "address"}],
   "outputs": [{"name": "", "type": "uint256"}], "stateMutability": "view"},
  {"constant": false, "name": "sponsor", "type": "function", "payable": false,
   "inputs": [{"name": "_self", "type": "address"}, {"name": "_yesOrNo", "type": "bool"}],
   "outputs": [], "stateMutability": "nonpayable"},
  {"constant": false, "name": "selectSponsor", "type": "function", "payable": false,
   "inputs": [{"name": "_self", "type": "address"}, {"name": "_sponsor", "type": "address"}],
   "outputs": [], "stateMutability": "nonpayable"},
  {"constant": true, "name": "currentSponsor", "type": "function", "payable": false,
   "inputs": [{"name": "_self", "type": "address"}],
   "outputs": [{"name": "", "type": "address"}], "stateMutability": "view"},
  {"constant": true, "name": "isSponsor", "type": "function", "payable": false,
   "inputs": [{"name": "_self", "type": "address"}, {"name": "_sponsor", "type": "address"}],
   "outputs": [{"name": "", "type": "bool"}], "stateMutability": "view"}
]"""


# Contratto energy (VTHO): sottoinsieme ERC20 usato dal client
ENERGY_ABI_JSON = """[
  {"constant": false, "name": "transfer", "type": "function", "payable": false,
   "inputs": [{"name": "_to", "type": "address"}, {"name": "_amount", "type": "uint256"}],
   "outputs": [{"name": "success", "type": "bool"}], "stateMutability": "nonpayable"},
  {"constant": true, "name": "balanceOf", "type": "function", "payable": false,
   "inputs": [{"name": "_owner", "type": "address"}],
   "outputs": [{"name": "balance", "type": "uint256"}], "stateMutability": "view"}
]"""


@lru_cache(maxsize=1)
def get_prototype_abi() -> ContractAbi:
    """Registry Prototype (caricato una volta)"""
    return ContractAbi.from_json(PROTOTYPE_ABI_JSON, name="Prototype")


@lru_cache(maxsize=1)
def get_energy_abi() -> ContractAbi:
    """Registry Energy/VTHO (caricato una volta)"""
    return ContractAbi.from_json(ENERGY_ABI_JSON, name="Energy")


__all__ = [
    "PROTOTYPE_ADDRESS",
    "PROTOTYPE_ABI_JSON",
    "ENERGY_ABI_JSON",
    "get_prototype_abi",
    "get_energy_abi",
]
