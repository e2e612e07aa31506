"""
ThorClient - ABI Encoder
==========================
Metadata ABI, selector, coercizione argomenti ed encoding call data.

Security Level: HIGH
Last Updated: 2026-10-17
Version: 1.0.0

Features:
- AbiDefinition immutabile (firma canonica + selector)
- ContractAbi: registry read-only nome → definizione
- encode_call: selector ‖ encoding statico (eth-abi)
- Argomenti nativi o stringhe hex (address, uint, bool, bytes)
- decode_result: return values con address convertiti in Address

Tutte le funzioni sono pure, nessun I/O.
"""

from __future__ import annotations
import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_abi.exceptions import DecodingError as AbiDecodingError
from eth_abi.exceptions import EncodingError as AbiEncodingError

from thor_client.constants import SELECTOR_LENGTH
from thor_client.domain.addressing import Address
from thor_client.domain.amount import Amount
from thor_client.domain.crypto_core import compute_keccak256
from thor_client.errors import AbiNotFoundError, ArgumentError, EncodingError
from thor_client.utils.serialization import hex_to_bytes, hex_to_int, is_hex


_ARRAY_RE = re.compile(r"^(.*)\[(\d*)\]$")
_INT_RE = re.compile(r"^u?int(\d*)$")
_FIXED_BYTES_RE = re.compile(r"^bytes(\d+)$")


# ============================================================================
# SELECTOR
# ============================================================================

def compute_selector(signature: str) -> bytes:
    """
    Selector: primi 4 bytes di keccak256(firma canonica).

    Examples:
        >>> compute_selector("addUser(address,address)").hex()
        '8ca3b448'
        >>> compute_selector("transfer(address,uint256)").hex()
        'a9059cbb'
    """
    return compute_keccak256(signature.encode("ascii"))[:SELECTOR_LENGTH]


# ============================================================================
# ABI DEFINITIONS
# ============================================================================

@dataclass(frozen=True)
class AbiParam:
    """Parametro ABI (input o output)"""

    name: str
    type: str
    components: Tuple[AbiParam, ...] = ()

    @classmethod
    def from_dict(cls, entry: Dict[str, Any]) -> AbiParam:
        if "type" not in entry:
            raise EncodingError("ABI parameter without type", code="INVALID_ABI",
                                details={"entry": entry})
        return cls(
            name=entry.get("name", ""),
            type=entry["type"],
            components=tuple(cls.from_dict(c) for c in entry.get("components", ())),
        )

    @property
    def canonical_type(self) -> str:
        """Tipo canonico (tuple espanse in "(t1,t2)")"""
        if self.type.startswith("tuple"):
            inner = ",".join(c.canonical_type for c in self.components)
            return f"({inner}){self.type[len('tuple'):]}"
        return self.type


@dataclass(frozen=True)
class AbiDefinition:
    """
    Definizione di un metodo di contratto.

    Attributes:
        name (str): Nome metodo
        inputs (Tuple[AbiParam, ...]): Parametri in ingresso
        outputs (Tuple[AbiParam, ...]): Valori di ritorno
        constant (bool): True se sola lettura (view/pure)
        payable (bool): True se accetta VET

    Examples:
        >>> d = AbiDefinition.from_dict({
        ...     "name": "addUser", "type": "function", "constant": False,
        ...     "inputs": [{"name": "_self", "type": "address"},
        ...                {"name": "_user", "type": "address"}],
        ...     "outputs": []})
        >>> d.signature
        'addUser(address,address)'
        >>> d.selector.hex()
        '8ca3b448'
    """

    name: str
    inputs: Tuple[AbiParam, ...] = ()
    outputs: Tuple[AbiParam, ...] = ()
    constant: bool = False
    payable: bool = False
    selector: bytes = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not self.name:
            raise EncodingError("ABI method without name", code="INVALID_ABI")
        object.__setattr__(self, "selector", compute_selector(self.signature))

    @classmethod
    def from_dict(cls, entry: Dict[str, Any]) -> AbiDefinition:
        """
        Costruisce da entry JSON (formato solc/thor).

        constant/payable derivati da stateMutability se assenti.
        """
        mutability = entry.get("stateMutability")
        constant = entry.get("constant")
        if constant is None:
            constant = mutability in ("view", "pure")
        payable = entry.get("payable")
        if payable is None:
            payable = mutability == "payable"

        return cls(
            name=entry.get("name", ""),
            inputs=tuple(AbiParam.from_dict(p) for p in entry.get("inputs", ())),
            outputs=tuple(AbiParam.from_dict(p) for p in entry.get("outputs", ())),
            constant=bool(constant),
            payable=bool(payable),
        )

    @property
    def input_types(self) -> List[str]:
        return [p.canonical_type for p in self.inputs]

    @property
    def output_types(self) -> List[str]:
        return [p.canonical_type for p in self.outputs]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"

    def __repr__(self) -> str:
        return f"AbiDefinition({self.signature}, selector=0x{self.selector.hex()})"


class ContractAbi:
    """
    Registry read-only dei metodi di un contratto.

    Costruito una volta dai metadata JSON, poi passato esplicitamente
    agli encoder.

    Examples:
        >>> registry = ContractAbi.from_json(PROTOTYPE_ABI_JSON)
        >>> registry.require("addUser").signature
        'addUser(address,address)'
        >>> registry.find("missing") is None
        True
    """

    def __init__(self, definitions: Iterable[AbiDefinition], name: str = "contract"):
        self._name = name
        self._methods: Dict[str, Tuple[AbiDefinition, ...]] = {}
        for definition in definitions:
            self._methods[definition.name] = self._methods.get(definition.name, ()) + (definition,)

    @classmethod
    def from_entries(cls, entries: Sequence[Dict[str, Any]], name: str = "contract") -> ContractAbi:
        """Solo le entry di tipo function (default) vengono registrate"""
        return cls(
            (AbiDefinition.from_dict(e) for e in entries if e.get("type", "function") == "function"),
            name=name,
        )

    @classmethod
    def from_json(cls, text: str, name: str = "contract") -> ContractAbi:
        try:
            entries = json.loads(text)
        except json.JSONDecodeError as e:
            raise EncodingError(f"Invalid ABI JSON: {e}", code="INVALID_ABI") from e
        if not isinstance(entries, list):
            raise EncodingError("ABI JSON must be a list of entries", code="INVALID_ABI")
        return cls.from_entries(entries, name=name)

    @property
    def name(self) -> str:
        return self._name

    def find(self, method: str, arg_count: Optional[int] = None) -> Optional[AbiDefinition]:
        """
        Cerca metodo per nome (e numero argomenti per gli overload).

        Returns:
            Optional[AbiDefinition]: None se assente
        """
        for definition in self._methods.get(method, ()):
            if arg_count is None or len(definition.inputs) == arg_count:
                return definition
        return None

    def require(self, method: str, arg_count: Optional[int] = None) -> AbiDefinition:
        """
        Come find() ma solleva se assente.

        Raises:
            AbiNotFoundError: Metodo non presente nei metadata
        """
        definition = self.find(method, arg_count)
        if definition is None:
            raise AbiNotFoundError(
                f"Method '{method}' not found in {self._name} ABI",
                code="ABI_NOT_FOUND",
                details={"contract": self._name, "method": method}
            )
        return definition

    def methods(self) -> List[str]:
        return sorted(self._methods)

    def __contains__(self, method: str) -> bool:
        return method in self._methods

    def __len__(self) -> int:
        return sum(len(v) for v in self._methods.values())

    def __repr__(self) -> str:
        return f"ContractAbi(name={self._name}, methods={len(self)})"


# ============================================================================
# ARGUMENT COERCION
# ============================================================================

def _encoding_error(abi_type: str, value: Any, reason: str) -> EncodingError:
    return EncodingError(
        f"Cannot encode {value!r} as {abi_type}: {reason}",
        code="INVALID_ABI_ARGUMENT",
        details={"type": abi_type}
    )


def _coerce_int(abi_type: str, value: Any) -> int:
    if isinstance(value, Amount):
        return value.value
    if isinstance(value, bool):
        raise _encoding_error(abi_type, value, "bool is not an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text[:2] in ("0x", "0X") and len(text) > 2 and is_hex(text):
            return hex_to_int(text)
        if text.isdigit():
            return int(text)
    raise _encoding_error(abi_type, value, "not numeric")


def _coerce_bool(abi_type: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("0x01", "0x1"):
            return True
        if lowered in ("0x00", "0x0"):
            return False
    raise _encoding_error(abi_type, value, "expected bool or 0x01/0x00")


def _coerce_bytes(abi_type: str, value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return hex_to_bytes(value, field=abi_type)
        except ArgumentError as e:
            raise _encoding_error(abi_type, value, "not hex") from e
    raise _encoding_error(abi_type, value, "expected bytes or hex string")


def coerce_argument(abi_type: str, value: Any, components: Tuple[AbiParam, ...] = ()) -> Any:
    """
    Converte argomento nativo/hex nel valore accettato da eth-abi.

    Raises:
        EncodingError: Valore incompatibile con il tipo
    """
    if value is None:
        raise _encoding_error(abi_type, value, "null argument")

    array = _ARRAY_RE.match(abi_type)
    if array:
        inner, size = array.group(1), array.group(2)
        if not isinstance(value, (list, tuple)):
            raise _encoding_error(abi_type, value, "expected a sequence")
        if size and len(value) != int(size):
            raise _encoding_error(abi_type, value, f"expected {size} elements")
        return [coerce_argument(inner, v, components) for v in value]

    if abi_type == "tuple":
        if not isinstance(value, (list, tuple)) or len(value) != len(components):
            raise _encoding_error(abi_type, value, f"expected {len(components)} components")
        return tuple(coerce_argument(c.type, v, c.components) for c, v in zip(components, value))

    if abi_type == "address":
        if isinstance(value, Address):
            return value.to_bytes()
        try:
            if isinstance(value, (bytes, bytearray)):
                return Address(bytes(value)).to_bytes()
            return Address.from_hex(value).to_bytes()
        except ArgumentError as e:
            raise _encoding_error(abi_type, value, "invalid address") from e

    if _INT_RE.match(abi_type):
        return _coerce_int(abi_type, value)

    if abi_type == "bool":
        return _coerce_bool(abi_type, value)

    if abi_type == "bytes" or _FIXED_BYTES_RE.match(abi_type):
        return _coerce_bytes(abi_type, value)

    if abi_type == "string":
        if not isinstance(value, str):
            raise _encoding_error(abi_type, value, "expected str")
        return value

    raise EncodingError(f"Unsupported ABI type: {abi_type}", code="UNSUPPORTED_TYPE")


# ============================================================================
# ENCODING / DECODING
# ============================================================================

def encode_call(abi: AbiDefinition, *args: Any) -> bytes:
    """
    Call data: selector ‖ encoding ABI statico degli argomenti.

    Args:
        abi: Definizione metodo
        *args: Argomenti nativi o hex, nell'ordine degli inputs

    Returns:
        bytes: Call data

    Raises:
        EncodingError: Numero argomenti errato o valore non codificabile

    Examples:
        >>> data = encode_call(registry.require("addUser"), receiver, user)
        >>> data[:4].hex()
        '8ca3b448'
        >>> len(data)
        68
    """
    if len(args) != len(abi.inputs):
        raise EncodingError(
            f"{abi.signature} expects {len(abi.inputs)} arguments, got {len(args)}",
            code="ARGUMENT_COUNT",
            details={"method": abi.name, "expected": len(abi.inputs), "actual": len(args)}
        )

    values = [coerce_argument(p.type, v, p.components) for p, v in zip(abi.inputs, args)]

    try:
        encoded = abi_encode(abi.input_types, values) if values else b""
    except (AbiEncodingError, TypeError, ValueError) as e:
        raise EncodingError(
            f"Cannot encode arguments for {abi.signature}: {e}",
            code="INVALID_ABI_ARGUMENT",
            details={"method": abi.name}
        ) from e

    return abi.selector + encoded


def encode_call_by_name(contract_abi: ContractAbi, method: str, *args: Any) -> bytes:
    """
    Lookup nel registry + encode_call.

    Raises:
        AbiNotFoundError: Metodo assente
    """
    definition = contract_abi.find(method, len(args)) or contract_abi.require(method)
    return encode_call(definition, *args)


def _convert_output(abi_type: str, value: Any) -> Any:
    array = _ARRAY_RE.match(abi_type)
    if array:
        return tuple(_convert_output(array.group(1), v) for v in value)
    if abi_type == "address":
        return Address.from_hex(value)
    return value


def decode_result(abi: AbiDefinition, data: bytes) -> Tuple[Any, ...]:
    """
    Decodifica return values di una chiamata.

    Returns:
        Tuple[Any, ...]: Valori nell'ordine degli outputs (address → Address)

    Raises:
        EncodingError: Dati troncati o incompatibili
    """
    if not abi.outputs:
        return ()
    if isinstance(data, str):
        data = _coerce_bytes("bytes", data)

    try:
        decoded = abi_decode(abi.output_types, bytes(data))
    except (AbiDecodingError, TypeError, ValueError) as e:
        raise EncodingError(
            f"Cannot decode result of {abi.signature}: {e}",
            code="INVALID_ABI_RESULT",
            details={"method": abi.name, "size": len(data)}
        ) from e

    return tuple(_convert_output(t, v) for t, v in zip(abi.output_types, decoded))


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "compute_selector",
    "AbiParam",
    "AbiDefinition",
    "ContractAbi",
    "coerce_argument",
    "encode_call",
    "encode_call_by_name",
    "decode_result",
]
