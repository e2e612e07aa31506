"""
ThorClient - Clauses & Factory Tests
======================================
Unit tests for clause builders and raw transaction factory.
"""

import pytest

from thor_client.contracts.abi import encode_call
from thor_client.contracts.clauses import (
    ContractCall,
    build_call,
    build_contract_clause,
    build_token_transfer_clause,
    build_vet_clause,
    fan_out,
)
from thor_client.contracts.prototype import PROTOTYPE_ADDRESS, get_prototype_abi
from thor_client.domain.addressing import Address
from thor_client.domain.amount import VET, VTHO, Amount
from thor_client.domain.models import BlockRef, ToClause
from thor_client.domain.tx_factory import (
    RawTransactionFactory,
    create_raw_transaction,
    validate_tx_parameters,
)
from thor_client.errors import ArgumentError

from conftest import REFERENCE_ADDRESS, REFERENCE_RECEIVER


NONCE = b"\x01" * 8
BLOCK_REF = BlockRef.from_hex("0x00000000aabbccdd")


class TestClauseBuilders:
    """Test builder clausole"""

    def test_contract_clause(self):
        abi = get_prototype_abi().require("addUser")
        clause = build_contract_clause(PROTOTYPE_ADDRESS, abi, REFERENCE_ADDRESS, REFERENCE_RECEIVER)

        assert clause.to == PROTOTYPE_ADDRESS
        assert clause.value == 0
        assert clause.data == encode_call(abi, REFERENCE_ADDRESS, REFERENCE_RECEIVER)

    def test_vet_clause(self):
        clause = build_vet_clause(REFERENCE_RECEIVER, Amount.from_decimal(VET, "21.12"))

        assert clause.to == Address.from_hex(REFERENCE_RECEIVER)
        assert clause.value == 21120000000000000000
        assert clause.data == b""

    def test_vet_clause_rejects_token_amount(self):
        with pytest.raises(ArgumentError) as exc:
            build_vet_clause(REFERENCE_RECEIVER, Amount.from_decimal(VTHO, "1"))
        assert exc.value.code == "INVALID_TOKEN"

    def test_vet_clause_null_amount(self):
        with pytest.raises(ArgumentError):
            build_vet_clause(REFERENCE_RECEIVER, None)

    def test_token_transfer_clause(self):
        clause = build_token_transfer_clause(VTHO, REFERENCE_RECEIVER, Amount.from_decimal(VTHO, "11.12"))

        assert clause.to.to_hex() == "0x0000000000000000000000000000456e65726779"
        assert clause.value == 0
        assert clause.data[:4].hex() == "a9059cbb"
        assert clause.data[4:36] == b"\x00" * 12 + bytes.fromhex(REFERENCE_RECEIVER[2:])
        assert int.from_bytes(clause.data[36:68], "big") == 11120000000000000000

    def test_token_transfer_rejects_native(self):
        with pytest.raises(ArgumentError) as exc:
            build_token_transfer_clause(VET, REFERENCE_RECEIVER, 1)
        assert exc.value.code == "INVALID_TOKEN"

    def test_token_transfer_rejects_mismatched_amount(self):
        with pytest.raises(ArgumentError):
            build_token_transfer_clause(VTHO, REFERENCE_RECEIVER, Amount.from_decimal(VET, "1"))

    def test_build_call(self):
        call = build_call(get_prototype_abi().require("master"), REFERENCE_ADDRESS, caller=REFERENCE_RECEIVER)
        body = call.to_dict()

        assert body["value"] == "0x0"
        assert body["data"].startswith("0x9ed153c0")
        assert body["caller"] == REFERENCE_RECEIVER
        assert "gas" not in body

    def test_contract_call_gas(self):
        assert ContractCall(data=b"\x01", gas=50000).to_dict()["gas"] == 50000


class TestFanOut:
    """Test array paralleli → clausole"""

    def test_one_clause_per_row(self):
        abi = get_prototype_abi().require("addUser")
        receivers = [REFERENCE_ADDRESS, REFERENCE_ADDRESS]
        users = [REFERENCE_RECEIVER, "0x7e5f4552091a69125d5dfcb7b8c2659029395bdf"]

        clauses = fan_out(PROTOTYPE_ADDRESS, abi, receivers, users)

        assert len(clauses) == 2
        assert all(c.to == PROTOTYPE_ADDRESS for c in clauses)
        assert clauses[1].data == encode_call(abi, receivers[1], users[1])

    def test_length_mismatch(self):
        abi = get_prototype_abi().require("addUser")

        with pytest.raises(ArgumentError) as exc:
            fan_out(PROTOTYPE_ADDRESS, abi, [REFERENCE_ADDRESS], [REFERENCE_RECEIVER] * 2)
        assert exc.value.code == "LENGTH_MISMATCH"

    def test_null_column(self):
        abi = get_prototype_abi().require("addUser")

        with pytest.raises(ArgumentError) as exc:
            fan_out(PROTOTYPE_ADDRESS, abi, [REFERENCE_ADDRESS], None)
        assert exc.value.code == "NULL_ARGUMENT"


class TestRawTransactionFactory:
    """Test create_raw_transaction"""

    def _clause(self):
        return ToClause(to=Address.from_hex(REFERENCE_RECEIVER), value=1)

    def test_create(self):
        raw = create_raw_transaction(0x27, BLOCK_REF, 720, 21000, 0, NONCE, self._clause())

        assert raw.chain_tag == 0x27
        assert raw.block_ref == BLOCK_REF.value
        assert raw.depends_on is None
        assert raw.features == 0
        assert len(raw.clauses) == 1

    def test_factory_class(self):
        raw = RawTransactionFactory().create(0x27, BLOCK_REF.value, 720, 21000, 0, NONCE, self._clause())
        assert raw.gas == 21000

    def test_no_clauses(self):
        with pytest.raises(ArgumentError) as exc:
            create_raw_transaction(0x27, BLOCK_REF, 720, 21000, 0, NONCE)
        assert exc.value.code == "EMPTY_CLAUSES"

    @pytest.mark.parametrize("nonce", [b"\x01" * 7, b"\x01" * 9, b""])
    def test_nonce_length(self, nonce):
        with pytest.raises(ArgumentError) as exc:
            create_raw_transaction(0x27, BLOCK_REF, 720, 21000, 0, nonce, self._clause())
        assert exc.value.code == "INVALID_LENGTH"

    @pytest.mark.parametrize("field,value", [
        ("chain_tag", 256),
        ("gas_price_coef", 256),
        ("gas_price_coef", -1),
        ("expiration", 2**32),
        ("gas", 2**64),
    ])
    def test_out_of_range(self, field, value):
        args = {"chain_tag": 0x27, "expiration": 720, "gas": 21000, "gas_price_coef": 0}
        args[field] = value

        with pytest.raises(ArgumentError) as exc:
            create_raw_transaction(
                args["chain_tag"], BLOCK_REF, args["expiration"], args["gas"],
                args["gas_price_coef"], NONCE, self._clause()
            )
        assert exc.value.code == "OUT_OF_RANGE"

    def test_null_field(self):
        with pytest.raises(ArgumentError) as exc:
            create_raw_transaction(0x27, None, 720, 21000, 0, NONCE, self._clause())
        assert exc.value.code == "NULL_ARGUMENT"

    def test_depends_on_length(self):
        with pytest.raises(ArgumentError):
            create_raw_transaction(0x27, BLOCK_REF, 720, 21000, 0, NONCE, self._clause(),
                                   depends_on=b"\x01" * 31)

    def test_unknown_feature(self):
        with pytest.raises(ArgumentError) as exc:
            create_raw_transaction(0x27, BLOCK_REF, 720, 21000, 0, NONCE, self._clause(), features=2)
        assert exc.value.code == "UNKNOWN_FEATURE"

    def test_invalid_clause_type(self):
        with pytest.raises(ArgumentError):
            create_raw_transaction(0x27, BLOCK_REF, 720, 21000, 0, NONCE, {"to": REFERENCE_RECEIVER})


class TestValidateTxParameters:
    """Test validazione pre-flight"""

    def test_valid(self):
        validate_tx_parameters(21000, 0, 720)

    @pytest.mark.parametrize("gas,coef,expiration", [
        (None, 0, 720),
        (21000, None, 720),
        (21000, 0, None),
        (-1, 0, 720),
        (21000, 300, 720),
        (21000, 0, "720"),
        (True, 0, 720),
    ])
    def test_invalid(self, gas, coef, expiration):
        with pytest.raises(ArgumentError):
            validate_tx_parameters(gas, coef, expiration)
