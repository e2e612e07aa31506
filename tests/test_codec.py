"""
ThorClient - Codec Tests
==========================
Unit tests for canonical transaction encoding.
"""

from dataclasses import replace

import pytest
import rlp

from thor_client.domain.codec import (
    decode_raw_transaction,
    decode_signed_transaction,
    encode_signed,
    encode_unsigned,
)
from thor_client.domain.models import SignedTransaction
from thor_client.errors import EncodingError

from conftest import REFERENCE_SIGNATURE, REFERENCE_SIGNED, REFERENCE_UNSIGNED


def _raw_fields(**overrides):
    """Campi RLP grezzi della transazione di riferimento (senza clausole)"""
    fields = {
        "chain_tag": b"\x01",
        "block_ref": bytes.fromhex("aabbccdd"),
        "expiration": b"\x20",
        "clauses": [],
        "gas_price_coef": b"\x80",
        "gas": bytes.fromhex("5208"),
        "depends_on": b"",
        "nonce": bytes.fromhex("bc614e"),
        "reserved": [],
    }
    fields.update(overrides)
    return list(fields.values())


class TestEncodeUnsigned:
    """Test encoding non firmato"""

    def test_reference_encoding(self, reference_tx):
        """Encoding byte-exact della transazione di riferimento"""
        assert encode_unsigned(reference_tx) == REFERENCE_UNSIGNED
        assert reference_tx.encode() == REFERENCE_UNSIGNED

    def test_encoding_is_deterministic(self, reference_tx):
        assert encode_unsigned(reference_tx) == encode_unsigned(reference_tx)

    def test_block_ref_leading_zeros_stripped(self, reference_tx):
        """blockRef 0x00000000aabbccdd codificato come 4 bytes"""
        encoded = encode_unsigned(reference_tx)
        assert bytes.fromhex("84aabbccdd") in encoded
        assert bytes.fromhex("8800000000aabbccdd") not in encoded

    def test_features_in_reserved(self, reference_tx):
        """features=1 → reserved [1]"""
        delegated = replace(reference_tx, features=1)
        encoded = encode_unsigned(delegated)

        assert encoded.endswith(bytes.fromhex("c101"))
        assert encoded != REFERENCE_UNSIGNED
        assert delegated.is_delegated

    def test_depends_on_encoded(self, reference_tx):
        depends_on = bytes(range(32))
        tx = replace(reference_tx, depends_on=depends_on)

        assert b"\xa0" + depends_on in encode_unsigned(tx)

    def test_nonce_changes_encoding(self, reference_tx):
        other = reference_tx.with_nonce(b"\x00" * 7 + b"\x01")
        assert encode_unsigned(other) != REFERENCE_UNSIGNED


class TestEncodeSigned:
    """Test encoding firmato"""

    def test_reference_signed_encoding(self, reference_tx):
        signed = SignedTransaction(raw=reference_tx, signature=REFERENCE_SIGNATURE)
        assert encode_signed(signed) == REFERENCE_SIGNED
        assert signed.encode_hex() == "0x" + REFERENCE_SIGNED.hex()

    def test_signature_appended_as_tenth_field(self, reference_tx):
        signed = SignedTransaction(raw=reference_tx, signature=REFERENCE_SIGNATURE)
        items = rlp.decode(encode_signed(signed))

        assert len(items) == 10
        assert items[-1] == REFERENCE_SIGNATURE


class TestDecode:
    """Test decoding inverso"""

    def test_decode_unsigned_round_trip(self, reference_tx):
        assert decode_raw_transaction(REFERENCE_UNSIGNED) == reference_tx

    def test_decode_signed(self, reference_tx):
        decoded = decode_signed_transaction(REFERENCE_SIGNED)

        assert decoded.raw == reference_tx
        assert decoded.signature == REFERENCE_SIGNATURE

    def test_decode_garbage(self):
        with pytest.raises(EncodingError) as exc:
            decode_raw_transaction(b"\xff\x00\x01")
        assert exc.value.code == "MALFORMED_RLP"

    def test_decode_truncated(self):
        with pytest.raises(EncodingError):
            decode_raw_transaction(REFERENCE_UNSIGNED[:-3])

    def test_decode_non_canonical_integer(self):
        """Zeri iniziali in un intero → rifiutato"""
        encoded = rlp.encode(_raw_fields(block_ref=bytes.fromhex("00000000aabbccdd")))

        with pytest.raises(EncodingError) as exc:
            decode_raw_transaction(encoded)
        assert exc.value.code == "MALFORMED_RLP"

    def test_decode_reserved_zero_rejected(self):
        encoded = rlp.encode(_raw_fields(reserved=[b""]))

        with pytest.raises(EncodingError) as exc:
            decode_raw_transaction(encoded)
        assert exc.value.code == "NON_CANONICAL"

    def test_decode_reserved_too_long(self):
        encoded = rlp.encode(_raw_fields(reserved=[b"\x01", b"\x02"]))

        with pytest.raises(EncodingError) as exc:
            decode_raw_transaction(encoded)
        assert exc.value.code == "UNSUPPORTED_RESERVED"

    def test_decode_unknown_feature_bits(self):
        encoded = rlp.encode(_raw_fields(reserved=[b"\x02"]))

        with pytest.raises(EncodingError) as exc:
            decode_raw_transaction(encoded)
        assert exc.value.code == "UNKNOWN_FEATURE"
        assert exc.value.details["features"] == 2

    def test_decode_oversized_block_ref(self):
        encoded = rlp.encode(_raw_fields(block_ref=b"\x01" * 9))

        with pytest.raises(EncodingError) as exc:
            decode_raw_transaction(encoded)
        assert exc.value.code == "INVALID_FIELD"

    def test_decode_rejects_non_bytes(self):
        with pytest.raises(EncodingError):
            decode_raw_transaction("0xf854")
