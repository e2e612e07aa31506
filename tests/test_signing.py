"""
ThorClient - Signing Tests
============================
Unit tests for signing hash, recoverable signatures and transaction id.
"""

import pytest

from thor_client.domain.addressing import Address
from thor_client.domain.crypto_core import compute_blake2b256, compute_keccak256
from thor_client.domain.keypairs import ECKeyPair
from thor_client.domain.models import SignedTransaction
from thor_client.domain.signing import (
    compute_signing_hash,
    compute_tx_id,
    recover_signer,
    sign,
    verify,
)
from thor_client.errors import ArgumentError, SigningError

from conftest import (
    REFERENCE_ADDRESS,
    REFERENCE_SIGNATURE,
    REFERENCE_SIGNED,
    REFERENCE_SIGNING_HASH,
    REFERENCE_TX_ID,
)


class TestHashes:
    """Test primitive hash"""

    def test_blake2b256_empty(self):
        assert compute_blake2b256(b"").hex().startswith("0e5751c026e543b2")

    def test_blake2b256_chunks(self):
        assert compute_blake2b256(b"ab", b"cd") == compute_blake2b256(b"abcd")

    def test_blake2b256_rejects_str(self):
        with pytest.raises(SigningError):
            compute_blake2b256("abcd")

    def test_keccak256_empty(self):
        assert compute_keccak256(b"").hex().startswith("c5d2460186f7233c")


class TestSigningHash:
    """Test signing hash e id"""

    def test_reference_signing_hash(self, reference_tx):
        assert compute_signing_hash(reference_tx) == REFERENCE_SIGNING_HASH
        assert reference_tx.signing_hash == REFERENCE_SIGNING_HASH

    def test_tx_id(self):
        origin = Address.from_hex(REFERENCE_ADDRESS)
        tx_id = compute_tx_id(REFERENCE_SIGNING_HASH, origin)

        assert "0x" + tx_id.hex() == REFERENCE_TX_ID


class TestSign:
    """Test firma transazione"""

    def test_reference_signature(self, reference_tx, key_pair):
        """Firma deterministica RFC 6979"""
        signed = sign(reference_tx, key_pair)

        assert signed.signature == REFERENCE_SIGNATURE
        assert signed.encode() == REFERENCE_SIGNED
        assert signed.id_hex == REFERENCE_TX_ID

    def test_origin_recovered(self, reference_tx, key_pair):
        signed = sign(reference_tx, key_pair)

        assert signed.origin == key_pair.address
        assert signed.origin.to_hex() == REFERENCE_ADDRESS

    def test_signing_is_deterministic(self, reference_tx, key_pair):
        assert sign(reference_tx, key_pair).signature == sign(reference_tx, key_pair).signature

    def test_recovery_id_and_low_s(self, reference_tx, key_pair):
        signature = sign(reference_tx, key_pair).signature
        s = int.from_bytes(signature[32:64], "big")
        n = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

        assert signature[64] in (0, 1)
        assert s <= n // 2

    def test_id_depends_on_signer(self, reference_tx):
        """Stessa transazione, chiave diversa → id diverso"""
        with ECKeyPair((1).to_bytes(32, "big")) as other:
            signed = sign(reference_tx, other)

            assert other.address.to_hex() == "0x7e5f4552091a69125d5dfcb7b8c2659029395bdf"
            assert signed.id_hex == "0xe1bbf97a364b0d5e516fd4921e096aa12e94d77ba4853ecaf1bc303d64456379"
            assert signed.signing_hash == REFERENCE_SIGNING_HASH

    def test_sign_requires_key_pair(self, reference_tx):
        with pytest.raises(SigningError):
            sign(reference_tx, b"\x01" * 32)

    def test_sign_with_wiped_key(self, reference_tx):
        kp = ECKeyPair((1).to_bytes(32, "big"))
        kp.wipe()

        with pytest.raises(SigningError) as exc:
            sign(reference_tx, kp)
        assert exc.value.code == "KEY_WIPED"


class TestRecoverAndVerify:
    """Test recover / verify"""

    def test_recover_reference(self):
        signer = recover_signer(REFERENCE_SIGNING_HASH, REFERENCE_SIGNATURE)
        assert signer.to_hex() == REFERENCE_ADDRESS

    def test_recover_wrong_length(self):
        with pytest.raises(SigningError) as exc:
            recover_signer(REFERENCE_SIGNING_HASH, REFERENCE_SIGNATURE[:64])
        assert exc.value.code == "INVALID_SIGNATURE"

    def test_recover_bad_recovery_id(self):
        with pytest.raises(SigningError):
            recover_signer(REFERENCE_SIGNING_HASH, REFERENCE_SIGNATURE[:64] + b"\x05")

    def test_verify_ok(self, reference_tx, key_pair):
        signed = sign(reference_tx, key_pair)

        assert verify(signed)
        assert verify(signed, key_pair.address)

    def test_verify_other_signer(self, reference_tx, key_pair):
        signed = sign(reference_tx, key_pair)
        other = Address.from_hex("0x7e5f4552091a69125d5dfcb7b8c2659029395bdf")

        assert not verify(signed, other)

    def test_tampered_transaction(self, reference_tx, key_pair):
        """Firma trapiantata su tx diversa: origin non coincide"""
        signed = sign(reference_tx, key_pair)
        tampered = SignedTransaction(raw=reference_tx.with_nonce(b"\x00" * 8), signature=signed.signature)

        assert not verify(tampered, key_pair.address)

    def test_signed_transaction_rejects_recovery_id(self, reference_tx):
        with pytest.raises(ArgumentError):
            SignedTransaction(raw=reference_tx, signature=REFERENCE_SIGNATURE[:64] + b"\x1b")
