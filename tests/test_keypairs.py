"""
ThorClient - KeyPair Tests
============================
Unit tests for secp256k1 key handling.
"""

import pytest

from thor_client.domain.keypairs import ECKeyPair
from thor_client.errors import SigningError

from conftest import REFERENCE_ADDRESS, REFERENCE_PRIVATE_KEY, REFERENCE_PUBLIC_KEY


class TestKeyPairLoading:
    """Test caricamento chiavi"""

    def test_from_hex(self):
        kp = ECKeyPair.from_hex(REFERENCE_PRIVATE_KEY)

        assert kp.public_key == REFERENCE_PUBLIC_KEY
        assert kp.address.to_hex() == REFERENCE_ADDRESS

    def test_from_hex_with_prefix(self):
        kp = ECKeyPair.from_hex("0x" + REFERENCE_PRIVATE_KEY)
        assert kp.address.to_hex() == REFERENCE_ADDRESS

    def test_from_bytes(self):
        kp = ECKeyPair(bytes.fromhex(REFERENCE_PRIVATE_KEY))
        assert kp.address.to_hex() == REFERENCE_ADDRESS

    @pytest.mark.parametrize("text", ["", "0x1234", "zz" * 32, REFERENCE_PRIVATE_KEY + "00"])
    def test_malformed_hex(self, text):
        with pytest.raises(SigningError) as exc:
            ECKeyPair.from_hex(text)
        assert exc.value.code == "INVALID_PRIVATE_KEY"

    def test_error_does_not_leak_key(self):
        secret = REFERENCE_PRIVATE_KEY[:-2] + "zz"

        with pytest.raises(SigningError) as exc:
            ECKeyPair.from_hex(secret)
        assert secret not in str(exc.value)

    def test_zero_scalar(self):
        with pytest.raises(SigningError):
            ECKeyPair(bytes(32))

    def test_wrong_type(self):
        with pytest.raises(SigningError):
            ECKeyPair(REFERENCE_PRIVATE_KEY)

    def test_generate(self):
        kp = ECKeyPair.generate()

        assert len(kp.public_key) == 65
        assert kp.public_key[0] == 0x04
        assert not kp.is_wiped


class TestKeyPairLifecycle:
    """Test wipe e rappresentazione"""

    def test_context_manager_wipes(self):
        with ECKeyPair.from_hex(REFERENCE_PRIVATE_KEY) as kp:
            assert not kp.is_wiped
        assert kp.is_wiped

    def test_sign_after_wipe(self):
        kp = ECKeyPair.from_hex(REFERENCE_PRIVATE_KEY)
        kp.wipe()

        with pytest.raises(SigningError) as exc:
            kp.sign_hash(b"\x00" * 32)
        assert exc.value.code == "KEY_WIPED"

    def test_address_survives_wipe(self):
        kp = ECKeyPair.from_hex(REFERENCE_PRIVATE_KEY)
        kp.wipe()
        assert kp.address.to_hex() == REFERENCE_ADDRESS

    def test_repr_hides_secret(self):
        kp = ECKeyPair.from_hex(REFERENCE_PRIVATE_KEY)

        assert REFERENCE_PRIVATE_KEY not in repr(kp)
        assert REFERENCE_PRIVATE_KEY not in str(kp)
        assert REFERENCE_ADDRESS in repr(kp)

    def test_sign_hash_length(self):
        kp = ECKeyPair.from_hex(REFERENCE_PRIVATE_KEY)

        with pytest.raises(SigningError) as exc:
            kp.sign_hash(b"\x00" * 31)
        assert exc.value.code == "INVALID_HASH"
