"""
ThorClient - Pytest Configuration
===================================
Fixtures e configurazione per testing.

Last Updated: 2026-10-17
Version: 1.0.0
"""

import pytest

# Internal imports
from thor_client.config import override_settings
from thor_client.domain.addressing import Address
from thor_client.domain.keypairs import ECKeyPair
from thor_client.domain.models import BlockRef, ToClause
from thor_client.domain.tx_factory import create_raw_transaction
from thor_client.services.contract_service import ContractService
from thor_client.services.prototype_service import PrototypeService
from thor_client.services.transaction_service import TransactionService


# ============================================================================
# REFERENCE VECTORS
# ============================================================================

REFERENCE_PRIVATE_KEY = "7582be841ca040aa940fff6c05773129e135623e41acce3e0b8ba520dc1ae26a"
REFERENCE_ADDRESS = "0xd989829d88b0ed1b06edf5c50174ecfa64f14a64"
REFERENCE_PUBLIC_KEY = bytes.fromhex(
    "04b90e9bb2617387eba4502c730de65a33878ef384a46f1096d86f2da19043304a"
    "fa67d0ad09cf2bea0c6f2d1767a9e62a7a7ecc41facf18f2fa505d92243a658f"
)
REFERENCE_RECEIVER = "0x7567d83b7b8d80addcb281a71d54fc7b3364ffed"

REFERENCE_UNSIGNED = bytes.fromhex(
    "f8540184aabbccdd20f840df947567d83b7b8d80addcb281a71d54fc7b3364ffed"
    "82271086000000606060df947567d83b7b8d80addcb281a71d54fc7b3364ffed82"
    "4e208600000060606081808252088083bc614ec0"
)
REFERENCE_SIGNING_HASH = bytes.fromhex(
    "2a1c25ce0d66f45276a5f308b99bf410e2fc7d5b6ea37a49f2ab9f1da9446478"
)
REFERENCE_SIGNATURE = bytes.fromhex(
    "f76f3c91a834165872aa9464fc55b03a13f46ea8d3b858e528fcceaf371ad688"
    "4193c3f313ff8effbb57fe4d1adc13dceb933bedbf9dbb528d2936203d5511df00"
)
REFERENCE_SIGNED = bytes.fromhex("f897") + REFERENCE_UNSIGNED[2:] + bytes.fromhex("b841") + REFERENCE_SIGNATURE
REFERENCE_TX_ID = "0xda90eaea52980bc4bb8d40cb2ff84d78433b3b4a6e7d50b75736c5e3e77b71ec"

GENESIS_ID_TESTNET = "0x000000000b2bce3c70bc649a02749e8687721b09ed2e15997f466536b20bb127"
BEST_BLOCK_ID = "0x00a1b2c3d4e5f60100000000000000000000000000000000000000000000beef"


# ============================================================================
# FAKE TRANSPORT
# ============================================================================

class FakeTransport:
    """
    Transport in memoria: risposte canned per (method, path), registra ogni chiamata.

    Una risposta può essere un valore JSON, un callable (body → JSON)
    o un'eccezione da sollevare.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def _respond(self, method, path, body=None):
        key = (method, path)
        if key not in self.responses:
            raise AssertionError(f"Unexpected request {method} {path}")
        response = self.responses[key]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(body)
        return response

    def get(self, path, params=None):
        self.calls.append(("GET", path, dict(params) if params else None, None))
        return self._respond("GET", path)

    def post(self, path, body, params=None):
        self.calls.append(("POST", path, dict(params) if params else None, dict(body)))
        return self._respond("POST", path, body)

    def requests(self, method):
        return [c for c in self.calls if c[0] == method]


def block_payload(block_id, number=0):
    """Payload GET /blocks/{rev}"""
    return {
        "number": number,
        "id": block_id,
        "size": 170,
        "parentID": "0x" + "00" * 32,
        "timestamp": 1530014400,
        "gasLimit": 10000000,
        "beneficiary": "0x0000000000000000000000000000000000000000",
        "gasUsed": 0,
        "totalScore": 0,
        "isTrunk": True,
        "transactions": [],
    }


def echo_tx_id(body):
    """Risposta POST /transactions: id calcolato dal raw ricevuto"""
    from thor_client.domain.codec import decode_signed_transaction

    signed = decode_signed_transaction(bytes.fromhex(body["raw"][2:]))
    return {"id": signed.id_hex}


# ============================================================================
# CONFIGURATION FIXTURES
# ============================================================================

@pytest.fixture
def test_config():
    """Test configuration (testnet, nessun file di log)"""
    return override_settings(
        node_url="http://localhost:8669",
        network="test",
        log_level="DEBUG",
        log_to_file=False,
    )


@pytest.fixture
def solo_config():
    """Configurazione solo: chain tag non verificato"""
    return override_settings(node_url="http://localhost:8669", network="solo")


# ============================================================================
# KEY FIXTURES
# ============================================================================

@pytest.fixture
def key_pair():
    """KeyPair di riferimento (azzerato a fine test)"""
    with ECKeyPair.from_hex(REFERENCE_PRIVATE_KEY) as kp:
        yield kp


@pytest.fixture
def receiver():
    return Address.from_hex(REFERENCE_RECEIVER)


# ============================================================================
# TRANSACTION FIXTURES
# ============================================================================

@pytest.fixture
def reference_tx(receiver):
    """Transazione con encoding e signing hash noti"""
    data = bytes.fromhex("000000606060")
    return create_raw_transaction(
        1,
        BlockRef.from_hex("0x00000000aabbccdd"),
        32,
        21000,
        128,
        (12345678).to_bytes(8, "big"),
        ToClause(to=receiver, value=10000, data=data),
        ToClause(to=receiver, value=20000, data=data),
    )


# ============================================================================
# SERVICE FIXTURES
# ============================================================================

@pytest.fixture
def node_responses():
    """Risposte base del nodo: genesis testnet, best block, submission"""
    return {
        ("GET", "/blocks/0"): block_payload(GENESIS_ID_TESTNET, 0),
        ("GET", "/blocks/best"): block_payload(BEST_BLOCK_ID, 0xa1b2c3),
        ("POST", "/transactions"): echo_tx_id,
    }


@pytest.fixture
def transport(node_responses):
    return FakeTransport(node_responses)


@pytest.fixture
def transaction_service(transport, test_config):
    return TransactionService(transport, test_config)


@pytest.fixture
def contract_service(transport, test_config, transaction_service):
    return ContractService(transport, transaction_service, test_config)


@pytest.fixture
def prototype_service(contract_service):
    return PrototypeService(contract_service)
