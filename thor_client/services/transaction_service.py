"""
ThorClient - Transaction Service
==================================
Submission delle transazioni firmate e correlazione id → receipt.

Security Level: HIGH
Last Updated: 2026-10-17
Version: 1.0.0

Features:
- submit: POST /transactions {"raw": "0x…"}
- sign_then_transfer: firma locale + submission
- get_receipt / get_transaction: lookup singolo (None = non ancora incluso)

Policy:
- Nessun retry automatico
- Per ritentare dopo un errore ambiguo reinviare gli STESSI bytes firmati
  (stesso nonce → stesso id) e verificare con get_receipt
"""

from typing import Any, Optional, Union

from pydantic import ValidationError

from thor_client.config import ClientSettings, get_settings
from thor_client.constants import TX_ID_LENGTH
from thor_client.domain.keypairs import ECKeyPair
from thor_client.domain.models import RawTransaction, Revision, SignedTransaction, TransferResult
from thor_client.domain.signing import sign
from thor_client.errors import ArgumentError, ClientIOError
from thor_client.logging_setup import get_logger
from thor_client.network.schemas import Receipt, SubmitResponse, TransactionDetail
from thor_client.network.transport import Transport
from thor_client.utils.serialization import bytes_to_hex, hex_to_bytes


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("transaction_service")


# ============================================================================
# HELPERS
# ============================================================================

def normalize_tx_id(tx_id: Union[str, bytes]) -> str:
    """
    Id transazione in formato "0x" + 64 hex lower-case.

    Raises:
        ArgumentError: Se None o non 32 bytes
    """
    if tx_id is None:
        raise ArgumentError("tx_id is null", code="NULL_ARGUMENT", details={"field": "tx_id"})
    if isinstance(tx_id, (bytes, bytearray)):
        raw = bytes(tx_id)
        if len(raw) != TX_ID_LENGTH:
            raise ArgumentError(f"tx_id must be {TX_ID_LENGTH} bytes", code="INVALID_LENGTH")
    else:
        raw = hex_to_bytes(tx_id, length=TX_ID_LENGTH, field="tx_id")
    return bytes_to_hex(raw)


def parse_payload(model, payload: Any, operation: str):
    """Valida payload del nodo nel modello pydantic (errori → ClientIOError)"""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        logger.error(
            "Unexpected node response",
            extra_data={"operation": operation, "errors": e.error_count()}
        )
        raise ClientIOError(
            f"{operation}: unexpected response shape",
            code="INVALID_RESPONSE",
            details={"error_count": e.error_count()}
        ) from e


# ============================================================================
# TRANSACTION SERVICE
# ============================================================================

class TransactionService:
    """
    Submission e lookup transazioni.

    Attributes:
        transport: Trasporto verso il nodo
        config: Configurazione client

    Examples:
        >>> service = TransactionService(HttpTransport("http://localhost:8669"))
        >>> result = service.sign_then_transfer(raw, key_pair)
        >>> receipt = service.get_receipt(result.id)
        >>> receipt is None or receipt.meta.tx_id == result.id
        True
    """

    def __init__(self, transport: Transport, config: Optional[ClientSettings] = None):
        self.transport = transport
        self.config = config or get_settings()

    # ========================================================================
    # SUBMISSION
    # ========================================================================

    def submit(self, signed: Union[SignedTransaction, bytes]) -> str:
        """
        Invia transazione firmata al nodo.

        Args:
            signed: SignedTransaction o encoding firmato già calcolato

        Returns:
            str: Id transazione restituito dal nodo

        Raises:
            ArgumentError: Input non firmato/vuoto
            ClientIOError: Qualsiasi errore di trasporto (causa concatenata)
        """
        if isinstance(signed, SignedTransaction):
            encoded = signed.encode()
        elif isinstance(signed, (bytes, bytearray)) and len(signed) > 0:
            encoded = bytes(signed)
        else:
            raise ArgumentError(
                "submit requires a SignedTransaction or non-empty encoded bytes",
                code="INVALID_ARGUMENT"
            )

        try:
            payload = self.transport.post("/transactions", {"raw": bytes_to_hex(encoded)})
        except ClientIOError:
            raise
        except Exception as e:
            raise ClientIOError(f"Transaction submission failed: {e}", code="SUBMIT_FAILED") from e

        response = parse_payload(SubmitResponse, payload, "POST /transactions")

        logger.info(
            "Transaction submitted",
            extra_data={"id": response.id, "size": len(encoded)}
        )

        return response.id

    def sign_then_transfer(self, raw: RawTransaction, key_pair: ECKeyPair) -> TransferResult:
        """
        Firma localmente e invia.

        Se l'id calcolato localmente differisce da quello del nodo viene
        loggato un warning; il risultato contiene l'id del nodo.

        Raises:
            SigningError: Chiave non valida
            ClientIOError: Errore di trasporto
        """
        if raw is None:
            raise ArgumentError("raw is null", code="NULL_ARGUMENT", details={"field": "raw"})
        if key_pair is None:
            raise ArgumentError("key_pair is null", code="NULL_ARGUMENT", details={"field": "key_pair"})

        signed = sign(raw, key_pair)
        local_id = signed.id_hex
        node_id = self.submit(signed)

        if node_id.lower() != local_id:
            logger.warning(
                "Node returned a different transaction id",
                extra_data={"local_id": local_id, "node_id": node_id}
            )

        return TransferResult(id=node_id)

    # ========================================================================
    # LOOKUP
    # ========================================================================

    def get_receipt(
        self,
        tx_id: Union[str, bytes],
        revision: Union[Revision, int, str, None] = None
    ) -> Optional[Receipt]:
        """
        Receipt della transazione.

        Returns:
            Optional[Receipt]: None se non ancora inclusa (nessun polling)
        """
        normalized = normalize_tx_id(tx_id)
        params = {"revision": str(Revision.of(revision))} if revision is not None else None

        payload = self.transport.get(f"/transactions/{normalized}/receipt", params)
        if payload is None:
            logger.debug("Receipt not available yet", extra_data={"id": normalized})
            return None

        return parse_payload(Receipt, payload, "GET receipt")

    def get_transaction(
        self,
        tx_id: Union[str, bytes],
        raw: bool = False,
        revision: Union[Revision, int, str, None] = None
    ) -> Optional[TransactionDetail]:
        """
        Dettaglio transazione (pending: meta None).

        Args:
            tx_id: Id transazione
            raw: True per ottenere l'encoding firmato invece dei campi
            revision: Blocco da cui cercare (query `revision`)

        Returns:
            Optional[TransactionDetail]: None se sconosciuta al nodo
        """
        normalized = normalize_tx_id(tx_id)
        params = {"raw": bool(raw)}
        if revision is not None:
            params["revision"] = str(Revision.of(revision))

        payload = self.transport.get(f"/transactions/{normalized}", params)
        if payload is None:
            return None

        if isinstance(payload, dict) and "id" not in payload:
            payload = {**payload, "id": normalized}

        return parse_payload(TransactionDetail, payload, "GET transaction")


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "TransactionService",
    "normalize_tx_id",
    "parse_payload",
]
