"""
ThorClient - Custom Exceptions
================================
Gerarchia eccezioni del client: validazione argomenti, ABI, encoding,
firma e trasporto verso il nodo.

Security Level: HIGH
Last Updated: 2026-10-17
Version: 1.0.0

Regole:
- Errori di validazione sollevati PRIMA di qualsiasi chiamata di rete
- Nessun retry automatico (policy del chiamante)
- Revert di contratto NON è un errore: viaggia dentro Receipt/ContractCallResult
"""

from typing import Optional, Any


# ============================================================================
# BASE EXCEPTION
# ============================================================================

class ThorClientException(Exception):
    """
    Eccezione base per tutte le eccezioni ThorClient.

    Attributes:
        message (str): Messaggio errore
        code (str): Codice errore (es. "NONCE_LENGTH")
        details (dict): Dettagli aggiuntivi
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict] = None
    ):
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Serializza eccezione per CLI/logging"""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        if self.details:
            return f"[{self.code}] {self.message} | Details: {self.details}"
        return f"[{self.code}] {self.message}"


# ============================================================================
# CONFIGURATION ERRORS
# ============================================================================

class ConfigError(ThorClientException):
    """Errore configurazione client"""
    pass


# ============================================================================
# CALLER ERRORS
# ============================================================================

class ArgumentError(ThorClientException):
    """
    Argomento invalido fornito dal chiamante.

    Casi tipici:
    - valore obbligatorio mancante (None)
    - array paralleli di lunghezza diversa
    - hex/address malformato
    - nonce di lunghezza errata

    Mai ritentato: è un errore del chiamante, non della rete.
    """
    pass


# ============================================================================
# ABI / ENCODING ERRORS
# ============================================================================

class AbiNotFoundError(ThorClientException):
    """Metodo richiesto assente dai metadata ABI caricati"""
    pass


class EncodingError(ThorClientException):
    """Valore non codificabile secondo il tipo ABI / formato canonico"""
    pass


# ============================================================================
# CRYPTOGRAPHY ERRORS
# ============================================================================

class SigningError(ThorClientException):
    """Chiave privata malformata o errore crittografico durante la firma"""
    pass


# ============================================================================
# TRANSPORT ERRORS
# ============================================================================

class ClientIOError(ThorClientException):
    """
    Errore di trasporto verso il nodo (timeout, connessione rifiutata,
    risposta non-2xx, body non decodificabile).

    Attributes:
        status_code (Optional[int]): HTTP status se disponibile
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict] = None,
        status_code: Optional[int] = None
    ):
        self.status_code = status_code
        super().__init__(message, code=code, details=details)


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def format_argument_error(
    field: str,
    value: Any,
    expected: str,
    code: Optional[str] = None
) -> ArgumentError:
    """
    Helper per creare ArgumentError formattati.

    Args:
        field: Nome argomento invalido
        value: Valore ricevuto
        expected: Valore/tipo atteso
        code: Codice errore custom

    Returns:
        ArgumentError: Eccezione formattata

    Example:
        >>> raise format_argument_error("nonce", b"\\x01", "8 bytes")
    """
    return ArgumentError(
        message=f"Invalid argument '{field}': expected {expected}, got {value!r}",
        code=code or "INVALID_ARGUMENT",
        details={"field": field, "expected": expected}
    )


def require_same_length(**columns: Any) -> int:
    """
    Verifica che tutti gli array paralleli abbiano la stessa lunghezza.

    Args:
        **columns: nome → sequenza (None non ammesso)

    Returns:
        int: Lunghezza comune

    Raises:
        ArgumentError: Se un array è None o le lunghezze differiscono

    Example:
        >>> require_same_length(receivers=[a, b], users=[c, d])
        2
    """
    lengths = {}
    for name, column in columns.items():
        if column is None:
            raise ArgumentError(f"{name} is null", code="NULL_ARGUMENT",
                                details={"field": name})
        lengths[name] = len(column)

    if len(set(lengths.values())) > 1:
        names = " and ".join(lengths)
        raise ArgumentError(
            f"{names} must have the same size",
            code="LENGTH_MISMATCH",
            details={"lengths": lengths}
        )

    return next(iter(lengths.values()), 0)


# ============================================================================
# EXPORT ALL
# ============================================================================

__all__ = [
    "ThorClientException",
    "ConfigError",
    "ArgumentError",
    "AbiNotFoundError",
    "EncodingError",
    "SigningError",
    "ClientIOError",
    "format_argument_error",
    "require_same_length",
]
