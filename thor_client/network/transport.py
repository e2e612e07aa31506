"""
ThorClient - Node Transport
=============================
Trasporto HTTP verso l'API REST del nodo.

Security Level: HIGH
Last Updated: 2026-10-17
Version: 1.0.0

Features:
- Transport protocol (iniettabile, FakeTransport nei test)
- HttpTransport con una requests.Session
- Errori di rete / HTTP / JSON → ClientIOError con status code ed estratto body
- Body JSON "null" → None (tx o receipt non trovati)

Nessun retry: la policy di ritentativo è del chiamante.
Una HttpTransport per thread (requests.Session non è thread-safe).
"""

from __future__ import annotations
from abc import abstractmethod
from typing import Any, Dict, Mapping, Optional, Protocol

import requests

from thor_client.config import ClientSettings, get_settings
from thor_client.constants import USER_AGENT
from thor_client.errors import ClientIOError
from thor_client.logging_setup import PerformanceLogger, get_logger


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("transport")

# Estratto massimo del body incluso negli errori
BODY_EXCERPT_LENGTH = 256


# ============================================================================
# TRANSPORT PROTOCOL
# ============================================================================

class Transport(Protocol):
    """
    Protocol del trasporto verso il nodo.

    I path sono relativi alla base URL ("/blocks/best").
    I metodi restituiscono il JSON decodificato (None per body null).
    """

    @abstractmethod
    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """GET path?params"""
        pass

    @abstractmethod
    def post(
        self,
        path: str,
        body: Mapping[str, Any],
        params: Optional[Mapping[str, Any]] = None
    ) -> Any:
        """POST path?params con body JSON"""
        pass


# ============================================================================
# HTTP TRANSPORT
# ============================================================================

class HttpTransport:
    """
    Trasporto HTTP sincrono basato su requests.

    Attributes:
        base_url (str): URL del nodo senza slash finale
        timeout (float): Timeout per richiesta (secondi)

    Examples:
        >>> with HttpTransport("http://localhost:8669") as transport:
        ...     block = transport.get("/blocks/best")
        >>> block["number"] > 0
        True
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
        headers: Optional[Mapping[str, str]] = None
    ):
        if not base_url or not base_url.startswith(("http://", "https://")):
            raise ClientIOError(
                f"Invalid node URL: {base_url!r}",
                code="INVALID_URL"
            )

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        })
        if headers:
            self._session.headers.update(dict(headers))

    @classmethod
    def from_settings(cls, settings: Optional[ClientSettings] = None) -> HttpTransport:
        """Costruisce dalla configurazione (default: get_settings())"""
        settings = settings or get_settings()
        return cls(settings.node_url, timeout=settings.request_timeout)

    # ------------------------------------------------------------------------
    # CONTEXT MANAGER
    # ------------------------------------------------------------------------

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------------
    # PUBLIC API
    # ------------------------------------------------------------------------

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self._request("GET", path, params=params)

    def post(
        self,
        path: str,
        body: Mapping[str, Any],
        params: Optional[Mapping[str, Any]] = None
    ) -> Any:
        return self._request("POST", path, params=params, body=body)

    # ------------------------------------------------------------------------
    # INTERNALS
    # ------------------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    @staticmethod
    def _clean_params(params: Optional[Mapping[str, Any]]) -> Optional[Dict[str, str]]:
        if not params:
            return None
        cleaned = {}
        for key, value in params.items():
            if value is None:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            cleaned[key] = str(value)
        return cleaned

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        body: Optional[Mapping[str, Any]] = None
    ) -> Any:
        url = self._url(path)
        operation = f"{method} {path}"

        try:
            with PerformanceLogger(logger, operation, threshold_ms=int(self.timeout * 500)):
                response = self._session.request(
                    method,
                    url,
                    params=self._clean_params(params),
                    json=dict(body) if body is not None else None,
                    timeout=self.timeout,
                )
        except requests.Timeout as e:
            logger.warning("Node request timed out", extra_data={"operation": operation})
            raise ClientIOError(
                f"{operation} timed out after {self.timeout}s",
                code="TIMEOUT",
                details={"url": url}
            ) from e
        except requests.ConnectionError as e:
            logger.warning("Node connection failed", extra_data={"operation": operation, "error": str(e)})
            raise ClientIOError(
                f"{operation}: connection failed",
                code="CONNECTION_ERROR",
                details={"url": url}
            ) from e
        except requests.RequestException as e:
            raise ClientIOError(
                f"{operation} failed: {e}",
                code="REQUEST_ERROR",
                details={"url": url}
            ) from e

        text = response.text or ""

        if not 200 <= response.status_code < 300:
            excerpt = text[:BODY_EXCERPT_LENGTH]
            logger.warning(
                "Node returned error status",
                extra_data={"operation": operation, "status": response.status_code, "body": excerpt}
            )
            raise ClientIOError(
                f"{operation} returned HTTP {response.status_code}: {excerpt.strip()}",
                code="HTTP_ERROR",
                details={"url": url, "body": excerpt},
                status_code=response.status_code
            )

        if not text.strip():
            return None

        try:
            return response.json()
        except ValueError as e:
            raise ClientIOError(
                f"{operation} returned invalid JSON",
                code="INVALID_JSON",
                details={"url": url, "body": text[:BODY_EXCERPT_LENGTH]},
                status_code=response.status_code
            ) from e

    def __repr__(self) -> str:
        return f"HttpTransport(base_url={self.base_url}, timeout={self.timeout})"


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "Transport",
    "HttpTransport",
]
