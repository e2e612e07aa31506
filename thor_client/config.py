"""
ThorClient - Configuration Management
=======================================
Gestione centralizzata configurazione con Pydantic Settings.
Supporta environment variables, file .env, override runtime.

Security Level: HIGH
Last Updated: 2026-10-17
Version: 1.0.0

Features:
- Validazione automatica tipi
- Environment variables con prefisso THORCLIENT_
- File .env support
- Preset per rete (main/test/solo)

Note:
    La chiave privata NON fa parte della configurazione: viene fornita
    dal chiamante per la sola durata della firma.
"""

from pathlib import Path
from typing import Optional
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from thor_client.constants import (
    DEFAULT_EXPIRATION,
    DEFAULT_GAS_PRICE_COEF,
    MAX_UINT8,
    MAX_UINT32,
    ChainTag,
)


# ============================================================================
# MAIN CONFIGURATION CLASS
# ============================================================================

class ClientSettings(BaseSettings):
    """
    Configurazione principale ThorClient.

    Example:
        # Da environment
        export THORCLIENT_NODE_URL="https://testnet.node.example:8669"
        export THORCLIENT_NETWORK=test

        # Da codice
        config = ClientSettings(node_url="http://localhost:8669", network="solo")
    """

    model_config = SettingsConfigDict(
        env_prefix='THORCLIENT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # ========================================================================
    # NODE
    # ========================================================================

    node_url: str = Field(
        default="http://localhost:8669",
        description="Base URL REST del nodo"
    )

    network: str = Field(
        default="solo",
        description="Network: main, test, solo"
    )

    request_timeout: float = Field(
        default=30.0,
        gt=0,
        le=600,
        description="Timeout richieste HTTP (secondi)"
    )

    # ========================================================================
    # TRANSACTION DEFAULTS
    # ========================================================================

    default_expiration: int = Field(
        default=DEFAULT_EXPIRATION,
        ge=1,
        le=MAX_UINT32,
        description="Expiration di default (blocchi)"
    )

    default_gas_price_coef: int = Field(
        default=DEFAULT_GAS_PRICE_COEF,
        ge=0,
        le=MAX_UINT8,
        description="Gas price coefficient di default"
    )

    # ========================================================================
    # LOGGING
    # ========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )

    log_to_file: bool = Field(
        default=False,
        description="Salva log su file"
    )

    log_dir: Path = Field(
        default=Path("./logs"),
        description="Directory log files"
    )

    log_format: str = Field(
        default="json",
        description="Formato log file: json, text"
    )

    # ========================================================================
    # VALIDATORS
    # ========================================================================

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Valida log level"""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log_level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator('network')
    @classmethod
    def validate_network(cls, v: str) -> str:
        """Valida network type"""
        valid_networks = ['main', 'test', 'solo']
        v_lower = v.lower()
        if v_lower not in valid_networks:
            raise ValueError(f"Invalid network: {v}. Must be one of {valid_networks}")
        return v_lower

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Valida formato log"""
        v_lower = v.lower()
        if v_lower not in ('json', 'text'):
            raise ValueError(f"Invalid log_format: {v}. Must be json or text")
        return v_lower

    @field_validator('node_url')
    @classmethod
    def validate_node_url(cls, v: str) -> str:
        """URL http(s), senza slash finale"""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid node_url: {v}. Must start with http:// or https://")
        return v.rstrip("/")

    # ========================================================================
    # HELPER METHODS
    # ========================================================================

    def is_mainnet(self) -> bool:
        """Check se mainnet"""
        return self.network == "main"

    def expected_chain_tag(self) -> Optional[int]:
        """Chain tag atteso per la rete (None per solo: dipende dal genesis)"""
        if self.network == "main":
            return int(ChainTag.MAINNET)
        if self.network == "test":
            return int(ChainTag.TESTNET)
        return None

    def to_dict(self) -> dict:
        """Serializza config"""
        return self.model_dump()

    def __repr__(self) -> str:
        return (
            f"ClientSettings("
            f"node_url={self.node_url}, "
            f"network={self.network}, "
            f"default_expiration={self.default_expiration})"
        )


# ============================================================================
# SINGLETON INSTANCE
# ============================================================================

@lru_cache(maxsize=1)
def get_settings() -> ClientSettings:
    """
    Ottieni singleton instance di ClientSettings.

    Returns:
        ClientSettings: Instance configurazione (cached)

    Example:
        >>> config = get_settings()
        >>> config.default_expiration
        720
    """
    return ClientSettings()


def reload_settings() -> ClientSettings:
    """
    Ricarica settings (invalida cache).

    Usare quando si cambiano environment variables runtime.
    """
    get_settings.cache_clear()
    return get_settings()


def override_settings(**kwargs) -> ClientSettings:
    """
    Settings con valori custom (utile per testing).

    Example:
        >>> test_config = override_settings(network="test", log_level="DEBUG")
    """
    return ClientSettings(**kwargs)


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "ClientSettings",
    "get_settings",
    "reload_settings",
    "override_settings",
]
