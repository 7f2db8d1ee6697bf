"""
Settings Module
===============

Pydantic-based configuration with environment variable loading.

Backend settings are only built when the matching backend is selected, so
an EVM deployment never needs Fabric key material and vice versa.

Version: 0.1.0
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, ClassVar

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from didchain.config.properties import load_properties


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LedgerMode(str, Enum):
    """Ledger backend selection."""

    MOCK = "mock"
    EVM = "evm"
    FABRIC = "fabric"


def _require_non_empty(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        raise ValueError("must not be empty")
    if isinstance(value, SecretStr) and not value.get_secret_value().strip():
        raise ValueError("must not be empty")
    return value


class _PropertiesMixin:
    """Build settings from a Java-style ``.properties`` file."""

    # property key -> field name
    PROPERTY_KEYS: ClassVar[dict[str, str]] = {}

    @classmethod
    def from_properties(cls, resource: str | Path) -> Any:
        """
        Load settings from a properties file.

        Keys absent from the file fall back to the environment and defaults,
        so required keys missing from both still fail validation.

        Args:
            resource: Absolute path, or path relative to the working directory

        Returns:
            Settings instance
        """
        properties = load_properties(resource)
        values = {
            field: properties[key]
            for key, field in cls.PROPERTY_KEYS.items()
            if key in properties
        }
        return cls(**values)  # type: ignore[call-arg]


class EvmSettings(_PropertiesMixin, BaseSettings):
    """EVM JSON-RPC network configuration."""

    model_config = SettingsConfigDict(env_prefix="EVM_", extra="ignore")

    PROPERTY_KEYS: ClassVar[dict[str, str]] = {
        "evm.network.url": "network_url",
        "evm.chainId": "chain_id",
        "evm.contract.address": "contract_address",
        "evm.contract.privateKey": "private_key",
        "evm.contract.abiPath": "abi_path",
        "evm.connection.timeout": "connection_timeout",
    }

    network_url: str
    chain_id: int
    contract_address: str
    private_key: SecretStr
    abi_path: Path
    connection_timeout: int = Field(default=30, gt=0)

    @field_validator("network_url", "contract_address", "private_key", mode="before")
    @classmethod
    def require_non_empty(cls, v: Any) -> Any:
        """Reject empty required keys."""
        return _require_non_empty(v)


class FabricSettings(_PropertiesMixin, BaseSettings):
    """Permissioned-ledger gateway configuration."""

    model_config = SettingsConfigDict(env_prefix="FABRIC_", extra="ignore")

    PROPERTY_KEYS: ClassVar[dict[str, str]] = {
        "fabric.mspId": "msp_id",
        "fabric.certificateFilePath": "certificate_file_path",
        "fabric.privateKeyFilePath": "private_key_file_path",
        "fabric.tlsFilePath": "tls_file_path",
        "fabric.serverEndpoint": "server_endpoint",
        "fabric.overrideAuthority": "override_authority",
        "fabric.networkName": "network_name",
        "fabric.chaincodeName": "chaincode_name",
        "fabric.gatewayTimeout": "gateway_timeout",
    }

    msp_id: str
    certificate_file_path: Path
    private_key_file_path: Path
    tls_file_path: Path
    server_endpoint: str
    override_authority: str = "peer0.org1.example.com"
    network_name: str
    chaincode_name: str

    # Every gateway operation category shares this deadline
    gateway_timeout: float = Field(default=7.0, gt=0)

    # Pool policy
    pool_max_total: int = Field(default=10, gt=0)
    pool_min_idle: int = Field(default=2, ge=0)
    pool_max_idle: int = Field(default=5, ge=0)

    @field_validator(
        "msp_id",
        "certificate_file_path",
        "private_key_file_path",
        "tls_file_path",
        "server_endpoint",
        "network_name",
        "chaincode_name",
        mode="before",
    )
    @classmethod
    def require_non_empty(cls, v: Any) -> Any:
        """Reject empty required keys."""
        return _require_non_empty(v)


class LedgerSettings(BaseSettings):
    """
    Main adapter settings.

    Loads configuration from environment variables with sensible defaults.
    Use the global `settings` singleton or call `get_settings()`.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    mode: LedgerMode = LedgerMode.MOCK
    log_level: LogLevel = LogLevel.INFO
    json_logs: bool = False

    # Raise instead of falling back to ACTIVATED on unmapped status codes
    strict_status_decoding: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Ensure log level is uppercase."""
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v


@lru_cache
def get_settings() -> LedgerSettings:
    """
    Get cached settings instance.

    Returns:
        LedgerSettings: Adapter settings singleton.
    """
    return LedgerSettings()


@lru_cache
def get_evm_settings() -> EvmSettings:
    """Get cached EVM settings; fails at startup if required keys are missing."""
    return EvmSettings()  # type: ignore[call-arg]


@lru_cache
def get_fabric_settings() -> FabricSettings:
    """Get cached Fabric settings; fails at startup if required keys are missing."""
    return FabricSettings()  # type: ignore[call-arg]
