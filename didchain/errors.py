"""
Ledger Errors
=============

Uniform error taxonomy shared by every ledger backend.

Backend-originating failures are caught at the engine boundary and
re-raised as exactly one of `TransactionError` or `LedgerConnectionError`;
raw transport exceptions stay chained as ``__cause__``.

Version: 0.1.0
"""

from enum import Enum


class BlockchainErrorCode(str, Enum):
    """Error categories surfaced to callers."""

    INVALID_ARGUMENT = "invalid_argument"
    CONVERSION_ERROR = "conversion_error"
    TRANSACTION_ERROR = "transaction_error"
    CONNECTION_ERROR = "connection_error"
    CONFIGURATION_ERROR = "configuration_error"


class LedgerError(Exception):
    """Base class for all adapter errors."""

    code: BlockchainErrorCode = BlockchainErrorCode.TRANSACTION_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"


class LedgerArgumentError(LedgerError, ValueError):
    """Invalid argument combination; raised before any network call."""

    code = BlockchainErrorCode.INVALID_ARGUMENT


class ConversionError(LedgerError):
    """A domain object or on-chain record could not be converted."""

    code = BlockchainErrorCode.CONVERSION_ERROR


class TransactionError(LedgerError):
    """The ledger rejected the call at contract/chaincode level."""

    code = BlockchainErrorCode.TRANSACTION_ERROR


class LedgerConnectionError(LedgerError):
    """Transport or IO failure talking to the ledger."""

    code = BlockchainErrorCode.CONNECTION_ERROR


class PoolExhaustedError(LedgerConnectionError):
    """No pooled connection became available within the wait bound."""


class ConfigurationError(LedgerError):
    """Startup configuration or key material is missing or unreadable."""

    code = BlockchainErrorCode.CONFIGURATION_ERROR
