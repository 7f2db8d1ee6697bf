"""
Ledger Client Interface
=======================

Abstract base class exposing the DID/VC capability set, and the global
client factory that selects a backend from configuration.

Version: 0.1.0
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from didchain.config import LedgerMode, settings
from didchain.errors import LedgerArgumentError
from didchain.logging import get_logger
from didchain.models import (
    DidDocAndStatus,
    DidDocStatus,
    InvokedDidDoc,
    RoleType,
    TransactionResult,
    VcMeta,
    VcSchema,
    VcStatus,
    ZkpCredentialDefinition,
    ZkpCredentialSchema,
)

logger = get_logger(__name__)


def require_termination_time(
    status: DidDocStatus,
    terminated_time: datetime | None,
) -> None:
    """
    Reject a TERMINATED transition that carries no termination time.

    Raises:
        LedgerArgumentError: If ``status`` is TERMINATED and no time is given
    """
    if status == DidDocStatus.TERMINATED and terminated_time is None:
        raise LedgerArgumentError("TERMINATED status requires a terminated time")


class LedgerClient(ABC):
    """
    Abstract base class for ledger clients.

    Implements the Strategy pattern: one capability set, one implementation
    per ledger technology, chosen once at construction.
    """

    @property
    @abstractmethod
    def mode(self) -> LedgerMode:
        """Get the ledger backend mode."""
        ...

    @abstractmethod
    def health_check(self) -> dict[str, Any]:
        """Check ledger health."""
        ...

    def close(self) -> None:
        """Release long-lived resources. Safe to call more than once."""

    # =========================================================================
    # DID Documents
    # =========================================================================

    @abstractmethod
    def register_did_doc(self, invoked_did_doc: InvokedDidDoc, role_type: RoleType) -> None:
        """
        Register or update a DID Document (status changes excluded).

        Args:
            invoked_did_doc: Signed registration envelope
            role_type: Role of the registering entity
        """
        ...

    @abstractmethod
    def get_did_doc(self, did_key_url: str) -> DidDocAndStatus:
        """
        Retrieve a DID Document and its status.

        Args:
            did_key_url: DID key URL; only the DID part is used for lookup

        Returns:
            DidDocAndStatus
        """
        ...

    def update_did_doc_status(
        self,
        did_key_url: str,
        status: DidDocStatus,
        terminated_time: datetime | None = None,
    ) -> TransactionResult:
        """
        Change the status of a DID Document.

        With ``terminated_time`` the revocation entry point is used (REVOKED or
        TERMINATED); without it the in-service entry point is used.

        Args:
            did_key_url: DID key URL, may carry ``versionId``
            status: Target status
            terminated_time: Termination time; required for TERMINATED

        Returns:
            TransactionResult

        Raises:
            LedgerArgumentError: TERMINATED without ``terminated_time``
        """
        require_termination_time(status, terminated_time)
        return self._update_did_doc_status(did_key_url, status, terminated_time)

    @abstractmethod
    def _update_did_doc_status(
        self,
        did_key_url: str,
        status: DidDocStatus,
        terminated_time: datetime | None,
    ) -> TransactionResult:
        """Backend dispatch for an already-validated status change."""
        ...

    # =========================================================================
    # Verifiable Credentials
    # =========================================================================

    @abstractmethod
    def register_vc_meta(self, vc_meta: VcMeta) -> None:
        """Register VC metadata."""
        ...

    @abstractmethod
    def get_vc_meta(self, vc_id: str) -> VcMeta:
        """Retrieve VC metadata by credential id."""
        ...

    @abstractmethod
    def update_vc_status(self, vc_id: str, status: VcStatus) -> TransactionResult:
        """Update the status of registered VC metadata."""
        ...

    @abstractmethod
    def register_vc_schema(self, vc_schema: VcSchema) -> None:
        """Register a VC schema."""
        ...

    @abstractmethod
    def get_vc_schema(self, schema_id: str) -> VcSchema:
        """Retrieve a VC schema; claim order is preserved."""
        ...

    # =========================================================================
    # ZKP
    # =========================================================================

    @abstractmethod
    def register_zkp_credential_schema(self, schema: ZkpCredentialSchema) -> None:
        """Register a ZKP credential schema."""
        ...

    @abstractmethod
    def get_zkp_credential_schema(self, schema_id: str) -> ZkpCredentialSchema:
        """Retrieve a ZKP credential schema."""
        ...

    @abstractmethod
    def register_zkp_credential_definition(self, definition: ZkpCredentialDefinition) -> None:
        """Register a ZKP credential definition."""
        ...

    @abstractmethod
    def get_zkp_credential_definition(self, definition_id: str) -> ZkpCredentialDefinition:
        """Retrieve a ZKP credential definition."""
        ...


# Global client instance
_client: LedgerClient | None = None


def create_ledger_client(mode: LedgerMode) -> LedgerClient:
    """
    Build a client for the given backend from its configuration.

    Args:
        mode: Backend to construct

    Returns:
        LedgerClient instance
    """
    if mode == LedgerMode.MOCK:
        from didchain.blockchain.mock import MockLedgerClient

        return MockLedgerClient()
    if mode == LedgerMode.EVM:
        from didchain.blockchain.evm import EvmLedgerClient
        from didchain.config import get_evm_settings

        return EvmLedgerClient(
            get_evm_settings(),
            strict_status_decoding=settings.strict_status_decoding,
        )
    if mode == LedgerMode.FABRIC:
        from didchain.blockchain.fabric import FabricLedgerClient
        from didchain.config import get_fabric_settings

        return FabricLedgerClient.from_settings(
            get_fabric_settings(),
            strict_status_decoding=settings.strict_status_decoding,
        )
    raise LedgerArgumentError(f"Unknown ledger mode: {mode}")


def get_ledger_client() -> LedgerClient:
    """
    Get the configured ledger client instance.

    Returns:
        LedgerClient instance based on settings
    """
    global _client

    if _client is None:
        _client = create_ledger_client(settings.mode)
        logger.info(
            "ledger_client_initialized",
            mode=_client.mode.value,
        )

    return _client


def set_ledger_client(client: LedgerClient) -> None:
    """
    Set a custom ledger client.

    Args:
        client: LedgerClient instance
    """
    global _client
    _client = client
    logger.info(
        "ledger_client_set",
        mode=client.mode.value,
    )


def reset_ledger_client() -> None:
    """Close the current client and reset it to be re-initialized."""
    global _client
    if _client is not None:
        _client.close()
    _client = None
