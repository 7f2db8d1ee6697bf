"""
Mock Ledger Client
==================

In-memory mock implementation for development and testing.

Records are stored in their encoded contract form and decoded on read,
so callers see the same conversions a real ledger applies.

Version: 0.1.0
"""

import hashlib
import uuid
from datetime import datetime
from typing import Any

from didchain.blockchain.client import LedgerClient
from didchain.blockchain.codec import encode_did_doc_status, parse_did_document
from didchain.blockchain.evm.codec import (
    did_doc_and_status_from_chain,
    did_document_to_chain,
    vc_meta_from_chain,
    vc_meta_to_chain,
    vc_schema_from_chain,
    vc_schema_to_chain,
    zkp_credential_definition_from_chain,
    zkp_credential_definition_to_chain,
    zkp_credential_schema_from_chain,
    zkp_credential_schema_to_chain,
)
from didchain.blockchain.evm.records import DocumentAndStatusRecord
from didchain.config import LedgerMode
from didchain.errors import TransactionError
from didchain.logging import get_logger
from didchain.models import (
    DidDocAndStatus,
    DidDocStatus,
    DidKeyUrl,
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


class MockLedgerClient(LedgerClient):
    """
    In-memory mock ledger client.

    Simulates ledger operations for development without requiring
    actual ledger infrastructure. Missing records and duplicate
    registrations are rejected the way the contract rejects them.

    Data is stored in memory and lost on restart.
    """

    def __init__(self) -> None:
        """Initialize mock client with in-memory storage."""
        self._block_number = 1000

        # In-memory storage, keyed by id
        self._did_docs: dict[str, DocumentAndStatusRecord] = {}
        self._terminated_at: dict[str, str] = {}
        self._vc_metas: dict[str, Any] = {}
        self._vc_schemas: dict[str, Any] = {}
        self._zkp_schemas: dict[str, Any] = {}
        self._zkp_definitions: dict[str, Any] = {}

        logger.debug("mock_ledger_initialized")

    @property
    def mode(self) -> LedgerMode:
        return LedgerMode.MOCK

    def health_check(self) -> dict[str, Any]:
        """Check mock ledger health."""
        return {
            "status": "healthy",
            "mode": self.mode.value,
            "block_number": self._block_number,
            **self.get_stats(),
        }

    def _generate_tx_hash(self) -> str:
        """Generate a mock transaction hash."""
        return "0x" + hashlib.sha256(uuid.uuid4().bytes).hexdigest()

    def _commit(self) -> TransactionResult:
        """Mine a mock block and return its receipt summary."""
        self._block_number += 1
        return TransactionResult(status_code=200, status="0x1", tx_hash=self._generate_tx_hash())

    @staticmethod
    def _require(store: dict[str, Any], key: str, what: str) -> Any:
        if key not in store:
            raise TransactionError(f"{what} not found: {key}")
        return store[key]

    @staticmethod
    def _require_new(store: dict[str, Any], key: str, what: str) -> None:
        if key in store:
            raise TransactionError(f"{what} already registered: {key}")

    # =========================================================================
    # DID Documents
    # =========================================================================

    def register_did_doc(self, invoked_did_doc: InvokedDidDoc, role_type: RoleType) -> None:
        """Register a DID Document, or update a registered one keeping its status."""
        document = parse_did_document(invoked_did_doc)
        existing = self._did_docs.get(document.id)
        status = existing.status if existing else encode_did_doc_status(DidDocStatus.ACTIVATED)

        self._did_docs[document.id] = DocumentAndStatusRecord(
            diddoc=did_document_to_chain(document),
            status=status,
        )
        tx = self._commit()

        logger.info(
            "mock_did_doc_registered",
            did=document.id,
            role_type=role_type.value,
            updated=existing is not None,
            tx_hash=tx.tx_hash,
        )

    def get_did_doc(self, did_key_url: str) -> DidDocAndStatus:
        """Resolve a DID Document and its status."""
        did = DidKeyUrl.parse(did_key_url).did
        record = self._require(self._did_docs, did, "DID Document")
        return did_doc_and_status_from_chain(record)

    def _update_did_doc_status(
        self,
        did_key_url: str,
        status: DidDocStatus,
        terminated_time: datetime | None,
    ) -> TransactionResult:
        key_url = DidKeyUrl.parse(did_key_url)
        record = self._require(self._did_docs, key_url.did, "DID Document")

        current = record.diddoc.versionId
        if (
            terminated_time is None
            and status != DidDocStatus.REVOKED
            and key_url.version_id
            and key_url.version_id != current
        ):
            raise TransactionError(
                f"Version mismatch for {key_url.did}: {key_url.version_id} != {current}"
            )

        self._did_docs[key_url.did] = record._replace(status=encode_did_doc_status(status))
        if terminated_time is not None:
            self._terminated_at[key_url.did] = terminated_time.isoformat()

        tx = self._commit()
        logger.info(
            "mock_did_doc_status_updated",
            did=key_url.did,
            status=status.value,
            tx_hash=tx.tx_hash,
        )
        return tx

    # =========================================================================
    # Verifiable Credentials
    # =========================================================================

    def register_vc_meta(self, vc_meta: VcMeta) -> None:
        """Register VC metadata."""
        self._require_new(self._vc_metas, vc_meta.id, "VC metadata")
        self._vc_metas[vc_meta.id] = vc_meta_to_chain(vc_meta)
        self._commit()
        logger.info("mock_vc_meta_registered", vc_id=vc_meta.id)

    def get_vc_meta(self, vc_id: str) -> VcMeta:
        """Get VC metadata."""
        return vc_meta_from_chain(self._require(self._vc_metas, vc_id, "VC metadata"))

    def update_vc_status(self, vc_id: str, status: VcStatus) -> TransactionResult:
        """Update the status of registered VC metadata."""
        record = self._require(self._vc_metas, vc_id, "VC metadata")
        self._vc_metas[vc_id] = record._replace(status=status.value)

        tx = self._commit()
        logger.info("mock_vc_status_updated", vc_id=vc_id, status=status.value, tx_hash=tx.tx_hash)
        return tx

    def register_vc_schema(self, vc_schema: VcSchema) -> None:
        """Register a VC schema."""
        self._require_new(self._vc_schemas, vc_schema.id, "VC schema")
        self._vc_schemas[vc_schema.id] = vc_schema_to_chain(vc_schema)
        self._commit()
        logger.info("mock_vc_schema_registered", schema_id=vc_schema.id)

    def get_vc_schema(self, schema_id: str) -> VcSchema:
        """Get a VC schema."""
        return vc_schema_from_chain(self._require(self._vc_schemas, schema_id, "VC schema"))

    # =========================================================================
    # ZKP
    # =========================================================================

    def register_zkp_credential_schema(self, schema: ZkpCredentialSchema) -> None:
        """Register a ZKP credential schema."""
        self._require_new(self._zkp_schemas, schema.id, "ZKP credential schema")
        self._zkp_schemas[schema.id] = zkp_credential_schema_to_chain(schema)
        self._commit()
        logger.info("mock_zkp_credential_schema_registered", schema_id=schema.id)

    def get_zkp_credential_schema(self, schema_id: str) -> ZkpCredentialSchema:
        """Get a ZKP credential schema."""
        record = self._require(self._zkp_schemas, schema_id, "ZKP credential schema")
        return zkp_credential_schema_from_chain(record)

    def register_zkp_credential_definition(self, definition: ZkpCredentialDefinition) -> None:
        """Register a ZKP credential definition."""
        self._require_new(self._zkp_definitions, definition.id, "ZKP credential definition")
        self._zkp_definitions[definition.id] = zkp_credential_definition_to_chain(definition)
        self._commit()
        logger.info("mock_zkp_credential_definition_registered", definition_id=definition.id)

    def get_zkp_credential_definition(self, definition_id: str) -> ZkpCredentialDefinition:
        """Get a ZKP credential definition."""
        record = self._require(self._zkp_definitions, definition_id, "ZKP credential definition")
        return zkp_credential_definition_from_chain(record)

    # =========================================================================
    # Test Utilities
    # =========================================================================

    def get_terminated_time(self, did: str) -> str | None:
        """Get the recorded termination time of a DID Document."""
        return self._terminated_at.get(did)

    def clear_all(self) -> None:
        """Clear all mock data (for testing)."""
        self._did_docs.clear()
        self._terminated_at.clear()
        self._vc_metas.clear()
        self._vc_schemas.clear()
        self._zkp_schemas.clear()
        self._zkp_definitions.clear()
        self._block_number = 1000
        logger.debug("mock_ledger_cleared")

    def get_stats(self) -> dict[str, int]:
        """Get mock storage statistics."""
        return {
            "did_docs": len(self._did_docs),
            "vc_metas": len(self._vc_metas),
            "vc_schemas": len(self._vc_schemas),
            "zkp_credential_schemas": len(self._zkp_schemas),
            "zkp_credential_definitions": len(self._zkp_definitions),
        }
