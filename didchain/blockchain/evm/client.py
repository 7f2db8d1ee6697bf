"""
EVM Ledger Client
=================

`LedgerClient` implementation backed by the OpenDID contract on an EVM
network.

Version: 0.1.0
"""

from datetime import datetime
from typing import Any

from eth_account.signers.local import LocalAccount
from web3 import Web3

from didchain.blockchain.client import LedgerClient
from didchain.blockchain.codec import parse_did_document
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
from didchain.blockchain.evm.engine import EvmTransactionEngine, Web3Factory
from didchain.config import EvmSettings, LedgerMode
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


def receipt_to_result(receipt: Any) -> TransactionResult:
    """Summarize a transaction receipt."""
    return TransactionResult(
        status_code=200,
        status=hex(int(receipt["status"])),
        tx_hash=Web3.to_hex(receipt["transactionHash"]),
    )


class EvmLedgerClient(LedgerClient):
    """
    Ledger client for EVM networks.

    Each operation converts its input with the EVM codec, runs exactly one
    contract call through the transaction engine and converts the output
    back. Input validation and conversion finish before the engine opens
    a connection.

    Example:
        >>> client = EvmLedgerClient(get_evm_settings())
        >>> client.get_vc_meta("urn:uuid:...")
    """

    def __init__(
        self,
        settings: EvmSettings,
        abi: list[dict[str, Any]] | None = None,
        account: LocalAccount | None = None,
        web3_factory: Web3Factory | None = None,
        strict_status_decoding: bool = False,
        engine: EvmTransactionEngine | None = None,
    ) -> None:
        self._engine = engine or EvmTransactionEngine(
            settings,
            abi=abi,
            account=account,
            web3_factory=web3_factory,
        )
        self._strict = strict_status_decoding

        logger.info(
            "evm_ledger_client_initialized",
            network_url=settings.network_url,
            chain_id=settings.chain_id,
            contract_address=self._engine.contract_address,
        )

    @property
    def mode(self) -> LedgerMode:
        return LedgerMode.EVM

    @property
    def engine(self) -> EvmTransactionEngine:
        return self._engine

    def health_check(self) -> dict[str, Any]:
        result = self._engine.health_check()
        result["mode"] = self.mode.value
        return result

    # =========================================================================
    # DID Documents
    # =========================================================================

    def register_did_doc(self, invoked_did_doc: InvokedDidDoc, role_type: RoleType) -> None:
        document = parse_did_document(invoked_did_doc)
        record = did_document_to_chain(document)

        self._engine.execute("registDidDoc", record)
        logger.info("did_doc_registered", did=document.id, role_type=role_type.value)

    def get_did_doc(self, did_key_url: str) -> DidDocAndStatus:
        key_url = DidKeyUrl.parse(did_key_url)
        raw = self._engine.execute("getDidDoc", key_url.did, read_only=True)
        return did_doc_and_status_from_chain(raw, strict=self._strict)

    def _update_did_doc_status(
        self,
        did_key_url: str,
        status: DidDocStatus,
        terminated_time: datetime | None,
    ) -> TransactionResult:
        key_url = DidKeyUrl.parse(did_key_url)

        if terminated_time is not None:
            receipt = self._engine.execute(
                "updateDidDocStatusRevocation",
                key_url.did,
                status.value,
                terminated_time.isoformat(),
            )
        else:
            version_id = "" if status == DidDocStatus.REVOKED else (key_url.version_id or "")
            receipt = self._engine.execute(
                "updateDidDocStatusInService",
                key_url.did,
                status.value,
                version_id,
            )

        result = receipt_to_result(receipt)
        logger.info(
            "did_doc_status_updated",
            did=key_url.did,
            status=status.value,
            tx_hash=result.tx_hash,
        )
        return result

    # =========================================================================
    # Verifiable Credentials
    # =========================================================================

    def register_vc_meta(self, vc_meta: VcMeta) -> None:
        self._engine.execute("registVcMetaData", vc_meta_to_chain(vc_meta))
        logger.info("vc_meta_registered", vc_id=vc_meta.id)

    def get_vc_meta(self, vc_id: str) -> VcMeta:
        raw = self._engine.execute("getVcmetaData", vc_id, read_only=True)
        return vc_meta_from_chain(raw)

    def update_vc_status(self, vc_id: str, status: VcStatus) -> TransactionResult:
        receipt = self._engine.execute("updateVcStats", vc_id, status.value)
        result = receipt_to_result(receipt)
        logger.info("vc_status_updated", vc_id=vc_id, status=status.value, tx_hash=result.tx_hash)
        return result

    def register_vc_schema(self, vc_schema: VcSchema) -> None:
        self._engine.execute("registVcSchema", vc_schema_to_chain(vc_schema))
        logger.info("vc_schema_registered", schema_id=vc_schema.id)

    def get_vc_schema(self, schema_id: str) -> VcSchema:
        raw = self._engine.execute("getVcSchema", schema_id, read_only=True)
        return vc_schema_from_chain(raw)

    # =========================================================================
    # ZKP
    # =========================================================================

    def register_zkp_credential_schema(self, schema: ZkpCredentialSchema) -> None:
        self._engine.execute("registZKPCredential", zkp_credential_schema_to_chain(schema))
        logger.info("zkp_credential_schema_registered", schema_id=schema.id)

    def get_zkp_credential_schema(self, schema_id: str) -> ZkpCredentialSchema:
        raw = self._engine.execute("getZKPCredential", schema_id, read_only=True)
        return zkp_credential_schema_from_chain(raw)

    def register_zkp_credential_definition(self, definition: ZkpCredentialDefinition) -> None:
        record = zkp_credential_definition_to_chain(definition)
        self._engine.execute("registZKPCredentialDefinition", record)
        logger.info("zkp_credential_definition_registered", definition_id=definition.id)

    def get_zkp_credential_definition(self, definition_id: str) -> ZkpCredentialDefinition:
        raw = self._engine.execute("getZKPCredentialDefinition", definition_id, read_only=True)
        return zkp_credential_definition_from_chain(raw)
