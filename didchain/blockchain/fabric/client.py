"""
Fabric Ledger Client
====================

`LedgerClient` implementation backed by OpenDID chaincode on a permissioned
ledger, reached through pooled gateway connections.

Version: 0.1.0
"""

from datetime import datetime
from typing import Any

import grpc

from didchain.blockchain.client import LedgerClient
from didchain.blockchain.codec import parse_did_document
from didchain.blockchain.fabric.codec import (
    did_doc_and_status_from_payload,
    did_document_to_record,
    vc_meta_from_payload,
    vc_meta_to_record,
    vc_schema_from_payload,
    vc_schema_to_record,
    zkp_credential_definition_from_payload,
    zkp_credential_definition_to_record,
    zkp_credential_schema_from_payload,
    zkp_credential_schema_to_record,
)
from didchain.blockchain.fabric.gateway import (
    GatewayConnector,
    GatewayDeadlines,
    GatewayFactory,
    GatewayOptions,
    get_gateway_connector,
)
from didchain.blockchain.fabric.identity import load_identity, load_signer, new_grpc_channel
from didchain.blockchain.fabric.pool import GatewayPool
from didchain.config import FabricSettings, LedgerMode
from didchain.errors import LedgerError, TransactionError
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


def payload_to_result(payload: bytes) -> TransactionResult:
    """Summarize a submit response; the gateway exposes no transaction hash."""
    status = payload.decode("utf-8", errors="replace") if payload else None
    return TransactionResult(status_code=200, status=status or None, tx_hash=None)


class FabricLedgerClient(LedgerClient):
    """
    Ledger client for the permissioned gateway ledger.

    Every operation borrows one gateway from the pool, runs one evaluate
    (query) or submit (write) call and returns the gateway whether or not
    the call succeeded.

    Example:
        >>> client = FabricLedgerClient.from_settings(get_fabric_settings(), connector)
        >>> client.get_vc_schema("https://example.com/schema.json")
    """

    def __init__(
        self,
        pool: GatewayPool,
        network_name: str,
        chaincode_name: str,
        channel: grpc.Channel | None = None,
        strict_status_decoding: bool = False,
    ) -> None:
        self._pool = pool
        self._network_name = network_name
        self._chaincode_name = chaincode_name
        self._channel = channel
        self._strict = strict_status_decoding

    @classmethod
    def from_settings(
        cls,
        settings: FabricSettings,
        connector: GatewayConnector | None = None,
        strict_status_decoding: bool = False,
        prepare: bool = True,
    ) -> "FabricLedgerClient":
        """
        Build a client from configuration.

        Loads identity and signer key material, opens the TLS channel and
        creates the gateway pool. Any missing key material fails here.

        Args:
            settings: Fabric settings
            connector: Gateway connect function; defaults to the registered one
            strict_status_decoding: Raise on unmapped DID Document status codes
            prepare: Pre-create ``pool_min_idle`` gateways

        Returns:
            FabricLedgerClient
        """
        connector = connector or get_gateway_connector()
        identity = load_identity(settings.msp_id, settings.certificate_file_path)
        signer = load_signer(settings.private_key_file_path)
        channel = new_grpc_channel(settings)

        options = GatewayOptions(
            identity=identity,
            signer=signer,
            channel=channel,
            deadlines=GatewayDeadlines.uniform(settings.gateway_timeout),
        )
        pool = GatewayPool(
            GatewayFactory(options, connector),
            max_total=settings.pool_max_total,
            min_idle=settings.pool_min_idle,
            max_idle=settings.pool_max_idle,
        )
        client = cls(
            pool,
            network_name=settings.network_name,
            chaincode_name=settings.chaincode_name,
            channel=channel,
            strict_status_decoding=strict_status_decoding,
        )
        if prepare:
            try:
                pool.prepare()
            except LedgerError:
                client.close()
                raise

        logger.info(
            "fabric_ledger_client_initialized",
            endpoint=settings.server_endpoint,
            msp_id=settings.msp_id,
            network=settings.network_name,
            chaincode=settings.chaincode_name,
        )
        return client

    @property
    def mode(self) -> LedgerMode:
        return LedgerMode.FABRIC

    @property
    def pool(self) -> GatewayPool:
        return self._pool

    def health_check(self) -> dict[str, Any]:
        stats = self._pool.stats()
        return {
            "status": "unhealthy" if stats["closed"] else "healthy",
            "mode": self.mode.value,
            "network": self._network_name,
            "chaincode": self._chaincode_name,
            "pool": stats,
        }

    def close(self) -> None:
        """Close the gateway pool and the shared channel."""
        self._pool.close()
        if self._channel is not None:
            self._channel.close()
            self._channel = None

    def _send(self, function: str, *args: str, query: bool = False) -> bytes:
        """
        Run one chaincode call on a pooled gateway.

        Raises:
            LedgerConnectionError: If no gateway could be borrowed
            TransactionError: If the evaluate or submit call failed
        """
        gateway = self._pool.borrow()
        try:
            contract = gateway.get_network(self._network_name).get_contract(self._chaincode_name)
            if query:
                return contract.evaluate_transaction(function, *args)
            return contract.submit_transaction(function, *args)
        except LedgerError:
            raise
        except Exception as e:
            logger.error("fabric_call_failed", function=function, query=query, error=str(e))
            raise TransactionError(f"Chaincode call {function} failed: {e}") from e
        finally:
            self._pool.give_back(gateway)

    # =========================================================================
    # DID Documents
    # =========================================================================

    def register_did_doc(self, invoked_did_doc: InvokedDidDoc, role_type: RoleType) -> None:
        document = parse_did_document(invoked_did_doc)
        self._send("RegistDidDoc", did_document_to_record(document))
        logger.info("did_doc_registered", did=document.id, role_type=role_type.value)

    def get_did_doc(self, did_key_url: str) -> DidDocAndStatus:
        key_url = DidKeyUrl.parse(did_key_url)
        payload = self._send("GetDidDoc", key_url.did, query=True)
        return did_doc_and_status_from_payload(payload, strict=self._strict)

    def _update_did_doc_status(
        self,
        did_key_url: str,
        status: DidDocStatus,
        terminated_time: datetime | None,
    ) -> TransactionResult:
        key_url = DidKeyUrl.parse(did_key_url)

        if terminated_time is not None:
            payload = self._send(
                "UpdateDidDocStatusRevocation",
                key_url.did,
                status.value,
                terminated_time.isoformat(),
            )
        else:
            version_id = "" if status == DidDocStatus.REVOKED else (key_url.version_id or "")
            payload = self._send(
                "UpdateDidDocStatusInService",
                key_url.did,
                status.value,
                version_id,
            )

        logger.info("did_doc_status_updated", did=key_url.did, status=status.value)
        return payload_to_result(payload)

    # =========================================================================
    # Verifiable Credentials
    # =========================================================================

    def register_vc_meta(self, vc_meta: VcMeta) -> None:
        self._send("RegistVcMetadata", vc_meta_to_record(vc_meta))
        logger.info("vc_meta_registered", vc_id=vc_meta.id)

    def get_vc_meta(self, vc_id: str) -> VcMeta:
        return vc_meta_from_payload(self._send("GetVcMetadata", vc_id, query=True))

    def update_vc_status(self, vc_id: str, status: VcStatus) -> TransactionResult:
        payload = self._send("UpdateVcStatus", vc_id, status.value)
        logger.info("vc_status_updated", vc_id=vc_id, status=status.value)
        return payload_to_result(payload)

    def register_vc_schema(self, vc_schema: VcSchema) -> None:
        self._send("RegistVcSchema", vc_schema_to_record(vc_schema))
        logger.info("vc_schema_registered", schema_id=vc_schema.id)

    def get_vc_schema(self, schema_id: str) -> VcSchema:
        return vc_schema_from_payload(self._send("GetVcSchema", schema_id, query=True))

    # =========================================================================
    # ZKP
    # =========================================================================

    def register_zkp_credential_schema(self, schema: ZkpCredentialSchema) -> None:
        self._send("RegistZKPCredential", zkp_credential_schema_to_record(schema))
        logger.info("zkp_credential_schema_registered", schema_id=schema.id)

    def get_zkp_credential_schema(self, schema_id: str) -> ZkpCredentialSchema:
        payload = self._send("GetZKPCredential", schema_id, query=True)
        return zkp_credential_schema_from_payload(payload)

    def register_zkp_credential_definition(self, definition: ZkpCredentialDefinition) -> None:
        self._send("RegistZKPCredentialDefinition", zkp_credential_definition_to_record(definition))
        logger.info("zkp_credential_definition_registered", definition_id=definition.id)

    def get_zkp_credential_definition(self, definition_id: str) -> ZkpCredentialDefinition:
        payload = self._send("GetZKPCredentialDefinition", definition_id, query=True)
        return zkp_credential_definition_from_payload(payload)
