"""
Blockchain Module
=================

Backend-agnostic access to DID/VC records on a ledger.

Supports:
- Mock (development/testing)
- EVM networks (JSON-RPC, OpenDID contract)
- Fabric-style permissioned ledgers (pooled gateway, OpenDID chaincode)

Features:
- DID Document registration, resolution and status changes
- Verifiable Credential metadata and schemas
- ZKP credential schemas and credential definitions

Usage:
    from didchain.blockchain import get_ledger_client

    client = get_ledger_client()

    # Resolve a DID Document
    result = client.get_did_doc("did:omn:issuer?versionId=1")

    # Revoke VC metadata
    client.update_vc_status("urn:uuid:...", VcStatus.REVOKED)
"""

from didchain.blockchain.client import (
    LedgerClient,
    create_ledger_client,
    get_ledger_client,
    reset_ledger_client,
    set_ledger_client,
)
from didchain.blockchain.mock import MockLedgerClient
from didchain.blockchain.evm import EvmLedgerClient, EvmTransactionEngine
from didchain.blockchain.fabric import FabricLedgerClient, GatewayPool, set_gateway_connector

__all__ = [
    # Client
    "LedgerClient",
    "create_ledger_client",
    "get_ledger_client",
    "set_ledger_client",
    "reset_ledger_client",
    # Implementations
    "MockLedgerClient",
    "EvmLedgerClient",
    "EvmTransactionEngine",
    "FabricLedgerClient",
    "GatewayPool",
    "set_gateway_connector",
]
