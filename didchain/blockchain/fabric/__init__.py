"""
Fabric Backend
==============

OpenDID chaincode access through pooled gateway connections.

Usage:
    from didchain.blockchain.fabric import FabricLedgerClient, set_gateway_connector
    from didchain.config import get_fabric_settings

    set_gateway_connector(my_gateway_library_connect)
    client = FabricLedgerClient.from_settings(get_fabric_settings())
"""

from didchain.blockchain.fabric.client import FabricLedgerClient, payload_to_result
from didchain.blockchain.fabric.gateway import (
    Contract,
    Gateway,
    GatewayConnector,
    GatewayDeadlines,
    GatewayFactory,
    GatewayOptions,
    Network,
    get_gateway_connector,
    set_gateway_connector,
)
from didchain.blockchain.fabric.identity import (
    PrivateKeySigner,
    X509Identity,
    load_identity,
    load_signer,
    new_grpc_channel,
)
from didchain.blockchain.fabric.pool import GatewayPool


__all__ = [
    "FabricLedgerClient",
    "payload_to_result",
    # Gateway
    "Contract",
    "Gateway",
    "GatewayConnector",
    "GatewayDeadlines",
    "GatewayFactory",
    "GatewayOptions",
    "Network",
    "get_gateway_connector",
    "set_gateway_connector",
    # Identity
    "PrivateKeySigner",
    "X509Identity",
    "load_identity",
    "load_signer",
    "new_grpc_channel",
    # Pool
    "GatewayPool",
]
