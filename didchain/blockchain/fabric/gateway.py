"""
Gateway Factory
===============

Creates, validates and destroys pooled gateway connections.

The gateway client library itself is an external collaborator: it is
described here by the `Gateway`, `Network` and `Contract` protocols and
produced by a `GatewayConnector` supplied by the deployment.

Version: 0.1.0
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

import grpc

from didchain.blockchain.fabric.identity import PrivateKeySigner, X509Identity
from didchain.errors import ConfigurationError
from didchain.logging import get_logger

logger = get_logger(__name__)

DEFAULT_DEADLINE = 7.0


class Contract(Protocol):
    """Chaincode handle."""

    def evaluate_transaction(self, name: str, *args: str) -> bytes: ...

    def submit_transaction(self, name: str, *args: str) -> bytes: ...


class Network(Protocol):
    """Channel handle."""

    def get_contract(self, chaincode_name: str) -> Contract: ...


class Gateway(Protocol):
    """Connected gateway session."""

    def get_network(self, network_name: str) -> Network: ...

    def close(self) -> None: ...


@dataclass(frozen=True)
class GatewayDeadlines:
    """Per-category call deadlines, in seconds."""

    evaluate: float = DEFAULT_DEADLINE
    endorse: float = DEFAULT_DEADLINE
    submit: float = DEFAULT_DEADLINE
    commit_status: float = DEFAULT_DEADLINE

    @classmethod
    def uniform(cls, seconds: float) -> "GatewayDeadlines":
        return cls(evaluate=seconds, endorse=seconds, submit=seconds, commit_status=seconds)


@dataclass(frozen=True)
class GatewayOptions:
    """Everything a connector needs to open one gateway session."""

    identity: X509Identity
    signer: PrivateKeySigner
    channel: grpc.Channel
    deadlines: GatewayDeadlines = field(default_factory=GatewayDeadlines)
    hash_algorithm: str = "SHA256"


GatewayConnector = Callable[[GatewayOptions], Gateway]


# Connector used when a Fabric client is built from settings alone
_connector: GatewayConnector | None = None


def set_gateway_connector(connector: GatewayConnector | None) -> None:
    """
    Register the gateway client library's connect function.

    Args:
        connector: Callable opening a gateway from `GatewayOptions`, or None to clear
    """
    global _connector
    _connector = connector


def get_gateway_connector() -> GatewayConnector:
    """
    Get the registered gateway connector.

    Raises:
        ConfigurationError: If no connector has been registered
    """
    if _connector is None:
        raise ConfigurationError(
            "No gateway connector registered; call set_gateway_connector() at startup"
        )
    return _connector


class GatewayFactory:
    """
    Lifecycle hooks for pooled gateways.

    Every gateway shares one identity, one signer and one TLS channel;
    only the gateway session itself is per-connection.
    """

    def __init__(self, options: GatewayOptions, connector: GatewayConnector) -> None:
        self.options = options
        self._connector = connector

    def create(self) -> Gateway:
        """Open a new gateway session."""
        gateway = self._connector(self.options)
        logger.debug("gateway_created", msp_id=self.options.identity.msp_id)
        return gateway

    def validate(self, gateway: Any) -> bool:
        """Check that an idle gateway is still usable."""
        return not getattr(gateway, "closed", False)

    def destroy(self, gateway: Gateway) -> None:
        """Close a gateway session; close failures are logged, not raised."""
        try:
            gateway.close()
        except Exception as e:
            logger.warning("gateway_close_failed", error=str(e))
        else:
            logger.debug("gateway_destroyed")
