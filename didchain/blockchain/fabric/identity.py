"""
Gateway Identity
================

Client identity, transaction signer and TLS channel for the permissioned
ledger gateway. All key material is read once at startup.

Version: 0.1.0
"""

from dataclasses import dataclass
from pathlib import Path

import grpc
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519

from didchain.config import FabricSettings
from didchain.errors import ConfigurationError
from didchain.logging import get_logger

logger = get_logger(__name__)


def _read_bytes(path: Path, what: str) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise ConfigurationError(f"Cannot read {what} '{path}': {e}") from e


@dataclass(frozen=True)
class X509Identity:
    """MSP-scoped X.509 client identity."""

    msp_id: str
    certificate: x509.Certificate

    @property
    def credentials(self) -> bytes:
        """PEM-encoded certificate, as sent in the signature header."""
        return self.certificate.public_bytes(serialization.Encoding.PEM)


class PrivateKeySigner:
    """Signs transaction messages with the client's private key."""

    def __init__(self, private_key: ec.EllipticCurvePrivateKey | ed25519.Ed25519PrivateKey) -> None:
        self._private_key = private_key

    def __call__(self, message: bytes) -> bytes:
        return self.sign(message)

    def sign(self, message: bytes) -> bytes:
        """
        Sign a message.

        EC keys produce a DER-encoded ECDSA signature over SHA-256;
        Ed25519 keys sign the message directly.
        """
        if isinstance(self._private_key, ed25519.Ed25519PrivateKey):
            return self._private_key.sign(message)
        return self._private_key.sign(message, ec.ECDSA(hashes.SHA256()))


def load_identity(msp_id: str, certificate_path: Path) -> X509Identity:
    """
    Load the client X.509 identity.

    Raises:
        ConfigurationError: If the certificate is missing or not PEM
    """
    pem = _read_bytes(certificate_path, "certificate")
    try:
        certificate = x509.load_pem_x509_certificate(pem)
    except ValueError as e:
        raise ConfigurationError(f"Invalid certificate '{certificate_path}': {e}") from e
    return X509Identity(msp_id=msp_id, certificate=certificate)


def load_signer(private_key_path: Path) -> PrivateKeySigner:
    """
    Load the transaction signer from a PEM private key.

    Raises:
        ConfigurationError: If the key is missing, malformed or unsupported
    """
    pem = _read_bytes(private_key_path, "private key")
    try:
        private_key = serialization.load_pem_private_key(pem, password=None)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(f"Invalid private key '{private_key_path}': {e}") from e

    if not isinstance(private_key, (ec.EllipticCurvePrivateKey, ed25519.Ed25519PrivateKey)):
        raise ConfigurationError(
            f"Unsupported private key type: {type(private_key).__name__}"
        )
    return PrivateKeySigner(private_key)


def new_grpc_channel(settings: FabricSettings) -> grpc.Channel:
    """
    Open the TLS channel to the gateway peer.

    The peer's certificate is validated against the configured trust file
    and the expected host name is the configured override authority.
    """
    root_certificates = _read_bytes(settings.tls_file_path, "TLS trust file")
    credentials = grpc.ssl_channel_credentials(root_certificates=root_certificates)
    channel = grpc.secure_channel(
        settings.server_endpoint,
        credentials,
        options=[("grpc.ssl_target_name_override", settings.override_authority)],
    )
    logger.info(
        "gateway_channel_opened",
        endpoint=settings.server_endpoint,
        authority=settings.override_authority,
    )
    return channel
