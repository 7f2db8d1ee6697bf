"""
DID Models
==========

DID Document records and the signed registration envelope.

Version: 0.1.0
"""

from enum import Enum
from typing import Any
from urllib.parse import parse_qs

from pydantic import BaseModel, Field

from didchain.errors import LedgerArgumentError
from didchain.models.common import DomainModel, Provider


class DidDocStatus(str, Enum):
    """Lifecycle status of a DID Document."""

    ACTIVATED = "activated"
    DEACTIVATED = "deactivated"
    REVOKED = "revoked"
    TERMINATED = "terminated"


class RoleType(str, Enum):
    """Role of the entity registering a DID Document."""

    TAS = "Tas"
    WALLET = "Wallet"
    ISSUER = "Issuer"
    VERIFIER = "Verifier"
    WALLET_PROVIDER = "WalletProvider"
    APP_PROVIDER = "AppProvider"
    LIST_PROVIDER = "ListProvider"
    OP_PROVIDER = "OpProvider"
    KYC_PROVIDER = "KycProvider"
    NOTIFICATION_PROVIDER = "NotificationProvider"
    LOG_PROVIDER = "LogProvider"
    PORTAL_PROVIDER = "PortalProvider"
    DELEGATION_PROVIDER = "DelegationProvider"
    STORAGE_PROVIDER = "StorageProvider"
    BACKUP_PROVIDER = "BackupProvider"
    ETC = "Etc"


class VerificationMethod(DomainModel):
    """A public key and its usage metadata."""

    id: str
    type: str | None = Field(default=None, description="Key type, e.g. Secp256r1VerificationKey2018")
    controller: str
    public_key_multibase: str = Field(..., alias="publicKeyMultibase")
    auth_type: int = Field(default=0, alias="authType")


class Service(DomainModel):
    """A service endpoint bound to a DID."""

    id: str
    type: str
    service_endpoint: list[str] = Field(default_factory=list, alias="serviceEndpoint")


class DidDocument(DomainModel):
    """Decentralized Identifier Document."""

    context: list[str] = Field(
        default_factory=lambda: ["https://www.w3.org/ns/did/v1"],
        alias="@context",
    )
    id: str = Field(..., description="DID identifier")
    controller: str
    created: str
    updated: str
    version_id: str = Field(..., alias="versionId")
    deactivated: bool = False

    verification_method: list[VerificationMethod] | None = Field(
        default=None, alias="verificationMethod"
    )
    assertion_method: list[str] | None = Field(default=None, alias="assertionMethod")
    authentication: list[str] | None = None
    key_agreement: list[str] | None = Field(default=None, alias="keyAgreement")
    capability_invocation: list[str] | None = Field(default=None, alias="capabilityInvocation")
    capability_delegation: list[str] | None = Field(default=None, alias="capabilityDelegation")
    service: list[Service] | None = None


class DidDocAndStatus(BaseModel):
    """A DID Document together with its ledger status."""

    document: DidDocument
    status: DidDocStatus


class InvokedDidDoc(DomainModel):
    """
    Signed DID Document registration envelope.

    ``did_doc`` carries the JSON-encoded DID Document exactly as it was
    signed; the proof covers those bytes.
    """

    did_doc: str = Field(..., alias="didDoc")
    controller: Provider
    nonce: str
    proof: dict[str, Any] | None = None


class DidKeyUrl(BaseModel):
    """Parsed DID key URL: ``did:method:id?versionId=N#key-id``."""

    did: str
    version_id: str | None = None
    key_id: str | None = None

    @classmethod
    def parse(cls, url: str) -> "DidKeyUrl":
        """
        Parse a DID key URL.

        Args:
            url: DID, optionally with ``versionId`` query and key fragment

        Returns:
            DidKeyUrl

        Raises:
            LedgerArgumentError: If the value is not a DID
        """
        remainder, _, fragment = url.partition("#")
        did, _, query = remainder.partition("?")

        parts = did.split(":")
        if len(parts) < 3 or parts[0] != "did" or not all(parts[1:]):
            raise LedgerArgumentError(f"Invalid DID key URL: {url!r}")

        version_id = None
        if query:
            values = parse_qs(query).get("versionId")
            if values:
                version_id = values[-1]

        return cls(did=did, version_id=version_id, key_id=fragment or None)
