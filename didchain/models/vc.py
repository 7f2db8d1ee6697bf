"""
VC Models
=========

Verifiable Credential metadata and VC schema records.

Version: 0.1.0
"""

from enum import Enum

from pydantic import Field

from didchain.models.common import DomainModel, Provider


class VcStatus(str, Enum):
    """Verifiable Credential status on the ledger."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    REVOKED = "REVOKED"


class CredentialSchemaRef(DomainModel):
    """Reference from VC metadata to its credential schema."""

    id: str
    type: str


class VcMeta(DomainModel):
    """On-ledger summary of an off-chain Verifiable Credential."""

    id: str
    issuer: Provider
    subject: str
    credential_schema: CredentialSchemaRef = Field(..., alias="credentialSchema")
    status: str = VcStatus.ACTIVE.value
    issuance_date: str = Field(..., alias="issuanceDate")
    valid_from: str = Field(..., alias="validFrom")
    valid_until: str = Field(..., alias="validUntil")
    format_version: str = Field(..., alias="formatVersion")
    language: str


# =============================================================================
# VC Schema
# =============================================================================


class SchemaMetadata(DomainModel):
    """Schema format metadata."""

    format_version: str = Field(..., alias="formatVersion")
    language: str


class ClaimNamespace(DomainModel):
    """Namespace grouping a set of claims."""

    id: str
    name: str
    ref: str = ""


class ClaimDef(DomainModel):
    """A single claim definition; list order is display order."""

    id: str
    caption: str
    type: str
    format: str
    hide_value: bool = Field(default=False, alias="hideValue")


class SchemaClaims(DomainModel):
    """Claims declared under one namespace."""

    namespace: ClaimNamespace
    items: list[ClaimDef] = Field(default_factory=list)


class SchemaCredentialSubject(DomainModel):
    """Credential subject section of a VC schema."""

    claims: list[SchemaClaims] = Field(default_factory=list)


class VcSchema(DomainModel):
    """Verifiable Credential schema."""

    id: str = Field(..., alias="@id")
    schema_uri: str = Field(..., alias="@schema")
    title: str
    description: str
    metadata: SchemaMetadata
    credential_subject: SchemaCredentialSubject = Field(
        default_factory=SchemaCredentialSubject, alias="credentialSubject"
    )
