"""
EVM Contract Records
====================

Tuple records mirroring the OpenDID contract structs.

Field order is the ABI component order, so web3 encodes these positionally
and decoded outputs (plain tuples) can be rebuilt with ``Record(*raw)``.

Version: 0.1.0
"""

from typing import NamedTuple


class VerificationMethodRecord(NamedTuple):
    id: str
    keyType: int
    controller: str
    publicKeyMultibase: str
    authType: int


class ServiceRecord(NamedTuple):
    id: str
    serviceType: str
    serviceEndpoint: list[str]


class DocumentRecord(NamedTuple):
    context: list[str]
    id: str
    controller: str
    created: str
    updated: str
    versionId: str
    deactivated: bool
    verificationMethod: list[VerificationMethodRecord]
    assertionMethod: list[str]
    authentication: list[str]
    keyAgreement: list[str]
    capabilityInvocation: list[str]
    capabilityDelegation: list[str]
    services: list[ServiceRecord]


class DocumentAndStatusRecord(NamedTuple):
    diddoc: DocumentRecord
    status: int


class ProviderRecord(NamedTuple):
    did: str
    certVcReference: str


class CredentialSchemaRecord(NamedTuple):
    id: str
    credentialSchemaType: str


class VcMetaRecord(NamedTuple):
    id: str
    issuer: ProviderRecord
    subject: str
    credentialSchema: CredentialSchemaRecord
    status: str
    issuanceDate: str
    validFrom: str
    validUntil: str
    formatVersion: str
    language: str


class MetaDataRecord(NamedTuple):
    formatVersion: str
    language: str


class SchemaClaimItemRecord(NamedTuple):
    caption: str
    format: str
    hideValue: bool
    id: str
    type: str


class ClaimNamespaceRecord(NamedTuple):
    id: str
    name: str
    ref: str


class VcSchemaClaimRecord(NamedTuple):
    items: list[SchemaClaimItemRecord]
    namespace: ClaimNamespaceRecord


class CredentialSubjectRecord(NamedTuple):
    claims: list[VcSchemaClaimRecord]


class VcSchemaRecord(NamedTuple):
    id: str
    schema: str
    title: str
    description: str
    metadata: MetaDataRecord
    credentialSubject: CredentialSubjectRecord


class InternationalizationRecord(NamedTuple):
    languageType: str
    value: str


class AttributeItemRecord(NamedTuple):
    label: str
    caption: str
    type: str
    i18n: list[InternationalizationRecord]


class AttributeNamespaceRecord(NamedTuple):
    id: str
    name: str
    ref: str


class AttributeTypeRecord(NamedTuple):
    namespace: AttributeNamespaceRecord
    items: list[AttributeItemRecord]


class ZkpCredentialSchemaRecord(NamedTuple):
    id: str
    name: str
    version: str
    attrNames: list[str]
    attrTypes: list[AttributeTypeRecord]
    tag: str


class CredentialDefinitionRecord(NamedTuple):
    id: str
    schemaId: str
    ver: str
    type: str
    value: str
    tag: str
