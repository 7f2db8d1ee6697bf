"""
EVM Codec
=========

Converts domain records to OpenDID contract tuples and back.

Writes materialize every optional list as an empty list because the ABI
encoder cannot represent a missing dynamic array. Reads accept the plain
tuples web3 returns for struct outputs.

Version: 0.1.0
"""

from collections.abc import Mapping
from typing import Any, TypeVar

from didchain.blockchain.codec import (
    as_list,
    converts,
    decode_attribute_type,
    decode_did_doc_status,
    decode_key_type,
    dump_value_blob,
    encode_attribute_type,
    encode_key_type,
    i18n_from_pairs,
    i18n_to_pairs,
    load_value_blob,
    require_bool,
)
from didchain.blockchain.evm.records import (
    AttributeItemRecord,
    AttributeNamespaceRecord,
    AttributeTypeRecord,
    ClaimNamespaceRecord,
    CredentialDefinitionRecord,
    CredentialSchemaRecord,
    CredentialSubjectRecord,
    DocumentAndStatusRecord,
    DocumentRecord,
    InternationalizationRecord,
    MetaDataRecord,
    ProviderRecord,
    SchemaClaimItemRecord,
    ServiceRecord,
    VcMetaRecord,
    VcSchemaClaimRecord,
    VcSchemaRecord,
    VerificationMethodRecord,
    ZkpCredentialSchemaRecord,
)
from didchain.errors import ConversionError
from didchain.models import (
    AttributeDef,
    AttributeNamespace,
    AttributeType,
    ClaimDef,
    ClaimNamespace,
    CredentialDefinitionType,
    CredentialSchemaRef,
    DidDocAndStatus,
    DidDocument,
    Provider,
    SchemaClaims,
    SchemaCredentialSubject,
    SchemaMetadata,
    Service,
    VcMeta,
    VcSchema,
    VerificationMethod,
    ZkpCredentialDefinition,
    ZkpCredentialSchema,
)

R = TypeVar("R")


def _as_record(record_type: type[R], raw: Any) -> R:
    """Coerce a decoded ABI tuple (or mapping) into a record."""
    if isinstance(raw, record_type):
        return raw

    fields: tuple[str, ...] = record_type._fields  # type: ignore[attr-defined]
    try:
        if isinstance(raw, Mapping):
            return record_type(**{name: raw[name] for name in fields})
        return record_type(*raw)
    except (KeyError, TypeError) as e:
        raise ConversionError(
            f"Cannot decode {record_type.__name__} from {type(raw).__name__}: {e}"
        ) from e


# =============================================================================
# DID Document
# =============================================================================


def did_document_to_chain(document: DidDocument) -> DocumentRecord:
    """Convert a DID Document to the contract ``Document`` struct."""
    verification_methods = [
        VerificationMethodRecord(
            id=method.id,
            keyType=encode_key_type(method.type),
            controller=method.controller,
            publicKeyMultibase=method.public_key_multibase,
            authType=method.auth_type,
        )
        for method in as_list(document.verification_method)
    ]
    services = [
        ServiceRecord(
            id=service.id,
            serviceType=service.type,
            serviceEndpoint=as_list(service.service_endpoint),
        )
        for service in as_list(document.service)
    ]

    return DocumentRecord(
        context=as_list(document.context),
        id=document.id,
        controller=document.controller,
        created=document.created,
        updated=document.updated,
        versionId=document.version_id,
        deactivated=document.deactivated,
        verificationMethod=verification_methods,
        assertionMethod=as_list(document.assertion_method),
        authentication=as_list(document.authentication),
        keyAgreement=as_list(document.key_agreement),
        capabilityInvocation=as_list(document.capability_invocation),
        capabilityDelegation=as_list(document.capability_delegation),
        services=services,
    )


@converts
def did_document_from_chain(raw: Any) -> DidDocument:
    """Convert a contract ``Document`` struct to a DID Document."""
    record = _as_record(DocumentRecord, raw)

    verification_methods = []
    for raw_method in record.verificationMethod or ():
        method = _as_record(VerificationMethodRecord, raw_method)
        verification_methods.append(
            VerificationMethod(
                id=method.id,
                type=decode_key_type(method.keyType),
                controller=method.controller,
                public_key_multibase=method.publicKeyMultibase,
                auth_type=int(method.authType),
            )
        )

    services = []
    for raw_service in record.services or ():
        service = _as_record(ServiceRecord, raw_service)
        services.append(
            Service(
                id=service.id,
                type=service.serviceType,
                service_endpoint=as_list(service.serviceEndpoint),
            )
        )

    return DidDocument(
        context=as_list(record.context),
        id=record.id,
        controller=record.controller,
        created=record.created,
        updated=record.updated,
        version_id=record.versionId,
        deactivated=require_bool(record.deactivated, "deactivated"),
        verification_method=verification_methods,
        assertion_method=as_list(record.assertionMethod),
        authentication=as_list(record.authentication),
        key_agreement=as_list(record.keyAgreement),
        capability_invocation=as_list(record.capabilityInvocation),
        capability_delegation=as_list(record.capabilityDelegation),
        service=services,
    )


@converts
def did_doc_and_status_from_chain(raw: Any, strict: bool = False) -> DidDocAndStatus:
    """Convert a contract ``DocumentAndStatus`` struct."""
    record = _as_record(DocumentAndStatusRecord, raw)
    return DidDocAndStatus(
        document=did_document_from_chain(record.diddoc),
        status=decode_did_doc_status(record.status, strict=strict),
    )


# =============================================================================
# VC Metadata
# =============================================================================


def vc_meta_to_chain(vc_meta: VcMeta) -> VcMetaRecord:
    """Convert VC metadata to the contract ``VcMeta`` struct."""
    return VcMetaRecord(
        id=vc_meta.id,
        issuer=ProviderRecord(
            did=vc_meta.issuer.did,
            certVcReference=vc_meta.issuer.cert_vc_ref,
        ),
        subject=vc_meta.subject,
        credentialSchema=CredentialSchemaRecord(
            id=vc_meta.credential_schema.id,
            credentialSchemaType=vc_meta.credential_schema.type,
        ),
        status=vc_meta.status,
        issuanceDate=vc_meta.issuance_date,
        validFrom=vc_meta.valid_from,
        validUntil=vc_meta.valid_until,
        formatVersion=vc_meta.format_version,
        language=vc_meta.language,
    )


@converts
def vc_meta_from_chain(raw: Any) -> VcMeta:
    """Convert a contract ``VcMeta`` struct to VC metadata."""
    record = _as_record(VcMetaRecord, raw)
    issuer = _as_record(ProviderRecord, record.issuer)
    schema = _as_record(CredentialSchemaRecord, record.credentialSchema)

    return VcMeta(
        id=record.id,
        issuer=Provider(did=issuer.did, cert_vc_ref=issuer.certVcReference),
        subject=record.subject,
        credential_schema=CredentialSchemaRef(id=schema.id, type=schema.credentialSchemaType),
        status=record.status,
        issuance_date=record.issuanceDate,
        valid_from=record.validFrom,
        valid_until=record.validUntil,
        format_version=record.formatVersion,
        language=record.language,
    )


# =============================================================================
# VC Schema
# =============================================================================


def vc_schema_to_chain(vc_schema: VcSchema) -> VcSchemaRecord:
    """Convert a VC schema to the contract ``VcSchema`` struct; claim order is kept."""
    claims = []
    for schema_claims in vc_schema.credential_subject.claims:
        items = [
            SchemaClaimItemRecord(
                caption=item.caption,
                format=item.format,
                hideValue=item.hide_value,
                id=item.id,
                type=item.type,
            )
            for item in schema_claims.items
        ]
        namespace = schema_claims.namespace
        claims.append(
            VcSchemaClaimRecord(
                items=items,
                namespace=ClaimNamespaceRecord(
                    id=namespace.id,
                    name=namespace.name,
                    ref=namespace.ref or "",
                ),
            )
        )

    return VcSchemaRecord(
        id=vc_schema.id,
        schema=vc_schema.schema_uri,
        title=vc_schema.title,
        description=vc_schema.description,
        metadata=MetaDataRecord(
            formatVersion=vc_schema.metadata.format_version,
            language=vc_schema.metadata.language,
        ),
        credentialSubject=CredentialSubjectRecord(claims=claims),
    )


@converts
def vc_schema_from_chain(raw: Any) -> VcSchema:
    """Convert a contract ``VcSchema`` struct to a VC schema."""
    record = _as_record(VcSchemaRecord, raw)
    metadata = _as_record(MetaDataRecord, record.metadata)
    subject = _as_record(CredentialSubjectRecord, record.credentialSubject)

    claims = []
    for raw_claim in subject.claims or ():
        claim = _as_record(VcSchemaClaimRecord, raw_claim)
        namespace = _as_record(ClaimNamespaceRecord, claim.namespace)
        items = []
        for raw_item in claim.items or ():
            item = _as_record(SchemaClaimItemRecord, raw_item)
            items.append(
                ClaimDef(
                    id=item.id,
                    caption=item.caption,
                    type=item.type,
                    format=item.format,
                    hide_value=require_bool(item.hideValue, "hideValue"),
                )
            )
        claims.append(
            SchemaClaims(
                namespace=ClaimNamespace(id=namespace.id, name=namespace.name, ref=namespace.ref),
                items=items,
            )
        )

    return VcSchema(
        id=record.id,
        schema_uri=record.schema,
        title=record.title,
        description=record.description,
        metadata=SchemaMetadata(
            format_version=metadata.formatVersion,
            language=metadata.language,
        ),
        credential_subject=SchemaCredentialSubject(claims=claims),
    )


# =============================================================================
# ZKP Credential Schema
# =============================================================================


def _attribute_type_to_chain(attribute_type: AttributeType) -> AttributeTypeRecord:
    namespace = attribute_type.namespace
    return AttributeTypeRecord(
        namespace=AttributeNamespaceRecord(
            id=namespace.id,
            name=namespace.name,
            ref=namespace.ref or "",
        ),
        items=[
            AttributeItemRecord(
                label=item.label,
                caption=item.caption,
                type=encode_attribute_type(item.type),
                i18n=[
                    InternationalizationRecord(languageType=language, value=value)
                    for language, value in i18n_to_pairs(item.i18n)
                ],
            )
            for item in as_list(attribute_type.items)
        ],
    )


def _attribute_type_from_chain(raw: Any) -> AttributeType:
    record = _as_record(AttributeTypeRecord, raw)
    namespace = _as_record(AttributeNamespaceRecord, record.namespace)

    items = []
    for raw_item in record.items or ():
        item = _as_record(AttributeItemRecord, raw_item)
        pairs = (
            _as_record(InternationalizationRecord, entry) for entry in item.i18n or ()
        )
        items.append(
            AttributeDef(
                label=item.label,
                caption=item.caption,
                type=decode_attribute_type(item.type),
                i18n=i18n_from_pairs((pair.languageType, pair.value) for pair in pairs),
            )
        )

    return AttributeType(
        namespace=AttributeNamespace(id=namespace.id, name=namespace.name, ref=namespace.ref),
        items=items,
    )


def zkp_credential_schema_to_chain(schema: ZkpCredentialSchema) -> ZkpCredentialSchemaRecord:
    """Convert a ZKP credential schema to the contract struct."""
    return ZkpCredentialSchemaRecord(
        id=schema.id,
        name=schema.name,
        version=schema.version,
        attrNames=as_list(schema.attr_names),
        attrTypes=[_attribute_type_to_chain(t) for t in as_list(schema.attr_types)],
        tag=schema.tag,
    )


@converts
def zkp_credential_schema_from_chain(raw: Any) -> ZkpCredentialSchema:
    """Convert a contract ZKP credential schema struct."""
    record = _as_record(ZkpCredentialSchemaRecord, raw)
    return ZkpCredentialSchema(
        id=record.id,
        name=record.name,
        version=record.version,
        attr_names=as_list(record.attrNames),
        attr_types=[_attribute_type_from_chain(t) for t in record.attrTypes or ()],
        tag=record.tag,
    )


# =============================================================================
# ZKP Credential Definition
# =============================================================================


def zkp_credential_definition_to_chain(
    definition: ZkpCredentialDefinition,
) -> CredentialDefinitionRecord:
    """Convert a ZKP credential definition; ``value`` is stored as JSON."""
    return CredentialDefinitionRecord(
        id=definition.id,
        schemaId=definition.schema_id,
        ver=definition.ver,
        type=definition.type.value,
        value=dump_value_blob(definition.value),
        tag=definition.tag,
    )


@converts
def zkp_credential_definition_from_chain(raw: Any) -> ZkpCredentialDefinition:
    """Convert a contract credential definition; a malformed ``value`` is an error."""
    record = _as_record(CredentialDefinitionRecord, raw)
    try:
        definition_type = CredentialDefinitionType(record.type)
    except ValueError as e:
        raise ConversionError(f"Unknown credential definition type: {record.type!r}") from e

    return ZkpCredentialDefinition(
        id=record.id,
        schema_id=record.schemaId,
        ver=record.ver,
        type=definition_type,
        value=load_value_blob(record.value),
        tag=record.tag,
    )
