"""
Domain Models
=============

Pydantic records for the DID/VC vocabulary shared by every ledger backend.

Usage:
    from didchain.models import DidDocument, VcMeta, VcSchema

    document = DidDocument.model_validate_json(raw_json)
"""

from didchain.models.common import DomainModel, Provider, TransactionResult
from didchain.models.did import (
    DidDocAndStatus,
    DidDocStatus,
    DidDocument,
    DidKeyUrl,
    InvokedDidDoc,
    RoleType,
    Service,
    VerificationMethod,
)
from didchain.models.vc import (
    ClaimDef,
    ClaimNamespace,
    CredentialSchemaRef,
    SchemaClaims,
    SchemaCredentialSubject,
    SchemaMetadata,
    VcMeta,
    VcSchema,
    VcStatus,
)
from didchain.models.zkp import (
    AttributeDef,
    AttributeNamespace,
    AttributeType,
    AttributeValueType,
    CredentialDefinitionType,
    ZkpCredentialDefinition,
    ZkpCredentialSchema,
)

__all__ = [
    # Common
    "DomainModel",
    "Provider",
    "TransactionResult",
    # DID
    "DidDocAndStatus",
    "DidDocStatus",
    "DidDocument",
    "DidKeyUrl",
    "InvokedDidDoc",
    "RoleType",
    "Service",
    "VerificationMethod",
    # VC
    "ClaimDef",
    "ClaimNamespace",
    "CredentialSchemaRef",
    "SchemaClaims",
    "SchemaCredentialSubject",
    "SchemaMetadata",
    "VcMeta",
    "VcSchema",
    "VcStatus",
    # ZKP
    "AttributeDef",
    "AttributeNamespace",
    "AttributeType",
    "AttributeValueType",
    "CredentialDefinitionType",
    "ZkpCredentialDefinition",
    "ZkpCredentialSchema",
]
