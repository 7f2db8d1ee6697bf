"""
Unit tests for domain models.
"""

import json

import pytest

from didchain.errors import LedgerArgumentError
from didchain.models import (
    CredentialDefinitionType,
    DidDocument,
    DidKeyUrl,
    InvokedDidDoc,
    TransactionResult,
    VcMeta,
    ZkpCredentialDefinition,
)


class TestDidKeyUrl:
    """Tests for DID key URL parsing."""

    def test_plain_did(self) -> None:
        url = DidKeyUrl.parse("did:omn:issuer")

        assert url.did == "did:omn:issuer"
        assert url.version_id is None
        assert url.key_id is None

    def test_version_and_fragment(self) -> None:
        url = DidKeyUrl.parse("did:omn:issuer?versionId=3#assert")

        assert url.did == "did:omn:issuer"
        assert url.version_id == "3"
        assert url.key_id == "assert"

    def test_other_query_parameters_are_ignored(self) -> None:
        url = DidKeyUrl.parse("did:omn:issuer?service=home&versionId=2")

        assert url.version_id == "2"

    def test_method_specific_id_may_contain_colons(self) -> None:
        assert DidKeyUrl.parse("did:omn:sub:issuer").did == "did:omn:sub:issuer"

    @pytest.mark.parametrize(
        "value",
        ["", "issuer", "did:omn", "did::issuer", "urn:omn:issuer", "did:omn:?versionId=1"],
    )
    def test_invalid(self, value: str) -> None:
        with pytest.raises(LedgerArgumentError):
            DidKeyUrl.parse(value)


class TestWireNames:
    """Tests for camelCase JSON aliases."""

    def test_did_document_json(self, did_document: DidDocument) -> None:
        data = json.loads(did_document.to_json())

        assert data["@context"] == ["https://www.w3.org/ns/did/v1"]
        assert data["versionId"] == "1"
        assert data["verificationMethod"][0]["publicKeyMultibase"] == "zAssertKey"
        assert data["service"][0]["serviceEndpoint"] == ["https://issuer.example.com"]

    def test_did_document_from_wire_json(self, did_document: DidDocument) -> None:
        assert DidDocument.model_validate_json(did_document.to_json()) == did_document

    def test_invoked_did_doc_aliases(self, invoked_did_doc: InvokedDidDoc) -> None:
        data = json.loads(invoked_did_doc.to_json())

        assert "didDoc" in data
        assert data["controller"]["certVcRef"] == "https://tas.example.com/cert"

    def test_vc_meta_aliases(self, vc_meta: VcMeta) -> None:
        data = json.loads(vc_meta.to_json())

        assert data["credentialSchema"]["type"] == "OsdSchemaCredential"
        assert data["validUntil"] == "2029-01-01T09:00:00Z"
        assert VcMeta.model_validate(data) == vc_meta

    def test_definition_type_defaults_to_cl(self, zkp_definition: ZkpCredentialDefinition) -> None:
        assert zkp_definition.type == CredentialDefinitionType.CL
        assert json.loads(zkp_definition.to_json())["schemaId"] == zkp_definition.schema_id


class TestTransactionResult:
    def test_success_range(self) -> None:
        assert TransactionResult(status_code=200).success
        assert not TransactionResult(status_code=500).success
