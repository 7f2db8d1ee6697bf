"""
Unit tests for the EVM codec.
"""

import pytest

from didchain.blockchain.evm.codec import (
    did_doc_and_status_from_chain,
    did_document_from_chain,
    did_document_to_chain,
    vc_meta_from_chain,
    vc_meta_to_chain,
    vc_schema_from_chain,
    vc_schema_to_chain,
    zkp_credential_definition_from_chain,
    zkp_credential_definition_to_chain,
    zkp_credential_schema_from_chain,
    zkp_credential_schema_to_chain,
)
from didchain.blockchain.evm.records import DocumentRecord, VerificationMethodRecord
from didchain.errors import ConversionError
from didchain.models import (
    AttributeDef,
    AttributeNamespace,
    AttributeType,
    AttributeValueType,
    DidDocStatus,
    DidDocument,
    VcMeta,
    VcSchema,
    ZkpCredentialDefinition,
    ZkpCredentialSchema,
)
from tests.conftest import plain


class TestDidDocumentCodec:
    """Tests for DID Document conversion."""

    def test_round_trip(self, did_document: DidDocument) -> None:
        """A fully populated document survives encode then decode."""
        assert did_document_from_chain(did_document_to_chain(did_document)) == did_document

    def test_decodes_plain_tuples(self, did_document: DidDocument) -> None:
        """Struct outputs arrive from web3 as plain tuples."""
        raw = plain(did_document_to_chain(did_document))

        assert isinstance(raw, tuple)
        assert did_document_from_chain(raw) == did_document

    def test_key_types_are_integers_on_chain(self, did_document: DidDocument) -> None:
        record = did_document_to_chain(did_document)

        assert [m.keyType for m in record.verificationMethod] == [2, 1]

    def test_absent_lists_become_empty(self, did_document: DidDocument) -> None:
        sparse = did_document.model_copy(
            update={
                "verification_method": None,
                "assertion_method": None,
                "key_agreement": None,
                "service": None,
            }
        )

        record = did_document_to_chain(sparse)

        assert record.verificationMethod == []
        assert record.assertionMethod == []
        assert record.keyAgreement == []
        assert record.services == []

        decoded = did_document_from_chain(record)
        assert decoded.verification_method == []
        assert decoded.service == []
        assert decoded.authentication == did_document.authentication

    def test_unknown_key_type_on_read(self, did_document: DidDocument) -> None:
        record = did_document_to_chain(did_document)
        bad_method = VerificationMethodRecord("k", 99, did_document.id, "z", 1)
        record = record._replace(verificationMethod=[bad_method])

        with pytest.raises(ConversionError):
            did_document_from_chain(record)

    def test_wrong_shape_is_conversion_error(self) -> None:
        with pytest.raises(ConversionError):
            did_document_from_chain(("too", "short"))

    def test_field_order_matches_contract_struct(self) -> None:
        assert DocumentRecord._fields[:3] == ("context", "id", "controller")
        assert DocumentRecord._fields[-1] == "services"


class TestDidDocAndStatusCodec:
    """Tests for DocumentAndStatus decoding."""

    def test_decodes_document_and_status(self, did_document: DidDocument) -> None:
        raw = (plain(did_document_to_chain(did_document)), 2)

        result = did_doc_and_status_from_chain(raw)

        assert result.document == did_document
        assert result.status == DidDocStatus.REVOKED

    def test_unmapped_status_falls_back(self, did_document: DidDocument) -> None:
        raw = (did_document_to_chain(did_document), 17)

        assert did_doc_and_status_from_chain(raw).status == DidDocStatus.ACTIVATED

    def test_unmapped_status_strict(self, did_document: DidDocument) -> None:
        raw = (did_document_to_chain(did_document), 17)

        with pytest.raises(ConversionError):
            did_doc_and_status_from_chain(raw, strict=True)


class TestVcCodec:
    """Tests for VC metadata and VC schema conversion."""

    def test_vc_meta_round_trip(self, vc_meta: VcMeta) -> None:
        assert vc_meta_from_chain(plain(vc_meta_to_chain(vc_meta))) == vc_meta

    def test_vc_meta_issuer_struct(self, vc_meta: VcMeta) -> None:
        record = vc_meta_to_chain(vc_meta)

        assert record.issuer.did == "did:omn:issuer"
        assert record.issuer.certVcReference == "https://issuer.example.com/cert"
        assert record.credentialSchema.credentialSchemaType == "OsdSchemaCredential"

    def test_vc_schema_round_trip(self, vc_schema: VcSchema) -> None:
        assert vc_schema_from_chain(plain(vc_schema_to_chain(vc_schema))) == vc_schema

    def test_vc_schema_keeps_claim_order(self, vc_schema: VcSchema) -> None:
        """Claims and items are never reordered."""
        decoded = vc_schema_from_chain(vc_schema_to_chain(vc_schema))

        claims = decoded.credential_subject.claims
        assert [c.namespace.id for c in claims] == ["org.iso.18013.5", "com.example.extra"]
        assert [item.id for item in claims[0].items] == ["zeta", "alpha"]
        assert claims[1].items[0].hide_value is True


class TestZkpCodec:
    """Tests for ZKP credential schema and definition conversion."""

    def test_schema_round_trip(self, zkp_schema: ZkpCredentialSchema) -> None:
        raw = plain(zkp_credential_schema_to_chain(zkp_schema))

        assert zkp_credential_schema_from_chain(raw) == zkp_schema

    def test_i18n_is_flattened_to_pairs(self, zkp_schema: ZkpCredentialSchema) -> None:
        record = zkp_credential_schema_to_chain(zkp_schema)
        item = record.attrTypes[0].items[0]

        assert [(p.languageType, p.value) for p in item.i18n] == [("ko", "이름"), ("en", "Name")]

    def test_missing_attribute_type_defaults_to_string(self) -> None:
        schema = ZkpCredentialSchema(
            id="s",
            name="n",
            version="1.0",
            attr_names=["ns.label"],
            attr_types=[
                AttributeType(
                    namespace=AttributeNamespace(id="ns", name="NS"),
                    items=[AttributeDef(label="label", caption="Label")],
                )
            ],
            tag="t",
        )

        record = zkp_credential_schema_to_chain(schema)
        assert record.attrTypes[0].items[0].type == "String"

        decoded = zkp_credential_schema_from_chain(record)
        assert decoded.attr_types[0].items[0].type == AttributeValueType.STRING
        assert decoded.attr_types[0].items[0].i18n == {}

    def test_duplicate_i18n_language_is_last_wins(self, zkp_schema: ZkpCredentialSchema) -> None:
        record = zkp_credential_schema_to_chain(zkp_schema)
        attr_type = record.attrTypes[0]
        item = attr_type.items[0]
        item = item._replace(i18n=[("en", "First"), ("en", "Second")])
        record = record._replace(attrTypes=[attr_type._replace(items=[item])])

        decoded = zkp_credential_schema_from_chain(record)

        assert decoded.attr_types[0].items[0].i18n == {"en": "Second"}

    def test_unknown_attribute_type_on_read(self, zkp_schema: ZkpCredentialSchema) -> None:
        record = zkp_credential_schema_to_chain(zkp_schema)
        attr_type = record.attrTypes[0]
        item = attr_type.items[0]._replace(type="Boolean")
        record = record._replace(attrTypes=[attr_type._replace(items=[item])])

        with pytest.raises(ConversionError):
            zkp_credential_schema_from_chain(record)

    def test_definition_round_trip(self, zkp_definition: ZkpCredentialDefinition) -> None:
        raw = plain(zkp_credential_definition_to_chain(zkp_definition))

        assert zkp_credential_definition_from_chain(raw) == zkp_definition

    def test_definition_value_is_json_on_chain(
        self, zkp_definition: ZkpCredentialDefinition
    ) -> None:
        record = zkp_credential_definition_to_chain(zkp_definition)

        assert record.type == "CL"
        assert record.value.startswith('{"primary":')

    def test_malformed_definition_value(self, zkp_definition: ZkpCredentialDefinition) -> None:
        record = zkp_credential_definition_to_chain(zkp_definition)._replace(value="{not json")

        with pytest.raises(ConversionError):
            zkp_credential_definition_from_chain(record)

    def test_unknown_definition_type(self, zkp_definition: ZkpCredentialDefinition) -> None:
        record = zkp_credential_definition_to_chain(zkp_definition)._replace(type="BBS+")

        with pytest.raises(ConversionError):
            zkp_credential_definition_from_chain(record)
