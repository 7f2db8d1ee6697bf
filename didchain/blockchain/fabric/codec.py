"""
Fabric Codec
============

Converts domain records to chaincode JSON arguments and decodes chaincode
payloads.

Chaincode records use the same field names and nesting as the OpenDID
contract structs: key types are integers and the credential definition
value is a JSON string. The struct layout is shared with the EVM codec,
so records are built there and rendered as JSON objects here.

Version: 0.1.0
"""

import json
from collections.abc import Mapping
from typing import Any

from didchain.blockchain.codec import converts, decode_did_doc_status
from didchain.blockchain.evm import codec as struct_codec
from didchain.errors import ConversionError
from didchain.models import (
    DidDocAndStatus,
    DidDocument,
    VcMeta,
    VcSchema,
    ZkpCredentialDefinition,
    ZkpCredentialSchema,
)


def to_json_ready(value: Any) -> Any:
    """Render nested records as plain dicts and lists."""
    if hasattr(value, "_asdict"):
        return {name: to_json_ready(item) for name, item in value._asdict().items()}
    if isinstance(value, (list, tuple)):
        return [to_json_ready(item) for item in value]
    return value


def dump_record(record: Any) -> str:
    """Serialize a record as a chaincode string argument."""
    return json.dumps(to_json_ready(record), separators=(",", ":"), ensure_ascii=False)


def decode_payload(payload: bytes | str) -> Any:
    """
    Decode a chaincode response payload.

    Raises:
        ConversionError: If the payload is empty or not JSON
    """
    try:
        text = payload.decode("utf-8") if isinstance(payload, (bytes, bytearray)) else payload
        if not text.strip():
            raise ValueError("empty payload")
        return json.loads(text)
    except (UnicodeDecodeError, ValueError) as e:
        raise ConversionError(f"Malformed chaincode payload: {e}") from e


def _require_object(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ConversionError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


# =============================================================================
# DID Document
# =============================================================================


def did_document_to_record(document: DidDocument) -> str:
    return dump_record(struct_codec.did_document_to_chain(document))


@converts
def did_doc_and_status_from_payload(payload: bytes | str, strict: bool = False) -> DidDocAndStatus:
    """Decode a ``{"document": {...}, "status": ...}`` payload."""
    data = _require_object(decode_payload(payload), "DID Document payload")
    try:
        document, status = data["document"], data["status"]
    except KeyError as e:
        raise ConversionError(f"DID Document payload is missing {e}") from e

    return DidDocAndStatus(
        document=struct_codec.did_document_from_chain(_require_object(document, "document")),
        status=decode_did_doc_status(status, strict=strict),
    )


# =============================================================================
# VC
# =============================================================================


def vc_meta_to_record(vc_meta: VcMeta) -> str:
    return dump_record(struct_codec.vc_meta_to_chain(vc_meta))


def vc_meta_from_payload(payload: bytes | str) -> VcMeta:
    data = _require_object(decode_payload(payload), "VC metadata payload")
    return struct_codec.vc_meta_from_chain(data)


def vc_schema_to_record(vc_schema: VcSchema) -> str:
    return dump_record(struct_codec.vc_schema_to_chain(vc_schema))


def vc_schema_from_payload(payload: bytes | str) -> VcSchema:
    data = _require_object(decode_payload(payload), "VC schema payload")
    return struct_codec.vc_schema_from_chain(data)


# =============================================================================
# ZKP
# =============================================================================


def zkp_credential_schema_to_record(schema: ZkpCredentialSchema) -> str:
    return dump_record(struct_codec.zkp_credential_schema_to_chain(schema))


def zkp_credential_schema_from_payload(payload: bytes | str) -> ZkpCredentialSchema:
    data = _require_object(decode_payload(payload), "ZKP credential schema payload")
    return struct_codec.zkp_credential_schema_from_chain(data)


def zkp_credential_definition_to_record(definition: ZkpCredentialDefinition) -> str:
    return dump_record(struct_codec.zkp_credential_definition_to_chain(definition))


def zkp_credential_definition_from_payload(payload: bytes | str) -> ZkpCredentialDefinition:
    data = _require_object(decode_payload(payload), "ZKP credential definition payload")
    return struct_codec.zkp_credential_definition_from_chain(data)
