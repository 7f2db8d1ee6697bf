"""
ZKP Models
==========

Zero-knowledge-proof credential schema and credential definition records.

Version: 0.1.0
"""

from enum import Enum
from typing import Any

from pydantic import Field

from didchain.models.common import DomainModel


class AttributeValueType(str, Enum):
    """Value type of a ZKP credential attribute."""

    STRING = "String"
    NUMBER = "Number"


class CredentialDefinitionType(str, Enum):
    """Signature scheme of a credential definition."""

    CL = "CL"


class AttributeNamespace(DomainModel):
    """Namespace of a group of ZKP attributes."""

    id: str
    name: str
    ref: str = ""


class AttributeDef(DomainModel):
    """Definition of one ZKP attribute."""

    label: str
    caption: str
    type: AttributeValueType | None = None
    i18n: dict[str, str] | None = Field(
        default=None, description="Language code to localized caption"
    )


class AttributeType(DomainModel):
    """Attributes declared under one namespace."""

    namespace: AttributeNamespace
    items: list[AttributeDef] = Field(default_factory=list)


class ZkpCredentialSchema(DomainModel):
    """ZKP credential schema."""

    id: str
    name: str
    version: str
    attr_names: list[str] = Field(default_factory=list, alias="attrNames")
    attr_types: list[AttributeType] | None = Field(default=None, alias="attrTypes")
    tag: str


class ZkpCredentialDefinition(DomainModel):
    """
    ZKP credential definition.

    ``value`` holds the cryptographic public parameters; its shape is
    opaque to the ledger and stored as a JSON string.
    """

    id: str
    schema_id: str = Field(..., alias="schemaId")
    ver: str
    type: CredentialDefinitionType = CredentialDefinitionType.CL
    value: dict[str, Any] = Field(default_factory=dict)
    tag: str
