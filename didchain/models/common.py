"""
Common Models
=============

Base model configuration and records shared across DID and VC models.

Version: 0.1.0
"""

from pydantic import BaseModel, ConfigDict, Field


class DomainModel(BaseModel):
    """Base for domain records; JSON uses camelCase aliases."""

    model_config = ConfigDict(populate_by_name=True)

    def to_json(self) -> str:
        """Serialize using wire (alias) names."""
        return self.model_dump_json(by_alias=True)


class Provider(DomainModel):
    """Issuer/controller reference: DID plus certificate VC reference."""

    did: str
    cert_vc_ref: str = Field(default="", alias="certVcRef")


class TransactionResult(BaseModel):
    """Result of a status-mutation operation."""

    status_code: int = Field(default=200, description="HTTP-style status code")
    status: str | None = Field(default=None, description="Status payload from the ledger")
    tx_hash: str | None = Field(default=None, description="Transaction hash, when exposed")

    @property
    def success(self) -> bool:
        """Check whether the ledger accepted the transaction."""
        return 200 <= self.status_code < 300
