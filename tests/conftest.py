"""
Test Configuration
==================

Pytest fixtures and in-process fakes for didchain tests.

The fakes stand in for a JSON-RPC node (web3) and for the gateway client
library, so no test touches the network.
"""

import os
import time
from collections.abc import Callable
from datetime import datetime
from types import SimpleNamespace
from typing import Any

import pytest
from web3.exceptions import TransactionNotFound

# Set test environment
os.environ["LEDGER_MODE"] = "mock"

from didchain.blockchain.evm import EvmLedgerClient, EvmTransactionEngine  # noqa: E402
from didchain.config import EvmSettings  # noqa: E402
from didchain.models import (  # noqa: E402
    AttributeDef,
    AttributeNamespace,
    AttributeType,
    AttributeValueType,
    ClaimDef,
    ClaimNamespace,
    CredentialSchemaRef,
    DidDocument,
    InvokedDidDoc,
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

CONTRACT_ADDRESS = "0x" + "ab" * 20
SIGNER_ADDRESS = "0x" + "cd" * 20
TX_HASH = b"\x12" * 32


def plain(value: Any) -> Any:
    """Render records the way web3 decodes struct outputs: plain tuples."""
    if isinstance(value, tuple):
        return tuple(plain(item) for item in value)
    if isinstance(value, list):
        return [plain(item) for item in value]
    return value


def wait_for(predicate: Callable[[], bool], timeout: float = 5.0) -> None:
    """Spin until ``predicate`` holds."""
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not reached in time")
        time.sleep(0.01)


# =============================================================================
# EVM fakes
# =============================================================================


class FakeChain:
    """Scriptable stand-in for a JSON-RPC node and the OpenDID contract."""

    def __init__(self) -> None:
        self.connections = 0
        self.sessions: list[Any] = []
        self.calls: list[tuple[str, tuple[Any, ...], str]] = []
        self.transactions: list[dict[str, Any]] = []
        self.responses: dict[str, Any] = {}
        self.errors: dict[str, Exception] = {}
        self.gas_price = 1_000_000_000
        self.gas_price_fetches = 0
        self.nonce = 7
        self.receipt_status = 1
        self.pending_polls = 0
        self.connected = True
        self.block_number = 4242

    def web3_factory(self, settings: EvmSettings, session: Any) -> "FakeWeb3":
        self.connections += 1
        self.sessions.append(session)
        return FakeWeb3(self)

    def function_names(self) -> list[str]:
        return [name for name, _, _ in self.calls]


class FakeFunction:
    def __init__(self, chain: FakeChain, name: str, args: tuple[Any, ...]) -> None:
        self._chain = chain
        self.name = name
        self.args = args

    def _record(self, kind: str) -> None:
        self._chain.calls.append((self.name, self.args, kind))
        if self.name in self._chain.errors:
            raise self._chain.errors[self.name]

    def call(self, tx: dict[str, Any]) -> Any:
        self._record("call")
        return self._chain.responses.get(self.name)

    def build_transaction(self, tx: dict[str, Any]) -> dict[str, Any]:
        self._record("transact")
        built = {**tx, "to": CONTRACT_ADDRESS, "data": "0x", "value": 0}
        self._chain.transactions.append(built)
        return built


class FakeFunctions:
    def __init__(self, chain: FakeChain) -> None:
        self._chain = chain

    def __getattr__(self, name: str) -> Callable[..., FakeFunction]:
        return lambda *args: FakeFunction(self._chain, name, args)


class FakeEth:
    def __init__(self, chain: FakeChain) -> None:
        self._chain = chain

    def contract(self, address: str, abi: list[dict[str, Any]]) -> Any:
        return SimpleNamespace(address=address, functions=FakeFunctions(self._chain))

    @property
    def gas_price(self) -> int:
        self._chain.gas_price_fetches += 1
        return self._chain.gas_price

    @property
    def block_number(self) -> int:
        return self._chain.block_number

    def get_transaction_count(self, address: str, block: str) -> int:
        return self._chain.nonce

    def send_raw_transaction(self, raw: bytes) -> bytes:
        return TX_HASH

    def get_transaction_receipt(self, tx_hash: bytes) -> dict[str, Any]:
        if self._chain.pending_polls > 0:
            self._chain.pending_polls -= 1
            raise TransactionNotFound(f"Transaction with hash {tx_hash!r} not found")
        return {"status": self._chain.receipt_status, "transactionHash": tx_hash}


class FakeWeb3:
    def __init__(self, chain: FakeChain) -> None:
        self.eth = FakeEth(chain)
        self._chain = chain

    def is_connected(self) -> bool:
        return self._chain.connected


class FakeAccount:
    """Signer double; records what it signed."""

    address = SIGNER_ADDRESS

    def __init__(self) -> None:
        self.signed: list[dict[str, Any]] = []

    def sign_transaction(self, tx: dict[str, Any]) -> Any:
        self.signed.append(tx)
        return SimpleNamespace(raw_transaction=b"\xf8signed")


class FakeSession:
    """requests.Session double tracking close()."""

    instances: list["FakeSession"] = []

    def __init__(self) -> None:
        self.closed = False
        FakeSession.instances.append(self)

    def close(self) -> None:
        self.closed = True


# =============================================================================
# Gateway fakes
# =============================================================================


class FakeContract:
    def __init__(self, gateway: "FakeGateway") -> None:
        self._gateway = gateway

    def _invoke(self, kind: str, name: str, args: tuple[str, ...]) -> bytes:
        ledger = self._gateway.ledger
        ledger.calls.append((name, args, kind))
        if name in ledger.errors:
            raise ledger.errors[name]
        return ledger.responses.get(name, b"")

    def evaluate_transaction(self, name: str, *args: str) -> bytes:
        return self._invoke("evaluate", name, args)

    def submit_transaction(self, name: str, *args: str) -> bytes:
        return self._invoke("submit", name, args)


class FakeGateway:
    def __init__(self, ledger: "FakeLedger", number: int) -> None:
        self.ledger = ledger
        self.number = number
        self.closed = False
        self.networks: list[str] = []
        self.chaincodes: list[str] = []

    def get_network(self, network_name: str) -> Any:
        self.networks.append(network_name)

        def get_contract(chaincode_name: str) -> FakeContract:
            self.chaincodes.append(chaincode_name)
            return FakeContract(self)

        return SimpleNamespace(get_contract=get_contract)

    def close(self) -> None:
        self.closed = True


class FakeLedger:
    """Scriptable stand-in for the gateway client library and chaincode."""

    def __init__(self) -> None:
        self.created: list[FakeGateway] = []
        self.options: list[Any] = []
        self.calls: list[tuple[str, tuple[str, ...], str]] = []
        self.responses: dict[str, bytes] = {}
        self.errors: dict[str, Exception] = {}
        self.connect_error: Exception | None = None

    def connect(self, options: Any) -> FakeGateway:
        if self.connect_error is not None:
            raise self.connect_error
        self.options.append(options)
        gateway = FakeGateway(self, len(self.created) + 1)
        self.created.append(gateway)
        return gateway


class FakeGatewayFactory:
    """GatewayFactory double without key material."""

    def __init__(self, ledger: FakeLedger) -> None:
        self.ledger = ledger
        self.destroyed: list[FakeGateway] = []

    def create(self) -> FakeGateway:
        return self.ledger.connect(None)

    def validate(self, gateway: FakeGateway) -> bool:
        return not gateway.closed

    def destroy(self, gateway: FakeGateway) -> None:
        gateway.close()
        self.destroyed.append(gateway)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def account() -> FakeAccount:
    return FakeAccount()


@pytest.fixture
def evm_settings(tmp_path: Any) -> EvmSettings:
    """EVM settings pointing at a fake node."""
    return EvmSettings(
        network_url="http://127.0.0.1:8545",
        chain_id=1337,
        contract_address=CONTRACT_ADDRESS,
        private_key="0x" + "11" * 32,
        abi_path=tmp_path / "OpenDID.json",
    )


@pytest.fixture
def engine(
    evm_settings: EvmSettings, chain: FakeChain, account: FakeAccount
) -> EvmTransactionEngine:
    """Engine wired to the fake node with instant receipt polling."""
    return EvmTransactionEngine(
        evm_settings,
        abi=[],
        account=account,
        web3_factory=chain.web3_factory,
        receipt_attempts=3,
        receipt_interval=0.5,
        sleep=lambda _: None,
    )


@pytest.fixture
def evm_client(evm_settings: EvmSettings, engine: EvmTransactionEngine) -> EvmLedgerClient:
    return EvmLedgerClient(evm_settings, engine=engine)


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def did_document() -> DidDocument:
    """A fully populated DID Document."""
    did = "did:omn:issuer"
    return DidDocument(
        context=["https://www.w3.org/ns/did/v1"],
        id=did,
        controller="did:omn:tas",
        created="2024-01-01T09:00:00Z",
        updated="2024-01-01T09:00:00Z",
        version_id="1",
        deactivated=False,
        verification_method=[
            VerificationMethod(
                id="assert",
                type="Secp256r1VerificationKey2018",
                controller=did,
                public_key_multibase="zAssertKey",
                auth_type=1,
            ),
            VerificationMethod(
                id="auth",
                type="Secp256k1VerificationKey2018",
                controller=did,
                public_key_multibase="zAuthKey",
                auth_type=1,
            ),
        ],
        assertion_method=["assert"],
        authentication=["auth"],
        key_agreement=["keyagree"],
        capability_invocation=["invoke"],
        capability_delegation=["delegate"],
        service=[
            Service(
                id="homepage",
                type="LinkedDomains",
                service_endpoint=["https://issuer.example.com"],
            )
        ],
    )


@pytest.fixture
def invoked_did_doc(did_document: DidDocument) -> InvokedDidDoc:
    return InvokedDidDoc(
        did_doc=did_document.to_json(),
        controller=Provider(did="did:omn:tas", cert_vc_ref="https://tas.example.com/cert"),
        nonce="f1e2d3c4",
        proof={"type": "Secp256r1Signature2018", "proofValue": "zProof"},
    )


@pytest.fixture
def vc_meta() -> VcMeta:
    return VcMeta(
        id="urn:uuid:3f7c1e2a-0000-4000-8000-000000000001",
        issuer=Provider(did="did:omn:issuer", cert_vc_ref="https://issuer.example.com/cert"),
        subject="did:omn:holder",
        credential_schema=CredentialSchemaRef(
            id="https://issuer.example.com/schema/mdl.json",
            type="OsdSchemaCredential",
        ),
        status="ACTIVE",
        issuance_date="2024-01-01T09:00:00Z",
        valid_from="2024-01-01T09:00:00Z",
        valid_until="2029-01-01T09:00:00Z",
        format_version="1.0",
        language="ko",
    )


@pytest.fixture
def vc_schema() -> VcSchema:
    """A schema whose claims and items are deliberately not sorted."""
    return VcSchema(
        id="https://issuer.example.com/schema/mdl.json",
        schema_uri="https://opendid.omnione.net/schema/vc/vc-schema-1.0.json",
        title="Mobile Driver License",
        description="Mobile Driver License",
        metadata=SchemaMetadata(format_version="1.0", language="ko"),
        credential_subject=SchemaCredentialSubject(
            claims=[
                SchemaClaims(
                    namespace=ClaimNamespace(id="org.iso.18013.5", name="ISO 18013-5"),
                    items=[
                        ClaimDef(id="zeta", caption="Zeta", type="text", format="plain"),
                        ClaimDef(id="alpha", caption="Alpha", type="text", format="plain"),
                    ],
                ),
                SchemaClaims(
                    namespace=ClaimNamespace(
                        id="com.example.extra", name="Extra", ref="https://example.com/ns"
                    ),
                    items=[
                        ClaimDef(
                            id="photo",
                            caption="Photo",
                            type="image",
                            format="png",
                            hide_value=True,
                        ),
                    ],
                ),
            ]
        ),
    )


@pytest.fixture
def zkp_schema() -> ZkpCredentialSchema:
    return ZkpCredentialSchema(
        id="did:omn:issuer:2:mdl:1.0",
        name="mdl",
        version="1.0",
        attr_names=["org.iso.18013.5.name", "org.iso.18013.5.age"],
        attr_types=[
            AttributeType(
                namespace=AttributeNamespace(id="org.iso.18013.5", name="ISO 18013-5"),
                items=[
                    AttributeDef(
                        label="name",
                        caption="Name",
                        type=AttributeValueType.STRING,
                        i18n={"ko": "이름", "en": "Name"},
                    ),
                    AttributeDef(
                        label="age",
                        caption="Age",
                        type=AttributeValueType.NUMBER,
                        i18n={},
                    ),
                ],
            )
        ],
        tag="mdl",
    )


@pytest.fixture
def zkp_definition() -> ZkpCredentialDefinition:
    return ZkpCredentialDefinition(
        id="did:omn:issuer:3:CL:did:omn:issuer:2:mdl:1.0:Tag1",
        schema_id="did:omn:issuer:2:mdl:1.0",
        ver="1.0",
        value={"primary": {"n": "1234567", "s": "89", "r": {"name": "42", "age": "7"}}},
        tag="Tag1",
    )


@pytest.fixture
def terminated_time() -> datetime:
    return datetime(2024, 6, 30, 12, 0, 0)
