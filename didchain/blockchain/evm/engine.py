"""
EVM Transaction Engine
======================

Executes one contract operation per call against an EVM JSON-RPC node.

Every call opens its own HTTP session and web3 provider and closes them
on exit, so concurrent calls share no client state.

Version: 0.1.0
"""

import json
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import requests
from eth_account import Account
from eth_account.signers.local import LocalAccount
from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
)
from web3 import Web3
from web3.exceptions import (
    BadFunctionCallOutput,
    ContractLogicError,
    TransactionNotFound,
)

from didchain.config import EvmSettings
from didchain.errors import (
    ConfigurationError,
    LedgerConnectionError,
    LedgerError,
    TransactionError,
)
from didchain.logging import get_logger

logger = get_logger(__name__)

# Sized for the largest payload (VC schema registration)
GAS_LIMIT = 10_000_000

RECEIPT_POLL_ATTEMPTS = 40
RECEIPT_POLL_INTERVAL = 1.0

# Contract-level rejections; anything else is a transport failure
CONTRACT_ERRORS: tuple[type[Exception], ...] = (ContractLogicError, BadFunctionCallOutput)

Web3Factory = Callable[[EvmSettings, requests.Session], Web3]


def default_web3_factory(settings: EvmSettings, session: requests.Session) -> Web3:
    """Build a web3 client bound to a caller-owned HTTP session."""
    provider = Web3.HTTPProvider(
        settings.network_url,
        request_kwargs={"timeout": settings.connection_timeout},
        session=session,
    )
    return Web3(provider)


def load_contract_abi(path: str | Path) -> list[dict[str, Any]]:
    """
    Load a contract ABI.

    Accepts a bare ABI list or a build artifact with an ``abi`` key.

    Raises:
        ConfigurationError: If the file is missing or not an ABI
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Cannot load contract ABI from '{path}': {e}") from e

    if isinstance(data, dict):
        data = data.get("abi")
    if not isinstance(data, list):
        raise ConfigurationError(f"'{path}' does not contain a contract ABI")
    return data


class ReadonlyQueryManager:
    """Non-signing manager for view functions."""

    def __init__(self, from_address: str) -> None:
        self.from_address = from_address

    def call(self, function: Any) -> Any:
        """Evaluate a bound contract function without a transaction."""
        return function.call({"from": self.from_address})


class SignedTransactionManager:
    """
    Signs, sends and confirms state-changing contract calls.

    The receipt is polled a fixed number of times with a fixed delay;
    this is the only retry the adapter performs.
    """

    def __init__(
        self,
        w3: Web3,
        account: LocalAccount,
        chain_id: int,
        gas_price: int,
        gas_limit: int = GAS_LIMIT,
        attempts: int = RECEIPT_POLL_ATTEMPTS,
        interval: float = RECEIPT_POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._w3 = w3
        self._account = account
        self.chain_id = chain_id
        self.gas_price = gas_price
        self.gas_limit = gas_limit
        self.attempts = attempts
        self.interval = interval
        self._sleep = sleep

    def execute(self, function: Any) -> Any:
        """
        Build, sign and send a transaction, then wait for its receipt.

        Returns:
            Transaction receipt

        Raises:
            TransactionError: If the transaction was mined but reverted
            LedgerConnectionError: If no receipt appeared in time
        """
        address = self._account.address
        tx = function.build_transaction(
            {
                "from": address,
                "chainId": self.chain_id,
                "gas": self.gas_limit,
                "gasPrice": self.gas_price,
                "nonce": self._w3.eth.get_transaction_count(address, "pending"),
            }
        )
        signed = self._account.sign_transaction(tx)
        tx_hash = self._w3.eth.send_raw_transaction(signed.raw_transaction)

        receipt = self.wait_for_receipt(tx_hash)
        if receipt["status"] == 0:
            raise TransactionError(f"Transaction reverted: {Web3.to_hex(tx_hash)}")
        return receipt

    def wait_for_receipt(self, tx_hash: Any) -> Any:
        """Poll for a receipt up to ``attempts`` times."""
        retrying = Retrying(
            retry=(
                retry_if_exception_type(TransactionNotFound)
                | retry_if_result(lambda receipt: receipt is None)
            ),
            stop=stop_after_attempt(self.attempts),
            wait=wait_fixed(self.interval),
            sleep=self._sleep,
            before_sleep=lambda retry_state: logger.debug(
                "receipt_pending",
                tx_hash=Web3.to_hex(tx_hash),
                attempt=retry_state.attempt_number,
            ),
        )
        try:
            return retrying(self._w3.eth.get_transaction_receipt, tx_hash)
        except RetryError as e:
            raise LedgerConnectionError(
                f"Transaction receipt was not generated after "
                f"{self.attempts * self.interval:g} seconds for transaction: {Web3.to_hex(tx_hash)}"
            ) from e


class EvmTransactionEngine:
    """
    Per-call executor for the OpenDID contract.

    Example:
        >>> engine = EvmTransactionEngine(get_evm_settings())
        >>> raw = engine.execute("getVcSchema", schema_id, read_only=True)
    """

    def __init__(
        self,
        settings: EvmSettings,
        abi: list[dict[str, Any]] | None = None,
        account: LocalAccount | None = None,
        web3_factory: Web3Factory | None = None,
        receipt_attempts: int = RECEIPT_POLL_ATTEMPTS,
        receipt_interval: float = RECEIPT_POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if not Web3.is_address(settings.contract_address):
            raise ConfigurationError(
                f"Invalid contract address: {settings.contract_address!r}"
            )

        self._settings = settings
        self._contract_address = Web3.to_checksum_address(settings.contract_address)
        self._abi = abi if abi is not None else load_contract_abi(settings.abi_path)
        self._web3_factory = web3_factory or default_web3_factory
        self._receipt_attempts = receipt_attempts
        self._receipt_interval = receipt_interval
        self._sleep = sleep

        if account is None:
            try:
                account = Account.from_key(settings.private_key.get_secret_value())
            except Exception as e:
                raise ConfigurationError("Invalid EVM private key") from e
        self._account = account

    @property
    def contract_address(self) -> str:
        return self._contract_address

    @contextmanager
    def connect(self) -> Iterator[Web3]:
        """Open a transient connection; the HTTP session is always closed."""
        session = requests.Session()
        try:
            yield self._web3_factory(self._settings, session)
        finally:
            session.close()
            logger.debug("evm_connection_closed", network_url=self._settings.network_url)

    def execute(self, function_name: str, *args: Any, read_only: bool = False) -> Any:
        """
        Invoke a contract function.

        Args:
            function_name: Contract function name
            *args: Already-encoded contract arguments
            read_only: Query via eth_call instead of a signed transaction

        Returns:
            Decoded call output (read) or transaction receipt (write)

        Raises:
            TransactionError: Contract-level rejection
            LedgerConnectionError: Any other transport failure
        """
        logger.debug("evm_call_started", function=function_name, read_only=read_only)

        try:
            with self.connect() as w3:
                contract = w3.eth.contract(address=self._contract_address, abi=self._abi)
                function = getattr(contract.functions, function_name)(*args)

                if read_only:
                    return ReadonlyQueryManager(self._contract_address).call(function)

                manager = SignedTransactionManager(
                    w3,
                    self._account,
                    chain_id=self._settings.chain_id,
                    gas_price=w3.eth.gas_price,
                    attempts=self._receipt_attempts,
                    interval=self._receipt_interval,
                    sleep=self._sleep,
                )
                receipt = manager.execute(function)
                logger.info(
                    "evm_transaction_confirmed",
                    function=function_name,
                    tx_hash=Web3.to_hex(receipt["transactionHash"]),
                    gas_price=manager.gas_price,
                )
                return receipt

        except LedgerError as e:
            logger.error("evm_call_failed", function=function_name, error=str(e))
            raise
        except CONTRACT_ERRORS as e:
            logger.error("evm_contract_rejected", function=function_name, error=str(e))
            raise TransactionError(f"Contract call error: {e}") from e
        except Exception as e:
            logger.error("evm_call_failed", function=function_name, error=str(e))
            raise LedgerConnectionError(f"Network error: {e}") from e

    def health_check(self) -> dict[str, Any]:
        """
        Check node reachability.

        Returns:
            dict with status and latest block number
        """
        try:
            start = time.perf_counter()
            with self.connect() as w3:
                connected = w3.is_connected()
                block_number = w3.eth.block_number if connected else None
            latency_ms = (time.perf_counter() - start) * 1000

            return {
                "status": "healthy" if connected else "unhealthy",
                "latency_ms": round(latency_ms, 2),
                "block_number": block_number,
            }
        except Exception as e:
            logger.error("evm_health_check_failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e),
            }
