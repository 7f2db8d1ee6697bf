"""
EVM Backend
===========

OpenDID contract access over JSON-RPC.

Usage:
    from didchain.blockchain.evm import EvmLedgerClient
    from didchain.config import get_evm_settings

    client = EvmLedgerClient(get_evm_settings())
"""

from didchain.blockchain.evm.client import EvmLedgerClient, receipt_to_result
from didchain.blockchain.evm.engine import (
    GAS_LIMIT,
    RECEIPT_POLL_ATTEMPTS,
    RECEIPT_POLL_INTERVAL,
    EvmTransactionEngine,
    ReadonlyQueryManager,
    SignedTransactionManager,
    load_contract_abi,
)


__all__ = [
    "EvmLedgerClient",
    "EvmTransactionEngine",
    "ReadonlyQueryManager",
    "SignedTransactionManager",
    "load_contract_abi",
    "receipt_to_result",
    "GAS_LIMIT",
    "RECEIPT_POLL_ATTEMPTS",
    "RECEIPT_POLL_INTERVAL",
]
