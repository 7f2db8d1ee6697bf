"""
didchain
========

Dual-backend ledger adapter for DID Documents and Verifiable Credentials.

Modules:
    - config: Configuration management with Pydantic Settings
    - logging: Structured logging with structlog
    - models: DID/VC domain records
    - errors: Ledger error taxonomy
    - blockchain: Ledger clients (mock/EVM/Fabric)

Version: 0.1.0
"""

__version__ = "0.1.0"

from didchain.config import settings
from didchain.logging import get_logger, setup_logging

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "__version__",
]
