"""
Ledger clients.

The deployment layer only depends on :class:`LedgerClient`; the gateway
client is one concrete transport.
"""

from .base import (
    ContractArtifact,
    ContractHandle,
    EventKind,
    LedgerClient,
    LedgerError,
    Receipt,
    Submission,
    TxEvent,
)
from .gateway import GatewayLedger

__all__ = [
    "ContractArtifact",
    "ContractHandle",
    "EventKind",
    "LedgerClient",
    "LedgerError",
    "Receipt",
    "Submission",
    "TxEvent",
    "GatewayLedger",
]
