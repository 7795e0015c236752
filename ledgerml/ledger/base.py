"""
Ledger client interface.

A ledger write is submitted, approved by the account holder, mined and
finally confirmed or rejected. Clients expose each write as a
:class:`Submission`: an async generator of :class:`TxEvent` that yields
exactly one ``SUBMITTED`` event (carrying the transaction hash) followed by
exactly one of ``CONFIRMED`` or ``FAILED``. A write that is rejected before
it reaches the ledger (for example a declined approval prompt) yields a
single ``FAILED`` event.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncGenerator, Dict, List, Optional

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """Raised by ledger clients for transport or protocol failures."""

    def __init__(self, message: str, code: str = "LEDGER_ERROR"):
        super().__init__(message)
        self.code = code


class EventKind(str, Enum):
    """Lifecycle signals of a single ledger write."""
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass
class ContractArtifact:
    """Compiled contract: interface descriptor plus deployable code."""
    name: str
    abi: List[Dict[str, Any]]
    bytecode: str

    @classmethod
    def from_dict(cls, name: str, data: dict) -> "ContractArtifact":
        return cls(name=name, abi=data.get("abi", []), bytecode=data.get("bytecode", ""))


@dataclass
class Receipt:
    """Confirmation of a mined write."""
    transaction_hash: str
    contract_address: Optional[str] = None
    gas_used: int = 0
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TxEvent:
    """One signal from a :class:`Submission`."""
    kind: EventKind
    transaction_hash: Optional[str] = None
    receipt: Optional[Receipt] = None
    error: Optional[BaseException] = None

    @classmethod
    def submitted(cls, transaction_hash: str) -> "TxEvent":
        return cls(EventKind.SUBMITTED, transaction_hash=transaction_hash)

    @classmethod
    def confirmed(cls, receipt: Receipt) -> "TxEvent":
        return cls(EventKind.CONFIRMED, transaction_hash=receipt.transaction_hash, receipt=receipt)

    @classmethod
    def failed(cls, error: BaseException, transaction_hash: Optional[str] = None) -> "TxEvent":
        return cls(EventKind.FAILED, transaction_hash=transaction_hash, error=error)


# A write in flight. Iterating drives it to completion.
Submission = AsyncGenerator[TxEvent, None]


class LedgerClient(ABC):
    """
    Submits contract deployments and method calls to a ledger.

    Implementations must not raise from the iterator for ledger-level
    rejections; those are reported as ``FAILED`` events.
    """

    @abstractmethod
    def deploy(
        self,
        artifact: ContractArtifact,
        args: List[Any],
        *,
        sender: str,
        gas: int,
    ) -> Submission:
        """Create a new contract instance from ``artifact``."""

    @abstractmethod
    def send(
        self,
        address: str,
        artifact: ContractArtifact,
        method: str,
        args: List[Any],
        *,
        sender: str,
        gas: int,
    ) -> Submission:
        """Call a state-changing ``method`` on the contract at ``address``."""

    async def close(self) -> None:
        """Release any transport resources."""


@dataclass
class ContractHandle:
    """
    A deployed contract instance bound to a client.

    Mirrors ``contract.methods.<name>(*args).send()`` of ledger SDKs.
    """
    address: str
    artifact: ContractArtifact
    client: LedgerClient

    def send(self, method: str, args: List[Any], *, sender: str, gas: int) -> Submission:
        logger.debug(f"{self.artifact.name}@{self.address}.{method}({len(args)} args)")
        return self.client.send(
            self.address, self.artifact, method, args, sender=sender, gas=gas
        )
