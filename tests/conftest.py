"""
Shared fixtures: an in-memory ledger and recording hooks.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

import pytest

from ledgerml.deployment import ArtifactRegistry, DeploymentHooks, ModelDeployer, Severity
from ledgerml.deployment.artifacts import CONTRACT_NAMES
from ledgerml.ledger import ContractArtifact, LedgerClient, LedgerError, Receipt, TxEvent

ACCOUNT = "0x00000000000000000000000000000000000000aa"
CONTRACT_ADDRESS = "0x00000000000000000000000000000000c0ffee00"


@dataclass
class LedgerCall:
    method: str
    args: List[Any]
    address: Optional[str]
    sender: str
    gas: int


@dataclass
class _Failure:
    method: str
    error: BaseException
    when: Optional[Callable[[LedgerCall], bool]]
    before_submit: bool


class FakeLedger(LedgerClient):
    """Confirms every write unless told to fail it."""

    def __init__(self, contract_address: Optional[str] = CONTRACT_ADDRESS):
        self.contract_address = contract_address
        self.calls: List[LedgerCall] = []
        self.confirmed: List[LedgerCall] = []
        self._failures: List[_Failure] = []
        self._counter = 0
        self.in_flight = 0
        self.max_in_flight = 0

    def fail(self, method, error=None, *, when=None, before_submit=False):
        error = error or LedgerError(f"{method} reverted", code="REVERTED")
        self._failures.append(_Failure(method, error, when, before_submit))
        return error

    def deploy(self, artifact, args, *, sender, gas):
        return self._run(LedgerCall("constructor", args, None, sender, gas))

    def send(self, address, artifact, method, args, *, sender, gas):
        return self._run(LedgerCall(method, args, address, sender, gas))

    def methods(self) -> List[str]:
        return [c.method for c in self.calls]

    def _failure_for(self, call: LedgerCall) -> Optional[_Failure]:
        for failure in self._failures:
            if failure.method == call.method and (failure.when is None or failure.when(call)):
                return failure
        return None

    async def _run(self, call: LedgerCall):
        self.calls.append(call)
        self._counter += 1
        tx_hash = f"0x{self._counter:064x}"
        failure = self._failure_for(call)

        if failure and failure.before_submit:
            yield TxEvent.failed(failure.error)
            return

        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        yield TxEvent.submitted(tx_hash)
        await asyncio.sleep(0)
        self.in_flight -= 1

        if failure:
            yield TxEvent.failed(failure.error, transaction_hash=tx_hash)
            return

        self.confirmed.append(call)
        address = self.contract_address if call.method == "constructor" else None
        yield TxEvent.confirmed(Receipt(tx_hash, contract_address=address, gas_used=100))


class RecordingHooks(DeploymentHooks):
    """Remembers every hook call in order."""

    def __init__(self):
        self.events: List[tuple] = []
        self.notifications: List[tuple] = []
        self.dismissed: List[int] = []
        self.hashes: List[tuple] = []
        self.addresses: List[tuple] = []

    def notify(self, message, severity=Severity.INFO):
        key = len(self.notifications)
        self.notifications.append((message, severity))
        self.events.append(("notify", message, severity))
        return key

    def dismiss_notification(self, key):
        self.dismissed.append(key)
        self.events.append(("dismiss", key))

    def save_transaction_hash(self, kind, transaction_hash):
        self.hashes.append((kind, transaction_hash))
        self.events.append(("hash", kind, transaction_hash))

    def save_address(self, kind, address):
        self.addresses.append((kind, address))
        self.events.append(("address", kind, address))

    def prompts(self) -> List[int]:
        """Keys of the approval prompts."""
        return [
            i for i, (message, _) in enumerate(self.notifications)
            if message.startswith("Please accept")
        ]

    def errors(self) -> List[str]:
        return [m for m, s in self.notifications if s is Severity.ERROR]


def make_artifacts() -> ArtifactRegistry:
    registry = ArtifactRegistry()
    for model_type, name in CONTRACT_NAMES.items():
        registry.register(model_type, ContractArtifact(name=name, abi=[], bytecode="0x6080"))
    return registry


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def hooks():
    return RecordingHooks()


@pytest.fixture
def artifacts():
    return make_artifacts()


@pytest.fixture
def deployer(ledger, artifacts):
    return ModelDeployer(ledger, artifacts)
