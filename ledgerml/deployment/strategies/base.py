"""
Shared shape of every model deployment.

A deployment runs in three phases:

- Genesis: deploy the contract carrying the first class and the first chunk
  of its data. Its address anchors everything that follows.
- Registration: add every remaining class with its first chunk. These writes
  do not depend on each other and are dispatched concurrently.
- Extension: append the remaining chunks. Each append builds on the state
  left by the previous one, so these run strictly one at a time.

Strategies only describe the writes (see :class:`DeploymentPlan`); running
them is common code.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional

from ...config import DEFAULT_TO_FLOAT, GAS_LIMIT
from ...errors import OperationRejected
from ...ledger.base import ContractArtifact, ContractHandle, LedgerClient, LedgerError, Receipt
from ...models import ModelFamily
from ..chunks import Chunk
from ..hooks import DeploymentHooks, Severity
from ..lifecycle import Operation, OperationRunner

logger = logging.getLogger(__name__)

CONSTRUCTOR = "constructor"


@dataclass
class PlannedWrite:
    """A single ledger write a deployment will issue."""
    method: str
    args: List[Any]
    description: str
    error_description: str
    label: Optional[str] = None
    chunk: Optional[Chunk] = None


@dataclass
class DeploymentPlan:
    """Every write of one deployment, in phase order."""
    model_type: str
    genesis: PlannedWrite
    registrations: List[PlannedWrite] = field(default_factory=list)
    extensions: List[PlannedWrite] = field(default_factory=list)

    def __iter__(self) -> Iterator[PlannedWrite]:
        yield self.genesis
        yield from self.registrations
        yield from self.extensions

    def __len__(self) -> int:
        return 1 + len(self.registrations) + len(self.extensions)


@dataclass
class DeployedModel:
    """Handle to a model living on the ledger."""
    address: str
    model_type: str
    transaction_hash: str
    contract: ContractHandle
    operations: int = 0
    gas_used: int = 0

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "model_type": self.model_type,
            "transaction_hash": self.transaction_hash,
            "contract": self.contract.artifact.name,
            "operations": self.operations,
            "gas_used": self.gas_used,
        }


class DeploymentStrategy(ABC):
    """
    Base class for model deployment strategies.

    Subclasses implement :meth:`plan`, which validates the model and lays out
    every write. Validation failures raise ``PreconditionViolation`` before
    anything is sent.
    """

    family: ModelFamily
    initial_chunk_size: int
    chunk_size: int

    def __init__(self, to_float: float = DEFAULT_TO_FLOAT):
        self.to_float = to_float

    @abstractmethod
    def plan(self, model: Any) -> DeploymentPlan:
        """Validate ``model`` and describe every write needed to deploy it."""

    async def execute(
        self,
        plan: DeploymentPlan,
        artifact: ContractArtifact,
        *,
        client: LedgerClient,
        account: str,
        hooks: DeploymentHooks,
        gas_limit: int = GAS_LIMIT,
    ) -> DeployedModel:
        """
        Run a plan against the ledger.

        Raises:
            OperationRejected: on the first failed write. If genesis already
                confirmed, the contract address has been saved and the model
                is left partially deployed.
        """
        runner = OperationRunner(hooks)
        genesis = plan.genesis

        receipt = await runner.run(Operation(
            description=genesis.description,
            error_description=genesis.error_description,
            call=lambda: client.deploy(artifact, genesis.args, sender=account, gas=gas_limit),
            record_as="model",
        ))
        if not receipt.contract_address:
            hooks.notify(genesis.error_description, Severity.ERROR)
            cause = LedgerError(f"No contract address in receipt {receipt.transaction_hash}")
            raise OperationRejected(genesis.description, cause) from cause

        contract = ContractHandle(receipt.contract_address, artifact, client)
        hooks.save_address("model", contract.address)
        logger.info(f"Deployed {artifact.name} to {contract.address}")

        deployed = DeployedModel(
            address=contract.address,
            model_type=plan.model_type,
            transaction_hash=receipt.transaction_hash,
            contract=contract,
            operations=1,
            gas_used=receipt.gas_used,
        )

        def operation(write: PlannedWrite) -> Operation:
            return Operation(
                description=write.description,
                error_description=write.error_description,
                call=lambda: contract.send(write.method, write.args, sender=account, gas=gas_limit),
            )

        if plan.registrations:
            logger.info(f"Registering {len(plan.registrations)} classes")
            receipts = await self._run_all(runner, [operation(w) for w in plan.registrations])
            self._tally(deployed, receipts)

        if plan.extensions:
            logger.info(f"Uploading {len(plan.extensions)} remaining chunks")
        for write in plan.extensions:
            self._tally(deployed, [await runner.run(operation(write))])

        hooks.notify(
            f"The model contract has been deployed to {contract.address}", Severity.SUCCESS
        )
        logger.info(f"Deployment of {plan.model_type} complete: {runner.stats()}")
        return deployed

    async def _run_all(self, runner: OperationRunner, operations: List[Operation]) -> List[Receipt]:
        """
        Run independent writes concurrently.

        Every write is allowed to settle before returning; the first failure
        in dispatch order is then raised.
        """
        results = await asyncio.gather(
            *(runner.run(op) for op in operations), return_exceptions=True
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            if len(failures) > 1:
                logger.warning(f"{len(failures)} of {len(operations)} concurrent writes failed")
            raise failures[0]
        return list(results)

    @staticmethod
    def _tally(deployed: DeployedModel, receipts: List[Receipt]) -> None:
        deployed.operations += len(receipts)
        deployed.gas_used += sum(r.gas_used for r in receipts)
