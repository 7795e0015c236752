"""
Model Deployment System.

Puts trained classifiers on a gas-limited ledger. Model parameters are too
large for one write, so each deployment is a contract creation followed by
class registrations and chunked uploads.

Key Features:
- Chunk sizes chosen per model family to stay under the gas limit
- Independent class registrations dispatched concurrently
- Order-dependent uploads run strictly in sequence
- Every write reported through pluggable notification hooks
"""

from .artifacts import ArtifactRegistry, CONTRACT_NAMES
from .chunks import Chunk, plan_chunks, remaining_chunks
from .deployer import ModelDeployer, plan_deployment, strategy_for
from .hooks import CallbackHooks, DeployOptions, DeploymentHooks, Severity
from .lifecycle import Operation, OperationRunner
from .strategies import (
    DeployedModel,
    DeploymentPlan,
    DeploymentStrategy,
    NaiveBayesStrategy,
    NearestCentroidStrategy,
    PerceptronStrategy,
    PlannedWrite,
)

__all__ = [
    # Artifacts
    "ArtifactRegistry",
    "CONTRACT_NAMES",
    # Chunks
    "Chunk",
    "plan_chunks",
    "remaining_chunks",
    # Deployer
    "ModelDeployer",
    "plan_deployment",
    "strategy_for",
    # Hooks
    "CallbackHooks",
    "DeployOptions",
    "DeploymentHooks",
    "Severity",
    # Lifecycle
    "Operation",
    "OperationRunner",
    # Strategies
    "DeployedModel",
    "DeploymentPlan",
    "DeploymentStrategy",
    "NaiveBayesStrategy",
    "NearestCentroidStrategy",
    "PerceptronStrategy",
    "PlannedWrite",
]
