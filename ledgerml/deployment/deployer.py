"""
Model deployer: the public entry point for putting a model on the ledger.
"""

import logging
from typing import Optional, Union

from ..config import DEFAULT_TO_FLOAT, GAS_LIMIT
from ..errors import PreconditionViolation
from ..ledger.base import LedgerClient
from ..models import MODEL_CLASSES, Model, family_of, parse_model
from .artifacts import ArtifactRegistry
from .hooks import DeployOptions
from .strategies import STRATEGIES, DeployedModel, DeploymentPlan, DeploymentStrategy

logger = logging.getLogger(__name__)


def strategy_for(model: Model, to_float: float = DEFAULT_TO_FLOAT) -> DeploymentStrategy:
    """
    Pick the strategy for a model's type tag.

    Raises:
        UnrecognizedModelType: for unknown tags
        PreconditionViolation: if the model's shape does not match its tag
    """
    family = family_of(model.type)
    expected = MODEL_CLASSES[family]
    if not isinstance(model, expected):
        raise PreconditionViolation(
            f'Model type "{model.type}" requires a {expected.__name__}, '
            f"got {type(model).__name__}."
        )
    return STRATEGIES[family](to_float)


def plan_deployment(model: Model, to_float: float = DEFAULT_TO_FLOAT) -> DeploymentPlan:
    """Every write ``deploy_model`` would issue for ``model``, without sending any."""
    return strategy_for(model, to_float).plan(model)


class ModelDeployer:
    """
    Deploys trained models as classifier contracts.

    Usage:
        deployer = ModelDeployer(GatewayLedger(config.gateway), ArtifactRegistry(contracts_dir))

        deployed = await deployer.deploy_model(
            model,
            DeployOptions(account="0xabc...", hooks=ConsoleHooks()),
        )
        print(deployed.address)
    """

    def __init__(
        self,
        client: LedgerClient,
        artifacts: ArtifactRegistry,
        gas_limit: int = GAS_LIMIT,
    ):
        self.client = client
        self.artifacts = artifacts
        self.gas_limit = gas_limit

    async def deploy_model(
        self,
        model: Union[Model, dict],
        options: DeployOptions,
    ) -> DeployedModel:
        """
        Deploy a model.

        Args:
            model: A parsed model or its exported JSON as a dict
            options: Account plus optional scale factor and hooks

        Returns:
            Handle to the deployed contract

        Raises:
            PreconditionViolation: malformed model, nothing was sent
            UnrecognizedModelType: no strategy or contract for the type
            OperationRejected: a write failed; see ``ledgerml.errors``
        """
        if isinstance(model, dict):
            model = parse_model(model)
        options = options.with_defaults()

        strategy = strategy_for(model, options.to_float)
        plan = strategy.plan(model)
        artifact = self.artifacts.get(model.type)

        logger.info(
            f"Deploying {model.type} as {artifact.name} from {options.account} "
            f"({len(plan)} writes)"
        )
        return await strategy.execute(
            plan,
            artifact,
            client=self.client,
            account=options.account,
            hooks=options.hooks,
            gas_limit=self.gas_limit,
        )

    def plan(self, model: Model, to_float: Optional[float] = None) -> DeploymentPlan:
        """See :func:`plan_deployment`."""
        return plan_deployment(model, to_float if to_float is not None else DEFAULT_TO_FLOAT)
