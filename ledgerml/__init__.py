"""
ledgerml - trained classifiers on a transactional ledger

Deploys Naive Bayes, nearest centroid and perceptron models as contracts,
splitting their parameters into chunks that fit the per-write gas limit.

Example:
    >>> from ledgerml import ModelDeployer, DeployOptions, load_model
    >>> deployer = ModelDeployer(ledger, artifacts)
    >>> deployed = await deployer.deploy_model(load_model(path), DeployOptions(account))
"""

__version__ = "1.0.0"

from .config import Config, get_config
from .deployment import ArtifactRegistry, DeployOptions, DeploymentHooks, ModelDeployer
from .errors import DeploymentError, OperationRejected, PreconditionViolation, UnrecognizedModelType
from .models import NaiveBayesModel, NearestCentroidModel, PerceptronModel, load_model, parse_model

__all__ = [
    "__version__",
    "Config",
    "get_config",
    "ArtifactRegistry",
    "DeployOptions",
    "DeploymentHooks",
    "ModelDeployer",
    "DeploymentError",
    "OperationRejected",
    "PreconditionViolation",
    "UnrecognizedModelType",
    "NaiveBayesModel",
    "NearestCentroidModel",
    "PerceptronModel",
    "load_model",
    "parse_model",
]
