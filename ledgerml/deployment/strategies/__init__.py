"""
Deployment strategies, one per model family.
"""

from typing import Dict, Type

from ...models import ModelFamily
from .base import DeployedModel, DeploymentPlan, DeploymentStrategy, PlannedWrite
from .naive_bayes import NaiveBayesStrategy
from .nearest_centroid import NearestCentroidStrategy
from .perceptron import PerceptronStrategy

STRATEGIES: Dict[ModelFamily, Type[DeploymentStrategy]] = {
    ModelFamily.NAIVE_BAYES: NaiveBayesStrategy,
    ModelFamily.NEAREST_CENTROID: NearestCentroidStrategy,
    ModelFamily.PERCEPTRON: PerceptronStrategy,
}

__all__ = [
    "DeployedModel",
    "DeploymentPlan",
    "DeploymentStrategy",
    "PlannedWrite",
    "NaiveBayesStrategy",
    "NearestCentroidStrategy",
    "PerceptronStrategy",
    "STRATEGIES",
]
