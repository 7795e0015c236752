"""
Compiled contract artifacts for each model type.

Artifacts are JSON files produced by the contract build with at least
``abi`` and ``bytecode`` keys.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from ..errors import UnrecognizedModelType
from ..ledger.base import ContractArtifact
from ..models import normalize_type

logger = logging.getLogger(__name__)

# Model type -> compiled contract name
CONTRACT_NAMES: Dict[str, str] = {
    "naive bayes": "NaiveBayesClassifier",
    "nearest centroid classifier": "NearestCentroidClassifier",
    "dense nearest centroid classifier": "NearestCentroidClassifier",
    "sparse nearest centroid classifier": "SparseNearestCentroidClassifier",
    "perceptron": "DensePerceptron",
    "dense perceptron": "DensePerceptron",
    "sparse perceptron": "SparsePerceptron",
}


class ArtifactRegistry:
    """
    Resolves model types to contract artifacts.

    Usage:
        registry = ArtifactRegistry(Path("build/contracts"))
        artifact = registry.get("Sparse Perceptron")
    """

    def __init__(self, contracts_dir: Optional[Path] = None):
        self.contracts_dir = contracts_dir
        self._artifacts: Dict[str, ContractArtifact] = {}

    def register(self, model_type: str, artifact: ContractArtifact) -> None:
        """Use ``artifact`` for ``model_type`` instead of loading from disk."""
        self._artifacts[normalize_type(model_type)] = artifact

    def get(self, model_type: str) -> ContractArtifact:
        """
        Look up the artifact for a model type.

        Raises:
            UnrecognizedModelType: if no contract exists for the type
        """
        key = normalize_type(model_type)
        if key in self._artifacts:
            return self._artifacts[key]

        name = CONTRACT_NAMES.get(key)
        if name is None or self.contracts_dir is None:
            raise UnrecognizedModelType(model_type)

        path = self.contracts_dir / f"{name}.json"
        if not path.exists():
            logger.error(f"Missing contract artifact {path}")
            raise UnrecognizedModelType(model_type)

        with open(path, 'r') as f:
            artifact = ContractArtifact.from_dict(name, json.load(f))

        logger.debug(f"Loaded contract {name} for '{key}' from {path}")
        self._artifacts[key] = artifact
        return artifact
