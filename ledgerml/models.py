"""
Trained model payloads.

Models arrive as JSON exported by the training side, using camelCase keys.
The ``type`` tag selects both the deployment strategy and the contract.
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import PreconditionViolation, UnrecognizedModelType

logger = logging.getLogger(__name__)


class ModelFamily(str, Enum):
    """Deployment strategy families."""
    NAIVE_BAYES = "naive bayes"
    NEAREST_CENTROID = "nearest centroid"
    PERCEPTRON = "perceptron"


# Every type tag we know how to deploy, lower case.
MODEL_TYPES: Dict[str, ModelFamily] = {
    "naive bayes": ModelFamily.NAIVE_BAYES,
    "nearest centroid classifier": ModelFamily.NEAREST_CENTROID,
    "dense nearest centroid classifier": ModelFamily.NEAREST_CENTROID,
    "sparse nearest centroid classifier": ModelFamily.NEAREST_CENTROID,
    "perceptron": ModelFamily.PERCEPTRON,
    "dense perceptron": ModelFamily.PERCEPTRON,
    "sparse perceptron": ModelFamily.PERCEPTRON,
}


def normalize_type(model_type: str) -> str:
    """Type tags are matched case-insensitively."""
    return model_type.strip().lower()


def family_of(model_type: str) -> ModelFamily:
    """Resolve a type tag to its family."""
    family = MODEL_TYPES.get(normalize_type(model_type))
    if family is None:
        raise UnrecognizedModelType(model_type)
    return family


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: str = Field(..., description="Model type tag, e.g. 'naive bayes'")

    @property
    def normalized_type(self) -> str:
        return normalize_type(self.type)


class NaiveBayesModel(_Model):
    """Multinomial Naive Bayes: per-class counts of each feature."""
    type: str = "naive bayes"
    classifications: List[str]
    class_counts: List[int] = Field(..., alias="classCounts")
    feature_counts: List[List[int]] = Field(..., alias="featureCounts")
    total_num_features: int = Field(..., alias="totalNumFeatures")
    smoothing_factor: Optional[float] = Field(default=None, alias="smoothingFactor")


class CentroidInfo(BaseModel):
    """One class of a nearest centroid classifier."""
    model_config = ConfigDict(populate_by_name=True)

    centroid: List[float]
    data_count: int = Field(..., alias="dataCount")


class NearestCentroidModel(_Model):
    """Nearest centroid classifier keyed by class label."""
    type: str = "nearest centroid classifier"
    centroids: Dict[str, CentroidInfo]


class PerceptronModel(_Model):
    """Binary perceptron. ``feature_indices`` enables sparse mode."""
    type: str = "perceptron"
    classifications: List[str]
    weights: List[float]
    intercept: float
    learning_rate: Optional[float] = Field(default=None, alias="learningRate")
    feature_indices: Optional[List[int]] = Field(default=None, alias="featureIndices")


Model = Union[NaiveBayesModel, NearestCentroidModel, PerceptronModel]

MODEL_CLASSES: Dict[ModelFamily, Type[_Model]] = {
    ModelFamily.NAIVE_BAYES: NaiveBayesModel,
    ModelFamily.NEAREST_CENTROID: NearestCentroidModel,
    ModelFamily.PERCEPTRON: PerceptronModel,
}


def parse_model(data: dict) -> Model:
    """
    Build the right model class from exported JSON.

    Raises:
        UnrecognizedModelType: if ``type`` is missing or unknown
        PreconditionViolation: if the payload does not match the model shape
    """
    model_type = data.get("type")
    if not isinstance(model_type, str):
        raise UnrecognizedModelType(str(model_type))

    model_class = MODEL_CLASSES[family_of(model_type)]
    try:
        return model_class.model_validate(data)
    except ValidationError as e:
        raise PreconditionViolation(f"Invalid {model_type} model: {e}") from e


def load_model(path: Path) -> Model:
    """
    Load a model from a JSON file.

    Raises:
        PreconditionViolation: if the file is not valid JSON
    """
    with open(path, 'r') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise PreconditionViolation(f"Invalid model file {path}: {e}") from e
    if not isinstance(data, dict):
        raise PreconditionViolation(f"Invalid model file {path}: expected a JSON object")
    model = parse_model(data)
    logger.debug(f"Loaded {model.type} model from {path}")
    return model
