"""
Perceptron deployment.

All classes go into the constructor, so there is no registration phase. The
weights are streamed in after genesis; sparse perceptrons tag each chunk with
its absolute offset. If the model selects feature indices, those are uploaded
last in chunks of the same size.
"""

import logging

from ...errors import PreconditionViolation
from ...encoding import encode_scalar, encode_vector
from ...models import ModelFamily, PerceptronModel
from ..chunks import plan_chunks, remaining_chunks
from .base import CONSTRUCTOR, DeploymentPlan, DeploymentStrategy, PlannedWrite

logger = logging.getLogger(__name__)

DEFAULT_LEARNING_RATE = 0.5

SPARSE_TYPE = "sparse perceptron"


class PerceptronStrategy(DeploymentStrategy):
    """Deploys a ``DensePerceptron`` or ``SparsePerceptron`` contract."""

    family = ModelFamily.PERCEPTRON
    initial_chunk_size = 450
    chunk_size = 450

    def plan(self, model: PerceptronModel) -> DeploymentPlan:
        feature_indices = model.feature_indices
        if feature_indices is not None and len(feature_indices) != len(model.weights):
            raise PreconditionViolation(
                "The number of features must match the number of weights. "
                f"Got {len(feature_indices)} features and {len(model.weights)} weights."
            )

        sparse = model.normalized_type == SPARSE_TYPE
        weights = encode_vector(model.weights, self.to_float)
        intercept = encode_scalar(model.intercept, self.to_float)
        learning_rate = model.learning_rate
        if learning_rate is None:
            learning_rate = DEFAULT_LEARNING_RATE

        windows = plan_chunks(len(weights), self.initial_chunk_size, self.chunk_size)
        first_count = min(len(weights), self.initial_chunk_size)

        genesis = PlannedWrite(
            method=CONSTRUCTOR,
            args=[list(model.classifications), weights[:self.initial_chunk_size],
                  intercept, encode_scalar(learning_rate, self.to_float)],
            description=(
                "Please accept the prompt to deploy the Perceptron classifier "
                f"with the first {first_count} weights"
            ),
            error_description="Error deploying the model",
            chunk=windows[0] if windows else None,
        )

        extensions = []
        uploads = remaining_chunks(len(weights), self.initial_chunk_size, self.chunk_size)
        for n, chunk in enumerate(uploads, start=1):
            values = chunk.take(weights)
            extensions.append(PlannedWrite(
                method="initializeWeights",
                args=[chunk.offset, values] if sparse else [values],
                description=(
                    f"Please accept the prompt to upload classifier weights {chunk} ({n}/{len(uploads)})"
                ),
                error_description=f"Error setting classifier weights {chunk}",
                chunk=chunk,
            ))

        if feature_indices is not None:
            for chunk in plan_chunks(len(feature_indices), self.chunk_size, self.chunk_size):
                extensions.append(PlannedWrite(
                    method="addFeatureIndices",
                    args=[chunk.take(feature_indices)],
                    description=f"Please accept the prompt to upload the feature indices {chunk}",
                    error_description=f"Error setting feature indices for {chunk}",
                    chunk=chunk,
                ))

        logger.debug(
            f"Perceptron plan: {len(weights)} weights, sparse={sparse}, "
            f"{len(extensions)} follow-up writes"
        )
        return DeploymentPlan(model.type, genesis, [], extensions)
