"""
Naive Bayes deployment.

Class labels and example counts are fixed when a class is registered; only
the per-class feature count vectors are streamed in afterwards.
"""

import logging

from ...errors import PreconditionViolation
from ...encoding import encode_scalar
from ...models import ModelFamily, NaiveBayesModel
from ..chunks import plan_chunks
from .base import CONSTRUCTOR, DeploymentPlan, DeploymentStrategy, PlannedWrite

logger = logging.getLogger(__name__)

DEFAULT_SMOOTHING_FACTOR = 1


class NaiveBayesStrategy(DeploymentStrategy):
    """Deploys a ``NaiveBayesClassifier`` contract."""

    family = ModelFamily.NAIVE_BAYES
    initial_chunk_size = 150
    chunk_size = 350

    def plan(self, model: NaiveBayesModel) -> DeploymentPlan:
        labels = model.classifications
        if not labels:
            raise PreconditionViolation("A Naive Bayes model needs at least one class.")
        if len(model.class_counts) != len(labels) or len(model.feature_counts) != len(labels):
            raise PreconditionViolation(
                f"Expected {len(labels)} class counts and feature count vectors, "
                f"got {len(model.class_counts)} and {len(model.feature_counts)}."
            )

        smoothing = model.smoothing_factor
        if smoothing is None:
            smoothing = DEFAULT_SMOOTHING_FACTOR
        smoothing_factor = encode_scalar(smoothing, self.to_float)

        windows = [
            plan_chunks(len(counts), self.initial_chunk_size, self.chunk_size)
            for counts in model.feature_counts
        ]
        first = [counts[:self.initial_chunk_size] for counts in model.feature_counts]

        genesis = PlannedWrite(
            method=CONSTRUCTOR,
            args=[[labels[0]], [model.class_counts[0]], [first[0]],
                  model.total_num_features, smoothing_factor],
            description="Please accept the prompt to deploy the Naive Bayes classifier",
            error_description="Error deploying the model",
            label=labels[0],
            chunk=windows[0][0] if windows[0] else None,
        )

        registrations = [
            PlannedWrite(
                method="addClass",
                args=[model.class_counts[i], first[i], labels[i]],
                description=f'Please accept the prompt to create the "{labels[i]}" class',
                error_description=f'Error creating the "{labels[i]}" class',
                label=labels[i],
                chunk=windows[i][0] if windows[i] else None,
            )
            for i in range(1, len(labels))
        ]

        extensions = []
        for i, label in enumerate(labels):
            for chunk in windows[i][1:]:
                extensions.append(PlannedWrite(
                    method="initializeCounts",
                    args=[chunk.take(model.feature_counts[i]), i],
                    description=(
                        f'Please accept the prompt to upload the features {chunk} '
                        f'for the "{label}" class'
                    ),
                    error_description=f'Error uploading the features {chunk} for the "{label}" class',
                    label=label,
                    chunk=chunk,
                ))

        logger.debug(
            f"Naive Bayes plan: {len(labels)} classes, {len(extensions)} feature chunks"
        )
        return DeploymentPlan(model.type, genesis, registrations, extensions)
