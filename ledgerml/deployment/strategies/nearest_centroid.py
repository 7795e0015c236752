"""
Nearest centroid deployment.

Labels and data counts are fixed when a class is registered; the centroid
coordinates are streamed in afterwards. All centroids must share one
dimensionality.
"""

import logging

from ...errors import PreconditionViolation
from ...encoding import encode_vector
from ...models import ModelFamily, NearestCentroidModel
from ..chunks import plan_chunks
from .base import CONSTRUCTOR, DeploymentPlan, DeploymentStrategy, PlannedWrite

logger = logging.getLogger(__name__)


class NearestCentroidStrategy(DeploymentStrategy):
    """Deploys a (dense or sparse) ``NearestCentroidClassifier`` contract."""

    family = ModelFamily.NEAREST_CENTROID
    initial_chunk_size = 500
    chunk_size = 500

    def plan(self, model: NearestCentroidModel) -> DeploymentPlan:
        if not model.centroids:
            raise PreconditionViolation("A nearest centroid model needs at least one class.")

        labels = []
        centroids = []
        data_counts = []
        num_dimensions = None
        for label, info in model.centroids.items():
            if num_dimensions is None:
                num_dimensions = len(info.centroid)
            elif len(info.centroid) != num_dimensions:
                raise PreconditionViolation(
                    f"Found a centroid with {len(info.centroid)} dimensions. "
                    f"Expected: {num_dimensions}."
                )
            labels.append(label)
            centroids.append(encode_vector(info.centroid, self.to_float))
            data_counts.append(info.data_count)

        windows = plan_chunks(num_dimensions, self.initial_chunk_size, self.chunk_size)
        first_window = windows[0] if windows else None
        first = [centroid[:self.initial_chunk_size] for centroid in centroids]

        genesis = PlannedWrite(
            method=CONSTRUCTOR,
            args=[[labels[0]], [first[0]], [data_counts[0]]],
            description=(
                "Please accept the prompt to deploy the first class "
                "for the Nearest Centroid classifier"
            ),
            error_description="Error deploying the model",
            label=labels[0],
            chunk=first_window,
        )

        registrations = [
            PlannedWrite(
                method="addClass",
                args=[first[i], labels[i], data_counts[i]],
                description=f'Please accept the prompt to create the "{labels[i]}" class',
                error_description=f'Error creating the "{labels[i]}" class',
                label=labels[i],
                chunk=first_window,
            )
            for i in range(1, len(labels))
        ]

        extensions = [
            PlannedWrite(
                method="extendCentroid",
                args=[chunk.take(centroids[i]), i],
                description=(
                    f"Please accept the prompt to upload the values for dimensions {chunk} "
                    f'for the "{label}" class'
                ),
                error_description=f'Error uploading dimensions {chunk} for the "{label}" class',
                label=label,
                chunk=chunk,
            )
            for i, label in enumerate(labels)
            for chunk in windows[1:]
        ]

        logger.debug(
            f"Nearest centroid plan: {len(labels)} classes x {num_dimensions} dimensions"
        )
        return DeploymentPlan(model.type, genesis, registrations, extensions)
