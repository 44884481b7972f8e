"""
K-means++ initialization strategy.

Selects initial cluster centers by weighted sampling so that centers start
far apart from each other.
"""

from typing import List, Optional
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy, ClusterRepresentation
from ..base.exceptions import InvalidInputError, InvalidStateError
from ..representations.centroid import CentroidRepresentation


class KMeansPlusPlusInit(InitializationStrategy):
    """K-means++ ("weighted probabilistic") seeding.

    Algorithm:
    1. Choose first center uniformly at random
    2. For each remaining center:
       - Compute distance from each point to nearest existing center
       - Draw the next center with probability proportional to that
         distance raised to ``power`` (squared distance by default)
    """

    def __init__(self, power: float = 2.0):
        """
        Args:
            power: Exponent applied to the nearest-center distance to form
                sampling weights. 2.0 is classic k-means++, 1.0 weights by
                plain distance.
        """
        self.power = power

    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> List[ClusterRepresentation]:
        """Initialize cluster centers using K-means++.

        Args:
            points: (n, d) data points
            n_clusters: Number of clusters
            generator: CPU generator all draws are taken from

        Returns:
            List of initialized CentroidRepresentations

        Raises:
            InvalidStateError: If the sampling weights sum to zero, i.e. the
                data has fewer distinct points than requested centers
        """
        n_points, dimension = points.shape

        if n_clusters > n_points:
            raise InvalidInputError(f"Cannot create {n_clusters} clusters from {n_points} points")

        center_indices = []

        first_idx = torch.randint(n_points, (1,), generator=generator).item()
        center_indices.append(first_idx)

        # Squared distance of each point to its nearest chosen center
        distances = torch.sum((points - points[first_idx].unsqueeze(0)) ** 2, dim=1)

        for _ in range(1, n_clusters):
            weights = self._sampling_weights(distances)
            next_idx = self.select_weighted_index(weights, generator)
            center_indices.append(next_idx)

            new_center_distances = torch.sum((points - points[next_idx].unsqueeze(0)) ** 2, dim=1)
            distances = torch.minimum(distances, new_center_distances)

        representations = []
        for idx in center_indices:
            rep = CentroidRepresentation(dimension, points.device, points.dtype)
            rep.mean = points[idx].clone()
            representations.append(rep)

        return representations

    def _sampling_weights(self, squared_distances: Tensor) -> Tensor:
        weights = squared_distances.detach().to(device='cpu', dtype=torch.float64)
        if self.power != 2.0:
            weights = weights.clamp(min=0.0).sqrt() ** self.power
        return weights

    @staticmethod
    def select_weighted_index(weights: Tensor,
                              generator: Optional[torch.Generator] = None) -> int:
        """Draw one index with probability proportional to ``weights``.

        Raises:
            InvalidStateError: If no weight is positive or the total is not
                positive
        """
        if weights.numel() == 0 or not (weights > 0).any():
            raise InvalidStateError("All sampling weights are non-positive; "
                                    "the point set has no spread left to seed from")
        total = weights.sum()
        if not total > 0:
            raise InvalidStateError(f"Sampling weights sum to {total.item()}")

        probabilities = weights.clamp(min=0.0) / total
        return torch.multinomial(probabilities, 1, generator=generator).item()
