"""
Random initialization strategy.

Selects distinct random points from the dataset as initial cluster centers.
"""

from typing import List, Optional
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy, ClusterRepresentation
from ..base.exceptions import InvalidInputError
from ..representations.centroid import CentroidRepresentation


class RandomInit(InitializationStrategy):
    """Random initialization by selecting points from the dataset.

    Selects n_clusters random points (without replacement) as initial centers.
    """

    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> List[ClusterRepresentation]:
        """Initialize clusters with random points.

        Args:
            points: (n, d) data points
            n_clusters: Number of clusters
            generator: CPU generator for the permutation

        Returns:
            List of initialized CentroidRepresentations
        """
        n_points, dimension = points.shape

        if n_clusters > n_points:
            raise InvalidInputError(f"Cannot create {n_clusters} clusters from {n_points} points")

        indices = torch.randperm(n_points, generator=generator)[:n_clusters].tolist()

        representations = []
        for idx in indices:
            rep = CentroidRepresentation(dimension, points.device, points.dtype)
            rep.mean = points[idx].clone()
            representations.append(rep)

        return representations
