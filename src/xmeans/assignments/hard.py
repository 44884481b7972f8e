"""
Hard assignment strategy: each point goes to its nearest cluster.
"""

from typing import List
import torch
from torch import Tensor

from ..base.interfaces import AssignmentStrategy, ClusterRepresentation


class HardAssignment(AssignmentStrategy):
    """Hard (discrete) assignment to the nearest cluster.

    Ties go to the lowest cluster index (``torch.argmin`` returns the first
    minimal entry).
    """

    def compute_assignments(self, points: Tensor,
                            representations: List[ClusterRepresentation],
                            **kwargs) -> Tensor:
        """Assign each point to nearest cluster.

        Args:
            points: (n, d) data points
            representations: List of K cluster representations

        Returns:
            (n,) tensor of cluster indices
        """
        distances = self.compute_distances(points, representations)
        return torch.argmin(distances, dim=1)

    @staticmethod
    def compute_distances(points: Tensor,
                          representations: List[ClusterRepresentation]) -> Tensor:
        """(n, K) matrix of distances from every point to every cluster."""
        n_points = points.shape[0]
        n_clusters = len(representations)

        distances = torch.zeros(n_points, n_clusters, device=points.device, dtype=points.dtype)
        for k, representation in enumerate(representations):
            distances[:, k] = representation.distance_to_point(points)

        return distances
