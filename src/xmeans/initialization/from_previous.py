"""
Initialization from caller-supplied centers.

Used by the structural search to refit at a known structure and to seed
trial splits.
"""

from typing import List, Optional, Union
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy, ClusterRepresentation
from ..base.data_structures import ClusterState
from ..representations.centroid import CentroidRepresentation
from ..utils.validation import validate_centers


class FromPreviousInit(InitializationStrategy):
    """Initialize from given cluster centers ("manual" seeding).

    Accepts either:
    - A tensor or array-like of shape (n_clusters, dimension)
    - A ClusterState object from a previous run
    """

    def __init__(self, initial_state: Union[Tensor, ClusterState, list]):
        """
        Args:
            initial_state: Centers to start from
        """
        self.initial_state = initial_state

    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> List[ClusterRepresentation]:
        """Initialize from the supplied centers.

        Args:
            points: (n, d) data points (used for validation)
            n_clusters: Expected number of clusters

        Returns:
            List of initialized representations

        Raises:
            InvalidInputError: If the center count or dimensionality is wrong
        """
        dimension = points.shape[1]

        if isinstance(self.initial_state, ClusterState):
            centers = self.initial_state.means
        else:
            centers = self.initial_state

        centers = validate_centers(centers, n_clusters, dimension,
                                   dtype=points.dtype, device=points.device)

        representations = []
        for k in range(n_clusters):
            rep = CentroidRepresentation(dimension, points.device, points.dtype)
            rep.mean = centers[k].clone()
            representations.append(rep)

        return representations
