"""
Core interfaces for the X-means clustering components.

The K-clustering engine is assembled from small strategy objects (how a
cluster is represented, how points are assigned, how parameters are updated,
how centers are seeded, when to stop). These abstract base classes fix the
contract between them.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List
import torch
from torch import Tensor


class ClusterRepresentation(ABC):
    """Abstract base class for cluster representations.

    X-means only needs centroids, but the engine talks to clusters through
    this interface so the assignment and update steps stay generic.
    """

    @abstractmethod
    def distance_to_point(self, points: Tensor) -> Tensor:
        """Compute distance/cost from points to this cluster.

        Args:
            points: (n, d) tensor of data points

        Returns:
            (n,) tensor of distances/costs
        """
        pass

    @abstractmethod
    def update_from_points(self, points: Tensor, **kwargs) -> None:
        """Update cluster parameters given its assigned points.

        Args:
            points: (n, d) tensor of assigned points
        """
        pass

    @abstractmethod
    def get_parameters(self) -> Dict[str, Tensor]:
        """Return all parameters defining this cluster representation."""
        pass

    @abstractmethod
    def set_parameters(self, params: Dict[str, Tensor]) -> None:
        """Set cluster parameters from dictionary."""
        pass

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Ambient dimension of the data."""
        pass

    @abstractmethod
    def to(self, device: torch.device) -> 'ClusterRepresentation':
        """Move representation to specified device."""
        pass


class AssignmentStrategy(ABC):
    """Abstract base class for point-to-cluster assignment strategies."""

    @abstractmethod
    def compute_assignments(self, points: Tensor,
                            representations: List[ClusterRepresentation],
                            **kwargs) -> Tensor:
        """Compute cluster assignments for points.

        Args:
            points: (n, d) tensor of data points
            representations: List of K cluster representations

        Returns:
            (n,) tensor of cluster indices
        """
        pass


class ParameterUpdater(ABC):
    """Abstract base class for cluster parameter update strategies."""

    @abstractmethod
    def update(self, representation: ClusterRepresentation,
               points: Tensor,
               **kwargs) -> None:
        """Update one cluster's parameters from the points assigned to it."""
        pass


class InitializationStrategy(ABC):
    """Abstract base class for seeding strategies."""

    @abstractmethod
    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> List[ClusterRepresentation]:
        """Choose initial cluster representations.

        Args:
            points: (n, d) tensor of data points
            n_clusters: Number of clusters to initialize
            generator: CPU random generator all draws are taken from

        Returns:
            List of K initialized cluster representations
        """
        pass


class ConvergenceCriterion(ABC):
    """Abstract base class for convergence checking."""

    def __init__(self):
        self.history = []

    @abstractmethod
    def check(self, current_state: Dict[str, Any]) -> bool:
        """Return True once the algorithm has converged."""
        pass

    def reset(self):
        """Reset convergence history."""
        self.history = []


class ClusteringObjective(ABC):
    """Abstract base class for clustering objective functions."""

    @abstractmethod
    def compute(self, points: Tensor, centers: Tensor,
                assignments: Tensor) -> float:
        """Compute the objective value of a hard clustering.

        Args:
            points: (n, d) tensor of data points
            centers: (K, d) tensor of cluster centers
            assignments: (n,) tensor of cluster indices

        Returns:
            Scalar objective value
        """
        pass

    @property
    @abstractmethod
    def minimize(self) -> bool:
        """Whether to minimize (True) or maximize (False) this objective."""
        pass
