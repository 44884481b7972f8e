"""
Core data structures for the X-means clustering algorithms.

This module provides the containers passed between the K-clustering engine
and the structural search driver: cluster parameters, hard label
assignments, and per-iteration records.
"""

from typing import Optional, Dict, Any
import torch
from torch import Tensor
from dataclasses import dataclass, field


@dataclass
class ClusterState:
    """Container for all parameters defining clusters at a given iteration."""

    means: Tensor  # (K, d) cluster centers
    n_clusters: int
    dimension: int

    mixing_weights: Optional[Tensor] = None  # (K,) fraction of points per cluster

    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate dimensions and set derived attributes."""
        assert self.means.shape == (self.n_clusters, self.dimension)

        if self.mixing_weights is None:
            self.mixing_weights = torch.ones(self.n_clusters,
                                             device=self.means.device) / self.n_clusters

    @property
    def device(self) -> torch.device:
        """Device where tensors are stored."""
        return self.means.device

    def to(self, device: torch.device) -> 'ClusterState':
        """Move all tensors to specified device."""
        return ClusterState(
            means=self.means.to(device),
            n_clusters=self.n_clusters,
            dimension=self.dimension,
            mixing_weights=self.mixing_weights.to(device),
            metadata=self.metadata.copy()
        )


class AssignmentMatrix:
    """Hard cluster assignments with per-cluster queries.

    Wraps an (n,) label tensor. Every point carries exactly one label in
    [0, n_clusters).
    """

    def __init__(self, assignments: Tensor, n_clusters: int):
        """
        Args:
            assignments: (n,) hard assignments
            n_clusters: Number of clusters K
        """
        self.n_clusters = n_clusters
        assert assignments.dim() == 1
        if assignments.numel() > 0:
            assert assignments.max() < n_clusters
            assert assignments.min() >= 0
        self._labels = assignments.long()

    @property
    def n_points(self) -> int:
        """Number of data points."""
        return self._labels.shape[0]

    def get_hard(self) -> Tensor:
        """Get the (n,) label tensor."""
        return self._labels

    def get_cluster_indices(self, cluster_idx: int) -> Tensor:
        """Get indices of points assigned to a specific cluster, ascending."""
        return torch.where(self._labels == cluster_idx)[0]

    def count_per_cluster(self) -> Tensor:
        """Count points per cluster."""
        return torch.bincount(self._labels, minlength=self.n_clusters)

    def to(self, device: torch.device) -> 'AssignmentMatrix':
        """Move to specified device."""
        return AssignmentMatrix(self._labels.to(device), self.n_clusters)


@dataclass
class AlgorithmState:
    """Snapshot of one Lloyd iteration."""

    iteration: int
    cluster_state: ClusterState
    assignments: AssignmentMatrix
    objective_value: float
    n_changed: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to(self, device: torch.device) -> 'AlgorithmState':
        """Move all tensors to specified device."""
        return AlgorithmState(
            iteration=self.iteration,
            cluster_state=self.cluster_state.to(device),
            assignments=self.assignments.to(device),
            objective_value=self.objective_value,
            n_changed=self.n_changed,
            metadata=self.metadata.copy()
        )


@dataclass
class StructureStep:
    """Record of one outer iteration of the structural search."""

    iteration: int
    n_clusters_before: int
    n_clusters_after: int
    n_splits: int
    forced: bool = False
    bic: Optional[float] = None

    @property
    def grew(self) -> bool:
        """Whether this step added at least one cluster."""
        return self.n_clusters_after > self.n_clusters_before
