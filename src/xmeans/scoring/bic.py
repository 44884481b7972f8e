"""
Bayesian Information Criterion for hard K-clusterings.

The model behind the score is a mixture of K isotropic Gaussians that share
one variance, with mixing weights equal to the cluster size fractions
(Pelleg & Moore, 2000):

    sigma^2 = 1/(R - K) * sum_i ||x_i - mu_(i)||^2
    log P(x_i) = log(R_(i)/R) - M/2 log(2 pi sigma^2) - ||x_i - mu_(i)||^2 / (2 sigma^2)
    BIC = sum_i log P(x_i) - p/2 log(R),   p = (K - 1) + M*K + 1

Higher is better. A split is worth keeping when the split model scores
strictly higher than its parent.
"""

import math
from typing import Tuple
import torch
from torch import Tensor

from ..base.interfaces import ClusteringObjective
from ..base.exceptions import InvalidInputError, InvalidStateError


def free_parameters(n_clusters: int, dimension: int) -> int:
    """Number of free parameters: K-1 mixing weights, M*K coordinates, 1 variance."""
    return (n_clusters - 1) + dimension * n_clusters + 1


def _prepare(points: Tensor, labels: Tensor, centers: Tensor) -> Tuple[Tensor, Tensor, Tensor]:
    if points.dim() != 2 or centers.dim() != 2:
        raise InvalidInputError("points and centers must be 2D tensors")
    if points.shape[1] != centers.shape[1]:
        raise InvalidInputError(f"Points have dimension {points.shape[1]}, "
                                f"centers have dimension {centers.shape[1]}")
    labels = torch.as_tensor(labels, device=points.device).long()
    if labels.shape != (points.shape[0],):
        raise InvalidInputError(f"Expected {points.shape[0]} labels, got {tuple(labels.shape)}")
    if labels.numel() > 0 and (labels.min() < 0 or labels.max() >= centers.shape[0]):
        raise InvalidInputError("Labels must lie in [0, K)")

    points = points.to(torch.float64)
    centers = centers.to(device=points.device, dtype=torch.float64)
    return points, labels, centers


def pooled_variance(points: Tensor, labels: Tensor, centers: Tensor) -> float:
    """Maximum likelihood estimate of the shared isotropic variance.

    Raises:
        InvalidStateError: If R <= K, where the estimator is undefined
    """
    points, labels, centers = _prepare(points, labels, centers)
    n_points, n_clusters = points.shape[0], centers.shape[0]
    if n_points <= n_clusters:
        raise InvalidStateError(f"Variance estimate undefined for {n_points} points "
                                f"and {n_clusters} clusters (need R > K)")
    sse = torch.sum((points - centers[labels]) ** 2)
    return (sse / (n_points - n_clusters)).item()


def log_likelihood(points: Tensor, labels: Tensor, centers: Tensor) -> float:
    """Log-likelihood of the data under the shared-variance mixture.

    Returns +inf when every point sits exactly on its center.
    """
    points, labels, centers = _prepare(points, labels, centers)
    n_points, dimension = points.shape
    n_clusters = centers.shape[0]

    variance = pooled_variance(points, labels, centers)
    if variance <= 0.0:
        return math.inf

    squared = torch.sum((points - centers[labels]) ** 2, dim=1)
    counts = torch.bincount(labels, minlength=n_clusters).to(torch.float64)
    log_mixing = torch.log(counts[labels] / n_points)

    per_point = (log_mixing
                 - 0.5 * dimension * math.log(2.0 * math.pi * variance)
                 - squared / (2.0 * variance))
    return per_point.sum().item()


def bic_score(points: Tensor, labels: Tensor, centers: Tensor) -> float:
    """BIC of a fitted K-clustering (higher is better).

    Args:
        points: (R, M) data points
        labels: (R,) cluster index of every point
        centers: (K, M) cluster centers

    Returns:
        Score as a Python float

    Raises:
        InvalidStateError: If R <= K
    """
    n_points, dimension = points.shape
    n_clusters = centers.shape[0]

    ll = log_likelihood(points, labels, centers)
    p = free_parameters(n_clusters, dimension)
    return ll - 0.5 * p * math.log(n_points)


class BICObjective(ClusteringObjective):
    """BIC as a clustering objective (maximized)."""

    def compute(self, points: Tensor, centers: Tensor,
                assignments: Tensor) -> float:
        """Compute the BIC of the clustering."""
        return bic_score(points, assignments, centers)

    @property
    def minimize(self) -> bool:
        return False
