"""
Stateless geometry helpers shared by the K-clustering engine and the
structural search driver.
"""

from typing import Optional, Tuple
import torch
from torch import Tensor

from ..base.exceptions import InvalidInputError


def _check_points(points: Tensor) -> None:
    if points.dim() != 2:
        raise InvalidInputError(f"Expected 2D tensor, got {points.dim()}D")
    if points.shape[0] == 0:
        raise InvalidInputError("Cannot compute on an empty point set")


def bounding_box(points: Tensor) -> Tuple[Tensor, Tensor]:
    """Componentwise min and max corners of a point collection.

    Args:
        points: (n, d) tensor

    Returns:
        (min_corner, max_corner), each (d,)
    """
    _check_points(points)
    return points.min(dim=0).values, points.max(dim=0).values


def bounding_box_diagonal(points: Tensor) -> float:
    """Length of the bounding box diagonal."""
    min_corner, max_corner = bounding_box(points)
    return norm(max_corner - min_corner)


def mean_vector(points: Tensor) -> Tensor:
    """Componentwise mean of an (n, d) point collection."""
    _check_points(points)
    return points.mean(dim=0)


def norm(vector: Tensor) -> float:
    """Euclidean norm of a vector."""
    return torch.linalg.vector_norm(vector).item()


def euclidean_distance(a: Tensor, b: Tensor) -> float:
    """Euclidean distance between two vectors of equal length."""
    if a.shape != b.shape:
        raise InvalidInputError(f"Shape mismatch: {tuple(a.shape)} vs {tuple(b.shape)}")
    return norm(a - b)


def squared_distances(points: Tensor, centers: Tensor) -> Tensor:
    """Squared Euclidean distance from every point to every center.

    Args:
        points: (n, d) tensor
        centers: (k, d) tensor

    Returns:
        (n, k) tensor
    """
    _check_points(points)
    _check_points(centers)
    if points.shape[1] != centers.shape[1]:
        raise InvalidInputError(f"Points have dimension {points.shape[1]}, "
                                f"centers have dimension {centers.shape[1]}")
    diff = points.unsqueeze(1) - centers.unsqueeze(0)
    return torch.sum(diff * diff, dim=2)


def random_unit_vector(dimension: int,
                       generator: Optional[torch.Generator] = None,
                       dtype: torch.dtype = torch.float32,
                       device: Optional[torch.device] = None) -> Tensor:
    """Draw a direction uniformly from the unit hypersphere in R^dimension.

    A standard normal draw is rotation invariant, so normalising it gives a
    uniform direction. Sampling happens on the CPU generator and the result
    is moved to ``device``.
    """
    if dimension < 1:
        raise InvalidInputError(f"dimension must be positive, got {dimension}")

    while True:
        v = torch.randn(dimension, generator=generator, dtype=torch.float64)
        length = torch.linalg.vector_norm(v)
        if length > 0:
            break
    return (v / length).to(dtype=dtype, device=device)
