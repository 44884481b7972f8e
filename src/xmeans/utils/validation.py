"""
Input validation utilities.

Converts user input to tensors and checks the setup invariants of a
clustering run before any work is done.
"""

from typing import Optional, Union, Sequence
import torch
from torch import Tensor
import numpy as np

from ..base.exceptions import InvalidInputError


def validate_data(X: Union[Tensor, np.ndarray, Sequence],
                  dtype: torch.dtype = torch.float32,
                  device: Optional[torch.device] = None,
                  column_major: bool = False,
                  ensure_finite: bool = True,
                  ensure_min_samples: int = 1,
                  ensure_min_features: int = 1) -> Tensor:
    """Validate and convert a point set to an (n, d) tensor.

    Args:
        X: Points as a tensor, numpy array, or list of equal-length vectors
        dtype: Target data type
        device: Target device
        column_major: If True, X is a (d, n) matrix with one point per column
        ensure_finite: Whether to check for inf/nan
        ensure_min_samples: Minimum number of points required
        ensure_min_features: Minimum dimensionality required

    Returns:
        Validated (n, d) tensor

    Raises:
        InvalidInputError: If validation fails
    """
    if isinstance(X, Tensor):
        X = X.detach().to(dtype=dtype, device=device)
    elif isinstance(X, np.ndarray):
        X = torch.from_numpy(np.ascontiguousarray(X)).to(dtype=dtype, device=device)
    elif isinstance(X, (list, tuple)):
        rows = [np.asarray(row, dtype=np.float64).ravel() for row in X]
        if len({row.shape[0] for row in rows}) > 1:
            raise InvalidInputError("All points must have the same dimensionality")
        if rows:
            X = torch.from_numpy(np.stack(rows)).to(dtype=dtype, device=device)
        else:
            X = torch.empty(0, 0, dtype=dtype, device=device)
    else:
        raise InvalidInputError(f"Cannot convert {type(X)} to tensor")

    if X.dim() == 1:
        X = X.unsqueeze(1)
    elif X.dim() != 2:
        raise InvalidInputError(f"Expected 2D array, got {X.dim()}D")

    if column_major:
        X = X.t().contiguous()

    n_samples, n_features = X.shape

    if n_samples < ensure_min_samples:
        raise InvalidInputError(f"Found {n_samples} samples, but need at least "
                                f"{ensure_min_samples}")

    if n_features < ensure_min_features:
        raise InvalidInputError(f"Found {n_features} features, but need at least "
                                f"{ensure_min_features}")

    if ensure_finite:
        if torch.isnan(X).any():
            raise InvalidInputError("Input contains NaN values")
        if torch.isinf(X).any():
            raise InvalidInputError("Input contains infinite values")

    return X


def validate_centers(centers: Union[Tensor, np.ndarray, Sequence],
                     n_clusters: int,
                     dimension: int,
                     dtype: torch.dtype = torch.float32,
                     device: Optional[torch.device] = None) -> Tensor:
    """Validate manually supplied centers against K and the data dimension.

    Raises:
        InvalidInputError: If the center count is not K or the dimensionality
            differs from the points
    """
    centers = validate_data(centers, dtype=dtype, device=device)

    if centers.shape[0] != n_clusters:
        raise InvalidInputError(f"Initial centers has {centers.shape[0]} clusters, "
                                f"but n_clusters={n_clusters}")
    if centers.shape[1] != dimension:
        raise InvalidInputError(f"Initial centers has dimension {centers.shape[1]}, "
                                f"but data has dimension {dimension}")
    return centers


def check_n_clusters(n_clusters: int, n_samples: int) -> None:
    """Validate number of clusters.

    Raises:
        InvalidInputError: If K is not a positive integer no larger than n
    """
    if isinstance(n_clusters, bool) or not isinstance(n_clusters, (int, np.integer)):
        raise InvalidInputError(f"n_clusters must be int, got {type(n_clusters)}")

    if n_clusters <= 0:
        raise InvalidInputError(f"n_clusters must be positive, got {n_clusters}")

    if n_clusters > n_samples:
        raise InvalidInputError(f"n_clusters ({n_clusters}) cannot be larger than "
                                f"n_samples ({n_samples})")


def check_cluster_range(min_clusters: int, max_clusters: int,
                        n_samples: Optional[int] = None) -> None:
    """Validate the [min_clusters, max_clusters] search range.

    Raises:
        InvalidInputError: If min < 1, min > max, or max exceeds n_samples
    """
    for name, value in (('min_clusters', min_clusters), ('max_clusters', max_clusters)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidInputError(f"{name} must be int, got {type(value)}")

    if min_clusters < 1:
        raise InvalidInputError(f"min_clusters must be at least 1, got {min_clusters}")

    if min_clusters > max_clusters:
        raise InvalidInputError(f"min_clusters ({min_clusters}) cannot be larger than "
                                f"max_clusters ({max_clusters})")

    if n_samples is not None and max_clusters > n_samples:
        raise InvalidInputError(f"max_clusters ({max_clusters}) cannot be larger than "
                                f"n_samples ({n_samples})")


def check_random_state(random_state: Optional[Union[int, torch.Generator]]) -> torch.Generator:
    """Create a CPU generator from a random state.

    Args:
        random_state: Seed, existing generator, or None for a fresh
            non-deterministic generator

    Returns:
        torch.Generator
    """
    if random_state is None:
        generator = torch.Generator()
        generator.seed()
        return generator
    elif isinstance(random_state, torch.Generator):
        return random_state
    elif isinstance(random_state, (int, np.integer)) and not isinstance(random_state, bool):
        generator = torch.Generator()
        generator.manual_seed(int(random_state))
        return generator
    else:
        raise InvalidInputError(f"random_state must be int or Generator, got {type(random_state)}")
