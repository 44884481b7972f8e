"""Utility functions for X-means clustering."""

from .device import (
    get_default_device,
    parse_device
)

from .validation import (
    validate_data,
    validate_centers,
    check_n_clusters,
    check_cluster_range,
    check_random_state
)

from .geometry import (
    bounding_box,
    bounding_box_diagonal,
    mean_vector,
    norm,
    euclidean_distance,
    squared_distances,
    random_unit_vector
)

from .convergence import ChangeInAssignments

__all__ = [
    # Device management
    'get_default_device',
    'parse_device',

    # Validation
    'validate_data',
    'validate_centers',
    'check_n_clusters',
    'check_cluster_range',
    'check_random_state',

    # Geometry
    'bounding_box',
    'bounding_box_diagonal',
    'mean_vector',
    'norm',
    'euclidean_distance',
    'squared_distances',
    'random_unit_vector',

    # Convergence criteria
    'ChangeInAssignments'
]
