"""
X-means: K-means clustering that discovers the number of clusters.

This package implements:
- K-means (Lloyd's algorithm) with random, k-means++ or manual seeding
- X-means: BIC-guided cluster splitting between min_clusters and max_clusters

Example usage:
    >>> import torch
    >>> from xmeans import XMeans
    >>>
    >>> X = torch.cat([torch.randn(100, 2), torch.randn(100, 2) + 8.0])
    >>>
    >>> model = XMeans(min_clusters=1, max_clusters=4, stall_policy='stop', random_state=0)
    >>> model.fit(X)
    >>> model.n_clusters_
    2
"""

__version__ = '0.1.0'

from .algorithms.kmeans import KMeans, kmeans
from .algorithms.xmeans import XMeans, SearchState

from .scoring import bic_score, BICObjective

from .visualization import (
    plot_clusters_2d,
    plot_k_history
)

from .base import (
    ClusterState,
    AssignmentMatrix,
    StructureStep,
    XMeansError,
    InvalidInputError,
    InvalidStateError
)

__all__ = [
    # Algorithms
    'KMeans',
    'kmeans',
    'XMeans',
    'SearchState',

    # Scoring
    'bic_score',
    'BICObjective',

    # Core data structures
    'ClusterState',
    'AssignmentMatrix',
    'StructureStep',

    # Errors
    'XMeansError',
    'InvalidInputError',
    'InvalidStateError',

    # Visualization
    'plot_clusters_2d',
    'plot_k_history',

    # Version
    '__version__'
]
