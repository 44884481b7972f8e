"""Clustering algorithm implementations."""

from .kmeans import KMeans, KMeansObjective, kmeans
from .xmeans import XMeans, SearchState

__all__ = [
    'KMeans',
    'KMeansObjective',
    'kmeans',
    'XMeans',
    'SearchState'
]
