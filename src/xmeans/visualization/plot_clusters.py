"""
Cluster visualization utilities.

Plots X-means results in 2D and the growth of K over the structural search.
"""

from typing import Optional, List, Sequence
from torch import Tensor
import matplotlib
import matplotlib.pyplot as plt
import numpy as np


def _to_numpy(x) -> np.ndarray:
    if isinstance(x, Tensor):
        return x.detach().cpu().numpy()
    return np.asarray(x)


def plot_clusters_2d(X: Tensor,
                     labels: Tensor,
                     centers: Optional[Tensor] = None,
                     ax: Optional[plt.Axes] = None,
                     colors: Optional[List[str]] = None,
                     alpha: float = 0.7,
                     center_marker: str = 'X',
                     center_size: int = 200,
                     point_size: int = 50,
                     show_legend: bool = True,
                     title: Optional[str] = None) -> plt.Axes:
    """Plot 2D clustering results.

    Args:
        X: (n, 2) data points
        labels: (n,) cluster labels
        centers: Optional (k, 2) cluster centers
        ax: Matplotlib axes (created if None)
        colors: List of colors for clusters
        alpha: Point transparency
        center_marker: Marker for centers
        center_size: Size of center markers
        point_size: Size of data points
        show_legend: Whether to show legend
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 6))

    X_np = _to_numpy(X)
    labels_np = _to_numpy(labels)
    if X_np.ndim != 2 or X_np.shape[1] != 2:
        raise ValueError(f"plot_clusters_2d expects (n, 2) points, got {X_np.shape}")

    unique_labels = np.unique(labels_np)
    n_clusters = len(unique_labels)

    if colors is None:
        cmap = matplotlib.colormaps['tab10' if n_clusters <= 10 else 'tab20']
        colors = [cmap(i % cmap.N) for i in range(n_clusters)]

    for i, label in enumerate(unique_labels):
        mask = labels_np == label
        ax.scatter(X_np[mask, 0], X_np[mask, 1],
                   color=colors[i % len(colors)],
                   s=point_size,
                   alpha=alpha,
                   edgecolors='black',
                   linewidth=0.5,
                   label=f'Cluster {label}')

    if centers is not None:
        centers_np = _to_numpy(centers)
        ax.scatter(centers_np[:, 0], centers_np[:, 1],
                   c='black',
                   marker=center_marker,
                   s=center_size,
                   edgecolors='white',
                   linewidth=2,
                   label='Centers',
                   zorder=10)

    ax.set_xlabel('Feature 1')
    ax.set_ylabel('Feature 2')

    if title:
        ax.set_title(title)

    if show_legend:
        ax.legend()

    return ax


def plot_k_history(k_history: Sequence[int],
                   max_clusters: Optional[int] = None,
                   ax: Optional[plt.Axes] = None,
                   title: Optional[str] = 'Number of clusters per structure step') -> plt.Axes:
    """Plot K after every structure step of an X-means run.

    Args:
        k_history: XMeans.k_history_
        max_clusters: Draw the ceiling as a dashed line if given
        ax: Matplotlib axes (created if None)
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(6, 4))

    steps = np.arange(len(k_history))
    ax.step(steps, list(k_history), where='post', marker='o')

    if max_clusters is not None:
        ax.axhline(max_clusters, linestyle='--', color='gray', label='max_clusters')
        ax.legend()

    ax.set_xlabel('Structure step')
    ax.set_ylabel('K')
    if title:
        ax.set_title(title)

    return ax
