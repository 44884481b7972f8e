"""
K-means clustering algorithm.

The fixed-K engine used by X-means, implemented on the modular framework.
Both the global parameter refit and the local two-way split trials run
through this class.
"""

from typing import Optional, Tuple, Union
import numpy as np
import torch
from torch import Tensor

from ..base.clustering_base import BaseClusteringAlgorithm
from ..base.interfaces import ClusteringObjective
from ..base.exceptions import InvalidInputError
from ..assignments.hard import HardAssignment
from ..initialization.kmeans_plusplus import KMeansPlusPlusInit
from ..initialization.random import RandomInit
from ..initialization.from_previous import FromPreviousInit
from ..utils.convergence import ChangeInAssignments
from ..updates.mean import MeanUpdater


INIT_METHODS = ('k-means++', 'random')


class KMeansObjective(ClusteringObjective):
    """K-means objective: sum of squared distances to centroids."""

    def compute(self, points: Tensor, centers: Tensor,
                assignments: Tensor) -> float:
        """Compute within-cluster sum of squares."""
        diff = points - centers[assignments]
        return torch.sum(diff * diff).item()

    @property
    def minimize(self) -> bool:
        return True


class KMeans(BaseClusteringAlgorithm):
    """K-means clustering with Lloyd's algorithm.

    Partitions data into K clusters and iterates assignment and mean updates
    until no label changes.

    Parameters
    ----------
    n_clusters : int
        Number of clusters
    init : str or array-like, default='k-means++'
        Initialization method:
        - 'k-means++' : weighted probabilistic seeding
        - 'random' : K distinct data points chosen uniformly
        - array of shape (n_clusters, n_features) : use as initial centers
    max_iter : int, default=300
        Safety bound on Lloyd iterations
    verbose : int, default=0
        Verbosity level
    random_state : int or torch.Generator, optional
        Seed or generator for reproducible seeding
    device : str or torch.device, optional
        Device for computation (CPU when None)

    Attributes
    ----------
    cluster_centers_ : Tensor of shape (n_clusters, n_features)
        Cluster centroids
    labels_ : Tensor of shape (n_samples,)
        Cluster assignments for training data
    inertia_ : float
        Sum of squared distances to the assigned centers
    n_iter_ : int
        Number of Lloyd iterations run
    converged_ : bool
        Whether the labels reached a fixed point before max_iter
    """

    def __init__(self,
                 n_clusters: int,
                 init: Union[str, Tensor, np.ndarray, list] = 'k-means++',
                 max_iter: int = 300,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 device: Optional[Union[str, torch.device]] = None):
        """Initialize K-means algorithm."""
        super().__init__(
            n_clusters=n_clusters,
            max_iter=max_iter,
            verbose=verbose,
            random_state=random_state,
            device=device
        )
        self.init = init

    def _create_components(self) -> None:
        """Create K-means specific components."""
        self.assignment_strategy = HardAssignment()
        self.update_strategy = MeanUpdater()

        if isinstance(self.init, str):
            if self.init == 'k-means++':
                self.initialization_strategy = KMeansPlusPlusInit()
            elif self.init == 'random':
                self.initialization_strategy = RandomInit()
            else:
                raise InvalidInputError(f"Unknown init method: {self.init}; "
                                        f"expected one of {INIT_METHODS} or an array of centers")
        else:
            self.initialization_strategy = FromPreviousInit(self.init)

        self.convergence_criterion = ChangeInAssignments(max_changed=0)
        self.objective = KMeansObjective()

    def fit(self, X: Tensor, y: Optional[Tensor] = None,
            generator: Optional[torch.Generator] = None) -> 'KMeans':
        """Fit K-means clustering.

        Parameters
        ----------
        X : Tensor of shape (n_samples, n_features)
            Training data
        y : Ignored
            Not used, present for API consistency
        generator : torch.Generator, optional
            Generator to draw seeds from; overrides random_state

        Returns
        -------
        self : KMeans
            Fitted estimator
        """
        return super().fit(X, y, generator=generator)

    def score(self, X: Tensor, y: Optional[Tensor] = None) -> float:
        """Opposite of the value of X on the K-means objective.

        Returns
        -------
        score : float
            Negative of sum of squared distances to centers
        """
        X = self._validate_data(X)
        labels = self.predict(X)
        return -self.objective.compute(X, self.cluster_centers_, labels)

    def get_params(self, deep: bool = True):
        params = super().get_params(deep)
        params['init'] = self.init
        return params


def kmeans(points: Union[Tensor, np.ndarray, list],
           n_clusters: int,
           init: Union[str, Tensor, np.ndarray, list] = 'k-means++',
           generator: Optional[torch.Generator] = None,
           max_iter: int = 300,
           device: Optional[Union[str, torch.device]] = None) -> Tuple[Tensor, Tensor]:
    """Run K-means once and return ``(centers, labels)``.

    A stateless wrapper around :class:`KMeans`: the returned tensors are
    fresh copies and the estimator is discarded.

    Args:
        points: (n, d) data
        n_clusters: K
        init: 'k-means++', 'random', or (K, d) manual centers
        generator: Random generator for the seeding draws
        max_iter: Safety bound on Lloyd iterations
        device: Computation device

    Returns:
        centers: (K, d) tensor
        labels: (n,) long tensor

    Raises:
        InvalidInputError: On N < K, dimension mismatch, or a wrong number of
            manual centers
        InvalidStateError: If weighted seeding runs out of spread
    """
    model = KMeans(n_clusters=n_clusters, init=init, max_iter=max_iter, device=device)
    model.fit(points, generator=generator)
    return model.cluster_centers_.clone(), model.labels_.clone()
