"""
Base class for Lloyd-style clustering algorithms.

Provides the common algorithmic skeleton alternating between an assignment
step and an update step until the labels reach a fixed point.
"""

from abc import abstractmethod
from typing import Optional, Dict, Any, List, Union
import torch
from torch import Tensor
import time
import warnings

from .interfaces import (
    ClusterRepresentation, AssignmentStrategy, ParameterUpdater,
    InitializationStrategy, ConvergenceCriterion, ClusteringObjective
)
from .data_structures import ClusterState, AssignmentMatrix, AlgorithmState
from .exceptions import InvalidStateError
from ..utils.device import parse_device
from ..utils.validation import validate_data, check_n_clusters, check_random_state


class BaseClusteringAlgorithm:
    """Base class implementing the alternating optimization framework.

    Subclasses need to specify:
    - Assignment strategy
    - Parameter update strategy
    - Initialization strategy
    - Convergence criterion
    - Objective function
    """

    def __init__(self,
                 n_clusters: int,
                 max_iter: int = 300,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 device: Optional[Union[str, torch.device]] = None):
        """
        Args:
            n_clusters: Number of clusters K
            max_iter: Safety bound on Lloyd iterations
            verbose: Verbosity level (0=silent, 1=progress, 2=detailed)
            random_state: Seed or torch.Generator used for seeding
            device: Torch device (None for CPU, 'auto' to pick the best one)
        """
        self.n_clusters = n_clusters
        self.max_iter = max_iter
        self.verbose = verbose
        self.random_state = random_state
        self.device = parse_device(device)

        # These will be set by subclasses
        self.representations: Optional[List[ClusterRepresentation]] = None
        self.assignment_strategy: Optional[AssignmentStrategy] = None
        self.update_strategy: Optional[ParameterUpdater] = None
        self.initialization_strategy: Optional[InitializationStrategy] = None
        self.convergence_criterion: Optional[ConvergenceCriterion] = None
        self.objective: Optional[ClusteringObjective] = None

        # Algorithm state
        self.fitted_ = False
        self.converged_ = False
        self.n_iter_ = 0
        self.history_: List[AlgorithmState] = []
        self.labels_: Optional[Tensor] = None

    @abstractmethod
    def _create_components(self) -> None:
        """Create algorithm-specific components.

        Subclasses must implement this to instantiate:
        - self.assignment_strategy
        - self.update_strategy
        - self.initialization_strategy
        - self.convergence_criterion
        - self.objective
        """
        pass

    def fit(self, X: Tensor, y: Optional[Tensor] = None,
            generator: Optional[torch.Generator] = None) -> 'BaseClusteringAlgorithm':
        """Fit the clustering model.

        Args:
            X: (n, d) data
            y: Ignored (for sklearn compatibility)
            generator: Random generator to draw from instead of random_state

        Returns:
            Self
        """
        return self._fit(X, generator)

    def fit_predict(self, X: Tensor, y: Optional[Tensor] = None) -> Tensor:
        """Fit and return the training labels."""
        self._fit(X)
        return self.labels_

    def predict(self, X: Tensor) -> Tensor:
        """Predict cluster assignments for new data.

        Args:
            X: (n, d) data tensor

        Returns:
            (n,) tensor of cluster assignments
        """
        if not self.fitted_:
            raise InvalidStateError("Model must be fitted before calling predict")

        X = self._validate_data(X)
        return self.assignment_strategy.compute_assignments(X, self.representations)

    def _fit(self, X: Tensor,
             generator: Optional[torch.Generator] = None) -> 'BaseClusteringAlgorithm':
        """Internal fit method implementing the alternating optimization."""
        X = self._validate_data(X)
        n_points, dimension = X.shape
        check_n_clusters(self.n_clusters, n_points)

        self._create_components()

        if generator is None:
            generator = check_random_state(self.random_state)

        if self.verbose:
            print(f"Initializing {self.n_clusters} clusters...")

        start_time = time.time()
        self.representations = self.initialization_strategy.initialize(
            X, self.n_clusters, generator=generator
        )

        self.n_iter_ = 0
        self.history_ = []
        self.converged_ = False
        self.convergence_criterion.reset()
        assignments = None

        for iteration in range(self.max_iter):
            iter_start_time = time.time()

            # Assignment step
            assignments = self.assignment_strategy.compute_assignments(
                X, self.representations
            )
            assignment_matrix = AssignmentMatrix(assignments, self.n_clusters)

            # Update step; empty clusters keep their previous parameters
            for k, representation in enumerate(self.representations):
                cluster_indices = assignment_matrix.get_cluster_indices(k)
                if len(cluster_indices) > 0:
                    self.update_strategy.update(representation, X[cluster_indices])

            cluster_state = self._extract_cluster_state(assignment_matrix)
            objective_value = self.objective.compute(X, cluster_state.means, assignments)

            converged = self.convergence_criterion.check({
                'iteration': iteration,
                'objective': objective_value,
                'assignments': assignments,
                'cluster_state': cluster_state
            })

            self.history_.append(AlgorithmState(
                iteration=iteration,
                cluster_state=cluster_state,
                assignments=assignment_matrix,
                objective_value=objective_value,
                n_changed=getattr(self.convergence_criterion, 'last_n_changed', None)
            ))
            self.n_iter_ = iteration + 1

            iter_time = time.time() - iter_start_time
            if self.verbose >= 2 or (self.verbose >= 1 and iteration % 10 == 0):
                obj_direction = "↓" if self.objective.minimize else "↑"
                print(f"Iteration {iteration:3d}: objective = {objective_value:.6f} "
                      f"{obj_direction} ({iter_time:.3f}s)")

            if converged:
                self.converged_ = True
                if self.verbose:
                    print(f"Converged at iteration {iteration}")
                break

        if not self.converged_:
            warnings.warn(f"Failed to converge after {self.max_iter} iterations")

        if self.verbose:
            print(f"Total fitting time: {time.time() - start_time:.3f}s")

        self.labels_ = assignments.clone()
        self.fitted_ = True
        return self

    def _validate_data(self, X: Tensor) -> Tensor:
        """Validate and prepare input data."""
        return validate_data(X, device=self.device)

    def _extract_cluster_state(self, assignment_matrix: Optional[AssignmentMatrix] = None) -> ClusterState:
        """Collect current cluster parameters into a ClusterState."""
        means = torch.stack([
            rep.get_parameters()['mean']
            for rep in self.representations
        ])

        mixing_weights = None
        if assignment_matrix is not None:
            counts = assignment_matrix.count_per_cluster().to(means.dtype)
            mixing_weights = counts / counts.sum()

        return ClusterState(
            means=means,
            n_clusters=len(self.representations),
            dimension=means.shape[1],
            mixing_weights=mixing_weights
        )

    @property
    def cluster_centers_(self) -> Tensor:
        """Get cluster centers."""
        if not self.fitted_:
            raise InvalidStateError("Model must be fitted first")
        return self._extract_cluster_state().means

    @property
    def inertia_(self) -> float:
        """Get final objective value."""
        if not self.fitted_:
            raise InvalidStateError("Model must be fitted first")
        return self.history_[-1].objective_value

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        """Get parameters (sklearn compatibility)."""
        return {
            'n_clusters': self.n_clusters,
            'max_iter': self.max_iter,
            'verbose': self.verbose,
            'random_state': self.random_state,
            'device': self.device
        }

    def set_params(self, **params) -> 'BaseClusteringAlgorithm':
        """Set parameters (sklearn compatibility)."""
        for key, value in params.items():
            if key == 'device':
                value = parse_device(value)
            setattr(self, key, value)
        return self
