"""
X-means clustering: K-means with the number of clusters discovered in
[min_clusters, max_clusters].

The search alternates two steps (Pelleg & Moore, 2000):

- improve_params: a K-means refit at the current K, seeded with the current
  centers;
- improve_structure: every cluster proposes a two-way split along a random
  direction, refits the split locally with 2-means, and keeps it only if the
  split model has a higher BIC than the unsplit cluster.

K never shrinks and never exceeds max_clusters.
"""

from enum import Enum
from typing import Optional, List, Tuple, Union
import warnings
import numpy as np
import torch
from torch import Tensor

from .kmeans import kmeans, INIT_METHODS
from ..base.data_structures import StructureStep
from ..base.exceptions import InvalidInputError, InvalidStateError
from ..scoring.bic import bic_score
from ..utils.device import parse_device
from ..utils.geometry import bounding_box_diagonal, random_unit_vector, squared_distances
from ..utils.validation import validate_data, check_cluster_range, check_random_state


SPLIT_SCALES = ('global', 'cluster')
STALL_POLICIES = ('force', 'stop')

# A child model with K=2 needs R > 2 points for its variance estimate.
MIN_POINTS_TO_SCORE_SPLIT = 3


class SearchState(Enum):
    """Lifecycle of one structural search."""
    UNINITIALIZED = 'uninitialized'
    INITIALIZED = 'initialized'
    REFINING = 'refining'
    TERMINAL = 'terminal'


class XMeans:
    """X-means clustering with BIC-driven cluster splitting.

    Parameters
    ----------
    min_clusters : int, default=1
        Number of clusters the search starts from
    max_clusters : int, default=20
        Hard ceiling on the number of clusters; must not exceed n_samples
    init : {'k-means++', 'random'}, default='k-means++'
        Seeding of the initial min_clusters-means fit
    split_scale : {'global', 'cluster'}, default='global'
        Bounding box used to size trial splits: the whole point set, or only
        the members of the cluster being split
    stall_policy : {'force', 'stop'}, default='force'
        What to do when a structure pass accepts no split while K is still
        below max_clusters. 'force' splits the cluster with the largest
        within-cluster sum of squares; 'stop' ends the search.
    max_iter : int, default=300
        Lloyd iteration bound for every K-means call
    verbose : int, default=0
        Verbosity level (0=silent, 1=progress, 2=every split trial)
    random_state : int or torch.Generator, optional
        Seed or generator for all random draws
    device : str or torch.device, optional
        Device for computation (CPU when None)

    Attributes
    ----------
    cluster_centers_ : Tensor of shape (n_clusters_, n_features)
    labels_ : Tensor of shape (n_samples,)
    n_clusters_ : int
    bic_ : float or None
        BIC of the final structure (None when every cluster is a singleton
        and the score is undefined)
    k_history_ : list of int
        K after every improve_structure call
    history_ : list of StructureStep
    """

    def __init__(self,
                 min_clusters: int = 1,
                 max_clusters: int = 20,
                 init: str = 'k-means++',
                 split_scale: str = 'global',
                 stall_policy: str = 'force',
                 max_iter: int = 300,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 device: Optional[Union[str, torch.device]] = None):
        self.min_clusters = min_clusters
        self.max_clusters = max_clusters
        self.init = init
        self.split_scale = split_scale
        self.stall_policy = stall_policy
        self.max_iter = max_iter
        self.verbose = verbose
        self.random_state = random_state
        self.device = parse_device(device)

        self._check_options()
        self._reset()

    def _check_options(self) -> None:
        """Validate the search range and the option strings."""
        check_cluster_range(self.min_clusters, self.max_clusters)
        if self.init not in INIT_METHODS:
            raise InvalidInputError(f"Unknown init method: {self.init}; "
                                    f"expected one of {INIT_METHODS}")
        if self.split_scale not in SPLIT_SCALES:
            raise InvalidInputError(f"Unknown split_scale: {self.split_scale}; "
                                    f"expected one of {SPLIT_SCALES}")
        if self.stall_policy not in STALL_POLICIES:
            raise InvalidInputError(f"Unknown stall_policy: {self.stall_policy}; "
                                    f"expected one of {STALL_POLICIES}")

    def _reset(self) -> None:
        self.state = SearchState.UNINITIALIZED
        self._points: Optional[Tensor] = None
        self._generator: Optional[torch.Generator] = None
        self.cluster_centers_: Optional[Tensor] = None
        self.labels_: Optional[Tensor] = None
        self.bic_: Optional[float] = None
        self.k_history_: List[int] = []
        self.history_: List[StructureStep] = []
        self.n_iter_ = 0

    # ------------------------------------------------------------------
    # Search steps
    # ------------------------------------------------------------------
    def initialize(self, X, column_major: bool = False) -> 'XMeans':
        """Validate the points and fit min_clusters-means as the starting structure.

        Any state from an earlier run is discarded.

        Args:
            X: (n, d) points, or (d, n) when column_major is True
            column_major: Whether X stores one point per column

        Raises:
            InvalidInputError: On an empty/malformed point set or when
                max_clusters exceeds the number of points
        """
        self._reset()

        X = validate_data(X, device=self.device, column_major=column_major)
        check_cluster_range(self.min_clusters, self.max_clusters, X.shape[0])

        self._points = X
        self._generator = check_random_state(self.random_state)

        centers, labels = self._kmeans(X, self.min_clusters, self.init)
        self._set_structure(centers, labels)
        self.state = SearchState.INITIALIZED

        if self.verbose:
            print(f"Initialized with {self.n_clusters_} clusters")
        return self

    def improve_params(self) -> 'XMeans':
        """Refit all centers with K-means at the current K, seeded with the current centers."""
        self._require_state(SearchState.INITIALIZED, SearchState.REFINING, SearchState.TERMINAL)

        centers, labels = self._kmeans(self._points, self.n_clusters_, self.cluster_centers_)
        self._set_structure(centers, labels)
        if self.state is not SearchState.TERMINAL:
            self.state = SearchState.REFINING
        return self

    def improve_structure(self) -> int:
        """Try to split every cluster once; return the number of clusters added."""
        self._require_state(SearchState.INITIALIZED, SearchState.REFINING)
        self.state = SearchState.REFINING

        n_before = self.n_clusters_
        budget = self.max_clusters - n_before
        global_scale = None
        if self.split_scale == 'global':
            global_scale = 0.5 * bounding_box_diagonal(self._points)

        member_indices = [self.get_indices_with_label(k) for k in range(n_before)]
        outcomes: List[Tuple[Tensor, Optional[Tensor]]] = []
        n_splits = 0

        for k in range(n_before):
            split = None
            if n_splits < budget:
                split = self._try_split(k, member_indices[k], global_scale)
            if split is not None:
                n_splits += 1
                outcomes.append(split)
            else:
                outcomes.append((self.cluster_centers_[k:k + 1], None))

        forced = False
        if n_splits == 0 and budget > 0 and self.stall_policy == 'force':
            forced_split = self._force_split(member_indices)
            if forced_split is not None:
                k, split = forced_split
                outcomes[k] = split
                n_splits = 1
                forced = True

        centers, labels = self._assemble(outcomes, member_indices)
        self._set_structure(centers, labels)

        n_after = self.n_clusters_
        self.k_history_.append(n_after)
        self.history_.append(StructureStep(
            iteration=len(self.history_),
            n_clusters_before=n_before,
            n_clusters_after=n_after,
            n_splits=n_splits,
            forced=forced,
            bic=self._structure_bic()
        ))

        if self.verbose:
            suffix = " (forced)" if forced else ""
            print(f"Structure step {len(self.history_) - 1}: "
                  f"{n_before} -> {n_after} clusters{suffix}")

        return n_after - n_before

    def fit(self, X, y=None, column_major: bool = False) -> 'XMeans':
        """Run the full structural search.

        initialize; repeat { improve_params; improve_structure } until K
        reaches max_clusters or a pass adds nothing; then a final
        improve_params.

        Args:
            X: (n, d) points, or (d, n) when column_major is True
            y: Ignored
            column_major: Whether X stores one point per column

        Returns:
            Self
        """
        self.initialize(X, column_major=column_major)

        while True:
            self.improve_params()
            added = self.improve_structure()
            self.n_iter_ += 1
            if self.n_clusters_ >= self.max_clusters or added == 0:
                break

        if self.n_clusters_ < self.max_clusters:
            if self.stall_policy == 'force':
                warnings.warn(f"Structural search stopped at {self.n_clusters_} clusters: "
                              f"no cluster has spread left to split "
                              f"(max_clusters={self.max_clusters})")
            elif self.verbose:
                print(f"No split improved the BIC; stopping at {self.n_clusters_} clusters")

        self.improve_params()
        self.bic_ = self._structure_bic()
        self.state = SearchState.TERMINAL

        if self.verbose:
            print(f"Best number of clusters: {self.n_clusters_}")
        return self

    def fit_predict(self, X, y=None, column_major: bool = False) -> Tensor:
        """Fit and return the training labels."""
        return self.fit(X, column_major=column_major).labels_

    def predict(self, X) -> Tensor:
        """Label new points with the index of their nearest center."""
        self._require_state(SearchState.INITIALIZED, SearchState.REFINING, SearchState.TERMINAL)
        X = validate_data(X, device=self.device)
        return torch.argmin(squared_distances(X, self.cluster_centers_), dim=1)

    # ------------------------------------------------------------------
    # Splitting
    # ------------------------------------------------------------------
    def _try_split(self, cluster_idx: int, indices: Tensor,
                   global_scale: Optional[float]) -> Optional[Tuple[Tensor, Tensor]]:
        """Propose, refit and score one two-way split.

        Returns (child_centers, child_labels) if the split wins, else None.
        """
        members = self._points[indices]
        if members.shape[0] < MIN_POINTS_TO_SCORE_SPLIT:
            return None

        parent = self.cluster_centers_[cluster_idx]
        scale = global_scale if global_scale is not None else 0.5 * bounding_box_diagonal(members)
        direction = random_unit_vector(members.shape[1], generator=self._generator,
                                       dtype=members.dtype, device=members.device)
        offset = direction * scale
        seeds = torch.stack([parent + offset, parent - offset])

        child_centers, child_labels = self._kmeans(members, 2, seeds)
        if (torch.bincount(child_labels, minlength=2) == 0).any():
            return None

        parent_labels = torch.zeros(members.shape[0], dtype=torch.long, device=members.device)
        parent_score = bic_score(members, parent_labels, parent.unsqueeze(0))
        child_score = bic_score(members, child_labels, child_centers)

        if self.verbose >= 2:
            print(f"  cluster {cluster_idx}: {members.shape[0]} points, "
                  f"BIC parent = {parent_score:.4f}, split = {child_score:.4f}")

        if child_score > parent_score:
            return child_centers, child_labels
        return None

    def _force_split(self, member_indices: List[Tensor]) -> Optional[Tuple[int, Tuple[Tensor, Tensor]]]:
        """Split the cluster with the largest within-cluster sum of squares."""
        best_idx, best_sse = None, 0.0
        for k, indices in enumerate(member_indices):
            if len(indices) < 2:
                continue
            diff = self._points[indices] - self.cluster_centers_[k].unsqueeze(0)
            sse = torch.sum(diff * diff).item()
            if sse > best_sse:
                best_idx, best_sse = k, sse

        if best_idx is None:
            return None

        members = self._points[member_indices[best_idx]]
        child_centers, child_labels = self._kmeans(members, 2, 'k-means++')
        if (torch.bincount(child_labels, minlength=2) == 0).any():
            return None

        if self.verbose >= 2:
            print(f"  forcing split of cluster {best_idx} (SSE = {best_sse:.4f})")
        return best_idx, (child_centers, child_labels)

    def _assemble(self, outcomes: List[Tuple[Tensor, Optional[Tensor]]],
                  member_indices: List[Tensor]) -> Tuple[Tensor, Tensor]:
        """Concatenate per-cluster outcomes in cluster order and relabel points."""
        labels = torch.empty_like(self.labels_)
        offset = 0
        for (centers, child_labels), indices in zip(outcomes, member_indices):
            if child_labels is None:
                labels[indices] = offset
            else:
                labels[indices] = offset + child_labels
            offset += centers.shape[0]

        centers = torch.cat([centers for centers, _ in outcomes], dim=0)
        return centers, labels

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _kmeans(self, points: Tensor, n_clusters: int, init) -> Tuple[Tensor, Tensor]:
        return kmeans(points, n_clusters, init=init, generator=self._generator,
                      max_iter=self.max_iter, device=self.device)

    def _set_structure(self, centers: Tensor, labels: Tensor) -> None:
        self.cluster_centers_ = centers
        self.labels_ = labels

    def _structure_bic(self) -> Optional[float]:
        if self._points.shape[0] <= self.n_clusters_:
            return None
        return bic_score(self._points, self.labels_, self.cluster_centers_)

    def _require_state(self, *allowed: SearchState) -> None:
        if self.state not in allowed:
            names = ', '.join(s.value for s in allowed)
            raise InvalidStateError(f"Operation requires state in ({names}), "
                                    f"current state is {self.state.value}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def n_clusters_(self) -> int:
        """Current number of clusters K."""
        if self.cluster_centers_ is None:
            raise InvalidStateError("Model must be initialized first")
        return self.cluster_centers_.shape[0]

    @property
    def n_points(self) -> int:
        """Number of points being clustered."""
        if self._points is None:
            raise InvalidStateError("Model must be initialized first")
        return self._points.shape[0]

    @property
    def dimensionality(self) -> int:
        """Dimension of the points being clustered."""
        if self._points is None:
            raise InvalidStateError("Model must be initialized first")
        return self._points.shape[1]

    def get_indices_with_label(self, label: int) -> Tensor:
        """Ascending indices of the points currently labelled ``label``."""
        if self.labels_ is None:
            raise InvalidStateError("Model must be initialized first")
        if not 0 <= label < self.n_clusters_:
            raise InvalidInputError(f"Label {label} outside [0, {self.n_clusters_})")
        return torch.where(self.labels_ == label)[0]

    def get_points_with_label(self, label: int) -> Tensor:
        """Points currently labelled ``label``, in index order."""
        return self._points[self.get_indices_with_label(label)]

    def output_cluster_centers(self) -> None:
        """Print the current cluster centers, one per line."""
        if self.cluster_centers_ is None:
            raise InvalidStateError("Model must be initialized first")
        print("Cluster centers:")
        for center in self.cluster_centers_.detach().cpu().numpy():
            print(np.array2string(center, precision=4))

    def get_params(self, deep: bool = True) -> dict:
        """Get parameters (sklearn compatibility)."""
        return {
            'min_clusters': self.min_clusters,
            'max_clusters': self.max_clusters,
            'init': self.init,
            'split_scale': self.split_scale,
            'stall_policy': self.stall_policy,
            'max_iter': self.max_iter,
            'verbose': self.verbose,
            'random_state': self.random_state,
            'device': self.device
        }

    def set_params(self, **params) -> 'XMeans':
        """Set parameters (sklearn compatibility)."""
        for key, value in params.items():
            if key == 'device':
                value = parse_device(value)
            setattr(self, key, value)
        self._check_options()
        return self
