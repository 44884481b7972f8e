"""Base classes, interfaces and errors for X-means clustering."""

from .exceptions import (
    XMeansError,
    InvalidInputError,
    InvalidStateError
)

from .interfaces import (
    ClusterRepresentation,
    AssignmentStrategy,
    ParameterUpdater,
    InitializationStrategy,
    ConvergenceCriterion,
    ClusteringObjective
)

from .data_structures import (
    ClusterState,
    AssignmentMatrix,
    AlgorithmState,
    StructureStep
)

from .clustering_base import BaseClusteringAlgorithm

__all__ = [
    # Errors
    'XMeansError',
    'InvalidInputError',
    'InvalidStateError',

    # Interfaces
    'ClusterRepresentation',
    'AssignmentStrategy',
    'ParameterUpdater',
    'InitializationStrategy',
    'ConvergenceCriterion',
    'ClusteringObjective',

    # Data structures
    'ClusterState',
    'AssignmentMatrix',
    'AlgorithmState',
    'StructureStep',

    # Base algorithm
    'BaseClusteringAlgorithm'
]
