"""Model selection scores."""

from .bic import (
    BICObjective,
    bic_score,
    log_likelihood,
    pooled_variance,
    free_parameters
)

__all__ = [
    'BICObjective',
    'bic_score',
    'log_likelihood',
    'pooled_variance',
    'free_parameters'
]
