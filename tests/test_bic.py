# tests/test_bic.py
"""
BIC scoring of hard clusterings.

Covers:
- closed-form value on a tiny example
- agreement with an independent numpy evaluation
- R <= K raises InvalidStateError; zero variance scores +inf
- split vs parent comparisons that drive the structural search
"""

from __future__ import annotations

import math

import numpy as np
import pytest
import torch

from xmeans.base.exceptions import InvalidInputError, InvalidStateError
from xmeans.scoring import (
    BICObjective,
    bic_score,
    free_parameters,
    log_likelihood,
    pooled_variance,
)


def _bic_numpy(X: np.ndarray, labels: np.ndarray, centers: np.ndarray) -> float:
    R, M = X.shape
    K = centers.shape[0]
    d2 = np.sum((X - centers[labels]) ** 2, axis=1)
    var = d2.sum() / (R - K)
    counts = np.bincount(labels, minlength=K)
    ll = np.sum(np.log(counts[labels] / R) - 0.5 * M * np.log(2 * np.pi * var) - d2 / (2 * var))
    p = (K - 1) + M * K + 1
    return float(ll - 0.5 * p * np.log(R))


def test_free_parameters():
    assert free_parameters(1, 2) == 3
    assert free_parameters(2, 2) == 6
    assert free_parameters(5, 10) == 4 + 50 + 1


def test_closed_form_two_points():
    X = torch.tensor([[-1.0], [1.0]])
    labels = torch.tensor([0, 0])
    centers = torch.tensor([[0.0]])

    assert pooled_variance(X, labels, centers) == pytest.approx(2.0)
    expected_ll = -math.log(4 * math.pi) - 0.5
    assert log_likelihood(X, labels, centers) == pytest.approx(expected_ll)
    assert bic_score(X, labels, centers) == pytest.approx(expected_ll - math.log(2.0))


def test_matches_numpy_reference(rng):
    X = rng.normal(size=(40, 3))
    labels = rng.integers(0, 4, size=40)
    labels[:4] = np.arange(4)
    centers = np.stack([X[labels == k].mean(axis=0) for k in range(4)])

    got = bic_score(torch.from_numpy(X), torch.from_numpy(labels), torch.from_numpy(centers))
    assert got == pytest.approx(_bic_numpy(X, labels, centers), rel=1e-9)


def test_undefined_variance_raises():
    X = torch.tensor([[0.0, 0.0], [1.0, 1.0]])
    with pytest.raises(InvalidStateError):
        bic_score(X, torch.tensor([0, 1]), X.clone())
    with pytest.raises(InvalidStateError):
        pooled_variance(X[:1], torch.tensor([0]), X[:1].clone())


def test_zero_variance_is_infinite():
    X = torch.tensor([[1.0, 1.0], [1.0, 1.0], [3.0, 3.0]])
    labels = torch.tensor([0, 0, 1])
    centers = torch.tensor([[1.0, 1.0], [3.0, 3.0]])
    assert bic_score(X, labels, centers) == math.inf


def test_bad_labels_raise():
    X = torch.zeros(3, 2)
    centers = torch.zeros(1, 2)
    with pytest.raises(InvalidInputError):
        bic_score(X, torch.tensor([0, 0]), centers)
    with pytest.raises(InvalidInputError):
        bic_score(X, torch.tensor([0, 1, 0]), centers)
    with pytest.raises(InvalidInputError):
        bic_score(X, torch.tensor([0, 0, 0]), torch.zeros(1, 3))


def test_two_groups_prefer_split(six_points):
    parent = bic_score(six_points, torch.zeros(6, dtype=torch.long), six_points.mean(dim=0, keepdim=True))
    labels = torch.tensor([0, 0, 0, 1, 1, 1])
    centers = torch.stack([six_points[:3].mean(dim=0), six_points[3:].mean(dim=0)])
    child = bic_score(six_points, labels, centers)

    assert child > parent


def test_tight_group_rejects_split():
    X = torch.tensor([[0.0, 0.0], [0.1, 0.1], [0.2, 0.2]])
    parent = bic_score(X, torch.zeros(3, dtype=torch.long), X.mean(dim=0, keepdim=True))
    labels = torch.tensor([0, 1, 1])
    centers = torch.stack([X[0], X[1:].mean(dim=0)])
    child = bic_score(X, labels, centers)

    assert parent > child


def test_objective_wrapper(six_points):
    labels = torch.tensor([0, 0, 0, 1, 1, 1])
    centers = torch.stack([six_points[:3].mean(dim=0), six_points[3:].mean(dim=0)])
    objective = BICObjective()

    assert objective.minimize is False
    assert objective.compute(six_points, centers, labels) == pytest.approx(
        bic_score(six_points, labels, centers))
