# tests/test_geometry.py
"""
Geometry helpers: bounding box, mean, norms, pairwise distances, and
random unit directions.
"""

from __future__ import annotations

import math

import pytest
import torch

from xmeans.base.exceptions import InvalidInputError
from xmeans.utils.geometry import (
    bounding_box,
    bounding_box_diagonal,
    mean_vector,
    norm,
    euclidean_distance,
    squared_distances,
    random_unit_vector,
)


def test_bounding_box_and_diagonal(six_points):
    lo, hi = bounding_box(six_points)
    assert torch.allclose(lo, torch.tensor([5.0, 5.0]))
    assert torch.allclose(hi, torch.tensor([10.2, 10.2]))
    assert bounding_box_diagonal(six_points) == pytest.approx(5.2 * math.sqrt(2.0), rel=1e-5)


def test_mean_and_norms(six_points):
    assert torch.allclose(mean_vector(six_points), torch.tensor([7.6, 7.6]))
    assert norm(torch.tensor([3.0, 4.0])) == pytest.approx(5.0)
    assert euclidean_distance(torch.tensor([1.0, 1.0]), torch.tensor([4.0, 5.0])) == pytest.approx(5.0)


def test_squared_distances_matches_cdist(rng):
    X = torch.from_numpy(rng.normal(size=(7, 3)).astype("float32"))
    C = torch.from_numpy(rng.normal(size=(4, 3)).astype("float32"))

    D = squared_distances(X, C)
    assert D.shape == (7, 4)
    assert torch.allclose(D, torch.cdist(X, C) ** 2, atol=1e-5)


def test_empty_or_mismatched_input_raises():
    with pytest.raises(InvalidInputError):
        bounding_box(torch.empty(0, 2))
    with pytest.raises(InvalidInputError):
        mean_vector(torch.empty(0, 3))
    with pytest.raises(InvalidInputError):
        euclidean_distance(torch.zeros(2), torch.zeros(3))
    with pytest.raises(InvalidInputError):
        squared_distances(torch.zeros(3, 2), torch.zeros(2, 3))


@pytest.mark.parametrize("dimension", [1, 2, 5, 50])
def test_random_unit_vector_has_unit_length(dimension, torch_generator):
    for _ in range(10):
        v = random_unit_vector(dimension, generator=torch_generator)
        assert v.shape == (dimension,)
        assert v.dtype == torch.float32
        assert norm(v) == pytest.approx(1.0, abs=1e-5)


def test_random_unit_vector_is_reproducible_and_unbiased():
    g1 = torch.Generator().manual_seed(11)
    g2 = torch.Generator().manual_seed(11)
    assert torch.equal(random_unit_vector(3, generator=g1), random_unit_vector(3, generator=g2))

    # The average of many uniform directions sits near the origin
    g = torch.Generator().manual_seed(0)
    avg = torch.stack([random_unit_vector(2, generator=g) for _ in range(2000)]).mean(dim=0)
    assert norm(avg) < 0.1

    with pytest.raises(InvalidInputError):
        random_unit_vector(0)
