# tests/test_initialization.py
"""
Seeding strategies: random, k-means++ (weighted), and manual centers.
"""

from __future__ import annotations

import pytest
import torch

from xmeans.base.data_structures import ClusterState
from xmeans.base.exceptions import InvalidInputError, InvalidStateError
from xmeans.initialization import RandomInit, KMeansPlusPlusInit, FromPreviousInit


def _means(reps):
    return torch.stack([rep.mean for rep in reps])


def test_random_init_picks_distinct_data_points(six_points, torch_generator):
    reps = RandomInit().initialize(six_points, 4, generator=torch_generator)
    means = _means(reps)

    assert means.shape == (4, 2)
    rows = {tuple(m.tolist()) for m in means}
    assert len(rows) == 4
    data_rows = {tuple(p.tolist()) for p in six_points}
    assert rows <= data_rows


def test_kmeanspp_picks_distinct_data_points(six_points, torch_generator):
    reps = KMeansPlusPlusInit().initialize(six_points, 6, generator=torch_generator)
    rows = {tuple(rep.mean.tolist()) for rep in reps}
    # A point already chosen has zero weight, so all six must be picked
    assert rows == {tuple(p.tolist()) for p in six_points}


def test_kmeanspp_spreads_second_center(six_points):
    """With two far groups the second center lands in the other group almost always."""
    hits = 0
    for seed in range(50):
        g = torch.Generator().manual_seed(seed)
        means = _means(KMeansPlusPlusInit().initialize(six_points, 2, generator=g))
        if (means[0][0] > 7.5) != (means[1][0] > 7.5):
            hits += 1
    assert hits >= 45


@pytest.mark.parametrize("power", [1.0, 2.0])
def test_kmeanspp_power_is_reproducible(six_points, power):
    g1 = torch.Generator().manual_seed(3)
    g2 = torch.Generator().manual_seed(3)
    m1 = _means(KMeansPlusPlusInit(power=power).initialize(six_points, 3, generator=g1))
    m2 = _means(KMeansPlusPlusInit(power=power).initialize(six_points, 3, generator=g2))
    assert torch.equal(m1, m2)


def test_kmeanspp_duplicates_raise_invalid_state(torch_generator):
    X = torch.ones(5, 2)
    with pytest.raises(InvalidStateError):
        KMeansPlusPlusInit().initialize(X, 2, generator=torch_generator)


def test_select_weighted_index():
    g = torch.Generator().manual_seed(0)
    weights = torch.tensor([0.0, 0.0, 3.0, 0.0], dtype=torch.float64)
    assert KMeansPlusPlusInit.select_weighted_index(weights, g) == 2

    with pytest.raises(InvalidStateError):
        KMeansPlusPlusInit.select_weighted_index(torch.zeros(3, dtype=torch.float64), g)


def test_too_many_clusters_raise(six_points, torch_generator):
    with pytest.raises(InvalidInputError):
        RandomInit().initialize(six_points, 7, generator=torch_generator)
    with pytest.raises(InvalidInputError):
        KMeansPlusPlusInit().initialize(six_points, 7, generator=torch_generator)


def test_from_previous_accepts_tensor_list_and_state(six_points):
    centers = [[10.1, 10.1], [5.1, 5.1]]

    for source in (centers, torch.tensor(centers),
                   ClusterState(means=torch.tensor(centers), n_clusters=2, dimension=2)):
        means = _means(FromPreviousInit(source).initialize(six_points, 2))
        assert torch.allclose(means, torch.tensor(centers))


def test_from_previous_rejects_wrong_shape(six_points):
    with pytest.raises(InvalidInputError):
        FromPreviousInit([[1.0, 1.0]]).initialize(six_points, 2)
    with pytest.raises(InvalidInputError):
        FromPreviousInit([[1.0, 1.0, 1.0], [2.0, 2.0, 2.0]]).initialize(six_points, 2)
