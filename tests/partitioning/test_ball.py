"""Tests for BallPartitioner."""

import pytest

from geopartition.errors import InvalidParameterError
from geopartition.partitioning import BallPartitioner


def test_greedy_clusters(square_corners):
    p = BallPartitioner(0.5).partition(square_corners)
    assert [s.tolist() for s in p.subsets] == [[0, 4], [1], [2], [3]]


def test_small_radius_gives_singletons(square_corners):
    p = BallPartitioner(0.2).partition(square_corners)
    assert len(p) == 5


def test_radius_is_inclusive(grid_3x3):
    # neighbours at distance exactly 1 are captured, diagonals are not
    p = BallPartitioner(1.0).partition(grid_3x3)
    assert [s.tolist() for s in p.subsets] == [[0, 1, 3], [2, 5], [4, 7], [6], [8]]


def test_large_radius_gives_one_subset(grid_10x10):
    p = BallPartitioner(100.0).partition(grid_10x10)
    assert len(p) == 1
    assert p.is_total


def test_partition_is_total(grid_100x100):
    p = BallPartitioner(3.0).partition(grid_100x100)
    assert p.is_total
    assert p.sizes.min() >= 1


@pytest.mark.parametrize("radius", [0.0, -1.0])
def test_invalid_radius(radius):
    with pytest.raises(InvalidParameterError, match="radius"):
        BallPartitioner(radius)
