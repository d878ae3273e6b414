"""Tests for BlockPartitioner."""

import numpy as np
import pytest

from geopartition.domain import PointSet, RegularGrid
from geopartition.errors import InvalidParameterError
from geopartition.partitioning import BlockPartitioner


def test_rectangular_blocks(grid_10x10):
    p = BlockPartitioner((5.0, 2.0)).partition(grid_10x10)
    assert len(p) == 12
    assert set(p.sizes.tolist()) == {5, 10}
    assert p.is_total


def test_equal_blocks(grid_10x10):
    p = BlockPartitioner((5.0, 5.0)).partition(grid_10x10)
    assert p.sizes.tolist() == [25, 25, 25, 25]


def test_square_blocks_on_large_grid(grid_100x100):
    p = BlockPartitioner(5.0).partition(grid_100x100)
    assert len(p) == 400
    assert set(p.sizes.tolist()) == {25}


def test_block_order_first_axis_fastest(grid_10x10):
    p = BlockPartitioner(5.0).partition(grid_10x10)
    coords = grid_10x10.coordinates()
    assert len(p) == 4
    lower_left = coords[p.subsets[0]]
    lower_right = coords[p.subsets[1]]
    assert lower_left.max(axis=0).tolist() == [4.0, 4.0]
    assert lower_right.min(axis=0).tolist() == [5.0, 0.0]


def test_scalar_side_in_3d():
    p = BlockPartitioner(1.0).partition(RegularGrid((2, 2, 2)))
    assert len(p) == 8


def test_large_blocks_meet_at_the_centre(grid_3x3):
    # blocks are laid out around the centre x = y = 1, which lies on an edge
    p = BlockPartitioner(100.0).partition(grid_3x3)
    assert [s.tolist() for s in p.subsets] == [[0, 1, 3, 4], [2, 5], [6, 7], [8]]


def test_point_on_interior_edge_joins_lower_block():
    # edges at 0, 5 and 10
    p = BlockPartitioner(5.0).partition(RegularGrid((11,)))
    assert [s.tolist() for s in p.subsets] == [[0, 1, 2, 3, 4, 5], [6, 7, 8, 9, 10]]


def test_interior_edges_in_2d():
    p = BlockPartitioner((5.0, 5.0)).partition(RegularGrid((11, 11)))
    coords = RegularGrid((11, 11)).coordinates()
    first = coords[p.subsets[0]]
    assert len(p) == 4
    assert first.max(axis=0).tolist() == [5.0, 5.0]
    assert p.sizes.tolist() == [36, 30, 30, 25]


def test_single_point():
    p = BlockPartitioner(1.0).partition(PointSet([[1.0, 1.0]]))
    assert [s.tolist() for s in p.subsets] == [[0]]


def test_scattered_points_drop_empty_blocks():
    points = PointSet([[0.0, 0.0], [0.1, 0.1], [9.0, 9.0]])
    p = BlockPartitioner(2.0).partition(points)
    assert [s.tolist() for s in p.subsets] == [[0, 1], [2]]


def test_empty_subject():
    assert len(BlockPartitioner(1.0).partition(RegularGrid((0, 0)))) == 0


@pytest.mark.parametrize("sides", [0.0, -1.0, (1.0, np.inf)])
def test_invalid_sides(sides):
    with pytest.raises(InvalidParameterError):
        BlockPartitioner(sides)


def test_sides_dimension_mismatch(grid_3x3):
    with pytest.raises(InvalidParameterError, match="3 components"):
        BlockPartitioner((1.0, 1.0, 1.0)).partition(grid_3x3)
