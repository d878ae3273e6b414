"""Tests for DirectionPartitioner and PlanePartitioner."""

import numpy as np
import pytest

from geopartition.domain import PointSet, RegularGrid
from geopartition.errors import InvalidParameterError
from geopartition.partitioning import DirectionPartitioner, PlanePartitioner


class TestDirectionPartitioner:
    def test_rows_and_columns(self, grid_3x3):
        rows = DirectionPartitioner((1.0, 0.0)).partition(grid_3x3)
        cols = DirectionPartitioner((0.0, 1.0)).partition(grid_3x3)
        assert [s.tolist() for s in rows.subsets] == [[0, 1, 2], [3, 4, 5], [6, 7, 8]]
        assert [s.tolist() for s in cols.subsets] == [[0, 3, 6], [1, 4, 7], [2, 5, 8]]

    def test_diagonal(self, grid_3x3):
        p = DirectionPartitioner((1.0, 1.0)).partition(grid_3x3)
        assert [s.tolist() for s in p.subsets] == [[0, 4, 8], [1, 5], [2], [3, 7], [6]]

    def test_anti_diagonal(self, grid_3x3):
        p = DirectionPartitioner((1.0, -1.0)).partition(grid_3x3)
        assert [s.tolist() for s in p.subsets] == [[0], [1, 3], [2, 4, 6], [5, 7], [8]]

    def test_direction_sign_and_scale_ignored(self, grid_10x10):
        base = DirectionPartitioner((1.0, 2.0)).partition(grid_10x10)
        flipped = DirectionPartitioner((-3.0, -6.0)).partition(grid_10x10)
        assert base.as_sets() == flipped.as_sets()

    def test_rows_of_large_grid(self, grid_100x100):
        p = DirectionPartitioner((1.0, 0.0)).partition(grid_100x100)
        assert len(p) == 100
        assert set(p.sizes.tolist()) == {100}

    def test_tolerance_merges_nearby_lines(self):
        points = PointSet([[0.0, 0.0], [1.0, 1e-9], [0.0, 1.0]])
        p = DirectionPartitioner((1.0, 0.0)).partition(points)
        assert [s.tolist() for s in p.subsets] == [[0, 1], [2]]

    def test_empty_subject(self):
        assert len(DirectionPartitioner((1.0, 0.0)).partition(RegularGrid((0, 2)))) == 0

    def test_zero_direction(self):
        with pytest.raises(InvalidParameterError):
            DirectionPartitioner((0.0, 0.0))

    def test_dimension_mismatch(self, grid_3x3):
        with pytest.raises(InvalidParameterError, match=r"\[E2001\]"):
            DirectionPartitioner((1.0, 0.0, 0.0)).partition(grid_3x3)


class TestPlanePartitioner:
    def test_layers(self):
        p = PlanePartitioner((0.0, 1.0)).partition(RegularGrid((4, 4)))
        assert [s.tolist() for s in p.subsets] == [
            [0, 1, 2, 3],
            [4, 5, 6, 7],
            [8, 9, 10, 11],
            [12, 13, 14, 15],
        ]

    def test_layers_along_first_axis(self, grid_3x3):
        p = PlanePartitioner((1.0, 0.0)).partition(grid_3x3)
        assert [s.tolist() for s in p.subsets] == [[0, 3, 6], [1, 4, 7], [2, 5, 8]]

    def test_3d_grid(self):
        p = PlanePartitioner((0.0, 0.0, 1.0)).partition(RegularGrid((2, 3, 4)))
        assert len(p) == 4
        assert set(p.sizes.tolist()) == {6}

    def test_oblique_normal(self, grid_3x3):
        p = PlanePartitioner((1.0, 1.0)).partition(grid_3x3)
        assert len(p) == 5
        np.testing.assert_array_equal(p.subsets[2], [2, 4, 6])

    def test_dimension_mismatch(self, grid_3x3):
        with pytest.raises(InvalidParameterError):
            PlanePartitioner((1.0,)).partition(grid_3x3)
