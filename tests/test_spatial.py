"""Tests for geopartition.spatial neighbour search."""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from geopartition.domain import PointSet, RegularGrid
from geopartition.spatial import (
    NeighborSearch,
    clear_neighbor_search_cache,
    get_neighbor_search,
)


class TestNearest:
    @pytest.fixture
    def line(self) -> NeighborSearch:
        return NeighborSearch(np.array([[0.0], [1.0], [2.0], [3.0]]))

    def test_ordered_by_distance(self, line):
        assert line.nearest([2.9], k=3).tolist() == [3, 2, 1]

    def test_ties_broken_by_index(self, line):
        # 1.5 is equidistant from points 1 and 2
        assert line.nearest([1.5], k=1).tolist() == [1]
        assert line.nearest([1.5], k=2).tolist() == [1, 2]

    def test_ties_on_large_lattice(self):
        grid = RegularGrid((30, 30))
        search = NeighborSearch(grid.coordinates())
        # the centre of a unit cell is equidistant from its four corners
        result = search.nearest([10.5, 10.5], k=1)
        assert result.tolist() == [10 + 30 * 10]

    def test_invalid_k(self, line):
        with pytest.raises(ValueError, match="positive"):
            line.nearest([0.0], k=0)
        with pytest.raises(ValueError, match="Cannot query"):
            line.nearest([0.0], k=5)


class TestNearestWithin:
    @pytest.fixture
    def search(self) -> NeighborSearch:
        return NeighborSearch(RegularGrid((3, 3)).coordinates())

    def test_radius_is_inclusive(self, search):
        assert search.nearest_within([0.0, 0.0], radius=1.0).tolist() == [0, 1, 3]

    def test_exclude_indices(self, search):
        result = search.nearest_within([0.0, 0.0], radius=1.0, exclude=[1])
        assert result.tolist() == [0, 3]

    def test_exclude_mask(self, search):
        mask = np.zeros(9, dtype=bool)
        mask[0] = True
        result = search.nearest_within([0.0, 0.0], radius=1.0, exclude=mask)
        assert result.tolist() == [1, 3]

    def test_negative_radius_raises(self, search):
        with pytest.raises(ValueError, match="non-negative"):
            search.nearest_within([0.0, 0.0], radius=-1.0)


class TestSearchCache:
    def test_cached_per_subject(self):
        points = PointSet(np.random.default_rng(0).random((20, 2)))
        first = get_neighbor_search(points)
        assert get_neighbor_search(points) is first

    def test_clear_cache(self):
        points = PointSet(np.random.default_rng(0).random((20, 2)))
        first = get_neighbor_search(points)
        clear_neighbor_search_cache(points)
        second = get_neighbor_search(points)
        assert second is not first
        np.testing.assert_array_equal(
            first.nearest([0.5, 0.5], k=3), second.nearest([0.5, 0.5], k=3)
        )

    def test_restricted_subjects_have_own_cache(self, grid_10x10):
        left, right = grid_10x10.view(np.arange(50)), grid_10x10.view(np.arange(50, 100))
        assert get_neighbor_search(left) is not get_neighbor_search(right)
        assert get_neighbor_search(left).n_points == 50

    def test_prebuilt_searcher_shared_across_threads(self):
        points = PointSet(np.random.default_rng(1).random((200, 2)))
        shared = get_neighbor_search(points)
        with ThreadPoolExecutor(max_workers=4) as pool:
            searchers = list(pool.map(lambda _: get_neighbor_search(points), range(16)))
        assert all(searcher is shared for searcher in searchers)
