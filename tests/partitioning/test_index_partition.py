"""Tests for IndexPartition, labels_to_subsets and the partition entry point."""

import numpy as np
import pandas as pd
import pytest

from geopartition.domain import GeoData, RegularGrid
from geopartition.partitioning import (
    IndexPartition,
    UniformPartitioner,
    labels_to_subsets,
    partition,
    subsets,
)


class TestLabelsToSubsets:
    def test_first_appearance_order(self):
        groups = labels_to_subsets([3, 1, 3, 2, 1])
        assert [g.tolist() for g in groups] == [[0, 2], [1, 4], [3]]

    def test_sorted_order(self):
        groups = labels_to_subsets([3, 1, 3, 2, 1], sort_labels=True)
        assert [g.tolist() for g in groups] == [[1, 4], [3], [0, 2]]

    def test_negative_labels_dropped(self):
        groups = labels_to_subsets([-1, 0, -1, 0])
        assert [g.tolist() for g in groups] == [[1, 3]]

    def test_float_labels(self):
        groups = labels_to_subsets([0.5, -0.5, 0.5])
        assert [g.tolist() for g in groups] == [[0, 2], [1]]

    def test_empty(self):
        assert labels_to_subsets(np.array([], dtype=np.int64)) == []

    def test_rejects_2d(self):
        with pytest.raises(ValueError, match="1-D"):
            labels_to_subsets([[0, 1]])


class TestIndexPartition:
    def test_basic_properties(self, grid_3x3):
        p = IndexPartition(grid_3x3, [[2, 0], [4, 5, 3]])
        assert len(p) == 2
        assert p.sizes.tolist() == [2, 3]
        assert p.subsets[0].tolist() == [0, 2]
        assert not p.is_total
        assert p.labels().tolist() == [0, -1, 0, 1, 1, 1, -1, -1, -1]

    def test_subsets_are_read_only(self, grid_3x3):
        p = IndexPartition(grid_3x3, [[0, 1]])
        with pytest.raises(ValueError):
            p.subsets[0][0] = 5

    def test_empty_subsets_allowed(self, grid_3x3):
        p = IndexPartition(grid_3x3, [list(range(9)), []])
        assert p.is_total
        assert p.sizes.tolist() == [9, 0]
        assert p[1].n_points == 0

    def test_overlap_rejected(self, grid_3x3):
        with pytest.raises(ValueError, match="disjoint"):
            IndexPartition(grid_3x3, [[0, 1], [1, 2]])

    def test_out_of_range_rejected(self, grid_3x3):
        with pytest.raises(ValueError, match=r"\[0, 9\)"):
            IndexPartition(grid_3x3, [[0, 9]])

    def test_getitem_restricts_subject(self, grid_3x3):
        p = IndexPartition(grid_3x3, [[0, 4, 8], [1]])
        np.testing.assert_array_equal(p[0].coordinates(), [[0, 0], [1, 1], [2, 2]])
        assert [part.n_points for part in p] == [3, 1]

    def test_getitem_on_data_keeps_variables(self):
        data = GeoData(RegularGrid((4,)), pd.DataFrame({"z": [10, 20, 30, 40]}))
        p = IndexPartition(data, [[3, 1]])
        assert p[0]["z"].tolist() == [20, 40]

    def test_getitem_requires_int(self, grid_3x3):
        p = IndexPartition(grid_3x3, [[0]])
        with pytest.raises(TypeError):
            p["0"]

    def test_as_sets_and_free_function(self, grid_3x3):
        p = IndexPartition(grid_3x3, [[0, 1], [2]])
        assert p.as_sets() == {frozenset({0, 1}), frozenset({2})}
        assert subsets(p) is p.subsets

    def test_metadata_and_repr(self, grid_3x3):
        p = IndexPartition(grid_3x3, [], metadata={"source": "manual"})
        assert p.metadata == {"source": "manual"}
        assert repr(p) == "IndexPartition(n_subsets=0, universe_size=9)"


class TestPartitionFunction:
    def test_dispatches_to_partitioner(self, grid_3x3):
        p = partition(grid_3x3, UniformPartitioner(3, randomize=False))
        assert [s.tolist() for s in p.subsets] == [[0, 1, 2], [3, 4, 5], [6, 7, 8]]
        assert p.subject is grid_3x3

    def test_records_partitioner_name(self, grid_3x3):
        p = partition(grid_3x3, UniformPartitioner(3, randomize=False))
        assert p.metadata == {"partitioner": "UniformPartitioner"}

    def test_rejects_non_partitioner(self, grid_3x3):
        with pytest.raises(TypeError, match="Partitioner"):
            partition(grid_3x3, lambda subject: [])
