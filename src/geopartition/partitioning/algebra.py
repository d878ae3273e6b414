"""Composition of partitioners.

Composite partitioners hold their two operands and evaluate them lazily each
time `partition` is called:

- ``p1 * p2`` (`ProductPartitioner`): the non-empty intersections of one
  subset of each operand's result.
- ``p1 >> p2`` (`HierarchicalPartitioner`): ``p2`` applied inside every
  subset produced by ``p1``.

When every subset of ``p2`` lies inside some subset of ``p1`` (for example
nested block sizes), both compositions reproduce the partition of ``p2``.
Errors raised by either operand propagate unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from geopartition.partitioning.base import Partitioner
from geopartition.partitioning.partition import labels_to_subsets

if TYPE_CHECKING:
    from geopartition.domain._protocols import SubjectProtocol


def _check_operands(first: Partitioner, second: Partitioner) -> None:
    for operand in (first, second):
        if not isinstance(operand, Partitioner):
            raise TypeError(
                f"Operands must be Partitioner instances, got {type(operand).__name__}."
            )


@dataclass(frozen=True)
class ProductPartitioner(Partitioner):
    """Intersections of the partitions produced by ``first`` and ``second``.

    Subsets are ordered by the subset of ``first`` they come from, then by
    the subset of ``second``. As a set of sets, the result is commutative,
    and ``p * p`` equals ``p`` for deterministic ``p``.

    Examples
    --------
    >>> from geopartition.domain import RegularGrid
    >>> from geopartition.partitioning import DirectionPartitioner
    >>> rows = DirectionPartitioner((1.0, 0.0))
    >>> cols = DirectionPartitioner((0.0, 1.0))
    >>> len((rows * cols).partition(RegularGrid((3, 3))))
    9
    """

    first: Partitioner
    second: Partitioner

    def __post_init__(self) -> None:
        _check_operands(self.first, self.second)

    @property
    def randomized(self) -> bool:
        return self.first.randomized or self.second.randomized

    def _partition(self, subject: SubjectProtocol, rng: np.random.Generator):
        first = self.first.partition(subject, rng=rng).labels()
        second = self.second.partition(subject, rng=rng).labels()
        n_second = int(second.max()) + 1 if second.size else 0
        labels = np.where(
            (first >= 0) & (second >= 0), first * n_second + second, -1
        )
        return labels_to_subsets(labels, sort_labels=True)


@dataclass(frozen=True)
class HierarchicalPartitioner(Partitioner):
    """Apply ``second`` within each subset produced by ``first``.

    Each subset of ``first`` is turned into a restricted subject and
    partitioned with ``second``; the resulting subsets are mapped back to the
    original indices and concatenated, keeping the outer order first and the
    inner order second. Empty outer subsets are skipped.

    Examples
    --------
    >>> from geopartition.domain import RegularGrid
    >>> from geopartition.partitioning import BlockPartitioner
    >>> coarse_to_fine = BlockPartitioner(10.0) >> BlockPartitioner(5.0)
    >>> len(coarse_to_fine.partition(RegularGrid((20, 20))))
    16
    """

    first: Partitioner
    second: Partitioner

    def __post_init__(self) -> None:
        _check_operands(self.first, self.second)

    @property
    def randomized(self) -> bool:
        return self.first.randomized or self.second.randomized

    def _partition(self, subject: SubjectProtocol, rng: np.random.Generator):
        outer = self.first.partition(subject, rng=rng)
        subsets = []
        for outer_subset in outer.subsets:
            if outer_subset.size == 0:
                continue
            inner = self.second.partition(subject.view(outer_subset), rng=rng)
            subsets.extend(outer_subset[inner_subset] for inner_subset in inner.subsets)
        return subsets


def product(first: Partitioner, second: Partitioner) -> ProductPartitioner:
    """Function form of ``first * second``."""
    return ProductPartitioner(first, second)


def hierarchical(first: Partitioner, second: Partitioner) -> HierarchicalPartitioner:
    """Function form of ``first >> second``."""
    return HierarchicalPartitioner(first, second)
