"""Partitioners defined by a pairwise relation.

The subsets are the connected components of the graph linking every pair of
points for which the predicate holds, i.e. the classes of its transitive
closure. Components are tracked with the union-find structure shipped with
networkx, so each pair costs one predicate call plus near-constant
bookkeeping.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from networkx.utils import UnionFind
from numpy.typing import NDArray

from geopartition.partitioning.base import Partitioner
from geopartition.partitioning.partition import labels_to_subsets
from geopartition.spatial import get_neighbor_search
from geopartition.validation import validate_positive_float

if TYPE_CHECKING:
    from geopartition.domain._protocols import SubjectProtocol

logger = logging.getLogger(__name__)


def _all_pairs(n_points: int) -> Iterable[tuple[int, int]]:
    for i in range(n_points):
        for j in range(i + 1, n_points):
            yield i, j


def connected_components(
    n_points: int,
    pairs: Iterable[tuple[int, int]],
    linked: Callable[[int, int], bool],
) -> list[NDArray[np.int64]]:
    """Classes of the transitive closure of ``linked`` over candidate ``pairs``.

    Parameters
    ----------
    n_points : int
        Number of elements, labelled ``0 .. n_points - 1``.
    pairs : iterable of (int, int)
        Candidate pairs. Pairs whose elements are already connected are not
        tested again.
    linked : callable
        ``linked(i, j) -> bool``.

    Returns
    -------
    list of NDArray[np.int64]
        Components ordered by their smallest element.

    Examples
    --------
    >>> comps = connected_components(4, [(0, 2), (1, 3)], lambda i, j: i == 0)
    >>> [c.tolist() for c in comps]
    [[0, 2], [1], [3]]
    """
    components = UnionFind(range(n_points))
    n_tests = 0
    for i, j in pairs:
        if components[i] != components[j]:
            n_tests += 1
            if linked(i, j):
                components.union(i, j)
    logger.debug("Evaluated predicate on %d pairs of %d points", n_tests, n_points)
    roots = np.array([components[i] for i in range(n_points)], dtype=np.int64)
    return labels_to_subsets(roots)


@dataclass(frozen=True)
class PredicatePartitioner(Partitioner):
    """Group indices linked, directly or transitively, by ``pred(i, j)``.

    ``pred`` receives point indices of the subject being partitioned, never
    coordinates. Every pair is considered, so the cost is quadratic.

    Parameters
    ----------
    pred : callable
        ``pred(i, j) -> bool`` for ``i < j``.

    Examples
    --------
    >>> from geopartition.domain import RegularGrid
    >>> p = PredicatePartitioner(lambda i, j: (i + j) % 2 == 0)
    >>> [s.tolist() for s in p.partition(RegularGrid((5,))).subsets]
    [[0, 2, 4], [1, 3]]
    """

    pred: Callable[[int, int], bool]

    def __post_init__(self) -> None:
        if not callable(self.pred):
            raise TypeError(f"pred must be callable, got {type(self.pred).__name__}.")

    def _partition(self, subject: SubjectProtocol, rng: np.random.Generator):
        n_points = subject.n_points
        return connected_components(
            n_points, _all_pairs(n_points), lambda i, j: bool(self.pred(i, j))
        )


@dataclass(frozen=True)
class SpatialPredicatePartitioner(Partitioner):
    """Group points linked, directly or transitively, by ``pred(x, y)``.

    Same construction as `PredicatePartitioner`, but ``pred`` receives the
    coordinate vectors of the two points, e.g.
    ``lambda x, y: np.linalg.norm(x - y) < r``.

    Parameters
    ----------
    pred : callable
        ``pred(x, y) -> bool`` on coordinate arrays of shape ``(n_dims,)``.
    max_distance : float, optional
        Promise that ``pred`` is False for points farther apart than this.
        Only pairs within the distance (found with a KD-tree) are tested,
        which gives the same classes at a fraction of the cost.
    """

    pred: Callable[[NDArray[np.float64], NDArray[np.float64]], bool]
    max_distance: float | None = None

    def __post_init__(self) -> None:
        if not callable(self.pred):
            raise TypeError(f"pred must be callable, got {type(self.pred).__name__}.")
        if self.max_distance is not None:
            object.__setattr__(
                self,
                "max_distance",
                validate_positive_float(self.max_distance, "max_distance"),
            )

    def _partition(self, subject: SubjectProtocol, rng: np.random.Generator):
        n_points = subject.n_points
        points = subject.coordinates()
        if self.max_distance is None or n_points == 0:
            pairs: Iterable[tuple[int, int]] = _all_pairs(n_points)
        else:
            tree = get_neighbor_search(subject).tree
            found = tree.query_pairs(r=self.max_distance, output_type="ndarray")
            found = found[np.lexsort((found[:, 1], found[:, 0]))]
            pairs = ((int(i), int(j)) for i, j in found)
        return connected_components(
            n_points, pairs, lambda i, j: bool(self.pred(points[i], points[j]))
        )
