"""Partitioners driven purely by point coordinates.

Direction and Plane group points into lines and layers, the bisectors cut the
domain with a hyperplane, Block tiles the bounding box, and Ball grows greedy
clusters of a fixed radius.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from geopartition.geometry import project
from geopartition.partitioning.base import Partitioner
from geopartition.partitioning.partition import labels_to_subsets
from geopartition.spatial import get_neighbor_search
from geopartition.validation import (
    validate_dimension,
    validate_fraction,
    validate_positive_float,
    validate_vector,
)

if TYPE_CHECKING:
    from geopartition.domain._protocols import SubjectProtocol

DEFAULT_TOLERANCE = 1e-6


@dataclass(frozen=True)
class DirectionPartitioner(Partitioner):
    """Group points lying on a common line parallel to ``direction``.

    Two points share a subset when the components of their coordinates
    orthogonal to ``direction`` agree within ``tol``. On an axis-aligned grid
    ``(1, 0)`` yields the rows and ``(0, 1)`` the columns. Since only the line
    matters, ``direction`` and ``-direction`` give the same partition.

    Parameters
    ----------
    direction : sequence of float
        Non-zero direction vector; it does not need to be normalized.
    tol : float, default=1e-6
        Width of the buckets used to compare orthogonal components.

    Examples
    --------
    >>> from geopartition.domain import RegularGrid
    >>> p = DirectionPartitioner((1.0, 0.0)).partition(RegularGrid((3, 3)))
    >>> [s.tolist() for s in p.subsets]
    [[0, 1, 2], [3, 4, 5], [6, 7, 8]]
    """

    direction: tuple[float, ...]
    tol: float = DEFAULT_TOLERANCE

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "direction", validate_vector(self.direction, "direction", nonzero=True)
        )
        object.__setattr__(self, "tol", validate_positive_float(self.tol, "tol"))

    def _partition(self, subject: SubjectProtocol, rng: np.random.Generator):
        validate_dimension(self.direction, subject.n_dims, "direction")
        unit = np.asarray(self.direction) / np.linalg.norm(self.direction)
        points = subject.coordinates()
        residual = points - np.outer(project(points, unit), unit)
        keys = np.round(residual / self.tol).astype(np.int64)
        if keys.shape[0] == 0:
            return []
        _, labels = np.unique(keys, axis=0, return_inverse=True)
        return labels_to_subsets(labels.reshape(-1))


@dataclass(frozen=True)
class PlanePartitioner(Partitioner):
    """Group points into layers perpendicular to ``normal``.

    Points share a subset when ``project(x, normal)`` is exactly equal, which
    is the natural notion of a layer on lattice-aligned domains.

    Parameters
    ----------
    normal : sequence of float
        Non-zero normal of the layers.
    """

    normal: tuple[float, ...]

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "normal", validate_vector(self.normal, "normal", nonzero=True)
        )

    def _partition(self, subject: SubjectProtocol, rng: np.random.Generator):
        validate_dimension(self.normal, subject.n_dims, "normal")
        return labels_to_subsets(project(subject.coordinates(), self.normal))


@dataclass(frozen=True)
class BisectPointPartitioner(Partitioner):
    """Cut the subject with the hyperplane through ``point`` with ``normal``.

    The first subset holds the points on the negative side
    (``dot(x - point, normal) < 0``), the second the remaining points,
    including those exactly on the plane. Flipping ``normal`` swaps the two
    subsets. Both subsets are always returned, possibly empty.

    Parameters
    ----------
    normal : sequence of float
        Non-zero normal of the cutting plane.
    point : sequence of float
        Any point on the cutting plane.
    """

    normal: tuple[float, ...]
    point: tuple[float, ...]

    def __post_init__(self) -> None:
        normal = validate_vector(self.normal, "normal", nonzero=True)
        point = validate_vector(self.point, "point")
        validate_dimension(point, len(normal), "point")
        object.__setattr__(self, "normal", normal)
        object.__setattr__(self, "point", point)

    def _partition(self, subject: SubjectProtocol, rng: np.random.Generator):
        validate_dimension(self.normal, subject.n_dims, "normal")
        offsets = project(subject.coordinates(), self.normal) - project(
            self.point, self.normal
        )
        negative = offsets < 0
        return [np.flatnonzero(negative), np.flatnonzero(~negative)]


@dataclass(frozen=True)
class BisectFractionPartitioner(Partitioner):
    """Cut the subject along ``normal`` so the first subset holds ``fraction``.

    Points are sorted by their projection on ``normal``. Ties are broken by
    ascending index when the first non-zero component of ``normal`` is
    positive and by descending index otherwise, so flipping ``normal``
    reverses the whole ordering. The first ``round(fraction * n)`` points
    form the first subset. Flipping ``normal`` and using ``1 - fraction`` swaps the subsets.

    Parameters
    ----------
    normal : sequence of float
        Non-zero direction along which points are ordered.
    fraction : float, default=0.5
        Share of the first subset, in the open interval (0, 1).
    """

    normal: tuple[float, ...]
    fraction: float = 0.5

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "normal", validate_vector(self.normal, "normal", nonzero=True)
        )
        object.__setattr__(self, "fraction", validate_fraction(self.fraction))

    def _partition(self, subject: SubjectProtocol, rng: np.random.Generator):
        validate_dimension(self.normal, subject.n_dims, "normal")
        heights = np.atleast_1d(project(subject.coordinates(), self.normal))
        sign = 1 if self.normal[np.flatnonzero(self.normal)[0]] > 0 else -1
        order = np.lexsort((sign * np.arange(heights.size), heights))
        n_first = round(self.fraction * subject.n_points)
        return [order[:n_first], order[n_first:]]


@dataclass(frozen=True)
class BlockPartitioner(Partitioner):
    """Tile the bounding box with axis-aligned blocks of fixed size.

    Blocks are laid out symmetrically around the centre of the bounding box:
    along each axis there are ``ceil(half_extent / side)`` blocks on either
    side of the centre. Blocks are closed on their upper edge: a point on
    an interior edge belongs to the lower block, and points on the lowest
    edge go to the first block. Empty blocks are dropped; subsets follow block order with the
    first axis varying fastest.

    Parameters
    ----------
    sides : float or sequence of float
        Block size per dimension. A scalar applies to every dimension.

    Examples
    --------
    >>> from geopartition.domain import RegularGrid
    >>> p = BlockPartitioner((5.0, 2.0)).partition(RegularGrid((10, 10)))
    >>> len(p), sorted(set(p.sizes.tolist()))
    (12, [5, 10])
    """

    sides: tuple[float, ...]

    def __post_init__(self) -> None:
        sides = validate_vector(self.sides, "sides")
        for side in sides:
            validate_positive_float(side, "sides")
        object.__setattr__(self, "sides", sides)

    def _sides_for(self, n_dims: int) -> np.ndarray:
        if len(self.sides) == 1:
            return np.full(n_dims, self.sides[0])
        validate_dimension(self.sides, n_dims, "sides")
        return np.asarray(self.sides)

    def _partition(self, subject: SubjectProtocol, rng: np.random.Generator):
        sides = self._sides_for(subject.n_dims)
        if subject.n_points == 0:
            return []
        lo, hi = subject.bounding_box()
        centre = (lo + hi) / 2
        n_left = np.ceil((centre - lo) / sides).astype(np.int64)
        n_right = np.ceil((hi - centre) / sides).astype(np.int64)
        n_blocks = np.maximum(n_left + n_right, 1)
        start = centre - n_left * sides

        # closed upper edges: a point on an interior edge joins the lower block
        block = np.ceil((subject.coordinates() - start) / sides).astype(np.int64) - 1
        block = np.clip(block, 0, n_blocks - 1)
        labels = np.ravel_multi_index(
            tuple(block.T), tuple(int(n) for n in n_blocks), order="F"
        )
        return labels_to_subsets(labels, sort_labels=True)


@dataclass(frozen=True)
class BallPartitioner(Partitioner):
    """Greedy clustering with balls of fixed radius.

    Unassigned points are visited in ascending index order; each visited
    point opens a new subset with every still unassigned point at distance
    ``<= radius`` from it.

    Parameters
    ----------
    radius : float
        Ball radius, strictly positive.
    """

    radius: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "radius", validate_positive_float(self.radius, "radius"))

    def _partition(self, subject: SubjectProtocol, rng: np.random.Generator):
        n_points = subject.n_points
        if n_points == 0:
            return []
        search = get_neighbor_search(subject)
        points = subject.coordinates()
        assigned = np.zeros(n_points, dtype=bool)
        subsets = []
        for center in range(n_points):
            if assigned[center]:
                continue
            members = search.nearest_within(points[center], self.radius, exclude=assigned)
            assigned[members] = True
            subsets.append(members)
        return subsets
