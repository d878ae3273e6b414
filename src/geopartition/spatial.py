"""spatial.py - Nearest-neighbour queries over partitioning subjects
==================================================================

This module wraps `scipy.spatial.cKDTree` with the two queries the engine and
its collaborators need:

- ``nearest``: the ``k`` closest points, ties broken by the lower index;
- ``nearest_within``: every point within a radius, optionally excluding a set.

A searcher is cached on the subject on first use so that repeated queries on
the same (immutable) subject reuse one tree. The cache is a plain attribute
and is not synchronized: threads partitioning different subsets in parallel
are safe because each restricted subject carries its own cache, but threads
sharing one subject may each build a tree on first use. Call
`get_neighbor_search` once before fanning out to share a single tree.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.spatial import cKDTree

if TYPE_CHECKING:
    from geopartition.domain._protocols import SubjectProtocol

_TIE_TOLERANCE = 1e-12


class NeighborSearch:
    """KD-tree backed neighbour search over fixed coordinates.

    Parameters
    ----------
    points : array_like, shape (n_points, n_dims)
        Coordinates to index.

    Examples
    --------
    >>> import numpy as np
    >>> search = NeighborSearch(np.array([[0.0, 0.0], [1.0, 0.0], [3.0, 0.0]]))
    >>> search.nearest([0.9, 0.0], k=2).tolist()
    [1, 0]
    >>> search.nearest_within([0.0, 0.0], radius=1.0).tolist()
    [0, 1]
    """

    def __init__(self, points: ArrayLike) -> None:
        pts = np.asarray(points, dtype=np.float64)
        if pts.ndim != 2:
            raise ValueError(f"points must have shape (n_points, n_dims), got {pts.shape}.")
        self.points = pts
        self.tree = cKDTree(pts)

    @property
    def n_points(self) -> int:
        return int(self.points.shape[0])

    def nearest(self, point: ArrayLike, k: int = 1) -> NDArray[np.int64]:
        """Indices of the ``k`` nearest points ordered by distance.

        Points at equal distance are ordered by index so results are
        reproducible on lattices.

        Raises
        ------
        ValueError
            If ``k`` is not positive or exceeds the number of points.
        """
        if k <= 0:
            raise ValueError(f"k must be positive, got {k}.")
        if k > self.n_points:
            raise ValueError(
                f"Cannot query {k} neighbours among {self.n_points} points."
            )
        query = np.asarray(point, dtype=np.float64)
        # over-fetch so that ties at the k-th distance can be resolved by index
        n_fetch = min(self.n_points, k + 8)
        dists, inds = self.tree.query(query, k=n_fetch)
        dists = np.atleast_1d(dists)
        inds = np.atleast_1d(inds).astype(np.int64)
        kth = dists[k - 1]
        if n_fetch < self.n_points and dists[-1] <= kth + _TIE_TOLERANCE:
            # every fetched point ties with the k-th one: gather the whole shell
            inds = np.asarray(
                self.tree.query_ball_point(query, r=kth + _TIE_TOLERANCE),
                dtype=np.int64,
            )
            dists = np.linalg.norm(self.points[inds] - query, axis=1)
        order = np.lexsort((inds, np.round(dists, 9)))
        return inds[order][:k]

    def nearest_within(
        self,
        point: ArrayLike,
        radius: float,
        exclude: Iterable[int] | NDArray[np.bool_] | None = None,
    ) -> NDArray[np.int64]:
        """Sorted indices of the points at distance ``<= radius`` from ``point``.

        Parameters
        ----------
        point : array_like, shape (n_dims,)
            Query location.
        radius : float
            Ball radius (inclusive).
        exclude : iterable of int or boolean mask, optional
            Points removed from the result.

        Raises
        ------
        ValueError
            If ``radius`` is negative.
        """
        if radius < 0:
            raise ValueError(f"radius must be non-negative, got {radius}.")
        found = np.sort(
            np.asarray(
                self.tree.query_ball_point(np.asarray(point, dtype=np.float64), r=radius),
                dtype=np.int64,
            )
        )
        if exclude is None:
            return found
        excluded = np.asarray(exclude)
        if excluded.dtype == np.bool_:
            return found[~excluded[found]]
        return found[~np.isin(found, excluded.astype(np.int64))]


def get_neighbor_search(subject: SubjectProtocol) -> NeighborSearch:
    """Return the cached `NeighborSearch` of ``subject``, building it if needed.

    Notes
    -----
    The searcher is stored as a private attribute on the subject. Subjects are
    immutable after creation, so the cache never goes stale.
    """
    cached = getattr(subject, "_neighbor_search_cache", None)
    if cached is None:
        cached = NeighborSearch(subject.coordinates())
        subject._neighbor_search_cache = cached  # type: ignore[attr-defined]
    return cached


def clear_neighbor_search_cache(subject: SubjectProtocol) -> None:
    """Drop the cached searcher of ``subject`` (e.g. to free memory)."""
    if hasattr(subject, "_neighbor_search_cache"):
        subject._neighbor_search_cache = None  # type: ignore[attr-defined]
