"""Spatial domains: ordered collections of locations addressed by index.

Three concrete domains are provided:

- `RegularGrid`: points of an N-D lattice, linear index fastest along the
  first axis.
- `PointSet`: arbitrary explicit coordinates.
- `DomainView`: a restriction of another domain to a subset of its indices.

All domains are immutable after construction.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from functools import cached_property

import numpy as np
from numpy.typing import ArrayLike, NDArray

from geopartition.geometry import bounding_box


def _as_indices(indices: ArrayLike, n_points: int) -> NDArray[np.int64]:
    """Validate a 1-D integer index array against ``n_points``."""
    inds = np.asarray(indices)
    if inds.dtype == np.bool_:
        if inds.shape != (n_points,):
            raise ValueError(
                f"Boolean mask must have shape ({n_points},), got {inds.shape}."
            )
        return np.flatnonzero(inds).astype(np.int64)
    inds = np.atleast_1d(inds)
    if inds.size == 0:
        return np.empty(0, dtype=np.int64)
    if inds.ndim != 1 or not np.issubdtype(inds.dtype, np.integer):
        raise ValueError(
            f"indices must be a 1-D array of integers, got dtype {inds.dtype} "
            f"and shape {inds.shape}."
        )
    if inds.min() < 0 or inds.max() >= n_points:
        raise ValueError(
            f"indices out of range for a domain with {n_points} points "
            f"(got min={inds.min()}, max={inds.max()})."
        )
    return inds.astype(np.int64, copy=False)


class Domain(ABC):
    """Abstract spatial domain.

    Subclasses provide the full coordinate array through `_points`; everything
    else is derived from it.
    """

    @property
    @abstractmethod
    def _points(self) -> NDArray[np.float64]:
        """All coordinates, shape (n_points, n_dims)."""

    @property
    def n_points(self) -> int:
        return int(self._points.shape[0])

    @property
    def n_dims(self) -> int:
        return int(self._points.shape[1])

    def __len__(self) -> int:
        return self.n_points

    def coordinates(self, ind: int | None = None) -> NDArray[np.float64]:
        """Coordinates of one point or of all points.

        Parameters
        ----------
        ind : int, optional
            Point index. If omitted, all coordinates are returned.

        Returns
        -------
        NDArray[np.float64]
            Shape ``(n_dims,)`` for a single point, ``(n_points, n_dims)``
            otherwise. The returned array is read-only.
        """
        if ind is None:
            return self._points
        if not -self.n_points <= ind < self.n_points:
            raise IndexError(
                f"Point index {ind} out of range for {self.n_points} points."
            )
        return self._points[ind]

    def bounding_box(self) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Lower and upper corner of the smallest box enclosing all points."""
        return bounding_box(self._points)

    def view(self, indices: ArrayLike) -> DomainView:
        """Restrict the domain to ``indices`` (integers or a boolean mask)."""
        return DomainView(self, indices)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n_points={self.n_points}, n_dims={self.n_dims})"


class RegularGrid(Domain):
    """Points of a regular N-D lattice.

    Point ``i`` has multi-index ``np.unravel_index(i, shape, order="F")``, so
    the linear index runs fastest along the first axis and a 3x3 grid lists
    ``(0, 0), (1, 0), (2, 0), (0, 1), ...``.

    Parameters
    ----------
    shape : int or sequence of int
        Number of points along each dimension.
    origin : float or sequence of float, optional
        Coordinates of the first point. Defaults to zeros.
    spacing : float or sequence of float, optional
        Distance between neighbouring points along each axis. Defaults to ones.

    Examples
    --------
    >>> grid = RegularGrid((3, 2))
    >>> grid.n_points
    6
    >>> grid.coordinates(1).tolist()
    [1.0, 0.0]
    """

    def __init__(
        self,
        shape: int | Sequence[int],
        origin: float | Sequence[float] | None = None,
        spacing: float | Sequence[float] | None = None,
    ) -> None:
        shape_arr = np.atleast_1d(np.asarray(shape))
        if shape_arr.ndim != 1 or not np.issubdtype(shape_arr.dtype, np.integer):
            raise TypeError(f"shape must be a sequence of integers, got {shape!r}.")
        if np.any(shape_arr < 0):
            raise ValueError(f"shape must be non-negative, got {shape!r}.")
        n_dims = shape_arr.size

        origin_arr = np.broadcast_to(
            np.asarray(0.0 if origin is None else origin, dtype=np.float64), (n_dims,)
        ).copy()
        spacing_arr = np.broadcast_to(
            np.asarray(1.0 if spacing is None else spacing, dtype=np.float64),
            (n_dims,),
        ).copy()
        if np.any(spacing_arr <= 0) or not np.all(np.isfinite(spacing_arr)):
            raise ValueError(f"spacing must be positive and finite, got {spacing!r}.")

        self.shape: tuple[int, ...] = tuple(int(s) for s in shape_arr)
        self.origin: NDArray[np.float64] = origin_arr
        self.spacing: NDArray[np.float64] = spacing_arr
        self.origin.flags.writeable = False
        self.spacing.flags.writeable = False

    @cached_property
    def _points(self) -> NDArray[np.float64]:
        n_points = int(np.prod(self.shape))
        multi = np.unravel_index(np.arange(n_points), self.shape, order="F")
        points = self.origin + self.spacing * np.column_stack(multi).astype(np.float64)
        points = points.reshape(n_points, len(self.shape))
        points.flags.writeable = False
        return points

    @property
    def n_points(self) -> int:
        return int(np.prod(self.shape))

    @property
    def n_dims(self) -> int:
        return len(self.shape)

    def __repr__(self) -> str:
        dims = "x".join(str(s) for s in self.shape)
        return (
            f"RegularGrid({dims}, origin={self.origin.tolist()}, "
            f"spacing={self.spacing.tolist()})"
        )


class PointSet(Domain):
    """Domain made of explicit point coordinates.

    Parameters
    ----------
    points : array_like, shape (n_points, n_dims) or (n_points,)
        One row per point. A 1-D input is treated as 1-D coordinates.
    """

    def __init__(self, points: ArrayLike) -> None:
        pts = np.array(points, dtype=np.float64)
        if pts.ndim == 1:
            pts = pts[:, np.newaxis]
        if pts.ndim != 2:
            raise ValueError(
                f"points must have shape (n_points, n_dims), got {pts.shape}."
            )
        if not np.all(np.isfinite(pts)):
            raise ValueError("points must contain only finite coordinates.")
        pts.flags.writeable = False
        self._coords = pts

    @property
    def _points(self) -> NDArray[np.float64]:
        return self._coords


class DomainView(Domain):
    """Restriction of a domain to a subset of its points.

    A view of a view is collapsed so that `parent` is always a concrete
    domain and `indices` refer to its points.

    Parameters
    ----------
    domain : Domain
        Domain being restricted.
    indices : array_like of int or bool mask
        Points of ``domain`` kept in the view, in view order.
    """

    def __init__(self, domain: Domain, indices: ArrayLike) -> None:
        inds = _as_indices(indices, domain.n_points)
        if isinstance(domain, DomainView):
            inds = domain.indices[inds]
            domain = domain.parent
        inds = inds.copy()
        inds.flags.writeable = False
        self.parent = domain
        self.indices: NDArray[np.int64] = inds

    @cached_property
    def _points(self) -> NDArray[np.float64]:
        points = self.parent.coordinates()[self.indices]
        points = points.reshape(len(self.indices), self.parent.n_dims)
        points.flags.writeable = False
        return points

    @property
    def n_points(self) -> int:
        return int(self.indices.size)

    @property
    def n_dims(self) -> int:
        return self.parent.n_dims

    def __repr__(self) -> str:
        return f"DomainView(n_points={self.n_points}, parent={self.parent!r})"
