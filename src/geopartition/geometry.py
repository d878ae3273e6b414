"""geometry.py - Geometric primitives shared by the partitioners
==============================================================

All functions accept a single coordinate vector of shape ``(n_dims,)`` or a
batch of coordinates of shape ``(n_points, n_dims)`` and broadcast
accordingly.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray


def as_vector(values: ArrayLike, name: str = "vector") -> NDArray[np.float64]:
    """Convert ``values`` to a finite 1-D float array.

    Raises
    ------
    ValueError
        If the input is not one-dimensional, is empty, or holds NaN/inf.
    """
    vec = np.atleast_1d(np.asarray(values, dtype=np.float64))
    if vec.ndim != 1 or vec.size == 0:
        raise ValueError(
            f"{name} must be a non-empty 1-D sequence of numbers, got shape {vec.shape}."
        )
    if not np.all(np.isfinite(vec)):
        raise ValueError(f"{name} must contain only finite values, got {values!r}.")
    return vec


def project(
    coords: ArrayLike, direction: ArrayLike
) -> float | NDArray[np.float64]:
    """Dot product of coordinates with a (not necessarily unit) direction.

    Parameters
    ----------
    coords : array_like, shape (n_dims,) or (n_points, n_dims)
        Point(s) to project.
    direction : array_like, shape (n_dims,)
        Direction vector. It is not normalized.

    Returns
    -------
    float or NDArray[np.float64], shape (n_points,)
        Scalar for a single point, array for a batch.

    Examples
    --------
    >>> project([1.0, 2.0], [0.0, 2.0])
    4.0
    """
    x = np.asarray(coords, dtype=np.float64)
    result = x @ np.asarray(direction, dtype=np.float64)
    if np.ndim(result) == 0:
        return float(result)
    return result


def side(
    coords: ArrayLike, point: ArrayLike, normal: ArrayLike
) -> int | NDArray[np.int_]:
    """Side of the hyperplane through ``point`` with normal ``normal``.

    Returns ``+1`` when ``dot(coords - point, normal) >= 0`` and ``-1``
    otherwise. Points exactly on the hyperplane are on the positive side.

    Examples
    --------
    >>> side([1.0, 0.0], [1.0, 5.0], [1.0, 0.0])
    1
    >>> side([0.0, 0.0], [1.0, 5.0], [1.0, 0.0])
    -1
    """
    x = np.asarray(coords, dtype=np.float64)
    offset = x - np.asarray(point, dtype=np.float64)
    signs = np.where(project(offset, normal) >= 0.0, 1, -1)
    if signs.ndim == 0:
        return int(signs)
    return signs


def distance(a: ArrayLike, b: ArrayLike) -> float | NDArray[np.float64]:
    """Euclidean distance between points (broadcasting over the last axis)."""
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    result = np.linalg.norm(diff, axis=-1)
    if np.ndim(result) == 0:
        return float(result)
    return result


def bounding_box(
    points: NDArray[np.float64],
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Minimum and maximum corner of a set of points.

    Parameters
    ----------
    points : NDArray[np.float64], shape (n_points, n_dims)

    Returns
    -------
    lo, hi : NDArray[np.float64], shape (n_dims,)

    Raises
    ------
    ValueError
        If ``points`` is empty.
    """
    if points.shape[0] == 0:
        raise ValueError("Cannot compute the bounding box of an empty point set.")
    return points.min(axis=0), points.max(axis=0)


@dataclass(frozen=True)
class Box:
    """Closed axis-aligned box ``[origin, origin + sides]``.

    Attributes
    ----------
    origin : tuple of float
        Lower corner.
    sides : tuple of float
        Non-negative side lengths, one per dimension.

    Examples
    --------
    >>> box = Box((0.0, 0.0), (1.0, 1.0))
    >>> box.contains([[0.5, 1.0], [2.0, 0.0]]).tolist()
    [True, False]
    """

    origin: tuple[float, ...]
    sides: tuple[float, ...]

    def __post_init__(self) -> None:
        origin = as_vector(self.origin, "origin")
        sides = as_vector(self.sides, "sides")
        if origin.shape != sides.shape:
            raise ValueError(
                f"origin and sides must have the same length, got {origin.size} "
                f"and {sides.size}."
            )
        if np.any(sides < 0):
            raise ValueError(f"sides must be non-negative, got {self.sides}.")
        object.__setattr__(self, "origin", tuple(origin.tolist()))
        object.__setattr__(self, "sides", tuple(sides.tolist()))

    @property
    def n_dims(self) -> int:
        return len(self.origin)

    @property
    def lo(self) -> NDArray[np.float64]:
        return np.asarray(self.origin, dtype=np.float64)

    @property
    def hi(self) -> NDArray[np.float64]:
        return self.lo + np.asarray(self.sides, dtype=np.float64)

    def contains(self, points: ArrayLike) -> NDArray[np.bool_]:
        """Boolean mask of the points lying in the closed box."""
        pts = np.atleast_2d(np.asarray(points, dtype=np.float64))
        if pts.shape[1] != self.n_dims:
            raise ValueError(
                f"Box is {self.n_dims}D but points have {pts.shape[1]} dimensions."
            )
        return np.all((pts >= self.lo) & (pts <= self.hi), axis=1)
