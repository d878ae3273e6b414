"""Set-like operations on domains and spatial data."""

from __future__ import annotations

import numpy as np
import pandas as pd

from geopartition.domain.core import Domain, PointSet, RegularGrid
from geopartition.domain.data import GeoData
from geopartition.geometry import Box


def disjoint_union(
    first: Domain | GeoData, second: Domain | GeoData
) -> PointSet | GeoData:
    """Concatenate two domains, or two spatial data sets, into one.

    Points of ``second`` follow the points of ``first``. For data, the result
    holds the union of the variables; a variable absent from one input is
    missing on that input's points.

    Parameters
    ----------
    first, second : Domain or GeoData
        Both arguments must be of the same kind and dimension.

    Returns
    -------
    PointSet or GeoData

    Raises
    ------
    TypeError
        If a domain is combined with spatial data.
    ValueError
        If the dimensions differ.
    """
    first_is_data = isinstance(first, GeoData)
    if first_is_data != isinstance(second, GeoData):
        raise TypeError(
            "disjoint_union requires two domains or two GeoData objects, got "
            f"{type(first).__name__} and {type(second).__name__}."
        )
    if first.n_dims != second.n_dims:
        raise ValueError(
            f"Cannot join a {first.n_dims}D object with a {second.n_dims}D object."
        )
    points = np.vstack([first.coordinates(), second.coordinates()])
    domain = PointSet(points.reshape(-1, first.n_dims))
    if not first_is_data:
        return domain
    table = pd.concat([first.table, second.table], ignore_index=True, sort=False)
    return GeoData(domain, table)


def _inside_grid(grid: RegularGrid, box: Box) -> tuple[RegularGrid, np.ndarray]:
    """Sub-grid of ``grid`` inside ``box`` and the kept linear indices."""
    shape = np.asarray(grid.shape)
    # first and last lattice index along each axis falling inside the box
    start = np.ceil((box.lo - grid.origin) / grid.spacing - 1e-9).astype(int)
    stop = np.floor((box.hi - grid.origin) / grid.spacing + 1e-9).astype(int)
    start = np.clip(start, 0, shape)
    stop = np.clip(stop + 1, 0, shape)
    sub_shape = np.maximum(stop - start, 0)
    sub = RegularGrid(
        tuple(int(s) for s in sub_shape),
        origin=grid.origin + start * grid.spacing,
        spacing=grid.spacing,
    )
    if sub.n_points == 0:
        return sub, np.empty(0, dtype=np.int64)
    multi = np.unravel_index(np.arange(sub.n_points), sub.shape, order="F")
    shifted = tuple(m + s for m, s in zip(multi, start, strict=True))
    kept = np.ravel_multi_index(shifted, grid.shape, order="F")
    return sub, kept.astype(np.int64)


def inside(subject: Domain | GeoData, box: Box) -> Domain | GeoData:
    """Restrict a domain or spatial data to the points inside a closed box.

    A `RegularGrid` (or data on one) yields a `RegularGrid` covering the
    lattice points inside the box. Other domains yield a view.

    Examples
    --------
    >>> sub = inside(RegularGrid((3, 3)), Box((1.0, 1.0), (1.0, 1.0)))
    >>> sub.shape, sub.origin.tolist()
    ((2, 2), [1.0, 1.0])
    """
    if box.n_dims != subject.n_dims:
        raise ValueError(
            f"Box is {box.n_dims}D but the subject is {subject.n_dims}D."
        )
    if isinstance(subject, GeoData):
        if isinstance(subject.domain, RegularGrid):
            sub, kept = _inside_grid(subject.domain, box)
            return GeoData(sub, subject.table.iloc[kept])
        return subject.view(box.contains(subject.coordinates()))
    if isinstance(subject, RegularGrid):
        sub, _ = _inside_grid(subject, box)
        return sub
    return subject.view(box.contains(subject.coordinates()))
