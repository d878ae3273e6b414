"""Spatial data: a domain with a table of variables attached to its points."""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray

from geopartition.domain.core import Domain, PointSet, RegularGrid, _as_indices
from geopartition.errors import UnknownVariableError


class GeoData:
    """Variables georeferenced on a spatial domain.

    Row ``i`` of `table` holds the variables of point ``i`` of `domain`.

    Parameters
    ----------
    domain : Domain
        Spatial support of the data.
    table : pandas.DataFrame
        One row per point of ``domain``. The index is discarded.

    Raises
    ------
    ValueError
        If the number of rows differs from the number of points.

    Examples
    --------
    >>> import pandas as pd
    >>> data = GeoData(RegularGrid((2, 2)), pd.DataFrame({"z": [1, 2, None, 4]}))
    >>> data.value("z", 2) is None
    True
    """

    def __init__(self, domain: Domain, table: pd.DataFrame) -> None:
        if len(table) != domain.n_points:
            raise ValueError(
                f"Table has {len(table)} rows but the domain has "
                f"{domain.n_points} points. Each point needs exactly one row."
            )
        self.domain = domain
        self.table = table.reset_index(drop=True)

    # Subject interface, delegated to the domain
    @property
    def n_points(self) -> int:
        return self.domain.n_points

    @property
    def n_dims(self) -> int:
        return self.domain.n_dims

    def __len__(self) -> int:
        return self.n_points

    def coordinates(self, ind: int | None = None) -> NDArray[np.float64]:
        return self.domain.coordinates(ind)

    def bounding_box(self) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        return self.domain.bounding_box()

    def view(self, indices: ArrayLike) -> GeoData:
        """Restrict both the domain and the table to ``indices``."""
        inds = _as_indices(indices, self.n_points)
        return GeoData(self.domain.view(inds), self.table.iloc[inds])

    # Variable access
    @property
    def variables(self) -> tuple[Hashable, ...]:
        return tuple(self.table.columns)

    def _check_variable(self, variable: Hashable) -> None:
        if variable not in self.table.columns:
            raise UnknownVariableError(str(variable), (str(v) for v in self.variables))

    def __getitem__(self, variable: Hashable) -> NDArray[Any]:
        self._check_variable(variable)
        return self.table[variable].to_numpy()

    def value(self, variable: Hashable, ind: int) -> Any | None:
        """Value of ``variable`` at point ``ind``, or None if it is missing."""
        self._check_variable(variable)
        val = self.table[variable].iat[ind]
        if pd.isna(val):
            return None
        return val

    def missing(self, variable: Hashable) -> NDArray[np.bool_]:
        """Boolean mask of the points where ``variable`` is missing."""
        self._check_variable(variable)
        return self.table[variable].isna().to_numpy()

    def __repr__(self) -> str:
        names = ", ".join(str(v) for v in self.variables)
        return f"GeoData(n_points={self.n_points}, variables=[{names}], domain={self.domain!r})"


def _as_table(values: Mapping[Hashable, ArrayLike] | pd.DataFrame) -> pd.DataFrame:
    if isinstance(values, pd.DataFrame):
        return values
    return pd.DataFrame({name: np.ravel(col, order="F") for name, col in values.items()})


def georef(
    values: Mapping[Hashable, ArrayLike] | pd.DataFrame,
    domain: Domain | ArrayLike | None = None,
    *,
    origin: float | tuple[float, ...] | None = None,
    spacing: float | tuple[float, ...] | None = None,
) -> GeoData:
    """Georeference a table of values on a spatial domain.

    Parameters
    ----------
    values : mapping of name to array, or pandas.DataFrame
        Variables to attach. N-d arrays are flattened with the first axis
        varying fastest, matching `RegularGrid` ordering.
    domain : Domain or array_like, optional
        - a `Domain`: used as-is;
        - an array of shape (n_points, n_dims): wrapped in a `PointSet`;
        - None: a `RegularGrid` with the common shape of the arrays in
          ``values`` is created, using ``origin`` and ``spacing``.
    origin, spacing : float or tuple of float, optional
        Grid placement, only used when ``domain`` is None.

    Returns
    -------
    GeoData

    Raises
    ------
    ValueError
        If ``domain`` is None and the arrays do not share one shape, or if
        the table length does not match the domain.

    Examples
    --------
    >>> import numpy as np
    >>> data = georef({"z": np.arange(6).reshape(3, 2)})
    >>> data.domain.shape
    (3, 2)
    """
    if domain is None:
        if isinstance(values, pd.DataFrame):
            raise ValueError(
                "A domain is required when values are given as a DataFrame."
            )
        shapes = {np.shape(col) for col in values.values()}
        if len(shapes) != 1:
            raise ValueError(
                f"All arrays must share one shape to build a grid, got {sorted(shapes)}."
            )
        (shape,) = shapes
        domain = RegularGrid(shape, origin=origin, spacing=spacing)
    elif not isinstance(domain, Domain):
        domain = PointSet(domain)
    return GeoData(domain, _as_table(values))
