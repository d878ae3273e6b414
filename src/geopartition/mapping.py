"""Mapping of spatial data onto a target domain.

The nearest mapper assigns every datum to the closest point of a target
domain. It is the usual first step when conditioning an estimation or
simulation on a domain other than the one the data were sampled on.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Sequence

from geopartition.domain._protocols import SubjectProtocol
from geopartition.domain.data import GeoData
from geopartition.errors import UnknownVariableError
from geopartition.spatial import get_neighbor_search

logger = logging.getLogger(__name__)


def nearest_mapping(
    data: GeoData,
    domain: SubjectProtocol,
    variables: Sequence[Hashable] | None = None,
) -> dict[Hashable, dict[int, int]]:
    """Map each datum to its nearest point in ``domain``.

    Parameters
    ----------
    data : GeoData
        Source data.
    domain : SubjectProtocol
        Target domain, of the same dimension as ``data``.
    variables : sequence of str, optional
        Variables to map. Defaults to all variables of ``data``.

    Returns
    -------
    dict
        ``{variable: {domain_index: data_index}}``. Only non-missing values
        produce an entry. When several data fall on the same domain point, the
        one with the highest data index wins.

    Raises
    ------
    UnknownVariableError
        If a requested variable is not in ``data``.
    ValueError
        If dimensions differ or the domain is empty.

    Examples
    --------
    >>> import numpy as np
    >>> from geopartition.domain import RegularGrid, georef
    >>> data = georef({"z": [1.0, 2.0]}, np.array([[0.1, 0.0], [1.9, 1.2]]))
    >>> nearest_mapping(data, RegularGrid((3, 3)))
    {'z': {0: 0, 5: 1}}
    """
    if variables is None:
        variables = list(data.variables)
    for var in variables:
        if var not in data.variables:
            raise UnknownVariableError(str(var), (str(v) for v in data.variables))
    if data.n_dims != domain.n_dims:
        raise ValueError(
            f"Data are {data.n_dims}D but the target domain is {domain.n_dims}D."
        )
    if domain.n_points == 0:
        raise ValueError("Cannot map data onto an empty domain.")

    search = get_neighbor_search(domain)
    coords = data.coordinates()
    missing = {var: data.missing(var) for var in variables}
    mappings: dict[Hashable, dict[int, int]] = {var: {} for var in variables}
    for ind in range(data.n_points):
        target = int(search.nearest(coords[ind], k=1)[0])
        for var in variables:
            if not missing[var][ind]:
                mappings[var][target] = ind

    logger.debug(
        "Mapped %d data onto %d domain points for variables %s",
        data.n_points,
        domain.n_points,
        list(variables),
    )
    return mappings
