"""Partitioning of spatial data by the value of a variable."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd

from geopartition.errors import InvalidParameterError, UnknownVariableError
from geopartition.partitioning.base import Partitioner
from geopartition.partitioning.partition import labels_to_subsets

if TYPE_CHECKING:
    from geopartition.domain._protocols import DataProtocol


@dataclass(frozen=True)
class VariablePartitioner(Partitioner):
    """Group points sharing the exact value of ``variable``.

    Subsets for present values follow the order in which each value first
    appears. All points where the value is missing form one extra subset,
    placed last, so no point is ever dropped.

    Parameters
    ----------
    variable : str
        Name of the variable to group by.

    Raises
    ------
    UnknownVariableError
        If the data have no such variable.
    InvalidParameterError
        If the subject carries no variables at all.

    Examples
    --------
    >>> from geopartition.domain import RegularGrid, georef
    >>> data = georef({"z": [1.0, None, 2.0, 1.0]}, RegularGrid((4,)))
    >>> [s.tolist() for s in VariablePartitioner("z").partition(data).subsets]
    [[0, 3], [2], [1]]
    """

    variable: Hashable

    def _partition(self, subject: DataProtocol, rng: np.random.Generator):
        if not hasattr(subject, "variables"):
            raise InvalidParameterError(
                f"VariablePartitioner({self.variable!r}) needs spatial data, got "
                f"{type(subject).__name__} without variables."
            )
        if self.variable not in subject.variables:
            raise UnknownVariableError(
                str(self.variable), (str(v) for v in subject.variables)
            )
        codes, _ = pd.factorize(pd.Series(subject[self.variable]), use_na_sentinel=True)
        subsets = labels_to_subsets(codes)
        missing = np.flatnonzero(codes < 0)
        if missing.size:
            subsets.append(missing)
        return subsets
