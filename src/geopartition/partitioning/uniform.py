"""Index-based partitioners that ignore geometry: Uniform and Fraction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from geopartition.errors import InvalidParameterError
from geopartition.partitioning.base import Partitioner
from geopartition.validation import validate_fraction, validate_positive_int

if TYPE_CHECKING:
    from geopartition.domain._protocols import SubjectProtocol


def _ordering(n_points: int, randomize: bool, rng: np.random.Generator) -> NDArray[np.int64]:
    if randomize:
        return rng.permutation(n_points).astype(np.int64)
    return np.arange(n_points, dtype=np.int64)


@dataclass(frozen=True)
class UniformPartitioner(Partitioner):
    """Split the points into ``k`` groups of (almost) equal size.

    The first ``n % k`` groups hold ``ceil(n / k)`` points, the others
    ``floor(n / k)``.

    Parameters
    ----------
    k : int
        Number of groups, ``1 <= k <= n_points``.
    randomize : bool, default=True
        Shuffle the indices with the caller's random generator before slicing.
        Otherwise groups are contiguous index ranges.

    Raises
    ------
    InvalidParameterError
        If ``k <= 0`` (at construction) or ``k`` exceeds the number of points.
    EmptyDomainError
        If the subject has no points.

    Examples
    --------
    >>> from geopartition.domain import RegularGrid
    >>> p = UniformPartitioner(2, randomize=False).partition(RegularGrid((5,)))
    >>> [s.tolist() for s in p.subsets]
    [[0, 1, 2], [3, 4]]
    """

    k: int
    randomize: bool = True

    requires_points = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "k", validate_positive_int(self.k, "k"))

    @property
    def randomized(self) -> bool:
        return self.randomize

    def _partition(self, subject: SubjectProtocol, rng: np.random.Generator):
        n_points = subject.n_points
        if self.k > n_points:
            raise InvalidParameterError(
                f"Cannot split {n_points} points into k={self.k} non-empty groups."
            )
        return np.array_split(_ordering(n_points, self.randomize, rng), self.k)


@dataclass(frozen=True)
class FractionPartitioner(Partitioner):
    """Split the points into two groups holding ``fraction`` and ``1 - fraction``.

    The first group has ``round(fraction * n)`` points (ties to even).

    Parameters
    ----------
    fraction : float
        Share of the first group, in the open interval (0, 1).
    randomize : bool, default=True
        Shuffle before splitting; otherwise the first group is an index prefix.

    Raises
    ------
    InvalidParameterError
        If ``fraction`` is outside (0, 1).
    EmptyDomainError
        If the subject has no points.
    """

    fraction: float
    randomize: bool = True

    requires_points = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "fraction", validate_fraction(self.fraction))

    @property
    def randomized(self) -> bool:
        return self.randomize

    def _partition(self, subject: SubjectProtocol, rng: np.random.Generator):
        n_points = subject.n_points
        order = _ordering(n_points, self.randomize, rng)
        n_first = round(self.fraction * n_points)
        return [order[:n_first], order[n_first:]]
