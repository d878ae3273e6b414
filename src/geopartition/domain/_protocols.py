"""Protocol definitions for partitioning subjects.

Partitioners only need a small surface from the objects they split: the
number of points, their coordinates and, for data-aware strategies, access to
named variables. Any object implementing these protocols can be partitioned,
including user-defined domains.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any, Protocol, runtime_checkable

import numpy as np
from numpy.typing import ArrayLike, NDArray


@runtime_checkable
class SubjectProtocol(Protocol):
    """Interface required by every partitioner."""

    @property
    def n_points(self) -> int:
        """Number of points in the subject."""
        ...

    @property
    def n_dims(self) -> int:
        """Number of spatial dimensions."""
        ...

    def coordinates(self, ind: int | None = None) -> NDArray[np.float64]:
        """Coordinates of one point, or ``(n_points, n_dims)`` for all points."""
        ...

    def bounding_box(self) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Lower and upper corners of the enclosing axis-aligned box."""
        ...

    def view(self, indices: ArrayLike) -> SubjectProtocol:
        """Restriction of the subject to ``indices``; itself a subject."""
        ...


@runtime_checkable
class DataProtocol(SubjectProtocol, Protocol):
    """Interface required by data-aware partitioners (Variable, SLIC)."""

    @property
    def variables(self) -> tuple[Hashable, ...]:
        """Names of the variables attached to the points."""
        ...

    def value(self, variable: Hashable, ind: int) -> Any | None:
        """Value of ``variable`` at point ``ind``; None when missing."""
        ...

    def __getitem__(self, variable: Hashable) -> NDArray[Any]:
        """All values of ``variable``, one per point."""
        ...
