"""Base class for partitioning strategies and the `partition` entry point."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike

from geopartition.errors import EmptyDomainError
from geopartition.partitioning.partition import IndexPartition

if TYPE_CHECKING:
    from geopartition.domain._protocols import SubjectProtocol
    from geopartition.partitioning.algebra import (
        HierarchicalPartitioner,
        ProductPartitioner,
    )

logger = logging.getLogger(__name__)

RandomLike = np.random.Generator | int | None


def ensure_rng(rng: RandomLike) -> np.random.Generator:
    """Convert an ``rng`` argument to a Generator instance.

    Parameters
    ----------
    rng : np.random.Generator | int | None
        - If Generator: used directly
        - If int: seed for ``np.random.default_rng()``
        - If None: a fresh, unseeded generator (not reproducible)
    """
    if rng is None:
        return np.random.default_rng()
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


class Partitioner(ABC):
    """A strategy that splits a subject into disjoint subsets of indices.

    Partitioners hold parameters only, never references to a domain, so one
    instance can be applied to many subjects. Concrete partitioners are frozen
    dataclasses validated at construction time.

    Partitioners compose lazily:

    - ``p1 * p2`` builds a `ProductPartitioner` (intersections of both results);
    - ``p1 >> p2`` builds a `HierarchicalPartitioner` (``p2`` applied within
      each subset of ``p1``).
    """

    #: whether the strategy must be handed at least one point
    requires_points: bool = False

    @property
    def randomized(self) -> bool:
        """Whether results depend on the random generator passed to `partition`."""
        return False

    @abstractmethod
    def _partition(
        self, subject: SubjectProtocol, rng: np.random.Generator
    ) -> Sequence[ArrayLike]:
        """Compute the index subsets of ``subject``."""

    def partition(
        self, subject: SubjectProtocol, *, rng: RandomLike = None
    ) -> IndexPartition:
        """Partition ``subject`` with this strategy.

        Parameters
        ----------
        subject : SubjectProtocol
            Domain or spatial data to partition.
        rng : np.random.Generator | int | None, default=None
            Random source for randomized strategies. Ignored by deterministic
            ones.

        Returns
        -------
        IndexPartition
            The subsets, with ``metadata["partitioner"]`` set to the class name
            of this strategy.

        Raises
        ------
        EmptyDomainError
            If the strategy requires points and ``subject`` has none.
        InvalidParameterError
            If the parameters are incompatible with ``subject``.
        """
        if self.requires_points and subject.n_points == 0:
            raise EmptyDomainError(type(self).__name__)
        result = IndexPartition(
            subject,
            self._partition(subject, ensure_rng(rng)),
            metadata={"partitioner": type(self).__name__},
        )
        logger.debug(
            "%s split %d points into %d subsets",
            type(self).__name__,
            result.universe_size,
            len(result),
        )
        return result

    def __mul__(self, other: Partitioner) -> ProductPartitioner:
        from geopartition.partitioning.algebra import ProductPartitioner

        if not isinstance(other, Partitioner):
            return NotImplemented
        return ProductPartitioner(self, other)

    def __rshift__(self, other: Partitioner) -> HierarchicalPartitioner:
        from geopartition.partitioning.algebra import HierarchicalPartitioner

        if not isinstance(other, Partitioner):
            return NotImplemented
        return HierarchicalPartitioner(self, other)


def partition(
    subject: SubjectProtocol, partitioner: Partitioner, *, rng: RandomLike = None
) -> IndexPartition:
    """Partition ``subject`` with ``partitioner``.

    Examples
    --------
    >>> from geopartition.domain import RegularGrid
    >>> from geopartition.partitioning import UniformPartitioner
    >>> p = partition(RegularGrid((3, 3)), UniformPartitioner(3, randomize=False))
    >>> [s.tolist() for s in p.subsets]
    [[0, 1, 2], [3, 4, 5], [6, 7, 8]]
    """
    if not isinstance(partitioner, Partitioner):
        raise TypeError(
            f"partitioner must be a Partitioner, got {type(partitioner).__name__}."
        )
    return partitioner.partition(subject, rng=rng)
