"""The result of a partitioning: disjoint subsets of point indices.

An `IndexPartition` stores, for a fixed subject, an ordered sequence of
disjoint subsets of ``range(subject.n_points)``. Indexing a partition returns
the subject restricted to that subset, which is itself a valid subject so
partitions can be nested.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

if TYPE_CHECKING:
    from geopartition.domain._protocols import SubjectProtocol


def labels_to_subsets(
    labels: ArrayLike, *, sort_labels: bool = False
) -> list[NDArray[np.int64]]:
    """Group point indices by label.

    Parameters
    ----------
    labels : array_like, shape (n_points,)
        Any hashable-by-value label per point (integers, floats, ...). For
        integer labels, negative values mark points left out of every subset.
    sort_labels : bool, default=False
        If True, subsets follow ascending label order. Otherwise they follow
        the order in which each label first appears.

    Returns
    -------
    list of NDArray[np.int64]
        One ascending index array per distinct label.

    Examples
    --------
    >>> [s.tolist() for s in labels_to_subsets([2, 0, 2, -1, 0])]
    [[0, 2], [1, 4]]
    >>> [s.tolist() for s in labels_to_subsets([2, 0, 2, 0], sort_labels=True)]
    [[1, 3], [0, 2]]
    """
    labels = np.asarray(labels)
    if labels.ndim != 1:
        raise ValueError(f"labels must be 1-D, got shape {labels.shape}.")
    if np.issubdtype(labels.dtype, np.integer):
        kept = np.flatnonzero(labels >= 0)
    else:
        kept = np.arange(labels.size)
    if kept.size == 0:
        return []

    uniq, first, inverse = np.unique(
        labels[kept], return_index=True, return_inverse=True
    )
    inverse = inverse.reshape(-1)
    if sort_labels:
        group = inverse
    else:
        rank = np.empty(len(uniq), dtype=np.int64)
        rank[np.argsort(first, kind="stable")] = np.arange(len(uniq))
        group = rank[inverse]
    order = np.argsort(group, kind="stable")
    counts = np.bincount(group, minlength=len(uniq))
    return [
        s.astype(np.int64) for s in np.split(kept[order], np.cumsum(counts)[:-1])
    ]


def _freeze(subset: ArrayLike) -> NDArray[np.int64]:
    arr = np.atleast_1d(np.asarray(subset))
    if arr.size == 0:
        arr = np.empty(0, dtype=np.int64)
    elif arr.ndim != 1 or not np.issubdtype(arr.dtype, np.integer):
        raise ValueError(
            f"Each subset must be a 1-D array of integers, got dtype {arr.dtype} "
            f"and shape {arr.shape}."
        )
    arr = np.sort(arr.astype(np.int64))
    arr.flags.writeable = False
    return arr


class IndexPartition(Sequence):
    """Ordered sequence of disjoint index subsets over a subject.

    Parameters
    ----------
    subject : SubjectProtocol
        Domain or data that was partitioned.
    subsets : sequence of array_like of int
        Index subsets. Each is stored sorted and read-only.
    metadata : dict, optional
        Information about how the partition was produced. Partitions returned
        by `Partitioner.partition` record the strategy class name under
        ``"partitioner"``.

    Raises
    ------
    ValueError
        If an index is out of range or appears in more than one subset.

    Examples
    --------
    >>> from geopartition.domain import RegularGrid
    >>> grid = RegularGrid((2, 2))
    >>> p = IndexPartition(grid, [[0, 1], [2, 3]])
    >>> len(p), p.sizes.tolist(), p.is_total
    (2, [2, 2], True)
    >>> p[1].coordinates().tolist()
    [[0.0, 1.0], [1.0, 1.0]]
    """

    def __init__(
        self,
        subject: SubjectProtocol,
        subsets: Sequence[ArrayLike],
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self.subject = subject
        self.universe_size = int(subject.n_points)
        self._subsets = tuple(_freeze(s) for s in subsets)
        self.metadata = dict(metadata or {})
        self._validate()

    def _validate(self) -> None:
        if not self._subsets:
            return
        flat = np.concatenate(self._subsets)
        if flat.size == 0:
            return
        if flat.min() < 0 or flat.max() >= self.universe_size:
            raise ValueError(
                f"Subset indices must lie in [0, {self.universe_size}), got "
                f"min={flat.min()}, max={flat.max()}."
            )
        counts = np.bincount(flat, minlength=self.universe_size)
        if np.any(counts > 1):
            dup = np.flatnonzero(counts > 1)
            raise ValueError(
                f"Subsets must be disjoint; indices {dup[:10].tolist()} appear "
                "in more than one subset."
            )

    @property
    def subsets(self) -> tuple[NDArray[np.int64], ...]:
        """The index subsets, in partition order."""
        return self._subsets

    @property
    def sizes(self) -> NDArray[np.int64]:
        """Number of indices in each subset."""
        return np.array([s.size for s in self._subsets], dtype=np.int64)

    def labels(self) -> NDArray[np.int64]:
        """Subset number of every index, ``-1`` for uncovered indices."""
        labels = np.full(self.universe_size, -1, dtype=np.int64)
        for k, subset in enumerate(self._subsets):
            labels[subset] = k
        return labels

    @property
    def is_total(self) -> bool:
        """Whether the subsets cover every index of the subject."""
        return int(self.sizes.sum()) == self.universe_size

    def __len__(self) -> int:
        return len(self._subsets)

    def __getitem__(self, k: int) -> SubjectProtocol:  # type: ignore[override]
        """Subject restricted to subset ``k``."""
        if not isinstance(k, (int, np.integer)):
            raise TypeError(f"Partition indices must be integers, got {type(k).__name__}.")
        return self.subject.view(self._subsets[k])

    def __iter__(self) -> Iterator[SubjectProtocol]:
        for subset in self._subsets:
            yield self.subject.view(subset)

    def as_sets(self) -> set[frozenset[int]]:
        """Subsets as a set of frozensets, for order-independent comparison."""
        return {frozenset(s.tolist()) for s in self._subsets}

    def __repr__(self) -> str:
        return (
            f"IndexPartition(n_subsets={len(self)}, "
            f"universe_size={self.universe_size})"
        )


def subsets(partition: IndexPartition) -> tuple[NDArray[np.int64], ...]:
    """Index subsets of ``partition``, in partition order."""
    return partition.subsets
