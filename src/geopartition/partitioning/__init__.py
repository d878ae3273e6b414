"""Partitioning strategies and their algebra.

>>> from geopartition.partitioning import partition, BlockPartitioner
>>> from geopartition.partitioning import UniformPartitioner, FractionPartitioner

Strategies
----------
UniformPartitioner, FractionPartitioner : index-based splits
DirectionPartitioner, PlanePartitioner : lines and layers
BisectPointPartitioner, BisectFractionPartitioner : hyperplane cuts
BlockPartitioner, BallPartitioner, SLICPartitioner : spatial clustering
VariablePartitioner : grouping by data values
PredicatePartitioner, SpatialPredicatePartitioner : transitive closures
ProductPartitioner (``*``), HierarchicalPartitioner (``>>``) : composition
"""

from geopartition.partitioning.algebra import (
    HierarchicalPartitioner,
    ProductPartitioner,
    hierarchical,
    product,
)
from geopartition.partitioning.base import Partitioner, ensure_rng, partition
from geopartition.partitioning.geometric import (
    DEFAULT_TOLERANCE,
    BallPartitioner,
    BisectFractionPartitioner,
    BisectPointPartitioner,
    BlockPartitioner,
    DirectionPartitioner,
    PlanePartitioner,
)
from geopartition.partitioning.partition import (
    IndexPartition,
    labels_to_subsets,
    subsets,
)
from geopartition.partitioning.predicate import (
    PredicatePartitioner,
    SpatialPredicatePartitioner,
    connected_components,
)
from geopartition.partitioning.slic import (
    DEFAULT_SLIC_MAX_ITER,
    DEFAULT_SLIC_TOLERANCE,
    SLICPartitioner,
)
from geopartition.partitioning.uniform import FractionPartitioner, UniformPartitioner
from geopartition.partitioning.variable import VariablePartitioner

__all__ = [
    "DEFAULT_SLIC_MAX_ITER",
    "DEFAULT_SLIC_TOLERANCE",
    "DEFAULT_TOLERANCE",
    "BallPartitioner",
    "BisectFractionPartitioner",
    "BisectPointPartitioner",
    "BlockPartitioner",
    "DirectionPartitioner",
    "FractionPartitioner",
    "HierarchicalPartitioner",
    "IndexPartition",
    "Partitioner",
    "PlanePartitioner",
    "PredicatePartitioner",
    "ProductPartitioner",
    "SLICPartitioner",
    "SpatialPredicatePartitioner",
    "UniformPartitioner",
    "VariablePartitioner",
    "connected_components",
    "ensure_rng",
    "hierarchical",
    "labels_to_subsets",
    "partition",
    "product",
    "subsets",
]
