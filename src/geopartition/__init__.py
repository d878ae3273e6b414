"""Spatial partitioning of geostatistical domains and data.

**geopartition** splits a spatial domain, or data georeferenced on one, into
disjoint subsets of point indices. Strategies range from simple index splits
to geometric cuts, block tilings, radius and superpixel clustering, value
grouping and predicate closures, and compose with ``*`` (product) and
``>>`` (hierarchical refinement).

Core Exports (Top-Level)
------------------------
partition : Apply a partitioner to a domain or data set
IndexPartition : Result of a partitioning
RegularGrid, PointSet, GeoData, georef : Partitioning subjects
*Partitioner : All strategies

Submodule Organization
----------------------
domain : Domains, spatial data, disjoint union, box restriction
partitioning : Strategies, result type and composition operators
geometry : Projection, side test, distances, boxes
spatial : KD-tree neighbour search
mapping : Nearest mapping of data onto a domain
errors : Exception hierarchy with error codes

Examples
--------
>>> from geopartition import RegularGrid, BlockPartitioner, partition
>>> p = partition(RegularGrid((10, 10)), BlockPartitioner((5.0, 5.0)))
>>> p.sizes.tolist()
[25, 25, 25, 25]
"""

from geopartition.domain import GeoData, PointSet, RegularGrid, georef
from geopartition.errors import (
    EmptyDomainError,
    InvalidParameterError,
    PartitioningError,
    UnknownVariableError,
)
from geopartition.partitioning import (
    BallPartitioner,
    BisectFractionPartitioner,
    BisectPointPartitioner,
    BlockPartitioner,
    DirectionPartitioner,
    FractionPartitioner,
    HierarchicalPartitioner,
    IndexPartition,
    Partitioner,
    PlanePartitioner,
    PredicatePartitioner,
    ProductPartitioner,
    SLICPartitioner,
    SpatialPredicatePartitioner,
    UniformPartitioner,
    VariablePartitioner,
    partition,
    subsets,
)

__version__ = "0.1.0"

__all__ = [
    "BallPartitioner",
    "BisectFractionPartitioner",
    "BisectPointPartitioner",
    "BlockPartitioner",
    "DirectionPartitioner",
    "EmptyDomainError",
    "FractionPartitioner",
    "GeoData",
    "HierarchicalPartitioner",
    "IndexPartition",
    "InvalidParameterError",
    "Partitioner",
    "PartitioningError",
    "PlanePartitioner",
    "PointSet",
    "PredicatePartitioner",
    "ProductPartitioner",
    "RegularGrid",
    "SLICPartitioner",
    "SpatialPredicatePartitioner",
    "UniformPartitioner",
    "UnknownVariableError",
    "VariablePartitioner",
    "georef",
    "partition",
    "subsets",
]
