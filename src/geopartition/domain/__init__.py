"""Spatial domains and georeferenced data consumed by the partitioners.

>>> from geopartition.domain import RegularGrid, PointSet, georef
"""

from geopartition.domain._protocols import DataProtocol, SubjectProtocol
from geopartition.domain.core import Domain, DomainView, PointSet, RegularGrid
from geopartition.domain.data import GeoData, georef
from geopartition.domain.ops import disjoint_union, inside

__all__ = [
    "DataProtocol",
    "Domain",
    "DomainView",
    "GeoData",
    "PointSet",
    "RegularGrid",
    "SubjectProtocol",
    "disjoint_union",
    "georef",
    "inside",
]
