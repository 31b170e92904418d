"""Geographic regions used by NOTAMs and NOTAM queries."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from shapely import wkb
from shapely.errors import ShapelyError
from shapely.geometry import Point, shape
from shapely.geometry.base import BaseGeometry

from vfr_notams.models.navpoint import NavPoint

POLYGONAL_TYPES = ('Polygon', 'MultiPolygon')


@dataclass(frozen=True)
class GeoCircle:
    """
    Circle on the earth's surface.

    Attributes:
        center: Center of the circle
        radius_nm: Radius in nautical miles. A negative radius marks an
            invalid circle.
    """

    center: Optional[NavPoint]
    radius_nm: float = -1.0

    def is_valid(self) -> bool:
        return self.center is not None and self.radius_nm >= 0

    def contains(self, point: NavPoint) -> bool:
        """True if point lies inside the circle or on its boundary."""
        if not self.is_valid():
            return False
        return self.center.distance_to(point) <= self.radius_nm

    def contains_circle(self, other: 'GeoCircle') -> bool:
        """True if the other circle lies entirely inside this one."""
        if not (self.is_valid() and other.is_valid()):
            return False
        return self.center.distance_to(other.center) + other.radius_nm <= self.radius_nm

    def to_dict(self) -> dict:
        return {
            'type': 'circle',
            'center': [self.center.latitude, self.center.longitude] if self.center else None,
            'radius_nm': self.radius_nm,
        }


class GeoArea:
    """
    Polygonal area, backed by a shapely geometry in (longitude, latitude) order.

    Equality compares the WKB encoding, so an area survives a binary
    round trip unchanged.
    """

    def __init__(self, geometry: BaseGeometry):
        self.geometry = geometry

    @classmethod
    def from_geojson(cls, geometry: Optional[Dict[str, Any]]) -> Optional['GeoArea']:
        """
        Build an area from the polygonal parts of a GeoJSON geometry.

        GeometryCollections are searched for their first polygonal member.
        Returns None for point/line geometries or anything shapely rejects.
        """
        if not isinstance(geometry, dict):
            return None
        if geometry.get('type') == 'GeometryCollection':
            for member in geometry.get('geometries') or []:
                area = cls.from_geojson(member)
                if area is not None:
                    return area
            return None
        if geometry.get('type') not in POLYGONAL_TYPES:
            return None
        try:
            return cls(shape(geometry))
        except (ShapelyError, ValueError, TypeError, AttributeError, KeyError, IndexError):
            return None

    @classmethod
    def from_wkb(cls, data: bytes) -> 'GeoArea':
        return cls(wkb.loads(data))

    def to_wkb(self) -> bytes:
        return wkb.dumps(self.geometry)

    def is_valid(self) -> bool:
        return not self.geometry.is_empty and self.geometry.is_valid

    def contains(self, point: NavPoint) -> bool:
        return self.geometry.covers(Point(point.longitude, point.latitude))

    def to_dict(self) -> dict:
        return {'type': 'area', 'wkt': self.geometry.wkt}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GeoArea):
            return NotImplemented
        return self.to_wkb() == other.to_wkb()

    def __hash__(self) -> int:
        return hash(self.to_wkb())

    def __repr__(self) -> str:
        return f"GeoArea({self.geometry.geom_type}, bounds={self.geometry.bounds})"


NotamRegion = Union[GeoCircle, GeoArea]
