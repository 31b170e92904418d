#!/usr/bin/env python3

import math
import re
from typing import Optional, Tuple
from dataclasses import dataclass

EARTH_RADIUS_NM = 3440.065

# Q-line style coordinate, e.g. "4942N00624E" or "494210N0062405E"
_ICAO_COORDINATE = re.compile(r"^(\d{4}(?:\d{2})?)([NS])(\d{5}(?:\d{2})?)([EW])$")


@dataclass(frozen=True)
class NavPoint:
    """
    A geographic point with coordinates and optional name.

    All coordinates are stored in decimal degrees:
    - Latitude: -90 to +90 degrees (negative for South, positive for North)
    - Longitude: -180 to +180 degrees (negative for West, positive for East)

    All distance calculations use nautical miles.
    All bearing calculations use degrees (0-360, where 0/360 is North, 90 is East, etc.)
    """

    latitude: float  # Decimal degrees, -90 to +90
    longitude: float  # Decimal degrees, -180 to +180
    name: Optional[str] = None  # Optional identifier, e.g. a waypoint name

    def __post_init__(self):
        """Validate coordinates after initialization."""
        if not -90 <= self.latitude <= 90:
            raise ValueError(f"Latitude must be between -90 and 90 degrees, got {self.latitude}")
        if not -180 <= self.longitude <= 180:
            raise ValueError(f"Longitude must be between -180 and 180 degrees, got {self.longitude}")

    @classmethod
    def from_icao_coordinates(cls, text: str, name: Optional[str] = None) -> 'NavPoint':
        """
        Parse a NOTAM Q-line coordinate.

        Args:
            text: Coordinate in DDMM[SS]N/S DDDMM[SS]E/W form, e.g. "4942N00624E"
            name: Optional name for the point

        Returns:
            NavPoint at the decoded position

        Raises:
            ValueError: If the text is not a coordinate of that form
        """
        match = _ICAO_COORDINATE.match(text.strip().upper())
        if not match:
            raise ValueError(f"Not an ICAO coordinate: {text!r}")
        lat_digits, lat_hemi, lon_digits, lon_hemi = match.groups()

        def to_degrees(digits: str, degree_width: int) -> float:
            degrees = int(digits[:degree_width])
            minutes = int(digits[degree_width:degree_width + 2])
            seconds = int(digits[degree_width + 2:] or 0)
            if minutes >= 60 or seconds >= 60:
                raise ValueError(f"Minutes/seconds out of range in {text!r}")
            return degrees + minutes / 60.0 + seconds / 3600.0

        latitude = to_degrees(lat_digits, 2)
        longitude = to_degrees(lon_digits, 3)
        if lat_hemi == 'S':
            latitude = -latitude
        if lon_hemi == 'W':
            longitude = -longitude
        return cls(latitude=latitude, longitude=longitude, name=name)

    def haversine_distance(self, other: 'NavPoint') -> Tuple[float, float]:
        """
        Calculate the bearing and distance to another NavPoint using the Haversine formula.

        Args:
            other: The target NavPoint

        Returns:
            Tuple of (bearing in degrees, distance in nautical miles)
        """
        lat1 = math.radians(self.latitude)
        lon1 = math.radians(self.longitude)
        lat2 = math.radians(other.latitude)
        lon2 = math.radians(other.longitude)

        dlat = lat2 - lat1
        dlon = lon2 - lon1

        a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
        distance = EARTH_RADIUS_NM * c

        y = math.sin(dlon) * math.cos(lat2)
        x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)
        bearing = math.degrees(math.atan2(y, x))
        bearing = (bearing + 360) % 360  # Normalize to [0, 360)

        return bearing, distance

    def distance_to(self, other: 'NavPoint') -> float:
        """Great circle distance to another point in nautical miles."""
        _, distance = self.haversine_distance(other)
        return distance

    def point_from_bearing_distance(self, bearing: float, distance: float, name: Optional[str] = None) -> 'NavPoint':
        """
        Create a new NavPoint from this point's position, bearing, and distance.

        Args:
            bearing: Bearing in degrees
            distance: Distance in nautical miles
            name: Optional name for the new point
        """
        lat1 = math.radians(self.latitude)
        lon1 = math.radians(self.longitude)
        bearing_rad = math.radians(bearing)
        angular = distance / EARTH_RADIUS_NM

        lat2 = math.asin(
            math.sin(lat1) * math.cos(angular) +
            math.cos(lat1) * math.sin(angular) * math.cos(bearing_rad)
        )
        lon2 = lon1 + math.atan2(
            math.sin(bearing_rad) * math.sin(angular) * math.cos(lat1),
            math.cos(angular) - math.sin(lat1) * math.sin(lat2)
        )
        # Wrap to [-180, 180)
        longitude = (math.degrees(lon2) + 540) % 360 - 180

        return NavPoint(latitude=math.degrees(lat2), longitude=longitude, name=name)

    def __str__(self) -> str:
        name_str = f"{self.name} " if self.name else ""
        return f"{name_str}({self.latitude}, {self.longitude})"

    def __repr__(self) -> str:
        return f"NavPoint(name={self.name!r}, latitude={self.latitude}, longitude={self.longitude})"
